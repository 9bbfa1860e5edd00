"""Exception hierarchy shared by the fork demo core."""


class ForkDemoError(RuntimeError):
    """Base class for errors raised by the fork demo."""


class ConfigurationError(ForkDemoError):
    """Raised when required configuration cannot be resolved."""
