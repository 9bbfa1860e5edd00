"""Application context management for the CLI."""

from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from forkdemo.cli.common.logs import configure_logging
from forkdemo.core.adapters.tigercli import TigerCliAdapter
from forkdemo.core.config import ForkDemoConfig


@dataclass
class AppContext:
    """Application context holding the resolved configuration."""

    config: ForkDemoConfig

    def adapter(self, config: ForkDemoConfig | None = None) -> TigerCliAdapter:
        """Return a CLI adapter for ``config`` (defaults to the context's)."""
        return TigerCliAdapter(config or self.config)


def build_context(env_file: Path | None, *, verbose: bool = False) -> AppContext:
    """Load ``.env``, configure logging and read the configuration once.

    Args:
        env_file: Explicit dotenv file; ``./.env`` is used when None.
        verbose: Enable debug logging.

    Returns:
        AppContext: Context shared by every command of this invocation.
    """
    # Variables already present in the environment take precedence.
    load_dotenv(env_file or find_dotenv(usecwd=True), override=False)
    configure_logging(verbose=verbose)
    return AppContext(config=ForkDemoConfig.from_env())
