import shlex
import sys

import pytest

from forkdemo.core.adapters.tigercli import TigerCliAdapter
from forkdemo.core.config import ForkDemoConfig
from forkdemo.core.connections import get_connection_string
from forkdemo.core.process import CommandError, CommandOutcome, SubprocessRunner


def test_run_captures_stdout_and_stderr():
    outcome = SubprocessRunner().run(
        [sys.executable, "-c", "import sys; print('out'); print('err', file=sys.stderr)"]
    )

    assert outcome.ok is True
    assert outcome.stdout.strip() == "out"
    assert outcome.stderr.strip() == "err"


def test_run_reports_non_zero_exit_without_raising():
    outcome = SubprocessRunner().run(
        [sys.executable, "-c", "import sys; print('nope', file=sys.stderr); sys.exit(3)"]
    )

    assert outcome.ok is False
    assert outcome.returncode == 3
    assert outcome.detail == "nope"


def test_run_reports_missing_executable():
    outcome = SubprocessRunner().run(["forkdemo-no-such-binary-xyz", "service"])

    assert outcome.ok is False
    assert outcome.returncode == 127
    assert outcome.stderr


def test_check_raises_with_captured_detail():
    with pytest.raises(CommandError, match="boom") as excinfo:
        SubprocessRunner().check(
            [sys.executable, "-c", "import sys; print('boom', file=sys.stderr); sys.exit(1)"]
        )

    assert excinfo.value.outcome.returncode == 1


def test_detail_falls_back_to_stdout_then_status():
    assert CommandOutcome(argv=("x",), returncode=2, stdout="from stdout").detail == "from stdout"
    assert CommandOutcome(argv=("x",), returncode=2).detail == "exit status 2"


def test_run_replaces_undecodable_output():
    outcome = SubprocessRunner().run(
        [
            sys.executable,
            "-c",
            "import sys; sys.stdout.buffer.write(b'\\xff\\xfe bad'); sys.exit(1)",
        ]
    )

    assert outcome.ok is False
    assert outcome.stdout.endswith(" bad")
    assert "\ufffd" in outcome.stdout


def test_connection_lookup_falls_back_on_undecodable_output():
    config = ForkDemoConfig(
        cli_command=shlex.join(
            [sys.executable, "-c", "import sys; sys.stdout.buffer.write(b'\\xff\\xfe'); sys.exit(1)"]
        )
    )

    assert (
        get_connection_string(TigerCliAdapter(config), config, "svc1")
        == "postgresql://postgres@localhost:5432/svc1"
    )
