"""Test configuration for the command-line tools."""
import pytest


@pytest.fixture
def run_cli(capsys):
    """Run a command main and return (exit code, stdout, stderr)."""
    def _run(main, *argv):
        code = main(list(argv))
        captured = capsys.readouterr()
        return code, captured.out, captured.err
    return _run
