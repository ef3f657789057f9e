import sys
from dataclasses import dataclass
from pathlib import Path

import pytest

_SERVE = """
import pathlib, sys, time
time.sleep(float(sys.argv[2]))
pathlib.Path(sys.argv[1]).write_text("up")
print("listening", flush=True)
time.sleep(60)
"""

_JOURNAL = """
import sys
with open(sys.argv[1], "a") as journal:
    journal.write(sys.argv[2] + "\\n")
raise SystemExit(int(sys.argv[3]))
"""

_IGNORE_TERM = """
import pathlib, signal, sys, time
signal.signal(signal.SIGTERM, signal.SIG_IGN)
pathlib.Path(sys.argv[1]).write_text("up")
time.sleep(60)
"""

_DAEMONIZE = """
import subprocess, sys
child = '''
import os, pathlib, sys, time
time.sleep(0.1)
pathlib.Path(sys.argv[1]).write_text(str(os.getpid()))
time.sleep(60)
'''
subprocess.Popen(
    [sys.executable, "-c", child, sys.argv[1]],
    stdin=subprocess.DEVNULL,
    stdout=subprocess.DEVNULL,
    stderr=subprocess.DEVNULL,
    start_new_session=True,
)
raise SystemExit(int(sys.argv[2]))
"""

_KILL_PIDFILE = """
import os, signal, sys
os.kill(int(open(sys.argv[1]).read()), signal.SIGTERM)
"""


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.integration)


@dataclass(frozen=True, slots=True)
class Commands:
    """Builds Python child-process commands standing in for real daemons."""

    workdir: Path

    def _python(self, code: str, *args: object) -> tuple[str, ...]:
        return (sys.executable, "-c", code, *(str(arg) for arg in args))

    def marker(self, name: str) -> Path:
        return self.workdir / f"{name}.ready"

    def serve(self, name: str, delay: float = 0.0) -> tuple[str, ...]:
        """Foreground service writing its marker file once 'up'."""
        return self._python(_SERVE, self.marker(name), delay)

    def exit_with(self, code: int, output: str = "") -> tuple[str, ...]:
        return self._python(
            f"import sys; print({output!r}, flush=True); raise SystemExit({code})"
        )

    def sleep(self, seconds: float) -> tuple[str, ...]:
        return self._python(f"import time; time.sleep({seconds})")

    @property
    def journal_path(self) -> Path:
        return self.workdir / "journal.txt"

    def journal(self, entry: str, exit_code: int = 0) -> tuple[str, ...]:
        """Command appending an entry to the shared journal file."""
        return self._python(_JOURNAL, self.journal_path, entry, exit_code)

    def journal_entries(self) -> list[str]:
        if not self.journal_path.exists():
            return []
        return self.journal_path.read_text().splitlines()

    def ignore_term(self, name: str) -> tuple[str, ...]:
        return self._python(_IGNORE_TERM, self.marker(name))

    def daemonize(self, name: str, exit_code: int = 0) -> tuple[str, ...]:
        """Start command that forks a detached child and exits."""
        return self._python(_DAEMONIZE, self.marker(name), exit_code)

    def kill_pidfile(self, name: str) -> tuple[str, ...]:
        return self._python(_KILL_PIDFILE, self.marker(name))


@pytest.fixture
def commands(tmp_path: Path) -> Commands:
    return Commands(tmp_path)
