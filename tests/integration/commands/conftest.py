import io
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import tomli_w
from rich.console import Console

from netsup.cli import create_app


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), no_color=True, width=200)


@pytest.fixture(autouse=True)
def _workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every command from an empty directory with no system config."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(
        "netsup.config._discovery.SYSTEM_CONFIG_PATH", tmp_path / "etc" / "netsup.toml"
    )
    return tmp_path


@pytest.fixture
def netsup_cli(console: Console) -> Callable[..., int]:
    """Run the CLI, global options included, and return the exit code."""

    app = create_app(console=console, error_console=console)

    def _run(*args: str) -> int:
        try:
            app.meta(list(args))
        except SystemExit as e:
            return e.code if isinstance(e.code, int) else 1
        else:
            return 0

    return _run


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[..., Path]:
    """Write a netsup.toml holding the given services to the working directory."""

    def _write(*services: dict[str, Any], name: str = "netsup.toml") -> Path:  # pyright: ignore[reportExplicitAny]
        path = tmp_path / name
        _ = path.write_text(tomli_w.dumps({"services": list(services)}))
        return path

    return _write


@pytest.fixture
def python_service() -> Callable[..., dict[str, Any]]:  # pyright: ignore[reportExplicitAny]
    """Build a service table whose command runs a Python snippet."""

    def _service(name: str, code: str, **fields: Any) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
        return {
            "name": name,
            "command": [sys.executable, "-c", code],
            "startup_timeout": 5.0,
            "probe_interval": 0.05,
            "shutdown_timeout": 2.0,
            **fields,
        }

    return _service
