import io
import json
from pathlib import Path

import pytest
from rich.console import Console

from netsup.cli import CLIContext
from netsup.cli._commands import ExitCode, exit_with_error, format_json


class TestFormatJson:
    def test_indented(self) -> None:
        output = format_json({"services": ["frr", "snmpd"]})

        assert output == '{\n  "services": [\n    "frr",\n    "snmpd"\n  ]\n}'

    def test_non_ascii_is_kept(self) -> None:
        output = format_json({"sysName": "réseau"})

        assert json.loads(output) == {"sysName": "réseau"}


class TestExitWithError:
    def test_prints_and_exits(self) -> None:
        buffer = io.StringIO()
        console = Console(file=buffer, no_color=True)

        with pytest.raises(SystemExit) as exc_info:
            exit_with_error("no config", ExitCode.CONFIG_ERROR, console=console)

        assert exc_info.value.code == 1
        assert "Error: no config" in buffer.getvalue()


class TestCLIContext:
    def test_set_and_reset(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(
            "netsup.config._discovery.SYSTEM_CONFIG_PATH", tmp_path / "none.toml"
        )
        ctx = CLIContext(quiet=True, config_error="unreadable")

        CLIContext.set_current(ctx)

        assert CLIContext.get_current() is ctx

        CLIContext.reset()

        assert CLIContext.get_current() is not ctx

    def test_get_current_loads_config_when_unset(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(
            "netsup.config._discovery.SYSTEM_CONFIG_PATH", tmp_path / "none.toml"
        )

        ctx = CLIContext.get_current()

        assert ctx.config is not None
        assert ctx.config_error is None
        assert not ctx.quiet
