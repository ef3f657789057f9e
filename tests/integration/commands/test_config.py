"""Integration tests for the config commands."""

import json
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from netsup.config import validate_config


class TestConfigInit:
    def test_writes_default_profile(
        self,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
        netsup_cli: Callable[..., int],
    ) -> None:
        exit_code = netsup_cli("config", "init")

        target = tmp_path / "netsup.toml"
        assert exit_code == 0
        assert f"Wrote {target}" in capsys.readouterr().out
        data = tomllib.loads(target.read_text())
        assert [service["name"] for service in data["services"]] == ["frr", "snmpd"]
        assert validate_config(data) == []

    def test_refuses_to_overwrite(
        self,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
        netsup_cli: Callable[..., int],
    ) -> None:
        target = tmp_path / "netsup.toml"
        _ = target.write_text("# mine\n")

        exit_code = netsup_cli("config", "init")

        assert exit_code == 3
        assert "already exists" in capsys.readouterr().out
        assert target.read_text() == "# mine\n"

    def test_force_overwrites(
        self, tmp_path: Path, netsup_cli: Callable[..., int]
    ) -> None:
        target = tmp_path / "netsup.toml"
        _ = target.write_text("# mine\n")

        exit_code = netsup_cli("config", "init", "--force")

        assert exit_code == 0
        assert "[[services]]" in target.read_text()

    def test_custom_output_path(
        self, tmp_path: Path, netsup_cli: Callable[..., int]
    ) -> None:
        target = tmp_path / "etc" / "netsup" / "netsup.toml"

        exit_code = netsup_cli("config", "init", "--output", str(target))

        assert exit_code == 0
        assert target.is_file()


class TestConfigValidate:
    def test_valid_file(
        self,
        capsys: pytest.CaptureFixture[str],
        netsup_cli: Callable[..., int],
        write_config: Callable[..., Path],
        python_service: Callable[..., dict[str, Any]],
    ) -> None:
        path = write_config(python_service("frr", "pass"))

        exit_code = netsup_cli("config", "validate", str(path))

        assert exit_code == 0
        assert f"{path}: OK" in capsys.readouterr().out

    def test_discovers_file_in_working_directory(
        self,
        capsys: pytest.CaptureFixture[str],
        netsup_cli: Callable[..., int],
        write_config: Callable[..., Path],
        python_service: Callable[..., dict[str, Any]],
    ) -> None:
        _ = write_config(python_service("frr", "pass"))

        exit_code = netsup_cli("config", "validate")

        assert exit_code == 0
        assert "netsup.toml: OK" in capsys.readouterr().out

    def test_reports_every_issue(
        self,
        capsys: pytest.CaptureFixture[str],
        netsup_cli: Callable[..., int],
        write_config: Callable[..., Path],
        python_service: Callable[..., dict[str, Any]],
    ) -> None:
        path = write_config(
            python_service("frr", "pass", startup_timeout=-1.0),
            python_service("snmpd", "pass", stop_signal="SIGNOPE"),
        )

        exit_code = netsup_cli("config", "validate", str(path))

        output = capsys.readouterr().out
        assert exit_code == 2
        assert "2 error(s)" in output
        assert "services.0.startup_timeout" in output
        assert "services.1.stop_signal" in output

    def test_rejects_dependency_started_later(
        self,
        capsys: pytest.CaptureFixture[str],
        netsup_cli: Callable[..., int],
        write_config: Callable[..., Path],
        python_service: Callable[..., dict[str, Any]],
    ) -> None:
        path = write_config(
            python_service("snmpd", "pass", requires=["frr"]),
            python_service("frr", "pass"),
        )

        exit_code = netsup_cli("config", "validate", str(path))

        assert exit_code == 2
        assert "frr" in capsys.readouterr().out

    def test_unparseable_file(
        self,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
        netsup_cli: Callable[..., int],
    ) -> None:
        path = tmp_path / "broken.toml"
        _ = path.write_text("[[services]\nname = ")

        exit_code = netsup_cli("config", "validate", str(path))

        assert exit_code == 1
        assert "Error:" in capsys.readouterr().out

    def test_missing_file(
        self,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
        netsup_cli: Callable[..., int],
    ) -> None:
        exit_code = netsup_cli("config", "validate", str(tmp_path / "nope.toml"))

        assert exit_code == 1
        assert "Config file not found" in capsys.readouterr().out

    def test_no_file_discovered(
        self, capsys: pytest.CaptureFixture[str], netsup_cli: Callable[..., int]
    ) -> None:
        exit_code = netsup_cli("config", "validate")

        assert exit_code == 1
        assert "No config file found" in capsys.readouterr().out


class TestConfigShow:
    def test_toml_shows_defaults_without_file(
        self, capsys: pytest.CaptureFixture[str], netsup_cli: Callable[..., int]
    ) -> None:
        exit_code = netsup_cli("config", "show")

        data = tomllib.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert data["supervisor"]["control_port"] == 0
        assert [service["name"] for service in data["services"]] == ["frr", "snmpd"]

    def test_json_shows_file_services(
        self,
        capsys: pytest.CaptureFixture[str],
        netsup_cli: Callable[..., int],
        write_config: Callable[..., Path],
        python_service: Callable[..., dict[str, Any]],
    ) -> None:
        _ = write_config(python_service("api", "pass"))

        exit_code = netsup_cli("config", "show", "--format", "json")

        data = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert [service["name"] for service in data["services"]] == ["api"]

    def test_explicit_config_path(
        self,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
        netsup_cli: Callable[..., int],
        write_config: Callable[..., Path],
        python_service: Callable[..., dict[str, Any]],
    ) -> None:
        path = write_config(python_service("lldpd", "pass"), name="other.toml")

        exit_code = netsup_cli("--config", str(path), "config", "show", "-f", "json")

        data = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert data["services"][0]["name"] == "lldpd"

    def test_environment_override(
        self,
        capsys: pytest.CaptureFixture[str],
        monkeypatch: pytest.MonkeyPatch,
        netsup_cli: Callable[..., int],
    ) -> None:
        monkeypatch.setenv("NETSUP_SUPERVISOR__CONTROL_PORT", "8765")

        exit_code = netsup_cli("config", "show", "--format", "json")

        data = json.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert data["supervisor"]["control_port"] == 8765

    def test_invalid_config(
        self,
        capsys: pytest.CaptureFixture[str],
        netsup_cli: Callable[..., int],
        write_config: Callable[..., Path],
        python_service: Callable[..., dict[str, Any]],
    ) -> None:
        _ = write_config(python_service("frr", "pass", probe_interval=0))

        exit_code = netsup_cli("config", "show")

        assert exit_code == 1
        assert "probe_interval" in capsys.readouterr().out


class TestConfigServices:
    def test_lists_services_in_start_order(
        self,
        capsys: pytest.CaptureFixture[str],
        monkeypatch: pytest.MonkeyPatch,
        netsup_cli: Callable[..., int],
        write_config: Callable[..., Path],
        python_service: Callable[..., dict[str, Any]],
    ) -> None:
        _ = write_config(
            python_service("frr", "pass", readiness={"type": "tcp", "port": 2601}),
            python_service("snmpd", "pass", requires=["frr"]),
        )

        monkeypatch.setenv("COLUMNS", "300")

        exit_code = netsup_cli("config", "services")

        output = capsys.readouterr().out
        assert exit_code == 0
        assert output.index("frr") < output.index("snmpd")
        assert "tcp://127.0.0.1:2601" in output
