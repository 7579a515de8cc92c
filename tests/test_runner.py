"""Tests for the command line entry point."""

import json

import pytest

from oauth_flow_engine import config
from oauth_flow_engine.runner import main

from conftest import write_flow


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    monkeypatch.setenv(config.CONFIG_PATH_ENV, str(tmp_path / "no-config.yaml"))
    monkeypatch.delenv(config.DEFINITIONS_DIR_ENV, raising=False)
    monkeypatch.delenv(config.STORAGE_MODE_ENV, raising=False)


class TestListAndShow:
    """Listing and printing definitions."""

    def test_list_flows(self, definitions_dir, capsys):
        assert main(["--definitions", str(definitions_dir), "--list-flows"]) == 0

        out = capsys.readouterr().out
        assert "device-grant" in out
        assert "Device Grant" in out

    def test_list_empty_directory(self, tmp_path, capsys):
        assert main(["--definitions", str(tmp_path), "--list-flows"]) == 0

        assert "No flows found" in capsys.readouterr().out

    def test_show(self, definitions_dir, device_grant, capsys):
        assert main(["--definitions", str(definitions_dir), "show", "device-grant"]) == 0

        assert json.loads(capsys.readouterr().out) == device_grant

    def test_show_unknown(self, definitions_dir, capsys):
        assert main(["--definitions", str(definitions_dir), "show", "nope"]) == 1

        assert "nope" in capsys.readouterr().err

    def test_no_command_prints_usage(self, definitions_dir, capsys):
        assert main(["--definitions", str(definitions_dir)]) == 1

        assert "usage:" in capsys.readouterr().out


class TestValidateCommand:
    """validate <id|file.json>"""

    def test_valid_stored_flow(self, definitions_dir, capsys):
        assert main(["--definitions", str(definitions_dir), "validate", "device-grant"]) == 0

        assert "Validation passed" in capsys.readouterr().out

    def test_invalid_file(self, definitions_dir, tmp_path, capsys):
        path = write_flow(tmp_path, "loose", {"name": "Loose", "steps": []})

        assert main(["--definitions", str(definitions_dir), "validate", str(path)]) == 1

        assert "Missing required field: id" in capsys.readouterr().out

    def test_unreadable_file(self, definitions_dir, tmp_path, capsys):
        path = write_flow(tmp_path, "broken", "{not json")

        assert main(["--definitions", str(definitions_dir), "validate", str(path)]) == 1

        assert "Cannot read" in capsys.readouterr().err


class TestRenderCommand:
    """render <id>"""

    def test_render_section_to_stdout(self, definitions_dir, capsys):
        assert main(["--definitions", str(definitions_dir), "render", "device-grant", "--section", "header"]) == 0

        assert "<h1>Device Grant</h1>" in capsys.readouterr().out

    def test_render_page_to_file(self, definitions_dir, tmp_path):
        output = tmp_path / "page.html"

        assert main(["--definitions", str(definitions_dir), "render", "device-grant", "-o", str(output)]) == 0

        assert 'class="stepper"' in output.read_text(encoding="utf-8")

    def test_render_refuses_invalid_flow(self, definitions_dir, device_grant, capsys):
        device_grant["steps"][1]["number"] = 7
        write_flow(definitions_dir, "device-grant", device_grant)

        assert main(["--definitions", str(definitions_dir), "render", "device-grant"]) == 1

        assert "Invalid flow" in capsys.readouterr().err


class TestCheckConfig:
    """check-config [--schema]"""

    def test_missing_config_is_ok(self, tmp_path, capsys):
        assert main(["--config", str(tmp_path / "absent.yaml"), "check-config"]) == 0

        assert "Config OK" in capsys.readouterr().out

    def test_bad_config(self, tmp_path, capsys):
        path = tmp_path / "config.yaml"
        path.write_text("server:\n  port: 0\n")

        assert main(["--config", str(path), "check-config"]) == 1

        assert "server.port" in capsys.readouterr().out

    def test_schema(self, capsys):
        assert main(["check-config", "--schema"]) == 0

        assert json.loads(capsys.readouterr().out)["type"] == "object"
