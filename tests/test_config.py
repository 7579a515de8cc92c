"""Tests for configuration loading and validation."""

import pytest

from oauth_flow_engine import config, settings
from oauth_flow_engine.core import DirectoryFlowStore, MemoryFlowStore


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (config.CONFIG_PATH_ENV, config.DEFINITIONS_DIR_ENV, config.STORAGE_MODE_ENV):
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    """Defaults, file overrides and environment overrides."""

    def test_defaults_without_file(self, tmp_path):
        loaded = config.load_config(tmp_path / "absent.yaml")

        assert loaded == config.config_defaults()
        assert loaded["storage"]["mode"] == "file"

    def test_file_deep_merges(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("server:\n  port: 8080\nstorage:\n  mode: memory\n")

        loaded = config.load_config(path)

        assert loaded["server"] == {"host": settings.server_host, "port": 8080}
        assert loaded["storage"]["mode"] == "memory"

    def test_invalid_yaml_ignored(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("server: [unclosed\n")

        assert config.load_config(path) == config.config_defaults()

    def test_non_mapping_ignored(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")

        assert config.load_config(path) == config.config_defaults()

    def test_config_path_from_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "env.yaml"
        path.write_text("logging:\n  level: DEBUG\n")
        monkeypatch.setenv(config.CONFIG_PATH_ENV, str(path))

        assert config.load_config()["logging"]["level"] == "DEBUG"

    def test_environment_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv(config.DEFINITIONS_DIR_ENV, str(tmp_path))
        monkeypatch.setenv(config.STORAGE_MODE_ENV, "memory")

        loaded = config.load_config(tmp_path / "absent.yaml")

        assert loaded["definitions_dir"] == str(tmp_path)
        assert loaded["storage"]["mode"] == "memory"

    def test_defaults_are_copies(self):
        config.config_defaults()["server"]["port"] = 1

        assert config.DEFAULT_CONFIG["server"]["port"] == settings.server_port


class TestValidateConfig:
    """Config dict validation."""

    def test_defaults_are_valid(self):
        assert config.validate_config_dict(config.config_defaults()) == []

    def test_not_a_mapping(self):
        assert config.validate_config_dict(["x"]) == ["Config must be a mapping/object"]

    def test_unknown_keys(self):
        errors = config.validate_config_dict({"extra": 1, "server": {"hostname": "x"}})

        assert "Unknown config key: extra" in errors
        assert "Unknown server key: hostname" in errors

    @pytest.mark.parametrize("port", [0, 70000, "80", True])
    def test_bad_port(self, port):
        assert "server.port must be between 1 and 65535" in config.validate_config_dict({"server": {"port": port}})

    def test_bad_storage_mode(self):
        errors = config.validate_config_dict({"storage": {"mode": "s3"}})

        assert errors == ["storage.mode must be one of: file, memory"]

    def test_bad_log_level(self):
        assert config.validate_config_dict({"logging": {"level": "chatty"}})

    def test_section_must_be_object(self):
        assert config.validate_config_dict({"storage": "file"}) == ["storage must be an object"]

    def test_validate_config_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("storage:\n  mode: s3\n")

        assert config.validate_config_file(path) == ["storage.mode must be one of: file, memory"]
        assert config.validate_config_file(tmp_path / "absent.yaml") == []

    def test_schema_lists_every_section(self):
        schema = config.config_schema()

        assert set(schema["properties"]) == {"definitions_dir", "server", "storage", "logging"}
        assert schema["properties"]["storage"]["properties"]["mode"]["enum"] == ["file", "memory"]


class TestStoreSelection:
    """Definitions directory and storage backend."""

    def test_configured_directory(self, tmp_path):
        assert config.resolve_definitions_dir({"definitions_dir": str(tmp_path)}) == tmp_path

    def test_falls_back_to_bundled(self, tmp_path, monkeypatch):
        monkeypatch.setattr(settings, "user_definitions_dir", tmp_path / "absent")

        assert config.resolve_definitions_dir({}) == settings.bundled_definitions_dir

    def test_user_directory_preferred_when_present(self, tmp_path, monkeypatch):
        monkeypatch.setattr(settings, "user_definitions_dir", tmp_path)

        assert config.resolve_definitions_dir({"definitions_dir": None}) == tmp_path

    def test_file_store(self, tmp_path):
        store = config.create_store({"definitions_dir": str(tmp_path), "storage": {"mode": "file"}})

        assert isinstance(store, DirectoryFlowStore)
        assert store.path == tmp_path

    def test_memory_store(self, definitions_dir):
        store = config.create_store({"definitions_dir": str(definitions_dir), "storage": {"mode": "memory"}})

        assert isinstance(store, MemoryFlowStore)
        assert store.list_ids() == ["device-grant"]
