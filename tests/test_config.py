import configparser

import pytest

from canvas_sync.exceptions import ConfigurationError
from canvas_sync.models.config import DEFAULT_BASE_URL, SyncConfig
from canvas_sync.storage.config_manager import ConfigManager


def test_save_then_load(tmp_path):
    config_file = tmp_path / "canvas-sync" / "config.ini"
    manager = ConfigManager(config_file)
    manager.save_new_config({"token": "abc", "base_url": "https://canvas.test/"})

    config = ConfigManager(config_file).load_config()

    assert config.token == "abc"
    assert config.base_url == "https://canvas.test"
    assert config.per_page == 100
    assert config.record_failed_downloads is True
    assert config.config_path == str(config_file.parent)


def test_cli_options_override_file(tmp_path):
    config_file = tmp_path / "config.ini"
    ConfigManager(config_file).save_new_config({"token": "abc"})

    config = ConfigManager(config_file).load_config(
        {"output_dir": "/srv/courses", "dry_run": True}
    )

    assert config.output_dir == "/srv/courses"
    assert config.dry_run is True
    assert config.base_url == DEFAULT_BASE_URL


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        ConfigManager(tmp_path / "nope.ini").load_config()


def test_missing_token_is_invalid(tmp_path):
    config_file = tmp_path / "config.ini"
    ConfigManager(config_file).save_new_config({})

    with pytest.raises(ConfigurationError, match="Authentication not configured"):
        ConfigManager(config_file).load_config()


def test_bad_integer_is_reported(tmp_path):
    config_file = tmp_path / "config.ini"
    config_file.write_text("[DEFAULT]\ntoken = abc\nper_page = lots\n")

    with pytest.raises(ConfigurationError):
        ConfigManager(config_file).load_config()


def test_missing_keys_are_migrated(tmp_path):
    config_file = tmp_path / "config.ini"
    config_file.write_text("[DEFAULT]\ntoken = abc\n")

    ConfigManager(config_file).load_config()

    parser = configparser.ConfigParser(interpolation=None)
    parser.read(config_file)
    assert parser["DEFAULT"]["base_url"] == DEFAULT_BASE_URL
    assert parser["DEFAULT"]["record_failed_downloads"] == "true"
    assert parser["DEFAULT"]["token"] == "abc"


@pytest.mark.parametrize(
    "overrides",
    [{"per_page": 0}, {"per_page": 101}, {"base_url": "oc.sjtu.edu.cn"}, {"output_dir": ""}],
)
def test_model_rejects_invalid_values(overrides):
    with pytest.raises(ValueError):
        SyncConfig(token="abc", config_path="/tmp", **overrides)
