import pytest

from kraken_api.config import KrakenConfig


def test_defaults_target_production():
    config = KrakenConfig()
    assert config.base_url == "https://api.kraken.com"
    assert config.version == "0"
    assert config.verify_peer is True


def test_from_yaml_with_env_interpolation(tmp_path, monkeypatch):
    monkeypatch.setenv("KRAKEN_BASE_URL", "https://beta.api.kraken.com")
    config_file = tmp_path / "kraken.yaml"
    config_file.write_text(
        'base_url: "${KRAKEN_BASE_URL}"\n'
        "version: 0\n"
        "verify_peer: false\n"
        "timeout: 15\n"
    )

    config = KrakenConfig.from_yaml(str(config_file))

    assert config.base_url == "https://beta.api.kraken.com"
    assert config.version == "0"
    assert config.verify_peer is False
    assert config.timeout == 15


def test_from_yaml_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        KrakenConfig.from_yaml(str(tmp_path / "missing.yaml"))


def test_from_yaml_rejects_unknown_keys(tmp_path):
    config_file = tmp_path / "kraken.yaml"
    config_file.write_text("api_secret: nope\n")
    with pytest.raises(ValueError, match="api_secret"):
        KrakenConfig.from_yaml(str(config_file))


def test_from_yaml_empty_file_gives_defaults(tmp_path):
    config_file = tmp_path / "kraken.yaml"
    config_file.write_text("")
    assert KrakenConfig.from_yaml(str(config_file)) == KrakenConfig()


def test_to_yaml_and_back(tmp_path):
    original = KrakenConfig(base_url="https://beta.api.kraken.com", verify_peer=False, timeout=3, log_level="DEBUG")
    path = tmp_path / "nested" / "kraken.yaml"

    original.to_yaml(str(path))

    assert KrakenConfig.from_yaml(str(path)) == original
