import yaml
import pytest

from oauth_loopback import config
from oauth_loopback.constants import (
    DEFAULT_LOGIN_URL,
    DEFAULT_API_ROOT,
    SESSION_TOKEN_PARAM,
    DEFAULT_BIND_HOST,
    OAUTH_CALLBACK_TIMEOUT,
)
from oauth_loopback.utils import ConfigError


def write_config(path, data):
    with open(path, "w") as f:
        f.write(yaml.safe_dump(data))


def test_defaults_without_config_file():
    conf = config.load_config()
    assert conf["login_url"] == DEFAULT_LOGIN_URL
    assert conf["api_root"] == DEFAULT_API_ROOT
    assert conf["token_param"] == SESSION_TOKEN_PARAM
    assert conf["bind_host"] == DEFAULT_BIND_HOST
    assert conf["timeout"] == OAUTH_CALLBACK_TIMEOUT
    assert conf["scope"] is None


def test_default_environment_from_file(isolated_config):
    write_config(isolated_config, {
        "login_url": "https://auth.example.com/login/github",
        "timeout": 60,
        "unknown": "ignored",
    })

    conf = config.load_config()

    assert conf["login_url"] == "https://auth.example.com/login/github"
    assert conf["timeout"] == 60.0
    assert "unknown" not in conf


def test_named_environment_overrides_default(isolated_config):
    write_config(isolated_config, {
        "login_url": "https://auth.example.com/login/github",
        "env": {
            "staging": {
                "login_url": "https://staging.example.com/login/github",
                "scope": "https://staging.example.com/",
            },
        },
    })

    conf = config.load_config("staging")

    assert conf["login_url"] == "https://staging.example.com/login/github"
    assert conf["scope"] == ["https://staging.example.com/"]


def test_environment_selected_through_env_var(isolated_config, monkeypatch):
    write_config(isolated_config, {"env": {"dev": {"api_root": "http://localhost:4000"}}})
    monkeypatch.setenv("OAUTH_LOOPBACK_ENV", "dev")

    assert config.load_config()["api_root"] == "http://localhost:4000"


def test_unknown_environment(isolated_config):
    write_config(isolated_config, {"env": {"dev": {}}})

    with pytest.raises(ConfigError):
        config.load_config("production")


def test_env_vars_win(isolated_config, monkeypatch):
    write_config(isolated_config, {"login_url": "https://auth.example.com/login/github"})
    monkeypatch.setenv("OAUTH_LOOPBACK_LOGIN_URL", "http://localhost:5000/login")
    monkeypatch.setenv("OAUTH_LOOPBACK_TIMEOUT", "12.5")

    conf = config.load_config()

    assert conf["login_url"] == "http://localhost:5000/login"
    assert conf["timeout"] == 12.5


def test_invalid_timeout(monkeypatch):
    monkeypatch.setenv("OAUTH_LOOPBACK_TIMEOUT", "soon")

    with pytest.raises(ConfigError):
        config.load_config()


def test_invalid_yaml(isolated_config):
    with open(isolated_config, "w") as f:
        f.write("login_url: [unclosed\n")

    with pytest.raises(ConfigError):
        config.load_config()


def test_config_must_be_mapping(isolated_config):
    with open(isolated_config, "w") as f:
        f.write("- just\n- a list\n")

    with pytest.raises(ConfigError):
        config.load_config()


def test_config_path_default(monkeypatch, tmp_path):
    monkeypatch.delenv("OAUTH_LOOPBACK_CONFIG", raising=False)
    monkeypatch.setattr(config, "CONFIG_FILE_PATH", str(tmp_path / "missing"))

    assert config.getConfigFilePath() == str(tmp_path / "missing")
    assert config.load_config()["login_url"] == DEFAULT_LOGIN_URL
