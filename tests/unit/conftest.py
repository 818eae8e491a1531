import os
import sys

import pytest

# Get the directory of the current conftest.py file
current_dir = os.path.dirname(os.path.abspath(__file__))

# Calculate the project root (adjust the number of ".." if needed)
project_root = os.path.abspath(os.path.join(current_dir, '../../'))

# Insert the project root at the beginning of sys.path
if project_root not in sys.path:
    sys.path.insert(0, project_root)

_CONFIG_ENV_VARS = (
    "OAUTH_LOOPBACK_CONFIG",
    "OAUTH_LOOPBACK_ENV",
    "OAUTH_LOOPBACK_LOGIN_URL",
    "OAUTH_LOOPBACK_API_ROOT",
    "OAUTH_LOOPBACK_TOKEN_PARAM",
    "OAUTH_LOOPBACK_BIND_HOST",
    "OAUTH_LOOPBACK_TIMEOUT",
    "OAUTH_LOOPBACK_SESSION_TOKEN",
)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep the user's config file and environment out of the tests."""
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    config_path = tmp_path / "oauth_loopback.yaml"
    monkeypatch.setenv("OAUTH_LOOPBACK_CONFIG", str(config_path))
    return config_path
