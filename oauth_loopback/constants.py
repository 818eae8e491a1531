import os

# Path to the configuration file. Can be overriden for tests.
CONFIG_FILE_PATH = os.path.expanduser( '~/.oauth_loopback' )
CONFIG_FILE_ENV_VAR = 'OAUTH_LOOPBACK_CONFIG'
CURRENT_ENV_ENV_VAR = 'OAUTH_LOOPBACK_ENV'

# Environment variables overriding individual configuration values.
LOGIN_URL_ENV_VAR = 'OAUTH_LOOPBACK_LOGIN_URL'
API_ROOT_ENV_VAR = 'OAUTH_LOOPBACK_API_ROOT'
TOKEN_PARAM_ENV_VAR = 'OAUTH_LOOPBACK_TOKEN_PARAM'
BIND_HOST_ENV_VAR = 'OAUTH_LOOPBACK_BIND_HOST'
TIMEOUT_ENV_VAR = 'OAUTH_LOOPBACK_TIMEOUT'
SESSION_TOKEN_ENV_VAR = 'OAUTH_LOOPBACK_SESSION_TOKEN'

# The login endpoint is served by the application's own auth server, which
# redirects back to http://127.0.0.1:<port>/?session_token=... once the
# identity provider is done.
DEFAULT_LOGIN_URL = 'http://localhost:3000/login/github'
DEFAULT_API_ROOT = 'http://localhost:3000'

# Query parameter carrying the session token on the redirect.
SESSION_TOKEN_PARAM = 'session_token'

# Loopback only, port is always asked from the OS.
DEFAULT_BIND_HOST = '127.0.0.1'

# Upper bound on the request line we are willing to buffer, terminator excluded.
MAX_REQUEST_LINE = 8192

# The catcher itself never times out, this is what the CLI waits for.
OAUTH_CALLBACK_TIMEOUT = 300  # 5 minutes

SUCCESS_MESSAGE = 'Successfully logged in. You can now close this tab.'
FAILURE_MESSAGE = 'Login failed. Return to the application and try again.'
