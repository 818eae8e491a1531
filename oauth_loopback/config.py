import os
import yaml

from .constants import CONFIG_FILE_PATH
from .constants import CONFIG_FILE_ENV_VAR
from .constants import CURRENT_ENV_ENV_VAR
from .constants import LOGIN_URL_ENV_VAR
from .constants import API_ROOT_ENV_VAR
from .constants import TOKEN_PARAM_ENV_VAR
from .constants import BIND_HOST_ENV_VAR
from .constants import TIMEOUT_ENV_VAR
from .constants import DEFAULT_LOGIN_URL
from .constants import DEFAULT_API_ROOT
from .constants import SESSION_TOKEN_PARAM
from .constants import DEFAULT_BIND_HOST
from .constants import OAUTH_CALLBACK_TIMEOUT
from .constants import SUCCESS_MESSAGE
from .utils import ConfigError

_KNOWN_KEYS = ( 'login_url', 'api_root', 'token_param', 'bind_host', 'timeout', 'scope', 'success_message' )

_ENV_OVERRIDES = (
    ( LOGIN_URL_ENV_VAR, 'login_url' ),
    ( API_ROOT_ENV_VAR, 'api_root' ),
    ( TOKEN_PARAM_ENV_VAR, 'token_param' ),
    ( BIND_HOST_ENV_VAR, 'bind_host' ),
    ( TIMEOUT_ENV_VAR, 'timeout' ),
)

def defaultConfig():
    return {
        'login_url' : DEFAULT_LOGIN_URL,
        'api_root' : DEFAULT_API_ROOT,
        'token_param' : SESSION_TOKEN_PARAM,
        'bind_host' : DEFAULT_BIND_HOST,
        'timeout' : OAUTH_CALLBACK_TIMEOUT,
        'scope' : None,
        'success_message' : SUCCESS_MESSAGE,
    }

def getConfigFilePath():
    path = os.environ.get( CONFIG_FILE_ENV_VAR, None )
    if path:
        return path
    return CONFIG_FILE_PATH

def loadConfigFile():
    """
    Load the raw configuration file.

    Returns:
        dict: Loaded configuration or None if file doesn't exist
    """
    path = getConfigFilePath()
    try:
        with open( path, 'rb' ) as f:
            data = yaml.safe_load( f.read() )
    except FileNotFoundError:
        return None
    except yaml.YAMLError as e:
        raise ConfigError( 'Invalid configuration file %s: %s' % ( path, e ) )
    if data is None:
        return None
    if not isinstance( data, dict ):
        raise ConfigError( 'Invalid configuration file %s: expected a mapping' % ( path, ) )
    return data

def _pickKnown( data ):
    return { k : v for k, v in data.items() if k in _KNOWN_KEYS and v is not None }

def load_config( environment = None ):
    '''Resolve the effective configuration.

    Values are resolved in the following order, last one wins:
    1- Built-in defaults.
    2- Top level keys of the YAML config file (the "default" environment).
    3- Keys of the named environment under "env" in the config file.
    4- OAUTH_LOOPBACK_* environment variables.

    Args:
        environment (str): name of the environment to use, defaults to OAUTH_LOOPBACK_ENV or "default".

    Returns:
        dict of configuration values.
    '''
    if environment is None:
        environment = os.environ.get( CURRENT_ENV_ENV_VAR, '' ) or 'default'

    config = defaultConfig()

    fileData = loadConfigFile()
    if fileData is not None:
        config.update( _pickKnown( fileData ) )

    if environment != 'default':
        envs = ( fileData or {} ).get( 'env', None ) or {}
        if environment not in envs:
            raise ConfigError( 'Environment not found in configuration: %s' % ( environment, ) )
        envData = envs[ environment ]
        if not isinstance( envData, dict ):
            raise ConfigError( 'Invalid configuration for environment: %s' % ( environment, ) )
        config.update( _pickKnown( envData ) )

    for envVar, key in _ENV_OVERRIDES:
        value = os.environ.get( envVar, None )
        if value:
            config[ key ] = value

    try:
        timeout = config[ 'timeout' ]
        config[ 'timeout' ] = float( timeout ) if timeout is not None else None
    except ( TypeError, ValueError ):
        raise ConfigError( 'Invalid timeout value: %r' % ( config[ 'timeout' ], ) )

    scope = config[ 'scope' ]
    if isinstance( scope, str ):
        config[ 'scope' ] = [ scope ]

    return config
