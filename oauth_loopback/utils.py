from datetime import datetime, timezone
from typing import Callable, Optional


class AuthError( Exception ):
    '''Exception type used for all failures of a loopback login attempt.'''

    def __init__(self, message, code=None):
        """
        Initialize the exception with a message and an optional status code.

        Args:
            message (str): The error message.
            code (int, optional): An optional HTTP status code associated with the failure. Defaults to None.
        """
        super().__init__(message)
        self.message = message
        self.code = code


class BindError( AuthError ):
    '''No loopback listener could be bound.'''
    pass


class BrowserLaunchError( AuthError ):
    '''The system browser could not be opened on the login URL.'''
    pass


class MalformedRequestError( AuthError ):
    '''The callback connection did not yield a usable HTTP request line.'''
    pass


class MissingTokenError( AuthError ):
    '''The callback request did not carry the session token parameter.'''
    pass


class AuthCancelledError( AuthError ):
    '''The login attempt was abandoned before a token was received.'''
    pass


class ConfigError( AuthError ):
    '''The configuration file or environment is invalid.'''
    pass


class ApiError( Exception ):
    '''Exception type used for failures talking to the session API.'''

    def __init__(self, message, code=None):
        super().__init__(message)
        self.code = code


# Default function to call with debug messages.
DEFAULT_PRINT_DEBUG_FN: Optional[Callable[[str], None]] = None

def set_default_print_debug_fn( fn: Optional[Callable[[str], None]] = None ):
    """
    Set a default function to call with debug messages.

    Args:
        fn (function): the function to call with debug messages.
    """
    global DEFAULT_PRINT_DEBUG_FN
    DEFAULT_PRINT_DEBUG_FN = fn


class DebugMixin( object ):
    '''Timestamped debug output routed to an optional callback.'''

    _debug: Optional[Callable[[str], None]] = None

    def _setDebug( self, print_debug_fn: Optional[Callable[[str], None]] ):
        self._debug = print_debug_fn or DEFAULT_PRINT_DEBUG_FN

    def _printDebug( self, msg ):
        if self._debug is not None:
            time_string = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%SZ")
            self._debug( f"{time_string}: {msg}" )
