"""
Loopback redirect catcher.

Binds an ephemeral port on the loopback interface, sends the user's browser
to the login endpoint with that port, and waits for the identity provider's
redirect to land on it. The session token is read from the query string of
the single callback request:

1. Bind (host, 0) and read back the port the OS picked.
2. Open <login_url>?port=<port> in the browser.
3. Accept exactly one connection and read its request line.
4. Return the first session_token query parameter found.

Waiting is cooperative: accept and read yield to the gevent hub, so many
attempts can run side by side on separate greenlets without sharing state.
"""

import ipaddress
import re
from typing import Callable, List, Optional, Sequence, Tuple

import gevent
from gevent import socket
from gevent.event import AsyncResult

from .browser import launch_browser
from .constants import DEFAULT_LOGIN_URL
from .constants import DEFAULT_BIND_HOST
from .constants import SESSION_TOKEN_PARAM
from .constants import MAX_REQUEST_LINE
from .constants import SUCCESS_MESSAGE
from .constants import FAILURE_MESSAGE
from .utils import AuthError, AuthCancelledError, BindError, MalformedRequestError, MissingTokenError
from .utils import DebugMixin

_ASCII_WHITESPACE = re.compile(r"[ \t\n\r\x0c]+")

LISTENING = 'listening'
CONNECTED = 'connected'
SUCCEEDED = 'succeeded'
FAILED = 'failed'

_RESPONSE_OK = b"HTTP/1.1 200 OK\r\n\r\n"
_RESPONSE_BAD_REQUEST = b"HTTP/1.1 400 Bad Request\r\n\r\n"


def _isLoopback(host: str) -> bool:
    if host == 'localhost':
        return True
    try:
        return ipaddress.ip_address(host).is_loopback
    except ValueError:
        return False


def build_login_url(login_url: str, port: int) -> str:
    """
    Build the URL the browser is sent to.

    Args:
        login_url: Login endpoint of the application's auth server
        port: Port of the local listener

    Returns:
        The login URL carrying the port as a query parameter
    """
    separator = '&' if '?' in login_url else '?'
    return f"{login_url}{separator}port={int(port)}"


class CallbackRequest(object):
    """Request line of the callback connection, parsed."""

    def __init__(self, path: str, query: List[Tuple[str, str]]):
        self.path = path
        self.query = query

    @classmethod
    def parse(cls, line: str) -> 'CallbackRequest':
        """
        Parse a request line like "GET /callback?session_token=abc HTTP/1.1".

        Only the request target is used. Query pairs are kept in order and
        duplicates are preserved; pairs without "=" are dropped.

        Raises:
            MalformedRequestError: If the line has fewer than two tokens
        """
        # Only ASCII whitespace separates tokens, other bytes stay in the target.
        tokens = [t for t in _ASCII_WHITESPACE.split(line) if t]
        if len(tokens) < 2:
            raise MalformedRequestError(f"Malformed callback request line: {line!r}")
        path = tokens[1]
        _, _, queryString = path.partition('?')
        query = []
        for pair in queryString.split('&'):
            name, sep, value = pair.partition('=')
            if not sep:
                continue
            query.append((name, value))
        return cls(path, query)

    def get(self, name: str) -> Optional[str]:
        """Value of the first pair named exactly `name`, or None."""
        for pairName, value in self.query:
            if pairName == name:
                return value
        return None


class PendingAuthSession(object):
    """One in-flight login attempt and the listener it exclusively owns."""

    def __init__(self, listener, port: int):
        self.listener = listener
        self.port = port
        self.connection = None
        self.state = LISTENING

    def close(self) -> None:
        """Release the accepted connection and the listener."""
        if self.connection is not None:
            try:
                self.connection.close()
            finally:
                self.connection = None
        if self.listener is not None:
            try:
                self.listener.close()
            finally:
                self.listener = None


class RedirectCatcher(DebugMixin):
    """Catches the session token redirected to a local ephemeral port."""

    def __init__(self,
                 login_url: str = DEFAULT_LOGIN_URL,
                 token_param: str = SESSION_TOKEN_PARAM,
                 bind_host: str = DEFAULT_BIND_HOST,
                 launcher: Optional[Callable[..., None]] = None,
                 scope: Optional[Sequence[str]] = None,
                 success_message: str = SUCCESS_MESSAGE,
                 print_debug_fn: Optional[Callable[[str], None]] = None):
        """
        Args:
            login_url: Login endpoint, the listener port is appended as ?port=
            token_param: Name of the query parameter carrying the token
            bind_host: Loopback address to bind
            launcher: Callable opening the login URL, defaults to the system browser
            scope: Optional URL prefixes the launcher is allowed to open
            success_message: Plain text shown in the browser tab on success
            print_debug_fn: Callback receiving debug messages
        """
        self.login_url = login_url
        self.token_param = token_param
        self.bind_host = bind_host
        self.launcher = launcher if launcher is not None else launch_browser
        self.scope = scope
        self.success_message = success_message
        self._setDebug(print_debug_fn)

    def open_session(self) -> PendingAuthSession:
        """
        Bind a fresh listener on an OS assigned port.

        Raises:
            BindError: If no listener could be bound
        """
        if not _isLoopback(self.bind_host):
            raise BindError(f"Refusing to listen on non-loopback address: {self.bind_host}")
        family = socket.AF_INET6 if ':' in self.bind_host else socket.AF_INET
        try:
            listener = socket.socket(family, socket.SOCK_STREAM)
        except OSError as e:
            raise BindError(f"Failed to create listener: {str(e)}")
        try:
            listener.bind((self.bind_host, 0))
            listener.listen(1)
            port = listener.getsockname()[1]
        except OSError as e:
            listener.close()
            raise BindError(f"Failed to bind loopback listener on {self.bind_host}: {str(e)}")
        self._printDebug(f"listening for callback on {self.bind_host}:{port}")
        return PendingAuthSession(listener, port)

    def wait_for_token(self, session: PendingAuthSession) -> str:
        """
        Accept the single callback connection and extract the token.

        Blocks without timeout, the caller bounds the wait by killing the
        greenlet. Exactly one connection is accepted.

        Raises:
            MalformedRequestError: If no usable request line was received
            MissingTokenError: If the token parameter is absent
        """
        try:
            connection, address = session.listener.accept()
        except OSError as e:
            raise MalformedRequestError(f"Failed to accept callback connection: {str(e)}")
        session.connection = connection
        session.state = CONNECTED
        self._printDebug(f"callback connection from {address}")

        # No more connections are accepted for this attempt.
        session.listener.close()
        session.listener = None

        try:
            line = self._readRequestLine(connection)
            request = CallbackRequest.parse(line)
            token = request.get(self.token_param)
            if token is None:
                raise MissingTokenError("no session token present in callback")
        except AuthError:
            session.state = FAILED
            self._writeResponse(connection, _RESPONSE_BAD_REQUEST + FAILURE_MESSAGE.encode('utf-8'))
            raise

        session.state = SUCCEEDED
        self._writeResponse(connection, _RESPONSE_OK + self.success_message.encode('utf-8'))
        return token

    def authenticate(self) -> str:
        """
        Run a complete login attempt.

        Returns:
            The session token from the callback

        Raises:
            BindError: If no listener could be bound
            BrowserLaunchError: If the browser could not be opened
            MalformedRequestError: If the callback request was unusable
            MissingTokenError: If the callback carried no token
        """
        session = self.open_session()
        try:
            url = build_login_url(self.login_url, session.port)
            self._printDebug(f"opening login URL {url}")
            self.launcher(url, self.scope)
            return self.wait_for_token(session)
        finally:
            if session.state != SUCCEEDED:
                session.state = FAILED
            session.close()
            self._printDebug(f"released listener on port {session.port}")

    def spawn(self) -> 'LoginAttempt':
        """Start authenticate() on its own greenlet."""
        return LoginAttempt(self)

    def _readRequestLine(self, connection) -> str:
        reader = connection.makefile('rb')
        try:
            # Room for the CRLF terminator on top of the cap.
            raw = reader.readline(MAX_REQUEST_LINE + 2)
        except OSError as e:
            raise MalformedRequestError(f"Failed to read callback request: {str(e)}")
        finally:
            reader.close()
        if not raw:
            raise MalformedRequestError("Callback connection closed before a request line was received")
        raw = raw.rstrip(b"\r\n")
        if len(raw) > MAX_REQUEST_LINE:
            raise MalformedRequestError("Callback request line too long")
        try:
            return raw.decode('utf-8')
        except UnicodeDecodeError:
            raise MalformedRequestError("Callback request line is not valid text")

    def _writeResponse(self, connection, data: bytes) -> None:
        # The outcome is already decided, the browser tab may not see this.
        try:
            connection.sendall(data)
        except OSError as e:
            self._printDebug(f"failed to write callback response: {str(e)}")


class LoginAttempt(object):
    """Handle on a RedirectCatcher.authenticate() running on a greenlet."""

    def __init__(self, catcher: RedirectCatcher):
        self._result = AsyncResult()
        self._greenlet = gevent.spawn(self._run, catcher)

    def _run(self, catcher: RedirectCatcher) -> None:
        try:
            self._result.set(catcher.authenticate())
        except Exception as e:
            self._result.set_exception(e)

    def ready(self) -> bool:
        return self._result.ready()

    def get(self, timeout: Optional[float] = None) -> str:
        """
        Wait for the token.

        Raises:
            AuthError: The failure of the attempt
            gevent.Timeout: If timeout elapses first
        """
        return self._result.get(timeout=timeout)

    def cancel(self) -> None:
        """Abandon the attempt, releasing its listener. No-op once finished."""
        if self._result.ready():
            return
        self._greenlet.kill()
        if not self._result.ready():
            self._result.set_exception(AuthCancelledError("Authentication cancelled"))


def authenticate(**kwargs) -> str:
    """Run one login attempt with a RedirectCatcher built from kwargs."""
    return RedirectCatcher(**kwargs).authenticate()


def run_authenticate(timeout: Optional[float] = None, **kwargs) -> Tuple[bool, Optional[str], Optional[str]]:
    """
    Run one login attempt, waiting at most timeout seconds.

    Returns:
        Tuple of (success, session_token, error_message)
    """
    attempt = RedirectCatcher(**kwargs).spawn()
    try:
        token = attempt.get(timeout=timeout)
    except gevent.Timeout:
        return (False, None, 'Authentication timeout')
    except AuthError as e:
        return (False, None, str(e))
    finally:
        attempt.cancel()
    return (True, token, None)
