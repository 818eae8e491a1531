"""
Opening the login URL for the user.

A launcher is any callable taking the URL and an optional scope, the scope
being a list of URL prefixes the launcher is allowed to open. Launchers
signal failure by raising BrowserLaunchError.
"""

import sys
import webbrowser
from typing import Optional, Sequence

from .utils import BrowserLaunchError


def _checkScope(url: str, scope: Optional[Sequence[str]]) -> None:
    if scope is None:
        return
    for prefix in scope:
        if url.startswith(prefix):
            return
    raise BrowserLaunchError(f"URL not allowed by launcher scope: {url}")


def launch_browser(url: str, scope: Optional[Sequence[str]] = None) -> None:
    """
    Open a URL in the user's default browser.

    Args:
        url: URL to open
        scope: Optional list of URL prefixes the launcher may open

    Raises:
        BrowserLaunchError: If the URL is out of scope or no browser could be opened
    """
    _checkScope(url, scope)
    try:
        opened = webbrowser.open(url)
    except webbrowser.Error as e:
        raise BrowserLaunchError(f"Could not open browser: {str(e)}")
    if not opened:
        raise BrowserLaunchError(f"Could not open browser. Please visit this URL:\n{url}")


def print_url_launcher(url: str, scope: Optional[Sequence[str]] = None) -> None:
    """Print the URL to stderr instead of opening a browser, stdout is left to the caller."""
    _checkScope(url, scope)
    print(f"\nPlease visit this URL to authenticate:\n{url}\n", file=sys.stderr, flush=True)
