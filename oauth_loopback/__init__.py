"""Browser login for desktop and CLI applications through a loopback redirect."""

__version__ = "1.0.0"
__author__ = "Maxime Lamothe-Brassard ( Refraction Point, Inc )"
__author_email__ = "maxime@refractionpoint.com"
__license__ = "Apache v2"
__copyright__ = "Copyright (c) 2020 Refraction Point, Inc"

from .catcher import RedirectCatcher
from .catcher import CallbackRequest
from .catcher import PendingAuthSession
from .catcher import LoginAttempt
from .catcher import authenticate
from .catcher import run_authenticate
from .catcher import build_login_url
from .client import SessionClient
from .config import load_config
from .utils import AuthError
from .utils import AuthCancelledError
from .utils import BindError
from .utils import BrowserLaunchError
from .utils import MalformedRequestError
from .utils import MissingTokenError
from .utils import ConfigError
from .utils import ApiError
from .utils import set_default_print_debug_fn
