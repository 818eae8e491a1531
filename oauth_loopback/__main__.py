import os
import sys
import traceback

from .constants import SESSION_TOKEN_ENV_VAR


def cli(args):
    """
    Command line interface for the loopback login.

    Args:
        args (list): list of CLI arguments to parse.
    """
    import argparse

    from rich.markup import escape

    from .config import load_config
    from .term_utils import getConsole

    parser = argparse.ArgumentParser( prog = 'oauth-loopback' )
    parser.add_argument( 'action',
                         type = str,
                         help = 'action to perform, currently supported "login" (log in through the browser and print the session token), "user" (show the user owning a session token), "logout" (invalidate a session token), "version"' )

    # Everything after the action name is passed to the action argument parser.
    # For example: oauth-loopback login --no-browser -> ["--no-browser"]
    rootArgs = args[ 1: 2 ]
    actionArgs = args[ 2: ]
    args = parser.parse_args( rootArgs )

    errConsole = getConsole( stderr = True )

    if args.action.lower() == 'version':
        from . import __version__
        print( "oauth-loopback version %s" % ( __version__, ) )
    elif args.action.lower() == 'login':
        parser = argparse.ArgumentParser( prog = 'oauth-loopback login' )
        parser.add_argument( '--no-browser',
                             action = 'store_true',
                             help = 'print URL instead of opening browser' )
        parser.add_argument( '--environment', '--env',
                             type = str,
                             default = None,
                             help = 'configuration environment name (default: "default")' )
        parser.add_argument( '--login-url',
                             type = str,
                             default = None,
                             help = 'login endpoint, the local port is appended as ?port=' )
        parser.add_argument( '--timeout',
                             type = float,
                             default = None,
                             help = 'seconds to wait for the browser callback' )
        login_args = parser.parse_args( actionArgs )

        from .browser import launch_browser, print_url_launcher
        from .catcher import run_authenticate

        config = load_config( login_args.environment )
        timeout = login_args.timeout if login_args.timeout is not None else config[ 'timeout' ]

        errConsole.print( "Waiting for authentication in the browser..." )
        success, token, error = run_authenticate(
            timeout = timeout,
            login_url = login_args.login_url or config[ 'login_url' ],
            token_param = config[ 'token_param' ],
            bind_host = config[ 'bind_host' ],
            launcher = print_url_launcher if login_args.no_browser else launch_browser,
            scope = config[ 'scope' ],
            success_message = config[ 'success_message' ],
        )
        if not success:
            errConsole.print( "[bold red]Login failed:[/bold red] %s" % ( escape( error ), ) )
            sys.exit( 1 )
        errConsole.print( "[bold green]Login successful.[/bold green]" )
        print( token )
    elif args.action.lower() in ( 'user', 'logout' ):
        action = args.action.lower()
        parser = argparse.ArgumentParser( prog = 'oauth-loopback %s' % ( action, ) )
        parser.add_argument( '--token',
                             type = str,
                             default = os.environ.get( SESSION_TOKEN_ENV_VAR, None ),
                             help = 'session token, defaults to the %s environment variable' % ( SESSION_TOKEN_ENV_VAR, ) )
        parser.add_argument( '--environment', '--env',
                             type = str,
                             default = None,
                             help = 'configuration environment name (default: "default")' )
        action_args = parser.parse_args( actionArgs )
        if not action_args.token:
            errConsole.print( "[bold red]No session token provided.[/bold red]" )
            sys.exit( 1 )

        from .client import SessionClient
        from .term_utils import prettyFormatDict

        config = load_config( action_args.environment )
        client = SessionClient( config[ 'api_root' ] )
        if action == 'user':
            user = client.get_user( action_args.token )
            if user is None:
                errConsole.print( "[bold red]Session is not valid.[/bold red]" )
                sys.exit( 1 )
            print( prettyFormatDict( user ) )
        else:
            if not client.logout( action_args.token ):
                errConsole.print( "[bold red]Logout was refused.[/bold red]" )
                sys.exit( 1 )
            errConsole.print( "Logged out." )
    else:
        raise Exception( 'invalid action: %s' % ( args.action, ) )

def main():
    args = sys.argv

    # Hack since we don't have access to parsed args here and parsing itself may fail
    debug_mode = False
    if "--debug" in args:
        debug_mode = True
        args.remove("--debug")

    if "--debug-request" in args:
        args.remove("--debug-request")
        from .utils import set_default_print_debug_fn
        set_default_print_debug_fn(lambda x: print(x, file=sys.stderr))

    try:
        cli(args)
    except Exception as e:
        print("Error:", e, file=sys.stderr)

        if debug_mode:
            print(traceback.format_exc(), file=sys.stderr)

        return 1

if __name__ == "__main__":
    sys.exit(main())
