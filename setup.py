from setuptools import setup

__version__ = "1.0.0"
__author__ = "Maxime Lamothe-Brassard ( Refraction Point, Inc )"
__author_email__ = "maxime@refractionpoint.com"
__license__ = "Apache v2"
__copyright__ = "Copyright (c) 2020 Refraction Point, Inc"

setup( name = 'oauth-loopback',
       version = __version__,
       description = 'Browser login for desktop and CLI applications through a loopback redirect',
       url = 'https://limacharlie.io',
       author = __author__,
       author_email = __author_email__,
       license = __license__,
       packages = [ 'oauth_loopback' ],
       zip_safe = True,
       install_requires = [ 'gevent', 'requests', 'pyyaml', 'pygments', 'rich' ],
       extras_require = {
           'test': [ 'pytest' ],
       },
       long_description = 'Catch the session token of a browser login on an ephemeral loopback port, without running a public web server.',
       entry_points = {
           'console_scripts': [
               'oauth-loopback=oauth_loopback.__main__:main',
           ],
       },
)
