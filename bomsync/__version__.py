"""Version information for bomsync."""
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version


def get_version() -> str:
    try:
        return version('bomsync')
    except PackageNotFoundError:
        return '0.0.0-dev'


__version__ = get_version()
