"""Module for defining constants that require a local function to be executed first."""
import importlib.metadata

from packaging.version import Version

from pubface.constants.standalone import TITLE


def get_project_version() -> Version:
    """Return the version of the installed distribution, `0` when running from an uninstalled tree."""
    try:
        return Version(importlib.metadata.version(TITLE))
    except importlib.metadata.PackageNotFoundError:
        return Version('0')


CURRENT_VERSION = get_project_version()
USER_AGENT = f'{TITLE}/{CURRENT_VERSION.public}'
