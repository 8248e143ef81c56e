"""
This module implements access to Fedora datastreams, tracking local changes
and synchronizing them with the repository.
"""

from pyrollup import rollup

from . import datastream, digital_object, exceptions, hooks, repository
from .datastream import *  # noqa
from .digital_object import *  # noqa
from .exceptions import *  # noqa
from .hooks import *  # noqa
from .repository import *  # noqa

__all__ = rollup(
    repository,
    digital_object,
    datastream,
    hooks,
    exceptions,
)

__canonical_children__ = [
    "repository",
    "digital_object",
    "datastream",
    "hooks",
    "exceptions",
]
