"""
FedoraAlchemy: an SDK for datastreams of Fedora Commons repositories.
"""

from pyrollup import rollup

from . import core
from .core import *  # noqa

__all__ = rollup(core)

__canonical_children__ = [
    "core",
]
