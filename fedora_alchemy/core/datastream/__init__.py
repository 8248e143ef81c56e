from pyrollup import rollup

from . import attributes, datastream, profile, types
from .attributes import *  # noqa
from .datastream import *  # noqa
from .profile import *  # noqa
from .types import *  # noqa

__all__ = rollup(
    datastream,
    attributes,
    profile,
    types,
)
__canonical_syms__ = __all__
__canonical_children__ = [
    "content",
    "state",
]
