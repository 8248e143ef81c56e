"""
Declarative table of datastream attributes.

Each attribute is named as the corresponding Fedora API parameter and maps to
the field of the datastream profile it's read back from, if any.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..exceptions import ReadOnlyError

if TYPE_CHECKING:
    from .datastream import Datastream

__all__ = [
    "AttributeDef",
    "AttributeDescriptor",
    "ReadOnlyDescriptor",
    "DS_ATTRIBUTES",
    "DS_DEFAULT_ATTRIBUTES",
    "CONTENT",
]

CONTENT = "content"
"""
Name of the content pseudo-attribute.
"""


@dataclass(frozen=True)
class AttributeDef:
    """
    Definition of a datastream attribute.
    """

    name: str
    """Name of API parameter"""

    alias: str
    """Name of Python property on {obj}`Datastream`"""

    profile_key: str | None = None
    """Name of field in datastream profile, or None if write-only"""

    default: Any = None
    """Value used while the datastream doesn't exist in Fedora"""


DS_ATTRIBUTES: dict[str, AttributeDef] = {
    a.name: a
    for a in [
        AttributeDef("controlGroup", "control_group", "dsControlGroup", "M"),
        AttributeDef("dsLocation", "ds_location", "dsLocation"),
        AttributeDef("altIDs", "alt_ids"),
        AttributeDef("dsLabel", "label", "dsLabel"),
        AttributeDef("versionable", "versionable", "dsVersionable", True),
        AttributeDef("dsState", "ds_state", "dsState", "A"),
        AttributeDef("formatURI", "format_uri", "dsFormatURI"),
        AttributeDef("checksumType", "checksum_type", "dsChecksumType", "DISABLED"),
        AttributeDef("checksum", "checksum", "dsChecksum"),
        AttributeDef("mimeType", "mime_type", "dsMIME"),
        AttributeDef("logMessage", "log_message"),
        AttributeDef("ignoreContent", "ignore_content"),
        AttributeDef("lastModifiedDate", "last_modified_date"),
        AttributeDef(CONTENT, CONTENT),
    ]
}
"""
Mapping of attribute name to definition.
"""

DS_DEFAULT_ATTRIBUTES: dict[str, Any] = {
    name: a.default for name, a in DS_ATTRIBUTES.items() if a.default is not None
}
"""
Parameters sent when creating a datastream, unless overridden.
"""


class AttributeDescriptor:
    """
    Accessor for a datastream attribute, e.g. {obj}`Datastream.label`.

    When written, updates the local value which will be sent to Fedora
    upon save. When read, returns the local value if set by user, or the
    value from the datastream profile if not.
    """

    _name: str

    def __init__(self, name: str):
        assert name in DS_ATTRIBUTES
        self._name = name

    def __get__(self, ds: Datastream | None, objtype=None) -> Any:
        if ds is None:
            return self
        return ds.get(self._name)

    def __set__(self, ds: Datastream, value: Any):
        ds.set(self._name, value)


class ReadOnlyDescriptor:
    """
    Accessor for a read-only identity field.

    :raises ReadOnlyError: Upon write attempt
    """

    _attr: str
    _name: str

    def __init__(self, attr: str):
        self._attr = attr
        self._name = attr

    def __set_name__(self, owner, name: str):
        self._name = name

    def __get__(self, obj, objtype=None) -> Any:
        if obj is None:
            return self
        return getattr(obj, self._attr)

    def __set__(self, obj, value: Any):
        raise ReadOnlyError(self._name, obj)
