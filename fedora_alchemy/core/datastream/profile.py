"""
Parsing of datastream profiles as returned by Fedora's
`getDatastream` API.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET

from ..exceptions import ProfileParseError

__all__ = [
    "MANAGEMENT_NS",
    "Profile",
    "parse_profile",
]

MANAGEMENT_NS = "http://www.fedora.info/definitions/1/0/management/"
"""
Namespace of datastream profile documents.
"""

type Profile = dict[str, str | list[str]]
"""
Mapping of profile field to value; fields reported more than once map to a
list of values in document order.
"""

_ROOT_TAG = "datastreamProfile"


def parse_profile(document: str | bytes) -> Profile:
    """
    Parse a datastream profile document into a flat mapping.

    Older Fedora versions omit the namespace declaration, in which case the
    management namespace is assumed. Documents given as `bytes` are decoded
    by the parser according to their XML declaration.

    :raises ProfileParseError: If document is malformed or isn't a datastream profile
    """

    document = _normalize_namespace(document)

    try:
        root = ET.fromstring(document)
    except (ET.ParseError, ValueError) as e:
        # ValueError covers undecodable text and unknown encodings
        raise ProfileParseError(f"Malformed datastream profile: {e}") from e

    if root.tag != f"{{{MANAGEMENT_NS}}}{_ROOT_TAG}":
        raise ProfileParseError(f"Unexpected root element: {root.tag}")

    values: dict[str, list[str]] = dict()

    for node in root:
        if not isinstance(node.tag, str):
            # comment or processing instruction
            continue

        values.setdefault(_local_name(node.tag), []).append(node.text or "")

    return {k: v[0] if len(v) == 1 else v for k, v in values.items()}


def _normalize_namespace(document: str | bytes) -> str | bytes:
    """
    Inject default namespace on root element if no namespace is declared.
    """
    root = f"<{_ROOT_TAG}"
    declared = f'{root} xmlns="{MANAGEMENT_NS}"'

    if isinstance(document, bytes):
        if b"xmlns=" in document:
            return document
        return document.replace(root.encode(), declared.encode(), 1)

    if "xmlns=" in document:
        return document
    return document.replace(root, declared, 1)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]
