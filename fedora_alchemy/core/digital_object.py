"""
Minimal container of datastreams belonging to a Fedora object.
"""

from __future__ import annotations

from typing import Any

from .datastream.attributes import ReadOnlyDescriptor
from .datastream.datastream import Datastream
from .repository import BaseRepository

__all__ = [
    "DigitalObject",
]


class DigitalObject:
    """
    Fedora object, identified by its pid, providing access to its
    datastreams.

    Datastreams obtained through {obj}`DigitalObject.datastream` are
    remembered in {obj}`DigitalObject.datastreams` until deleted:

    ```
    obj = DigitalObject("demo:1", repository)
    ds = obj.datastream("DC", mimeType="text/xml")
    ```
    """

    pid: str = ReadOnlyDescriptor("_pid")
    """
    Object id.
    """

    repository: BaseRepository = ReadOnlyDescriptor("_repository")
    """
    Repository in which the object is stored.
    """

    datastreams: dict[str, Datastream]
    """
    Mapping of dsid to known datastreams.
    """

    datastream_cls: type[Datastream] = Datastream
    """
    Class used to instantiate datastreams.
    """

    def __init__(self, pid: str, repository: BaseRepository):
        self._pid = pid
        self._repository = repository
        self.datastreams = dict()

    def __str__(self):
        return f"DigitalObject(pid={self._pid})"

    def __repr__(self):
        return str(self)

    def __getitem__(self, dsid: str) -> Datastream:
        return self.datastream(dsid)

    def __contains__(self, dsid: str) -> bool:
        return dsid in self.datastreams

    def datastream(self, dsid: str, **options: Any) -> Datastream:
        """
        Get known datastream with the given id, or instantiate and register
        a new one using the provided initial attribute values.
        """
        if dsid in self.datastreams:
            ds = self.datastreams[dsid]
            for name, value in options.items():
                ds.set(name, value)
            return ds

        ds = self.datastream_cls(self, dsid, **options)
        self.datastreams[dsid] = ds
        return ds
