from __future__ import annotations

from io import IOBase
from typing import IO, TYPE_CHECKING

from ..exceptions import NotFoundError
from .attributes import CONTENT

if TYPE_CHECKING:
    from .datastream import Datastream

__all__ = [
    "Content",
]


class Content:
    """
    Interface to datastream's content.

    Access as {obj}`Datastream.content`. Content is fetched from Fedora on
    first access and cached until the datastream is invalidated:

    ```
    ds.content = b"<foo>bar</foo>"
    assert ds.content == b"<foo>bar</foo>"
    ```

    A file-like object may be set as content; it's sent as-is upon save and
    read back in full upon each access.
    """

    _ds: Datastream

    # content set by user or fetched from Fedora
    _blob: str | bytes | IO | None = None

    # whether _blob is populated
    _loaded: bool = False

    def __init__(self, ds: Datastream):
        self._ds = ds

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def get(self) -> str | bytes | None:
        """
        Return current content, fetching it if needed. Returns None if the
        datastream has no content in Fedora.
        """
        if not self._loaded:
            self._fetch()

        if isinstance(self._blob, IOBase):
            return self._read_stream(self._blob)

        return self._blob

    def set(self, blob: str | bytes | IO | None):
        """
        Set pending content, to be sent to Fedora upon save.
        """
        if self._loaded and blob is self._blob:
            return

        if (
            self._loaded
            and not isinstance(blob, IOBase)
            and not isinstance(self._blob, IOBase)
            and blob == self._blob
        ):
            return

        # don't load current content just to record it
        self._ds._state.mark_dirty(CONTENT)

        self._blob = blob
        self._loaded = True

    def reset(self):
        self._blob = None
        self._loaded = False

    def _fetch(self):
        ds = self._ds
        ds.repository.logger.debug(f"Fetching content for {ds}")

        try:
            blob = ds.repository.fetch_content(ds.pid, ds.dsid)
        except NotFoundError:
            blob = None

        self._blob = blob
        self._loaded = True

    def _read_stream(self, fh: IOBase) -> str | bytes:
        if not fh.seekable():
            # can only be read once; keep what was read
            blob = fh.read()
            self._blob = blob
            return blob

        fh.seek(0)
        blob = fh.read()
        fh.seek(0)

        return blob
