from __future__ import annotations

from typing import IO, TYPE_CHECKING, Any, ClassVar, Self

from ..exceptions import ProfileParseError
from ..hooks import Hooks
from .attributes import (
    CONTENT,
    DS_ATTRIBUTES,
    DS_DEFAULT_ATTRIBUTES,
    AttributeDescriptor,
    ReadOnlyDescriptor,
)
from .content import Content
from .profile import Profile, parse_profile
from .state import AttributeState
from .types import State

if TYPE_CHECKING:
    from ..digital_object import DigitalObject
    from ..repository import BaseRepository

__all__ = [
    "Datastream",
]


class Datastream:
    """
    Fedora datastream, which may or may not already exist in the
    repository.

    Attributes are read from the datastream profile on first access and
    cached; assigned attributes are tracked and only those are sent upon
    {obj}`Datastream.save`:

    ```
    ds = Datastream(obj, "DC", dsLabel="Dublin Core", mimeType="text/xml")
    ds.content = "<oai_dc:dc .../>"
    ds = ds.save()
    ```

    Upon a successful {obj}`create <Datastream.create>` or
    {obj}`save <Datastream.save>` a new instance reflecting the state in
    Fedora is returned and this one is invalidated.

    :param digital_object: Object owning this datastream
    :param dsid: Datastream id
    :param options: Initial attribute values, keyed by API parameter name
    """

    hooks: ClassVar[Hooks] = Hooks()
    """
    Functions invoked around initialization, {obj}`Datastream.save`,
    {obj}`Datastream.create` and {obj}`Datastream.delete` (event `destroy`).
    """

    digital_object: DigitalObject = ReadOnlyDescriptor("_digital_object")
    """
    Object owning this datastream.
    """

    dsid: str = ReadOnlyDescriptor("_dsid")
    """
    Datastream id.
    """

    control_group = AttributeDescriptor("controlGroup")
    ds_location = AttributeDescriptor("dsLocation")
    alt_ids = AttributeDescriptor("altIDs")
    label = AttributeDescriptor("dsLabel")
    versionable = AttributeDescriptor("versionable")
    ds_state = AttributeDescriptor("dsState")
    format_uri = AttributeDescriptor("formatURI")
    checksum_type = AttributeDescriptor("checksumType")
    checksum = AttributeDescriptor("checksum")
    mime_type = AttributeDescriptor("mimeType")
    log_message = AttributeDescriptor("logMessage")
    ignore_content = AttributeDescriptor("ignoreContent")
    last_modified_date = AttributeDescriptor("lastModifiedDate")

    _digital_object: DigitalObject
    _dsid: str

    # cached profile, or None if not fetched
    _profile: Profile | None = None

    _state: AttributeState
    _content: Content

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)

        # give each subclass its own registry, seeded with the parent's hooks
        if "hooks" not in cls.__dict__:
            cls.hooks = Hooks(cls.hooks)

    def __init__(self, digital_object: DigitalObject, dsid: str, **options: Any):
        with self.hooks.bracket("initialize", self):
            self._digital_object = digital_object
            self._dsid = dsid
            self._state = AttributeState()
            self._content = Content(self)

            for name, value in options.items():
                self._set(name, value, compare=False)

    def __str__(self):
        return self.str_short

    def __repr__(self):
        return str(self)

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __setitem__(self, name: str, value: Any):
        self.set(name, value)

    @property
    def str_short(self) -> str:
        """
        Get a short description of this datastream.
        """
        return f"Datastream(pid={self.pid}, dsid={self._dsid})"

    @property
    def str_summary(self) -> str:
        """
        Get a summary of this datastream, including its current state and
        changed attributes.
        """
        indent = f"\n{' '*4}"
        return indent.join([self.str_short, str(self.state), str(self._state)])

    @property
    def pid(self) -> str:
        """
        Id of owning object.
        """
        return self._digital_object.pid

    @property
    def repository(self) -> BaseRepository:
        """
        Repository of owning object.
        """
        return self._digital_object.repository

    @property
    def new(self) -> bool:
        """
        Whether this datastream doesn't exist in Fedora yet.
        """
        return not self.profile

    @property
    def state(self) -> State:
        """
        Current state.
        """
        if self.new:
            return State.CREATE
        if self.changed:
            return State.UPDATE
        return State.CLEAN

    @property
    def profile(self) -> Profile:
        """
        Datastream profile as returned by Fedora, fetched upon first access
        and cached until invalidated. Empty if the datastream doesn't exist
        or its profile couldn't be retrieved.
        """
        if self._profile is None:
            self._profile = self._fetch_profile()
        return self._profile

    @property
    def content(self) -> str | bytes | None:
        """
        Getter/setter for content, fetched upon first access.
        """
        return self._content.get()

    @content.setter
    def content(self, blob: str | bytes | IO | None):
        self._content.set(blob)

    @property
    def url(self) -> str:
        """
        URL of datastream content.
        """
        return self.repository.content_location(self.pid, self._dsid)

    @property
    def changed(self) -> bool:
        """
        Whether any attributes were set since the last synchronization.
        """
        return bool(self._state.dirty)

    @property
    def changes(self) -> dict[str, tuple[Any, Any]]:
        """
        Mapping of changed attribute to its previous and current values.
        Previous value of content is always None.
        """
        return {
            name: (self._state.previous[name], self.get(name))
            for name in self._state.dirty
        }

    def read(self) -> str | bytes | None:
        """
        Alias of {obj}`Datastream.content`.
        """
        return self.content

    def get(self, name: str) -> Any:
        """
        Get attribute by API parameter name: value set by user, else value
        from profile, else default if datastream is new.

        :raises KeyError: If attribute is unknown
        """
        attr = DS_ATTRIBUTES[name]

        if name == CONTENT:
            return self._content.get()

        if self._state.is_set(name):
            return self._state.overrides[name]

        if attr.profile_key is not None:
            value = self.profile.get(attr.profile_key)
            if value is not None:
                return value

        if self.new:
            return attr.default

        return None

    def set(self, name: str, value: Any):
        """
        Set attribute by API parameter name. Marked as changed unless
        value is the same as the current value.

        :raises KeyError: If attribute is unknown
        """
        self._set(name, value)

    def changed_attributes(self) -> set[str]:
        """
        Names of attributes set since the last synchronization.
        """
        return set(self._state.dirty)

    def is_changed(self, name: str) -> bool:
        return name in self._state.dirty

    def to_api_params(self) -> dict[str, Any]:
        """
        Get parameters to send upon create/update: defaults if new, plus
        changed attributes. The MIME type is always included if known,
        otherwise Fedora would reset it to `application/octet-stream`.
        """
        params = self._default_api_params()

        names = {n for n in self._state.dirty if n in DS_ATTRIBUTES}
        names.add("mimeType")

        for name in names:
            value = self.get(name)
            if value is not None:
                params[name] = value

        return params

    def create(self) -> Self:
        """
        Add datastream to Fedora.

        :returns: New instance reflecting the datastream in Fedora
        :raises RepositoryError: If Fedora rejects the request
        """
        with self.hooks.bracket("create", self):
            self.repository.logger.debug(f"Creating: {self.str_summary}")

            self.repository.add(self.pid, self._dsid, self.to_api_params())

            self.invalidate()
            return self._detached()

    def save(self) -> Self:
        """
        Create datastream if new, otherwise send changed attributes.

        :returns: New instance reflecting the datastream in Fedora
        :raises RepositoryError: If Fedora rejects the request
        """
        with self.hooks.bracket("save", self):
            if self.new:
                return self.create()

            self.repository.logger.debug(f"Saving: {self.str_summary}")

            self.repository.modify(self.pid, self._dsid, self.to_api_params())

            self.invalidate()
            return self._detached()

    def delete(self) -> Self:
        """
        Purge datastream from Fedora if it exists, and remove it from the
        owning object.

        :returns: This instance
        :raises RepositoryError: If Fedora rejects the request
        """
        with self.hooks.bracket("destroy", self):
            if not self.new:
                self.repository.logger.debug(f"Deleting: {self.str_short}")
                self.repository.purge(self.pid, self._dsid)

            self._digital_object.datastreams.pop(self._dsid, None)

            self.invalidate()
            return self

    def invalidate(self):
        """
        Discard cached profile and content along with user-provided values.
        Upon next access, data will be fetched from Fedora.

        This also runs after a successful create, save or delete, so the
        retired instance forgets the values it sent and reports what Fedora
        holds instead. Use the instance returned by create or save to keep
        working with the datastream.
        """
        self._profile = None
        self._state.reset()
        self._content.reset()

    def _set(self, name: str, value: Any, compare: bool = True):
        if name not in DS_ATTRIBUTES:
            raise KeyError(name)

        if name == CONTENT:
            self._content.set(value)
            return

        # skip comparison with profile while initializing so no request is made
        current = self.get(name) if compare else self._state.overrides.get(name)
        self._state.assign(name, value, current)

    def _default_api_params(self) -> dict[str, Any]:
        if self.new:
            return dict(DS_DEFAULT_ATTRIBUTES)
        return {}

    def _detached(self) -> Self:
        """
        Get a new instance for this datastream, with nothing cached.
        """
        return type(self)(self._digital_object, self._dsid)

    def _fetch_profile(self) -> Profile:
        """
        Retrieve and parse profile, treating any failure as nonexistence.
        """
        logger = self.repository.logger
        logger.debug(f"Fetching profile for {self}")

        try:
            document = self.repository.fetch_profile(self.pid, self._dsid)
        except Exception as e:
            # any transport failure reads as nonexistence
            logger.warning(
                f"Failed to fetch profile, assuming {self} doesn't exist: {e}"
            )
            return {}

        if document is None:
            return {}

        try:
            return parse_profile(document)
        except ProfileParseError as e:
            logger.warning(
                f"Failed to parse profile, assuming {self} doesn't exist: {e}"
            )
            return {}
