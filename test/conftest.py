import logging
from typing import Any, Generator

from pytest import Config, FixtureRequest, fixture

from fedora_alchemy import (
    DS_ATTRIBUTES,
    MANAGEMENT_NS,
    BaseRepository,
    Datastream,
    DigitalObject,
    NotFoundError,
    RepositoryError,
    parse_profile,
)

logging.basicConfig(level=logging.WARNING)

PID = "test:1"
DSID = "DS1"

MARKERS = [
    "profile",
    "content",
    "fail",
]


def pytest_configure(config: Config) -> None:
    for marker in MARKERS:
        config.addinivalue_line("markers", marker)


def make_profile_xml(
    fields: dict[str, str | list[str]], namespaced: bool = True
) -> str:
    """
    Generate a datastream profile document as returned by Fedora.
    """
    xmlns = f' xmlns="{MANAGEMENT_NS}"' if namespaced else ""

    elements: list[str] = []
    for name, value in fields.items():
        values = value if isinstance(value, list) else [value]
        for v in values:
            elements.append(f"<{name}>{v}</{name}>")

    body = "".join(elements)
    return f'<?xml version="1.0" encoding="UTF-8"?><datastreamProfile{xmlns} pid="{PID}" dsID="{DSID}">{body}</datastreamProfile>'


class FakeRepository(BaseRepository):
    """
    In-memory repository recording each call made to it.
    """

    profiles: dict[tuple[str, str], str]
    contents: dict[tuple[str, str], Any]
    calls: list[tuple]

    # names of methods which should raise RepositoryError
    fail: set[str]

    def __init__(self):
        super().__init__(logging.getLogger("test"))
        self.profiles = dict()
        self.contents = dict()
        self.calls = list()
        self.fail = set()

    def calls_to(self, method: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == method]

    def fetch_profile(self, pid: str, dsid: str) -> str | None:
        self._record("fetch_profile", pid, dsid)
        return self.profiles.get((pid, dsid))

    def fetch_content(self, pid: str, dsid: str) -> Any:
        self._record("fetch_content", pid, dsid)
        return self.contents.get((pid, dsid))

    def content_location(self, pid: str, dsid: str) -> str:
        return f"http://fedora.test/objects/{pid}/datastreams/{dsid}/content"

    def add(self, pid: str, dsid: str, params: dict[str, Any]):
        self._record("add", pid, dsid, dict(params))

        if (pid, dsid) in self.profiles:
            raise RepositoryError(500, "Datastream already exists")

        self._store(pid, dsid, params, {})

    def modify(self, pid: str, dsid: str, params: dict[str, Any]):
        self._record("modify", pid, dsid, dict(params))

        if (pid, dsid) not in self.profiles:
            raise NotFoundError(404, "Not Found")

        self._store(pid, dsid, params, self.stored_fields(pid, dsid))

    def purge(self, pid: str, dsid: str):
        self._record("purge", pid, dsid)

        if (pid, dsid) not in self.profiles:
            raise NotFoundError(404, "Not Found")

        del self.profiles[(pid, dsid)]
        self.contents.pop((pid, dsid), None)

    def stored_fields(self, pid: str, dsid: str) -> dict[str, Any]:
        return parse_profile(self.profiles[(pid, dsid)])

    def _record(self, method: str, *args):
        self.calls.append((method, *args))

        if method in self.fail:
            raise RepositoryError(500, f"Injected failure: {method}")

    def _store(
        self,
        pid: str,
        dsid: str,
        params: dict[str, Any],
        fields: dict[str, Any],
    ):
        fields = dict(fields)

        for name, value in params.items():
            profile_key = DS_ATTRIBUTES[name].profile_key
            if profile_key is not None:
                fields[profile_key] = (
                    str(value).lower() if isinstance(value, bool) else value
                )

        if "content" in params:
            self.contents[(pid, dsid)] = params["content"]

        self.profiles[(pid, dsid)] = make_profile_xml(fields)


@fixture
def repository(request: FixtureRequest) -> FakeRepository:
    """
    Create an in-memory repository.

    Supports seeding the test datastream using markers like:

    @mark.profile({"dsLabel": "Foo"})
    @mark.profile({"dsLabel": "Foo"}, namespaced=False)
    @mark.content(b"payload")
    @mark.fail("modify")
    """
    repository = FakeRepository()

    if marker := request.node.get_closest_marker("profile"):
        fields = marker.args[0]
        namespaced = marker.kwargs.get("namespaced", True)
        repository.profiles[(PID, DSID)] = make_profile_xml(fields, namespaced)

    if marker := request.node.get_closest_marker("content"):
        repository.contents[(PID, DSID)] = marker.args[0]

    for marker in request.node.iter_markers("fail"):
        repository.fail |= set(marker.args)

    return repository


@fixture
def digital_object(repository: FakeRepository) -> DigitalObject:
    return DigitalObject(PID, repository)


@fixture
def ds(digital_object: DigitalObject) -> Generator[Datastream, None, None]:
    """
    Get datastream registered with the test object.
    """
    yield digital_object.datastream(DSID)


@fixture
def hooks() -> Generator[type[Datastream], None, None]:
    """
    Get a datastream subclass with its own hooks, so registrations don't
    leak between tests.
    """

    class HookedDatastream(Datastream):
        pass

    yield HookedDatastream
