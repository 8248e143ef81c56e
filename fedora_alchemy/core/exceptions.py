__all__ = [
    "ReadOnlyError",
    "RepositoryError",
    "NotFoundError",
    "ProfileParseError",
]


class ReadOnlyError(Exception):
    """
    Raised when user attempts to write a field which is read-only.
    """

    def __init__(self, field: str, entity):
        super().__init__(f"Attempt to set read-only field {field} of {entity}")


class RepositoryError(Exception):
    """
    Raised when Fedora rejects a request or returns an unexpected status.

    Raised unchanged to the user from {obj}`Datastream.create`,
    {obj}`Datastream.save` and {obj}`Datastream.delete`; pending changes
    are kept so the operation may be retried.
    """

    status: int | None
    reason: str | None
    url: str | None

    def __init__(
        self,
        status: int | None = None,
        reason: str | None = None,
        url: str | None = None,
    ):
        self.status = status
        self.reason = reason
        self.url = url
        super().__init__(f"status={status}, reason={reason}, url={url}")


class NotFoundError(RepositoryError):
    """
    Raised when the requested object or datastream does not exist.
    """


class ProfileParseError(ValueError):
    """
    Raised when a datastream profile document can't be parsed.
    """
