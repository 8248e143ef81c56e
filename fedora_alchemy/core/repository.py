"""
Interface to a Fedora repository's REST API.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from logging import Logger
from typing import IO, Any
from urllib.parse import quote

import requests

from .exceptions import NotFoundError, RepositoryError

__all__ = [
    "BaseRepository",
    "Repository",
    "REQUEST_TIMEOUT",
]


REQUEST_TIMEOUT = 10.0
"""
Default timeout for requests to Fedora.
"""

type Content = str | bytes | IO
"""
Datastream content as accepted or returned by a repository.
"""


class BaseRepository(ABC):
    """
    Implements interface to backing store for datastreams. Fetch methods
    return `None` if the datastream doesn't exist; any other failure raises
    {obj}`RepositoryError`.
    """

    _logger: Logger

    def __init__(self, logger: Logger | None = None):
        self._logger = logger or logging.getLogger()

    @property
    def logger(self) -> Logger:
        return self._logger

    @abstractmethod
    def fetch_profile(self, pid: str, dsid: str) -> str | bytes | None:
        """
        Retrieve datastream profile document, or None if it doesn't exist.
        """
        ...

    @abstractmethod
    def fetch_content(self, pid: str, dsid: str) -> Content | None:
        """
        Retrieve datastream content, or None if it doesn't exist.
        """
        ...

    @abstractmethod
    def content_location(self, pid: str, dsid: str) -> str:
        """
        Get URL of datastream content.
        """
        ...

    @abstractmethod
    def add(self, pid: str, dsid: str, params: dict[str, Any]):
        """
        Create datastream.
        """
        ...

    @abstractmethod
    def modify(self, pid: str, dsid: str, params: dict[str, Any]):
        """
        Update datastream.
        """
        ...

    @abstractmethod
    def purge(self, pid: str, dsid: str):
        """
        Delete datastream.
        """
        ...


class Repository(BaseRepository):
    """
    Fedora repository accessed over its REST API using `requests`.

    :param host: Base URL of Fedora, e.g. `http://localhost:8080/fedora`
    :param user: Username for HTTP basic authentication
    :param password: Password for HTTP basic authentication
    :param timeout: Timeout for each request, in seconds
    :param logger: Logger to use, or `None` to use default logger
    """

    _host: str
    _timeout: float
    _http: requests.Session

    def __init__(
        self,
        host: str,
        user: str | None = None,
        password: str | None = None,
        *,
        timeout: float = REQUEST_TIMEOUT,
        logger: Logger | None = None,
    ):
        super().__init__(logger)

        self._host = host.rstrip("/")
        self._timeout = timeout

        self._http = requests.Session()
        if user is not None:
            self._http.auth = (user, password or "")

    def __str__(self):
        return f"Repository(host={self._host})"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, traceback):
        self.close()

    @property
    def host(self) -> str:
        """
        Host as configured by user.
        """
        return self._host

    @property
    def http(self) -> requests.Session:
        """
        Underlying HTTP session. Exposed for manual low-level requests and
        for mounting custom transport adapters.
        """
        return self._http

    def close(self):
        self._http.close()

    def describe(self) -> str:
        """
        Get repository description; useful to check connectivity and
        credentials.
        """
        try:
            response = self._request("GET", "describe", params={"xml": "true"})
        except (RepositoryError, requests.RequestException) as e:
            self._logger.error(f"Failed to connect to Fedora host='{self._host}': {e}")
            raise

        self._logger.debug(f"Connected to Fedora host '{self._host}'")
        return response.text

    def fetch_profile(self, pid: str, dsid: str) -> str | None:
        try:
            response = self._request(
                "GET", self._datastream_path(pid, dsid), params={"format": "xml"}
            )
        except NotFoundError:
            return None
        return response.text

    def fetch_content(self, pid: str, dsid: str) -> bytes | None:
        try:
            response = self._request("GET", f"{self._datastream_path(pid, dsid)}/content")
        except NotFoundError:
            return None
        return response.content

    def content_location(self, pid: str, dsid: str) -> str:
        return f"{self._host}/{self._datastream_path(pid, dsid)}/content"

    def add(self, pid: str, dsid: str, params: dict[str, Any]):
        self._flush("POST", pid, dsid, params)

    def modify(self, pid: str, dsid: str, params: dict[str, Any]):
        self._flush("PUT", pid, dsid, params)

    def purge(self, pid: str, dsid: str):
        self._logger.debug(f"Purging datastream {pid}/{dsid}")
        self._request("DELETE", self._datastream_path(pid, dsid))

    def _flush(self, method: str, pid: str, dsid: str, params: dict[str, Any]):
        """
        Send datastream parameters, with content (if any) as request body.
        """
        params = dict(params)
        content = params.pop("content", None)

        self._logger.debug(
            f"{method} datastream {pid}/{dsid}: params={sorted(params)}, content={content is not None}"
        )

        headers: dict[str, str] = {}
        if content is not None:
            headers["Content-Type"] = params.get("mimeType", "application/octet-stream")

        self._request(
            method,
            self._datastream_path(pid, dsid),
            params=_encode_params(params),
            data=_encode_content(content),
            headers=headers,
        )

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self._host}/{path}"
        response = self._http.request(method, url, timeout=self._timeout, **kwargs)

        if response.status_code == 404:
            raise NotFoundError(response.status_code, response.reason, url)

        if not response.ok:
            raise RepositoryError(response.status_code, response.reason, url)

        return response

    def _datastream_path(self, pid: str, dsid: str) -> str:
        return f"objects/{quote(pid, safe=':')}/datastreams/{quote(dsid, safe='')}"


def _encode_params(params: dict[str, Any]) -> dict[str, str | list[str]]:
    """
    Convert parameter values to strings as expected by Fedora.
    """

    def encode(value: Any) -> str:
        if isinstance(value, bool):
            return str(value).lower()
        return str(value)

    encoded: dict[str, str | list[str]] = dict()

    for key, value in params.items():
        if isinstance(value, (list, tuple)):
            encoded[key] = [encode(v) for v in value]
        else:
            encoded[key] = encode(value)

    return encoded


def _encode_content(content: Content | None) -> bytes | IO | None:
    if isinstance(content, str):
        return content.encode("utf-8")
    return content
