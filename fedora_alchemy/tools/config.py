"""
Interface to configuration as persisted in .yaml file or environment.
"""
from __future__ import annotations

import logging
import os
from logging import Logger
from typing import Any, Self

import dotenv
from pydantic import field_validator, model_validator
from rich.console import Console
from rich.logging import RichHandler

from ..core import REQUEST_TIMEOUT, Repository
from .yaml_model import BaseYamlModel

__all__ = [
    "RepositoryConfig",
    "setup_logging",
]

ENV_PREFIX = "FEDORA_"


class RepositoryConfig(BaseYamlModel):
    """
    Encapsulates info for a Fedora repository.
    """

    host: str
    """
    Base URL, e.g. `http://localhost:8080/fedora`.
    """

    user: str | None = None
    password: str | None = None

    timeout: float = REQUEST_TIMEOUT
    """
    Timeout for each request, in seconds.
    """

    @field_validator("host")
    def validate_host(cls, value: str) -> str:
        value = value.rstrip("/")
        if not value:
            raise ValueError("host must not be empty")
        return value

    @field_validator("timeout")
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError(f"timeout must be positive: {value}")
        return value

    @model_validator(mode="after")
    def validate_credentials(self) -> Self:
        if (self.user is None) != (self.password is None):
            raise ValueError("user and password must be provided together")
        return self

    @classmethod
    def from_env(cls, load_dotenv: bool = True) -> Self:
        """
        Get config from environment variables `FEDORA_HOST`, `FEDORA_USER`,
        `FEDORA_PASSWORD` and `FEDORA_TIMEOUT`, loading `.env` first if
        requested.
        """
        if load_dotenv:
            dotenv.load_dotenv()

        fields: dict[str, Any] = dict()
        for field in ["host", "user", "password", "timeout"]:
            value = os.environ.get(f"{ENV_PREFIX}{field.upper()}")
            if value is not None:
                fields[field] = value

        return cls(**fields)

    def create_repository(self, *, logger: Logger | None = None) -> Repository:
        """
        Get repository from this config's fields.
        """
        return Repository(
            self.host,
            self.user,
            self.password,
            timeout=self.timeout,
            logger=logger,
        )


def setup_logging(
    name: str = "fedora-alchemy", level: int = logging.INFO
) -> Logger:
    """
    Get a logger writing to the console through `rich`.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.handlers:
        # already set up
        return logger

    rich_handler = RichHandler(
        console=Console(),
        rich_tracebacks=True,
        show_level=True,
        show_time=True,
        show_path=False,
    )
    rich_handler.setFormatter(logging.Formatter("%(message)s"))

    logger.addHandler(rich_handler)
    logger.propagate = False

    return logger
