"""
Development tasks: tests with coverage, badges, formatting, static analysis
and a connection check against the Fedora repository configured in `.env`.
"""

import shutil
from pathlib import Path

from doit.task import Task
from doit.tools import create_folder

PACKAGE = "fedora_alchemy"
SOURCES = [PACKAGE, "test"]

OUT_PATH = Path("__out__")

# pytest results, consumed by the badges task
TESTS_PATH = OUT_PATH / "test"
JUNIT_PATH = TESTS_PATH / "junit.xml"
COV_PATH = TESTS_PATH / "cov"
COV_HTML_PATH = COV_PATH / "html"
COV_XML_PATH = COV_PATH / "coverage.xml"

MYPY_PATH = OUT_PATH / "analysis" / "mypy"

BADGES_PATH = Path("badges")
BADGES = {
    "tests": (JUNIT_PATH, BADGES_PATH / "tests.svg"),
    "coverage": (COV_XML_PATH, BADGES_PATH / "cov.svg"),
}


def cleanup_dir(output_dir: Path):
    if output_dir.exists():
        shutil.rmtree(output_dir)


def check_repository() -> bool:
    """
    Connect to the repository given by `FEDORA_*` variables and log the
    result.
    """
    import requests

    from fedora_alchemy import RepositoryError
    from fedora_alchemy.tools.config import RepositoryConfig, setup_logging

    logger = setup_logging()
    config = RepositoryConfig.from_env()

    with config.create_repository(logger=logger) as repository:
        try:
            repository.describe()
        except (RepositoryError, requests.RequestException):
            return False

    logger.info(f"Connected to {config.host}")
    return True


def task_pytest() -> Task:
    """
    Run pytest and generate coverage reports.
    """

    args = [
        "pytest",
        f"--cov={PACKAGE}",
        f"--cov-report=html:{COV_HTML_PATH}",
        f"--cov-report=xml:{COV_XML_PATH}",
        f"--junitxml={JUNIT_PATH}",
    ]

    return Task(
        "test",
        actions=[(create_folder, [COV_PATH]), " ".join(args)],
        targets=[f"{COV_HTML_PATH}/index.html", COV_XML_PATH, JUNIT_PATH],
        file_dep=[],
        clean=[(cleanup_dir, [TESTS_PATH])],
    )


def task_badges() -> Task:
    """
    Generate test and coverage badges from pytest results.
    """

    actions: list = [(create_folder, [BADGES_PATH])]
    for kind, (source, badge) in BADGES.items():
        actions.append(f"genbadge {kind} -i {source} -o {badge}")

    return Task(
        "badges",
        actions=actions,
        targets=[badge for _, badge in BADGES.values()],
        file_dep=[source for source, _ in BADGES.values()],
    )


def task_format() -> Task:
    """
    Run formatters.
    """
    sources = " ".join(SOURCES)

    return Task(
        "format",
        actions=[
            "autoflake --remove-all-unused-imports --remove-unused-variables"
            f" -i -r {sources}",
            f"isort {sources}",
            f"black {sources}",
            "toml-sort -i pyproject.toml",
        ],
        targets=[],
        file_dep=[],
    )


def task_analysis() -> Task:
    """
    Run static analysis tools.
    """

    return Task(
        "analysis",
        actions=[
            f"mypy --html-report {MYPY_PATH / 'html'}"
            f" --cobertura-xml-report {MYPY_PATH / 'xml'} {PACKAGE}",
            f"pyright {PACKAGE}",
        ],
        targets=[],
        file_dep=[],
        clean=[(cleanup_dir, [MYPY_PATH])],
    )


def task_ping() -> Task:
    """
    Check the connection to the configured Fedora repository.
    """

    return Task(
        "ping",
        actions=[check_repository],
        targets=[],
        file_dep=[],
        uptodate=[False],
    )
