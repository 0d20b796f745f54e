from __future__ import annotations

import json
from typing import Any

import pytest
import yaml
from click.testing import CliRunner
from hypothesis import settings

import openref.cli
from openref.openapi.builder import build_document

pytest_plugins = ["pytest_mock"]

# Register Hypothesis profile. Could be used as
# `pytest test --hypothesis-profile <profile-name>`
settings.register_profile("CI", max_examples=2000)


def _schema_ref(name: str) -> dict[str, str]:
    return {"$ref": f"#/components/schemas/{name}"}


@pytest.fixture
def ref():
    """Build a local Reference Object for a schema or any other table."""

    def inner(name: str, table: str = "schemas") -> dict[str, str]:
        if table == "schemas":
            return _schema_ref(name)
        return {"$ref": f"#/components/{table}/{name}"}

    return inner


@pytest.fixture
def raw_document():
    """Raw OpenAPI document with the given components and paths."""

    def inner(*, components: dict[str, Any] | None = None, paths: dict[str, Any] | None = None, **kwargs: Any):
        document: dict[str, Any] = {
            "openapi": "3.0.3",
            "info": {"title": "Sample API", "version": "1.0.0"},
            "paths": paths or {},
            **kwargs,
        }
        if components is not None:
            document["components"] = components
        return document

    return inner


@pytest.fixture
def make_document(raw_document):
    """Built, but not yet resolved document."""

    def inner(*, location: str | None = None, **kwargs: Any):
        return build_document(raw_document(**kwargs), location=location)

    return inner


@pytest.fixture
def write_document(tmp_path):
    """Store a raw document in a temporary directory and return its path."""

    def inner(data: dict[str, Any], name: str = "openapi.yaml"):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.suffix == ".json":
            path.write_text(json.dumps(data))
        else:
            path.write_text(yaml.safe_dump(data))
        return path

    return inner


class CliWrapper:
    __slots__ = ("runner",)

    def __init__(self) -> None:
        self.runner = CliRunner()

    def main(self, *args: str, **kwargs: Any):
        return self.runner.invoke(openref.cli.openref, args, catch_exceptions=False, **kwargs)

    def resolve(self, *args: str, **kwargs: Any):
        return self.main("resolve", *args, **kwargs)


@pytest.fixture
def cli():
    """CLI runner helper.

    Provides in-process execution via `click.CliRunner`.
    """
    return CliWrapper()


@pytest.fixture
def isolated_cwd(tmp_path, monkeypatch):
    # Prevent config discovery from picking up files outside of the test directory
    (tmp_path / ".git").mkdir()
    monkeypatch.chdir(tmp_path)
    return tmp_path
