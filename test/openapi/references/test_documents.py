import json

import pytest
import requests

from openref.core import USER_AGENT
from openref.core.errors import LoaderError, LoaderErrorKind
from openref.openapi.references.documents import (
    ContentType,
    detect_content_type,
    load_content,
    load_file,
    load_remote_uri,
    make_loader,
)

DOCUMENT = {"openapi": "3.0.3", "info": {"title": "Common", "version": "1"}, "paths": {}}


@pytest.mark.parametrize(
    "kwargs, expected",
    (
        ({"headers": {"Content-Type": "application/json"}}, ContentType.JSON),
        ({"headers": {"Content-Type": "application/x-yaml"}}, ContentType.YAML),
        ({"path": "openapi.yml"}, ContentType.YAML),
        ({"path": "openapi.JSON"}, ContentType.JSON),
        ({"headers": {"Content-Type": "text/plain"}, "path": "/api/openapi.yaml"}, ContentType.YAML),
        ({"path": "openapi"}, ContentType.UNKNOWN),
    ),
)
def test_detect_content_type(kwargs, expected):
    assert detect_content_type(**kwargs) == expected


def test_load_content_yaml_fallback():
    assert load_content("openapi: 3.0.3", ContentType.UNKNOWN) == {"openapi": "3.0.3"}


@pytest.mark.parametrize("content_type", (ContentType.JSON, ContentType.YAML))
def test_load_content_syntax_error(content_type):
    with pytest.raises(LoaderError) as exc:
        load_content("{", content_type)
    assert exc.value.kind == LoaderErrorKind.SYNTAX_ERROR
    assert exc.value.extras


def test_load_file(write_document):
    path = write_document(DOCUMENT, "common.yaml")
    document = load_file(str(path))
    assert document.info["title"] == "Common"
    assert document.location == path.absolute().as_uri()


def test_load_file_uri(write_document):
    path = write_document(DOCUMENT, "common.json")
    document = load_file(path.as_uri())
    assert document.location == path.as_uri()


@pytest.mark.parametrize(
    "location",
    ("file://example.com/common.json", "common.json?version=1", "ftp://example.com/common.json"),
    ids=["host", "query", "scheme"],
)
def test_load_file_unsupported(location):
    with pytest.raises(LoaderError) as exc:
        load_file(location)
    assert exc.value.kind == LoaderErrorKind.UNSUPPORTED_URI
    assert exc.value.url == location


def test_load_file_missing(tmp_path):
    with pytest.raises(LoaderError) as exc:
        load_file(str(tmp_path / "missing.yaml"))
    assert exc.value.kind == LoaderErrorKind.FILE_NOT_FOUND


def test_load_file_is_directory(tmp_path):
    with pytest.raises(LoaderError) as exc:
        load_file(str(tmp_path))
    assert exc.value.kind == LoaderErrorKind.UNREADABLE


def test_load_file_invalid_content(tmp_path):
    path = tmp_path / "invalid.json"
    path.write_text("[1, 2")
    with pytest.raises(LoaderError) as exc:
        load_file(str(path))
    assert exc.value.kind == LoaderErrorKind.SYNTAX_ERROR
    assert exc.value.url == str(path)


def test_load_file_encoding(tmp_path):
    path = tmp_path / "latin.yaml"
    path.write_bytes("openapi: 3.0.3\ninfo: {title: Caf\xe9}\n".encode("latin-1"))
    assert load_file(str(path), encoding="latin-1").info["title"] == "Caf\xe9"
    with pytest.raises(LoaderError) as exc:
        load_file(str(path))
    assert exc.value.kind == LoaderErrorKind.UNREADABLE


def _response(mocker, *, status_code=200, content_type="application/json", body=json.dumps(DOCUMENT)):
    response = requests.Response()
    response.status_code = status_code
    response.headers["Content-Type"] = content_type
    response._content = body.encode()
    response.url = "https://example.com/common.json"
    return mocker.patch("requests.get", return_value=response)


def test_load_remote(mocker):
    get = _response(mocker)
    document = load_remote_uri("https://example.com/common.json")
    assert document.location == "https://example.com/common.json"
    assert document.info["title"] == "Common"
    _, kwargs = get.call_args
    assert kwargs["headers"]["User-Agent"] == USER_AGENT
    assert kwargs["timeout"] == 10


def test_load_remote_custom_user_agent(mocker):
    get = _response(mocker)
    load_remote_uri("https://example.com/common.json", headers={"user-agent": "Custom"})
    _, kwargs = get.call_args
    assert kwargs["headers"] == {"user-agent": "Custom"}


@pytest.mark.parametrize(
    "status_code, kind",
    (
        (403, LoaderErrorKind.HTTP_FORBIDDEN),
        (404, LoaderErrorKind.HTTP_NOT_FOUND),
        (418, LoaderErrorKind.HTTP_CLIENT_ERROR),
        (503, LoaderErrorKind.HTTP_SERVER_ERROR),
    ),
)
def test_load_remote_http_error(mocker, status_code, kind):
    _response(mocker, status_code=status_code)
    with pytest.raises(LoaderError) as exc:
        load_remote_uri("https://example.com/common.json")
    assert exc.value.kind == kind


@pytest.mark.parametrize(
    "content_type, body",
    (("text/html", "<p>Hi</p>"), ("text/plain", "<!DOCTYPE html><html></html>")),
    ids=["header", "body"],
)
def test_load_remote_html(mocker, content_type, body):
    _response(mocker, content_type=content_type, body=body)
    with pytest.raises(LoaderError) as exc:
        load_remote_uri("https://example.com/common.json")
    assert exc.value.kind == LoaderErrorKind.UNEXPECTED_CONTENT_TYPE


def test_load_remote_connection_error(mocker):
    mocker.patch("requests.get", side_effect=requests.exceptions.ConnectionError("Refused"))
    with pytest.raises(LoaderError) as exc:
        load_remote_uri("https://example.com/common.json")
    assert exc.value.kind == LoaderErrorKind.CONNECTION_OTHER
    assert str(exc.value) == "Connection failed"


def test_make_loader_remote_disabled():
    load = make_loader()
    with pytest.raises(LoaderError, match="Remote references are disabled") as exc:
        load("https://example.com/common.json")
    assert exc.value.kind == LoaderErrorKind.UNSUPPORTED_URI


def test_make_loader_remote_enabled(mocker):
    _response(mocker)
    document = make_loader(allow_remote=True)("https://example.com/common.json")
    assert document.info["title"] == "Common"


def test_make_loader_local(write_document):
    path = write_document(DOCUMENT)
    assert make_loader()(str(path)).location == path.absolute().as_uri()
