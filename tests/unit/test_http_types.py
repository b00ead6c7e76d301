"""Unit tests for request types, headers and derived values."""

import dataclasses

import pytest

from session_server.domain.http_types import (
    Headers,
    HttpMethod,
    HttpRequest,
    HttpStatus,
    content_type_for_path,
    extract_session_id,
)


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/css/styles.css", "text/css"),
        ("/js/scripts.js", "application/javascript"),
        ("/index.html", "text/html"),
        ("/login", "text/html"),
        ("/", "text/html"),
        ("/json/data.json", "text/html"),
    ],
)
def test_content_type_is_derived_from_extension(path, expected):
    """Only .css and .js change the default text/html."""
    assert content_type_for_path(path) == expected


def test_request_content_type_ignores_client_header():
    """The client's Content-Type never drives the response type."""
    request = HttpRequest(
        HttpMethod.GET,
        "/css/styles.css",
        headers={"Content-Type": "application/json"},
    )
    assert request.content_type == "text/css"


@pytest.mark.parametrize(
    ("cookie", "expected"),
    [
        ("JSESSIONID=abc-123", "abc-123"),
        ("theme=dark; JSESSIONID=abc-123; lang=en", "abc-123"),
        ("JSESSIONID=abc-123;", "abc-123"),
        ("theme=dark", None),
        ("JSESSIONID=", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_session_id(cookie, expected):
    """The identifier runs from JSESSIONID= to the next ; or the end."""
    assert extract_session_id(cookie) == expected


def test_request_session_id_reads_cookie_case_insensitively():
    """session_id finds the Cookie header regardless of spelling."""
    request = HttpRequest(HttpMethod.GET, "/login", headers={"cookie": "JSESSIONID=xyz"})
    assert request.session_id == "xyz"


def test_form_body_is_decoded():
    """Form bodies decode + and percent escapes with last-write-wins."""
    request = HttpRequest(
        HttpMethod.POST,
        "/register",
        body=b"account=u1&password=p+1&email=e1%40example.com&account=u2",
    )
    assert request.form == {
        "account": "u2",
        "password": "p 1",
        "email": "e1@example.com",
    }


def test_request_is_immutable():
    """Requests cannot be modified once constructed."""
    request = HttpRequest(HttpMethod.GET, "/", query_params={"a": "1"})
    with pytest.raises(dataclasses.FrozenInstanceError):
        request.path = "/other"
    with pytest.raises(TypeError):
        request.query_params["a"] = "2"


def test_headers_last_duplicate_wins_and_len_counts_names():
    """Repeated names collapse to the last value."""
    headers = Headers([("X-A", "1"), ("x-a", "2"), ("X-B", "3")])
    assert headers["X-A"] == "2"
    assert len(headers) == 2
    assert "x-b" in headers
    assert headers.get("missing") is None


def test_method_from_token_is_case_sensitive():
    """Method tokens are compared exactly."""
    assert HttpMethod.from_token("GET") is HttpMethod.GET
    assert HttpMethod.from_token("get") is HttpMethod.OTHER


def test_status_lines():
    """Status members render the HTTP/1.1 status line."""
    assert HttpStatus.OK.status_line == "HTTP/1.1 200 OK"
    assert HttpStatus.FOUND.status_line == "HTTP/1.1 302 Found"
    assert HttpStatus.from_code(405) is HttpStatus.METHOD_NOT_ALLOWED
    with pytest.raises(ValueError):
        HttpStatus.from_code(418)
