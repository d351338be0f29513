import pytest

from HTTPSling.exceptions import InvalidUtf8
from HTTPSling.models import HeaderMap, HTTPRequest, ParsedTarget, RawResponse


def test_header_map_is_case_insensitive():
    headers = HeaderMap({"Content-Type": "text/plain"})
    assert "content-type" in headers
    assert headers.get("CONTENT-TYPE") == "text/plain"
    assert headers.get("missing") is None
    assert headers.get("missing", "x") == "x"


def test_header_map_keeps_first_spelling_and_order():
    headers = HeaderMap()
    headers.add("X-One", "1")
    headers.add("Accept", "*/*")
    headers.add("x-one", "2")
    assert list(headers.items()) == [("X-One", "1"), ("X-One", "2"), ("Accept", "*/*")]
    assert headers.get_all("X-ONE") == ["1", "2"]
    assert len(headers) == 2


def test_header_map_set_replaces_values():
    headers = HeaderMap([("Cookie", "a=1"), ("Cookie", "b=2")])
    headers.set("cookie", "c=3")
    assert list(headers) == [("Cookie", "c=3")]


def test_header_map_remove():
    headers = HeaderMap({"A": "1", "B": "2"})
    headers.remove("a")
    headers.remove("not-there")
    assert list(headers) == [("B", "2")]


def test_header_map_copy_is_independent():
    headers = HeaderMap({"A": "1"})
    clone = headers.copy()
    clone.add("B", "2")
    assert "B" not in headers
    assert clone == HeaderMap([("a", "1"), ("b", "2")])


@pytest.mark.parametrize("name, value", [
    ("X-Bad", "one\r\nX-Injected: two"),
    ("X-Bad", "line\nbreak"),
    ("Bad Name", "v"),
    ("Bad:Name", "v"),
    ("", "v"),
])
def test_header_map_rejects_unsafe_fields(name, value):
    with pytest.raises(ValueError):
        HeaderMap().add(name, value)


def test_header_map_rejects_non_strings():
    with pytest.raises(TypeError):
        HeaderMap().add("X-Count", 3)


def test_http_request_normalizes_method_and_headers():
    request = HTTPRequest(method="patch", url="http://localhost:8888/", headers={"X-A": "1"})
    assert request.method == "PATCH"
    assert isinstance(request.headers, HeaderMap)
    assert request.headers.get("x-a") == "1"
    assert request.body is None


def test_http_request_default_headers_not_shared():
    first = HTTPRequest(method="GET", url="http://localhost:8888/")
    second = HTTPRequest(method="GET", url="http://localhost:8888/")
    first.headers.add("X-A", "1")
    assert len(second.headers) == 0


def test_parsed_target_without_query():
    target = ParsedTarget(host="localhost", port=80, path="/")
    assert target.path_and_query == "/"
    assert target.authority == "localhost:80"


def test_raw_response_text():
    response = RawResponse(data="HTTP/1.1 200 OK\r\n\r\nhé".encode("utf-8"))
    assert response.text().endswith("hé")
    assert response.size == len(response.data)


def test_raw_response_invalid_utf8():
    response = RawResponse(data=b"HTTP/1.1 200 OK\r\n\r\n\xff\xfe")
    with pytest.raises(InvalidUtf8) as excinfo:
        response.text()
    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)


@pytest.mark.parametrize("name, value", [
    ("X-Name", "日本"),
    ("X-Nämé", "v"),
])
def test_header_map_rejects_fields_that_cannot_go_on_the_wire(name, value):
    with pytest.raises(ValueError):
        HeaderMap().add(name, value)


def test_header_map_accepts_latin1_value():
    headers = HeaderMap({"X-Name": "café"})
    assert headers.get("x-name") == "café"
