from __future__ import annotations

from activecollab_client.response import Response


def test_json_response_parsed() -> None:
    r = Response(http_status=200, raw_body=b'{"a": 1}', content_type="application/json; charset=utf-8")
    assert r.is_ok()
    assert r.is_json()
    assert r.get_json() == {"a": 1}


def test_vendor_json_content_type() -> None:
    r = Response(http_status=200, raw_body=b"[1]", content_type="application/problem+json")
    assert r.is_json()
    assert r.get_json() == [1]


def test_non_json_response_has_no_json() -> None:
    r = Response(http_status=500, raw_body=b"<html>oops</html>", content_type="text/html")
    assert not r.is_ok()
    assert not r.is_json()
    assert r.get_json() is None
    assert r.get_body() == "<html>oops</html>"


def test_malformed_json_returns_none() -> None:
    r = Response(http_status=200, raw_body=b"{broken", content_type="application/json")
    assert r.is_json()
    assert r.get_json() is None


def test_repr_omits_body() -> None:
    r = Response(http_status=200, raw_body=b"secret-token", content_type="text/plain")
    assert "secret-token" not in repr(r)


def test_json_null_is_valid_json() -> None:
    r = Response(http_status=200, raw_body=b"null", content_type="application/json")
    assert r.has_valid_json()
    assert r.get_json() is None


def test_undecodable_json_is_not_valid() -> None:
    assert not Response(http_status=200, raw_body=b"{broken", content_type="application/json").has_valid_json()
    assert not Response(http_status=200, raw_body=b"{}", content_type="text/plain").has_valid_json()
