"""Tests for body extraction."""

import httpx
import pytest

from fetcheither.core.extract import extract_payload, get_response_payload


def make_response(content: bytes, content_type: str | None, status: int = 200) -> httpx.Response:
    headers = {"Content-Type": content_type} if content_type is not None else {}
    return httpx.Response(status, headers=headers, content=content)


MULTIPART_BODY = (
    b"--XYZ\r\n"
    b'Content-Disposition: form-data; name="field"\r\n'
    b"\r\n"
    b"value\r\n"
    b"--XYZ\r\n"
    b'Content-Disposition: form-data; name="upload"; filename="a.txt"\r\n'
    b"Content-Type: text/plain\r\n"
    b"\r\n"
    b"hello\r\n"
    b"--XYZ--\r\n"
)


class TestStrategies:
    """Test each extraction strategy on well-formed bodies."""

    def test_json(self):
        response = make_response(b'{"name": "value", "n": [1, 2]}', "application/json")
        assert get_response_payload(response).value == {"name": "value", "n": [1, 2]}

    def test_json_null(self):
        result = get_response_payload(make_response(b"null", "application/json"))
        assert result.success
        assert result.value is None

    def test_text(self):
        response = make_response("Some text data".encode(), "text/plain")
        assert get_response_payload(response).value == "Some text data"

    def test_text_declared_charset(self):
        """Test that the charset parameter is honoured."""
        response = make_response("héllo".encode("iso-8859-1"), "text/html; charset=iso-8859-1")
        assert get_response_payload(response).value == "héllo"

    def test_xml_is_text(self):
        response = make_response(b"<a>1</a>", "application/xml")
        assert get_response_payload(response).value == "<a>1</a>"

    def test_blob(self):
        data = b"\x89PNG\r\n\x1a\n\x00\x00"
        assert get_response_payload(make_response(data, "image/png")).value == data

    def test_urlencoded_form(self):
        """Test that repeated keys become lists."""
        response = make_response(b"a=1&b=2&b=3&c=", "application/x-www-form-urlencoded")
        assert get_response_payload(response).value == {"a": "1", "b": ["2", "3"], "c": ""}

    def test_multipart_form(self):
        """Test that uploaded files come back as bytes."""
        response = make_response(MULTIPART_BODY, "multipart/form-data; boundary=XYZ")
        assert get_response_payload(response).value == {"field": "value", "upload": b"hello"}


class TestFailures:
    """Test classification of extraction failures."""

    def test_unsupported_content_type(self):
        error, value = get_response_payload(make_response(b"\x00", "application/octet-stream"))
        assert value is None
        assert error.kind == "payload"
        assert error.content_type == "application/octet-stream"
        assert error.parser is None
        assert error.message == "unsupported content type: application/octet-stream"

    def test_missing_content_type(self):
        error, _ = get_response_payload(make_response(b"abc", None))
        assert error.kind == "payload"
        assert error.content_type is None

    @pytest.mark.parametrize("body", [b'{"value": NaN}', b"{", b"", b'{"a": Infinity}'])
    def test_malformed_json(self, body):
        error, value = get_response_payload(make_response(body, "application/json"))
        assert value is None
        assert error.kind == "payload"
        assert error.message == "Failed to parse response"
        assert error.parser == "json"
        assert error.content_type == "application/json"
        assert error.stack

    def test_invalid_utf8_text(self):
        error, _ = get_response_payload(make_response(b"\xff\xfe\xfa", "text/plain; charset=utf-8"))
        assert error.kind == "payload"
        assert error.parser == "text"

    def test_unknown_charset(self):
        error, _ = get_response_payload(make_response(b"abc", "text/plain; charset=no-such-codec"))
        assert error.kind == "payload"

    def test_multipart_without_boundary(self):
        error, _ = get_response_payload(make_response(MULTIPART_BODY, "multipart/form-data"))
        assert error.kind == "payload"
        assert error.parser == "formData"

    def test_unexpected_failure_is_unknown(self):
        """Test that unrelated errors are not reported as parse failures."""
        class BrokenBody:
            status_code = 200
            headers = httpx.Headers({"Content-Type": "application/json"})

            @property
            def content(self):
                raise RuntimeError("body stream already consumed")

        error, value = extract_payload(BrokenBody(), "json")
        assert value is None
        assert error.kind == "unknown"
        assert error.message == "body stream already consumed"
        assert "RuntimeError" in error.stack
