"""Tests for the CLI implementation."""

import json

import pytest
import typer
from typer.testing import CliRunner

from fetcheither.cli import app, parse_headers


class TestCLI:
    """Test the CLI functionality."""

    @pytest.fixture
    def runner(self):
        """CLI test runner."""
        return CliRunner()

    def test_single_url_json_pretty(self, runner, httpserver):
        """Test single URL output with pretty JSON."""
        httpserver.expect_request("/json").respond_with_json({"name": "value"})

        result = runner.invoke(app, [httpserver.url_for("/json")])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload == {"success": True, "error": None, "value": {"name": "value"}}

    def test_multiple_urls_jsonl(self, runner, httpserver):
        """Test multiple URLs with JSONL output."""
        httpserver.expect_request("/a").respond_with_json({"n": 1})
        httpserver.expect_request("/b").respond_with_data("two", content_type="text/plain")

        result = runner.invoke(app, [httpserver.url_for("/a"), httpserver.url_for("/b")])

        assert result.exit_code == 0
        lines = result.stdout.strip().splitlines()
        assert [json.loads(line)["value"] for line in lines] == [{"n": 1}, "two"]

    def test_force_jsonl_single_url(self, runner, httpserver):
        """Test --jsonl flag forces JSONL even for a single URL."""
        httpserver.expect_request("/json").respond_with_json({"n": 1})

        result = runner.invoke(app, ["--jsonl", httpserver.url_for("/json")])

        assert result.exit_code == 0
        lines = result.stdout.strip().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["success"] is True

    def test_http_error_exit_code(self, runner, httpserver):
        """Test that a failed result gives exit code 1 and the error object."""
        httpserver.expect_request("/error").respond_with_json({"error": "Server error"}, status=500)

        result = runner.invoke(app, [httpserver.url_for("/error")])

        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["success"] is False
        assert payload["error"]["kind"] == "http"
        assert payload["error"]["code"] == 500
        assert payload["error"]["properties"] == {"error": "Server error"}
        assert "stack" not in payload["error"]

    def test_method_headers_and_data(self, runner, httpserver):
        httpserver.expect_request(
            "/echo", method="POST", headers={"X-Token": "abc"}, data="hello",
        ).respond_with_json({"ok": True})

        result = runner.invoke(app, [
            "-X", "post", "-H", "X-Token: abc", "-d", "hello", httpserver.url_for("/echo"),
        ])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["value"] == {"ok": True}

    def test_sync_mode(self, runner, httpserver):
        httpserver.expect_request("/json").respond_with_json([1, 2])

        result = runner.invoke(app, ["--sync", httpserver.url_for("/json")])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["value"] == [1, 2]

    def test_stdin_urls(self, runner, httpserver):
        httpserver.expect_request("/a").respond_with_json({"n": 1})
        url = httpserver.url_for("/a")

        result = runner.invoke(app, ["-"], input=f"{url}\n\n{url}\n")

        assert result.exit_code == 0
        assert len(result.stdout.strip().splitlines()) == 2

    def test_output_file(self, runner, httpserver, tmp_path):
        httpserver.expect_request("/json").respond_with_json({"n": 1})
        out = tmp_path / "out.json"

        result = runner.invoke(app, ["-o", str(out), httpserver.url_for("/json")])

        assert result.exit_code == 0
        assert json.loads(out.read_text())["value"] == {"n": 1}

    def test_no_urls(self, runner):
        result = runner.invoke(app, [])
        assert result.exit_code == 1

    def test_bad_log_level(self, runner, httpserver):
        result = runner.invoke(app, ["--log-level", "chatty", httpserver.url_for("/json")])
        assert result.exit_code == 2


class TestParseHeaders:
    """Test header option parsing."""

    def test_pairs(self):
        assert parse_headers(["Accept: text/plain", "X-A:1"]) == {"Accept": "text/plain", "X-A": "1"}

    def test_value_with_colon(self):
        assert parse_headers(["Referer: http://example.com"]) == {"Referer": "http://example.com"}

    def test_rejects_missing_colon(self):
        with pytest.raises(typer.BadParameter):
            parse_headers(["oops"])
