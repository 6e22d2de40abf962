"""Unit tests for the CLI commands, with respx standing in for the server."""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest
import respx
from typer.testing import CliRunner

from publisher_directory.cli import app
from publisher_directory.publisher.endpoints import hash_prefix_hex

runner = CliRunner()


class TestValidate:
    def test_defaults_are_valid(self):
        result = runner.invoke(app, ["validate"])
        assert result.exit_code == 0
        assert "pcdn.brave.com" in result.output

    def test_missing_file(self, tmp_path: Path):
        result = runner.invoke(app, ["validate", "--config", str(tmp_path / "x.yaml")])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_invalid_file(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("query_prefix_bytes: 99\n")
        result = runner.invoke(app, ["validate", "--config", str(path)])
        assert result.exit_code == 1
        assert "Validation error" in result.output


class TestPrefix:
    def test_prints_prefix_and_url(self):
        result = runner.invoke(app, ["prefix", "brave.com"])
        assert result.exit_code == 0
        expected = hash_prefix_hex("brave.com", 2)
        assert f"prefix: {expected}" in result.output
        assert f"pcdn.brave.com/publishers/prefix/{expected}" in result.output
        assert "pcdn.brave.com/publishers/prefixes" in result.output


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "directory.yaml"
    path.write_text(
        "publisher_server_url: http://publishers.test\n"
        "transport:\n"
        "  retry:\n"
        "    max_attempts: 1\n"
    )
    return path


def _route_url(publisher_key: str) -> str:
    return f"http://publishers.test/prefix/{hash_prefix_hex(publisher_key, 2)}"


class TestLookup:
    def test_duplicate_keys_share_one_request(
        self, config_file: Path, encode_body, respx_mock: respx.MockRouter
    ):
        route = respx_mock.get(_route_url("brave.com")).mock(
            return_value=httpx.Response(
                200,
                content=encode_body(
                    [{"key": "brave.com", "state": 1, "address": "wallet-1"}]
                ),
            )
        )
        result = runner.invoke(
            app, ["lookup", "brave.com", "brave.com", "--config", str(config_file)]
        )
        assert result.exit_code == 0, result.output
        assert route.call_count == 1
        assert "Publishers" in result.output
        assert result.output.count("verified") == 2
        assert "wallet-1" in result.output

    def test_unknown_publisher_is_not_verified(
        self, config_file: Path, respx_mock: respx.MockRouter
    ):
        respx_mock.get(_route_url("nobody.example")).mock(
            return_value=httpx.Response(404)
        )
        result = runner.invoke(
            app, ["lookup", "nobody.example", "--config", str(config_file)]
        )
        assert result.exit_code == 0, result.output
        assert "not_verified" in result.output

    def test_server_error_exits_non_zero(
        self, config_file: Path, respx_mock: respx.MockRouter
    ):
        respx_mock.get(_route_url("brave.com")).mock(return_value=httpx.Response(500))
        result = runner.invoke(app, ["lookup", "brave.com", "--config", str(config_file)])
        assert result.exit_code == 1
        assert "unavailable" in result.output
