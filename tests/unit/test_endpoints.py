"""Unit tests for publisher server endpoints and hashed prefixes."""

import hashlib

import pytest

from publisher_directory.publisher.endpoints import (
    hash_prefix_hex,
    publisher_info_url,
    publisher_list_url,
)


class TestHashPrefixHex:
    def test_matches_sha256_prefix(self):
        expected = hashlib.sha256(b"brave.com").hexdigest()[:4]
        assert hash_prefix_hex("brave.com", 2) == expected

    def test_length_is_fixed(self):
        for key in ("a", "youtube#channel:UC" + "x" * 40, "ünïcødé.example"):
            assert len(hash_prefix_hex(key, 2)) == 4
            assert len(hash_prefix_hex(key, 4)) == 8

    def test_non_positive_length_rejected(self):
        with pytest.raises(ValueError):
            hash_prefix_hex("brave.com", 0)


class TestUrls:
    def test_info_url(self):
        assert (
            publisher_info_url("https://pcdn.brave.com/publishers", "ab12")
            == "https://pcdn.brave.com/publishers/prefix/ab12"
        )

    def test_list_url(self):
        assert (
            publisher_list_url("https://pcdn.brave.com/publishers")
            == "https://pcdn.brave.com/publishers/prefixes"
        )

    def test_paths_sit_directly_under_server_base(self):
        assert publisher_info_url("http://publishers.test", "8254") == (
            "http://publishers.test/prefix/8254"
        )
        assert publisher_list_url("http://publishers.test") == (
            "http://publishers.test/prefixes"
        )
