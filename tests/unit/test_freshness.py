"""Unit tests for the publisher record freshness policy."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from structlog.testing import capture_logs

from conftest import NOW, TTL, FakeClock
from publisher_directory.config.models import (
    PUBLISHER_LIST_REFRESH_INTERVAL,
    DirectoryConfig,
)
from publisher_directory.config.options import ConfigOptionStore
from publisher_directory.publisher.freshness import FreshnessPolicy
from publisher_directory.publisher.models import ServerPublisherInfo


@pytest.fixture
def policy(options: ConfigOptionStore, clock: FakeClock) -> FreshnessPolicy:
    return FreshnessPolicy(options, clock=clock)


class TestFreshnessPolicy:
    def test_ttl_comes_from_refresh_interval_option(self, policy):
        assert policy.ttl_seconds() == TTL

    def test_exactly_ttl_old_is_fresh(self, policy):
        assert policy.is_expired(NOW - TTL) is False

    def test_one_second_past_ttl_is_expired(self, policy):
        assert policy.is_expired(NOW - TTL - 1) is True

    def test_recent_record_is_fresh(self, policy):
        assert policy.is_expired(NOW - 10) is False

    def test_never_updated_is_expired(self, policy):
        assert policy.is_expired(0) is True

    def test_missing_record_is_expired(self, policy):
        assert policy.is_expired(None) is True

    def test_accepts_server_publisher_info(self, policy):
        fresh = ServerPublisherInfo(publisher_key="k", updated_at=NOW - 5)
        stale = ServerPublisherInfo(publisher_key="k", updated_at=NOW - TTL - 5)
        assert policy.is_expired(fresh) is False
        assert policy.is_expired(stale) is True

    def test_future_timestamp_logs_and_reads_fresh(self, policy):
        with capture_logs() as logs:
            expired = policy.is_expired(NOW + 600)
        assert expired is False
        assert any(
            entry["event"] == "publisher_freshness.future_timestamp"
            and entry["log_level"] == "warning"
            for entry in logs
        )

    def test_past_timestamp_does_not_warn(self, policy):
        with capture_logs() as logs:
            policy.is_expired(NOW - 5)
        assert logs == []

    def test_ttl_is_read_on_every_check(self, clock):
        options = MagicMock()
        options.get_option.side_effect = [TTL, 10]
        policy = FreshnessPolicy(options, clock=clock)
        assert policy.is_expired(NOW - 11) is False
        assert policy.is_expired(NOW - 11) is True
        options.get_option.assert_called_with(PUBLISHER_LIST_REFRESH_INTERVAL)

    def test_zero_ttl_expires_anything_older_than_now(self, clock):
        options = ConfigOptionStore(
            DirectoryConfig(options={PUBLISHER_LIST_REFRESH_INTERVAL: 0})
        )
        policy = FreshnessPolicy(options, clock=clock)
        assert policy.is_expired(NOW) is False
        assert policy.is_expired(NOW - 1) is True
