"""Test suite for the access recorder."""

from __future__ import annotations

import logging

import pytest

import cvfast.services.access_log as access_log_module
from cvfast.data.db import get_session
from cvfast.data.models import AccessLog
from cvfast.services.access_log import (
    UNKNOWN_IP,
    list_access_logs,
    record_access,
    record_access_safely,
)
from cvfast.services.curriculum import create_curriculum


@pytest.fixture
def short_link_id(owner_id, fixed_clock):
    curriculum = create_curriculum(owner_id, {"title": "Site Reliability Engineer"})
    return curriculum["short_links"][0]["id"]


def test_record_access_stores_ip_agent_and_time(short_link_id, fixed_clock):
    log = record_access(short_link_id, "203.0.113.7", "Mozilla/5.0")

    assert log.short_link_id == short_link_id
    assert log.ip == "203.0.113.7"
    assert log.user_agent == "Mozilla/5.0"
    assert log.accessed_at == fixed_clock.now()


def test_record_access_defaults_for_missing_client_info(short_link_id):
    """A missing IP becomes "Unknown"; a missing user agent stays null."""
    log = record_access(short_link_id, None, "")

    assert log.ip == UNKNOWN_IP == "Unknown"
    assert log.user_agent is None


def test_record_access_bounds_oversized_client_info(short_link_id):
    """Oversized headers are cut to the column length instead of losing the row."""
    log = record_access(short_link_id, "9" * 100, "A" * 2000)

    assert len(log.ip) == 64
    assert len(log.user_agent) == 512
    assert log.user_agent == "A" * 512
    with get_session() as session:
        assert session.query(AccessLog).count() == 1


def test_list_access_logs_ordered_oldest_first(short_link_id, fixed_clock):
    first = record_access(short_link_id, "10.0.0.1", "agent-a")
    fixed_clock.advance(seconds=30)
    second = record_access(short_link_id, "10.0.0.2", "agent-b")

    logs = list_access_logs(short_link_id)

    assert [log.id for log in logs] == [first.id, second.id]
    assert [log.ip for log in logs] == ["10.0.0.1", "10.0.0.2"]


def test_record_access_safely_swallows_failures(short_link_id, monkeypatch, caplog):
    """A failing insert is logged and never propagates."""

    def boom(*_args, **_kwargs):
        raise RuntimeError("database is gone")

    monkeypatch.setattr(access_log_module, "record_access", boom)

    with caplog.at_level(logging.ERROR, logger="cvfast.services.access_log"):
        assert record_access_safely(short_link_id, "10.0.0.1", None) is None

    assert "Failed to record access" in caplog.text
    with get_session() as session:
        assert session.query(AccessLog).count() == 0


def test_record_access_safely_returns_log_on_success(short_link_id):
    log = record_access_safely(short_link_id, "10.0.0.1", "curl/8.0")

    assert log is not None
    assert len(list_access_logs(short_link_id)) == 1
