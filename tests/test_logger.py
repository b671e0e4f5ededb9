"""
PantryGuard - Logger Tests
==========================

Log files, tree output and the error webhook hook.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from pantryguard.core.logger import TreeLogger


@pytest.fixture
def tree_logger(tmp_path):
    return TreeLogger(logs_dir=tmp_path)


class TestLogFiles:
    """Tests for file output."""

    def test_session_header_written(self, tree_logger):
        content = tree_logger.log_file.read_text(encoding="utf-8")
        assert f"RUN ID: {tree_logger.run_id}" in content

    def test_tree_branches(self, tree_logger):
        tree_logger.tree("Violation Recorded", [
            ("User ID", "user-1"),
            ("Week", "2026-42"),
        ], emoji="⚠️")

        content = tree_logger.log_file.read_text(encoding="utf-8")
        assert "⚠️ Violation Recorded" in content
        assert "├─ User ID: user-1" in content
        assert "└─ Week: 2026-42" in content

    def test_errors_go_to_error_file(self, tree_logger):
        tree_logger.warning("Only a warning")
        tree_logger.error("Suspension Failed", [("User", "user-1")])

        errors = tree_logger.error_file.read_text(encoding="utf-8")
        assert "Suspension Failed" in errors
        assert "└─ User: user-1" in errors
        assert "Only a warning" not in errors

    def test_old_dated_folders_removed(self, tmp_path):
        stale = tmp_path / "2000-01-01"
        stale.mkdir()
        (stale / "PantryGuard-2000-01-01.log").write_text("old", encoding="utf-8")
        other = tmp_path / "archive"
        other.mkdir()

        TreeLogger(logs_dir=tmp_path)

        assert not stale.exists()
        assert other.exists()


class TestWebhook:
    """Tests for error alert scheduling."""

    @pytest.mark.asyncio
    async def test_error_with_details_schedules_webhook(self, tree_logger):
        tree_logger.set_webhook("https://hooks.example.com/abc")
        with patch.object(tree_logger, "_send_webhook_error", new=AsyncMock()) as send:
            tree_logger.error("Critical Escalation To Admin", [("User", "user-1")])
            await asyncio.sleep(0)

        send.assert_awaited_once_with("Critical Escalation To Admin", [("User", "user-1")])

    @pytest.mark.asyncio
    async def test_no_webhook_configured(self, tree_logger):
        with patch.object(tree_logger, "_send_webhook_error", new=AsyncMock()) as send:
            tree_logger.error("Critical Escalation To Admin", [("User", "user-1")])
            await asyncio.sleep(0)

        send.assert_not_called()

    def test_no_running_loop_skips_webhook(self, tree_logger):
        tree_logger.set_webhook("https://hooks.example.com/abc")
        with patch.object(tree_logger, "_send_webhook_error", new=AsyncMock()) as send:
            tree_logger.error("Sync Error", [("Where", "cli")])

        send.assert_not_called()


class TestTimezone:
    """Tests for the display timezone."""

    def test_set_timezone(self, tree_logger):
        tree_logger.set_timezone("Asia/Tokyo")
        assert tree_logger._get_timestamp().endswith("JST]")

        tree_logger.set_timezone("UTC")
        assert tree_logger._get_timestamp().endswith("UTC]")
