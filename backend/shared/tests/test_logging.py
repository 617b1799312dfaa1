import logging
from datetime import UTC, datetime
from unittest.mock import patch

import pytest

from shared.dal.models import GameStatus, GameVariant
from shared.logging import _serialize_enums, setup_logging


@pytest.fixture(autouse=True)
def _restore_root_handlers(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("LOG_FORMAT", raising=False)
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)


class TestEnvironment:
    def test_log_level_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        setup_logging()

        assert logging.getLogger().level == logging.DEBUG

    @pytest.mark.parametrize(("name", "value"), [("LOG_LEVEL", "bogus"), ("LOG_FORMAT", "xml")])
    def test_invalid_value_raises(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)
        with pytest.raises(ValueError, match=f"Invalid {name}"):
            setup_logging()


class TestLogFile:
    def test_name_carries_prefix_and_start_time(self, tmp_path):
        fixed_time = datetime(2026, 10, 19, 18, 5, 9, tzinfo=UTC)
        with patch("shared.logging._is_test", return_value=False), patch("shared.logging.datetime") as mock_dt:
            mock_dt.now.return_value = fixed_time
            log_path = setup_logging(log_dir=tmp_path)

        assert log_path == tmp_path / "tallypad_2026-10-19_18-05-09.log"

    def test_skipped_under_pytest(self, tmp_path):
        assert setup_logging(log_dir=tmp_path / "logs") is None
        assert not (tmp_path / "logs").exists()


class TestSerializeEnums:
    def test_enum_fields_render_by_value(self):
        event_dict = {"variant": GameVariant.PUTT_PUTT, "status": GameStatus.COMPLETED, "players": 2}
        assert _serialize_enums(None, "", event_dict) == {"variant": "putt_putt", "status": "completed", "players": 2}

    def test_enums_inside_sequences(self):
        event_dict = {"variants": (GameVariant.GOLF, GameVariant.YAHTZEE), "holes": [3, 4]}
        assert _serialize_enums(None, "", event_dict) == {"variants": ["golf", "yahtzee"], "holes": [3, 4]}
