"""
Tests for configuration loading and validation.
"""

import pytest
from pydantic import ValidationError

from taskhours.config import AppConfig, CalendarConfig, StoreConfig
from taskhours.domain.models import DEFAULT_CALENDAR


class TestCalendarConfig:

    def test_defaults_match_default_calendar(self):
        assert CalendarConfig().to_working_calendar() == DEFAULT_CALENDAR

    def test_weekdays_are_deduplicated(self):
        config = CalendarConfig(working_weekdays=[1, 2, 2, 1])

        assert config.working_weekdays == [1, 2]

    @pytest.mark.parametrize(
        "fields",
        [
            {"working_weekdays": []},
            {"working_weekdays": [0, 7]},
            {"office_start_hour": -1},
            {"office_end_hour": 24},
            {"office_start_hour": 18, "office_end_hour": 9},
            {"timezone": "Mars/Olympus_Mons"},
        ],
    )
    def test_invalid_values_are_rejected(self, fields):
        with pytest.raises(ValidationError):
            CalendarConfig(**fields)


class TestAppConfig:

    def test_load_from_yaml(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            "calendar:\n"
            "  working_weekdays: [1, 2, 3, 4, 5]\n"
            "  office_start_hour: 8\n"
            "  office_end_hour: 16\n"
            "  timezone: Europe/Berlin\n"
            "store:\n"
            "  url: https://example.test\n"
            "  api_key: secret\n"
            "log_level: info\n",
            encoding="utf-8",
        )

        config = AppConfig.load_from_yaml(config_path)
        calendar = config.calendar.to_working_calendar()

        assert calendar.working_weekdays == frozenset({1, 2, 3, 4, 5})
        assert calendar.office_start_hour == 8
        assert calendar.timezone == "Europe/Berlin"
        assert config.store.is_configured()
        assert config.log_level == "INFO"

    def test_empty_file_uses_defaults(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("", encoding="utf-8")

        config = AppConfig.load_from_yaml(config_path)

        assert config.calendar.to_working_calendar() == DEFAULT_CALENDAR
        assert not config.store.is_configured()

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AppConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml_raises_value_error(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("calendar: [unclosed", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(config_path)

    def test_non_mapping_root_raises(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(config_path)

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            AppConfig(log_level="CHATTY")

    def test_store_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            StoreConfig(timeout_seconds=0)
