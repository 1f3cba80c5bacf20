"""
Configuration management using Pydantic models loaded from YAML.
"""

import logging
from pathlib import Path
from typing import List, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import WorkingCalendar


class CalendarConfig(BaseModel):
    """Working week and office hours used for elapsed time."""
    # 0=Sunday .. 6=Saturday; default Saturday to Thursday, Friday off
    working_weekdays: List[int] = Field(default_factory=lambda: [6, 0, 1, 2, 3, 4])
    office_start_hour: int = 9
    office_end_hour: int = 18
    timezone: str = "Asia/Dhaka"

    @field_validator("working_weekdays")
    @classmethod
    def validate_working_weekdays(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in valid range, deduplicated and not empty."""
        invalid_days = [day for day in value if day not in range(7)]
        if invalid_days:
            raise ValueError(f"working_weekdays must be between 0 and 6, got {invalid_days}")
        # Preserve order while removing duplicates
        seen: set[int] = set()
        deduped: List[int] = []
        for day in value:
            if day not in seen:
                deduped.append(day)
                seen.add(day)
        if not deduped:
            raise ValueError("working_weekdays must contain at least one weekday")
        return deduped

    @field_validator("office_start_hour", "office_end_hour")
    @classmethod
    def validate_hour(cls, v: int) -> int:
        """Validate hour is between 0 and 23."""
        if not 0 <= v <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {v}")
        return v

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Reject unknown IANA timezone names."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @model_validator(mode="after")
    def validate_hours_order(self) -> "CalendarConfig":
        """Ensure the office window opens before it closes."""
        if self.office_end_hour <= self.office_start_hour:
            raise ValueError("office_end_hour must be later than office_start_hour")
        return self

    def to_working_calendar(self) -> WorkingCalendar:
        return WorkingCalendar(
            working_weekdays=frozenset(self.working_weekdays),
            office_start_hour=self.office_start_hour,
            office_end_hour=self.office_end_hour,
            timezone=self.timezone,
        )


class StoreConfig(BaseModel):
    """Hosted database connection."""
    url: str = ""
    api_key: str = ""
    timeout_seconds: float = 30
    mock_data_file: Optional[Path] = None

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout_seconds must be greater than zero")
        return value

    def is_configured(self) -> bool:
        return bool(self.url and self.api_key)


class AppConfig(BaseModel):
    """Application configuration."""
    calendar: CalendarConfig = Field(default_factory=CalendarConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Accept standard logging level names in any case."""
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
