"""Configuration management for the progress insights engine."""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

DEFAULT_WORK_KEYWORDS = ("work", "job", "office", "meeting", "project", "coding", "development")
DEFAULT_LIFE_KEYWORDS = ("family", "friends", "hobby", "exercise", "relax", "entertainment", "personal")

PERIOD_CHOICES = ("day", "week", "month", "year")


class InsightTruncation(Enum):
    """How over-long insight lists are cut down."""
    SOURCE_ORDER = "source_order"  # keep the first N in rule order
    PRIORITY = "priority"  # sort recommendations high > medium > low first


@dataclass(frozen=True)
class AnalyticsSettings:
    """Tunables the analytics functions read. Passed in, never looked up globally."""
    max_recommendations: int = 5
    max_achievements: int = 3
    max_patterns: int = 5
    truncation: InsightTruncation = InsightTruncation.SOURCE_ORDER
    work_keywords: Tuple[str, ...] = DEFAULT_WORK_KEYWORDS
    life_keywords: Tuple[str, ...] = DEFAULT_LIFE_KEYWORDS


@dataclass
class ConfigModel:
    """Global configuration model for progress insights."""

    # Report defaults
    default_period: str = "week"  # day, week, month, year
    include_insights: bool = True

    # Insight feed
    max_recommendations: int = 5
    max_achievements: int = 3
    max_patterns: int = 5
    insight_truncation: InsightTruncation = InsightTruncation.SOURCE_ORDER
    work_keywords: list = field(default_factory=lambda: list(DEFAULT_WORK_KEYWORDS))
    life_keywords: list = field(default_factory=lambda: list(DEFAULT_LIFE_KEYWORDS))

    # Display preferences
    date_format: str = "%Y-%m-%d"
    use_emoji: bool = True
    table_style: str = "simple"  # any tabulate format name
    log_level: str = "WARNING"

    # File paths
    config_dir: str = "~/.progress-insights"

    def __post_init__(self):
        """Post-initialization setup."""
        self.config_dir = os.path.expanduser(self.config_dir)

        if self.default_period not in PERIOD_CHOICES:
            logger.warning("Unknown default_period %r, using 'week'", self.default_period)
            self.default_period = "week"

        if not isinstance(self.insight_truncation, InsightTruncation):
            try:
                self.insight_truncation = InsightTruncation(self.insight_truncation)
            except ValueError:
                logger.warning("Unknown insight_truncation %r, using source_order", self.insight_truncation)
                self.insight_truncation = InsightTruncation.SOURCE_ORDER

        self.work_keywords = [str(k).lower() for k in self.work_keywords]
        self.life_keywords = [str(k).lower() for k in self.life_keywords]

    def analytics_settings(self) -> AnalyticsSettings:
        """Settings view handed to the analytics functions."""
        return AnalyticsSettings(
            max_recommendations=self.max_recommendations,
            max_achievements=self.max_achievements,
            max_patterns=self.max_patterns,
            truncation=self.insight_truncation,
            work_keywords=tuple(self.work_keywords),
            life_keywords=tuple(self.life_keywords),
        )

    def to_yaml(self) -> str:
        """Serialize config to YAML."""
        data = {
            "default_period": self.default_period,
            "include_insights": self.include_insights,
            "max_recommendations": self.max_recommendations,
            "max_achievements": self.max_achievements,
            "max_patterns": self.max_patterns,
            "insight_truncation": self.insight_truncation.value,
            "work_keywords": self.work_keywords,
            "life_keywords": self.life_keywords,
            "date_format": self.date_format,
            "use_emoji": self.use_emoji,
            "table_style": self.table_style,
            "log_level": self.log_level,
            "config_dir": self.config_dir,
        }
        return yaml.dump(data, default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ConfigModel":
        """Deserialize config from YAML."""
        data = yaml.safe_load(yaml_str) or {}
        if not isinstance(data, dict):
            raise TypeError(f"config must be a mapping, got {type(data).__name__}")
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
        return cls(**{key: value for key, value in data.items() if key in known})

    def get_config_path(self) -> Path:
        """Get the config file path."""
        return Path(self.config_dir) / "config.yaml"


class Config:
    """Configuration manager for progress insights."""

    _instance: Optional[ConfigModel] = None

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> ConfigModel:
        """Load configuration from file, or use defaults when there is none."""
        if cls._instance is not None and config_path is None:
            return cls._instance

        config = ConfigModel()

        if config_path is None:
            config_path = config.get_config_path()

        if config_path.exists():
            try:
                with open(config_path, 'r') as f:
                    yaml_content = f.read()
                config = ConfigModel.from_yaml(yaml_content)
                logger.info("Loaded configuration from %s", config_path)
            except (OSError, yaml.YAMLError, TypeError) as e:
                logger.warning("Failed to load config from %s: %s. Using default configuration.",
                               config_path, e)
                config = ConfigModel()
        else:
            logger.debug("No configuration at %s, using defaults", config_path)

        cls._instance = config
        return config

    @classmethod
    def save(cls, config: ConfigModel, config_path: Optional[Path] = None) -> None:
        """Save configuration to file."""
        if config_path is None:
            config_path = config.get_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, 'w') as f:
            f.write(config.to_yaml())
        logger.info("Configuration saved to %s", config_path)

    @classmethod
    def get(cls) -> ConfigModel:
        """Get the current configuration instance."""
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reload(cls) -> ConfigModel:
        """Reload configuration from file."""
        cls._instance = None
        return cls.load()


def get_config() -> ConfigModel:
    """Get the current configuration."""
    return Config.get()


def load_config(config_path: Optional[Path] = None) -> ConfigModel:
    """Load configuration from file."""
    return Config.load(config_path)


def save_config(config: ConfigModel, config_path: Optional[Path] = None) -> None:
    """Save configuration to file."""
    Config.save(config, config_path)
