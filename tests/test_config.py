"""Tests for configuration loading and the analytics settings view."""

from progress_insights.config import (
    AnalyticsSettings,
    Config,
    ConfigModel,
    InsightTruncation,
    get_config,
    load_config,
    save_config,
)


class TestConfigModel:
    """Test ConfigModel defaults, validation and YAML round trips"""

    def test_defaults(self):
        config = ConfigModel(config_dir="/tmp/progress-insights")
        assert config.default_period == "week"
        assert config.include_insights is True
        assert config.insight_truncation == InsightTruncation.SOURCE_ORDER
        assert "meeting" in config.work_keywords
        assert config.analytics_settings() == AnalyticsSettings()

    def test_invalid_values_fall_back(self):
        config = ConfigModel(default_period="fortnight", insight_truncation="random")
        assert config.default_period == "week"
        assert config.insight_truncation == InsightTruncation.SOURCE_ORDER

    def test_from_yaml(self):
        config = ConfigModel.from_yaml(
            "insight_truncation: priority\n"
            "max_recommendations: 3\n"
            "work_keywords: [Client, Invoice]\n"
            "unknown_option: 1\n"
        )
        settings = config.analytics_settings()
        assert settings.truncation == InsightTruncation.PRIORITY
        assert settings.max_recommendations == 3
        assert settings.work_keywords == ("client", "invoice")

    def test_yaml_round_trip(self, tmp_path):
        config = ConfigModel(default_period="month", max_patterns=2, config_dir=str(tmp_path))
        restored = ConfigModel.from_yaml(config.to_yaml())
        assert restored.default_period == "month"
        assert restored.max_patterns == 2
        assert restored.get_config_path() == tmp_path / "config.yaml"


class TestConfigManager:
    """Test the Config singleton"""

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "config.yaml"
        save_config(ConfigModel(default_period="year", config_dir=str(tmp_path)), path)
        assert load_config(path).default_period == "year"
        assert get_config().default_period == "year"

    def test_missing_file_uses_defaults(self, tmp_path):
        assert load_config(tmp_path / "absent.yaml").default_period == "week"

    def test_broken_file_uses_defaults(self, tmp_path, caplog):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")
        config = load_config(path)
        assert config.default_period == "week"
        assert "Failed to load config" in caplog.text

    def test_get_returns_loaded_instance(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("default_period: day\n")
        assert load_config(path).default_period == "day"
        assert Config.get().default_period == "day"
        Config._instance = ConfigModel(default_period="month")
        assert Config.get().default_period == "month"

    def test_reload_reads_default_location(self, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        config_file = tmp_path / ".progress-insights" / "config.yaml"
        config_file.parent.mkdir()
        config_file.write_text("default_period: month\n")

        Config._instance = ConfigModel(default_period="day")
        assert Config.reload().default_period == "month"
        assert get_config().default_period == "month"
