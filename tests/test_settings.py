"""Tests for activity settings."""

import logging

import pytest

from dataknobs_activity.builder import build_model
from dataknobs_activity.exceptions import ConfigurationError
from dataknobs_activity.manifest import SAMPLE_MANIFEST
from dataknobs_activity.registry import CreationContext
from dataknobs_activity.settings import ActivitySettings, _parse_value, configure_logging


@pytest.fixture
def restore_log_level():
    logger = logging.getLogger("dataknobs_activity")
    level = logger.level
    yield
    logger.setLevel(level)


class TestParseValue:

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("true", True),
            ("Yes", True),
            ("false", False),
            ("no", False),
            ("6", 6),
            ("2.5", 2.5),
            ("six", "six"),
        ],
    )
    def test_parse(self, raw, expected):
        assert _parse_value(raw) == expected


class TestActivitySettings:

    def test_defaults(self):
        settings = ActivitySettings()

        assert settings.manifest_path is None
        assert settings.default_stem == "What is two plus two?"
        assert settings.default_correct == 4
        assert settings.log_level == "WARNING"

    def test_from_dict(self):
        settings = ActivitySettings.from_dict({"default_stem": "Q", "default_correct": 9})

        assert settings.default_stem == "Q"
        assert settings.default_correct == 9

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ActivitySettings.from_dict({"default_stem": "Q", "colour": "red"})

        assert exc_info.value.context["unknown"] == ["colour"]

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "activity.yaml"
        path.write_text("default_stem: What is 1 + 1?\ndefault_correct: 2\nlog_level: DEBUG\n")

        settings = ActivitySettings.from_yaml(path)

        assert settings == ActivitySettings(
            default_stem="What is 1 + 1?", default_correct=2, log_level="DEBUG"
        )

    def test_from_empty_yaml(self, tmp_path):
        path = tmp_path / "activity.yaml"
        path.write_text("")

        assert ActivitySettings.from_yaml(path) == ActivitySettings()

    def test_from_yaml_missing(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            ActivitySettings.from_yaml(tmp_path / "absent.yaml")

    def test_from_yaml_not_mapping(self, tmp_path):
        path = tmp_path / "activity.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            ActivitySettings.from_yaml(path)

    def test_env_overrides(self):
        environ = {
            "DATAKNOBS_ACTIVITY_DEFAULT_STEM": "42",
            "DATAKNOBS_ACTIVITY_DEFAULT_CORRECT": "42",
            "DATAKNOBS_ACTIVITY_UNKNOWN": "ignored",
            "OTHER_DEFAULT_STEM": "ignored",
        }

        settings = ActivitySettings().with_env_overrides(environ)

        assert settings.default_stem == "42"
        assert settings.default_correct == 42

    def test_env_overrides_from_process(self, monkeypatch):
        monkeypatch.setenv("DATAKNOBS_ACTIVITY_LOG_LEVEL", "debug")

        assert ActivitySettings().with_env_overrides().log_level == "debug"

    def test_no_overrides_returns_same(self):
        settings = ActivitySettings()

        assert settings.with_env_overrides({}) is settings

    def test_load_sample_manifest(self):
        assert ActivitySettings().load_manifest() is SAMPLE_MANIFEST

    def test_load_manifest_from_path(self, tmp_path):
        path = tmp_path / "manifest.json"
        path.write_text(
            '{"id": "quiz", "authoring": {"element": "a", "entry": "m:A"},'
            ' "delivery": {"element": "d", "entry": "m:D"}}'
        )

        manifest = ActivitySettings(manifest_path=str(path)).load_manifest()

        assert manifest.id == "quiz"

    @pytest.mark.asyncio
    async def test_creation_function_uses_defaults(self):
        create = ActivitySettings(default_stem="Q", default_correct=3).creation_function()

        assert await create(CreationContext(activity_type="oli_sample")) == build_model("Q", 3)


class TestConfigureLogging:

    def test_sets_package_level(self, restore_log_level):
        configure_logging(ActivitySettings(log_level="debug"))

        assert logging.getLogger("dataknobs_activity").level == logging.DEBUG

    def test_unknown_level(self, restore_log_level):
        with pytest.raises(ConfigurationError) as exc_info:
            configure_logging(ActivitySettings(log_level="chatty"))

        assert exc_info.value.context["log_level"] == "chatty"
