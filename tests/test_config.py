"""
Configuration Tests
===================

Option models, YAML loading and environment overrides.
"""

import logging

import pytest
from pydantic import ValidationError

from tslatency.clock import ClockSource
from tslatency.config import (
    LoggingConfig,
    MeasureConfig,
    Settings,
    StamperConfig,
    load_config,
    setup_logging,
)
from tslatency.models import Region, StamperVariant


ENV_VARS = [
    "TSLATENCY_X",
    "TSLATENCY_Y",
    "TSLATENCY_WIDTH",
    "TSLATENCY_HEIGHT",
    "TSLATENCY_STAMPER_TYPE",
    "TSLATENCY_CELL_SIZE",
    "TSLATENCY_CLOCK",
    "TSLATENCY_TOLERANCE",
    "TSLATENCY_MAX_LATENCY_MS",
    "TSLATENCY_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the host environment out of these tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestStamperConfig:
    """Tests for stamp-side options."""

    def test_defaults(self):
        """Verify documented defaults."""
        config = StamperConfig()
        assert config.region == Region(x=0, y=0, width=64, height=64)
        assert config.stamper_type is StamperVariant.OPTIMIZED
        assert config.cell_size == 4
        assert config.clock is ClockSource.MONOTONIC

    def test_hyphenated_aliases(self):
        """Verify element property names are accepted."""
        config = StamperConfig.model_validate({"stamper-type": "fast-robust", "cell-size": 8})
        assert config.stamper_type is StamperVariant.FAST_ROBUST
        assert config.cell_size == 8

    def test_snake_case_names(self):
        """Verify field names are accepted too."""
        config = StamperConfig(stamper_type="ORIGINAL", cell_size=2)
        assert config.stamper_type is StamperVariant.ORIGINAL

    def test_unknown_option_rejected(self):
        """Verify typos fail loudly."""
        with pytest.raises(ValidationError):
            StamperConfig.model_validate({"stamper_typ": "original"})

    def test_measure_options_rejected(self):
        """Verify measure-only options are not stamp options."""
        with pytest.raises(ValidationError):
            StamperConfig(tolerance=5)

    @pytest.mark.parametrize(
        "options",
        [
            {"stamper_type": "turbo"},
            {"cell_size": 0},
            {"cell_size": 65},
            {"width": 0},
            {"x": -1},
            {"clock": "sundial"},
        ],
    )
    def test_invalid_values(self, options):
        """Verify out-of-range values raise ValidationError."""
        with pytest.raises(ValidationError):
            StamperConfig(**options)

    def test_frozen(self):
        """Verify configuration cannot change after construction."""
        config = StamperConfig()
        with pytest.raises(ValidationError):
            config.x = 10


class TestMeasureConfig:
    """Tests for measure-side options."""

    def test_defaults(self):
        """Verify documented defaults."""
        config = MeasureConfig()
        assert config.tolerance == 5
        assert config.clock_skew_tolerance_ms == 5.0
        assert config.max_latency_ms == 10_000.0
        assert config.clock_skew_tolerance_ns == 5_000_000
        assert config.max_latency_ns == 10_000_000_000

    def test_hyphenated_aliases(self):
        """Verify hyphenated measure options."""
        config = MeasureConfig.model_validate(
            {"clock-skew-tolerance-ms": 1.5, "max-latency-ms": 250, "stamper-type": "fastrobust"}
        )
        assert config.clock_skew_tolerance_ns == 1_500_000
        assert config.max_latency_ns == 250_000_000
        assert config.stamper_type is StamperVariant.FAST_ROBUST

    def test_tolerance_range(self):
        """Verify the dead-band stays below the threshold."""
        with pytest.raises(ValidationError):
            MeasureConfig(tolerance=128)


class TestLoadConfig:
    """Tests for layered configuration loading."""

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        """Verify defaults when no config file exists."""
        monkeypatch.chdir(tmp_path)

        settings = load_config()

        assert settings == Settings()

    def test_yaml_file(self, tmp_path):
        """Verify values are read from YAML, hyphenated keys included."""
        path = tmp_path / "tslatency.yaml"
        path.write_text(
            "stamper:\n"
            "  x: 32\n"
            "  stamper-type: fast-robust\n"
            "measure:\n"
            "  x: 32\n"
            "  stamper-type: fast-robust\n"
            "  max-latency-ms: 500\n"
            "logging:\n"
            "  level: DEBUG\n"
            "  format: json\n"
        )

        settings = load_config(str(path))

        assert settings.stamper.x == 32
        assert settings.stamper.stamper_type is StamperVariant.FAST_ROBUST
        assert settings.measure.max_latency_ms == 500.0
        assert settings.measure.tolerance == 5
        assert settings.logging.level == "DEBUG"
        assert settings.logging.format == "json"

    def test_searches_working_directory(self, tmp_path, monkeypatch):
        """Verify config.yaml in the working directory is picked up."""
        (tmp_path / "config.yaml").write_text("stamper:\n  cell-size: 8\n")
        monkeypatch.chdir(tmp_path)

        assert load_config().stamper.cell_size == 8

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        """Verify environment variables win over the file."""
        path = tmp_path / "config.yaml"
        path.write_text("stamper:\n  width: 96\nmeasure:\n  width: 96\n  tolerance: 3\n")
        monkeypatch.setenv("TSLATENCY_WIDTH", "128")
        monkeypatch.setenv("TSLATENCY_STAMPER_TYPE", "fast-robust")
        monkeypatch.setenv("TSLATENCY_TOLERANCE", "10")
        monkeypatch.setenv("TSLATENCY_LOG_LEVEL", "WARNING")

        settings = load_config(str(path))

        assert settings.stamper.width == 128
        assert settings.measure.width == 128
        assert settings.stamper.stamper_type is StamperVariant.FAST_ROBUST
        assert settings.measure.stamper_type is StamperVariant.FAST_ROBUST
        assert settings.measure.tolerance == 10
        assert settings.logging.level == "WARNING"

    def test_invalid_file_value(self, tmp_path):
        """Verify invalid values in YAML raise ValidationError."""
        path = tmp_path / "config.yaml"
        path.write_text("stamper:\n  stamper-type: turbo\n")
        with pytest.raises(ValidationError):
            load_config(str(path))


class TestSetupLogging:
    """Tests for logging setup."""

    def test_sets_level(self, monkeypatch):
        """Verify the configured level reaches basicConfig."""
        captured = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: captured.update(kwargs))

        setup_logging(Settings(logging=LoggingConfig(level="debug", format="json")))

        assert captured["level"] == logging.DEBUG
        assert captured["format"].startswith('{"time"')
