"""Unit tests for settings."""

import pytest
from pydantic import ValidationError

from kgviz.config import Settings, get_dev_settings, get_test_settings


class TestSettings:
    """Tests for Settings defaults and overrides."""

    def test_defaults(self) -> None:
        """Test layout and view defaults."""
        config = Settings()
        assert (config.min_scale, config.max_scale) == (0.1, 4.0)
        assert config.charge_strength == -300.0
        assert config.link_distance == 100.0
        assert config.reheat_alpha == 0.3
        assert config.alpha_decay == pytest.approx(0.0228, abs=1e-4)

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test KGVIZ_ environment variables override defaults."""
        monkeypatch.setenv("KGVIZ_MAX_SCALE", "8")
        monkeypatch.setenv("kgviz_link_distance", "60")
        config = Settings()
        assert config.max_scale == 8.0
        assert config.link_distance == 60.0

    def test_presets(self) -> None:
        """Test environment presets."""
        assert get_dev_settings().api_debug is True
        assert get_test_settings().barnes_hut_threshold == 50

    @pytest.mark.parametrize(
        "override",
        [
            {"alpha_decay": 0.0},
            {"alpha_decay": 1.5},
            {"alpha_min": 0.0},
            {"velocity_decay": 1.0},
            {"velocity_decay": -0.2},
        ],
    )
    def test_energy_bounds(self, override: dict) -> None:
        """Test decay rates outside (0, 1) and a zero alpha_min are rejected."""
        with pytest.raises(ValidationError):
            Settings(**override)
