"""Configuration management using Pydantic Settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="KGVIZ_",
        case_sensitive=False,
    )

    # Canvas
    canvas_width: float = 800.0
    canvas_height: float = 600.0

    # Viewport
    min_scale: float = Field(default=0.1, gt=0)
    max_scale: float = Field(default=4.0, gt=0)
    zoom_in_factor: float = Field(
        default=1.5,
        description="Scale multiplier applied by the zoom-in command"
    )
    zoom_out_factor: float = Field(
        default=0.7,
        description="Scale multiplier applied by the zoom-out command"
    )

    # Link force
    link_distance: float = 100.0

    # Charge (many-body) force
    charge_strength: float = Field(
        default=-300.0,
        description="Negative values repel, positive values attract"
    )
    charge_distance_min: float = 1.0
    charge_theta: float = Field(
        default=0.9,
        description="Barnes-Hut accuracy; lower is more exact and slower"
    )
    barnes_hut_threshold: int = Field(
        default=300,
        description="Node count above which the charge force switches to the quadtree"
    )

    # Centering force
    center_strength: float = 1.0

    # Collision force
    collision_radius: float = 20.0
    collision_strength: float = 1.0

    # Simulation energy
    alpha_min: float = Field(
        default=0.001,
        gt=0,
        lt=1,
        description="Ticking stops once alpha drops below this value"
    )
    alpha_decay: float = Field(
        default=1 - 0.001 ** (1 / 300),
        gt=0,
        lt=1,
        description="Multiplicative alpha decay per tick (~300 ticks from 1.0)"
    )
    reheat_alpha: float = Field(
        default=0.3,
        description="Alpha restored by drag start, reset and model replacement"
    )
    velocity_decay: float = Field(default=0.4, gt=0, lt=1)
    random_seed: int = 42

    # Rendering
    node_radius: float = 20.0
    label_max_chars: int = 12
    node_font_size: float = 10.0
    edge_font_size: float = 10.0
    background_color: str = "#F9FAFB"

    # Interaction
    click_tolerance: float = Field(
        default=3.0,
        description="Max pointer travel in pixels for a press to count as a click"
    )

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False


def get_dev_settings() -> Settings:
    """Get development environment settings."""
    return Settings(api_debug=True)


def get_test_settings() -> Settings:
    """Get test environment settings.

    Small Barnes-Hut threshold so both charge paths get exercised on toy graphs.
    """
    return Settings(
        barnes_hut_threshold=50,
        random_seed=7,
        api_debug=False,
    )


# Global settings instance
settings = Settings()
