"""
Application configuration settings.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # API Settings
    api_v1_prefix: str = "/api/v1"
    debug: bool = False

    # Session Settings
    session_ttl_hours: int = 1
    max_sessions: int = 500

    # ============================================================
    # ZOOM DEFAULTS
    # ============================================================

    # --- Scale Range ---
    # Multiplied by the image's starting scale once a session is captured
    default_min_scale: float = 0.6
    default_max_scale: float = 8.0

    # Clamped into [min_scale, max_scale] on validation
    default_double_tap_scale_factor: float = 3.0

    # --- Behaviour Flags ---
    default_zoomable: bool = True
    default_translatable: bool = True
    default_restrict_bounds: bool = False
    default_animate_on_reset: bool = True
    default_auto_center: bool = True
    default_double_tap_to_zoom: bool = True

    # One of UNDER, OVER, ALWAYS, NEVER
    default_auto_reset_mode: str = "UNDER"

    # --- Animation ---
    reset_duration_ms: int = 200  # Reset, center and double-tap animations

    class Config:
        env_prefix = "PINCHZOOM_"
        env_file = ".env"
        extra = "ignore"


# Global settings instance
settings = Settings()
