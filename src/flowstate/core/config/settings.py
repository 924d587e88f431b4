"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """FlowState dashboard configuration."""

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        # Allows the `model_name` field (the 3D model shown on the dashboard).
        "protected_namespaces": ("settings_",),
    }

    # Server
    # Default to loopback; the dashboard tools have no auth layer.
    flowstate_host: str = "127.0.0.1"
    flowstate_port: int = 8001
    flowstate_log_level: str = "info"
    # If binding to non-loopback, refuse to start unless this is set true.
    flowstate_allow_insecure_bind: bool = False

    # Backend REST services (schedule, workout, destressor, heart risk)
    backend_base_url: str = "http://127.0.0.1:5002"

    # Dashboard
    model_name: str = "Particle_Wave"
    stress_score: int = 50
    # Multiplies every animation duration and delay (1.0 = real time).
    animation_time_scale: float = 1.0

    # Destressor recommendation request
    destressor_stress_level: int = 5
    destressor_available_time: int = 30
    destressor_activities: list[str] = ["meditation", "exercise", "reading"]

    # Health-data aggregation service
    health_auth_url: str = "https://api.tryterra.co/v2/auth/generateAuthToken"
    health_api_key: str = ""
    health_dev_id: str = ""


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
