"""Runtime services: telemetry and settings."""

from . import telemetry
from .settings import EngineSettings

__all__ = ["EngineSettings", "telemetry"]
