"""
Configuration Module

Centralizes all configurable parameters.
"""

from groundstation.config.settings import (
    settings,
    Settings,
    NetworkConfig,
    GateConfig,
    SignalConfig,
    DetectionConfig,
    ApiConfig,
)

__all__ = [
    "settings",
    "Settings",
    "NetworkConfig",
    "GateConfig",
    "SignalConfig",
    "DetectionConfig",
    "ApiConfig",
]
