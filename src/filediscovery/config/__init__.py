"""Configuration utilities for file discovery."""

from .policies import (
    FrequencyThresholds,
    LoggingPolicy,
    Policies,
    SearchPolicy,
    StorePolicy,
    load_policies,
)
from .settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "Policies",
    "load_policies",
    "SearchPolicy",
    "FrequencyThresholds",
    "StorePolicy",
    "LoggingPolicy",
]
