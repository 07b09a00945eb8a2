"""Configuration package."""

from algo_revise.config.settings import (
    Settings,
    get_interview_topics,
    get_settings,
    load_yaml_config,
    settings,
    yaml_config,
)

__all__ = [
    "Settings",
    "get_interview_topics",
    "get_settings",
    "load_yaml_config",
    "settings",
    "yaml_config",
]
