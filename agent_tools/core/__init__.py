# agent_tools/core/__init__.py
"""Core modules for the agent tools."""

from agent_tools.core.config import get_settings, Settings
from agent_tools.core.errors import ToolError, WeatherAPIError

__all__ = [
    "get_settings",
    "Settings",
    "ToolError",
    "WeatherAPIError",
]
