# agent_tools/tools/__init__.py
"""Agent tools: code execution and weather forecast."""

from agent_tools.tools.code_exec import CodeExecutionInput, CodeExecutor, ExecutionResult
from agent_tools.tools.weather import (
    DailyVariable,
    ForecastInput,
    OpenMeteoClient,
    get_forecast_for_agent,
)
from agent_tools.tools.registry import create_tools, describe_tools

__all__ = [
    "CodeExecutionInput",
    "CodeExecutor",
    "ExecutionResult",
    "DailyVariable",
    "ForecastInput",
    "OpenMeteoClient",
    "get_forecast_for_agent",
    "create_tools",
    "describe_tools",
]
