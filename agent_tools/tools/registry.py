"""
Tool Registry: LangChain tool objects for an agent orchestrator.

The orchestrator binds these for native function calling (e.g. via
``llm.bind_tools(create_tools())``) and invokes them by name.
"""

import logging
from typing import Any, Dict, List, Optional

from langchain_core.tools import BaseTool, tool
from langchain_core.utils.function_calling import convert_to_openai_tool

from agent_tools.core.config import Settings, get_settings
from agent_tools.tools.code_exec import CodeExecutionInput, CodeExecutor
from agent_tools.tools.weather import (
    ForecastInput,
    OpenMeteoClient,
    get_forecast_for_agent,
)

logger = logging.getLogger(__name__)

EXECUTE_CODE = "execute_code"
GET_WEATHER = "get_weather"


def create_tools(
    settings: Optional[Settings] = None,
    executor: Optional[CodeExecutor] = None,
    client: Optional[OpenMeteoClient] = None,
) -> List[BaseTool]:
    """
    Create LangChain tool objects for the agent.

    Each tool is a closure over its collaborator, so tests can pass a
    CodeExecutor with a different interpreter or an OpenMeteoClient with a
    fake session. The args_schema models reject bad arguments before the
    tool body runs.
    """
    settings = settings or get_settings()
    tools: List[BaseTool] = []

    if settings.enable_code_execution:
        executor = executor or CodeExecutor.from_settings(settings)

        @tool(EXECUTE_CODE, args_schema=CodeExecutionInput)
        def execute_code(code: str) -> dict:
            """Execute Python code for data analysis, calculations, or processing. The LLM writes Python code, and this tool runs it and returns the output."""
            logger.info(f"Tool call: {EXECUTE_CODE} ({len(code)} chars)")
            return executor.run(code)

        tools.append(execute_code)

    if settings.enable_weather:
        client = client or OpenMeteoClient.from_settings(settings)

        @tool(GET_WEATHER, args_schema=ForecastInput)
        def get_weather(
            latitude: float,
            longitude: float,
            forecast_days: int = 3,
            daily: Optional[List[str]] = None,
        ) -> dict:
            """Get weather forecast data for a location. Use this when the user asks about weather, temperature, rain, wind, or forecasts for any location."""
            logger.info(
                f"Tool call: {GET_WEATHER}(lat={latitude}, lon={longitude}, days={forecast_days})"
            )
            return get_forecast_for_agent(
                latitude=latitude,
                longitude=longitude,
                forecast_days=forecast_days,
                daily=daily,
                client=client,
            )

        tools.append(get_weather)

    return tools


def describe_tools(tools: List[BaseTool]) -> List[Dict[str, Any]]:
    """OpenAI function-calling specs (name, description, JSON schema) per tool."""
    return [convert_to_openai_tool(t) for t in tools]
