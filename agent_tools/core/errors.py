"""Exceptions raised inside the tools before they reach the tool boundary."""

from typing import Optional


class ToolError(Exception):
    """Base class for tool failures that are reported back as results."""

    pass


class WeatherAPIError(ToolError):
    """Raised when the forecast provider answers with an error or bad payload."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
