"""Agent tools: Python script execution and Open-Meteo forecasts."""

__version__ = "1.0.0"
