from agent_tools.core.config import Settings, get_settings


def test_defaults(monkeypatch) -> None:
    for name in (
        "PYTHON_INTERPRETER",
        "CODE_TIMEOUT_SECONDS",
        "CODE_MAX_BUFFER_BYTES",
        "OPEN_METEO_BASE_URL",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.python_interpreter == "python3"
    assert settings.code_timeout_seconds == 10
    assert settings.code_max_buffer_bytes == 10 * 1024 * 1024
    assert settings.open_meteo_base_url == "https://api.open-meteo.com/v1"


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("CODE_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("ENABLE_WEATHER", "false")

    settings = Settings(_env_file=None)

    assert settings.code_timeout_seconds == 2.5
    assert settings.enable_weather is False


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()


def test_only_consumed_fields() -> None:
    """Every setting is read by a tool, the registry or the entry points."""
    assert set(Settings.model_fields) == {
        "log_level",
        "python_interpreter",
        "code_timeout_seconds",
        "code_max_buffer_bytes",
        "open_meteo_base_url",
        "weather_request_timeout",
        "enable_code_execution",
        "enable_weather",
    }
