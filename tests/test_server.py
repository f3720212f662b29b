import pytest
from fastapi.testclient import TestClient

from agent_tools.api.server import app, state
from agent_tools.core.config import Settings
from agent_tools.tools.registry import create_tools


@pytest.fixture
def client(settings, executor, weather_client):
    with TestClient(app) as test_client:
        state.tools = create_tools(settings, executor=executor, client=weather_client)
        yield test_client


def test_health(client) -> None:
    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["tools"] == ["execute_code", "get_weather"]


def test_list_tools(client) -> None:
    response = client.get("/api/tools")

    assert response.status_code == 200
    names = [spec["function"]["name"] for spec in response.json()]
    assert names == ["execute_code", "get_weather"]


def test_execute_code_endpoint(client) -> None:
    response = client.post("/api/tools/execute_code", json={"code": "print('hi')"})

    assert response.status_code == 200
    assert response.json() == {"stdout": "hi\n", "stderr": "", "exit_code": 0}


def test_execute_code_failure_is_a_result(client) -> None:
    response = client.post("/api/tools/execute_code", json={"code": "raise SystemExit(2)"})

    assert response.status_code == 200
    body = response.json()
    assert body["exit_code"] == 2
    assert body["error"] == "script exited with error"


def test_weather_endpoint(client, fake_session) -> None:
    response = client.post(
        "/api/tools/weather",
        json={"latitude": 35.6762, "longitude": 139.6503, "daily": ["weathercode"]},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["query"]["daily"] == ["weathercode"]
    assert fake_session.calls[0]["params"]["timezone"] == "auto"


def test_weather_endpoint_validation(client, fake_session) -> None:
    response = client.post("/api/tools/weather", json={"latitude": 200, "longitude": 0})

    assert response.status_code == 422
    assert fake_session.calls == []


def test_invoke_by_name(client) -> None:
    response = client.post("/api/tools/execute_code/invoke", json={"code": "print(1 + 1)"})

    assert response.status_code == 200
    assert response.json()["stdout"] == "2\n"


def test_invoke_by_name_validation(client, fake_session) -> None:
    response = client.post(
        "/api/tools/get_weather/invoke", json={"latitude": 0, "longitude": 0, "forecast_days": 9}
    )

    assert response.status_code == 422
    assert fake_session.calls == []


def test_invoke_unknown_tool(client) -> None:
    response = client.post("/api/tools/launch_rockets/invoke", json={})

    assert response.status_code == 404


def test_disabled_tool_endpoint(client, executor) -> None:
    state.tools = create_tools(
        Settings(_env_file=None, ENABLE_WEATHER=False), executor=executor
    )

    response = client.post("/api/tools/weather", json={"latitude": 1, "longitude": 1})

    assert response.status_code == 404


@pytest.mark.parametrize("latitude", [True, "35.6"])
def test_invoke_rejects_non_numeric_coordinates(client, fake_session, latitude) -> None:
    response = client.post(
        "/api/tools/get_weather/invoke", json={"latitude": latitude, "longitude": 0}
    )

    assert response.status_code == 422
    assert fake_session.calls == []


def test_weather_endpoint_rejects_boolean_days(client, fake_session) -> None:
    response = client.post(
        "/api/tools/weather", json={"latitude": 0, "longitude": 0, "forecast_days": True}
    )

    assert response.status_code == 422
    assert fake_session.calls == []
