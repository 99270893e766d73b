"""Tests for the HTTP routes and MCP tool."""

import logging
from typing import Any
from unittest.mock import patch

import pytest
from starlette.testclient import TestClient

from fleet_facts.config import Settings
from fleet_facts.dependencies import Dependencies
from fleet_facts.errors import ConfigError
from fleet_facts.models import Credential, Target
from fleet_facts.services import reset_state, set_dependencies
from tests.fakes import FakeConnector, Script


class StaticInventory:
    def list_targets(self) -> list[Target]:
        return [
            Target(id="i-1", name="web", addresses=("10.0.0.1",)),
            Target(id="i-2", name="db", addresses=()),
        ]


@pytest.fixture
def deps() -> Dependencies:
    return Dependencies(
        settings=Settings(),
        credentials=[Credential(username="ec2-user", agent_path="/tmp/a", timeout=1)],
        commands={"a": "echo hi"},
        inventory=StaticInventory(),
        connector=FakeConnector(reachable={"10.0.0.1"}, scripts={"echo hi": Script(stdout="hi\n")}),
    )


@pytest.fixture
def client(deps: Dependencies) -> Any:
    from fleet_facts.server import create_server

    set_dependencies(deps)
    server = create_server()
    yield TestClient(server.http_app())
    reset_state()


class TestHealthCheck:
    def test_health_returns_ok(self, client: Any) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.text == "OK"
        assert "text/plain" in response.headers["content-type"]


class TestCollectRoute:
    def test_returns_table(self, client: Any) -> None:
        response = client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        rows = response.json()
        assert [r["id"] for r in rows] == ["i-1", "i-2"]
        assert rows[0]["facts"] == {"a": "hi"}
        assert rows[0]["error"] is None
        assert rows[1]["facts"] == {"a": ""}
        assert rows[1]["error"]["type"] == "ConnectionError"

    def test_config_error_is_500(self, client: Any) -> None:
        with patch("fleet_facts.server.get_dependencies", side_effect=ConfigError("no key")):
            response = client.get("/")

        assert response.status_code == 500
        assert response.json() == {"error": "no key"}


class TestCollectTool:
    @pytest.mark.asyncio
    async def test_tool_returns_report(self, deps: Dependencies) -> None:
        from fleet_facts.server import collect_facts_tool

        with patch("fleet_facts.server.get_dependencies", return_value=deps):
            report = await collect_facts_tool()

        assert report["total"] == 2
        assert report["failed"] == 1
        assert report["rows"][0]["facts"] == {"a": "hi"}


class TestConfigureLogging:
    def test_level_comes_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from fleet_facts.server import _configure_logging

        fleet_logger = logging.getLogger("fleet_facts")
        previous = fleet_logger.level
        monkeypatch.setenv("FLEET_LOG_LEVEL", "debug")
        try:
            with patch(
                "fleet_facts.server.Settings.from_env", wraps=Settings.from_env
            ) as from_env:
                _configure_logging()

            from_env.assert_called_once()
            assert fleet_logger.level == logging.DEBUG
        finally:
            fleet_logger.setLevel(previous)
