"""Tests for global dependency state."""

from unittest.mock import MagicMock, patch

import pytest

from fleet_facts.errors import ConfigError
from fleet_facts.services.state import get_dependencies, reset_state, set_dependencies


@pytest.fixture(autouse=True)
def clean_state():
    reset_state()
    yield
    reset_state()


class TestState:
    def test_set_dependencies_is_returned(self) -> None:
        deps = MagicMock()
        set_dependencies(deps)

        assert get_dependencies() is deps

    def test_created_once_from_env(self) -> None:
        with patch("fleet_facts.dependencies.Dependencies.from_env") as from_env:
            first = get_dependencies()
            second = get_dependencies()

        assert first is second
        from_env.assert_called_once()

    def test_config_error_propagates(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for key in ("FLEET_SSH_KEY", "SSH_KEY", "FLEET_SSH_KEY_PATH", "SSH_KEY_PATH",
                    "FLEET_SSH_AUTH_SOCK", "SSH_AUTH_SOCK"):
            monkeypatch.delenv(key, raising=False)

        with pytest.raises(ConfigError):
            get_dependencies()
