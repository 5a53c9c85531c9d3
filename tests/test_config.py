"""Tests for roost.config — NavigatorConfig frozen dataclass."""

import pytest

from roost.config import NavigatorConfig


class TestNavigatorConfig:
    def test_defaults(self) -> None:
        cfg = NavigatorConfig()

        assert cfg.home_name == "/"
        assert cfg.sync_address is True
        assert cfg.address_prefix == ""
        assert cfg.event_queue_size == 256
        assert cfg.lifecycle_logging is False

    def test_override(self) -> None:
        cfg = NavigatorConfig(home_name="/home", address_prefix="#", lifecycle_logging=True)

        assert cfg.home_name == "/home"
        assert cfg.address_prefix == "#"
        assert cfg.lifecycle_logging is True

    def test_frozen(self) -> None:
        cfg = NavigatorConfig()

        with pytest.raises(AttributeError):
            cfg.home_name = "/other"  # type: ignore[misc]
