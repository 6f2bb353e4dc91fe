"""Tests for PluginManager — discovery, registration, and hook relay."""

from __future__ import annotations

import pluggy
import structlog

from groovyrules.plugins.builtins.action_log import ActionLogPlugin
from groovyrules.plugins.manager import PluginManager

hookimpl = pluggy.HookimplMarker("groovyrules")


class _DummyPlugin:
    """Minimal plugin for registration tests."""

    @hookimpl
    def post_test(self, name: str, exit_code: int) -> None:
        pass


class _NoHooks:
    pass


class TestPluginManager:
    def test_hook_relay_accessible(self) -> None:
        pm = PluginManager()
        for hook in ("post_declare", "pre_action", "post_action", "post_test"):
            assert hasattr(pm.hook, hook)

    def test_register_plugin(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin(), name="dummy")
        assert "dummy" in pm.list_plugin_names()

    def test_register_plugin_default_name(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin())
        assert "_DummyPlugin" in pm.list_plugin_names()

    def test_unregister_plugin(self) -> None:
        pm = PluginManager()
        plugin = _DummyPlugin()
        pm.register_plugin(plugin, name="dummy")
        pm.unregister(plugin)
        assert "dummy" not in pm.list_plugin_names()

    def test_is_loaded(self) -> None:
        pm = PluginManager()
        assert pm.is_loaded is False
        pm.discover_and_load()
        assert pm.is_loaded is True

    def test_get_plugins_returns_registered(self) -> None:
        pm = PluginManager()
        plugin = _DummyPlugin()
        pm.register_plugin(plugin, name="test")
        assert plugin in pm.get_plugins()

    def test_has_hook_impls(self) -> None:
        assert PluginManager._has_hook_impls(ActionLogPlugin)
        assert not PluginManager._has_hook_impls(_NoHooks)

    def test_entry_point_classes_are_instantiated(self) -> None:
        pm = PluginManager()
        pm._pm.register(ActionLogPlugin, name="action_log")
        pm._normalize_plugin_instances()
        plugins = pm.get_plugins()
        assert len(plugins) == 1
        assert isinstance(plugins[0], ActionLogPlugin)

    def test_dispatch(self) -> None:
        pm = PluginManager()
        plugin = ActionLogPlugin()
        pm.register_plugin(plugin)
        with structlog.testing.capture_logs() as logs:
            pm.hook.post_test(name="core-test", exit_code=0)
        assert logs[0]["target"] == "core-test"
