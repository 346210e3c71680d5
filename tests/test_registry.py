"""
Tests for the collector registry
"""

import pytest

from jenkins_metrics import registry


@pytest.fixture
def isolated_registry(monkeypatch):
    """Empty registry for the duration of a test"""
    monkeypatch.setattr(registry, "_factories", {})
    return registry


class TestRegistry:
    """Test registration and lookup"""

    def test_add_and_create(self, isolated_registry):
        """Test a registered factory builds new instances"""
        isolated_registry.add("dummy", lambda value: {"value": value})

        assert isolated_registry.create("dummy", 3) == {"value": 3}
        assert isolated_registry.names() == ["dummy"]

    def test_re_adding_same_factory_is_allowed(self, isolated_registry):
        """Test repeated registration of the same factory is a no-op"""

        def factory():
            return object()

        isolated_registry.add("dummy", factory)
        isolated_registry.add("dummy", factory)

        assert isolated_registry.names() == ["dummy"]

    def test_conflicting_registration_raises(self, isolated_registry):
        """Test a different factory cannot take an existing name"""
        isolated_registry.add("dummy", lambda: 1)

        with pytest.raises(ValueError, match="already registered"):
            isolated_registry.add("dummy", lambda: 2)

    def test_unknown_name_raises(self, isolated_registry):
        """Test lookup of an unregistered name"""
        with pytest.raises(KeyError, match="Unknown collector"):
            isolated_registry.create("missing")
