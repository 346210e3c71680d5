"""
Collector Registry

Process-wide table of collector factories, keyed by a fixed name. Collector
modules register themselves once at import time; hosts look them up by name.

Usage:
    from jenkins_metrics import registry

    registry.add("jenkins", JenkinsCollector)
    collector = registry.create("jenkins", config)
"""

from collections.abc import Callable
from typing import Any

_factories: dict[str, Callable[..., Any]] = {}


def add(name: str, factory: Callable[..., Any]) -> None:
    """
    Register a collector factory.

    Args:
        name: Fixed registration name (e.g., "jenkins")
        factory: Callable returning a new collector instance

    Raises:
        ValueError: If a different factory is already registered under name
    """
    existing = _factories.get(name)
    if existing is not None and existing is not factory:
        raise ValueError(f"Collector already registered: {name}")
    _factories[name] = factory


def create(name: str, *args: Any, **kwargs: Any) -> Any:
    """
    Build a new collector instance from its registered factory.

    Raises:
        KeyError: If no collector is registered under name
    """
    try:
        factory = _factories[name]
    except KeyError:
        raise KeyError(f"Unknown collector: {name}") from None
    return factory(*args, **kwargs)


def names() -> list[str]:
    """Registered collector names, sorted."""
    return sorted(_factories)
