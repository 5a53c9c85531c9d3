"""Shared pytest configuration for roost examples.

Provides the ``example_nav`` fixture that loads a fresh navigator from
the ``app.py`` file in the same directory as the test. Each call
re-executes app.py in an isolated module namespace, so every test starts
with a clean stack.
"""

import importlib.util
from pathlib import Path
from types import ModuleType

import pytest


def _load_example(test_path: Path) -> ModuleType:
    app_path = test_path.parent / "app.py"
    module_name = f"example_{app_path.parent.name}"
    spec = importlib.util.spec_from_file_location(module_name, app_path)
    assert spec is not None
    assert spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def example_module(request: pytest.FixtureRequest) -> ModuleType:
    """The freshly executed sibling app.py module."""
    return _load_example(Path(request.path))


@pytest.fixture
def example_nav(example_module: ModuleType):
    """A fresh navigator built by the sibling app.py."""
    return example_module.build_navigator()
