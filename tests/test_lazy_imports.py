"""Tests for warden.__init__ — lazy imports cover all public names."""

import tomllib
from pathlib import Path

import pytest

import warden


@pytest.mark.parametrize("name", warden.__all__)
def test_all_names_resolve(name: str) -> None:
    """Every name in __all__ must resolve via __getattr__ without error."""
    obj = getattr(warden, name)
    assert obj is not None, f"warden.{name} resolved to None"


def test_unknown_name_raises_attribute_error() -> None:
    """Accessing an unregistered name raises AttributeError."""
    with pytest.raises(AttributeError, match="no attribute"):
        warden.__getattr__("ThisDoesNotExist")


def test_version_matches_pyproject() -> None:
    pyproject = Path(__file__).resolve().parent.parent / "pyproject.toml"
    project = tomllib.loads(pyproject.read_text())["project"]
    assert warden.__version__ == project["version"]


def test_deferred_errors_are_public() -> None:
    assert "InvalidStateError" in warden.__all__
    assert "CallAborted" in warden.__all__
