"""Package export checks."""

from importlib import import_module

import pytest


@pytest.mark.parametrize(
    "package",
    ["src.adapters.interface", "src.adapters.interface.streamlit"],
)
def test_interface_packages_export_nothing(package) -> None:
    assert import_module(package).__all__ == []


@pytest.mark.parametrize(
    "package",
    [
        "src.application.ports",
        "src.application.use_cases",
        "src.domain",
        "src.domain.models",
        "src.domain.services",
        "src.domain.policies",
    ],
)
def test_package_exports_resolve(package) -> None:
    module = import_module(package)
    for name in module.__all__:
        assert hasattr(module, name), name
