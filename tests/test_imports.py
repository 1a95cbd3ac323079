"""
Verify every module of the package imports cleanly.
"""

import importlib
import pkgutil

import pytest

import tonal_tuner

# Needs the PortAudio system library, which test machines may lack
HARDWARE_MODULES = {"tonal_tuner.services.live_audio"}


def find_modules():
    """All importable module names under tonal_tuner."""
    return sorted(
        info.name
        for info in pkgutil.walk_packages(tonal_tuner.__path__, prefix="tonal_tuner.")
        if info.name not in HARDWARE_MODULES and ".tests" not in info.name
    )


@pytest.mark.parametrize("module_name", find_modules())
def test_module_imports(module_name):
    importlib.import_module(module_name)


def test_public_api():
    for name in tonal_tuner.__all__:
        assert hasattr(tonal_tuner, name), name
