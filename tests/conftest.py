"""Pytest configuration and shared fixtures for hogpyramid tests."""

import numpy as np
import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--run-slow", action="store_true", default=False,
        help="Run tests on full-size images",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: full-size images, several seconds each")


def pytest_collection_modifyitems(config, items):
    if not config.getoption("--run-slow"):
        skip_slow = pytest.mark.skip(reason="needs --run-slow option to run")
        for item in items:
            if "slow" in item.keywords:
                item.add_marker(skip_slow)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def gray_image(rng):
    """Random 96x128 uint8 grayscale image."""
    return rng.integers(0, 256, size=(96, 128), dtype=np.uint8)


@pytest.fixture
def color_image(rng):
    """Random 96x128x3 uint8 interleaved color image."""
    return rng.integers(0, 256, size=(96, 128, 3), dtype=np.uint8)


@pytest.fixture
def edge_image():
    """64x64 vertical step edge: left half 0, right half 255."""
    image = np.zeros((64, 64), dtype=np.uint8)
    image[:, 32:] = 255
    return image
