"""Tests for rendering utilities."""

import jax.numpy as jnp
import numpy as np
import pytest
from PIL import Image
from chipax import chip8_display_to_rgb, create_color_scheme
from chipax.rendering import display_to_text, save_screenshot


@pytest.fixture
def display():
    return jnp.zeros((64, 32), dtype=jnp.bool_).at[5, 3].set(True)


def test_display_to_rgb_shape_and_colors(display):
    rgb = chip8_display_to_rgb(display, scale=1, on_color=(1, 2, 3), off_color=(9, 9, 9))
    assert rgb.shape == (32, 64, 3)
    assert tuple(rgb[3, 5]) == (1, 2, 3)
    assert tuple(rgb[5, 3]) == (9, 9, 9)


def test_display_to_rgb_scaling(display):
    rgb = chip8_display_to_rgb(display, scale=4)
    assert rgb.shape == (128, 256, 3)
    assert (rgb[12:16, 20:24] == (0, 255, 0)).all()


def test_color_schemes():
    assert create_color_scheme("classic") == ((0, 255, 0), (0, 0, 0))
    with pytest.raises(ValueError):
        create_color_scheme("nope")


def test_display_to_text(display):
    lines = display_to_text(display).splitlines()
    assert len(lines) == 32
    assert all(len(line) == 64 for line in lines)
    assert lines[3][5] == "#"
    assert lines[3].count("#") == 1


def test_save_screenshot(display, tmp_path):
    path = tmp_path / "screen.png"
    save_screenshot(display, str(path), scale=2, color_scheme="white")
    image = np.array(Image.open(path).convert("RGB"))
    assert image.shape == (64, 128, 3)
    assert tuple(image[6, 10]) == (255, 255, 255)
    assert tuple(image[0, 0]) == (0, 0, 0)
