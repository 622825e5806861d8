from __future__ import annotations

import pytest

from quicklime.lib.color import Rgb, Rgba


def test_rgb_channels() -> None:
    color = Rgb.new(0x12, 0x34, 0x56)

    assert color.packed == 0x123456
    assert (color.r, color.g, color.b) == (0x12, 0x34, 0x56)
    assert color.hex() == "#123456"


def test_rgb_channels_are_masked() -> None:
    assert Rgb.new(0x1FF, 0, 0).r == 0xFF


def test_srgb_and_linear() -> None:
    color = Rgb.new(255, 0, 51)

    assert color.to_srgb() == pytest.approx((1.0, 0.0, 0.2))
    assert color.to_linear() == pytest.approx((1.0, 0.0, 0.2**2.2))


def test_rgba_round_trip_through_rgb() -> None:
    color = Rgb.new(1, 2, 3).to_rgba(0x80)

    assert color == Rgba.new(1, 2, 3, 0x80)
    assert color.a == 0x80
    assert color.to_rgb() == Rgb.new(1, 2, 3)


def test_rgba_linear_keeps_alpha() -> None:
    color = Rgba.new(255, 255, 255, 51)

    assert color.to_linear() == pytest.approx((1.0, 1.0, 1.0, 0.2))
