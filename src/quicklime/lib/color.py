"""Packed sRGB color values."""

from __future__ import annotations

from dataclasses import dataclass

_GAMMA = 2.2


@dataclass(frozen=True, slots=True)
class Rgb:
    """24-bit color packed as `0xRRGGBB`."""

    packed: int

    @classmethod
    def new(cls, r: int, g: int, b: int) -> Rgb:
        return cls(((r & 0xFF) << 16) | ((g & 0xFF) << 8) | (b & 0xFF))

    @property
    def r(self) -> int:
        return (self.packed >> 16) & 0xFF

    @property
    def g(self) -> int:
        return (self.packed >> 8) & 0xFF

    @property
    def b(self) -> int:
        return self.packed & 0xFF

    def to_srgb(self) -> tuple[float, float, float]:
        return (self.r / 255.0, self.g / 255.0, self.b / 255.0)

    def to_linear(self) -> tuple[float, float, float]:
        r, g, b = self.to_srgb()
        return (r**_GAMMA, g**_GAMMA, b**_GAMMA)

    def to_rgba(self, alpha: int) -> Rgba:
        return Rgba((self.packed & 0xFFFFFF) | ((alpha & 0xFF) << 24))

    def hex(self) -> str:
        return f"#{self.packed & 0xFFFFFF:06x}"


@dataclass(frozen=True, slots=True)
class Rgba:
    """32-bit color packed as `0xAARRGGBB`."""

    packed: int

    @classmethod
    def new(cls, r: int, g: int, b: int, a: int) -> Rgba:
        return cls(((a & 0xFF) << 24) | ((r & 0xFF) << 16) | ((g & 0xFF) << 8) | (b & 0xFF))

    @property
    def r(self) -> int:
        return (self.packed >> 16) & 0xFF

    @property
    def g(self) -> int:
        return (self.packed >> 8) & 0xFF

    @property
    def b(self) -> int:
        return self.packed & 0xFF

    @property
    def a(self) -> int:
        return (self.packed >> 24) & 0xFF

    def to_srgb(self) -> tuple[float, float, float, float]:
        return (self.r / 255.0, self.g / 255.0, self.b / 255.0, self.a / 255.0)

    def to_linear(self) -> tuple[float, float, float, float]:
        # Alpha stays linear.
        r, g, b, a = self.to_srgb()
        return (r**_GAMMA, g**_GAMMA, b**_GAMMA, a)

    def to_rgb(self) -> Rgb:
        return Rgb(self.packed & 0xFFFFFF)
