"""RGB color model.

Colors are accumulated unclamped while shading and clamped to [0, 1] only
when a pixel is written out. On the device a color is a plain ``vec3``; the
host-side ``Color`` tuple is what the rendering API hands back to callers.

Example:
    >>> Color(0.5, 2.0, -1.0).clamp()
    Color(r=0.5, g=1.0, b=0.0)
    >>> Color(0.2, 0.4, 0.6) * 0.5
    Color(r=0.1, g=0.2, b=0.3)
"""

from typing import NamedTuple

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3


class Color(NamedTuple):
    """An RGB triple of floating point channels.

    Channels are not range-checked; call clamp() before display.
    """

    r: float
    g: float
    b: float

    def __add__(self, other: "Color") -> "Color":  # type: ignore[override]
        return Color(self.r + other.r, self.g + other.g, self.b + other.b)

    def __mul__(self, other: "Color | float") -> "Color":  # type: ignore[override]
        if isinstance(other, Color):
            return Color(self.r * other.r, self.g * other.g, self.b * other.b)
        return Color(self.r * other, self.g * other, self.b * other)

    def __rmul__(self, other: float) -> "Color":  # type: ignore[override]
        return Color(self.r * other, self.g * other, self.b * other)

    def clamp(self) -> "Color":
        """Clamp every channel to [0, 1]."""
        return Color(
            min(max(self.r, 0.0), 1.0),
            min(max(self.g, 0.0), 1.0),
            min(max(self.b, 0.0), 1.0),
        )

    def is_black(self) -> bool:
        return self.r == 0.0 and self.g == 0.0 and self.b == 0.0

    def to_rgb255(self) -> tuple[int, int, int]:
        """Scale a clamped copy to 0-255, truncating toward zero."""
        c = self.clamp()
        return int(c.r * 255.0), int(c.g * 255.0), int(c.b * 255.0)

    @classmethod
    def from_vec(cls, v) -> "Color":
        """Build a Color from any 3-component sequence (vec3, tuple, array)."""
        return cls(float(v[0]), float(v[1]), float(v[2]))


BLACK = Color(0.0, 0.0, 0.0)


@ti.func
def clamp_color(color: vec3) -> vec3:
    """Clamp every channel of a device color to [0, 1]."""
    return tm.clamp(color, 0.0, 1.0)
