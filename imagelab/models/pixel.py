from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Pixel:
    """
    Value object: one RGBA color.
    Channels are expected in [0, 255] but are not clamped here;
    each algorithm clamps where it has to.
    """
    r: int
    g: int
    b: int
    a: int = 255

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return self.r, self.g, self.b, self.a

    @classmethod
    def gray(cls, value: int, alpha: int = 255) -> Pixel:
        return cls(value, value, value, alpha)
