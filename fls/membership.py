"""
Membership functions mapping a crisp value to a degree in [0, 1].

Each shape validates its control points at construction and exposes the
finite interval where it is (practically) non-zero through ``domain()``.
Samplers and the Sugeno midpoint table rely on that interval.
"""

import math
from dataclasses import dataclass
from typing import Tuple

from fls.errors import InvalidParameterError

# Gaussian sets are unbounded; this many standard deviations either side of
# the center is reported as their support.
GAUSSIAN_SUPPORT_SIGMAS = 3.0


def _require_finite(kind: str, **params: float) -> None:
    for name, value in params.items():
        if not math.isfinite(value):
            raise InvalidParameterError(f"{kind} parameter '{name}' must be finite, got {value}")


class MembershipFunction:
    """Base class for all membership function shapes."""

    def calculate(self, x: float) -> float:
        """
        Calculates the membership degree of a crisp value.

        Args:
            x (float): The crisp input value.

        Returns:
            float: The degree of membership, from 0.0 to 1.0.
        """
        raise NotImplementedError

    def domain(self) -> Tuple[float, float]:
        """Returns the (min, max) interval outside which membership is zero."""
        raise NotImplementedError

    def __call__(self, x: float) -> float:
        return self.calculate(x)


@dataclass(frozen=True)
class TriangularMF(MembershipFunction):
    """
    Triangular membership function.

    Attributes:
        a (float): Left foot, membership 0.
        b (float): Peak, membership 1.
        c (float): Right foot, membership 0.
    """

    a: float
    b: float
    c: float

    def __post_init__(self) -> None:
        _require_finite("Triangular MF", a=self.a, b=self.b, c=self.c)
        if not self.a < self.b < self.c:
            raise InvalidParameterError(
                f"Triangular MF requires a < b < c, got [{self.a}, {self.b}, {self.c}]"
            )

    def calculate(self, x: float) -> float:
        if x <= self.a or x >= self.c:
            return 0.0
        if x == self.b:
            return 1.0
        # left half rt triangle
        if x < self.b:
            return (x - self.a) / (self.b - self.a)
        # right half rt triangle
        return (self.c - x) / (self.c - self.b)

    def domain(self) -> Tuple[float, float]:
        return (self.a, self.c)


@dataclass(frozen=True)
class TrapezoidalMF(MembershipFunction):
    """
    Trapezoidal membership function.

    Attributes:
        a (float): Left base, membership 0.
        b (float): Left edge of the plateau.
        c (float): Right edge of the plateau.
        d (float): Right base, membership 0.
    """

    a: float
    b: float
    c: float
    d: float

    def __post_init__(self) -> None:
        _require_finite("Trapezoidal MF", a=self.a, b=self.b, c=self.c, d=self.d)
        if not self.a < self.b < self.c < self.d:
            raise InvalidParameterError(
                "Trapezoidal MF requires a < b < c < d, got "
                f"[{self.a}, {self.b}, {self.c}, {self.d}]"
            )

    def calculate(self, x: float) -> float:
        if x <= self.a or x >= self.d:
            return 0.0
        if self.b <= x <= self.c:
            return 1.0
        if x < self.b:
            return (x - self.a) / (self.b - self.a)
        return (self.d - x) / (self.d - self.c)

    def domain(self) -> Tuple[float, float]:
        return (self.a, self.d)


@dataclass(frozen=True)
class GaussianMF(MembershipFunction):
    """
    Gaussian membership function ``exp(-0.5 * ((x - center) / width) ** 2)``.

    Never reaches exactly zero; ``domain()`` reports center +/- 3 widths.
    """

    center: float
    width: float

    def __post_init__(self) -> None:
        _require_finite("Gaussian MF", center=self.center, width=self.width)
        if self.width <= 0:
            raise InvalidParameterError(f"Gaussian MF width must be positive, got {self.width}")

    def calculate(self, x: float) -> float:
        z = (x - self.center) / self.width
        return math.exp(-0.5 * z * z)

    def domain(self) -> Tuple[float, float]:
        spread = GAUSSIAN_SUPPORT_SIGMAS * self.width
        return (self.center - spread, self.center + spread)
