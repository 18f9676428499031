"""
Computes the final crisp output from an aggregated fuzzy output surface.

Both methods sample the surface on ``samples + 1`` equally spaced points
across [min_domain, max_domain] and fall back to the domain midpoint when no
membership is observed, so the result is always finite and inside the
domain.
"""

import logging
import numbers
from typing import Callable, Iterator

from fls.errors import InvalidParameterError

defuzzifier_log = logging.getLogger("defuzzifier")

DEFAULT_SAMPLES = 1000

MembershipCallable = Callable[[float], float]


class DefuzzificationMethod:
    """
    Base class for grid-sampling defuzzifiers.

    Attributes:
        samples (int): Number of intervals in the sampling grid.
    """

    def __init__(self, samples: int = DEFAULT_SAMPLES):
        if isinstance(samples, bool) or not isinstance(samples, numbers.Integral) or samples <= 0:
            raise InvalidParameterError(f"Number of samples must be a positive integer, got {samples!r}")
        self.samples = int(samples)

    def _grid(self, min_domain: float, max_domain: float) -> Iterator[float]:
        step = (max_domain - min_domain) / self.samples
        for i in range(self.samples + 1):
            # rounding can push the last point an ulp past max_domain
            yield min(max_domain, min_domain + i * step)

    def defuzzify(
        self, membership: MembershipCallable, min_domain: float, max_domain: float
    ) -> float:
        """
        Collapses a membership function into one crisp value.

        Args:
            membership (Callable[[float], float]): The aggregated output surface.
            min_domain (float): Lower bound of the output domain.
            max_domain (float): Upper bound of the output domain.

        Returns:
            float: A crisp value within [min_domain, max_domain].
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(samples={self.samples})"


class CentroidDefuzzification(DefuzzificationMethod):
    """Center of gravity: Σ x·μ(x) / Σ μ(x) over the sampling grid."""

    def defuzzify(
        self, membership: MembershipCallable, min_domain: float, max_domain: float
    ) -> float:
        numerator = 0.0
        denominator = 0.0
        for x in self._grid(min_domain, max_domain):
            mu = membership(x)
            numerator += x * mu
            denominator += mu

        if denominator == 0.0:
            defuzzifier_log.debug("No membership mass; returning domain midpoint.")
            return (min_domain + max_domain) / 2.0

        # the ratio can round an ulp outside the sampled interval
        result = min(max_domain, max(min_domain, numerator / denominator))
        defuzzifier_log.debug("Centroid output: %.4f", result)
        return result


class MeanOfMaximumDefuzzification(DefuzzificationMethod):
    """
    Mean of the grid points where the sampled membership peaks.

    Ties are detected with exact float equality, so near-equal samples on a
    sloped peak are not merged and the result depends on the grid density.
    """

    def defuzzify(
        self, membership: MembershipCallable, min_domain: float, max_domain: float
    ) -> float:
        max_mu = 0.0
        max_points = []
        for x in self._grid(min_domain, max_domain):
            mu = membership(x)
            if mu > max_mu:
                max_mu = mu
                max_points = [x]
            elif mu == max_mu and max_mu > 0:
                max_points.append(x)

        if not max_points:
            defuzzifier_log.debug("No positive membership; returning domain midpoint.")
            return (min_domain + max_domain) / 2.0

        result = min(max_domain, max(min_domain, sum(max_points) / len(max_points)))
        defuzzifier_log.debug(
            "Mean of maximum output: %.4f (%d points at mu=%.4f)", result, len(max_points), max_mu
        )
        return result
