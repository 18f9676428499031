"""
Stateless fuzzy operators: t-norms (AND), s-norms (OR), implication and
aggregation.

Each family is a small base class with one concrete class per variant. The
name registries at the bottom map configuration names to classes.
"""

from dataclasses import dataclass
from typing import Iterable


class TNorm:
    """Fuzzy AND: commutative, associative, [0, 1] x [0, 1] -> [0, 1]."""

    def compute(self, a: float, b: float) -> float:
        raise NotImplementedError


class SNorm:
    """Fuzzy OR: commutative, associative, [0, 1] x [0, 1] -> [0, 1]."""

    def compute(self, a: float, b: float) -> float:
        raise NotImplementedError


class ImplicationOperator:
    """Reshapes a consequent membership by a rule's firing strength."""

    def apply(self, rule_strength: float, consequent_membership: float) -> float:
        raise NotImplementedError


class AggregationOperator:
    """Folds the contributions of several rules targeting one output set."""

    def aggregate(self, values: Iterable[float]) -> float:
        raise NotImplementedError


# --- T-norms ---
@dataclass(frozen=True)
class MinTNorm(TNorm):
    def compute(self, a: float, b: float) -> float:
        return min(a, b)


@dataclass(frozen=True)
class ProductTNorm(TNorm):
    def compute(self, a: float, b: float) -> float:
        return a * b


@dataclass(frozen=True)
class LukasiewiczTNorm(TNorm):
    def compute(self, a: float, b: float) -> float:
        return max(0.0, a + b - 1.0)


# --- S-norms ---
@dataclass(frozen=True)
class MaxSNorm(SNorm):
    def compute(self, a: float, b: float) -> float:
        return max(a, b)


@dataclass(frozen=True)
class BoundedSumSNorm(SNorm):
    def compute(self, a: float, b: float) -> float:
        return min(1.0, a + b)


@dataclass(frozen=True)
class ProbabilisticSumSNorm(SNorm):
    def compute(self, a: float, b: float) -> float:
        return a + b - a * b


# --- Implications ---
@dataclass(frozen=True)
class MinImplication(ImplicationOperator):
    """Mamdani clipping."""

    def apply(self, rule_strength: float, consequent_membership: float) -> float:
        return min(rule_strength, consequent_membership)


@dataclass(frozen=True)
class ProductImplication(ImplicationOperator):
    """Larsen scaling."""

    def apply(self, rule_strength: float, consequent_membership: float) -> float:
        return rule_strength * consequent_membership


# --- Aggregations ---
@dataclass(frozen=True)
class MaxAggregation(AggregationOperator):
    def aggregate(self, values: Iterable[float]) -> float:
        result = 0.0
        for v in values:
            if v > result:
                result = v
        return result


@dataclass(frozen=True)
class BoundedSumAggregation(AggregationOperator):
    def aggregate(self, values: Iterable[float]) -> float:
        s = 0.0
        for v in values:
            s += v
            if s >= 1.0:
                return 1.0
        return s


TNORMS = {
    "min": MinTNorm,
    "product": ProductTNorm,
    "lukasiewicz": LukasiewiczTNorm,
}
SNORMS = {
    "max": MaxSNorm,
    "bounded_sum": BoundedSumSNorm,
    "probabilistic_sum": ProbabilisticSumSNorm,
}
IMPLICATIONS = {
    "min": MinImplication,
    "product": ProductImplication,
}
AGGREGATIONS = {
    "max": MaxAggregation,
    "bounded_sum": BoundedSumAggregation,
}
