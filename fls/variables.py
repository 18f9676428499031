"""
Fuzzy sets and the linguistic variables that own them.

A LinguisticVariable is a named crisp domain [min_domain, max_domain] holding
an insertion-ordered collection of named fuzzy sets. It clamps crisp inputs
into its domain and fuzzifies them against every set it holds.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional

from fls.errors import InvalidParameterError
from fls.membership import MembershipFunction

fuzzifier_log = logging.getLogger("fuzzifier")


def _require_name(kind: str, name: str) -> None:
    if not isinstance(name, str) or not name.strip():
        raise InvalidParameterError(f"{kind} name cannot be empty")


@dataclass(frozen=True)
class FuzzySet:
    """
    A named membership function.

    Attributes:
        name (str): Label of the set, unique within its variable.
        membership_function (MembershipFunction): Shape of the set.
    """

    name: str
    membership_function: MembershipFunction

    def __post_init__(self) -> None:
        _require_name("Fuzzy set", self.name)
        if not isinstance(self.membership_function, MembershipFunction):
            raise TypeError(
                f"Fuzzy set '{self.name}' needs a MembershipFunction, "
                f"got {type(self.membership_function).__name__}"
            )

    def membership(self, x: float) -> float:
        """Returns the membership degree of the crisp value ``x``."""
        return self.membership_function.calculate(x)

    def __str__(self) -> str:
        return self.name


class LinguisticVariable:
    """
    A named crisp domain partitioned into fuzzy sets.

    Attributes:
        name (str): Variable name used in rules and input maps.
        min_domain (float): Lower bound of valid crisp inputs.
        max_domain (float): Upper bound of valid crisp inputs.
    """

    def __init__(self, name: str, min_domain: float, max_domain: float):
        _require_name("Variable", name)
        if not (math.isfinite(min_domain) and math.isfinite(max_domain)):
            raise InvalidParameterError(
                f"Domain of '{name}' must be finite, got [{min_domain}, {max_domain}]"
            )
        if min_domain >= max_domain:
            raise InvalidParameterError(
                f"min_domain must be less than max_domain for '{name}', "
                f"got [{min_domain}, {max_domain}]"
            )
        self.name = name
        self.min_domain = float(min_domain)
        self.max_domain = float(max_domain)
        self._fuzzy_sets: Dict[str, FuzzySet] = {}

    def add_fuzzy_set(self, fuzzy_set: FuzzySet) -> None:
        """
        Adds a fuzzy set. A set with an existing name replaces the former one.

        Args:
            fuzzy_set (FuzzySet): The set to attach to this variable.
        """
        if not isinstance(fuzzy_set, FuzzySet):
            raise TypeError(f"Expected FuzzySet, got {type(fuzzy_set).__name__}")
        if fuzzy_set.name in self._fuzzy_sets:
            fuzzifier_log.debug("Replacing fuzzy set '%s' on '%s'.", fuzzy_set.name, self.name)
        self._fuzzy_sets[fuzzy_set.name] = fuzzy_set

    def get_fuzzy_set(self, name: str) -> Optional[FuzzySet]:
        return self._fuzzy_sets.get(name)

    @property
    def fuzzy_sets(self) -> List[FuzzySet]:
        """All fuzzy sets in insertion order."""
        return list(self._fuzzy_sets.values())

    @property
    def fuzzy_set_count(self) -> int:
        return len(self._fuzzy_sets)

    @property
    def midpoint(self) -> float:
        return (self.min_domain + self.max_domain) / 2.0

    def validate_input(self, value: float) -> float:
        """
        Clamps a crisp value into the variable's domain.

        Args:
            value (float): The raw crisp input.

        Returns:
            float: ``value`` clamped to [min_domain, max_domain], or the domain
                midpoint when ``value`` is NaN or infinite.
        """
        value = float(value)
        if not math.isfinite(value):
            return self.midpoint
        return max(self.min_domain, min(self.max_domain, value))

    def fuzzify(self, value: float) -> Dict[str, float]:
        """
        Fuzzifies a crisp value against every set of this variable.

        Args:
            value (float): The crisp value, validated into the domain first.

        Returns:
            Dict[str, float]: Set name to membership degree. Only sets with a
                degree > 0 are included.
        """
        crisp_value = self.validate_input(value)
        memberships = {}
        for fuzzy_set in self._fuzzy_sets.values():
            degree = fuzzy_set.membership(crisp_value)
            if degree > 0:
                memberships[fuzzy_set.name] = degree
        return memberships

    def __repr__(self) -> str:
        return (
            f"LinguisticVariable({self.name!r}, {self.min_domain}, {self.max_domain}, "
            f"sets={list(self._fuzzy_sets)})"
        )
