"""
Fuzzy IF-THEN rules and the ordered rule base that holds them.

A Rule has an ordered antecedent of (variable, set, combinator) conditions
and a single consequent (output variable, output set). Its ``enabled`` flag
and ``weight`` stay mutable so rules can be edited between evaluations.

The rule base is not internally synchronized. Callers sharing a
FuzzyLogicSystem across threads must serialize rule edits and ``evaluate``
calls themselves.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple

from fls.errors import InvalidParameterError, RuleIndexError

rule_base_log = logging.getLogger("rule_base")


class Combinator(Enum):
    """How a condition combines with the running antecedent strength."""

    AND = "AND"
    OR = "OR"


@dataclass(frozen=True)
class AntecedentCondition:
    """
    One ``variable IS set`` clause of a rule antecedent.

    The combinator of the first condition in a rule is ignored.
    """

    variable_name: str
    fuzzy_set_name: str
    combinator: Combinator = Combinator.AND

    @property
    def is_and(self) -> bool:
        return self.combinator is Combinator.AND


def _check_weight(weight: float) -> float:
    weight = float(weight)
    # NaN fails both comparisons
    if not 0.0 <= weight <= 1.0:
        raise InvalidParameterError(f"Rule weight must be in [0, 1], got {weight}")
    return weight


class Rule:
    """
    A fuzzy IF-THEN rule.

    Attributes:
        antecedent (Tuple[AntecedentCondition, ...]): Ordered conditions.
        consequent_variable_name (str): Output variable named by the rule.
        consequent_fuzzy_set_name (str): Output fuzzy set named by the rule.
        enabled (bool): Disabled rules are skipped by every inference engine.
    """

    def __init__(
        self,
        consequent_variable_name: str,
        consequent_fuzzy_set_name: str,
        antecedent: Optional[Iterable] = None,
        weight: float = 1.0,
        enabled: bool = True,
    ):
        """
        Builds a rule.

        Args:
            consequent_variable_name (str): Name of the output variable.
            consequent_fuzzy_set_name (str): Name of the output fuzzy set.
            antecedent (Iterable, optional): AntecedentCondition objects or
                ``(variable, set)`` / ``(variable, set, combinator)`` tuples.
                An empty antecedent is vacuously true.
            weight (float): Rule weight in [0, 1].
            enabled (bool): Initial enabled flag.
        """
        self.antecedent: Tuple[AntecedentCondition, ...] = tuple(
            _as_condition(c) for c in (antecedent or ())
        )
        self.consequent_variable_name = consequent_variable_name
        self.consequent_fuzzy_set_name = consequent_fuzzy_set_name
        self.enabled = bool(enabled)
        self._weight = _check_weight(weight)

    @property
    def weight(self) -> float:
        return self._weight

    @weight.setter
    def weight(self, value: float) -> None:
        self._weight = _check_weight(value)

    def __str__(self) -> str:
        parts = ["IF "]
        for i, cond in enumerate(self.antecedent):
            if i > 0:
                parts.append(" AND " if cond.is_and else " OR ")
            parts.append(f"{cond.variable_name} IS {cond.fuzzy_set_name}")
        parts.append(f" THEN {self.consequent_variable_name} IS {self.consequent_fuzzy_set_name}")
        if self._weight != 1.0:
            parts.append(f" (weight: {self._weight})")
        return "".join(parts)

    def __repr__(self) -> str:
        return f"Rule({str(self)!r}, enabled={self.enabled})"


def _as_condition(item) -> AntecedentCondition:
    if isinstance(item, AntecedentCondition):
        return item
    if len(item) == 2:
        return AntecedentCondition(item[0], item[1])
    variable_name, fuzzy_set_name, combinator = item
    return AntecedentCondition(variable_name, fuzzy_set_name, Combinator(combinator))


class RuleBase:
    """An ordered collection of rules; insertion order is evaluation order."""

    def __init__(self) -> None:
        self._rules: List[Rule] = []

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._rules):
            raise RuleIndexError(
                f"Invalid rule index {index} for rule base of size {len(self._rules)}"
            )

    def add_rule(self, rule: Rule) -> None:
        if not isinstance(rule, Rule):
            raise TypeError(f"Expected Rule, got {type(rule).__name__}")
        self._rules.append(rule)
        rule_base_log.debug("Added rule #%d: %s", len(self._rules) - 1, rule)

    def remove_rule(self, index: int) -> Rule:
        self._check_index(index)
        rule = self._rules.pop(index)
        rule_base_log.debug("Removed rule #%d: %s", index, rule)
        return rule

    def get_rule(self, index: int) -> Rule:
        self._check_index(index)
        return self._rules[index]

    def enable_rule(self, index: int) -> None:
        self.get_rule(index).enabled = True

    def disable_rule(self, index: int) -> None:
        self.get_rule(index).enabled = False

    def set_rule_weight(self, index: int, weight: float) -> None:
        self.get_rule(index).weight = weight

    @property
    def rules(self) -> List[Rule]:
        """A copy of all rules in order."""
        return list(self._rules)

    def enabled_rules(self) -> List[Rule]:
        """Enabled rules, in their relative order."""
        return [rule for rule in self._rules if rule.enabled]

    def clear(self) -> None:
        self._rules.clear()
        rule_base_log.info("Rule base cleared.")

    def size(self) -> int:
        return len(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(list(self._rules))
