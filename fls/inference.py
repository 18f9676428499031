"""
Evaluates the fuzzy rule base to determine rule activation and output.

This module takes the fuzzified inputs (membership degrees) and fires every
enabled rule. The firing strength of a rule is a left-to-right fold of its
antecedent memberships through the AND / OR operators, multiplied by the
rule's weight. Two engines consume those strengths:

    - MamdaniInference collects strengths per consequent fuzzy set and
      aggregates them, leaving implication and defuzzification to the
      orchestrator.
    - SugenoInference blends crisp consequent values directly:

          output = Σ(W_i * Z_i) / Σ W_i

      where W_i is the firing strength and Z_i the crisp consequent of rule i.
"""

import logging
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from fls.operators import (
    AggregationOperator,
    ImplicationOperator,
    MaxAggregation,
    MinImplication,
    SNorm,
    TNorm,
)
from fls.rules import AntecedentCondition, Rule
from fls.variables import LinguisticVariable

inference_log = logging.getLogger("inference")

FuzzifiedInputs = Mapping[str, Mapping[str, float]]

SUGENO_OUTPUT_KEY = "output"


class InferenceFamily(Enum):
    MAMDANI = "mamdani"
    SUGENO = "sugeno"


def _membership(cond: AntecedentCondition, fuzzified_inputs: FuzzifiedInputs) -> float:
    # Absent variable or set means the degree was zero and omitted
    return fuzzified_inputs.get(cond.variable_name, {}).get(cond.fuzzy_set_name, 0.0)


def compute_firing_strength(
    rule: Rule,
    fuzzified_inputs: FuzzifiedInputs,
    and_operator: TNorm,
    or_operator: SNorm,
) -> float:
    """
    Computes the unweighted firing strength of a rule.

    Args:
        rule (Rule): The rule to fire.
        fuzzified_inputs (FuzzifiedInputs): Variable -> {set: degree}.
        and_operator (TNorm): Used for conditions combined with AND.
        or_operator (SNorm): Used for conditions combined with OR.

    Returns:
        float: The antecedent degree; 1.0 for an empty antecedent.
    """
    antecedent = rule.antecedent
    if not antecedent:
        return 1.0

    strength = _membership(antecedent[0], fuzzified_inputs)
    for cond in antecedent[1:]:
        degree = _membership(cond, fuzzified_inputs)
        if cond.is_and:
            strength = and_operator.compute(strength, degree)
        else:
            strength = or_operator.compute(strength, degree)
    return strength


class InferenceEngine:
    """
    Base class for inference engines.

    Attributes:
        and_operator (TNorm): Fuzzy AND used in antecedents.
        or_operator (SNorm): Fuzzy OR used in antecedents.
    """

    family: InferenceFamily

    def __init__(self, and_operator: TNorm, or_operator: SNorm):
        self.and_operator = and_operator
        self.or_operator = or_operator

    def firing_strength(self, rule: Rule, fuzzified_inputs: FuzzifiedInputs) -> float:
        """Returns the weighted firing strength of ``rule``."""
        strength = compute_firing_strength(
            rule, fuzzified_inputs, self.and_operator, self.or_operator
        )
        return strength * rule.weight

    def infer(
        self,
        rules: Sequence[Rule],
        fuzzified_inputs: FuzzifiedInputs,
        output_variable: LinguisticVariable,
    ) -> Dict[str, float]:
        """
        Performs inference on the enabled rules given fuzzified inputs.

        Args:
            rules (Sequence[Rule]): Rules to evaluate; disabled ones are skipped.
            fuzzified_inputs (FuzzifiedInputs): Variable -> {set: degree}.
            output_variable (LinguisticVariable): The output variable.

        Returns:
            Dict[str, float]: Output set -> aggregated degree (Mamdani) or
                {"output": crisp value} (Sugeno).
        """
        raise NotImplementedError


class MamdaniInference(InferenceEngine):
    """
    Mamdani inference: fuzzy-set consequents that require defuzzification.

    Attributes:
        implication_operator (ImplicationOperator): Applied lazily when the
            output surface is sampled.
        aggregation_operator (AggregationOperator): Combines contributions of
            rules targeting the same output set.
    """

    family = InferenceFamily.MAMDANI

    def __init__(
        self,
        and_operator: TNorm,
        or_operator: SNorm,
        implication_operator: Optional[ImplicationOperator] = None,
        aggregation_operator: Optional[AggregationOperator] = None,
    ):
        super().__init__(and_operator, or_operator)
        self.implication_operator = implication_operator or MinImplication()
        self.aggregation_operator = aggregation_operator or MaxAggregation()

    def infer(
        self,
        rules: Sequence[Rule],
        fuzzified_inputs: FuzzifiedInputs,
        output_variable: LinguisticVariable,
    ) -> Dict[str, float]:
        contributions: Dict[str, List[float]] = {}

        for i, rule in enumerate(rules):
            if not rule.enabled:
                continue

            w = self.firing_strength(rule, fuzzified_inputs)
            if w <= 0:
                inference_log.debug("Rule# %d W= %.3f", i, w)
                continue

            set_name = rule.consequent_fuzzy_set_name
            if output_variable.get_fuzzy_set(set_name) is None:
                inference_log.debug(
                    "Rule# %d targets unknown output set '%s'; ignored.", i, set_name
                )
                continue

            contributions.setdefault(set_name, []).append(w)
            inference_log.debug("Rule# %d W= %.3f -> %s", i, w, set_name)

        result = {
            set_name: self.aggregation_operator.aggregate(strengths)
            for set_name, strengths in contributions.items()
        }
        inference_log.debug(
            "Mamdani aggregated: %s", {k: round(v, 3) for k, v in result.items()}
        )
        return result

    def aggregated_membership(
        self, inferred: Mapping[str, float], output_variable: LinguisticVariable
    ) -> Callable[[float], float]:
        """
        Builds the implicated, aggregated output surface as a callable.

        At each x the implication is applied to every fired output set and the
        pointwise maximum is taken, so the clipped surface is never
        materialized.

        Args:
            inferred (Mapping[str, float]): Output set -> aggregated degree.
            output_variable (LinguisticVariable): Owner of the output sets.

        Returns:
            Callable[[float], float]: x -> membership of the output surface.
        """
        fired = [
            (output_variable.get_fuzzy_set(name), strength)
            for name, strength in inferred.items()
            if output_variable.get_fuzzy_set(name) is not None
        ]
        implication = self.implication_operator

        def mu(x: float) -> float:
            max_mu = 0.0
            for fuzzy_set, strength in fired:
                max_mu = max(max_mu, implication.apply(strength, fuzzy_set.membership(x)))
            return max_mu

        return mu


class SugenoInference(InferenceEngine):
    """
    Sugeno inference (zero-order or first-order) with crisp consequents.

    Attributes:
        consequent_values (Dict[str, float]): Output set -> constant term.
            Also used as the representative value of input sets when
            first-order terms need a crisp value for an input variable.
        consequent_coefficients (Dict[str, Dict[str, float]]): Output set ->
            {input variable: coefficient}. Empty for zero-order.
    """

    family = InferenceFamily.SUGENO

    def __init__(
        self,
        and_operator: TNorm,
        or_operator: SNorm,
        consequent_values: Mapping[str, float],
        consequent_coefficients: Optional[Mapping[str, Mapping[str, float]]] = None,
    ):
        super().__init__(and_operator, or_operator)
        self.consequent_values = dict(consequent_values)
        self.consequent_coefficients = {
            set_name: dict(coeffs)
            for set_name, coeffs in (consequent_coefficients or {}).items()
        }

    @property
    def is_first_order(self) -> bool:
        return bool(self.consequent_coefficients)

    def infer(
        self,
        rules: Sequence[Rule],
        fuzzified_inputs: FuzzifiedInputs,
        output_variable: LinguisticVariable,
    ) -> Dict[str, float]:
        weighted_sum = 0.0
        weight_sum = 0.0

        for i, rule in enumerate(rules):
            if not rule.enabled:
                continue

            w = self.firing_strength(rule, fuzzified_inputs)
            if w > 0:
                z = self.consequent_value(rule.consequent_fuzzy_set_name, fuzzified_inputs)
                weighted_sum += w * z
                weight_sum += w
                inference_log.debug("Rule# %d W= %.3f, Z= %.3f", i, w, z)
            else:
                inference_log.debug("Rule# %d W= %.3f", i, w)

        if weight_sum > 0:
            output = weighted_sum / weight_sum
        else:
            inference_log.debug("Sum of firing strengths is zero. Outputting 0.")
            output = 0.0
        return {SUGENO_OUTPUT_KEY: output}

    def consequent_value(self, set_name: str, fuzzified_inputs: FuzzifiedInputs) -> float:
        """
        Computes the crisp consequent Z of an output set.

        Zero-order: the configured constant. First-order: the constant plus
        Σ coeff * crisp representative of each listed input variable that was
        fuzzified.
        """
        value = self.consequent_values.get(set_name, 0.0)
        coefficients = self.consequent_coefficients.get(set_name)
        if not coefficients:
            return value

        for var_name, coeff in coefficients.items():
            memberships = fuzzified_inputs.get(var_name)
            if memberships is not None:
                value += coeff * self.crisp_representative(memberships)
        return value

    def crisp_representative(self, memberships: Mapping[str, float]) -> float:
        """
        Locally defuzzifies one input variable's memberships.

        Each set contributes its entry in ``consequent_values`` (looked up by
        set name), weighted by its degree. Returns 0.0 when nothing fired.
        """
        weighted_sum = 0.0
        weight_sum = 0.0
        for set_name, degree in memberships.items():
            weighted_sum += degree * self.consequent_values.get(set_name, 0.0)
            weight_sum += degree
        return weighted_sum / weight_sum if weight_sum > 0 else 0.0
