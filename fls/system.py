"""
Orchestrates the fuzzy logic evaluation pipeline.

This module integrates the Fuzzifier, an InferenceEngine and a
DefuzzificationMethod to turn crisp inputs into a single crisp output:

    fuzzify -> infer (enabled rules only) -> defuzzify (Mamdani only)

Configuration calls (variable registration, rule edits, operator and engine
setters) are meant to happen before or between evaluate() calls. A system is
owned by one logical thread of control at a time; callers sharing it must
serialize access themselves.
"""

import logging
from typing import Callable, Dict, Mapping, Optional

from fls.config import SystemConfig
from fls.defuzzifier import DefuzzificationMethod
from fls.fuzzifier import Fuzzifier
from fls.inference import (
    SUGENO_OUTPUT_KEY,
    InferenceEngine,
    InferenceFamily,
    MamdaniInference,
    SugenoInference,
)
from fls.operators import AggregationOperator, ImplicationOperator, SNorm, TNorm
from fls.rules import RuleBase
from fls.variables import LinguisticVariable

system_log = logging.getLogger("system")


class FuzzyLogicSystem:
    """
    A single-output fuzzy inference system.

    Attributes:
        output_variable (LinguisticVariable): Fixed at construction.
        rule_base (RuleBase): Rules fired on every evaluation.
        fuzzifier (Fuzzifier): Fuzzifies crisp inputs against input variables.
    """

    def __init__(self, output_variable: LinguisticVariable, config: Optional[SystemConfig] = None):
        """
        Initializes the system with its output variable and strategies.

        Args:
            output_variable (LinguisticVariable): The single output variable.
            config (SystemConfig, optional): Operators, engine and
                defuzzifier. Defaults to minimum t-norm, maximum s-norm,
                Mamdani min/max and centroid defuzzification.
        """
        if not isinstance(output_variable, LinguisticVariable):
            raise TypeError(
                f"Output variable must be a LinguisticVariable, got {type(output_variable).__name__}"
            )
        config = config or SystemConfig()

        self.output_variable = output_variable
        self.rule_base = RuleBase()
        self._input_variables: Dict[str, LinguisticVariable] = {}
        self.fuzzifier = Fuzzifier(self._input_variables)

        self._defuzzification_method = config.defuzzification_method
        self._install_engine(config.build_engine())

        system_log.info(
            "Fuzzy logic system initialized with output '%s' (%s inference).",
            output_variable.name,
            self._inference_engine.family.value,
        )

    # ------------------------------------------------------------
    # Variables
    # ------------------------------------------------------------
    def add_input_variable(self, variable: LinguisticVariable) -> None:
        """Registers an input variable; a same-named variable is replaced."""
        if not isinstance(variable, LinguisticVariable):
            raise TypeError(f"Expected LinguisticVariable, got {type(variable).__name__}")
        if variable.name in self._input_variables:
            system_log.debug("Replacing input variable '%s'.", variable.name)
        self._input_variables[variable.name] = variable

    def get_input_variable(self, name: str) -> Optional[LinguisticVariable]:
        return self._input_variables.get(name)

    @property
    def input_variables(self) -> Dict[str, LinguisticVariable]:
        """A copy of the registered input variables, in registration order."""
        return dict(self._input_variables)

    # ------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------
    @property
    def and_operator(self) -> TNorm:
        return self._and_operator

    @and_operator.setter
    def and_operator(self, operator: TNorm) -> None:
        if not isinstance(operator, TNorm):
            raise TypeError(f"Expected TNorm, got {type(operator).__name__}")
        self._and_operator = operator
        self._rebuild_engine()

    @property
    def or_operator(self) -> SNorm:
        return self._or_operator

    @or_operator.setter
    def or_operator(self, operator: SNorm) -> None:
        if not isinstance(operator, SNorm):
            raise TypeError(f"Expected SNorm, got {type(operator).__name__}")
        self._or_operator = operator
        self._rebuild_engine()

    @property
    def inference_engine(self) -> InferenceEngine:
        return self._inference_engine

    @inference_engine.setter
    def inference_engine(self, engine: InferenceEngine) -> None:
        """Installs an engine; the system adopts its AND/OR operators."""
        if not isinstance(engine, InferenceEngine):
            raise TypeError(f"Expected InferenceEngine, got {type(engine).__name__}")
        self._install_engine(engine)
        system_log.info("Inference engine set to %s.", engine.family.value)

    @property
    def defuzzification_method(self) -> DefuzzificationMethod:
        return self._defuzzification_method

    @defuzzification_method.setter
    def defuzzification_method(self, method: DefuzzificationMethod) -> None:
        if not isinstance(method, DefuzzificationMethod):
            raise TypeError(f"Expected DefuzzificationMethod, got {type(method).__name__}")
        self._defuzzification_method = method
        system_log.info("Defuzzification method set to %r.", method)

    def setup_mamdani_inference(
        self,
        implication_operator: Optional[ImplicationOperator] = None,
        aggregation_operator: Optional[AggregationOperator] = None,
    ) -> None:
        """Switches to Mamdani inference with the current AND/OR operators."""
        self.inference_engine = MamdaniInference(
            self._and_operator, self._or_operator, implication_operator, aggregation_operator
        )

    def setup_sugeno_inference(
        self,
        consequent_values: Optional[Mapping[str, float]] = None,
        consequent_coefficients: Optional[Mapping[str, Mapping[str, float]]] = None,
    ) -> None:
        """
        Switches to Sugeno inference with the current AND/OR operators.

        Args:
            consequent_values (Mapping[str, float], optional): Output set ->
                constant. Derived from output set domain midpoints when omitted.
            consequent_coefficients (Mapping, optional): Output set ->
                {input variable: coefficient} for first-order consequents.
        """
        self.inference_engine = SugenoInference(
            self._and_operator,
            self._or_operator,
            consequent_values or {},
            consequent_coefficients,
        )

    def midpoint_consequent_values(self) -> Dict[str, float]:
        """Output set name -> midpoint of the set's membership function domain."""
        values = {}
        for fuzzy_set in self.output_variable.fuzzy_sets:
            lo, hi = fuzzy_set.membership_function.domain()
            values[fuzzy_set.name] = (lo + hi) / 2.0
        return values

    def _install_engine(self, engine: InferenceEngine) -> None:
        # The engine's AND/OR operators become the system's own
        self._and_operator = engine.and_operator
        self._or_operator = engine.or_operator
        self._inference_engine = self._with_consequent_table(engine)

    def _with_consequent_table(self, engine: InferenceEngine) -> InferenceEngine:
        if engine.family is InferenceFamily.SUGENO and not engine.consequent_values:
            return SugenoInference(
                engine.and_operator,
                engine.or_operator,
                self.midpoint_consequent_values(),
                engine.consequent_coefficients,
            )
        return engine

    def _rebuild_engine(self) -> None:
        engine = self._inference_engine
        if engine.family is InferenceFamily.MAMDANI:
            rebuilt = MamdaniInference(
                self._and_operator,
                self._or_operator,
                engine.implication_operator,
                engine.aggregation_operator,
            )
        elif engine.family is InferenceFamily.SUGENO:
            rebuilt = SugenoInference(
                self._and_operator,
                self._or_operator,
                engine.consequent_values or self.midpoint_consequent_values(),
                engine.consequent_coefficients,
            )
        else:
            raise TypeError(f"Unsupported inference family {engine.family!r}")
        self._inference_engine = rebuilt
        system_log.debug(
            "Rebuilt %s engine with and=%s or=%s.",
            engine.family.value,
            type(self._and_operator).__name__,
            type(self._or_operator).__name__,
        )

    # ------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------
    def fuzzify(self, crisp_inputs: Mapping[str, float]) -> Dict[str, Dict[str, float]]:
        return self.fuzzifier.fuzzify(crisp_inputs)

    def infer(self, fuzzified_inputs: Mapping[str, Mapping[str, float]]) -> Dict[str, float]:
        return self._inference_engine.infer(
            self.rule_base.enabled_rules(), fuzzified_inputs, self.output_variable
        )

    def aggregated_membership(self, inferred: Mapping[str, float]) -> Callable[[float], float]:
        """
        Returns the Mamdani output surface for an inference result.

        Raises:
            TypeError: If the current engine is not a Mamdani engine.
        """
        engine = self._inference_engine
        if engine.family is not InferenceFamily.MAMDANI:
            raise TypeError("An output surface only exists for Mamdani inference")
        return engine.aggregated_membership(inferred, self.output_variable)

    def defuzzify(self, inferred: Mapping[str, float]) -> float:
        if self._inference_engine.family is InferenceFamily.SUGENO:
            return inferred.get(SUGENO_OUTPUT_KEY, 0.0)
        return self._defuzzification_method.defuzzify(
            self.aggregated_membership(inferred),
            self.output_variable.min_domain,
            self.output_variable.max_domain,
        )

    def evaluate(self, crisp_inputs: Mapping[str, float]) -> float:
        """
        Executes one full cycle of the fuzzy inference system.

        Args:
            crisp_inputs (Mapping[str, float]): Input variable name to crisp
                value. Unknown names are skipped; missing variables simply
                contribute zero membership.

        Returns:
            float: The crisp output value.
        """
        system_log.debug("--- Evaluation start (inputs= %s) ---", dict(crisp_inputs))
        fuzzified = self.fuzzify(crisp_inputs)
        inferred = self.infer(fuzzified)
        output = self.defuzzify(inferred)
        system_log.debug("--- Evaluation end (output= %.4f) ---", output)
        return output

    def get_fuzzification_results(
        self, crisp_inputs: Mapping[str, float]
    ) -> Dict[str, Dict[str, float]]:
        """Variable -> {set: degree > 0} for inspection."""
        return self.fuzzify(crisp_inputs)

    def get_inference_results(self, crisp_inputs: Mapping[str, float]) -> Dict[str, float]:
        """Output set -> aggregated degree (Mamdani) or {"output": value} (Sugeno)."""
        return self.infer(self.fuzzify(crisp_inputs))
