"""
Configuration for a FuzzyLogicSystem.

SystemConfig is the explicit set of strategies a system is constructed with.
load_config() builds one from a TOML file laid out as:

    [operators]
    and = "min"
    or = "max"
    implication = "min"
    aggregation = "max"

    [inference]
    engine = "mamdani"            # or "sugeno"

    [inference.consequent_values]   # sugeno only
    Low = 10.0

    [inference.consequent_coefficients.Low]   # sugeno first-order only
    Temperature = 0.5

    [defuzzification]
    method = "centroid"           # or "mean_of_maximum"
    samples = 1000

Missing tables and keys fall back to the defaults: minimum t-norm, maximum
s-norm, Mamdani with minimum implication and maximum aggregation, centroid
defuzzification over 1000 samples.
"""

import logging
import tomllib
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from fls.defuzzifier import (
    DEFAULT_SAMPLES,
    CentroidDefuzzification,
    DefuzzificationMethod,
    MeanOfMaximumDefuzzification,
)
from fls.errors import InvalidParameterError
from fls.inference import InferenceEngine, MamdaniInference, SugenoInference
from fls.operators import (
    AGGREGATIONS,
    IMPLICATIONS,
    SNORMS,
    TNORMS,
    AggregationOperator,
    ImplicationOperator,
    MaxAggregation,
    MaxSNorm,
    MinImplication,
    MinTNorm,
    SNorm,
    TNorm,
)

config_log = logging.getLogger("config")

DEFUZZIFIERS = {
    "centroid": CentroidDefuzzification,
    "mean_of_maximum": MeanOfMaximumDefuzzification,
}
ENGINES = ("mamdani", "sugeno")


@dataclass
class SystemConfig:
    """
    Strategies handed to a FuzzyLogicSystem at construction.

    Attributes:
        and_operator (TNorm): Fuzzy AND for rule antecedents.
        or_operator (SNorm): Fuzzy OR for rule antecedents.
        implication_operator (ImplicationOperator): Used when the default
            Mamdani engine is built.
        aggregation_operator (AggregationOperator): Used when the default
            Mamdani engine is built.
        inference_engine (InferenceEngine, optional): Explicit engine. When
            None a Mamdani engine is built from the four operators above.
            When set, the engine carries its own operators and the four
            fields above are not consulted.
        defuzzification_method (DefuzzificationMethod): Mamdani defuzzifier.
    """

    and_operator: TNorm = field(default_factory=MinTNorm)
    or_operator: SNorm = field(default_factory=MaxSNorm)
    implication_operator: ImplicationOperator = field(default_factory=MinImplication)
    aggregation_operator: AggregationOperator = field(default_factory=MaxAggregation)
    inference_engine: Optional[InferenceEngine] = None
    defuzzification_method: DefuzzificationMethod = field(
        default_factory=CentroidDefuzzification
    )

    def build_engine(self) -> InferenceEngine:
        """Returns the configured engine, or a default Mamdani engine."""
        if self.inference_engine is not None:
            return self.inference_engine
        return MamdaniInference(
            self.and_operator,
            self.or_operator,
            self.implication_operator,
            self.aggregation_operator,
        )


def _lookup(registry: Mapping[str, type], kind: str, name: Any):
    key = str(name).strip().lower()
    if key not in registry:
        raise InvalidParameterError(
            f"Unknown {kind} '{name}'. Options: {', '.join(sorted(registry))}"
        )
    return registry[key]()


def config_from_dict(data: Mapping[str, Any]) -> SystemConfig:
    """
    Builds a SystemConfig from an already parsed configuration mapping.

    Args:
        data (Mapping[str, Any]): Parsed TOML document (see module docstring).

    Returns:
        SystemConfig: The resolved strategies.
    """
    ops = data.get("operators", {})
    inference = data.get("inference", {})
    defuzz = data.get("defuzzification", {})

    and_operator = _lookup(TNORMS, "t-norm", ops.get("and", "min"))
    or_operator = _lookup(SNORMS, "s-norm", ops.get("or", "max"))
    implication = _lookup(IMPLICATIONS, "implication", ops.get("implication", "min"))
    aggregation = _lookup(AGGREGATIONS, "aggregation", ops.get("aggregation", "max"))

    method_name = str(defuzz.get("method", "centroid")).strip().lower()
    if method_name not in DEFUZZIFIERS:
        raise InvalidParameterError(
            f"Unknown defuzzification method '{method_name}'. "
            f"Options: {', '.join(sorted(DEFUZZIFIERS))}"
        )
    method = DEFUZZIFIERS[method_name](defuzz.get("samples", DEFAULT_SAMPLES))

    engine_name = str(inference.get("engine", "mamdani")).strip().lower()
    if engine_name not in ENGINES:
        raise InvalidParameterError(
            f"Unknown inference engine '{engine_name}'. Options: {', '.join(ENGINES)}"
        )

    engine = None
    if engine_name == "sugeno":
        values = {k: float(v) for k, v in inference.get("consequent_values", {}).items()}
        coefficients = {
            set_name: {var: float(c) for var, c in coeffs.items()}
            for set_name, coeffs in inference.get("consequent_coefficients", {}).items()
        }
        # An empty value table is filled from the output variable's set
        # midpoints by the system.
        engine = SugenoInference(and_operator, or_operator, values, coefficients)

    config_log.info(
        "Config resolved: and=%s or=%s engine=%s defuzzifier=%r",
        type(and_operator).__name__,
        type(or_operator).__name__,
        engine_name,
        method,
    )
    return SystemConfig(
        and_operator=and_operator,
        or_operator=or_operator,
        implication_operator=implication,
        aggregation_operator=aggregation,
        inference_engine=engine,
        defuzzification_method=method,
    )


def read_config_data(path: str) -> Dict[str, Any]:
    """Parses a TOML configuration file into a plain mapping."""
    with open(path, "rb") as f:
        data: Dict[str, Any] = tomllib.load(f)
    config_log.info("Configuration file '%s' loaded.", path)
    return data


def load_config(path: str) -> SystemConfig:
    """
    Loads a SystemConfig from a TOML file.

    Args:
        path (str): Path to the TOML configuration file.

    Returns:
        SystemConfig: The resolved strategies.
    """
    return config_from_dict(read_config_data(path))
