import math

import pytest

from fls.config import SystemConfig
from fls.defuzzifier import CentroidDefuzzification, MeanOfMaximumDefuzzification
from fls.inference import InferenceFamily, MamdaniInference, SugenoInference
from fls.membership import GaussianMF, TrapezoidalMF, TriangularMF
from fls.operators import (
    BoundedSumAggregation,
    BoundedSumSNorm,
    MaxAggregation,
    MaxSNorm,
    MinImplication,
    MinTNorm,
    ProductImplication,
    ProductTNorm,
)
from fls.rules import Combinator, Rule
from fls.system import FuzzyLogicSystem
from fls.variables import FuzzySet, LinguisticVariable


def test_defaults(output_y):
    system = FuzzyLogicSystem(output_y)
    engine = system.inference_engine
    assert isinstance(system.and_operator, MinTNorm)
    assert isinstance(system.or_operator, MaxSNorm)
    assert isinstance(engine, MamdaniInference)
    assert isinstance(engine.implication_operator, MinImplication)
    assert isinstance(engine.aggregation_operator, MaxAggregation)
    assert isinstance(system.defuzzification_method, CentroidDefuzzification)
    assert system.output_variable is output_y
    assert len(system.rule_base) == 0


def test_output_variable_type_checked():
    with pytest.raises(TypeError):
        FuzzyLogicSystem("Y")


def test_single_rule_scenario(single_rule_system):
    inputs = {"X": 3.0}
    assert single_rule_system.get_fuzzification_results(inputs) == {"X": {"A": 0.6}}
    assert single_rule_system.get_inference_results(inputs) == {"B": 0.6}
    assert single_rule_system.evaluate(inputs) == pytest.approx(50.0, abs=1e-6)


def test_evaluation_is_deterministic(single_rule_system):
    first = single_rule_system.evaluate({"X": 3.7})
    second = single_rule_system.evaluate({"X": 3.7})
    assert first == second


def test_inspection_does_not_change_output(single_rule_system):
    before = single_rule_system.evaluate({"X": 4.0})
    single_rule_system.get_fuzzification_results({"X": 4.0})
    single_rule_system.get_inference_results({"X": 4.0})
    assert single_rule_system.evaluate({"X": 4.0}) == before


@pytest.mark.parametrize(
    "inputs", [{}, {"X": 3.0}, {"X": -100.0}, {"X": float("nan")}, {"other": 1.0}]
)
def test_all_rules_disabled_matches_empty_rule_base(single_rule_system, output_y, inputs):
    single_rule_system.rule_base.disable_rule(0)
    empty = FuzzyLogicSystem(output_y)
    empty.add_input_variable(single_rule_system.get_input_variable("X"))

    assert single_rule_system.evaluate(inputs) == empty.evaluate(inputs)
    assert empty.evaluate(inputs) == 50.0


def test_missing_input_yields_midpoint(single_rule_system):
    assert single_rule_system.evaluate({}) == 50.0
    assert single_rule_system.get_fuzzification_results({"nope": 1.0}) == {}


def test_nan_input_fuzzifies_at_domain_midpoint(single_rule_system):
    assert single_rule_system.get_fuzzification_results({"X": float("nan")}) == {"X": {"A": 1.0}}


def test_evaluate_stays_in_output_domain(single_rule_system):
    for x in (0.0, 1.0, 2.5, 5.0, 9.9, 50.0):
        result = single_rule_system.evaluate({"X": x})
        assert 0.0 <= result <= 100.0
        assert math.isfinite(result)


def test_weight_edit_between_evaluations(single_rule_system):
    single_rule_system.rule_base.set_rule_weight(0, 0.5)
    assert single_rule_system.get_inference_results({"X": 3.0}) == {"B": pytest.approx(0.3)}


def test_rule_edits_are_seen_by_next_evaluation(single_rule_system):
    single_rule_system.rule_base.disable_rule(0)
    assert single_rule_system.get_inference_results({"X": 3.0}) == {}
    single_rule_system.rule_base.enable_rule(0)
    assert single_rule_system.get_inference_results({"X": 3.0}) == {"B": 0.6}


def test_add_input_variable_last_registration_wins(single_rule_system):
    replacement = LinguisticVariable("X", 0, 10)
    replacement.add_fuzzy_set(FuzzySet("A", TrapezoidalMF(0, 1, 9, 10)))
    single_rule_system.add_input_variable(replacement)
    assert single_rule_system.get_input_variable("X") is replacement
    assert list(single_rule_system.input_variables) == ["X"]
    assert single_rule_system.get_fuzzification_results({"X": 3.0}) == {"X": {"A": 1.0}}


def test_add_input_variable_type_checked(single_rule_system):
    with pytest.raises(TypeError):
        single_rule_system.add_input_variable(None)


def test_input_variables_insertion_order(output_y):
    system = FuzzyLogicSystem(output_y)
    for name in ("c", "a", "b"):
        system.add_input_variable(LinguisticVariable(name, 0, 1))
    assert list(system.input_variables) == ["c", "a", "b"]
    assert system.get_input_variable("zzz") is None


def test_mean_of_maximum_method(single_rule_system):
    single_rule_system.defuzzification_method = MeanOfMaximumDefuzzification()
    assert single_rule_system.evaluate({"X": 3.0}) == pytest.approx(50.0, abs=0.1)


def test_defuzzification_method_type_checked(single_rule_system):
    with pytest.raises(TypeError):
        single_rule_system.defuzzification_method = "centroid"
    assert isinstance(single_rule_system.defuzzification_method, CentroidDefuzzification)


def test_and_operator_rebuilds_mamdani_keeping_implication(single_rule_system):
    single_rule_system.setup_mamdani_inference(ProductImplication(), BoundedSumAggregation())
    before = single_rule_system.inference_engine

    single_rule_system.and_operator = ProductTNorm()
    engine = single_rule_system.inference_engine

    assert engine is not before
    assert engine.family is InferenceFamily.MAMDANI
    assert isinstance(engine.and_operator, ProductTNorm)
    assert isinstance(engine.or_operator, MaxSNorm)
    assert isinstance(engine.implication_operator, ProductImplication)
    assert isinstance(engine.aggregation_operator, BoundedSumAggregation)


def test_or_operator_rebuilds_sugeno_keeping_table(single_rule_system):
    coefficients = {"B": {"X": 0.5}}
    single_rule_system.setup_sugeno_inference({"B": 7.0}, coefficients)

    single_rule_system.or_operator = BoundedSumSNorm()
    engine = single_rule_system.inference_engine

    assert engine.family is InferenceFamily.SUGENO
    assert isinstance(engine.or_operator, BoundedSumSNorm)
    assert isinstance(engine.and_operator, MinTNorm)
    assert engine.consequent_values == {"B": 7.0}
    assert engine.consequent_coefficients == coefficients


def test_operator_change_affects_firing(input_x, output_y):
    z = LinguisticVariable("Z", 0, 10)
    z.add_fuzzy_set(FuzzySet("C", TriangularMF(0, 5, 10)))
    system = FuzzyLogicSystem(output_y)
    system.add_input_variable(input_x)
    system.add_input_variable(z)
    system.rule_base.add_rule(Rule("Y", "B", [("X", "A"), ("Z", "C", Combinator.AND)]))

    inputs = {"X": 3.0, "Z": 2.5}  # A:0.6, C:0.5
    assert system.get_inference_results(inputs) == {"B": 0.5}
    system.and_operator = ProductTNorm()
    assert system.get_inference_results(inputs) == {"B": pytest.approx(0.3)}


def test_operator_setters_type_checked(single_rule_system):
    with pytest.raises(TypeError):
        single_rule_system.and_operator = MaxSNorm()
    with pytest.raises(TypeError):
        single_rule_system.or_operator = MinTNorm()
    assert isinstance(single_rule_system.and_operator, MinTNorm)


def test_sugeno_without_table_uses_output_set_midpoints(single_rule_system, output_y):
    output_y.add_fuzzy_set(FuzzySet("G", GaussianMF(80.0, 5.0)))
    single_rule_system.setup_sugeno_inference()
    assert single_rule_system.inference_engine.consequent_values == {"B": 50.0, "G": 80.0}
    assert single_rule_system.evaluate({"X": 3.0}) == pytest.approx(50.0)


def test_sugeno_evaluate_reads_output_directly(single_rule_system):
    single_rule_system.setup_sugeno_inference({"B": 12.5})
    assert single_rule_system.get_inference_results({"X": 3.0}) == {"output": pytest.approx(12.5)}
    assert single_rule_system.evaluate({"X": 3.0}) == pytest.approx(12.5)
    # nothing fires: Sugeno outputs 0, not the midpoint
    assert single_rule_system.evaluate({}) == 0.0


def test_sugeno_always_firing_rule_ignores_inputs(output_y, input_x):
    system = FuzzyLogicSystem(output_y)
    system.add_input_variable(input_x)
    system.setup_sugeno_inference({"B": 33.0})
    system.rule_base.add_rule(Rule("Y", "B"))
    for inputs in ({}, {"X": 0.0}, {"X": 5.0}, {"X": float("inf")}):
        assert system.evaluate(inputs) == 33.0


def test_sugeno_first_order_through_system(single_rule_system):
    # X=5 fuzzifies to A:1.0; A's representative value comes from the table.
    single_rule_system.setup_sugeno_inference({"A": 4.0, "B": 10.0}, {"B": {"X": 2.0}})
    assert single_rule_system.evaluate({"X": 5.0}) == pytest.approx(18.0)


def test_switch_back_to_mamdani(single_rule_system):
    single_rule_system.setup_sugeno_inference({"B": 1.0})
    single_rule_system.setup_mamdani_inference()
    assert single_rule_system.inference_engine.family is InferenceFamily.MAMDANI
    assert single_rule_system.evaluate({"X": 3.0}) == pytest.approx(50.0, abs=1e-6)


def test_inference_engine_setter(single_rule_system):
    engine = SugenoInference(MinTNorm(), MaxSNorm(), {"B": 3.0})
    single_rule_system.inference_engine = engine
    assert single_rule_system.inference_engine is engine
    with pytest.raises(TypeError):
        single_rule_system.inference_engine = object()


def test_aggregated_membership_only_for_mamdani(single_rule_system):
    mu = single_rule_system.aggregated_membership({"B": 0.6})
    assert mu(50.0) == 0.6
    single_rule_system.setup_sugeno_inference({"B": 1.0})
    with pytest.raises(TypeError):
        single_rule_system.aggregated_membership({"B": 0.6})


def test_explicit_config(output_y):
    config = SystemConfig(
        and_operator=ProductTNorm(),
        defuzzification_method=MeanOfMaximumDefuzzification(500),
        inference_engine=SugenoInference(ProductTNorm(), MaxSNorm(), {}),
    )
    system = FuzzyLogicSystem(output_y, config)
    assert isinstance(system.and_operator, ProductTNorm)
    assert system.defuzzification_method.samples == 500
    # empty table is filled from output set midpoints
    assert system.inference_engine.consequent_values == {"B": 50.0}


def test_explicit_engine_operators_are_reported_and_used(output_y, input_x):
    config = SystemConfig(
        and_operator=ProductTNorm(),
        implication_operator=ProductImplication(),
        inference_engine=MamdaniInference(MinTNorm(), MaxSNorm()),
    )
    system = FuzzyLogicSystem(output_y, config)
    system.add_input_variable(input_x)
    system.rule_base.add_rule(Rule("Y", "B", [("X", "A"), ("X", "A")]))

    assert system.and_operator is system.inference_engine.and_operator
    assert isinstance(system.and_operator, MinTNorm)
    assert system.get_inference_results({"X": 3.0}) == {"B": 0.6}


def test_engine_setter_adopts_engine_operators(single_rule_system):
    single_rule_system.rule_base.clear()
    single_rule_system.rule_base.add_rule(Rule("Y", "B", [("X", "A"), ("X", "A")]))
    single_rule_system.inference_engine = MamdaniInference(ProductTNorm(), BoundedSumSNorm())

    assert isinstance(single_rule_system.and_operator, ProductTNorm)
    assert isinstance(single_rule_system.or_operator, BoundedSumSNorm)
    assert single_rule_system.get_inference_results({"X": 3.0}) == {"B": pytest.approx(0.36)}

    # a later OR change keeps the adopted AND operator
    single_rule_system.or_operator = MaxSNorm()
    assert isinstance(single_rule_system.inference_engine.and_operator, ProductTNorm)
