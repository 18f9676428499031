"""
Patient triage built on the fuzzy logic system.

Emergency departments prioritize patients by severity. This system scores
urgency from three inputs:

    - PainLevel      (0-10 scale)
    - Temperature    (35-42 °C)
    - BloodPressure  (60-200 mmHg)

Output: UrgencyScore (0-100)

    -  0-25: Can Wait  - see nurse within 60 minutes
    - 26-50: See Soon  - see nurse within 30 minutes
    - 51-75: Urgent    - see doctor within 15 minutes
    - 76-90: Emergency - see doctor immediately
    - 91-100: Critical - activate trauma team
"""

from typing import List, Optional, Tuple

from fls.config import SystemConfig
from fls.membership import TrapezoidalMF, TriangularMF
from fls.rules import Combinator, Rule
from fls.system import FuzzyLogicSystem
from fls.variables import FuzzySet, LinguisticVariable

PAIN = "PainLevel"
TEMPERATURE = "Temperature"
BLOOD_PRESSURE = "BloodPressure"
URGENCY = "UrgencyScore"

# (pain, temperature, blood pressure)
DEFAULT_CASES: List[Tuple[float, float, float]] = [
    (8.5, 39.5, 180.0),  # extreme pain, high fever, critical high BP
    (7.0, 38.5, 95.0),   # severe pain, fever, low BP
    (5.0, 37.0, 150.0),  # moderate pain, normal temp, high BP
    (3.0, 36.5, 110.0),  # mild pain, normal temp, normal BP
    (1.0, 36.0, 105.0),  # minimal pain, low temp, normal BP
]

# (pain set, temperature set, blood pressure set) -> urgency set
TRIAGE_RULES = [
    ("Extreme", "HighFever", "Critical_High", "Critical"),
    ("Extreme", "HighFever", "Critical_Low", "Critical"),
    ("Extreme", "Hypothermic", "Critical_Low", "Critical"),
    ("Severe", "HighFever", "Normal", "Emergency"),
    ("Severe", "Normal", "Critical_High", "Emergency"),
    ("Severe", "Normal", "Critical_Low", "Emergency"),
    ("Moderate", "Fever", "High", "Urgent"),
    ("Moderate", "Fever", "Low", "Urgent"),
    ("Moderate", "Normal", "High", "Urgent"),
    ("Moderate", "Normal", "Low", "Urgent"),
    ("Mild", "Normal", "Normal", "See_Soon"),
    ("Mild", "Low", "Normal", "See_Soon"),
    ("Minimal", "Normal", "Normal", "Can_Wait"),
    ("Minimal", "Low", "Normal", "Can_Wait"),
    ("Extreme", "Normal", "Normal", "Emergency"),
    ("Severe", "Fever", "Normal", "Urgent"),
    ("Moderate", "Normal", "Normal", "See_Soon"),
    ("Mild", "Fever", "Normal", "See_Soon"),
]


def _variable(name, lo, hi, sets) -> LinguisticVariable:
    variable = LinguisticVariable(name, lo, hi)
    for set_name, mf in sets:
        variable.add_fuzzy_set(FuzzySet(set_name, mf))
    return variable


def pain_level_variable() -> LinguisticVariable:
    return _variable(PAIN, 0, 10, [
        ("Minimal", TriangularMF(-0.5, 0, 2.5)),
        ("Mild", TriangularMF(0, 2.5, 5)),
        ("Moderate", TriangularMF(2.5, 5, 7.5)),
        ("Severe", TriangularMF(5, 7.5, 10)),
        ("Extreme", TriangularMF(7.5, 10, 10.5)),
    ])


def temperature_variable() -> LinguisticVariable:
    return _variable(TEMPERATURE, 35, 42, [
        ("Hypothermic", TriangularMF(34.5, 35, 36)),
        ("Low", TriangularMF(35, 36, 36.5)),
        ("Normal", TrapezoidalMF(36, 36.5, 37.5, 38)),
        ("Fever", TriangularMF(37.5, 38.5, 39.5)),
        ("HighFever", TriangularMF(38.5, 40, 42.5)),
    ])


def blood_pressure_variable() -> LinguisticVariable:
    return _variable(BLOOD_PRESSURE, 60, 200, [
        ("Critical_Low", TriangularMF(59, 60, 80)),
        ("Low", TriangularMF(70, 85, 100)),
        ("Normal", TrapezoidalMF(90, 100, 120, 140)),
        ("High", TriangularMF(130, 150, 170)),
        ("Critical_High", TriangularMF(160, 180, 201)),
    ])


def urgency_variable() -> LinguisticVariable:
    return _variable(URGENCY, 0, 100, [
        ("Can_Wait", TrapezoidalMF(-1, 0, 12.5, 25)),
        ("See_Soon", TriangularMF(12.5, 25, 37.5)),
        ("Urgent", TriangularMF(25, 50, 75)),
        ("Emergency", TriangularMF(50, 75, 90)),
        ("Critical", TrapezoidalMF(75, 90, 100, 101)),
    ])


def build_triage_system(config: Optional[SystemConfig] = None) -> FuzzyLogicSystem:
    """
    Builds the triage FuzzyLogicSystem: three inputs, one urgency output and
    18 rules, each ``PainLevel AND Temperature AND BloodPressure``.
    """
    system = FuzzyLogicSystem(urgency_variable(), config)
    system.add_input_variable(pain_level_variable())
    system.add_input_variable(temperature_variable())
    system.add_input_variable(blood_pressure_variable())

    for pain, temp, bp, urgency in TRIAGE_RULES:
        system.rule_base.add_rule(
            Rule(
                URGENCY,
                urgency,
                [
                    (PAIN, pain),
                    (TEMPERATURE, temp, Combinator.AND),
                    (BLOOD_PRESSURE, bp, Combinator.AND),
                ],
            )
        )
    return system


def triage_inputs(pain: float, temperature: float, blood_pressure: float) -> dict:
    return {PAIN: pain, TEMPERATURE: temperature, BLOOD_PRESSURE: blood_pressure}


def urgency_category(score: float) -> str:
    if score <= 25:
        return "Can Wait - See nurse within 60 minutes"
    elif score <= 50:
        return "See Soon - See nurse within 30 minutes"
    elif score <= 75:
        return "Urgent - See doctor within 15 minutes"
    elif score <= 90:
        return "Emergency - See doctor immediately"
    return "Critical - Activate trauma team"
