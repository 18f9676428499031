# tests/conftest.py
import logging

import matplotlib

matplotlib.use("Agg")

import pytest

from fls.membership import TriangularMF
from fls.rules import Rule
from fls.system import FuzzyLogicSystem
from fls.variables import FuzzySet, LinguisticVariable
from utils.logger import LOGGER_NAMES


@pytest.fixture(autouse=True)
def reset_component_loggers():
    """Undo setup_logging() so caplog keeps seeing component records."""
    yield
    for name in LOGGER_NAMES:
        log = logging.getLogger(name)
        for h in list(log.handlers):
            log.removeHandler(h)
            h.close()
        log.propagate = True
        log.setLevel(logging.NOTSET)


@pytest.fixture
def input_x():
    """X on [0, 10] with A = Triangular(0, 5, 10); X=3 fuzzifies to A:0.6."""
    x = LinguisticVariable("X", 0, 10)
    x.add_fuzzy_set(FuzzySet("A", TriangularMF(0, 5, 10)))
    return x


@pytest.fixture
def output_y():
    """Y on [0, 100] with the single set B = Triangular(0, 50, 100)."""
    y = LinguisticVariable("Y", 0, 100)
    y.add_fuzzy_set(FuzzySet("B", TriangularMF(0, 50, 100)))
    return y


@pytest.fixture
def single_rule_system(input_x, output_y):
    """IF X IS A THEN Y IS B with default operators."""
    system = FuzzyLogicSystem(output_y)
    system.add_input_variable(input_x)
    system.rule_base.add_rule(Rule("Y", "B", [("X", "A")]))
    return system
