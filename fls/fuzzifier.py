"""
Fuzzifies crisp input values into membership degrees.

This module takes a mapping of crisp readings keyed by variable name and
determines each reading's degree of membership across the fuzzy sets of the
matching input LinguisticVariable.
"""

import logging
from typing import Dict, Mapping

from fls.variables import LinguisticVariable

fuzzifier_log = logging.getLogger("fuzzifier")


class Fuzzifier:
    """
    Calculates membership degrees for crisp inputs.

    Attributes:
        input_variables (Mapping[str, LinguisticVariable]): Registered input
            variables keyed by name. The mapping is read live, so variables
            registered after construction are picked up.
    """

    def __init__(self, input_variables: Mapping[str, LinguisticVariable]) -> None:
        self.input_variables = input_variables

    def fuzzify(self, crisp_inputs: Mapping[str, float]) -> Dict[str, Dict[str, float]]:
        """
        Fuzzifies every crisp input that names a registered variable.

        Args:
            crisp_inputs (Mapping[str, float]): Variable name to crisp value.
                Names without a registered variable are skipped.

        Returns:
            Dict[str, Dict[str, float]]: Variable name to {set name: degree},
                holding only degrees > 0.
        """
        fuzzified = {}
        for var_name, crisp_value in crisp_inputs.items():
            variable = self.input_variables.get(var_name)
            if variable is None:
                fuzzifier_log.debug("Skipping unknown input variable '%s'.", var_name)
                continue

            memberships = variable.fuzzify(crisp_value)
            fuzzified[var_name] = memberships

            formatted = {k: f"{v:.3f}" for k, v in memberships.items()}
            fuzzifier_log.debug("Fuzzified %s= %s -> %s", var_name, crisp_value, formatted)
        return fuzzified
