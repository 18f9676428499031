"""
Exception types raised by the fuzzy logic system.

All failures are construction-time or setter-time validation errors. The
evaluation pipeline itself treats missing variables and fuzzy sets as zero
membership and never raises.
"""


class FuzzyError(Exception):
    """Base error for the fuzzy logic system."""


class InvalidParameterError(FuzzyError, ValueError):
    """A constructor or setter received a value outside its valid range."""


class RuleIndexError(FuzzyError, IndexError):
    """A rule base index was outside ``0 <= index < len(rule_base)``."""
