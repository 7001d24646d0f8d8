"""
Various utilities that don't fit anywhere else.
"""
import math
import re
import sys

# The natural log of the smallest positive (subnormal) double.  Scores built from it are
# finite but lose to every real alternative.
MIN_LOG_PROB = math.log(sys.float_info.min * sys.float_info.epsilon)

_WHITESPACE = re.compile(r"\s+")


def log_prob(probability: float) -> float:
    """
    Natural log that maps a zero probability to `-inf` instead of raising.
    """
    if probability <= 0.0:
        return -math.inf
    return math.log(probability)


def collapse_spaces(text: str) -> str:
    """
    Strips `text` and collapses every run of whitespace into a single space.
    """
    return _WHITESPACE.sub(" ", text).strip()

