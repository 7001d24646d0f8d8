"""
Exceptions raised when amrgen is misconfigured or handed a graph that
violates the structural invariants of the generation passes.
"""
import logging

logger = logging.getLogger(__name__)


class AmrGenError(Exception):
    """
    Base class for every error raised by amrgen itself.
    """

    def __init__(self, message: str):
        super().__init__()
        self.message = message

    def __str__(self):
        return self.message


class ConfigurationError(AmrGenError):
    """
    The exception raised by any amrgen object when it's misconfigured
    (e.g. missing properties, invalid properties, unknown properties).
    """

    pass


class GraphStructureError(AmrGenError):
    """
    Raised when a structural transition is applied to vertices that are not in the
    relationship it requires (e.g. a swap between vertices that are not parent and child).
    These indicate a malformed tree, so the pass that hit them is aborted.
    """

    pass


def check_probability(value: float, name: str) -> None:
    if not 0.0 <= value <= 1.0:
        raise ConfigurationError(f"{name} must be a probability, but got {value}")


def check_positive(value: int, name: str) -> None:
    if value < 1:
        raise ConfigurationError(f"{name} must be at least 1, but got {value}")
