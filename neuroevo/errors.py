"""
Exception hierarchy for neuroevo.

Every error is also a ValueError, so code that guards against bad arguments
with a plain `except ValueError` keeps working.
"""


class NeuroevoError(ValueError):
    """Base class for all neuroevo errors."""


class ConfigurationError(NeuroevoError):
    """Invalid construction-time parameter (rates, sizes, strategy options)."""


class ShapeError(NeuroevoError):
    """Genome, state or input dimensions disagree with a network's architecture."""


class DomainError(NeuroevoError):
    """Operation called outside its domain (empty population, empty sequence, bad bounds)."""
