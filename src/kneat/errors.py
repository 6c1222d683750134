"""
kneat Errors Module

Exceptions raised by the NEAT engine.

Classes:
    ConfigurationError:   Invalid configuration, reported before any generation runs
    DegenerateStateError: The run reached a state from which it cannot progress
"""

class ConfigurationError(ValueError):
    """
    A configuration parameter is missing or out of range.
    """

class DegenerateStateError(RuntimeError):
    """
    The evolutionary process reached a state it cannot handle, for instance
    a population whose total fitness is negative or not finite.
    """
