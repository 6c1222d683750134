"""
NEAT Run Package

Modules:
    config: Config class, loaded from an INI file
    trial:  Trial class, one run of the NEAT algorithm
"""

from kneat.run.config import Config
from kneat.run.trial  import Trial, TrialState

__all__ = ['Config', 'Trial', 'TrialState']
