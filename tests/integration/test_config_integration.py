"""
Integration tests running trials configured from INI files.
"""

import os

from kneat.run.config import Config
from kneat.run.trial  import Trial


EXAMPLES_DIR = os.path.join(os.path.dirname(__file__), '..', '..', 'examples')
CONFIGS_DIR  = os.path.join(os.path.dirname(__file__), '..', 'unit', 'run', 'test_configs')


def test_example_config_runs(weight_target_task):
    config = Config(os.path.join(EXAMPLES_DIR, 'config_structure.ini'))
    config.max_number_generations = 3

    trial = Trial(weight_target_task, config, seed=0)
    best  = trial.run()

    assert len(trial.population.genomes) == config.population_size
    assert best.num_inputs == 3
    assert len(trial.population.species_manager.species) == config.num_species


def test_cyclic_config_runs(weight_target_task):
    config = Config(os.path.join(CONFIGS_DIR, 'cyclic.ini'))
    config.max_number_generations = 3

    best = Trial(weight_target_task, config, seed=0).run()

    assert best.num_outputs == 2
    assert best.node_depths is None
