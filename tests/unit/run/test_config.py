"""
Unit tests for Config class.
"""

import pytest
import os

from kneat.errors     import ConfigurationError
from kneat.run.config import Config


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def test_config_dir():
    """Return the directory containing test configuration files."""
    return os.path.join(os.path.dirname(__file__), 'test_configs')


# ============================================================================
# Test Config Initialization
# ============================================================================

class TestConfigInit:
    """Test Config initialization."""

    def test_init_without_file_holds_defaults(self):
        config = Config()

        assert config.population_size == 50
        assert config.num_species == 1
        assert config.bias == 1.0
        assert config.acyclic is True
        config.validate()

    def test_init_with_nonexistent_file_raises_error(self):
        with pytest.raises(FileNotFoundError, match="Configuration file .* not found"):
            Config('nonexistent_file.ini')

    def test_init_with_minimal_config(self, test_config_dir):
        """Optional keys fall back to their defaults."""
        config = Config(os.path.join(test_config_dir, 'minimal.ini'))

        assert config.population_size == 100
        assert config.num_inputs == 2
        assert config.num_outputs == 1
        assert config.bias == 1.0
        assert config.num_species == 4
        assert config.elitism_proportion == 0.2
        assert config.disable_probability == 0.75
        assert config.bias_mutation_size == 0.25
        assert config.acyclic is True
        assert config.max_number_generations == 40

    def test_init_with_cyclic_config(self, test_config_dir):
        config = Config(os.path.join(test_config_dir, 'cyclic.ini'))

        assert config.num_inputs == 3
        assert config.num_outputs == 2
        assert config.bias == -1.0
        assert config.acyclic is False
        assert config.weight_mutation_size == 1.0
        assert config.connection_addition_prob == 0.2

    def test_missing_key_raises_error(self, test_config_dir):
        with pytest.raises(ConfigurationError, match=r"missing 'num_species' in section \[SPECIATION\]"):
            Config(os.path.join(test_config_dir, 'missing_key.ini'))

    def test_bad_value_raises_error(self, test_config_dir):
        with pytest.raises(ConfigurationError, match="population_size"):
            Config(os.path.join(test_config_dir, 'bad_value.ini'))


# ============================================================================
# Test Config Validation
# ============================================================================

class TestConfigValidate:

    @pytest.mark.parametrize("name, value", [
        ('population_size',          0),
        ('num_species',              0),
        ('num_species',              51),
        ('num_inputs',               0),
        ('num_outputs',              0),
        ('max_number_generations',   -1),
        ('elitism_proportion',       1.5),
        ('disable_probability',      -0.1),
        ('weight_mutation_prob',     float('nan')),
        ('node_addition_prob',       2.0),
        ('connection_addition_prob', -1.0),
        ('weight_mutation_size',     -0.5),
        ('bias_mutation_size',       float('inf')),
        ('bias',                     float('nan')),
        ('bias',                     float('-inf')),
    ])
    def test_invalid_parameter(self, name, value):
        config = Config()
        setattr(config, name, value)

        with pytest.raises(ConfigurationError):
            config.validate()

    def test_zero_generations_is_valid(self):
        config = Config()
        config.max_number_generations = 0
        config.validate()

    def test_one_species_per_genome_is_valid(self):
        config = Config()
        config.num_species = config.population_size
        config.validate()
