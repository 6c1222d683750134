import configparser
import math
import os

from kneat.errors import ConfigurationError

class Config:

    # Parameters which must lie in [0, 1]
    _PROBABILITIES = ('elitism_proportion',
                      'disable_probability',
                      'weight_mutation_prob',
                      'bias_mutation_prob',
                      'node_addition_prob',
                      'connection_addition_prob')

    def __init__(self, config_file: str | None = None):
        """
        Initialize Config by parsing an INI file, or create a Config holding defaults.

        Parameters:
            config_file: Path to the INI configuration file.
                         If None, creates a default Config for manual attribute setting.
        """

        # Default config for testing/manual setup
        if config_file is None:
            self.population_size = 50
            self.num_inputs      = 2
            self.num_outputs     = 1
            self.bias            = 1.0

            self.num_species = 1

            self.elitism_proportion  = 0.1
            self.disable_probability = 0.75

            self.weight_mutation_prob     = 0.8
            self.weight_mutation_size     = 0.5
            self.bias_mutation_prob       = 0.7
            self.bias_mutation_size       = 0.5
            self.node_addition_prob       = 0.03
            self.connection_addition_prob = 0.05

            self.acyclic = True

            self.max_number_generations = 100
            return

        if not os.path.exists(config_file):
            raise FileNotFoundError(f"Configuration file '{config_file}' not found")

        parser = configparser.ConfigParser()
        parser.read(config_file)

        # Sentinel for missing default values
        _NO_DEFAULT = object()

        # Helper function to safely parse values
        def get_value(section, key, value_type, default=_NO_DEFAULT):
            try:
                if value_type == int:
                    return parser.getint(section, key)
                elif value_type == float:
                    return parser.getfloat(section, key)
                elif value_type == bool:
                    return parser.getboolean(section, key)
                return parser.get(section, key)
            except (configparser.NoSectionError, configparser.NoOptionError):
                if default is not _NO_DEFAULT:
                    return default
                raise ConfigurationError(f"missing '{key}' in section [{section}] of '{config_file}'")
            except ValueError as e:
                raise ConfigurationError(f"bad value for '{key}' in section [{section}]: {e}") from e

        # [POPULATION_INIT]

        # The number of genomes in each generation.
        self.population_size = get_value('POPULATION_INIT', 'population_size', int)

        # The number of input nodes, through which the network receives inputs.
        self.num_inputs = get_value('POPULATION_INIT', 'num_inputs', int)

        # The number of output nodes, to which the network delivers outputs.
        self.num_outputs = get_value('POPULATION_INIT', 'num_outputs', int)

        # The value emitted by the bias node. Every genome has exactly one bias node,
        # numbered right after the input nodes. Evolution itself never reads it: it
        # is carried for the networks built from the genomes downstream.
        self.bias = get_value('POPULATION_INIT', 'bias', float, default=1.0)

        # [SPECIATION]

        # The number of clusters the population is split into at every generation.
        self.num_species = get_value('SPECIATION', 'num_species', int)

        # [REPRODUCTION]

        # The fraction of each species' offspring quota filled by copying its
        # fittest members unchanged. At least one member always survives.
        self.elitism_proportion = get_value('REPRODUCTION', 'elitism_proportion', float)

        # During crossover, the probability that a gene disabled in either
        # parent is also disabled in the child.
        self.disable_probability = get_value('REPRODUCTION', 'disable_probability', float)

        # [MUTATION]

        # The probability that mutation perturbs the weight of a connection, and
        # the standard deviation of the zero-centered normal perturbation.
        self.weight_mutation_prob = get_value('MUTATION', 'weight_mutation_prob', float)
        self.weight_mutation_size = get_value('MUTATION', 'weight_mutation_size', float)

        # Same as above, for connections leaving the bias node.
        self.bias_mutation_prob = get_value('MUTATION', 'bias_mutation_prob', float)
        self.bias_mutation_size = get_value('MUTATION', 'bias_mutation_size', float)

        # The probability that mutation splits an enabled connection with a new node.
        self.node_addition_prob = get_value('MUTATION', 'node_addition_prob', float)

        # The probability that mutation adds a connection between existing nodes.
        self.connection_addition_prob = get_value('MUTATION', 'connection_addition_prob', float)

        # [TOPOLOGY]

        # Whether networks are constrained to be acyclic (feed-forward).
        self.acyclic = get_value('TOPOLOGY', 'acyclic', bool, default=True)

        # [TERMINATION]

        # The number of generations after which to stop the run.
        self.max_number_generations = get_value('TERMINATION', 'max_number_generations', int)

    def validate(self) -> None:
        """
        Check that all parameters are within their allowed ranges.

        Raises:
            ConfigurationError: describing the first offending parameter
        """
        if self.population_size < 1:
            raise ConfigurationError("'population_size' must be at least 1")
        if self.num_species < 1:
            raise ConfigurationError("'num_species' must be at least 1")
        if self.num_species > self.population_size:
            raise ConfigurationError("'num_species' cannot exceed 'population_size'")
        if self.num_inputs < 1 or self.num_outputs < 1:
            raise ConfigurationError("networks need at least one input and one output node")
        if self.max_number_generations < 0:
            raise ConfigurationError("'max_number_generations' cannot be negative")

        for name in self._PROBABILITIES:
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"'{name}' must be in [0, 1], got {value}")

        for name in ('weight_mutation_size', 'bias_mutation_size'):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ConfigurationError(f"'{name}' must be a non-negative number, got {value}")

        if not math.isfinite(self.bias):
            raise ConfigurationError(f"'bias' must be a finite number, got {self.bias}")
