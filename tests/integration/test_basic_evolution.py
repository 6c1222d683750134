"""
Integration tests for basic NEAT evolution.

These tests run complete trials and check properties that must hold
whatever the random draws are.
"""

import pytest

from kneat.genotype.genome import TopologyMode
from kneat.run.trial       import Trial, TrialState


class TestStructuralGrowth:

    def test_one_node_per_generation(self, growth_config, node_count_task):
        initial_nodes = growth_config.num_inputs + 1 + growth_config.num_outputs

        best = Trial(node_count_task, growth_config, seed=42).run()

        assert best.node_count == initial_nodes + growth_config.max_number_generations
        assert best.fitness == float(best.node_count)

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_growth_does_not_depend_on_seed(self, growth_config, node_count_task, seed):
        best = Trial(node_count_task, growth_config, seed=seed).run()
        assert best.node_count == 7

    def test_acyclic_genomes_have_consistent_depths(self, growth_config, node_count_task):
        growth_config.connection_addition_prob = 0.5
        trial = Trial(node_count_task, growth_config, seed=5)
        trial.run()

        for genome in trial.population.genomes:
            assert genome.topology_mode == TopologyMode.ACYCLIC
            assert len(genome.node_depths) == genome.node_count
            for gene in genome.conn_genes:
                assert genome.node_depths[gene.node_in] < genome.node_depths[gene.node_out]


class TestEvolution:

    def test_cyclic_run(self, config, weight_target_task):
        config.acyclic                  = False
        config.population_size          = 20
        config.num_species              = 2
        config.node_addition_prob       = 0.2
        config.connection_addition_prob = 0.3
        config.max_number_generations   = 8
        trial = Trial(weight_target_task, config, seed=1)

        best = trial.run()

        assert trial.state == TrialState.TERMINATED
        assert len(trial.population.genomes) == 20
        assert all(genome.node_depths is None for genome in trial.population.genomes)
        assert 0.0 < best.fitness <= 1.0

    def test_several_species(self, config, weight_target_task):
        config.population_size        = 30
        config.num_species            = 3
        config.max_number_generations = 6
        trial = Trial(weight_target_task, config, seed=2)

        trial.run()

        species = trial.population.species_manager.species
        assert len(species) == 3
        assert sum(len(spec) for spec in species) == 30

    def test_best_fitness_never_drops(self, config, weight_target_task):
        """The fittest genome survives as an elite, so the best fitness cannot decrease."""
        config.population_size        = 20
        config.num_species            = 1
        config.max_number_generations = 1
        trial = Trial(weight_target_task, config, seed=9)

        best_fitness = []
        for generations in range(1, 6):
            config.max_number_generations = generations
            best_fitness.append(trial.run().fitness)

        assert best_fitness == sorted(best_fitness)
