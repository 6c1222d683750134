"""
Unit tests for kneat.run.trial module.
"""

import pytest
from unittest.mock import Mock, MagicMock, patch

from loguru import logger

from kneat.errors          import ConfigurationError
from kneat.pool.selection  import RankSelection
from kneat.run.trial       import Trial, TrialState


# ============================================================================
# Tasks for Testing
# ============================================================================

class RecordingTask:
    """Constant fitness; remembers the trial state at every evaluation."""

    def __init__(self):
        self.trial  = None
        self.states = []

    def evaluate(self, genome):
        self.states.append(self.trial.state if self.trial is not None else None)
        return 1.0

class WeightTask:
    """Rewards large absolute weights on enabled connections."""

    def evaluate(self, genome):
        return sum(abs(gene.weight) for gene in genome.conn_genes if gene.enabled)


# ============================================================================
# Test Initialization
# ============================================================================

class TestTrialInit:

    def test_initial_state(self, config):
        trial = Trial(WeightTask(), config, seed=0)

        assert trial.state == TrialState.UNINITIALIZED
        assert trial.generation == 0
        assert trial.population is None

    def test_invalid_config_is_rejected(self, config):
        config.num_species = config.population_size + 1
        with pytest.raises(ConfigurationError):
            Trial(WeightTask(), config)

    def test_zero_jobs_is_rejected(self, config):
        trial = Trial(WeightTask(), config, seed=0)
        with pytest.raises(ValueError, match="num_jobs"):
            trial.run(num_jobs=0)
        assert trial.state == TrialState.UNINITIALIZED
        assert trial.population is None


# ============================================================================
# Test Run
# ============================================================================

class TestTrialRun:

    def test_run_completes(self, config):
        trial = Trial(WeightTask(), config, seed=0)
        best  = trial.run()

        assert trial.state == TrialState.TERMINATED
        assert trial.generation == config.max_number_generations
        assert len(trial.population.genomes) == config.population_size
        assert best is trial.population.get_fittest_genome()

    def test_every_genome_evaluated_each_generation(self, config):
        task  = RecordingTask()
        trial = Trial(task, config, seed=0)
        task.trial = trial
        trial.run()

        expected = config.population_size * (config.max_number_generations + 1)
        assert len(task.states) == expected

    def test_generation_evaluations_happen_while_evaluating(self, config):
        task  = RecordingTask()
        trial = Trial(task, config, seed=0)
        task.trial = trial
        trial.run()

        in_loop = config.population_size * config.max_number_generations
        assert set(task.states[:in_loop]) == {TrialState.EVALUATING}

    def test_zero_generations(self, config):
        config.max_number_generations = 0
        trial = Trial(WeightTask(), config, seed=0)
        best  = trial.run()

        assert trial.generation == 0
        assert best.fitness == max(genome.fitness for genome in trial.population.genomes)
        assert best.fitness > 0

    def test_same_seed_same_result(self, config):
        config.node_addition_prob       = 0.3
        config.connection_addition_prob = 0.3
        first  = Trial(WeightTask(), config, seed=7).run()
        second = Trial(WeightTask(), config, seed=7).run()

        assert first.fitness == second.fitness
        assert first.conn_genes == second.conn_genes
        assert first.node_count == second.node_count

    def test_rerun_resets_trial(self, config):
        trial  = Trial(WeightTask(), config, seed=3)
        first  = trial.run()
        second = trial.run()

        assert trial.generation == config.max_number_generations
        assert first.conn_genes == second.conn_genes

    def test_innovations_stay_ordered(self, config):
        config.node_addition_prob       = 0.5
        config.connection_addition_prob = 0.5
        config.max_number_generations   = 5
        trial = Trial(WeightTask(), config, seed=11)
        trial.run()

        issued = trial._tracker.num_innovations
        for genome in trial.population.genomes:
            innovations = genome.innovations
            assert innovations == sorted(set(innovations))
            assert all(0 <= innovation < issued for innovation in innovations)

    def test_custom_selection_is_used(self, config):
        selection = Mock(wraps=RankSelection())
        Trial(WeightTask(), config, seed=0, selection=selection).run()

        assert selection.select.call_count > 0

    def test_progress_is_logged(self, config):
        messages = []
        handler_id = logger.add(messages.append, level="INFO", format="{message}")
        try:
            Trial(WeightTask(), config, seed=0).run()
        finally:
            logger.remove(handler_id)

        generation_lines = [m for m in messages if m.startswith("Generation")]
        assert len(generation_lines) == config.max_number_generations
        assert any(m.startswith("Trial finished") for m in messages)


# ============================================================================
# Test Fitness Evaluation
# ============================================================================

class TestFitnessEvaluation:

    def test_parallel_evaluation_writes_back_fitness(self, config):
        trial = Trial(WeightTask(), config, seed=0)
        trial._reset()
        fitness_all = [float(i) for i in range(config.population_size)]

        with patch('kneat.run.trial.Parallel') as mock_parallel:
            mock_parallel.return_value = MagicMock(return_value=fitness_all)
            trial._evaluate_fitness_all(num_jobs=2)

        mock_parallel.assert_called_once_with(2)
        assert [genome.fitness for genome in trial.population.genomes] == fitness_all

    def test_serial_evaluation_converts_to_float(self, config):
        task = Mock()
        task.evaluate.return_value = 3
        trial = Trial(task, config, seed=0)
        trial._reset()
        trial._evaluate_fitness_all(num_jobs=1)

        assert all(isinstance(genome.fitness, float) for genome in trial.population.genomes)
        assert task.evaluate.call_count == config.population_size
