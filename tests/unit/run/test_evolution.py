"""
Unit tests for the Evolution engine.

Tests cover engine construction, parallel versus serial evaluation, tracking
of the best genome, speciation and reproduction steps, and reproducibility.
"""

import pytest
from unittest.mock import Mock

from evoneat.run.config import Config, ConfigError
from evoneat.run.evolution import Evolution
from evoneat.pool import Reproduction
from evoneat.phenotype import NeuralNetwork


# ============================================================================
# Evaluation functions
# ============================================================================

def sum_of_outputs(network):
    return sum(network.feed_forward([0.5, -1.5]))

def constant(network):
    return 1.0


class RecordingEvolution(Evolution):
    """Evolution engine recording the report hooks instead of logging."""

    def __init__(self, *args, **kwargs):
        self.progress_reports = []
        self.final_reports    = 0
        super().__init__(*args, **kwargs)

    def _report_progress(self):
        self.progress_reports.append(self.generation)

    def _final_report(self):
        self.final_reports += 1


# ============================================================================
# Construction Tests
# ============================================================================

class TestEvolutionInit:

    def test_initial_population(self, config):
        evolution = Evolution(config, sum_of_outputs, seed=0)
        assert len(evolution.population) == config.population_size
        assert evolution.generation == 0
        assert evolution.best is None

    def test_seeded_species(self, config):
        evolution = Evolution(config, sum_of_outputs, seed=0)
        assert len(evolution.species) == 1
        representative = evolution.species[0].representative
        assert any(representative is genome for genome in evolution.population)

    def test_config_copied(self, config):
        evolution = Evolution(config, sum_of_outputs, seed=0)
        config.population_size = 1000
        assert evolution.config is not config
        assert evolution.config.population_size == 20

    def test_invalid_config_rejected(self, config):
        config.survival_rate = 2.0
        with pytest.raises(ConfigError):
            Evolution(config, sum_of_outputs)

    def test_seed_from_config(self, config):
        config.seed = 123
        evolution_a = Evolution(config, sum_of_outputs)
        evolution_b = Evolution(config, sum_of_outputs)
        weights_a = [c.weight for g in evolution_a.population for c in g.conn_genes.values()]
        weights_b = [c.weight for g in evolution_b.population for c in g.conn_genes.values()]
        assert weights_a == weights_b

    def test_tracker_starts_after_fixed_nodes(self, config):
        evolution = Evolution(config, sum_of_outputs, seed=0)
        conn = next(iter(evolution.population[0].conn_genes.values()))
        new_node_id, _, _ = evolution.tracker.get_split_IDs(conn)
        assert new_node_id == config.num_inputs + config.num_outputs


# ============================================================================
# Evaluation Tests
# ============================================================================

class TestEvolutionEvaluate:

    def test_fitness_written(self, config):
        evolution = Evolution(config, sum_of_outputs, seed=0)
        evolution.evaluate(num_jobs=1)
        for genome in evolution.population:
            expected = sum(NeuralNetwork(genome).feed_forward([0.5, -1.5]))
            assert genome.fitness == expected

    @pytest.mark.parametrize("num_jobs", [2, 4, None, -1])
    def test_parallel_equals_serial(self, config, num_jobs):
        serial   = Evolution(config, sum_of_outputs, seed=3)
        parallel = Evolution(config, sum_of_outputs, seed=3)
        serial.evaluate(num_jobs=1)
        parallel.evaluate(num_jobs=num_jobs)
        assert [g.fitness for g in parallel.population] == [g.fitness for g in serial.population]

    def test_parallel_processes_equal_serial(self, config):
        config.prefer = 'processes'
        # A lambda is pickled by value, so workers need not import this test module
        evaluation = lambda network: sum(network.feed_forward([0.5, -1.5]))
        serial   = Evolution(config, evaluation, seed=3)
        parallel = Evolution(config, evaluation, seed=3)
        serial.evaluate(num_jobs=1)
        parallel.evaluate(num_jobs=2)
        assert [g.fitness for g in parallel.population] == [g.fitness for g in serial.population]

    def test_single_genome(self, config):
        config.population_size = 1
        evolution = Evolution(config, constant, seed=0)
        evolution.evaluate()
        assert evolution.population[0].fitness == 1.0

    def test_evaluation_called_once_per_genome(self, config):
        evaluation = Mock(return_value=0.25)
        evolution = Evolution(config, evaluation, seed=0)
        evolution.evaluate(num_jobs=1)
        assert evaluation.call_count == config.population_size
        for call in evaluation.call_args_list:
            assert isinstance(call.args[0], NeuralNetwork)

    def test_best_maximize(self, config):
        evolution = Evolution(config, sum_of_outputs, seed=0)
        evolution.evaluate(num_jobs=1)
        assert evolution.best.fitness == max(g.fitness for g in evolution.population)

    def test_best_minimize(self, config):
        config.minimize_fitness = True
        evolution = Evolution(config, sum_of_outputs, seed=0)
        evolution.evaluate(num_jobs=1)
        assert evolution.best.fitness == min(g.fitness for g in evolution.population)

    def test_best_kept_across_generations(self, config):
        scores = iter(range(1000, 0, -1))
        evolution = Evolution(config, lambda network: float(next(scores)), seed=0)
        evolution.evaluate(num_jobs=1)
        best = evolution.best
        evolution.reproduce()
        evolution.evaluate(num_jobs=1)
        assert evolution.best is best
        assert evolution.best.fitness == 1000.0


# ============================================================================
# Generation Tests
# ============================================================================

class TestEvolutionStep:

    def test_step_advances_generation(self, config):
        evolution = RecordingEvolution(config, sum_of_outputs, seed=0)
        evolution.step(num_jobs=1)
        assert evolution.generation == 1
        assert evolution.progress_reports == [1]

    def test_speciate_assigns_every_genome(self, config):
        evolution = Evolution(config, sum_of_outputs, seed=0)
        evolution.evaluate(num_jobs=1)
        evolution.speciate()
        members = [g for spec in evolution.species for g in spec.members]
        assert sorted(g.id for g in members) == sorted(g.id for g in evolution.population)

    def test_population_size_kept(self, config):
        evolution = Evolution(config, sum_of_outputs, seed=0, suppress_output=True)
        for _ in range(4):
            evolution.step(num_jobs=1)
            assert len(evolution.population) == config.population_size

    def test_step_without_reproduction_keeps_population(self, config):
        evolution = Evolution(config, sum_of_outputs, seed=0, suppress_output=True)
        before = list(evolution.population)
        evolution.step(num_jobs=1, reproduce=False)
        assert evolution.population == before

    def test_custom_reproduction(self, config):
        reproduction = Mock(spec=Reproduction)
        reproduction.reproduce.side_effect = lambda survivors, ids, rng: [survivors[0].copy(i) for i in ids]
        config.distance_threshold = 100.0
        evolution = Evolution(config, sum_of_outputs, reproduction=reproduction, seed=0, suppress_output=True)
        evolution.step(num_jobs=1)
        assert reproduction.reproduce.called
        assert len(evolution.population) == config.population_size


class TestEvolutionRun:

    def test_run_all_generations(self, config):
        evolution = RecordingEvolution(config, sum_of_outputs, seed=0)
        best = evolution.run(num_jobs=1)
        assert evolution.generation == config.num_generations
        assert evolution.progress_reports == [1, 2, 3]
        assert evolution.final_reports == 1
        assert best is evolution.best

    def test_last_population_is_evaluated(self, config):
        config.init_fitness = -5.0
        evolution = Evolution(config, constant, seed=0, suppress_output=True)
        evolution.run(num_jobs=1)
        assert all(g.fitness == 1.0 for g in evolution.population)

    def test_suppress_output(self, config):
        evolution = RecordingEvolution(config, sum_of_outputs, seed=0, suppress_output=True)
        evolution.run(num_jobs=1)
        assert evolution.progress_reports == []
        assert evolution.final_reports == 0

    def test_zero_generations(self, config):
        config.num_generations = 0
        evolution = Evolution(config, sum_of_outputs, seed=0, suppress_output=True)
        assert evolution.run(num_jobs=1) is None

    def test_default_reports_log(self, config, caplog):
        with caplog.at_level("INFO", logger="evoneat.run.evolution"):
            Evolution(config, sum_of_outputs, seed=0).run(num_jobs=1)
        assert "Generation 3" in caplog.text
        assert "Evolution finished" in caplog.text

    def test_same_seed_same_history(self, config):
        class HistoryEvolution(Evolution):
            def _report_progress(self):
                self.history.append([g.fitness for g in self.population])

        histories = []
        for _ in range(2):
            evolution = HistoryEvolution(config, sum_of_outputs, seed=17)
            evolution.history = []
            evolution.run(num_jobs=4)
            histories.append(evolution.history)
        assert histories[0] == histories[1]

    def test_different_seeds_differ(self, config):
        evolution_a = Evolution(config, sum_of_outputs, seed=1, suppress_output=True)
        evolution_b = Evolution(config, sum_of_outputs, seed=2, suppress_output=True)
        evolution_a.evaluate(num_jobs=1)
        evolution_b.evaluate(num_jobs=1)
        assert [g.fitness for g in evolution_a.population] != [g.fitness for g in evolution_b.population]
