"""
Unit tests for evoneat.pool.population module.

Tests cover initialization, fittest genome lookup, offspring allocation and
the construction of the next generation from the species' survivors.
"""

import pytest
import numpy as np
from itertools import count
from unittest.mock import Mock

from evoneat.genotype import InnovationTracker
from evoneat.pool.population import Population
from evoneat.pool.reproduction import MutationReproduction, Reproduction
from evoneat.pool.species import Species


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def population(config, tracker, rng):
    return Population(config, tracker, rng, count(0))


def split_into_species(genomes, sizes):
    """Partition 'genomes' into consecutive species of the given sizes."""
    species, start = [], 0
    for species_id, size in enumerate(sizes):
        members = genomes[start:start + size]
        spec = Species(species_id, members[0])
        for genome in members[1:]:
            spec.register(genome)
        species.append(spec)
        start += size
    return species


# ============================================================================
# Initialization Tests
# ============================================================================

class TestPopulationInit:

    def test_size(self, population, config):
        assert len(population) == config.population_size
        assert len(population.genomes) == config.population_size

    def test_sequential_ids(self, population, config):
        assert [g.id for g in population.genomes] == list(range(config.population_size))

    def test_minimal_genomes(self, population):
        for genome in population.genomes:
            assert len(genome.input_nodes) == 2
            assert len(genome.output_nodes) == 1
            assert len(genome.conn_genes) == 2

    def test_initial_fitness(self, config, tracker, rng):
        config.init_fitness = 5.0
        population = Population(config, tracker, rng, count(0))
        assert all(g.fitness == 5.0 for g in population.genomes)


class TestFittestGenome:

    def test_maximize(self, population):
        for i, genome in enumerate(population.genomes):
            genome.fitness = float(i % 7)
        fittest = population.get_fittest_genome(minimize=False)
        assert fittest.fitness == 6.0
        assert fittest.id == 6

    def test_minimize(self, population):
        for i, genome in enumerate(population.genomes):
            genome.fitness = float(10 - i)
        assert population.get_fittest_genome(minimize=True).id == len(population) - 1

    def test_empty(self, population):
        population.genomes = []
        assert population.get_fittest_genome(minimize=False) is None


# ============================================================================
# Offspring Allocation Tests
# ============================================================================

class TestAllocateOffspring:

    @pytest.mark.parametrize("sizes", [[20], [10, 10], [7, 7, 6], [3, 3, 3, 11], [1, 1, 18]])
    def test_sums_to_population_size(self, population, config, sizes):
        species = split_into_species(population.genomes, sizes)
        allocations = population._allocate_offspring(species)
        assert sum(allocations) == config.population_size

    def test_proportional(self, population):
        species = split_into_species(population.genomes, [15, 5])
        assert population._allocate_offspring(species) == [15, 5]

    def test_largest_remainder(self, population):
        # Quotas 20 * 4/9, 20 * 4/9, 20 * 1/9 = 8.89, 8.89, 2.22
        species = split_into_species(population.genomes[:9], [4, 4, 1])
        assert population._allocate_offspring(species) == [9, 9, 2]

    def test_remainder_ties_go_to_earliest(self, config, tracker, rng):
        config.population_size = 10
        population = Population(config, tracker, rng, count(0))
        species = split_into_species(population.genomes[:9], [3, 3, 3])
        # Quotas 3.33 each: one extra child, to the first species
        assert population._allocate_offspring(species) == [4, 3, 3]


# ============================================================================
# Next Generation Tests
# ============================================================================

class TestSpawnNextGeneration:

    def test_population_size_kept(self, population, config, tracker, rng):
        for i, genome in enumerate(population.genomes):
            genome.fitness = float(i)
        species = split_into_species(population.genomes, [12, 8])
        population.spawn_next_generation(species, MutationReproduction(config, tracker), rng)
        assert len(population.genomes) == config.population_size

    def test_new_ids_sorted(self, population, config, tracker, rng):
        old_ids = {g.id for g in population.genomes}
        species = split_into_species(population.genomes, [10, 10])
        population.spawn_next_generation(species, MutationReproduction(config, tracker), rng)

        new_ids = [g.id for g in population.genomes]
        assert new_ids == sorted(new_ids)
        assert len(set(new_ids)) == len(new_ids)
        assert not old_ids & set(new_ids)

    def test_new_list(self, population, config, tracker, rng):
        old_list = population.genomes
        old_genomes = list(old_list)
        species = split_into_species(population.genomes, [20])
        population.spawn_next_generation(species, MutationReproduction(config, tracker), rng)
        assert population.genomes is not old_list
        assert old_list == old_genomes

    def test_only_breeding_species_reproduce(self, population, config, tracker, rng):
        # With survival rate 0.5, the species of 4 members has only 2 survivors
        species = split_into_species(population.genomes, [16, 4])
        reproduction = Mock(spec=Reproduction)
        reproduction.reproduce.side_effect = lambda survivors, ids, task_rng: [survivors[0].copy(i) for i in ids]

        population.spawn_next_generation(species, reproduction, rng)

        assert reproduction.reproduce.call_count == 1
        survivors, ids, _ = reproduction.reproduce.call_args.args
        assert len(survivors) == 8
        assert len(ids) == config.population_size

    def test_survivors_are_best_members(self, population, config, tracker, rng):
        for i, genome in enumerate(population.genomes):
            genome.fitness = float(i)
        species = split_into_species(population.genomes, [20])
        received = []

        def reproduce(survivors, ids, task_rng):
            received.extend(survivors)
            return [survivors[0].copy(i) for i in ids]

        reproduction = Mock(spec=Reproduction)
        reproduction.reproduce.side_effect = reproduce
        population.spawn_next_generation(species, reproduction, rng)

        assert [g.id for g in received] == list(range(19, 9, -1))

    def test_carry_over_when_no_species_breeds(self, population, config, tracker, rng, caplog):
        old_genomes = population.genomes
        species = split_into_species(population.genomes, [2] * 10)

        with caplog.at_level("WARNING", logger="evoneat.pool.population"):
            population.spawn_next_generation(species, MutationReproduction(config, tracker), rng)

        assert population.genomes == old_genomes
        assert population.genomes is not old_genomes
        assert "carrying the population over" in caplog.text

    def test_carry_over_without_strategy(self, population, rng):
        old_genomes = population.genomes
        species = split_into_species(population.genomes, [20])
        population.spawn_next_generation(species, None, rng)
        assert population.genomes == old_genomes
        assert population.genomes is not old_genomes

    def test_wrong_number_of_children_raises(self, population, rng):
        species = split_into_species(population.genomes, [20])
        reproduction = Mock(spec=Reproduction)
        reproduction.reproduce.return_value = []
        with pytest.raises(RuntimeError, match="produced 0 children"):
            population.spawn_next_generation(species, reproduction, rng)

    def test_empty_species_ignored(self, population, config, tracker, rng):
        species = split_into_species(population.genomes, [20])
        empty = Species(1, population.genomes[0])
        empty.clear_members()
        population.spawn_next_generation(species + [empty], MutationReproduction(config, tracker), rng)
        assert len(population.genomes) == config.population_size

    def test_deterministic_for_seed(self, config):
        def next_generation():
            tracker = InnovationTracker(first_node_id=3)
            population = Population(config, tracker, np.random.default_rng(0), count(0))
            for i, genome in enumerate(population.genomes):
                genome.fitness = float(i % 5)
            species = split_into_species(population.genomes, [7, 7, 6])
            population.spawn_next_generation(species, MutationReproduction(config, tracker), np.random.default_rng(1))
            # Innovation numbers may be handed out in a different order; structure and weights may not differ
            return [(g.id, len(g.node_genes), [c.weight for c in g.conn_genes.values()])
                    for g in population.genomes]

        assert next_generation() == next_generation()
