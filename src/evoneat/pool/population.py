"""
NEAT Population Module

This module implements the Population class: the genomes of the current
generation, and the construction of the next generation from the species
that survive selection.

Classes:
    Population: Holds the current generation and spawns the next one
"""

import logging
import threading
import numpy as np
from joblib import Parallel, delayed
from typing import Iterator, TYPE_CHECKING

from evoneat.genotype     import Genome
from evoneat.pool.species import Species

if TYPE_CHECKING:
    from evoneat.genotype import InnovationTracker
    from evoneat.pool.reproduction import Reproduction
    from evoneat.run.config import Config

logger = logging.getLogger(__name__)

class Population:
    """
    A population of evolving genomes.

    The list of genomes is never modified in place: every generation gets a new
    list, so code holding on to a previous generation is never affected by the
    construction of the next.

    Public Attributes:
        genomes: List of all genomes in the current generation

    Public Methods:
        get_fittest_genome(minimize): Return the best genome of the current generation
        spawn_next_generation(...):   Replace the current generation by the offspring of the species
    """

    def __init__(self,
                 config      : 'Config',
                 tracker     : 'InnovationTracker',
                 rng         : np.random.Generator,
                 id_generator: Iterator[int]):
        """
        Create 'config.population_size' genomes whose inputs are fully connected to their outputs.

        Parameters:
            config:       Stores configuration parameters
            tracker:      Assigns innovation numbers to the initial connections
            rng:          Source of randomness for the initial weights
            id_generator: Yields the genome IDs
        """
        self._config       = config
        self._id_generator = id_generator
        self.genomes: list[Genome] = [Genome.minimal(next(id_generator), config, tracker, rng)
                                      for _ in range(config.population_size)]

    def get_fittest_genome(self, minimize: bool) -> Genome | None:
        """
        Return the genome with the best fitness (lowest if 'minimize', highest otherwise),
        or None if the population is empty. Ties go to the genome listed first.
        """
        if not self.genomes:
            return None
        if minimize:
            return min(self.genomes, key=lambda g: g.fitness)
        return max(self.genomes, key=lambda g: g.fitness)

    def spawn_next_generation(self,
                              species     : list['Species'],
                              reproduction: 'Reproduction | None',
                              rng         : np.random.Generator) -> None:
        """
        Create the next generation from the survivors of each species.

        Step 1: Selection
        - A species takes part in reproduction if more than two of its members survive
          (the survivors are the best ceil(|members| * survival_rate) members)

        Step 2: Offspring Allocation
        - 'population_size' children are shared among the reproducing species in
          proportion to their number of members (largest remainder rounding)
        - The IDs of every species' children are reserved up front

        Step 3: Reproduction
        - One task per reproducing species, run concurrently on threads; each task ranks
          its own species' members and hands the survivors to the reproduction strategy
        - Children are appended to the shared next generation under a lock

        The new generation is ordered by genome ID, so a run is reproducible for a given
        seed regardless of the order in which the tasks finish.

        If there is no reproduction strategy, or no species can reproduce, the
        current genomes carry over to the next generation.

        Parameters:
            species:      all species, in creation order
            reproduction: strategy producing the children, or None
            rng:          source of randomness; one independent child generator is spawned per task
        """
        if reproduction is None:
            logger.debug("No reproduction strategy, carrying the population over")
            self.genomes = list(self.genomes)
            return

        survival_rate = self._config.survival_rate
        breeding = [spec for spec in species if spec.can_reproduce(survival_rate)]
        if not breeding:
            logger.warning("No species has more than %d survivors, carrying the population over",
                           Species.MIN_SURVIVORS)
            self.genomes = list(self.genomes)
            return

        allocations = self._allocate_offspring(breeding)
        genome_ids  = [[next(self._id_generator) for _ in range(n)] for n in allocations]
        task_rngs   = rng.spawn(len(breeding))

        next_generation: list[Genome] = []
        lock = threading.Lock()

        def inherit(spec: 'Species', ids: list[int], task_rng: np.random.Generator) -> None:
            survivors = spec.survivors(survival_rate, self._config.minimize_fitness)
            children  = reproduction.reproduce(survivors, ids, task_rng)
            if len(children) != len(ids):
                raise RuntimeError(f"Species {spec.id} produced {len(children)} children, expected {len(ids)}")
            with lock:
                next_generation.extend(children)
            logger.debug("Species %d: %d survivors produced %d children", spec.id, len(survivors), len(children))

        Parallel(n_jobs=len(breeding), prefer="threads", require="sharedmem")(
            delayed(inherit)(spec, ids, task_rng)
            for spec, ids, task_rng in zip(breeding, genome_ids, task_rngs))

        next_generation.sort(key=lambda g: g.id)
        self.genomes = next_generation

    def _allocate_offspring(self, breeding: list['Species']) -> list[int]:
        """
        Share 'population_size' children among the breeding species in proportion
        to their number of members, using largest remainder rounding.
        """
        population_size = self._config.population_size
        total_members   = sum(len(spec.members) for spec in breeding)

        quotas      = [population_size * len(spec.members) / total_members for spec in breeding]
        allocations = [int(q) for q in quotas]

        # Hand out the remaining children to the largest fractional parts (earliest species first on ties)
        remaining = population_size - sum(allocations)
        order = sorted(range(len(breeding)), key=lambda i: (-(quotas[i] - allocations[i]), i))
        for i in order[:remaining]:
            allocations[i] += 1

        return allocations

    def __len__(self):
        return len(self.genomes)

    def __str__(self):
        return '\n'.join(str(genome) for genome in self.genomes)
