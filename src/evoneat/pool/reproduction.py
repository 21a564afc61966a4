"""
NEAT Reproduction Module

This module defines how the surviving members of a species produce the
genomes of the next generation. Reproduction is a strategy plugged into the
Population; the survivors are selected by the Species itself.

Classes:
    Reproduction:         Abstract reproduction strategy
    MutationReproduction: Asexual reproduction: clone a survivor, then mutate the clone
"""

import numpy as np
from abc    import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from evoneat.genotype import Genome, InnovationTracker
    from evoneat.run.config import Config

class Reproduction(ABC):
    """
    Strategy producing offspring from the survivors of one species.

    Implementations are called concurrently for different species, each call
    with its own random number generator; they must not modify the survivors.
    """

    @abstractmethod
    def reproduce(self,
                  survivors : list['Genome'],
                  genome_ids: list[int],
                  rng       : np.random.Generator) -> list['Genome']:
        """
        Produce one child per entry of 'genome_ids'.

        Parameters:
            survivors:  the surviving members of a species, best first
            genome_ids: the IDs to give the children, in order
            rng:        source of randomness private to this call

        Returns:
            exactly len(genome_ids) new genomes
        """
        pass

class MutationReproduction(Reproduction):
    """
    Each child is a copy of a survivor picked uniformly at random, mutated
    according to the mutation rates of the configuration. Children start
    with fitness 'config.init_fitness'.
    """

    def __init__(self, config: 'Config', tracker: 'InnovationTracker'):
        """
        Parameters:
            config:  Stores configuration parameters
            tracker: Assigns innovation numbers and node IDs to new structure
        """
        self._config  = config
        self._tracker = tracker

    def reproduce(self,
                  survivors : list['Genome'],
                  genome_ids: list[int],
                  rng       : np.random.Generator) -> list['Genome']:
        if not survivors:
            return []

        children = []
        for genome_id in genome_ids:
            parent = survivors[rng.integers(len(survivors))]
            child  = parent.copy(genome_id, fitness=self._config.init_fitness)
            child.mutate(self._config, rng, self._tracker)
            children.append(child)
        return children
