"""
NEAT Pool Package

This package manages the evolving population and its division into species.

Exported:
    Species:              A cluster of genetically similar genomes
    SpeciesManager:       Assigns genomes to species
    Population:           The current generation and the construction of the next
    Reproduction:         Abstract strategy producing offspring from a species' survivors
    MutationReproduction: Asexual reproduction by cloning and mutating survivors
"""

from evoneat.pool.population      import Population
from evoneat.pool.reproduction    import MutationReproduction, Reproduction
from evoneat.pool.species         import Species
from evoneat.pool.species_manager import SpeciesManager

__all__ = ['MutationReproduction',
           'Population',
           'Reproduction',
           'Species',
           'SpeciesManager']
