"""
NEAT Species Manager Module

This module implements the SpeciesManager class for the NEAT algorithm.
The manager partitions each generation into species and keeps the list
of all species created during a run.

How Speciation Works:
1. Each genome is compared with the species representatives, in the order
   in which the species were created
2. The genome joins the *first* species whose representative is closer than
   the distance threshold (first match, not best match)
3. A genome that fits no species founds a new species, becoming its representative

Representatives never change, and species are never removed: a species that
attracts no genome in a generation stays in the list with no members.

Classes:
    SpeciesManager: Manages all species and the speciation process
"""

import logging
from itertools import count
from typing    import TYPE_CHECKING

from evoneat.pool.species import Species

if TYPE_CHECKING:
    from evoneat.genotype import Genome
    from evoneat.run.config import Config

logger = logging.getLogger(__name__)

class SpeciesManager:
    """
    Manages the collection of species and the speciation process across generations.

    Public Attributes:
        species:            List of all species, in creation order
        genome_to_species:  Dictionary mapping genome IDs to their Species (current generation)

    Public Methods:
        create(representative): Found a new species and append it to the list
        speciate(genomes):      Assign every genome to a species
    """

    def __init__(self, config: 'Config'):
        """
        Parameters:
            config: Stores configuration parameters.
        """
        self.species          : list[Species]      = []
        self.genome_to_species: dict[int, Species] = {}
        self._id_generator                         = count(0)
        self._config                               = config

    def create(self, representative: 'Genome') -> Species:
        """
        Found a new species with 'representative' as its representative and first member.
        """
        spec = Species(next(self._id_generator), representative)
        self.species.append(spec)
        self.genome_to_species[representative.id] = spec
        logger.debug("Created species %d with representative genome %d", spec.id, representative.id)
        return spec

    def speciate(self, genomes: list['Genome']) -> None:
        """
        Assign all genomes of a generation to species.

        The members of the previous generation are forgotten first; the species
        themselves, and their representatives, are kept. Each genome is then
        registered with the first species (in creation order) whose representative
        is within the distance threshold, or founds a new species.

        Postconditions:
            - Every genome is a member of exactly one species
            - The species list has only grown, by one species per unmatched genome

        Parameters:
            genomes: the genomes to speciate, in population order
        """
        for spec in self.species:
            spec.clear_members()
        self.genome_to_species = {}

        num_species_before = len(self.species)
        for genome in genomes:
            for spec in self.species:
                distance = spec.distance_to(genome, self._config.coeff_unmatching, self._config.coeff_matching)
                if distance < self._config.distance_threshold:
                    spec.register(genome)
                    self.genome_to_species[genome.id] = spec
                    break
            else:
                self.create(genome)

        logger.debug("Speciated %d genomes: %d species (%d new)",
                     len(genomes), len(self.species), len(self.species) - num_species_before)

        # Error check: all genomes must have been allocated to a species
        assigned_count = sum(len(spec.members) for spec in self.species)
        assert assigned_count == len(genomes), "Lost genomes during speciation!"

    @property
    def active_species(self) -> list[Species]:
        """Species having at least one member in the current generation."""
        return [spec for spec in self.species if spec.members]
