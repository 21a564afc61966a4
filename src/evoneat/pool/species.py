"""
NEAT Species Module

This module implements the Species class for the NEAT algorithm.
A species represents a cluster of genetically similar genomes
that compete primarily within their own niche.

Classes:
    Species: Represents a single species with a fixed representative and its members
"""

import math
from typing import TYPE_CHECKING

from evoneat.genotype.genome import compatibility

if TYPE_CHECKING:
    from evoneat.genotype import Genome

class Species:
    """
    A species representing a cluster of genetically similar genomes.

    A genome belongs to a species when its compatibility distance to the species
    representative is below the distance threshold. The representative is chosen
    when the species is created and never changes afterwards.

    Public Attributes:
        id:             Unique species identifier
        representative: Genome used for distance calculations during speciation
        members:        The genomes registered with this species, in registration order

    Public Methods:
        register(genome):                Add a genome to the members
        clear_members():                 Forget the members, keeping the representative
        distance_to(genome, ...):        Compatibility distance between a genome and the representative
        sort_members(minimize):          Rank members by fitness, best first
        survivors(survival_rate, ...):   The best members, if enough of them survive to reproduce
    """

    # A species reproduces only if more than this many members survive
    MIN_SURVIVORS = 2

    def __init__(self, species_id: int, representative: 'Genome'):
        """
        Parameters:
            species_id:     unique species identifier
            representative: the Genome that represents this species in the speciation process;
                            it is also the first member of the species
        """
        self.id            : int            = species_id
        self.representative: 'Genome'       = representative
        self.members       : list['Genome'] = [representative]

    def register(self, genome: 'Genome') -> None:
        self.members.append(genome)

    def clear_members(self) -> None:
        self.members = []

    def distance_to(self, genome: 'Genome', coeff_unmatching: float, coeff_matching: float) -> float:
        """
        Calculate the genetic distance between this species and a given genome.
        Uses the species representative for comparison.
        """
        return compatibility(self.representative, genome, coeff_unmatching, coeff_matching)

    def sort_members(self, minimize: bool) -> None:
        """
        Sort the members in place, best first: ascending fitness if minimizing,
        descending otherwise. Genome IDs break ties.
        """
        if minimize:
            self.members.sort(key=lambda g: (g.fitness, g.id))
        else:
            self.members.sort(key=lambda g: (-g.fitness, g.id))

    def num_survivors(self, survival_rate: float) -> int:
        """
        The number of members surviving to the next generation: ceil(|members| * survival_rate).
        """
        return math.ceil(len(self.members) * survival_rate)

    def can_reproduce(self, survival_rate: float) -> bool:
        return self.num_survivors(survival_rate) > Species.MIN_SURVIVORS

    def survivors(self, survival_rate: float, minimize: bool) -> list['Genome']:
        """
        Rank the members and return the surviving top fraction.

        Returns:
            the best ceil(|members| * survival_rate) members, best first, or an
            empty list if no more than MIN_SURVIVORS would survive
        """
        if not self.can_reproduce(survival_rate):
            return []
        self.sort_members(minimize)
        return self.members[:self.num_survivors(survival_rate)]

    def __len__(self):
        return len(self.members)

    def __repr__(self):
        return f"Species(id={self.id}, representative={self.representative.id}, members={len(self.members)})"
