"""
NEAT (NeuroEvolution of Augmenting Topologies) with explicit speciation.

This package evolves populations of variable-topology neural networks: genomes
are decoded into networks, evaluated in parallel by a caller-supplied fitness
function, split into species by compatibility distance, and the survivors of
each species produce the next generation.

Main components:
- genotype:    Genetic encoding (genomes, genes, innovation tracking, compatibility)
- phenotype:   Networks decoded from genomes
- pool:        Population, species and reproduction
- run:         Configuration and the evolution engine
- activations: Activation functions for neurons

Example:
    >>> from evoneat import Config, Evolution
    >>> config = Config("config.ini")
    >>> def evaluate(network):
    ...     return network.feed_forward([1.0, 0.0])[0]
    >>> best = Evolution(config, evaluate).run()
"""

__version__ = "0.1.0"

from evoneat.genotype  import ConnectionGene, Genome, InnovationTracker, NodeGene, NodeType, compatibility
from evoneat.phenotype import InvalidInputSize, NeuralNetwork, Neuron
from evoneat.pool      import MutationReproduction, Population, Reproduction, Species, SpeciesManager
from evoneat.run       import Config, ConfigError, Evolution

__all__ = [
    "Config",
    "ConfigError",
    "ConnectionGene",
    "Evolution",
    "Genome",
    "InnovationTracker",
    "InvalidInputSize",
    "MutationReproduction",
    "NeuralNetwork",
    "Neuron",
    "NodeGene",
    "NodeType",
    "Population",
    "Reproduction",
    "Species",
    "SpeciesManager",
    "compatibility",
]
