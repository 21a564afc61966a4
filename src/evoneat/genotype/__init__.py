"""
NEAT Genotype Package

This package implements the genotype representation: the genes that encode
a network's topology and weights, and the operators acting on them.

Modules:
    node_gene:          NodeType enumeration and NodeGene class
    connection_gene:    ConnectionGene class
    genome:             Genome class and the compatibility distance
    innovation_tracker: InnovationTracker class

Exported:
    NodeType:          Enumeration for node types (INPUT, HIDDEN, OUTPUT, BIAS)
    NodeGene:          Gene encoding a single network node
    ConnectionGene:    Gene encoding a weighted connection between nodes
    Genome:            Complete genome representing a neural network
    InnovationTracker: Tracker for innovation numbers and node IDs
    compatibility:     Genetic distance between two genomes
"""

from evoneat.genotype.connection_gene    import ConnectionGene
from evoneat.genotype.genome             import Genome, compatibility
from evoneat.genotype.innovation_tracker import InnovationTracker
from evoneat.genotype.node_gene          import NodeType, NodeGene

__all__ = ['ConnectionGene',
           'Genome',
           'InnovationTracker',
           'NodeGene',
           'NodeType',
           'compatibility']
