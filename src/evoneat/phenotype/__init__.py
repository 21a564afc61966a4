"""
NEAT Phenotype Package

This package implements the phenotype: the executable neural network
expressed by a genome.

Exported:
    Neuron:           A computational node applying an activation function
    NeuralNetwork:    A network decoded from a genome
    InvalidInputSize: Raised when a network is fed the wrong number of inputs
"""

from evoneat.phenotype.network import InvalidInputSize, NeuralNetwork, Neuron

__all__ = ['InvalidInputSize', 'NeuralNetwork', 'Neuron']
