"""
XOR Problem Implementation for NEAT

This module implements the classic XOR (exclusive OR) problem as a benchmark
for the NEAT algorithm. XOR cannot be solved by a network without hidden
nodes, which makes it a minimal test of topology evolution.

The XOR Problem:
        Input (0, 0) → Output 0
        Input (0, 1) → Output 1
        Input (1, 0) → Output 1
        Input (1, 1) → Output 0

Networks have three inputs: the two XOR operands and a constant 1.0, which
plays the role of a bias.

Fitness Function:
    Fitness = 4.0 - Σ(output - target)²

    Maximum fitness of 4.0 is achieved when all four XOR cases produce exact outputs.

Classes:
    Evolution_XOR: Evolution engine printing XOR-specific reports

Usage:
    config    = Config("examples/configs/config_xor.ini")
    evolution = Evolution_XOR(config)
    evolution.run()
"""

from statistics import mean

from evoneat           import Config, Evolution
from evoneat.phenotype import NeuralNetwork

XOR_INPUTS  = [[0.0, 0.0, 1.0], [0.0, 1.0, 1.0], [1.0, 0.0, 1.0], [1.0, 1.0, 1.0]]
XOR_OUTPUTS = [0.0, 1.0, 1.0, 0.0]

def evaluate_xor(network: NeuralNetwork) -> float:
    """
    Test the network on all 4 XOR cases; return 4.0 minus the sum of squared errors.
    """
    fitness = 4.0
    for inputs, expected in zip(XOR_INPUTS, XOR_OUTPUTS):
        output = network.feed_forward(inputs)[0]
        fitness -= (output - expected) ** 2
    return fitness

class Evolution_XOR(Evolution):
    """
    Evolution engine for the XOR problem, printing a line per generation
    and the truth table of the best network at the end.
    """

    def __init__(self, config: Config, suppress_output: bool = False):
        super().__init__(config, evaluate_xor, suppress_output=suppress_output)

    def _report_progress(self):
        fitness_all = [genome.fitness for genome in self.population]
        fittest     = max(self.population, key=lambda g: g.fitness)
        num_nodes   = len(fittest.node_genes)
        num_conns   = sum(1 for conn in fittest.conn_genes.values() if conn.enabled)
        print(f"Generation {self.generation:4d}: "
              f"best fitness = {fittest.fitness:.4f}, "
              f"mean fitness = {mean(fitness_all):.4f}, "
              f"species = {sum(1 for s in self.species if s.members):3d}, "
              f"best network = {num_nodes} nodes / {num_conns} connections")

    def _final_report(self):
        print(f"\nBest genome (fitness = {self.best.fitness:.4f}):")
        network = NeuralNetwork(self.best)
        print(network)
        print("\nTruth table:")
        for inputs, expected in zip(XOR_INPUTS, XOR_OUTPUTS):
            output = network.feed_forward(inputs)[0]
            print(f"  {inputs[0]:.0f} XOR {inputs[1]:.0f} = {output:.4f} (expected {expected:.0f})")

if __name__ == '__main__':
    from pathlib import Path

    config = Config(str(Path(__file__).parent / "configs" / "config_xor.ini"))
    print(config.summary())
    Evolution_XOR(config).run()
