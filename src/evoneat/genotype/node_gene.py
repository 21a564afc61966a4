"""
NEAT Node Gene Module.

This module implements the NodeGene class and NodeType enumeration
for the NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    NodeType: Enumeration for node types (INPUT, HIDDEN, OUTPUT, BIAS)
    NodeGene: Gene encoding a single network node
"""

from enum   import Enum
from typing import Callable

from evoneat.activations import activation_codes, get_activation

class NodeType(Enum):
    """
    Nodes come in four types: input, hidden, output, bias.
    """
    INPUT  = "input"
    HIDDEN = "hidden"
    OUTPUT = "output"
    BIAS   = "bias"

class NodeGene:
    """
    A gene describing a node in a Neural Network.

    Node genes are identified by a unique node ID which remains consistent
    across structural mutations, and which is used to align genes when
    genomes are decoded and compared.

    Public Attributes:
        id:              Unique identifier for this node
        type:            Type of node (INPUT, HIDDEN, OUTPUT or BIAS)
        activation_name: Name of the activation function (e.g., 'tanh', 'relu')
        activation:      The activation function itself (callable)
    """

    def __init__(self, node_id: int, node_type: NodeType, activation_name: str = "identity"):
        """
        Parameters:
            node_id:         Unique identifier for this node
            node_type:       Type of node (INPUT, HIDDEN, OUTPUT or BIAS)
            activation_name: Name of the activation function; see the 'activations' module

        Raises:
            ValueError: if 'activation_name' is not a known activation function
        """
        self.id             : int                     = node_id
        self.type           : NodeType                = node_type
        self.activation_name: str                     = activation_name
        self.activation     : Callable[[float], float] = get_activation(activation_name)

    def __repr__(self):
        return (f"NodeGene(node_id={self.id}, node_type={self.type}, "
                f"activation_name={self.activation_name!r})")

    def __str__(self):
        return f"[{self.id:02d},{self.type.name[0]},{activation_codes[self.activation_name]}]"
