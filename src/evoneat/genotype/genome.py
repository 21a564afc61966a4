"""
NEAT Genome Module

This module implements the Genome class for the NEAT
(NeuroEvolution of Augmenting Topologies) algorithm, together with
the compatibility distance used to split a population into species.

Classes:
    Genome: Complete genome representing a neural network structure

Functions:
    compatibility: Genetic distance between two genomes
"""

import copy
import numpy as np
from typing import Callable, TYPE_CHECKING

from evoneat.genotype.connection_gene    import ConnectionGene
from evoneat.genotype.innovation_tracker import InnovationTracker
from evoneat.genotype.node_gene          import NodeType, NodeGene

if TYPE_CHECKING:
    from evoneat.phenotype.network import NeuralNetwork
    from evoneat.run.config        import Config

class Genome:
    """
    A NEAT genome representing a neural network as a collection of node and connection genes.

    It consists of:
    - Node genes: describe network nodes (input, hidden, output, bias)
    - Connection genes: describe weighted connections between nodes, each with a unique
      innovation number used to align genes across genomes

    Node numbering convention:
        - Input nodes:  [0, num_inputs)
        - Output nodes: [num_inputs, num_inputs + num_outputs)
        - Hidden and bias nodes: [num_inputs + num_outputs, ...)
    Decoding relies on this convention: once sorted by ID, the input neurons
    come first, immediately followed by the output neurons.

    Attributes:
        id:         Unique genome identifier
        fitness:    Fitness written by the evaluation step
        node_genes: Dictionary mapping node IDs to NodeGene objects
        conn_genes: Dictionary mapping innovation numbers to ConnectionGene objects

    Public Methods:
        evaluate(evaluation):        Decode the genome and store the fitness computed by 'evaluation'
        mutate(config, rng, tracker): Apply all mutation operations stochastically
        copy(genome_id, fitness):    Create an identical genome with a new ID

    Class Methods:
        minimal(genome_id, config, tracker, rng): Inputs fully connected to outputs
        from_dict(genome_dict):                   Create a genome from a dictionary description
    """

    def __init__(self, genome_id: int, fitness: float = 0.0):
        """
        Initialize an empty Genome (no nodes, no connections).

        Parameters:
            genome_id: Unique genome identifier
            fitness:   Initial fitness score
        """
        self.id        : int                       = genome_id
        self.fitness   : float                     = fitness
        self.node_genes: dict[int, NodeGene]       = {}  # node ID => node gene
        self.conn_genes: dict[int, ConnectionGene] = {}  # innovation number => connection gene

    @classmethod
    def minimal(cls,
                genome_id: int,
                config   : 'Config',
                tracker  : InnovationTracker,
                rng      : np.random.Generator) -> 'Genome':
        """
        Create a genome whose input nodes are all connected to all output nodes.
        Weights are drawn from N(0, config.weight_init_stdev).

        Parameters:
            genome_id: Unique genome identifier
            config:    Stores configuration parameters
            tracker:   Assigns innovation numbers to the new connections
            rng:       Source of randomness

        Returns:
            the new genome, with fitness 'config.init_fitness'
        """
        genome = cls(genome_id, config.init_fitness)

        # By convention, input nodes are numbered: [0, NUMBER INPUT NODES)
        for node_id in range(config.num_inputs):
            genome.node_genes[node_id] = NodeGene(node_id, NodeType.INPUT)

        # By convention, output nodes are numbered: [NUMBER INPUT NODES, NUMBER INPUT NODES + NUMBER OUTPUT NODES)
        for i in range(config.num_outputs):
            node_id = config.num_inputs + i
            genome.node_genes[node_id] = NodeGene(node_id, NodeType.OUTPUT, config.output_activation)

        for input_node in genome.input_nodes:
            for output_node in genome.output_nodes:
                innovation = tracker.get_innovation_number(input_node.id, output_node.id)
                weight     = float(rng.normal(0.0, config.weight_init_stdev))
                genome.conn_genes[innovation] = ConnectionGene(input_node.id, output_node.id, weight, innovation)

        return genome

    @classmethod
    def from_dict(cls, genome_dict: dict, tracker: InnovationTracker | None = None) -> 'Genome':
        """
        Create a Genome from a dictionary description.

        Dictionary format:
            {
                "id": 7,                        # Optional, defaults to 0
                "fitness": 0.0,                 # Optional, defaults to 0.0
                "activation": "sigmoid",        # Optional default for hidden/output nodes
                "nodes": [
                    {"id": 0, "type": "input"},
                    {"id": 1, "type": "input"},
                    {"id": 2, "type": "output", "activation": "identity"},
                    {"id": 3, "type": "hidden"},
                    {"id": 4, "type": "bias"}
                ],
                "connections": [
                    {"from": 0, "to": 3, "weight":  0.5},
                    {"from": 1, "to": 3, "weight": -0.3, "enabled": false},
                    {"from": 3, "to": 2, "weight":  1.5, "innovation": 12}
                ]
            }

        Activation function resolution:
        - Input and bias nodes use "identity" unless they name their own activation
        - Hidden and output nodes use their own "activation" field, else the global
          "activation" field, else raise ValueError

        Connections may form cycles; decoding tolerates them.

        Parameters:
            genome_dict: Dictionary describing the genome structure
            tracker:     Assigns innovation numbers to connections that do not carry one.
                         If None, a tracker private to this genome is used.

        Returns:
            A new Genome object with the specified structure

        Raises:
            ValueError: If the structure is invalid (wrong node numbering, unknown node type,
                        missing activation, connection to a non-existent node)
            KeyError:   If required fields are missing from the dictionary
        """
        nodes_data = genome_dict["nodes"]
        valid_types = {t.value for t in NodeType}
        for n in nodes_data:
            if n["type"] not in valid_types:
                raise ValueError(f"Unknown node type '{n['type']}' for node {n['id']}")

        input_nodes  = [n for n in nodes_data if n["type"] == "input"]
        output_nodes = [n for n in nodes_data if n["type"] == "output"]
        other_nodes  = [n for n in nodes_data if n["type"] in ("hidden", "bias")]
        num_inputs   = len(input_nodes)
        num_outputs  = len(output_nodes)

        cls._validate_node_numbering(input_nodes, output_nodes, other_nodes, num_inputs, num_outputs)

        if tracker is None:
            first_free = max((n["id"] for n in nodes_data), default=-1) + 1
            tracker = InnovationTracker(first_node_id=first_free)

        genome = cls(genome_dict.get("id", 0), genome_dict.get("fitness", 0.0))
        network_activation = genome_dict.get("activation")

        for node_data in nodes_data:
            ID        = node_data["id"]
            node_type = NodeType(node_data["type"])

            if "activation" in node_data:
                actname = node_data["activation"]
            elif node_type in (NodeType.INPUT, NodeType.BIAS):
                actname = "identity"
            elif network_activation is not None:
                actname = network_activation
            else:
                raise ValueError(f"No activation function specified for {node_type.value} node {ID}.")

            genome.node_genes[ID] = NodeGene(ID, node_type, actname)

        for conn_data in genome_dict.get("connections", []):
            node_in  = conn_data["from"]
            node_out = conn_data["to"]
            weight   = conn_data["weight"]
            enabled  = conn_data.get("enabled", True)

            if node_in not in genome.node_genes:
                raise ValueError(f"Connection references non-existent source node: {node_in}")
            if node_out not in genome.node_genes:
                raise ValueError(f"Connection references non-existent destination node: {node_out}")

            if "innovation" in conn_data:
                innovation = conn_data["innovation"]
            else:
                innovation = tracker.get_innovation_number(node_in, node_out)

            genome.conn_genes[innovation] = ConnectionGene(node_in, node_out, weight, innovation, enabled=enabled)

        return genome

    @staticmethod
    def _validate_node_numbering(input_nodes : list,
                                 output_nodes: list,
                                 other_nodes : list,
                                 num_inputs  : int,
                                 num_outputs : int) -> None:
        """
        Validate that nodes follow the numbering convention.

        Raises:
            ValueError: If node numbering doesn't follow the convention
        """
        # Check input nodes are numbered [0, num_inputs)
        input_ids = sorted([n["id"] for n in input_nodes])
        expected_input_ids = list(range(num_inputs))
        if input_ids != expected_input_ids:
            raise ValueError(f"Input nodes must be numbered {expected_input_ids}, got {input_ids}")

        # Check output nodes are numbered [num_inputs, num_inputs + num_outputs)
        output_ids = sorted([n["id"] for n in output_nodes])
        expected_output_ids = list(range(num_inputs, num_inputs + num_outputs))
        if output_ids != expected_output_ids:
            raise ValueError(f"Output nodes must be numbered {expected_output_ids}, got {output_ids}")

        # Check hidden and bias nodes are numbered >= num_inputs + num_outputs
        other_ids = [n["id"] for n in other_nodes]
        min_other_id = num_inputs + num_outputs
        for oid in other_ids:
            if oid < min_other_id:
                raise ValueError(f"Node {oid} has ID below minimum {min_other_id}")

        # Check for duplicate node IDs
        all_ids = input_ids + output_ids + other_ids
        if len(all_ids) != len(set(all_ids)):
            raise ValueError("Duplicate node IDs found in node list")

    @property
    def input_nodes(self) -> list[NodeGene]:
        return [node for node in self.node_genes.values() if node.type == NodeType.INPUT]

    @property
    def output_nodes(self) -> list[NodeGene]:
        return [node for node in self.node_genes.values() if node.type == NodeType.OUTPUT]

    @property
    def hidden_nodes(self) -> list[NodeGene]:
        return [node for node in self.node_genes.values() if node.type == NodeType.HIDDEN]

    def evaluate(self, evaluation: Callable[['NeuralNetwork'], float]) -> float:
        """
        Decode this genome into a network, pass it to 'evaluation' and
        store the resulting fitness on the genome.

        Returns:
            the fitness
        """
        # Import here to avoid circular import
        from evoneat.phenotype.network import NeuralNetwork

        self.fitness = float(evaluation(NeuralNetwork(self)))
        return self.fitness

    def copy(self, genome_id: int, fitness: float | None = None) -> 'Genome':
        """
        Create a genetically identical genome with a new ID.

        Parameters:
            genome_id: ID of the copy
            fitness:   fitness of the copy (defaults to the fitness of this genome)
        """
        clone = copy.deepcopy(self)
        clone.id = genome_id
        if fitness is not None:
            clone.fitness = fitness
        return clone

    def mutate(self, config: 'Config', rng: np.random.Generator, tracker: InnovationTracker) -> None:
        """
        Apply to the current genome all possible mutation operations.

        The list of possible mutations is:
          + add a node           (probability 'config.rate_add_node')
          + add a connection     (probability 'config.rate_add_conn')
          + perturb each weight  (probability 'config.rate_perturb', per connection)
        """
        if rng.random() < config.rate_add_node:
            self._mutate_add_node(config, rng, tracker)
        if rng.random() < config.rate_add_conn:
            self._mutate_add_connection(config, rng, tracker)

        for conn in self.conn_genes.values():
            conn.mutate(config.rate_perturb, config.weight_perturb_strength, rng)

    def _mutate_add_node(self, config: 'Config', rng: np.random.Generator, tracker: InnovationTracker) -> None:
        """
        Split an existing connection by adding a new node.
        The connection to split is selected at random from all 'enabled' connections.
        """
        enabled_conn_genes = [gene for gene in self.conn_genes.values() if gene.enabled]
        if not enabled_conn_genes:
            return
        split_conn_gene = enabled_conn_genes[rng.integers(len(enabled_conn_genes))]

        # The connection being split must be disabled.
        split_conn_gene.enabled = False

        new_node_id, innov1, innov2 = tracker.get_split_IDs(split_conn_gene)

        # The same connection may have been split before in an ancestor of this genome,
        # in which case the genes already exist and only need to be re-enabled.
        if new_node_id in self.node_genes and innov1 in self.conn_genes and innov2 in self.conn_genes:
            self.conn_genes[innov1].enabled = True
            self.conn_genes[innov2].enabled = True
            return

        self.node_genes[new_node_id] = NodeGene(new_node_id, NodeType.HIDDEN, config.hidden_activation)

        # input -> new node (weight = 1.0)
        self.conn_genes[innov1] = ConnectionGene(split_conn_gene.node_in, new_node_id, 1.0, innov1)

        # new node -> output (weight = old weight)
        self.conn_genes[innov2] = ConnectionGene(new_node_id, split_conn_gene.node_out, split_conn_gene.weight, innov2)

    def _mutate_add_connection(self, config: 'Config', rng: np.random.Generator, tracker: InnovationTracker) -> None:
        """
        Add a new connection between two existing nodes.

        The two ends of the new connection are selected at random, however we cannot add a connection:
         + starting at an OUTPUT node
         + ending   at an INPUT or BIAS node
         + between two nodes already connected by a direct connection
         + which would create a cycle in the network graph

        The method gives up after a fixed number of failed attempts.
        """
        if not self.node_genes:
            return

        connected_nodes = {(conn.node_in, conn.node_out) for conn in self.conn_genes.values()}
        node_IDs = list(self.node_genes.keys())

        NUM_ATTEMPTS = 20
        for _ in range(NUM_ATTEMPTS):
            node_in  = node_IDs[rng.integers(len(node_IDs))]
            node_out = node_IDs[rng.integers(len(node_IDs))]

            # Carry out quick checks first
            if self.node_genes[node_in].type == NodeType.OUTPUT:
                continue
            if self.node_genes[node_out].type in (NodeType.INPUT, NodeType.BIAS):
                continue
            if (node_in, node_out) in connected_nodes:
                continue

            # Carry out expensive check last
            if self._would_create_cycle(node_in, node_out):
                continue

            innovation = tracker.get_innovation_number(node_in, node_out)
            weight     = float(rng.normal(0.0, config.weight_init_stdev))
            self.conn_genes[innovation] = ConnectionGene(node_in, node_out, weight, innovation)
            break

    def _would_create_cycle(self, from_node: int, to_node: int) -> bool:
        """
        Check if adding a connection from_node -> to_node would create a cycle.
        Uses DFS to check if there's already a path from 'to_node' back to 'from_node'.
        Considers ALL connections (both enabled and disabled).
        """
        if from_node == to_node:
            return True

        adjacency: dict[int, list[int]] = {}
        for conn_gene in self.conn_genes.values():
            adjacency.setdefault(conn_gene.node_in, []).append(conn_gene.node_out)

        visited = set()
        stack = [to_node]
        while stack:
            current = stack.pop()
            if current == from_node:
                return True   # found path 'to_node' -> 'from_node', would create cycle
            if current in visited:
                continue
            visited.add(current)
            stack.extend(adjacency.get(current, []))

        return False

    def __str__(self):
        node_genes_str = ''.join(str(self.node_genes[nid]) for nid in sorted(self.node_genes))
        conn_genes_str = ''.join(str(conn) for conn in self.conn_genes.values())
        return f"Genome {self.id} (fitness={self.fitness})\nNodes: {node_genes_str}\nConns: {conn_genes_str}"

    def __repr__(self):
        return f"Genome(genome_id={self.id}, fitness={self.fitness})"

def compatibility(genome_a: Genome, genome_b: Genome, coeff_unmatching: float, coeff_matching: float) -> float:
    """
    Calculate the genetic distance between two genomes.

        distance = coeff_unmatching * U / N + coeff_matching * W̄

    Where:
    - U  = number of connection genes present in only one of the genomes
    - N  = number of connection genes in the larger genome (at least 1)
    - W̄ = average absolute weight difference of matching connection genes

    Connection genes are matched by innovation number.

    Returns:
        a non-negative distance; 0.0 for two genomes without connections
    """
    innovs_a = set(genome_a.conn_genes.keys())
    innovs_b = set(genome_b.conn_genes.keys())
    if not innovs_a and not innovs_b:
        return 0.0

    matching_innovs = innovs_a & innovs_b
    num_unmatching  = len(innovs_a ^ innovs_b)

    avg_weight_diff = 0.0
    if matching_innovs:
        weight_diff = sum(abs(genome_a.conn_genes[i].weight - genome_b.conn_genes[i].weight) for i in matching_innovs)
        avg_weight_diff = weight_diff / len(matching_innovs)

    N = max(len(innovs_a), len(innovs_b), 1)
    return coeff_unmatching * num_unmatching / N + coeff_matching * avg_weight_diff
