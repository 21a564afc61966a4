"""
NEAT Network Module

This module implements the phenotype: the executable neural network decoded
from a genome. Neurons pull their signal from the neurons they are connected
from, memoizing the result for the duration of one feed-forward pass.

Classes:
    InvalidInputSize: Raised when a network is fed the wrong number of inputs
    Neuron:           A computational node applying an activation function
    NeuralNetwork:    A network decoded from a genome
"""

from bisect import bisect_left
from typing import Callable, Sequence, TYPE_CHECKING

from evoneat.genotype.node_gene import NodeType

if TYPE_CHECKING:
    from evoneat.genotype import Genome, NodeGene

class InvalidInputSize(ValueError):
    """
    Raised by 'NeuralNetwork.feed_forward' when the number of inputs
    differs from the number of input neurons.

    Attributes:
        expected: the number of input neurons
        actual:   the number of inputs received
    """

    def __init__(self, expected: int, actual: int):
        super().__init__(f"Invalid number of inputs: expected {expected}, got {actual}")
        self.expected = expected
        self.actual   = actual

class Neuron:
    """
    A computational node (neuron) in a neural network.

    A neuron holds a signal and a map of incoming synapses: source neuron => weight.
    The synapse map only refers to neurons owned by the same NeuralNetwork.

    'activated' and 'signal' are only meaningful within a single feed-forward
    pass; the network resets them once the pass completes.

    Public Attributes:
        id:         Globally unique ID for this neuron (the ID of its node gene)
        type:       Neuron type (INPUT, HIDDEN, OUTPUT or BIAS)
        activation: Activation function applied to the weighted sum of incoming signals
        activated:  Whether the neuron has been activated during the current pass
        signal:     The signal currently held by the neuron
        synapses:   Incoming connections: source Neuron => weight

    Public Methods:
        activate(): Compute (or recall) the signal of this neuron
        reset():    Clear the pass-scoped state
    """

    def __init__(self, gene: 'NodeGene'):
        """
        Parameters:
            gene: the gene encoding the Node/Neuron
        """
        self.id             : int                       = gene.id
        self.type           : NodeType                  = gene.type
        self.activation     : Callable[[float], float]  = gene.activation
        self.activation_name: str                       = gene.activation_name
        self.activated      : bool                      = False
        self.signal         : float                     = 0.0
        self.synapses       : dict['Neuron', float]     = {}

    def activate(self) -> float:
        """
        Retrieve the signals of the neurons connected to this neuron and return its own signal.

        A neuron with no incoming synapses, or already activated during the current
        pass, returns its stored signal. Otherwise it is marked activated *before*
        its sources are visited, so a neuron reached again through a cycle returns
        the signal it currently holds instead of being re-entered. The signal is then
        activation(Σ source.activate() * weight), taken over the synapses in order.

        The traversal is depth-first with an explicit stack, so very deep networks
        do not exhaust the interpreter's recursion limit.
        """
        if self.activated or not self.synapses:
            return self.signal
        self.activated = True

        # Each frame: [neuron, iterator over its synapses, running sum, weight of the pending source]
        stack = [[self, iter(self.synapses.items()), 0.0, 0.0]]
        while stack:
            frame = stack[-1]
            neuron, synapses = frame[0], frame[1]

            descended = False
            for source, weight in synapses:
                if source.activated or not source.synapses:
                    frame[2] += source.signal * weight
                    continue
                source.activated = True
                frame[3] = weight
                stack.append([source, iter(source.synapses.items()), 0.0, 0.0])
                descended = True
                break

            if descended:
                continue

            neuron.signal = neuron.activation(frame[2])
            stack.pop()
            if stack:
                parent = stack[-1]
                parent[2] += neuron.signal * parent[3]

        return self.signal

    def reset(self) -> None:
        self.activated = False
        self.signal    = 0.0

    def _label(self) -> str:
        return f"[{self.type.value}({self.id}, {self.activation_name})]"

    def __str__(self):
        if not self.synapses:
            return self._label()
        lines = [f"{self._label()} ("]
        for source, weight in self.synapses.items():
            lines.append(f"  <--{{{weight:.3f}}}--{source._label()}")
        lines.append(")")
        return "\n".join(lines)

    def __repr__(self):
        return f"Neuron(id={self.id}, type={self.type}, activation={self.activation_name!r})"

class NeuralNetwork:
    """
    The phenotype decoded from a Genome.

    Neurons are kept in a list sorted by ID. Following the node numbering
    convention of genomes, the first 'num_inputs' neurons are the input neurons
    and the next 'num_outputs' neurons are the output neurons; evaluation
    addresses them by position.

    Public Attributes:
        num_inputs:  Number of input neurons
        num_outputs: Number of output neurons
        neurons:     All neurons, sorted by ID

    Public Methods:
        feed_forward(inputs): Process inputs through the network and return outputs
    """

    def __init__(self, genome: 'Genome'):
        """
        Decode a genome.

        Decoding happens in two phases. First one neuron is built per node gene, in
        ascending ID order. Then every enabled connection gene is wired up: both its
        endpoints are looked up by binary search over the sorted neurons, and the
        connection becomes a synapse of its destination neuron only if both exist.
        Disabled connections and connections to missing nodes are skipped.

        Parameters:
            genome: the Genome encoding the network
        """
        node_genes = sorted(genome.node_genes.values(), key=lambda gene: gene.id)

        self.num_inputs : int = sum(1 for gene in node_genes if gene.type == NodeType.INPUT)
        self.num_outputs: int = sum(1 for gene in node_genes if gene.type == NodeType.OUTPUT)

        # Phase 1: build
        self.neurons: list[Neuron] = [Neuron(gene) for gene in node_genes]
        neuron_ids = [neuron.id for neuron in self.neurons]

        # Phase 2: wire
        for conn in genome.conn_genes.values():
            if not conn.enabled:
                continue
            source = self._find(neuron_ids, conn.node_in)
            target = self._find(neuron_ids, conn.node_out)
            if source is not None and target is not None:
                target.synapses[source] = conn.weight

    def _find(self, neuron_ids: list[int], neuron_id: int) -> Neuron | None:
        i = bisect_left(neuron_ids, neuron_id)
        if i < len(neuron_ids) and neuron_ids[i] == neuron_id:
            return self.neurons[i]
        return None

    def feed_forward(self, inputs: Sequence[float]) -> list[float]:
        """
        Propagate the input signals from the input neurons to the output neurons.

        The inputs are written to the input neurons, each output neuron is activated
        in turn, and finally the state of every neuron is reset so the network can
        be reused.

        Parameters:
            inputs: the network inputs (as many as input neurons)

        Returns:
            the output signals (as many as output neurons)

        Raises:
            InvalidInputSize: if len(inputs) differs from the number of input neurons
        """
        if len(inputs) != self.num_inputs:
            raise InvalidInputSize(self.num_inputs, len(inputs))

        try:
            for neuron, value in zip(self.neurons[:self.num_inputs], inputs):
                neuron.signal = value

            outputs_end = self.num_inputs + self.num_outputs
            return [neuron.activate() for neuron in self.neurons[self.num_inputs:outputs_end]]
        finally:
            for neuron in self.neurons:
                neuron.reset()

    def __str__(self):
        lines = [f"NeuralNetwork({self.num_inputs}, {self.num_outputs}):"]
        lines.extend(str(neuron) for neuron in self.neurons)
        return "\n".join(lines)

    def __repr__(self):
        return f"NeuralNetwork(num_inputs={self.num_inputs}, num_outputs={self.num_outputs}, num_neurons={len(self.neurons)})"
