"""
Unit tests for NodeGene and NodeType.
"""

import pytest

from evoneat.activations import activations
from evoneat.genotype.node_gene import NodeGene, NodeType


class TestNodeType:

    def test_values(self):
        assert NodeType.INPUT.value == "input"
        assert NodeType.HIDDEN.value == "hidden"
        assert NodeType.OUTPUT.value == "output"
        assert NodeType.BIAS.value == "bias"

    def test_lookup_by_value(self):
        assert NodeType("bias") is NodeType.BIAS


class TestNodeGene:

    def test_default_activation_is_identity(self):
        gene = NodeGene(0, NodeType.INPUT)
        assert gene.activation_name == "identity"
        assert gene.activation is activations["identity"]

    def test_named_activation_resolved(self):
        gene = NodeGene(3, NodeType.HIDDEN, "tanh")
        assert gene.id == 3
        assert gene.type == NodeType.HIDDEN
        assert gene.activation is activations["tanh"]

    def test_unknown_activation_raises(self):
        with pytest.raises(ValueError):
            NodeGene(3, NodeType.HIDDEN, "no_such_function")

    def test_str(self):
        assert str(NodeGene(4, NodeType.OUTPUT, "sigmoid")) == "[04,O,SIG]"
        assert str(NodeGene(12, NodeType.BIAS)) == "[12,B,IDN]"

    def test_repr(self):
        assert "node_id=7" in repr(NodeGene(7, NodeType.HIDDEN, "relu"))
