"""
Unit tests for ConnectionGene.
"""

import numpy as np

from evoneat.genotype.connection_gene import ConnectionGene


class TestConnectionGeneInit:

    def test_attributes(self):
        conn = ConnectionGene(0, 3, -0.75, 12)
        assert conn.node_in == 0
        assert conn.node_out == 3
        assert conn.weight == -0.75
        assert conn.innovation == 12
        assert conn.enabled is True

    def test_disabled(self):
        conn = ConnectionGene(0, 3, 1.0, 12, enabled=False)
        assert conn.enabled is False


class TestConnectionGeneMutate:

    def test_rate_zero_never_perturbs(self):
        conn = ConnectionGene(0, 1, 0.5, 0)
        rng = np.random.default_rng(0)
        for _ in range(100):
            conn.mutate(0.0, 1.0, rng)
        assert conn.weight == 0.5

    def test_rate_one_always_perturbs(self):
        conn = ConnectionGene(0, 1, 0.5, 0)
        rng = np.random.default_rng(0)
        conn.mutate(1.0, 1.0, rng)
        assert conn.weight != 0.5
        assert isinstance(conn.weight, float)

    def test_same_seed_same_perturbation(self):
        conn_a = ConnectionGene(0, 1, 0.5, 0)
        conn_b = ConnectionGene(0, 1, 0.5, 0)
        conn_a.mutate(1.0, 0.3, np.random.default_rng(9))
        conn_b.mutate(1.0, 0.3, np.random.default_rng(9))
        assert conn_a.weight == conn_b.weight

    def test_zero_strength_keeps_weight(self):
        conn = ConnectionGene(0, 1, 0.5, 0)
        conn.mutate(1.0, 0.0, np.random.default_rng(0))
        assert conn.weight == 0.5


class TestConnectionGeneStr:

    def test_str(self):
        assert str(ConnectionGene(1, 4, 0.5, 7)) == "[007,E,01=>04,+0.50]"
        assert str(ConnectionGene(1, 4, -1.25, 7, enabled=False)) == "[007,D,01=>04,-1.25]"

    def test_repr(self):
        text = repr(ConnectionGene(1, 4, 0.5, 7))
        assert "innovation=007" in text
        assert "enabled=True" in text
