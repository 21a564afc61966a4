"""
NEAT Innovation Tracker Module

This module implements the InnovationTracker class for the
NEAT (NeuroEvolution of Augmenting Topologies) algorithm.

Classes:
    InnovationTracker: Tracker for innovation numbers and node IDs shared by a population
"""

import threading
from itertools import count
from typing    import TYPE_CHECKING

if TYPE_CHECKING:
    from evoneat.genotype.connection_gene import ConnectionGene

class InnovationTracker:
    """
    Tracks structural changes across all genomes of one evolutionary run.
    Ensures the same structural change gets the same innovation
    number (for connections) and ID (for nodes).

    One tracker is owned by each Evolution engine; reproduction tasks for
    different species may call it concurrently, so all lookups are serialized
    with a lock.
    """

    def __init__(self, first_node_id: int, first_innovation: int = 0):
        """
        Parameters:
            first_node_id:    the ID given to the first node created by splitting a connection
                              (typically 'num_inputs + num_outputs')
            first_innovation: the first innovation number handed out
        """
        self._lock                = threading.Lock()
        self._next_innovation     = count(first_innovation)
        self._next_node_id        = count(first_node_id)

        # For each connection ever created, map its endpoints to its innovation number
        self._innovation_numbers: dict[tuple[int, int], int] = {}

        # When a connection is split, tracks what node was created and
        # what innovation numbers were assigned to the new connections.
        self._split_IDs: dict[int, tuple[int, int, int]] = {}   # split innovation -> (new_node_id, innov1, innov2)

    def get_innovation_number(self, node_in: int, node_out: int) -> int:
        """
        Get innovation number for a connection, identified by its endpoints.
        Returns existing innovation number if this connection was created
        before, otherwise assigns a new innovation number.

        Parameters:
            node_in:  node ID for the 'from' end of the connection
            node_out: node ID for the 'to'   end of the connection

        Returns:
            connection ID (a.k.a. innovation number)
        """
        with self._lock:
            return self._innovation_number(node_in, node_out)

    def _innovation_number(self, node_in: int, node_out: int) -> int:
        key = (node_in, node_out)
        if key not in self._innovation_numbers:
            self._innovation_numbers[key] = next(self._next_innovation)
        return self._innovation_numbers[key]

    def get_split_IDs(self, conn_to_split: 'ConnectionGene') -> tuple[int, int, int]:
        """
        Get node ID and innovation numbers for splitting a connection.
        If this exact connection has been split before, returns the same
        values, otherwise creates new ones.

        Parameters:
            conn_to_split: the connection being split

        Returns:
            3-tuple: (new_node_id, innovation1, innovation2)
            innovation1 is for the connection from the 'from' node of 'conn_to_split' to the new node
            innovation2 is for the connection from the new node to the 'to' node of 'conn_to_split'
        """
        with self._lock:
            key = conn_to_split.innovation
            if key not in self._split_IDs:
                new_node_id = next(self._next_node_id)
                innov1      = self._innovation_number(conn_to_split.node_in, new_node_id)
                innov2      = self._innovation_number(new_node_id, conn_to_split.node_out)
                self._split_IDs[key] = (new_node_id, innov1, innov2)
            return self._split_IDs[key]
