"""Pytest configuration and shared fixtures."""

import pytest
import sys
from pathlib import Path

import numpy as np

# Add the project root (for 'examples') and the source directory to the Python path
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir))
sys.path.insert(0, str(root_dir / "src"))


@pytest.fixture
def config():
    """A small, fully specified configuration built from defaults."""
    from evoneat.run.config import Config

    config = Config()
    config.num_inputs         = 2
    config.num_outputs        = 1
    config.output_activation  = 'identity'
    config.hidden_activation  = 'identity'
    config.num_generations    = 3
    config.population_size    = 20
    config.init_fitness       = 0.0
    config.minimize_fitness   = False
    config.survival_rate      = 0.5
    config.rate_perturb       = 0.8
    config.rate_add_node      = 0.2
    config.rate_add_conn      = 0.2
    config.distance_threshold = 3.0
    config.coeff_unmatching   = 1.0
    config.coeff_matching     = 0.4
    config.num_jobs           = 1
    return config


@pytest.fixture
def rng():
    """A seeded random number generator."""
    return np.random.default_rng(42)


@pytest.fixture
def tracker():
    """An innovation tracker for genomes with 2 inputs and 1 output."""
    from evoneat.genotype import InnovationTracker
    return InnovationTracker(first_node_id=3)
