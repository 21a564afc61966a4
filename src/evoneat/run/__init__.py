"""
NEAT Run Package

Exported:
    Config:         Hyperparameter settings for a run
    ConfigError:    Raised when a configuration cannot be loaded
    Evolution:      The engine driving a complete run
    EvaluationFunc: Type of the evaluation function
"""

from evoneat.run.config    import Config, ConfigError
from evoneat.run.evolution import EvaluationFunc, Evolution

__all__ = ['Config', 'ConfigError', 'EvaluationFunc', 'Evolution']
