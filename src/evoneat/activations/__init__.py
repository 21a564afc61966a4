"""
Activations Package

This package provides the scalar activation functions applied by neurons.

Exported:
    activations:      Dictionary mapping activation function names to functions
    activation_codes: Dictionary mapping activation function names to 3-letter codes
    get_activation:   Look up an activation function by name
    Individual activation functions: identity_activation, clamped_activation,
                                     relu_activation, sigmoid_activation, tanh_activation,
                                     sin_activation, abs_activation, gauss_activation,
                                     step_activation
"""

from evoneat.activations.basic_activations import (
    activations,
    activation_codes,
    get_activation,
    identity_activation,
    clamped_activation,
    relu_activation,
    sigmoid_activation,
    tanh_activation,
    sin_activation,
    abs_activation,
    gauss_activation,
    step_activation
)

__all__ = [
    'activations',
    'activation_codes',
    'get_activation',
    'identity_activation',
    'clamped_activation',
    'relu_activation',
    'sigmoid_activation',
    'tanh_activation',
    'sin_activation',
    'abs_activation',
    'gauss_activation',
    'step_activation'
]
