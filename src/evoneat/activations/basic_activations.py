import math

import numpy as np

def identity_activation(z):
    return z

def clamped_activation(z):
    return float(np.clip(z, -1.0, 1.0))

def relu_activation(z):
    return max(0.0, z)

def sigmoid_activation(z):
    K = 10
    Z = K * z
    Z = np.clip(Z, -100, 100)   # to prevent under/overflow when calculating exp
    return float(1.0 / (1.0 + np.exp(-Z)))

def tanh_activation(z):
    return math.tanh(z)

def sin_activation(z):
    return math.sin(z)

def abs_activation(z):
    return abs(z)

def gauss_activation(z):
    # Clip input so that z**2 cannot overflow
    z_clipped = float(np.clip(z, -3.4, 3.4))
    return math.exp(-5.0 * z_clipped ** 2)

def step_activation(z):
    return 1.0 if z > 0.0 else 0.0

activations = {
    "identity": identity_activation,
    "clamped" : clamped_activation,
    "relu"    : relu_activation,
    "sigmoid" : sigmoid_activation,
    "tanh"    : tanh_activation,
    "sin"     : sin_activation,
    "abs"     : abs_activation,
    "gauss"   : gauss_activation,
    "step"    : step_activation,
    }

# 3-letter identifiers for each activation function
activation_codes = {
    "identity": "IDN",
    "clamped" : "CLP",
    "relu"    : "RLU",
    "sigmoid" : "SIG",
    "tanh"    : "TNH",
    "sin"     : "SIN",
    "abs"     : "ABS",
    "gauss"   : "GSS",
    "step"    : "STP",
    }

def get_activation(name: str):
    """
    Look up an activation function by name.

    Raises:
        ValueError: if no activation function is registered under 'name'
    """
    try:
        return activations[name]
    except KeyError:
        raise ValueError(f"Unknown activation function '{name}'") from None
