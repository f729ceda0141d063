"""
Minimal supervised learning: linear regression trained by batch gradient
descent, the mean squared error it minimises, and min-max feature scaling.
"""

from .config import GradientDescentConfig, load_config
from .errors import ClearMLError, DimensionMismatch, EmptyVector
from .linear_model import LinearModel, step
from .loss_functions import gradient_mse, mean_squared_error, parameter_gradient
from .preprocessing import MinMaxScaler, scale_min_max
from .validation import ValidationResult, ensure, equal_length, non_empty

__all__ = [
    "ClearMLError",
    "DimensionMismatch",
    "EmptyVector",
    "GradientDescentConfig",
    "LinearModel",
    "MinMaxScaler",
    "ValidationResult",
    "ensure",
    "equal_length",
    "gradient_mse",
    "load_config",
    "mean_squared_error",
    "non_empty",
    "parameter_gradient",
    "scale_min_max",
    "step",
]
