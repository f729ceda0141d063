"""
Gradient descent hyperparameters and how they are loaded.
"""

import json
import logging
import numbers
from dataclasses import asdict, dataclass, fields, replace

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/train_config.json"

MAX_ITERATIONS = 1000
LEARNING_RATE = 0.01
TOLERANCE = 1e-6


@dataclass(frozen=True)
class GradientDescentConfig:
    """Batch gradient descent settings.

    Attributes:
        max_iterations: Upper bound on the number of update steps.
        learning_rate: Step size applied to the parameter gradient.
        tolerance: Training stops once every per-sample gradient is below this.
    """

    max_iterations: int = MAX_ITERATIONS
    learning_rate: float = LEARNING_RATE
    tolerance: float = TOLERANCE

    def __post_init__(self) -> None:
        if isinstance(self.max_iterations, bool) or not isinstance(self.max_iterations, numbers.Integral):
            raise ValueError("max_iterations must be a whole number.")
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be at least 1.")
        if not self.learning_rate > 0:
            raise ValueError("learning_rate must be positive.")
        if not self.tolerance >= 0:
            raise ValueError("tolerance must not be negative.")

    def override(self, **changes) -> "GradientDescentConfig":
        """Return a copy with every non-None value in ``changes`` applied."""
        changes = {key: value for key, value in changes.items() if value is not None}
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return asdict(self)


def config_from_dict(data: dict) -> GradientDescentConfig:
    known = {field.name for field in fields(GradientDescentConfig)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")
    return GradientDescentConfig(
        max_iterations=data.get("max_iterations", MAX_ITERATIONS),
        learning_rate=float(data.get("learning_rate", LEARNING_RATE)),
        tolerance=float(data.get("tolerance", TOLERANCE)),
    )


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> GradientDescentConfig:
    with open(config_path, "r", encoding="utf-8") as handle:
        data = json.load(handle)
    config = config_from_dict(data)
    logger.debug("Loaded %s from %s", config, config_path)
    return config
