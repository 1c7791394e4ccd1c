"""
scalar_aad configuration.

Numeric thresholds used by the operation builders and the gradient
diagnostics live here. No hardcoded values in the rest of the package.
"""

import math
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass
class AADConfig:
    """Tunable thresholds for domain checks and gradient diagnostics."""

    # |divisor| below this is treated as division by zero
    div_epsilon: float = 1e-10

    # Gradient health report
    exploding_threshold: float = 1e3
    vanishing_threshold: float = 1e-3

    def __post_init__(self):
        for name in ("div_epsilon", "exploding_threshold", "vanishing_threshold"):
            val = getattr(self, name)
            if not isinstance(val, (int, float)) or not math.isfinite(val) or val <= 0:
                raise ValueError(f"{name} must be a positive finite number, got {val!r}")


_config: AADConfig = AADConfig()


def get_config() -> AADConfig:
    """Return the active configuration."""
    return _config


def set_config(config: Optional[AADConfig]) -> None:
    """Replace the active configuration (None restores the defaults)."""
    global _config
    _config = config if config is not None else AADConfig()


@contextmanager
def use_config(config: Optional[AADConfig] = None) -> Iterator[AADConfig]:
    """
    Temporarily switch the active configuration:
        with use_config(AADConfig(div_epsilon=1e-6)):
            ... build computation ...
    """
    global _config
    prev = _config
    try:
        _config = config if config is not None else AADConfig()
        yield _config
    finally:
        _config = prev
