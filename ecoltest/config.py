"""Configuration dataclasses for community synthesis."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class SynthesisConfig:
    """Defaults for the community synthesizer.

    Any field can be overridden per call on ``CommunitySynthesizer.synthesize``.
    """

    shannon_base: float = math.e
    # Maximum |H - target| accepted as converged.
    tolerance: float = 1e-4
    max_iterations: int = 100
    quiet: bool = False
    # Fraction of the donor's share moved in one transfer.
    step_size: float = 0.1
