"""Pseudo-random community samples with a prescribed Shannon diversity index.

Generates a species abundance vector with a given number of species and
total individuals whose Shannon index H' is within a tolerance of a target
value.

Method:
    1. Draw S relative abundances uniformly in [0, 1/S) and shift every
       entry by (1 - sum)/S so the vector lies on the simplex.
    2. Repeat until |H'(p) - target| <= tolerance:
         a. Pick a donor species at random among those that keep more than
            one individual after giving away ``step_size`` of their share
            (if none qualifies, the last species examined is used).
         b. Visit the other species in random order and move
            ``step_size * p[donor]`` from the donor to the first recipient
            that strictly reduces |H'(p) - target|.
       Give up once the iteration counter exceeds ``max_iterations``.
    3. Scale the converged vector by the total and round to integers.

Every transfer moves mass between two entries, so the vector sums to 1
throughout. All randomness comes from one numpy Generator, so a fixed seed
reproduces the same community and iteration count.

Example:
    result = synthesize_community(2.7, species_count=20,
                                  total_individuals=200,
                                  max_iterations=300, seed=26)
    if result.converged:
        print(result.community, result.iterations)
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace

import numpy as np

from ecoltest.base import (
    CommunitySample,
    ConvergenceFailure,
    InvalidArgumentError,
    SynthesisResult,
)
from ecoltest.config import SynthesisConfig
from ecoltest.diversity import check_base, entropy, max_shannon_index

logger = logging.getLogger(__name__)


def initial_community(species_count: int, rng: np.random.Generator) -> np.ndarray:
    """Random starting point on the simplex, near the uniform distribution.

    Args:
        species_count: Number of species (S).
        rng: numpy random generator instance.

    Returns:
        Array of shape (S,) with positive entries summing to 1.
    """
    share = 1.0 / species_count
    community = rng.uniform(0.0, share, species_count)
    return community + (1.0 - community.sum()) * share


def community_cost(community: np.ndarray, target_h: float, base: float) -> float:
    """Absolute gap between the community's H' and the target."""
    return abs(target_h - entropy(community, base))


def choose_donor(
    community: np.ndarray,
    total_individuals: int,
    step_size: float,
    rng: np.random.Generator,
) -> int:
    """Pick the species that gives up abundance in the next transfer.

    Species are examined in random order and the first one that still holds
    more than one individual after the transfer is returned. When no species
    qualifies, the last one examined is returned.
    """
    for donor in rng.permutation(community.shape[0]):
        if (community[donor] - community[donor] * step_size) * total_individuals > 1:
            return int(donor)
    return int(donor)


def transfer(
    community: np.ndarray,
    donor: int,
    recipient: int,
    step_size: float,
) -> np.ndarray:
    """Copy of ``community`` with ``step_size`` of the donor's share moved."""
    amount = community[donor] * step_size
    candidate = community.copy()
    candidate[recipient] += amount
    candidate[donor] -= amount
    return candidate


def _as_int(name: str, value) -> int:
    try:
        as_int = int(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}") from None
    if isinstance(value, bool) or as_int != value:
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")
    return as_int


class CommunitySynthesizer:
    """Local-search generator of communities with a target Shannon index.

    Args:
        config: Default settings. Individual fields can be overridden per
            call on ``synthesize`` and ``synthesize_many``.

    Example:
        synth = CommunitySynthesizer(SynthesisConfig(max_iterations=300))
        result = synth.synthesize(2.0, species_count=20,
                                  total_individuals=200, seed=1)
    """

    def __init__(self, config: SynthesisConfig | None = None):
        self.config = config if config is not None else SynthesisConfig()

    def _resolve(self, **overrides) -> SynthesisConfig:
        overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self.config, **overrides)

    def validate(
        self,
        target_h: float,
        species_count: int,
        total_individuals: int,
        config: SynthesisConfig,
    ) -> tuple[float, int, int]:
        """Check every argument, returning normalized (target, S, total).

        Raises:
            InvalidArgumentError: On the first argument out of its domain.
        """
        species_count = _as_int("species_count", species_count)
        if species_count < 2:
            raise InvalidArgumentError(
                f"species number must exceed 1, got {species_count}"
            )
        base = check_base(config.shannon_base)

        target_h = float(target_h)
        if not np.isfinite(target_h):
            raise InvalidArgumentError(f"target must be a finite number, got {target_h}")
        h_max = max_shannon_index(species_count, base)
        if target_h > h_max:
            raise InvalidArgumentError(
                "impossible community: target exceeds maximum entropy for this "
                f"species count ({target_h} > log({species_count}) = {h_max})"
            )
        if target_h < 0.0:
            raise InvalidArgumentError(f"target must be non-negative, got {target_h}")

        total_individuals = _as_int("total_individuals", total_individuals)
        if total_individuals < 1:
            raise InvalidArgumentError(
                f"total_individuals must be positive, got {total_individuals}"
            )
        if not config.tolerance > 0.0:
            raise InvalidArgumentError(
                f"tolerance must be positive, got {config.tolerance}"
            )
        if _as_int("max_iterations", config.max_iterations) < 0:
            raise InvalidArgumentError(
                f"max_iterations must be non-negative, got {config.max_iterations}"
            )
        if not 0.0 < config.step_size < 1.0:
            raise InvalidArgumentError(
                f"step_size must be in (0, 1), got {config.step_size}"
            )
        return target_h, species_count, total_individuals

    def synthesize(
        self,
        target_h: float,
        species_count: int,
        total_individuals: int,
        *,
        shannon_base: float | None = None,
        tolerance: float | None = None,
        max_iterations: int | None = None,
        quiet: bool | None = None,
        seed=None,
    ) -> SynthesisResult:
        """Generate one community with H' within tolerance of ``target_h``.

        Args:
            target_h: Target Shannon index, 0 <= target_h <= log_base(S).
            species_count: Number of species S (>= 2).
            total_individuals: Total individuals to allocate.
            shannon_base: Logarithm base of the index.
            tolerance: Maximum accepted |H' - target_h|.
            max_iterations: Iteration budget.
            quiet: Suppress the convergence status log record.
            seed: Anything ``np.random.default_rng`` accepts, including an
                existing Generator (used as-is).

        Returns:
            CommunitySample on convergence, ConvergenceFailure otherwise.

        Raises:
            InvalidArgumentError: Before any random draw, if an argument is
                invalid.
        """
        config = self._resolve(
            shannon_base=shannon_base,
            tolerance=tolerance,
            max_iterations=max_iterations,
            quiet=quiet,
        )
        target_h, species_count, total_individuals = self.validate(
            target_h, species_count, total_individuals, config
        )
        rng = np.random.default_rng(seed)
        return self._search(target_h, species_count, total_individuals, config, rng)

    def _search(
        self,
        target_h: float,
        species_count: int,
        total_individuals: int,
        config: SynthesisConfig,
        rng: np.random.Generator,
    ) -> SynthesisResult:
        base = float(config.shannon_base)
        step = config.step_size

        community = initial_community(species_count, rng)
        cost = community_cost(community, target_h, base)
        iteration = 0

        while cost > config.tolerance:
            if iteration > config.max_iterations:
                if not config.quiet:
                    logger.warning("Convergence failed after %d iterations", iteration)
                return ConvergenceFailure()

            donor = choose_donor(community, total_individuals, step, rng)
            recipients = np.delete(np.arange(species_count), donor)
            for recipient in rng.permutation(recipients):
                candidate = transfer(community, donor, int(recipient), step)
                candidate_cost = community_cost(candidate, target_h, base)
                if candidate_cost < cost:
                    community, cost = candidate, candidate_cost
                    break

            iteration += 1
            logger.debug("iteration %d: donor=%d gap=%.6g", iteration, donor, cost)

        if not config.quiet:
            logger.info("Convergence successful, iterations = %d", iteration)
        return CommunitySample(
            community=np.rint(community * total_individuals).astype(np.int64),
            iterations=iteration,
            proportions=community,
        )

    def synthesize_many(
        self,
        n_samples: int,
        target_h: float,
        species_count: int,
        total_individuals: int,
        *,
        shannon_base: float | None = None,
        tolerance: float | None = None,
        max_iterations: int | None = None,
        quiet: bool | None = None,
        seed: int | np.random.SeedSequence | None = None,
    ) -> list[SynthesisResult]:
        """Generate ``n_samples`` independent communities.

        Each sample draws from its own child of one SeedSequence, so the
        samples are independent and the whole batch is reproducible from
        ``seed``. Arguments are validated once, before any stream is spawned.
        """
        n_samples = _as_int("n_samples", n_samples)
        if n_samples < 0:
            raise InvalidArgumentError(f"n_samples must be non-negative, got {n_samples}")
        config = self._resolve(
            shannon_base=shannon_base,
            tolerance=tolerance,
            max_iterations=max_iterations,
            quiet=quiet,
        )
        target_h, species_count, total_individuals = self.validate(
            target_h, species_count, total_individuals, config
        )

        if not isinstance(seed, np.random.SeedSequence):
            seed = np.random.SeedSequence(seed)
        results = []
        for child in seed.spawn(n_samples):
            rng = np.random.default_rng(child)
            results.append(
                self._search(target_h, species_count, total_individuals, config, rng)
            )
        return results


def synthesize_community(
    target_h: float,
    species_count: int,
    total_individuals: int,
    shannon_base: float = math.e,
    tolerance: float = 1e-4,
    max_iterations: int = 100,
    quiet: bool = False,
    seed=None,
) -> SynthesisResult:
    """Generate a community sample with a given Shannon diversity index.

    Convenience wrapper around ``CommunitySynthesizer.synthesize``. See that
    method for the arguments.

    Example:
        result = synthesize_community(2.0, 20, 200, max_iterations=300, seed=7)
        result.community   # integer abundances, or None on failure
        result.iterations  # iterations used, or None on failure
    """
    config = SynthesisConfig(
        shannon_base=shannon_base,
        tolerance=tolerance,
        max_iterations=max_iterations,
        quiet=quiet,
    )
    return CommunitySynthesizer(config).synthesize(
        target_h, species_count, total_individuals, seed=seed
    )


def synthesize_communities(
    n_samples: int,
    target_h: float,
    species_count: int,
    total_individuals: int,
    shannon_base: float = math.e,
    tolerance: float = 1e-4,
    max_iterations: int = 100,
    quiet: bool = False,
    seed: int | np.random.SeedSequence | None = None,
) -> list[SynthesisResult]:
    """Generate several independent community samples (one seed stream each)."""
    config = SynthesisConfig(
        shannon_base=shannon_base,
        tolerance=tolerance,
        max_iterations=max_iterations,
        quiet=quiet,
    )
    return CommunitySynthesizer(config).synthesize_many(
        n_samples, target_h, species_count, total_individuals, seed=seed
    )
