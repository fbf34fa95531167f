"""JSON envelopes for synthesis and test results.

Schema structure for a synthesized community::

    {
        "schema_version": "1.0",
        "kind": "community",
        "converged": bool,
        "species_count": int,
        "total_individuals": int,
        "community": [int, ...] | null,
        "iterations": int | null,
        "proportions": [float, ...] | null,
    }

A failed synthesis keeps the envelope but sets the three payload keys to
null. Hutcheson results use ``kind = "hutcheson_t_test"`` and carry the
fields of ``HutchesonResult.to_dict()``.

Usage::

    from ecoltest.output_schema import community_to_dict, validate_output

    d = community_to_dict(result, species_count=20, total_individuals=200)
    errors = validate_output(d)
"""
from __future__ import annotations

import json

import numpy as np

from ecoltest.base import SynthesisResult
from ecoltest.hutcheson import HutchesonResult

SCHEMA_VERSION = "1.0"


class NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy types."""

    def default(self, obj):
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, (np.integer,)):
            return int(obj)
        if isinstance(obj, (np.floating,)):
            return float(obj)
        if isinstance(obj, (np.bool_,)):
            return bool(obj)
        return super().default(obj)


def community_to_dict(
    result: SynthesisResult,
    species_count: int,
    total_individuals: int,
) -> dict:
    """Convert a synthesis result to the community envelope."""
    if result.converged:
        community = [int(v) for v in result.community]
        proportions = [float(v) for v in result.proportions]
        iterations = int(result.iterations)
    else:
        community = None
        proportions = None
        iterations = None

    return {
        "schema_version": SCHEMA_VERSION,
        "kind": "community",
        "converged": bool(result.converged),
        "species_count": int(species_count),
        "total_individuals": int(total_individuals),
        "community": community,
        "iterations": iterations,
        "proportions": proportions,
    }


def hutcheson_to_dict(result: HutchesonResult) -> dict:
    """Convert a Hutcheson t-test result to its envelope."""
    d = {"schema_version": SCHEMA_VERSION, "kind": "hutcheson_t_test"}
    d.update(result.to_dict())
    return d


def to_json(d: dict, **kwargs) -> str:
    """Serialize an envelope (or any dict holding numpy values) to JSON."""
    return json.dumps(d, cls=NumpyEncoder, **kwargs)


def validate_output(d: dict) -> list[str]:
    """Validate a community envelope.

    Returns a list of error messages. Empty list = valid.
    """
    errors = []

    for key in ["schema_version", "kind", "converged", "species_count",
                "total_individuals", "community", "iterations", "proportions"]:
        if key not in d:
            errors.append(f"Missing required key: {key}")

    if errors:
        return errors  # can't validate further

    if d["kind"] != "community":
        errors.append(f"Unexpected kind: {d['kind']}")

    payload = [d["community"], d["iterations"], d["proportions"]]
    if not d["converged"]:
        if any(v is not None for v in payload):
            errors.append("Failed synthesis must not carry community, iterations or proportions")
        return errors

    if any(v is None for v in payload):
        errors.append("Converged synthesis must carry community, iterations and proportions")
        return errors

    if len(d["community"]) != d["species_count"]:
        errors.append(
            f"species_count mismatch: envelope says {d['species_count']}, "
            f"community has {len(d['community'])} entries"
        )
    if len(d["proportions"]) != len(d["community"]):
        errors.append(
            f"Length mismatch: community has {len(d['community'])} entries, "
            f"proportions has {len(d['proportions'])}"
        )
    if any(v < 0 for v in d["community"]):
        errors.append("community contains negative abundances")
    if abs(sum(d["proportions"]) - 1.0) > 1e-9:
        errors.append(f"proportions sum to {sum(d['proportions'])}, expected 1.0")
    if d["iterations"] < 0:
        errors.append(f"iterations must be non-negative, got {d['iterations']}")

    return errors
