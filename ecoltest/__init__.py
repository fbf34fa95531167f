"""ecoltest: community diversity synthesis and testing.

Generates pseudo-random community samples with a prescribed Shannon
diversity index and compares the Shannon diversity of two samples with
Hutcheson's t-test.

Modules:
    base          -- InvalidArgumentError and synthesis result types
    config        -- SynthesisConfig defaults
    diversity     -- Shannon index, relative abundance, maximum entropy
    community     -- Local-search community synthesizer
    hutcheson     -- Hutcheson t-test for two Shannon indices (Hutcheson 1970)
    output_schema -- JSON envelopes for results
"""

from ecoltest.base import (
    CommunitySample,
    ConvergenceFailure,
    InvalidArgumentError,
    SynthesisResult,
)
from ecoltest.config import SynthesisConfig
from ecoltest.diversity import entropy, max_shannon_index, relative_abundance, shannon_index
from ecoltest.community import (
    CommunitySynthesizer,
    synthesize_communities,
    synthesize_community,
)
from ecoltest.hutcheson import HutchesonResult, hutcheson_t_test
from ecoltest.output_schema import NumpyEncoder, community_to_dict, hutcheson_to_dict, validate_output

__version__ = "0.1.0"

__all__ = [
    "CommunitySample",
    "ConvergenceFailure",
    "InvalidArgumentError",
    "SynthesisResult",
    "SynthesisConfig",
    "entropy",
    "max_shannon_index",
    "relative_abundance",
    "shannon_index",
    "CommunitySynthesizer",
    "synthesize_communities",
    "synthesize_community",
    "HutchesonResult",
    "hutcheson_t_test",
    "NumpyEncoder",
    "community_to_dict",
    "hutcheson_to_dict",
    "validate_output",
]
