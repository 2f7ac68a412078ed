"""MLST Pipeline.

Multi-locus sequence typing of reference genomes: exact detection of known
alleles on either strand, assembly of the allelic profile, and lookup of the
sequence type (ST) in one or more ST profile tables.
"""

__version__ = "1.1.0"

from .config import PipelineConfig
from .exceptions import PipelineError, FormatError, AmbiguityError, ConfigurationError
from .models import (
    Allele, Locus, ReferenceGenome, Orientation, AlleleHit, LocusMatch,
    AllelicProfile, STProfile, STProfileTable, STResolution, RunContext
)
from .core import (
    AlleleFileParser, STTableParser, ReferenceParser,
    LocusMatcher, match_locus, reverse_complement,
    ProfileBuilder, build_profile,
    STResolver, resolve
)
from .main import run_pipeline, process_reference

__all__ = [
    "__version__",
    "PipelineConfig",
    "PipelineError",
    "FormatError",
    "AmbiguityError",
    "ConfigurationError",
    "Allele",
    "Locus",
    "ReferenceGenome",
    "Orientation",
    "AlleleHit",
    "LocusMatch",
    "AllelicProfile",
    "STProfile",
    "STProfileTable",
    "STResolution",
    "RunContext",
    "AlleleFileParser",
    "STTableParser",
    "ReferenceParser",
    "LocusMatcher",
    "match_locus",
    "reverse_complement",
    "ProfileBuilder",
    "build_profile",
    "STResolver",
    "resolve",
    "run_pipeline",
    "process_reference"
]
