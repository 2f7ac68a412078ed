"""Core processing modules for MLST Pipeline."""

from .parser import AlleleFileParser, STTableParser, ReferenceParser
from .matcher import LocusMatcher, match_locus, reverse_complement
from .profile import ProfileBuilder, build_profile
from .resolver import STResolver, profile_matches, resolve

__all__ = [
    "AlleleFileParser",
    "STTableParser",
    "ReferenceParser",
    "LocusMatcher",
    "match_locus",
    "reverse_complement",
    "ProfileBuilder",
    "build_profile",
    "STResolver",
    "profile_matches",
    "resolve"
]
