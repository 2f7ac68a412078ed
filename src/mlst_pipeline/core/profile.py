#!/usr/bin/env python3
"""
Allelic profile construction for MLST pipeline.
"""

from typing import Callable, List, Optional, Sequence, Tuple

from loguru import logger

from ..exceptions import AmbiguityError
from ..models import AllelicProfile, Locus, LocusMatch, RunContext
from .matcher import LocusMatcher


class ProfileBuilder:
    """Build an allelic profile by matching every configured locus in order."""

    def __init__(self, loci: Sequence[Locus], fast: bool = False):
        """
        Initialize builder.

        Args:
            loci: Loci in configured order. This order must be the column
                order of the ST profile table.
            fast: Stop each locus search at its first matching allele
        """
        self.loci = tuple(loci)
        self.matcher = LocusMatcher(fast=fast)

    def build_profile(
        self,
        reference_sequence: str,
        context: Optional[RunContext] = None,
        on_match: Optional[Callable[[LocusMatch], None]] = None
    ) -> Tuple[AllelicProfile, List[str]]:
        """
        Build the allelic profile of a reference sequence.

        Args:
            reference_sequence: Concatenated reference sequence
            context: Run context that collects warnings and notes
            on_match: Called with each locus result as soon as it is known,
                including an ambiguous one before AmbiguityError is raised

        Returns:
            Tuple of (profile, warnings raised for this reference)

        Raises:
            AmbiguityError: If two alleles of the same locus are found
        """
        matches: List[LocusMatch] = []
        warnings: List[str] = []

        for locus in self.loci:
            match = self.matcher.match_locus(reference_sequence, locus)
            if on_match is not None:
                on_match(match)

            if match.ambiguous:
                first, second = match.hits[0], match.hits[1]
                raise AmbiguityError(
                    f"Reference already has allele {first.allele.identifier} "
                    f"(position {first.position}) when {second.allele.identifier} "
                    f"was found at position {second.position}",
                    locus=locus.name,
                    candidates=[hit.allele.identifier for hit in match.hits]
                )

            if not match.matched:
                message = f"No matches were found for any of the alleles belonging to {locus.name}"
                logger.warning(message)
                warnings.append(message)
                if context is not None:
                    context.warn(message)
            else:
                hit = match.hit
                logger.info(f"Found {hit.allele.identifier} sequence at position {hit.position} of reference")
                if hit.reversed:
                    message = f"Match for {hit.allele.identifier} was found on the reverse complement"
                    logger.info(f"NOTE: {message}")
                    if context is not None:
                        context.note(message)

            matches.append(match)

        profile = AllelicProfile(matches=tuple(matches))
        logger.info(f"Final allele id sequence: {profile}")
        return profile, warnings


def build_profile(
    reference_sequence: str,
    ordered_loci: Sequence[Locus],
    fast: bool = False,
    context: Optional[RunContext] = None
) -> Tuple[AllelicProfile, List[str]]:
    """Build the allelic profile of a reference sequence."""
    return ProfileBuilder(ordered_loci, fast=fast).build_profile(reference_sequence, context)
