#!/usr/bin/env python3
"""
ST resolution module for MLST pipeline.

Looks up an allelic profile in the ST profile table. A complete profile must
resolve to at most one ST; a partial profile reports every compatible ST.
"""

from typing import List, Optional, Sequence

from loguru import logger

from ..exceptions import AmbiguityError
from ..models import AllelicProfile, RunContext, STProfile, STProfileTable, STResolution


PARTIAL_LOOKUP_WARNING = "One or more loci were not found; reporting all possible ST types"


def profile_matches(pattern: Sequence[Optional[int]], alleles: Sequence[int]) -> bool:
    """
    Test an ST row against a profile pattern.

    None in the pattern matches any single allele number. The number of
    positions must be equal.
    """
    if len(pattern) != len(alleles):
        return False
    return all(
        expected is None or expected == actual
        for expected, actual in zip(pattern, alleles)
    )


class STResolver:
    """Resolve allelic profiles against an ST profile table."""

    def __init__(self, table: STProfileTable, fast: bool = False):
        """
        Initialize resolver.

        Args:
            table: Merged ST profile table
            fast: Stop at the first matching row for complete profiles
        """
        self.table = table
        self.fast = fast

    def resolve(
        self,
        profile: AllelicProfile,
        context: Optional[RunContext] = None
    ) -> STResolution:
        """
        Find the ST rows matching a profile.

        Args:
            profile: Allelic profile of one reference
            context: Run context that collects warnings

        Returns:
            STResolution with zero, one or (partial profiles only) several rows

        Raises:
            AmbiguityError: If a complete profile matches more than one row
        """
        pattern = profile.entries
        complete = profile.complete
        matches: List[STProfile] = []

        if not complete:
            logger.warning(PARTIAL_LOOKUP_WARNING)
            if context is not None:
                context.warn(PARTIAL_LOOKUP_WARNING)

        logger.debug(f"Looking up ST type with pattern {profile}")

        for row in self.table:
            if not profile_matches(pattern, row.alleles):
                continue

            if matches and complete:
                raise AmbiguityError(
                    f"Multiple matches against ST table data: matched {row.st} "
                    f"when {matches[0].st} had already been matched",
                    candidates=[matches[0].st, row.st]
                )

            logger.info(f"Found matching ST type, for ST type id {row.st}")
            matches.append(row)

            if self.fast and complete:
                break

        if not matches:
            logger.info(f"No matching ST type found for allele id sequence {profile}")
        elif not complete and len(matches) > 1:
            logger.info(
                f"Partial profile {profile} is compatible with {len(matches)} ST types: "
                f"{', '.join(str(row.st) for row in matches)}"
            )

        return STResolution(profile=profile, matches=tuple(matches))


def resolve(
    profile: AllelicProfile,
    st_table: STProfileTable,
    early_stop: bool = False,
    context: Optional[RunContext] = None
) -> STResolution:
    """Resolve a profile against an ST profile table."""
    return STResolver(st_table, fast=early_stop).resolve(profile, context)
