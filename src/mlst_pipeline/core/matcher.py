#!/usr/bin/env python3
"""
Locus matching module for MLST pipeline.

This module finds which allele of a locus occurs in a reference sequence,
on either strand, using exact substring search.
"""

from typing import List, Optional

from loguru import logger

from ..models import AlleleHit, Locus, LocusMatch, Orientation


# IUPAC nucleotide codes, including degenerate bases, upper and lower case
_COMPLEMENT_TABLE = str.maketrans(
    "ABCDGHKMNRSTUVWXYabcdghkmnrstuvwxy",
    "TVGHCDMKNYSAABWXRtvghcdmknysaabwxr"
)


def reverse_complement(sequence: str) -> str:
    """Get reverse complement of a nucleotide sequence."""
    return sequence.translate(_COMPLEMENT_TABLE)[::-1]


class LocusMatcher:
    """Exact allele search for a single locus."""

    def __init__(self, fast: bool = False):
        """
        Initialize matcher.

        Args:
            fast: Stop after the first matching allele. Duplicate alleles
                within a locus can then no longer be detected.
        """
        self.fast = fast

    def find_allele(self, reference_sequence: str, allele) -> Optional[AlleleHit]:
        """
        Search one allele on both strands.

        The forward strand is tested first, so a palindromic allele is
        reported as a forward match.
        """
        position = reference_sequence.find(allele.sequence)
        if position >= 0:
            return AlleleHit(allele, Orientation.FORWARD, position)

        position = reference_sequence.find(reverse_complement(allele.sequence))
        if position >= 0:
            return AlleleHit(allele, Orientation.REVERSE, position)

        return None

    def match_locus(self, reference_sequence: str, locus: Locus) -> LocusMatch:
        """
        Find the allele(s) of a locus present in a reference sequence.

        Args:
            reference_sequence: Concatenated reference sequence
            locus: Locus with its alleles in load order

        Returns:
            LocusMatch with zero hits (no match), one hit, or two hits when a
            second allele was found (ambiguous; the search stops there)
        """
        hits: List[AlleleHit] = []

        for allele in locus.alleles:
            logger.debug(f"Looking for {allele.identifier} in sequence")
            hit = self.find_allele(reference_sequence, allele)
            if hit is None:
                continue

            logger.debug(
                f"Found {allele.identifier} ({hit.orientation.value}) at position {hit.position}"
            )
            hits.append(hit)

            if len(hits) > 1 or self.fast:
                break

        return LocusMatch(locus=locus.name, hits=tuple(hits))


def match_locus(reference_sequence: str, locus: Locus, fast: bool = False) -> LocusMatch:
    """Match one locus against a reference sequence."""
    return LocusMatcher(fast=fast).match_locus(reference_sequence, locus)
