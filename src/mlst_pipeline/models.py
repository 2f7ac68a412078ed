"""Data models for MLST pipeline."""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from .exceptions import FormatError


ALLELE_ID_PATTERN = re.compile(r"(.+?)([0-9]+)$")

WILDCARD = "*"


class Orientation(Enum):
    """Strand on which an allele was found."""
    FORWARD = "forward"
    REVERSE = "reverse"


@dataclass(frozen=True)
class Allele:
    """Known sequence variant of a locus."""

    identifier: str
    sequence: str
    locus_name: str
    number: int

    @classmethod
    def from_identifier(cls, identifier: str, sequence: str) -> "Allele":
        """
        Create an allele, splitting its identifier into locus prefix and number.

        Args:
            identifier: Allele identifier such as ``arcc123`` or ``arcC_12``
            sequence: Allele nucleotide sequence

        Raises:
            FormatError: If the identifier has no trailing digits
        """
        match = ALLELE_ID_PATTERN.match(identifier)
        if not match:
            raise FormatError(f"Cannot determine allele id number from {identifier}")

        prefix, number = match.groups()
        locus_name = prefix.rstrip("_-") or prefix
        return cls(
            identifier=identifier,
            sequence=sequence,
            locus_name=locus_name,
            number=int(number)
        )

    def __len__(self) -> int:
        return len(self.sequence)


@dataclass(frozen=True)
class Locus:
    """Marker gene fragment with its alleles in load order."""

    name: str
    position: int
    alleles: Tuple[Allele, ...]
    source: Optional[Path] = None

    def __len__(self) -> int:
        return len(self.alleles)

    def __iter__(self) -> Iterator[Allele]:
        return iter(self.alleles)

    def get_allele(self, identifier: str) -> Allele | None:
        """Get allele by identifier."""
        for allele in self.alleles:
            if allele.identifier == identifier:
                return allele
        return None


@dataclass(frozen=True)
class ReferenceGenome:
    """Isolate sequence to be typed."""

    identifier: str
    sequence: str
    source: Optional[Path] = None
    record_count: int = 1

    @property
    def length(self) -> int:
        """Get sequence length."""
        return len(self.sequence)


@dataclass(frozen=True)
class AlleleHit:
    """Exact occurrence of one allele in a reference sequence."""

    allele: Allele
    orientation: Orientation
    position: int  # 0-based first occurrence

    @property
    def reversed(self) -> bool:
        return self.orientation is Orientation.REVERSE

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return {
            'allele': self.allele.identifier,
            'number': self.allele.number,
            'orientation': self.orientation.value,
            'position': self.position,
        }


@dataclass(frozen=True)
class LocusMatch:
    """Outcome of searching one locus against one reference."""

    locus: str
    hits: Tuple[AlleleHit, ...] = ()

    @property
    def matched(self) -> bool:
        return len(self.hits) > 0

    @property
    def ambiguous(self) -> bool:
        """More than one allele of the locus was found."""
        return len(self.hits) > 1

    @property
    def hit(self) -> AlleleHit | None:
        return self.hits[0] if self.hits else None

    @property
    def allele_number(self) -> Optional[int]:
        return self.hits[0].allele.number if self.hits else None

    @property
    def orientation(self) -> Optional[Orientation]:
        return self.hits[0].orientation if self.hits else None

    @property
    def position(self) -> Optional[int]:
        return self.hits[0].position if self.hits else None


@dataclass(frozen=True)
class AllelicProfile:
    """Ordered allele numbers found in one reference, one entry per locus."""

    matches: Tuple[LocusMatch, ...]

    @property
    def loci(self) -> Tuple[str, ...]:
        return tuple(match.locus for match in self.matches)

    @property
    def entries(self) -> Tuple[Optional[int], ...]:
        """Allele number per locus, None where the locus is a wildcard."""
        return tuple(match.allele_number for match in self.matches)

    @property
    def complete(self) -> bool:
        return all(match.matched for match in self.matches)

    @property
    def missing_loci(self) -> List[str]:
        return [match.locus for match in self.matches if not match.matched]

    @property
    def reverse_loci(self) -> List[str]:
        return [
            match.locus for match in self.matches
            if match.orientation is Orientation.REVERSE
        ]

    def __len__(self) -> int:
        return len(self.matches)

    def __str__(self) -> str:
        return " ".join(
            WILDCARD if entry is None else str(entry) for entry in self.entries
        )

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return {
            match.locus: match.allele_number for match in self.matches
        }


@dataclass(frozen=True)
class STProfile:
    """One row of an ST profile table."""

    st: int
    alleles: Tuple[int, ...]
    source: Optional[Path] = None
    line_number: Optional[int] = None

    def __str__(self) -> str:
        return " ".join(str(value) for value in (self.st,) + self.alleles)

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        data = asdict(self)
        data['source'] = str(self.source) if self.source is not None else None
        return data


class STProfileTable:
    """ST profile rows in load order, indexed by ST identifier."""

    def __init__(self):
        self._rows: List[STProfile] = []
        self._index: Dict[int, STProfile] = {}

    def add(self, row: STProfile) -> bool:
        """
        Add a row to the table.

        Returns:
            True if the ST id is new, False if it duplicates an identical row

        Raises:
            FormatError: If the ST id already exists with different alleles
        """
        existing = self._index.get(row.st)
        if existing is None:
            self._rows.append(row)
            self._index[row.st] = row
            return True

        if existing.alleles != row.alleles:
            raise FormatError(
                f"ST type definitions do not match for ST {row.st}: "
                f"'{existing}' (from {existing.source}) vs '{row}'",
                file_path=str(row.source) if row.source else None,
                line_number=row.line_number
            )
        return False

    def get(self, st: int) -> STProfile | None:
        """Get row by ST identifier."""
        return self._index.get(st)

    def __contains__(self, st: int) -> bool:
        return st in self._index

    def __iter__(self) -> Iterator[STProfile]:
        return iter(self._rows)

    def __len__(self) -> int:
        return len(self._rows)


@dataclass(frozen=True)
class STResolution:
    """ST rows matching an allelic profile."""

    profile: AllelicProfile
    matches: Tuple[STProfile, ...] = ()

    @property
    def st_ids(self) -> List[int]:
        return [row.st for row in self.matches]

    @property
    def partial(self) -> bool:
        return not self.profile.complete

    @property
    def assigned_st(self) -> Optional[int]:
        """ST of a complete profile with exactly one match."""
        if self.profile.complete and len(self.matches) == 1:
            return self.matches[0].st
        return None

    @property
    def status(self) -> str:
        if not self.matches:
            return "none"
        return "partial" if self.partial else "assigned"


@dataclass
class RunContext:
    """Warnings and notes accumulated over one run."""

    warnings: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def note(self, message: str) -> None:
        self.notes.append(message)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    @property
    def note_count(self) -> int:
        return len(self.notes)
