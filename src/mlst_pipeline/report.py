#!/usr/bin/env python3
"""
Report writers for MLST pipeline.

One report per reference file plus an optional tab-separated summary of the
whole run.
"""

from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from .exceptions import PipelineError
from .models import AllelicProfile, LocusMatch, ReferenceGenome, STResolution


class ReferenceReport:
    """Per-reference typing report, written as results come in."""

    def __init__(
        self,
        reference_file: Path,
        output_dir: Optional[Path] = None,
        suffix: str = ".mlstar.out"
    ):
        """
        Initialize report.

        Args:
            reference_file: Reference file being typed
            output_dir: Directory for the report (default: beside the reference)
            suffix: Appended to the reference file name
        """
        reference_file = Path(reference_file)
        directory = Path(output_dir) if output_dir is not None else reference_file.parent
        self.path = directory / f"{reference_file.name}{suffix}"
        self._handle: Optional[TextIO] = None

    def __enter__(self) -> "ReferenceReport":
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = open(self.path, 'w')
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        if isinstance(exc_value, PipelineError):
            self.write(f"*** ERROR: {exc_value}")
        self._handle.close()
        self._handle = None

    def write(self, text: str = "") -> None:
        if self._handle is None:
            raise RuntimeError("Report is not open")
        self._handle.write(f"{text}\n")

    def write_reference(self, reference: ReferenceGenome) -> None:
        self.write(f"Reference genome id: {reference.identifier}")
        self.write()

    def write_locus_match(self, match: LocusMatch) -> None:
        """Write every hit of one locus, or the unmatched-locus warning."""
        if not match.matched:
            self.write()
            self.write(f"*** WARNING: No matches were found for any of the alleles belonging to {match.locus}!")
            self.write()
            return

        for hit in match.hits:
            self.write(f"Found {hit.allele.identifier} sequence at position {hit.position} of reference.")
            if hit.reversed:
                self.write("^^^NOTE: Match was found on the reverse complement of this allele sequence.")
                self.write()

    def write_profile(self, profile: AllelicProfile) -> None:
        """Write the final allele id sequence."""
        self.write()
        self.write(f"Final allele id sequence for this reference sequence: {profile}")

    def write_resolution(self, resolution: STResolution) -> None:
        if resolution.partial:
            self.write()
            self.write(
                "*** WARNING: One or more gene fragment alleles were not found. "
                "Showing all possible ST types."
            )

        if not resolution.matches:
            self.write("No matching ST type found.")
            return

        for st in resolution.st_ids:
            self.write(f"Matched ST type for this reference sequence: {st}")


class SummaryWriter:
    """Tab-separated summary with one row per reference."""

    def __init__(self, summary_file: Path, loci: Sequence[str]):
        self.summary_file = Path(summary_file)
        self.loci = list(loci)
        self.rows: List[List[str]] = []

    def add(self, reference: ReferenceGenome, resolution: STResolution) -> None:
        profile = resolution.profile
        alleles = ["*" if entry is None else str(entry) for entry in profile.entries]
        self.rows.append([
            str(reference.source) if reference.source is not None else "",
            reference.identifier,
            *alleles,
            ",".join(str(st) for st in resolution.st_ids) or "-",
            resolution.status,
        ])

    def write(self) -> Path:
        self.summary_file.parent.mkdir(parents=True, exist_ok=True)
        header = ["reference", "identifier", *self.loci, "ST", "status"]
        with open(self.summary_file, 'w') as f:
            f.write("\t".join(header) + "\n")
            for row in self.rows:
                f.write("\t".join(row) + "\n")
        return self.summary_file
