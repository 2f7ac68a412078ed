#!/usr/bin/env python3
"""
Shared fixtures for MLST pipeline tests.

Catalog used throughout:

    arcc1 ACGTACGT   arcc2 TTTTGGGG   arcc4 AATTCCGG (revcomp CCGGAATT)
    aroe1 GATTACAG   aroe2 GGGCCCAA
"""

import pytest
from pathlib import Path
from typing import Optional

from mlst_pipeline.models import (
    Allele, AlleleHit, AllelicProfile, Locus, LocusMatch, Orientation,
    STProfile, STProfileTable
)


ARCC_ALLELES = [
    ("arcc1", "ACGTACGT"),
    ("arcc2", "TTTTGGGG"),
    ("arcc4", "AATTCCGG"),
]

AROE_ALLELES = [
    ("aroe1", "GATTACAG"),
    ("aroe2", "GGGCCCAA"),
]

# arcc1 at 4, aroe1 at 16
REFERENCE_COMPLETE = "TTTTACGTACGTTTTTGATTACAGTTTT"
# arcc4 reverse complement at 4, aroe1 at 16
REFERENCE_REVERSE = "TTTTCCGGAATTTTTTGATTACAGTTTT"
# arcc1 only
REFERENCE_PARTIAL = "TTTTACGTACGTTTTT"
# arcc1 at 4 and arcc4 at 16
REFERENCE_AMBIGUOUS = "TTTTACGTACGTTTTTAATTCCGGTTTT"


def make_locus(name: str, alleles, position: int = 0) -> Locus:
    return Locus(
        name=name,
        position=position,
        alleles=tuple(Allele.from_identifier(identifier, seq) for identifier, seq in alleles)
    )


def write_fasta(path: Path, records) -> Path:
    with open(path, 'w') as f:
        for identifier, sequence in records:
            f.write(f">{identifier}\n")
            # Two lines per record to exercise line joining
            half = len(sequence) // 2
            f.write(f"{sequence[:half]}\n{sequence[half:]}\n")
    return path


@pytest.fixture
def arcc_locus():
    return make_locus("arcc", ARCC_ALLELES, 0)


@pytest.fixture
def aroe_locus():
    return make_locus("aroe", AROE_ALLELES, 1)


@pytest.fixture
def loci(arcc_locus, aroe_locus):
    return [arcc_locus, aroe_locus]


@pytest.fixture
def st_table():
    """ST 5 = (1, 1), ST 9 = (1, 2), ST 7 = (2, 3)."""
    table = STProfileTable()
    table.add(STProfile(5, (1, 1)))
    table.add(STProfile(9, (1, 2)))
    table.add(STProfile(7, (2, 3)))
    return table


@pytest.fixture
def make_profile():
    """Build an AllelicProfile from allele numbers, None meaning unmatched."""
    def _make(*numbers: Optional[int], loci=("arcc", "aroe")) -> AllelicProfile:
        matches = []
        for locus, number in zip(loci, numbers):
            if number is None:
                matches.append(LocusMatch(locus=locus))
                continue
            allele = Allele.from_identifier(f"{locus}{number}", "ACGT")
            matches.append(LocusMatch(
                locus=locus,
                hits=(AlleleHit(allele, Orientation.FORWARD, 0),)
            ))
        return AllelicProfile(matches=tuple(matches))
    return _make


@pytest.fixture
def scheme_dir(tmp_path):
    """Allele files, ST table and references on disk."""
    write_fasta(tmp_path / "arcc_alleles.fasta", ARCC_ALLELES)
    write_fasta(tmp_path / "aroe_alleles.fasta", AROE_ALLELES)
    (tmp_path / "st_table.txt").write_text("5 1 1\n9\t1\t2   \n\n7 2 3\n")
    (tmp_path / "complete.fsa").write_text(
        f">isolate_complete\n{REFERENCE_COMPLETE[:14]}\n{REFERENCE_COMPLETE[14:]}\n"
    )
    (tmp_path / "reverse.fsa").write_text(f">isolate_reverse\n{REFERENCE_REVERSE}\n")
    (tmp_path / "partial.fsa").write_text(f">isolate_partial\n{REFERENCE_PARTIAL}\n")
    (tmp_path / "ambiguous.fsa").write_text(f">isolate_ambiguous\n{REFERENCE_AMBIGUOUS}\n")
    return tmp_path


@pytest.fixture
def config_file(scheme_dir):
    """Sectioned config file listing the scheme files with absolute paths."""
    path = scheme_dir / "mlst.cfg"
    path.write_text(
        "# MLST test configuration\n"
        "\n"
        "[ST ALLELE TABLE FILES]\n"
        f"{scheme_dir / 'st_table.txt'}\n"
        "\n"
        "[ALLELE FILES]\n"
        f"{scheme_dir / 'arcc_alleles.fasta'}\n"
        f"{scheme_dir / 'aroe_alleles.fasta'}\n"
        "\n"
        "[REF FILES]\n"
        f"{scheme_dir / 'complete.fsa'}\n"
        f"{scheme_dir / 'reverse.fsa'}\n"
        f"{scheme_dir / 'partial.fsa'}\n"
    )
    return path


@pytest.fixture
def build_locus():
    return make_locus
