"""Allele, ST table and reference file parsers."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from loguru import logger

from ..exceptions import FormatError
from ..models import Allele, Locus, ReferenceGenome, RunContext, STProfile, STProfileTable


ST_LINE_PATTERN = re.compile(r"^[0-9]+(?:\s+[0-9]+)+\s*$")
REFERENCE_LINE_PATTERN = re.compile(r"^[ACGT]+$")


class AlleleFileParser:
    """Parser for per-locus allele FASTA files."""

    def __init__(self, allele_file: Path, position: int = 0):
        """Initialize parser with allele file path and the locus column position."""
        self.allele_file = Path(allele_file)
        self.position = position

        if not self.allele_file.exists():
            raise FormatError(f"Allele file not found: {self.allele_file}")

    def parse(self) -> Locus:
        """Parse the allele file and return the locus with its alleles in file order."""
        alleles: List[Allele] = []
        seen: Dict[str, int] = {}
        current_id: Optional[str] = None
        current_line = 0
        current_seq: List[str] = []

        logger.info(f"Loading allele data from {self.allele_file}")

        def save_allele():
            sequence = "".join(current_seq)
            if not sequence:
                raise FormatError(
                    f"Allele {current_id} has no sequence",
                    file_path=str(self.allele_file),
                    line_number=current_line
                )
            try:
                allele = Allele.from_identifier(current_id, sequence)
            except FormatError as e:
                raise FormatError(
                    str(e), file_path=str(self.allele_file), line_number=current_line
                ) from e
            logger.debug(f"Saving allele {current_id} data")
            alleles.append(allele)

        try:
            with open(self.allele_file, 'r', encoding='utf-8') as f:
                for line_number, line in enumerate(f, start=1):
                    line = line.strip()

                    if not line:
                        continue

                    if line.startswith('>'):
                        if current_id is not None:
                            save_allele()

                        fields = line[1:].split()
                        if not fields:
                            raise FormatError(
                                "Empty allele header",
                                file_path=str(self.allele_file),
                                line_number=line_number,
                                line_content=line
                            )
                        current_id = fields[0]
                        if current_id in seen:
                            raise FormatError(
                                f"Duplicate allele {current_id} (first defined on line {seen[current_id]})",
                                file_path=str(self.allele_file),
                                line_number=line_number
                            )
                        seen[current_id] = line_number
                        current_line = line_number
                        current_seq = []
                        logger.debug(f"Found allele {current_id}")
                    elif current_id is None:
                        raise FormatError(
                            "Sequence data found before the first allele header",
                            file_path=str(self.allele_file),
                            line_number=line_number,
                            line_content=line
                        )
                    else:
                        current_seq.append(line)

            if current_id is not None:
                save_allele()

        except IOError as e:
            raise FormatError(f"Failed to read allele file: {e}", file_path=str(self.allele_file))

        if not alleles:
            raise FormatError("No alleles found", file_path=str(self.allele_file))

        locus = Locus(
            name=alleles[0].locus_name or self.allele_file.stem,
            position=self.position,
            alleles=tuple(alleles),
            source=self.allele_file
        )
        logger.info(f"Loaded {len(locus)} alleles for locus {locus.name}")
        return locus


class STTableParser:
    """Parser for whitespace-delimited ST profile tables.

    Each line holds an ST id followed by one allele number per locus. All
    files are merged into a single table; a later file may add new ST ids
    but must not redefine an existing one differently.
    """

    def __init__(self, table_files: Iterable[Path]):
        self.table_files = [Path(table_file) for table_file in table_files]

    def parse(self, context: Optional[RunContext] = None) -> STProfileTable:
        table = STProfileTable()

        for table_file in self.table_files:
            self._parse_file(table_file, table, context)

        logger.info(f"Loaded {len(table)} ST types from {len(self.table_files)} file(s)")
        return table

    def _parse_file(
        self,
        table_file: Path,
        table: STProfileTable,
        context: Optional[RunContext]
    ) -> None:
        logger.info(f"Loading ST type data from {table_file}")

        try:
            with open(table_file, 'r', encoding='utf-8') as f:
                for line_number, line in enumerate(f, start=1):
                    line = line.rstrip("\r\n")

                    if not line.strip() or line.startswith('#'):
                        continue

                    row = self._parse_line(line, line_number, table_file)

                    if table.add(row):
                        logger.debug(f"Adding new ST type def {row}")
                        continue

                    message = (
                        f"Duplicate ST type id found: {row.st} "
                        f"({table_file} line {line_number}, previously defined in "
                        f"{table.get(row.st).source} line {table.get(row.st).line_number}); "
                        f"definitions are the same"
                    )
                    logger.warning(message)
                    if context is not None:
                        context.warn(message)

        except IOError as e:
            raise FormatError(f"Failed to read ST table file: {e}", file_path=str(table_file))

    @staticmethod
    def _parse_line(line: str, line_number: int, table_file: Path) -> STProfile:
        if not ST_LINE_PATTERN.match(line):
            raise FormatError(
                "Badly formatted line (expected space delimited numbers)",
                file_path=str(table_file),
                line_number=line_number,
                line_content=line
            )

        values = [int(value) for value in line.split()]
        return STProfile(
            st=values[0],
            alleles=tuple(values[1:]),
            source=table_file,
            line_number=line_number
        )


class ReferenceParser:
    """Parser for reference genome FASTA files.

    All sequence lines are joined into one sequence under the first header,
    even when the file holds several header-delimited records.
    """

    def __init__(self, reference_file: Path):
        self.reference_file = Path(reference_file)

        if not self.reference_file.exists():
            raise FormatError(f"Reference file not found: {self.reference_file}")

    def parse(self) -> ReferenceGenome:
        identifier: Optional[str] = None
        record_count = 0
        lines: List[str] = []

        logger.info(f"Processing {self.reference_file}")

        try:
            with open(self.reference_file, 'r', encoding='utf-8') as f:
                for line_number, line in enumerate(f, start=1):
                    line = line.rstrip("\r\n")

                    if line.startswith('>'):
                        record_count += 1
                        if identifier is None:
                            identifier = line[1:].strip()
                            logger.debug(f"Found reference genome id {identifier}")
                        else:
                            logger.debug(
                                f"Additional header on line {line_number} ({line[1:].strip()}); "
                                f"sequence is concatenated under {identifier}"
                            )
                        continue

                    if not line.strip():
                        continue

                    if not REFERENCE_LINE_PATTERN.match(line):
                        raise FormatError(
                            "Invalid format in reference file (invalid base pair character?)",
                            file_path=str(self.reference_file),
                            line_number=line_number,
                            line_content=line
                        )
                    lines.append(line)

        except IOError as e:
            raise FormatError(f"Failed to read reference file: {e}", file_path=str(self.reference_file))

        if identifier is None:
            identifier = self.reference_file.name

        reference = ReferenceGenome(
            identifier=identifier,
            sequence="".join(lines),
            source=self.reference_file,
            record_count=max(record_count, 1)
        )
        logger.info(f"Found reference genome id: {reference.identifier} ({reference.length} bp)")
        return reference
