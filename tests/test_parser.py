#!/usr/bin/env python3
"""
Tests for allele, ST table and reference file parsers.
"""

import pytest
from pathlib import Path

from mlst_pipeline.core.parser import AlleleFileParser, STTableParser, ReferenceParser
from mlst_pipeline.exceptions import FormatError
from mlst_pipeline.models import RunContext


class TestAlleleFileParser:

    def test_parse_keeps_file_order(self, scheme_dir):
        locus = AlleleFileParser(scheme_dir / "arcc_alleles.fasta", position=0).parse()

        assert locus.name == "arcc"
        assert locus.position == 0
        assert [allele.identifier for allele in locus] == ["arcc1", "arcc2", "arcc4"]
        assert [allele.number for allele in locus] == [1, 2, 4]
        assert locus.get_allele("arcc4").sequence == "AATTCCGG"
        assert locus.get_allele("arcc3") is None

    def test_header_description_ignored(self, tmp_path):
        path = tmp_path / "gmk.fasta"
        path.write_text(">gmk_12 some description\nACGT\n\n>gmk_13\nTTGA\n")

        locus = AlleleFileParser(path).parse()

        assert locus.name == "gmk"
        assert [allele.number for allele in locus] == [12, 13]

    def test_identifier_without_number(self, tmp_path):
        path = tmp_path / "bad.fasta"
        path.write_text(">arcc1\nACGT\n>arcc\nACGT\n")

        with pytest.raises(FormatError) as excinfo:
            AlleleFileParser(path).parse()

        assert excinfo.value.line_number == 3

    def test_empty_sequence(self, tmp_path):
        path = tmp_path / "bad.fasta"
        path.write_text(">arcc1\n>arcc2\nACGT\n")

        with pytest.raises(FormatError):
            AlleleFileParser(path).parse()

    def test_duplicate_identifier(self, tmp_path):
        path = tmp_path / "bad.fasta"
        path.write_text(">arcc1\nACGT\n>arcc1\nACGA\n")

        with pytest.raises(FormatError, match="Duplicate allele"):
            AlleleFileParser(path).parse()

    def test_sequence_before_header(self, tmp_path):
        path = tmp_path / "bad.fasta"
        path.write_text("ACGT\n>arcc1\nACGT\n")

        with pytest.raises(FormatError):
            AlleleFileParser(path).parse()

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.fasta"
        path.write_text("\n")

        with pytest.raises(FormatError, match="No alleles"):
            AlleleFileParser(path).parse()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FormatError):
            AlleleFileParser(tmp_path / "missing.fasta")


class TestSTTableParser:

    def test_parse(self, scheme_dir):
        table = STTableParser([scheme_dir / "st_table.txt"]).parse()

        assert len(table) == 3
        assert [row.st for row in table] == [5, 9, 7]
        assert table.get(9).alleles == (1, 2)
        assert table.get(9).line_number == 2

    def test_comments_and_blank_lines(self, tmp_path):
        path = tmp_path / "st.txt"
        path.write_text("# ST arcc aroe\n\n   \n1 2 3\n")

        table = STTableParser([path]).parse()

        assert len(table) == 1

    def test_badly_formatted_line(self, tmp_path):
        path = tmp_path / "st.txt"
        path.write_text("1 2 3\nST arcc aroe\n")

        with pytest.raises(FormatError) as excinfo:
            STTableParser([path]).parse()

        assert excinfo.value.line_number == 2

    def test_single_column_rejected(self, tmp_path):
        path = tmp_path / "st.txt"
        path.write_text("12\n")

        with pytest.raises(FormatError):
            STTableParser([path]).parse()

    def test_consistent_duplicate_across_files(self, tmp_path):
        file_a = tmp_path / "a.txt"
        file_b = tmp_path / "b.txt"
        file_a.write_text("7 2 3\n")
        file_b.write_text("7\t2   3  \n8 1 1\n")
        context = RunContext()

        table = STTableParser([file_a, file_b]).parse(context)

        assert len(table) == 2
        assert table.get(7).source == file_a
        assert context.warning_count == 1

    def test_conflicting_duplicate_across_files(self, tmp_path):
        file_a = tmp_path / "a.txt"
        file_b = tmp_path / "b.txt"
        file_a.write_text("7 2 3\n")
        file_b.write_text("7 2 4\n")

        with pytest.raises(FormatError, match="do not match"):
            STTableParser([file_a, file_b]).parse()

    def test_conflicting_duplicate_in_one_file(self, tmp_path):
        path = tmp_path / "st.txt"
        path.write_text("7 2 3\n7 2 4\n")

        with pytest.raises(FormatError):
            STTableParser([path]).parse()


class TestReferenceParser:

    def test_parse(self, scheme_dir):
        reference = ReferenceParser(scheme_dir / "complete.fsa").parse()

        assert reference.identifier == "isolate_complete"
        assert reference.sequence == "TTTTACGTACGTTTTTGATTACAGTTTT"
        assert reference.record_count == 1
        assert reference.source == scheme_dir / "complete.fsa"

    def test_multiple_records_are_concatenated(self, tmp_path):
        path = tmp_path / "multi.fsa"
        path.write_text(">contig1\nAAAA\n>contig2\nCCCC\n")

        reference = ReferenceParser(path).parse()

        assert reference.identifier == "contig1"
        assert reference.sequence == "AAAACCCC"
        assert reference.record_count == 2

    @pytest.mark.parametrize("bad_line", ["ACGN", "acgt", "ACG T"])
    def test_invalid_base(self, tmp_path, bad_line):
        path = tmp_path / "bad.fsa"
        path.write_text(f">ref\nACGT\n{bad_line}\n")

        with pytest.raises(FormatError) as excinfo:
            ReferenceParser(path).parse()

        assert excinfo.value.line_number == 3

    def test_no_header_uses_file_name(self, tmp_path):
        path = tmp_path / "plain.fsa"
        path.write_text("ACGT\n")

        assert ReferenceParser(path).parse().identifier == "plain.fsa"

    def test_windows_line_endings(self, tmp_path):
        path = tmp_path / "crlf.fsa"
        path.write_bytes(b">ref\r\nACGT\r\nTTGA\r\n")

        assert ReferenceParser(path).parse().sequence == "ACGTTTGA"
