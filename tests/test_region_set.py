"""Unit tests for Region and RegionSet."""

import gzip
import random
from collections import Counter

import pytest

from genomicdist import Region, RegionSet, SortedRegionSet
from genomicdist.core.errors import FormatError, ParseError


class TestRegion:
    """Tests for the Region value type."""

    def test_structural_equality(self):
        assert Region("chr1", 100, 200) == Region("chr1", 100, 200)
        assert Region("chr1", 100, 200) != Region("chr2", 100, 200)
        assert len({Region("chr1", 1, 2), Region("chr1", 1, 2)}) == 1

    def test_immutable(self):
        region = Region("chr1", 100, 200)
        with pytest.raises(AttributeError):
            region.start = 5

    def test_width_and_midpoint(self):
        region = Region("chr1", 100, 201)
        assert region.width == 101
        assert region.midpoint == 150

    def test_to_bed_string(self):
        assert Region("chrX", 5, 10).to_bed_string() == "chrX\t5\t10"


class TestRegionSetParsing:
    """Tests for RegionSet.from_bed."""

    def test_parse_groups_by_chromosome(self, neighbor_bed):
        rs = RegionSet.from_bed(neighbor_bed)
        assert len(rs) == 4
        assert set(rs.chromosomes()) == {"chr1", "chr2"}
        assert list(rs.regions_for("chr2")) == [Region("chr2", 50, 80)]

    def test_parse_is_unsorted_and_keeps_file_order(self, neighbor_bed):
        rs = RegionSet.from_bed(neighbor_bed)
        assert not rs.is_sorted()
        assert [r.start for r in rs.regions_for("chr1")] == [700, 100, 500]

    def test_parse_gzipped(self, neighbor_bed, neighbor_bed_gz):
        plain = RegionSet.from_bed(neighbor_bed)
        zipped = RegionSet.from_bed(neighbor_bed_gz)
        assert Counter(plain) == Counter(zipped)

    def test_header_and_blank_lines_skipped(self, temp_dir):
        path = temp_dir / "header.bed"
        path.write_text("track name=peaks\n# comment\n\nchr1\t1\t2\n")
        rs = RegionSet.from_bed(path)
        assert list(rs) == [Region("chr1", 1, 2)]

    def test_too_few_fields(self, temp_dir):
        path = temp_dir / "bad.bed"
        path.write_text("chr1\t1\t2\nchr1\t100\n")
        with pytest.raises(FormatError) as exc_info:
            RegionSet.from_bed(path)
        assert exc_info.value.line_number == 2
        assert str(path) in str(exc_info.value)

    @pytest.mark.parametrize("value", ["abc", "-5", "1.5", "4294967296", ""])
    def test_invalid_coordinate(self, temp_dir, value):
        path = temp_dir / "bad.bed"
        path.write_text(f"chr1\t{value}\t200\n")
        with pytest.raises(ParseError) as exc_info:
            RegionSet.from_bed(path)
        assert exc_info.value.line_number == 1

    def test_max_uint32_accepted(self, temp_dir):
        path = temp_dir / "big.bed"
        path.write_text("chr1\t0\t4294967295\n")
        assert list(RegionSet.from_bed(path))[0].end == 4294967295

    def test_start_after_end_not_validated(self, temp_dir):
        path = temp_dir / "reversed.bed"
        path.write_text("chr1\t200\t100\n")
        assert list(RegionSet.from_bed(path)) == [Region("chr1", 200, 100)]

    def test_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError, match="missing.bed"):
            RegionSet.from_bed(temp_dir / "missing.bed")

    def test_empty_file(self, temp_dir):
        path = temp_dir / "empty.bed"
        path.write_text("")
        rs = RegionSet.from_bed(path)
        assert rs.is_empty()
        assert len(rs) == 0

    def test_invalid_utf8_reports_line(self, temp_dir):
        path = temp_dir / "latin1.bed"
        path.write_bytes(b"chr1\t1\t2\nchr\xff1\t3\t4\n")
        with pytest.raises(FormatError) as exc_info:
            RegionSet.from_bed(path)
        assert exc_info.value.path == path
        assert exc_info.value.line_number == 2
        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

    def test_binary_index_file_is_format_error(self, temp_dir):
        path = temp_dir / "peaks.bed.gz.tbi"
        path.write_bytes(gzip.compress(b"TBI\x01" + bytes(range(256))))
        with pytest.raises(FormatError) as exc_info:
            RegionSet.from_bed(path)
        assert exc_info.value.path == path
        assert exc_info.value.line_number == 1

    def test_truncated_gzip(self, temp_dir):
        text = "".join(f"chr1\t{i * 10}\t{i * 10 + 5}\n" for i in range(5000))
        compressed = gzip.compress(text.encode())
        path = temp_dir / "truncated.bed.gz"
        path.write_bytes(compressed[: len(compressed) // 2])
        with pytest.raises(FormatError) as exc_info:
            RegionSet.from_bed(path)
        assert exc_info.value.path == path
        assert exc_info.value.line_number is not None
        assert exc_info.value.line_number >= 1


class TestRegionSetSort:
    """Tests for sorting."""

    def test_sort_returns_sorted_variant(self, neighbor_bed):
        rs = RegionSet.from_bed(neighbor_bed)
        sorted_rs = rs.sort()
        assert isinstance(sorted_rs, SortedRegionSet)
        assert sorted_rs.is_sorted()
        assert [r.start for r in sorted_rs.regions_for("chr1")] == [100, 500, 700]
        # receiver untouched
        assert not rs.is_sorted()
        assert [r.start for r in rs.regions_for("chr1")] == [700, 100, 500]

    def test_sort_is_stable(self):
        rs = RegionSet.from_regions(
            [Region("chr1", 10, 50), Region("chr1", 5, 6), Region("chr1", 10, 20)]
        ).sort()
        assert list(rs.regions_for("chr1")) == [
            Region("chr1", 5, 6),
            Region("chr1", 10, 50),
            Region("chr1", 10, 20),
        ]

    def test_sorted_starts_non_decreasing_and_permutation(self, temp_dir):
        rng = random.Random(42)
        lines = []
        for _ in range(500):
            chrom = f"chr{rng.randint(1, 5)}"
            start = rng.randint(0, 10_000)
            lines.append(f"{chrom}\t{start}\t{start + rng.randint(0, 500)}")
        path = temp_dir / "random.bed"
        path.write_text("\n".join(lines) + "\n")

        rs = RegionSet.from_bed(path)
        sorted_rs = rs.sort()

        for chrom in sorted_rs.chromosomes():
            starts = [r.start for r in sorted_rs.regions_for(chrom)]
            assert starts == sorted(starts)
        assert Counter(rs) == Counter(sorted_rs)
        assert len(sorted_rs) == len(rs) == 500

    def test_sorting_sorted_set_is_noop(self, neighbor_bed):
        sorted_rs = RegionSet.from_bed(neighbor_bed).sort()
        assert sorted_rs.sort() is sorted_rs


class TestRegionSetAccess:
    """Tests for accessors."""

    def test_regions_for_absent_chromosome(self, neighbor_bed):
        rs = RegionSet.from_bed(neighbor_bed)
        with pytest.raises(KeyError):
            rs.regions_for("chr99")

    def test_contains(self, neighbor_bed):
        rs = RegionSet.from_bed(neighbor_bed)
        assert "chr1" in rs
        assert "chr99" not in rs

    def test_repr(self, neighbor_bed):
        rs = RegionSet.from_bed(neighbor_bed)
        assert repr(rs) == "RegionSet(chromosomes=2, regions=4)"
        assert repr(rs.sort()) == "SortedRegionSet(chromosomes=2, regions=4)"

    def test_to_bed_file(self, neighbor_bed, temp_dir):
        out = temp_dir / "out.bed"
        RegionSet.from_bed(neighbor_bed).sort().to_bed_file(out)
        assert out.read_text().splitlines() == [
            "chr1\t100\t200",
            "chr1\t500\t650",
            "chr1\t700\t900",
            "chr2\t50\t80",
        ]
