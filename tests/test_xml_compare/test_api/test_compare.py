"""Tests for the public comparison API."""

import logging
from unittest.mock import patch

import pytest

from xml_compare import (
    ComparatorConfig,
    XMLComparator,
    analyze_file,
    compare_canonical,
    compare_streaming,
)
from xml_compare.api import validate_input_files, validate_output_path
from xml_compare.shared.errors import (
    ComparisonIOError,
    ComparisonParseError,
    ComparisonResourceError,
)

ORDERED = """<?xml version="1.0" encoding="UTF-8"?>
<inventory>
  <item sku="A1"><name>Widget</name><qty>4</qty></item>
  <item sku="B2"><name>Gadget</name><qty>7</qty></item>
</inventory>
"""

SHUFFLED = """<inventory>
  <item sku="B2"><qty>7</qty><name>Gadget</name></item>
  <item sku="A1"><qty>4</qty><name>Widget</name></item>
</inventory>
"""


class TestCanonicalComparison:
    """Test the order-agnostic comparison entry point."""

    def test_reordered_siblings_match(self, write_xml) -> None:
        path_a = write_xml("a.xml", ORDERED)
        path_b = write_xml("b.xml", SHUFFLED)

        assert compare_canonical(path_a, path_b) is True

    def test_attribute_value_difference_detected(self, write_xml) -> None:
        path_a = write_xml("a.xml", '<e a="1"/>')
        path_b = write_xml("b.xml", '<e a="2"/>')

        assert compare_canonical(path_a, path_b) is False

    def test_text_difference_detected(self, write_xml) -> None:
        path_a = write_xml("a.xml", "<r><a>1</a><b/></r>")
        path_b = write_xml("b.xml", "<r><b/><a>2</a></r>")

        assert compare_canonical(path_a, path_b) is False

    def test_reflexive(self, write_xml) -> None:
        path = write_xml("a.xml", ORDERED)

        assert compare_canonical(path, path) is True

    def test_empty_roots_match(self, write_xml) -> None:
        path_a = write_xml("a.xml", "<root></root>")
        path_b = write_xml("b.xml", "<root/>")

        assert compare_canonical(path_a, path_b) is True

    def test_formatting_whitespace_ignored(self, write_xml) -> None:
        path_a = write_xml("a.xml", ORDERED)
        path_b = write_xml("b.xml", "".join(line.strip() for line in ORDERED.splitlines()))

        assert compare_canonical(path_a, path_b) is True

    def test_mismatch_reason_logged(self, write_xml, caplog) -> None:
        path_a = write_xml("a.xml", "<r><a/></r>")
        path_b = write_xml("b.xml", "<r><b/></r>")

        with caplog.at_level(logging.INFO, logger="xml_compare"):
            assert compare_canonical(path_a, path_b, correlation_id="cid-1") is False

        completed = [r for r in caplog.records if r.getMessage() == "Canonical comparison completed"]
        assert completed[-1].reason == "No match for element 'r' at index 0"
        assert completed[-1].correlation_id == "cid-1"

    def test_missing_file(self, write_xml, tmp_path) -> None:
        path_a = write_xml("a.xml", "<r/>")
        missing = tmp_path / "missing.xml"

        with pytest.raises(ComparisonIOError, match="Second XML file does not exist") as exc_info:
            compare_canonical(path_a, missing)

        assert exc_info.value.path == str(missing)

    def test_directory_is_not_a_file(self, write_xml, tmp_path) -> None:
        path_b = write_xml("b.xml", "<r/>")

        with pytest.raises(ComparisonIOError, match="First XML path is not a file"):
            compare_canonical(tmp_path, path_b)

    def test_malformed_input(self, write_xml) -> None:
        path_a = write_xml("a.xml", "<r/>")
        path_b = write_xml("b.xml", "<r>")

        with pytest.raises(ComparisonParseError):
            compare_canonical(path_a, path_b)

    def test_recursion_exhaustion_converted(self, write_xml) -> None:
        path = write_xml("a.xml", "<r/>")

        with patch("xml_compare.api.compare.equal_canonically", side_effect=RecursionError):
            with pytest.raises(ComparisonResourceError, match="nesting too deep"):
                compare_canonical(path, path)

    def test_memory_exhaustion_converted(self, write_xml) -> None:
        path = write_xml("a.xml", "<r/>")

        with patch("xml_compare.api.compare.equal_canonically", side_effect=MemoryError):
            with pytest.raises(ComparisonResourceError, match="Out of memory"):
                compare_canonical(path, path)


class TestStreamingEntryPoint:
    """Test validation wrapped around the streaming comparator."""

    def test_matching_files(self, write_xml) -> None:
        path_a = write_xml("a.xml", ORDERED)
        path_b = write_xml("b.xml", ORDERED)

        result = compare_streaming(path_a, path_b)

        assert result.files_match is True

    def test_output_directory_missing(self, write_xml, tmp_path) -> None:
        path = write_xml("a.xml", "<r/>")

        with pytest.raises(ComparisonIOError, match="Output directory does not exist"):
            compare_streaming(path, path, tmp_path / "nope" / "report.txt")

    def test_empty_path_rejected(self, write_xml) -> None:
        path = write_xml("a.xml", "<r/>")

        with pytest.raises(ComparisonIOError, match="First XML file path cannot be null or empty"):
            compare_streaming("", path)

    def test_configured_comparator(self, write_xml, tmp_path) -> None:
        path_a = write_xml("a.xml", "<r>" + "<e>1</e>" * 5 + "</r>")
        path_b = write_xml("b.xml", "<r>" + "<e>2</e>" * 5 + "</r>")
        report = tmp_path / "report.txt"
        comparator = XMLComparator(
            ComparatorConfig().override(streaming__max_differences=2),
            correlation_id="cid-2",
        )

        result = comparator.compare_streaming(path_a, path_b, report)

        assert result.difference_count == 3
        assert result.truncated is True
        assert "Total differences found: 3" in report.read_text(encoding="utf-8")


class TestValidation:
    """Test path validation helpers."""

    def test_valid_inputs(self, write_xml) -> None:
        path = write_xml("a.xml", "<r/>")

        validate_input_files(path, path)

    def test_none_input(self, write_xml) -> None:
        path = write_xml("a.xml", "<r/>")

        with pytest.raises(ComparisonIOError, match="Second XML file path cannot be null"):
            validate_input_files(path, None)  # type: ignore[arg-type]

    def test_output_in_existing_directory(self, tmp_path) -> None:
        validate_output_path(tmp_path / "report.txt")

    def test_empty_output_path(self) -> None:
        with pytest.raises(ComparisonIOError, match="Output file path cannot be null or empty"):
            validate_output_path("  ")


class TestAnalyzeFile:
    """Test single-file analysis."""

    def test_valid_file(self, write_xml) -> None:
        path = write_xml("a.xml", ORDERED)

        info = analyze_file(path)

        assert info.valid_xml is True
        assert info.root_element == "inventory"
        assert info.element_count == 7
        assert info.max_depth == 3
        assert info.encoding == "UTF-8"
        assert info.version == "1.0"
        assert info.size_bytes == path.stat().st_size
        assert info.error_message is None

    def test_defaults_without_declaration(self, write_xml) -> None:
        info = analyze_file(write_xml("a.xml", "<r/>"))

        assert info.encoding == "UTF-8"
        assert info.version == "1.0"

    def test_declared_utf16_encoding_reported(self, tmp_path) -> None:
        path = tmp_path / "wide.xml"
        path.write_bytes('<?xml version="1.0" encoding="UTF-16"?><r><a/></r>'.encode("utf-16"))

        info = analyze_file(path)

        assert info.valid_xml is True
        assert info.encoding == "UTF-16"
        assert info.element_count == 2

    def test_malformed_file_reported(self, write_xml) -> None:
        info = analyze_file(write_xml("bad.xml", "<r><a></r>"))

        assert info.valid_xml is False
        assert info.error_message.startswith("XML parsing failed: ")

    def test_missing_file_reported(self, tmp_path) -> None:
        info = analyze_file(tmp_path / "missing.xml")

        assert info.valid_xml is False
        assert "does not exist" in info.error_message


class TestComparisonModesAgree:
    """Test the relationship between the two comparison modes."""

    @pytest.mark.parametrize(
        "content_a, content_b",
        [
            ("<r><a>1</a><b x='1'/></r>", "<r><a>1</a><b x='1'/></r>"),
            ("<r>\n  <a>1</a>\n</r>", "<r><a>1</a></r>"),
            ("<r><a>1</a></r>", "<r><a>2</a></r>"),
            ("<r><a/><b/></r>", "<r><b/><a/></r>"),
        ],
    )
    def test_streaming_match_implies_canonical_match(
        self, write_xml, content_a: str, content_b: str
    ) -> None:
        """Test that documents equal in order and attribute values are canonically equal."""
        path_a = write_xml("a.xml", content_a)
        path_b = write_xml("b.xml", content_b)

        if compare_streaming(path_a, path_b).files_match:
            assert compare_canonical(path_a, path_b) is True
