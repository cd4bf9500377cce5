"""Test module for xml_compare package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    # Arrange & Act
    import xml_compare

    # Assert
    assert xml_compare is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    # Arrange & Act
    import xml_compare

    # Assert
    assert isinstance(xml_compare.__version__, str)
    assert xml_compare.__version__ == "0.1.0"


def test_package_exports_entry_points() -> None:
    """Test that both comparison entry points are exported at the top level."""
    # Arrange & Act
    import xml_compare

    # Assert
    for name in ["compare_streaming", "compare_canonical", "analyze_file", "XMLComparator"]:
        assert name in xml_compare.__all__
        assert callable(getattr(xml_compare, name))


def test_package_exports_error_types() -> None:
    """Test that the error hierarchy is reachable from the package root."""
    import xml_compare

    assert issubclass(xml_compare.ComparisonIOError, xml_compare.XMLCompareError)
    assert issubclass(xml_compare.ComparisonParseError, xml_compare.XMLCompareError)
    assert issubclass(xml_compare.ComparisonResourceError, xml_compare.ComparisonIOError)
