#!/usr/bin/env python3
"""
Quick Start Guide for xml-compare.

This example writes a few small documents to a temporary directory and
walks through both comparison modes, the difference report and file
analysis.
"""

import sys
import tempfile
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from xml_compare import (
    ComparatorConfig,
    XMLComparator,
    analyze_file,
    compare_canonical,
    compare_streaming,
)

EXPECTED = """<?xml version="1.0" encoding="UTF-8"?>
<order id="1042">
  <customer>Ada</customer>
  <line sku="A1" qty="2">Widget</line>
  <line sku="B2" qty="1">Gadget</line>
</order>
"""

REORDERED = """<?xml version="1.0" encoding="UTF-8"?>
<order id="1042">
  <line sku="B2" qty="1">Gadget</line>
  <line sku="A1" qty="2">Widget</line>
  <customer>Ada</customer>
</order>
"""


def quick_start_example(workdir: Path) -> None:
    """Compare an order document against a reordered copy."""

    print("🚀 QUICK START - xml-compare")
    print("=" * 45)

    expected = workdir / "expected.xml"
    reordered = workdir / "reordered.xml"
    expected.write_text(EXPECTED, encoding="utf-8")
    reordered.write_text(REORDERED, encoding="utf-8")

    # Step 1: Streaming comparison is order-sensitive
    print("\n📄 Step 1: Streaming comparison")
    print("-" * 30)

    report = workdir / "differences.txt"
    result = compare_streaming(expected, reordered, report)

    print(f"✅ Files match: {result.files_match}")
    print(f"📊 Elements compared: {result.element_count}")
    print(f"⚠️  Differences found: {result.difference_count}")
    for message in result.messages[:3]:
        print(f"  - {message}")
    if report.exists():
        print(f"📝 Report written to {report}")

    # Step 2: Canonical comparison ignores sibling order
    print("\n🔍 Step 2: Canonical comparison")
    print("-" * 30)

    print(f"✅ Canonically equal: {compare_canonical(expected, reordered)}")

    # Step 3: A tighter difference cap through configuration
    print("\n⚙️  Step 3: Custom configuration")
    print("-" * 30)

    config = ComparatorConfig().override(streaming__max_differences=2)
    comparator = XMLComparator(config)
    capped = comparator.compare_streaming(expected, reordered)

    print(f"✂️  Truncated: {capped.truncated}")
    print(f"📊 Records kept: {capped.difference_count}")

    # Step 4: File analysis
    print("\n📏 Step 4: File analysis")
    print("-" * 30)

    info = analyze_file(expected)
    print(f"✅ Root: {info.root_element}, elements: {info.element_count}, depth: {info.max_depth}")


if __name__ == "__main__":
    with tempfile.TemporaryDirectory() as tmp:
        quick_start_example(Path(tmp))
