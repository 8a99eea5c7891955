#!/usr/bin/env python3
"""
Example usage of SISL.

This script encodes a document, splits it under a byte budget, and
merges the parts back together.
"""

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent / "src"))

from sisl import SislTransformer  # noqa: E402


def main():
    """Main example function."""
    print("SISL Example")
    print("=" * 50)

    # Create sample data
    sample_data = {
        "users": [
            {"name": "Alice Johnson", "age": 30, "tags": ["reading", "hiking"]},
            {"name": "Bob Smith", "age": 25, "tags": []},
        ],
        "settings": {
            "theme": "dark",
            "notifications": True,
            "ratio": 0.75,
            "motd": "café ☕",
            "expires": None,
        },
    }

    transformer = SislTransformer()

    encoded = transformer.dumps(sample_data)
    print(f"\nEncoded document ({len(encoded)} bytes):")
    print(encoded)

    result = transformer.split(sample_data, 120)
    print(f"\nSplit into {len(result.parts)} parts (budget {result.budget} bytes):")
    for i, part in enumerate(result.parts, 1):
        print(f"  {i}. [{len(part)} bytes] {part}")

    merged = transformer.merge(result.parts)
    print("\nMerged back:")
    print(json.dumps(merged, indent=2, ensure_ascii=False))
    print(f"\nRound trip exact: {merged == sample_data}")

    print("\nAs typed XML:")
    print(transformer.to_xml(sample_data))


if __name__ == "__main__":
    main()
