"""Pytest configuration and fixtures."""

import pytest
import tempfile
from pathlib import Path
from typing import Dict, Any

from sisl import SislTransformer


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def transformer():
    """Fresh transformer with default limits."""
    return SislTransformer()


@pytest.fixture
def sample_document() -> Dict[str, Any]:
    """Document mixing every value kind, nested three levels deep."""
    return {
        "users": [
            {
                "name": "Alice",
                "age": 30,
                "email": "alice@example.com",
                "tags": ["admin", "ops"],
                "profile": {"city": "New York", "score": 9.5, "active": True}
            },
            {
                "name": "Bob",
                "age": 25,
                "email": None,
                "tags": [],
                "profile": {"city": "Zürich", "score": -0.25, "active": False}
            }
        ],
        "settings": {
            "theme": "dark",
            "motd": "line one\nline \"two\"\ttabbed\\",
            "limits": {"max": 9223372036854775807, "min": -9223372036854775808},
            "empty": {}
        },
        "emoji": "café ☕ 你好 \U0001F600",
        "ratio": 1e-7
    }


@pytest.fixture
def large_document() -> Dict[str, Any]:
    """Document large enough to need several parts under small budgets."""
    return {
        f"section_{i}": {
            f"item_{j}": f"value_{j}_" + "x" * 20
            for j in range(10)
        }
        for i in range(10)
    }
