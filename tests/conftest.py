"""Pytest configuration and fixtures."""

import json
import tempfile
from pathlib import Path

import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def sample_order_json():
    """Sample order document with nested objects and arrays."""
    return json.dumps({
        "order-id": 1001,
        "customer": {
            "name": "Alice",
            "email": "alice@example.com"
        },
        "items": [
            {"sku": "A-1", "quantity": 2, "price": 9.5},
            {"sku": "B-2", "quantity": 1, "price": 20}
        ],
        "tags": ["priority", "gift"],
        "shipped": False
    })


@pytest.fixture
def sample_list_json():
    """Sample list JSON for testing."""
    return json.dumps([
        {"id": 1, "name": "Item 1", "value": 100},
        {"id": 2, "name": "Item 2", "value": 200},
        {"id": 3, "name": "Item 3", "value": 300},
    ])
