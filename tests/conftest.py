"""Shared fixtures for the group tree test-suite.

Forests are built from plain dicts (the shape the table layer hands over) so
tests read like the data the engine actually receives.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from group_tree.config import ConfigManager
from group_tree.core.models import forest_from_dicts

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@pytest.fixture
def scenario_forest():
    """Single root "1" with children "1-1" and "1-2"."""
    return forest_from_dicts([
        {
            "id": "1", "name": "Organization", "level": 0,
            "children": [
                {"id": "1-1", "name": "Platform Group", "level": 1, "parentId": "1"},
                {"id": "1-2", "name": "Sales Group", "level": 1, "parentId": "1"},
            ],
        }
    ])


@pytest.fixture
def chain_forest():
    """Three-level chain A -> B -> C."""
    return forest_from_dicts([
        {
            "id": "A", "name": "A", "level": 0,
            "children": [
                {
                    "id": "B", "name": "B", "level": 1, "parentId": "A",
                    "children": [
                        {"id": "C", "name": "C", "level": 2, "parentId": "B"},
                    ],
                },
            ],
        }
    ])


@pytest.fixture
def org_forest():
    """Two roots with nested groups and payload fields.

    1 Organization
      1-1 Platform Group
        1-1-1 Digital Marketing
          1-1-1-1 Social Media
          1-1-1-2 SEO Optimization
        1-1-2 Brand
      1-2 Operations
        1-2-1 Logistics
    2 Partners
      2-1 Resellers
    """
    return forest_from_dicts([
        {
            "id": "1", "name": "Organization", "level": 0, "uuid": "123456-789012-345678",
            "appCount": 45, "resourceCount": 128,
            "children": [
                {
                    "id": "1-1", "name": "Platform Group", "level": 1, "parentId": "1",
                    "description": "Platform development and marketing initiatives.",
                    "appCount": 12, "resourceCount": 38,
                    "children": [
                        {
                            "id": "1-1-1", "name": "Digital Marketing", "level": 2, "parentId": "1-1",
                            "appCount": 8, "resourceCount": 24,
                            "children": [
                                {"id": "1-1-1-1", "name": "Social Media", "level": 3, "parentId": "1-1-1"},
                                {"id": "1-1-1-2", "name": "SEO Optimization", "level": 3, "parentId": "1-1-1"},
                            ],
                        },
                        {"id": "1-1-2", "name": "Brand", "level": 2, "parentId": "1-1"},
                    ],
                },
                {
                    "id": "1-2", "name": "Operations", "level": 1, "parentId": "1",
                    "children": [
                        {"id": "1-2-1", "name": "Logistics", "level": 2, "parentId": "1-2"},
                    ],
                },
            ],
        },
        {
            "id": "2", "name": "Partners", "level": 0,
            "children": [
                {"id": "2-1", "name": "Resellers", "level": 1, "parentId": "2"},
            ],
        },
    ])


@pytest.fixture
def fresh_config(monkeypatch, tmp_path):
    """Reset the ConfigManager singleton and point user overrides at tmp_path."""
    monkeypatch.setenv("GROUP_TREE_CONFIG_DIR", str(tmp_path))
    monkeypatch.setattr(ConfigManager, "_instance", None)
    yield tmp_path
    monkeypatch.setattr(ConfigManager, "_instance", None)
