"""
Unit tests for region resolution
"""

import pytest

from smartkisan.tools.regions import REGION_COORDINATES, canonical_region, resolve_region


class TestRegionResolver:
    """Test cases for the fixed region table."""

    @pytest.mark.parametrize("name,expected", [
        ("punjab", (31.5204, 74.3587)),
        ("sindh", (24.8607, 67.0011)),
        ("khyber", (34.0151, 71.5249)),
        ("balochistan", (30.1798, 66.9750)),
    ])
    def test_known_regions(self, name, expected):
        assert resolve_region(name) == expected

    def test_case_and_whitespace_insensitive(self):
        assert resolve_region("  SINDH ") == REGION_COORDINATES["sindh"]
        assert canonical_region("Khyber  Pakhtunkhwa") == "khyber"

    @pytest.mark.parametrize("name", ["", None, "atlantis", "gilgit"])
    def test_unknown_defaults_to_punjab(self, name):
        assert resolve_region(name) == REGION_COORDINATES["punjab"]
        assert canonical_region(name) == "punjab"
