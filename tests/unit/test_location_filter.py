"""
Tests for the aggregator location filter
"""

import pytest

from job_ingest.utils.location_filter import is_friendly_location, is_restricted_location


class TestIsFriendlyLocation:
    @pytest.mark.parametrize(
        "location",
        ["Brazil", "Brasil", "Worldwide", "LATAM", "Latin America", "Americas", "Anywhere"],
    )
    def test_friendly_locations_accepted(self, location):
        assert is_friendly_location(location) is True

    @pytest.mark.parametrize("location", ["", None, "   "])
    def test_missing_location_accepted(self, location):
        """No stated restriction is treated as permissive"""
        assert is_friendly_location(location) is True

    def test_us_only_rejected(self):
        assert is_friendly_location("US Only") is False

    def test_restriction_overrides_friendly_term(self):
        assert is_friendly_location("Remote (US Only)") is False

    @pytest.mark.parametrize("location", ["USA Only", "EU only", "UK Only", "U.S. only"])
    def test_other_restrictions_rejected(self, location):
        assert is_friendly_location(location) is False

    @pytest.mark.parametrize(
        "location",
        [
            "Remote (USA/Canada only)",
            "Remote - United States only",
            "North America only",
            "Canada Only",
            "Remote - Germany only",
            "Remote, Poland-only",
        ],
    )
    def test_region_only_clause_beats_remote(self, location):
        assert is_friendly_location(location) is False

    @pytest.mark.parametrize("location", ["LATAM only", "Remote (Brazil only)", "Remote only"])
    def test_only_clause_naming_accepted_region(self, location):
        assert is_friendly_location(location) is True

    def test_unrelated_region_rejected(self):
        """A concrete region with no friendly term is not accepted"""
        assert is_friendly_location("Germany") is False


class TestIsRestrictedLocation:
    def test_none_is_not_restricted(self):
        assert is_restricted_location(None) is False

    def test_case_insensitive(self):
        assert is_restricted_location("remote - usa ONLY") is True
