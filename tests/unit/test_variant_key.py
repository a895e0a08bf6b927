"""
Unit tests for the variant option signature.
"""

import pytest
from orderdesk.utils.variant_key import build_variant_key


class TestBuildVariantKey:
    """Tests for build_variant_key()."""

    def test_key_is_order_independent(self):
        """Test the key does not depend on selection order."""
        assert build_variant_key([(2, 7), (1, 3)]) == build_variant_key([(1, 3), (2, 7)])
        assert build_variant_key([(2, 7), (1, 3)]) == '1:3|2:7'

    def test_ids_are_sorted_as_strings(self):
        """Test that 10 sorts before 2 (string order)."""
        assert build_variant_key([(2, 1), (10, 5)]) == '10:5|2:1'

    def test_repeated_identical_selection_collapses(self):
        """Test a repeated identical selection appears once."""
        assert build_variant_key([(1, 3), (1, 3)]) == '1:3'

    def test_string_ids_accepted(self):
        """Test string ids give the same key as integers."""
        assert build_variant_key([('1', '3')]) == build_variant_key([(1, 3)])

    def test_conflicting_options_for_one_attribute(self):
        """Test two options for one attribute are rejected."""
        with pytest.raises(ValueError, match='Duplicate attribute selection'):
            build_variant_key([(1, 3), (1, 4)])

    @pytest.mark.parametrize('selection', [(None, 3), (1, None), ('', 3), (1, '')])
    def test_missing_id_rejected(self, selection):
        """Test blank or missing ids are rejected."""
        with pytest.raises(ValueError, match='Invalid selection'):
            build_variant_key([selection])

    def test_empty_selection_list(self):
        """Test no selections give an empty key."""
        assert build_variant_key([]) == ''
