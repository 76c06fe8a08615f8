"""
Tests for computer identifier normalization.
"""

from polarissync.domain.identifiers import identifier_set, normalize


class TestNormalize:
    """Test cases for normalize()."""

    def test_case_insensitive(self):
        """Differently cased names map to the same key."""
        assert normalize("abc") == normalize("ABC") == normalize("AbC") == "ABC"

    def test_idempotent(self):
        """Normalizing twice changes nothing."""
        for raw in ["circ-desk-01", "Lab-PC-7", "ÉCOLE-PC", "already-UPPER"]:
            assert normalize(normalize(raw)) == normalize(raw)

    def test_whitespace_is_preserved(self):
        """Sources hand over trimmed names; the normalizer does not trim."""
        assert normalize(" pc1 ") == " PC1 "

    def test_empty_string(self):
        """Normalizer is total, even for empty input."""
        assert normalize("") == ""


class TestIdentifierSet:
    """Test cases for identifier_set()."""

    def test_normalizes_and_deduplicates(self):
        result = identifier_set(["pc1", "PC1", "Pc2"])
        assert result == frozenset({"PC1", "PC2"})

    def test_drops_blank_and_null_names(self):
        """No empty or whitespace-only identifier ever enters a set."""
        result = identifier_set(["pc1", "", "   ", None, "\t"])
        assert result == frozenset({"PC1"})

    def test_empty_input(self):
        assert identifier_set([]) == frozenset()
