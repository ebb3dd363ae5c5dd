"""Unit tests for tag normalization (pure functions, no DB)."""
from app.services.tags import normalize_tags, split_tag_filter


class TestNormalizeTags:
    def test_lowercases_trims_and_dedupes(self):
        assert normalize_tags("A, a ,B,b") == "a,b"

    def test_keeps_first_seen_order(self):
        assert normalize_tags("Zoo, apple, zoo") == "zoo,apple"

    def test_idempotent(self):
        once = normalize_tags(" Beach,Sunset , beach,,FAMILY ")
        assert normalize_tags(once) == once

    def test_empty_input_is_none(self):
        assert normalize_tags(None) is None
        assert normalize_tags("") is None
        assert normalize_tags(" , ,") is None


class TestSplitTagFilter:
    def test_splits_and_drops_blanks(self):
        assert split_tag_filter("cat, dog,,") == ["cat", "dog"]

    def test_none(self):
        assert split_tag_filter(None) == []
