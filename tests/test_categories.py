"""Tests for the category enumeration."""

import pytest

from fourd.core.categories import Category


class TestCategory:
    def test_list_titles(self):
        assert [c.list_title for c in Category] == [
            "4D - Do",
            "4D - Defer",
            "4D - Delegate",
            "4D - Drop",
        ]

    def test_shortcuts_and_icons(self):
        assert [c.shortcut for c in Category] == ["1", "2", "3", "4"]
        assert Category.DELEGATE.icon == "3.square"
        assert Category.DO.label_with_shortcut == "⌘1 Do"

    def test_buckets(self):
        assert Category.DO.bucket == "🔥 Do Today"
        assert Category.DEFER.bucket == "📅 Deferred"
        assert Category.DELEGATE.bucket == "👥 Delegated"
        assert Category.DROP.bucket == "🗂 Dropped"

    def test_from_shortcut(self):
        assert Category.from_shortcut("2") is Category.DEFER
        assert Category.from_shortcut("5") is None

    def test_from_list_title(self):
        assert Category.from_list_title("4D - Drop") is Category.DROP
        assert Category.from_list_title("Inbox") is None

    @pytest.mark.parametrize("value", ["delegate", "Delegate", "3", " DELEGATE "])
    def test_parse_lenient(self, value):
        assert Category.parse(value) is Category.DELEGATE

    def test_parse_unknown(self):
        assert Category.parse("someday") is None
