"""Tests for asset selection."""

import re

import pytest

from asset_uploader.errors import InvalidRuleError
from asset_uploader.filtering import (
    UPLOAD_IGNORES,
    filter_allowed_files,
    is_ignored_file,
    is_include_and_not_exclude,
)
from asset_uploader.models import AssetFile
from asset_uploader.rules import ListMode, to_rule

NAMES = ["index.html", "app.js", "logo.png", ".DS_Store"]


@pytest.fixture
def assets():
    return [AssetFile(name=name, local_path=f"/dist/{name}") for name in NAMES]


def names(files):
    return [file.name for file in files]


class TestIgnoredFiles:
    """Test the always-ignored platform files."""

    def test_ds_store_ignored(self):
        """Test .DS_Store is ignored anywhere in the name."""
        assert UPLOAD_IGNORES == [r"\.DS_Store"]
        assert is_ignored_file(".DS_Store")
        assert is_ignored_file("images/.DS_Store")

    def test_regular_files_not_ignored(self):
        """Test ordinary assets pass."""
        assert not is_ignored_file("app.js")
        assert not is_ignored_file("DS_Store.txt")


class TestIncludeAndNotExclude:
    """Test the include / exclude decision for a single name."""

    def test_no_rules_allows_everything(self):
        assert is_include_and_not_exclude("anything")

    def test_exclude_wins_over_include(self):
        """Test a name matching both rules is rejected."""
        assert not is_include_and_not_exclude("app.js", include=r"\.js$", exclude=r"^app")

    def test_include_only(self):
        assert is_include_and_not_exclude("app.js", include=r"\.js$")
        assert not is_include_and_not_exclude("app.css", include=r"\.js$")


class TestFilterAllowedFiles:
    """Test filtering of emitted asset lists."""

    def test_no_rules_drops_only_ignored(self, assets):
        """Test that without rules only .DS_Store is dropped."""
        assert names(filter_allowed_files(assets)) == ["index.html", "app.js", "logo.png"]

    def test_include(self, assets):
        """Test an include regex keeps only matching names."""
        assert names(filter_allowed_files(assets, include=r"\.png$")) == ["logo.png"]

    def test_exclude(self, assets):
        """Test an exclude regex drops matching names."""
        result = filter_allowed_files(assets, exclude=r"\.png$")
        assert names(result) == ["index.html", "app.js"]

    def test_include_cannot_resurrect_ignored(self, assets):
        """Test ignored files stay out even when explicitly included."""
        assert filter_allowed_files(assets, include=r"DS_Store") == []

    def test_compiled_and_callable_rules(self, assets):
        """Test every rule kind is accepted."""
        result = filter_allowed_files(
            assets,
            include=[re.compile(r"\.(js|png)$"), lambda name: name == "index.html"],
            exclude=lambda name: name.startswith("logo"),
        )
        assert names(result) == ["index.html", "app.js"]

    def test_all_mode_rules(self, assets):
        """Test ALL lists require every child to match."""
        include = to_rule([r"^app", r"\.js$"], mode=ListMode.ALL)
        assert names(filter_allowed_files(assets, include=include)) == ["app.js"]

    def test_preserves_order(self):
        """Test output order follows input order."""
        files = [AssetFile(n, f"/d/{n}") for n in ["z.js", "a.js", "m.js"]]
        assert names(filter_allowed_files(files, include=r"\.js$")) == ["z.js", "a.js", "m.js"]

    def test_idempotent(self, assets):
        """Test filtering a filtered list changes nothing."""
        once = filter_allowed_files(assets, include=r"\.(html|js)$", exclude=r"^index")
        twice = filter_allowed_files(once, include=r"\.(html|js)$", exclude=r"^index")
        assert once == twice

    def test_invalid_rule(self, assets):
        """Test an invalid rule raises before anything is filtered."""
        with pytest.raises(InvalidRuleError):
            filter_allowed_files(assets, include=123)

    def test_empty_input(self):
        assert filter_allowed_files([]) == []
