"""Tests for remote key construction."""

import pytest

from asset_uploader.paths import add_trailing_separator, build_remote_key, normalize_asset_name


class TestNormalizeAssetName:
    """Test stripping of leading relative segments."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("../assets/logo.png", "assets/logo.png"),
            ("../../shared/font.woff", "shared/font.woff"),
            ("./app.js", "app.js"),
            (".././mixed/a.css", "mixed/a.css"),
            ("static/app.js", "static/app.js"),
            ("static/../app.js", "static/../app.js"),
            ("/../assets/logo.png", "assets/logo.png"),
            (".//../app.js", "app.js"),
        ],
    )
    def test_leading_segments_stripped(self, name, expected):
        assert normalize_asset_name(name) == expected

    def test_windows_separators(self):
        """Test backslashes are turned into forward slashes."""
        assert normalize_asset_name("..\\assets\\logo.png") == "assets/logo.png"

    def test_dotfiles_kept(self):
        """Test names starting with a dot are not mangled."""
        assert normalize_asset_name(".htaccess") == ".htaccess"


class TestAddTrailingSeparator:
    """Test base path normalization."""

    @pytest.mark.parametrize(
        "base,expected",
        [("", ""), ("static", "static/"), ("static/", "static/"), ("static//", "static/")],
    )
    def test_exactly_one_separator(self, base, expected):
        assert add_trailing_separator(base) == expected


class TestBuildRemoteKey:
    """Test joining base paths and names."""

    def test_no_base_path(self):
        assert build_remote_key("", "index.html") == "index.html"

    def test_base_path_without_separator(self):
        """Test a separator is inserted between base and name."""
        assert build_remote_key("static", "app.js") == "static/app.js"

    def test_parent_segments_stay_inside_base(self):
        """Test names outside the output directory land under the base path."""
        assert build_remote_key("static", "../assets/logo.png") == "static/assets/logo.png"

    def test_leading_slash_removed(self):
        """Test keys never start with a separator."""
        assert build_remote_key("", "/index.html") == "index.html"
        assert build_remote_key("/", "index.html") == "index.html"

    def test_name_leading_slash_with_base(self):
        assert build_remote_key("static/", "/app.js") == "static/app.js"

    def test_rooted_traversal_stays_inside_base(self):
        """Test a rooted "../" name cannot climb out of the base path."""
        key = build_remote_key("static/", "/../assets/logo.png")
        assert key == "static/assets/logo.png"
        assert ".." not in key.split("/")
