"""
Tests for finding and ordering the modules to compile
"""
from nativebuild.build.units import discover_units, find_modules_in_dir, parse_precompile
from tests.utils import store_files


def test_explicit_units_only():
    assert discover_units("app.core", "a.b,a.c", []) == ["a.b", "a.c", "app.core"]


def test_duplicates_are_collapsed():
    assert discover_units("app.core", "app.core", []) == ["app.core"]
    assert discover_units("app.core", "a,a,,b", []) == ["a", "b", "app.core"]


def test_parse_precompile():
    assert parse_precompile(None) == []
    assert parse_precompile("") == []
    assert parse_precompile(" a , b,") == ["a", "b"]


def test_find_modules_in_dir(tmp_path):
    store_files({
        "app/__init__.py": "",
        "app/core.py": "",
        "app/sub/util.py": "",
        "app/__pycache__/core.py": "",
        "app/data.txt": "",
        "app/not-a-module.py": "",
        ".hidden/x.py": "",
        "__init__.py": "",
        "top.py": ""
    }, str(tmp_path))
    assert find_modules_in_dir(str(tmp_path)) == ["top", "app", "app.core", "app.sub.util"]


def test_missing_source_root(tmp_path):
    assert find_modules_in_dir(str(tmp_path / "missing")) == []
    assert discover_units("demo", None, [str(tmp_path / "missing")]) == ["demo"]


def test_discovered_units_are_appended(tmp_path):
    store_files({"demo/__init__.py": "", "demo/util.py": "", "other.py": ""}, str(tmp_path))
    assert discover_units("demo", "other", [str(tmp_path)]) == ["other", "demo", "demo.util"]
