"""
Tests for the search path passed to native-image
"""
from nativebuild.build.classpath import native_image_classpath
from nativebuild.utils.environment import Environment


def _environment(*entries: str) -> Environment:
    return Environment(env={}, search_path=list(entries), path_separator=":")


def test_compile_path_is_prepended():
    env = _environment("/usr/lib/python3/site-packages", "/home/user/lib")
    assert native_image_classpath("classes", env) == "classes:/usr/lib/python3/site-packages:/home/user/lib"


def test_own_entries_are_removed():
    env = _environment("/venv/src/nativebuild", "/venv/lib/site-packages", "/venv/nativebuild-0.1.egg")
    assert native_image_classpath("classes", env) == "classes:/venv/lib/site-packages"


def test_classpath_is_idempotent():
    env = _environment("/a", "/b/nativebuild", "/c")
    assert native_image_classpath("classes", env) == native_image_classpath("classes", env) == "classes:/a:/c"
    assert env.search_path() == "/a:/b/nativebuild:/c"


def test_empty_search_path():
    assert native_image_classpath("classes", _environment()) == "classes"


def test_working_directory_entry(tmp_path, monkeypatch):
    monkeypatch.chdir(str(tmp_path))
    assert native_image_classpath("classes", _environment("", "/a")) == "classes:{}:/a".format(str(tmp_path))
