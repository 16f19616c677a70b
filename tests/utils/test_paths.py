from pathlib import PurePosixPath

from surveyor.utils.ids import stable_id
from surveyor.utils.paths import basename_posix, normalize_path, root_path


def test_single_string_path():
    """Normalize a single Windows-style path string to POSIX format."""
    assert normalize_path("usr\\lib\\libc.so") == "usr/lib/libc.so"


def test_multiple_parts():
    assert normalize_path("usr", "lib", "libc.so") == "usr/lib/libc.so"


def test_pureposixpath_with_literal_backslash():
    """If given a PurePosixPath, a literal backslash should be preserved."""
    assert normalize_path(PurePosixPath("foo\\bar")) == "foo\\bar"


def test_root_path_anchors_and_collapses():
    assert root_path("app/go.mod") == "/app/go.mod"
    assert root_path("/app/./go.mod") == "/app/go.mod"
    assert root_path("/app/vendor/../go.mod") == "/app/go.mod"


def test_root_path_never_climbs_above_root():
    assert root_path("/a/../../b") == "/b"
    assert root_path("..") == "/"
    assert root_path() == "/"


def test_basename_posix():
    assert basename_posix("/usr/lib/libc.so") == "libc.so"
    assert basename_posix("C:\\Windows\\notepad.exe") == "notepad.exe"
    assert basename_posix("/usr/lib/") == "lib"
    assert basename_posix("/") == ""


def test_stable_id_ignores_key_order():
    assert stable_id({"a": 1, "b": [1, 2]}) == stable_id({"b": [1, 2], "a": 1})
    assert stable_id({"a": 1}) != stable_id({"a": 2})
    assert len(stable_id("x")) == 16
