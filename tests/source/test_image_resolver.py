# pylint: disable=redefined-outer-name
import pytest

from surveyor.errors import NotFoundError
from surveyor.source import ImageSquashResolver, Layer, Location


def write(root, path, content=""):
    target = root / path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content)


@pytest.fixture
def layers(tmp_path):
    base = tmp_path / "base"
    write(base, "etc/os-release", "ID=alpine\n")
    write(base, "etc/motd", "welcome")
    write(base, "usr/lib/python3/old.py")
    write(base, "var/cache/a")
    write(base, "var/cache/b")

    top = tmp_path / "top"
    write(top, "etc/motd", "replaced")
    write(top, "etc/.wh.os-release")
    write(top, "var/cache/.wh..wh..opq")
    write(top, "var/cache/c")
    write(top, "app/main.py")
    return [Layer("sha256:base", str(base)), Layer("sha256:top", str(top))]


def test_later_layer_replaces_file(layers):
    resolver = ImageSquashResolver(layers)
    [location] = resolver.files_by_path("/etc/motd")
    assert location.file_system_id == "sha256:top"
    with resolver.file_contents_by_location(location) as reader:
        assert reader.read() == b"replaced"


def test_whiteout_hides_lower_file(layers):
    resolver = ImageSquashResolver(layers)
    assert resolver.files_by_path("/etc/os-release") == []
    assert not resolver.has_path("/etc/os-release")
    # the marker itself is never visible
    assert resolver.files_by_basename(".wh.os-release") == []


def test_opaque_whiteout_hides_lower_directory_content(layers):
    resolver = ImageSquashResolver(layers)
    paths = sorted(loc.real_path for loc in resolver.files_by_glob("/var/cache/*"))
    assert paths == ["/var/cache/c"]


def test_file_system_id_is_the_providing_layer(layers):
    resolver = ImageSquashResolver(layers)
    by_path = {loc.real_path: loc.file_system_id for loc in resolver.all_locations()}
    assert by_path == {
        "/app/main.py": "sha256:top",
        "/etc/motd": "sha256:top",
        "/usr/lib/python3/old.py": "sha256:base",
        "/var/cache/c": "sha256:top",
    }


def test_location_of_a_replaced_layer_is_not_found(layers):
    resolver = ImageSquashResolver(layers)
    with pytest.raises(NotFoundError):
        resolver.file_contents_by_location(Location.new("/etc/motd", "sha256:base"))


def test_missing_layer_directory(tmp_path):
    with pytest.raises(NotADirectoryError):
        ImageSquashResolver([Layer("sha256:gone", str(tmp_path / "gone"))])
