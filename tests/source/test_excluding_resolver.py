# pylint: disable=redefined-outer-name
import io
from typing import BinaryIO, Iterator, List, Optional

import pytest

from surveyor.errors import NotFoundError
from surveyor.source import ExcludingResolver, FileMetadata, FileResolver, FileType, Location


class MockResolver(FileResolver):
    """Answers every query with the same fixed set of paths."""

    def __init__(self, paths):
        self.paths = list(paths)

    def _all(self) -> List[Location]:
        return [Location.new(p) for p in self.paths]

    def files_by_path(self, *paths: str) -> List[Location]:
        return [Location.new(p) for p in paths if p in self.paths]

    def files_by_glob(self, *patterns: str) -> List[Location]:
        return self._all()

    def files_by_mime_type(self, *types: str) -> List[Location]:
        return self._all()

    def files_by_extension(self, *extensions: str) -> List[Location]:
        return self._all()

    def files_by_basename(self, *names: str) -> List[Location]:
        return self._all()

    def files_by_basename_glob(self, *patterns: str) -> List[Location]:
        return self._all()

    def file_contents_by_location(self, location: Location) -> BinaryIO:
        return io.BytesIO(location.real_path.encode())

    def file_metadata_by_location(self, location: Location) -> FileMetadata:
        return FileMetadata(type=FileType.REGULAR)

    def has_path(self, path: str) -> bool:
        return path in self.paths

    def relative_file_by_path(self, base: Location, path: str) -> Optional[Location]:
        return Location.new(path)

    def all_locations(self) -> Iterator[Location]:
        return iter(self._all())


@pytest.fixture
def resolver():
    return ExcludingResolver(MockResolver(["/a", "/b", "/c"]), lambda path: path == "/b")


def test_excluded_path_is_dropped_from_every_query(resolver):
    expected = ["/a", "/c"]
    assert [loc.real_path for loc in resolver.files_by_glob("**")] == expected
    assert [loc.real_path for loc in resolver.files_by_mime_type("text/plain")] == expected
    assert [loc.real_path for loc in resolver.files_by_extension("")] == expected
    assert [loc.real_path for loc in resolver.files_by_basename("b")] == expected
    assert [loc.real_path for loc in resolver.files_by_basename_glob("*")] == expected
    assert [loc.real_path for loc in resolver.all_locations()] == expected
    assert resolver.files_by_path("/b") == []
    assert resolver.relative_file_by_path(Location.new("/a"), "/b") is None


def test_excluded_path_is_absent(resolver):
    assert not resolver.has_path("/b")
    assert resolver.has_path("/a")
    with pytest.raises(NotFoundError):
        resolver.file_contents_by_location(Location.new("/b"))
    with pytest.raises(NotFoundError):
        resolver.file_metadata_by_location(Location.new("/b"))


def test_visible_path_is_served(resolver):
    with resolver.file_contents_by_location(Location.new("/c")) as reader:
        assert reader.read() == b"/c"
