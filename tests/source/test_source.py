import pytest

from surveyor.source import (
    DirectoryResolver,
    ExcludingResolver,
    ImageMetadata,
    Layer,
    Scheme,
    Source,
    exclusion_function,
)


@pytest.mark.parametrize("pattern", ["/tmp/*", "./node_modules/**", "*/test/*", "**/*.pyc"])
def test_exclusion_function_accepts_anchored_patterns(pattern):
    assert exclusion_function([pattern]) is not None


@pytest.mark.parametrize("pattern", ["tmp/*", "*.pyc", "node_modules"])
def test_exclusion_function_rejects_unanchored_patterns(pattern):
    with pytest.raises(ValueError):
        exclusion_function([pattern])


def test_exclusion_function_without_patterns():
    assert exclusion_function([]) is None


def test_exclusion_function_matching():
    excluded = exclusion_function(["./node_modules/**", "**/*.pyc", "*/test/*"])
    assert excluded("/node_modules/left-pad/package.json")
    assert not excluded("/app/node_modules/left-pad/package.json")
    assert excluded("/usr/lib/python3/mod.pyc")
    assert excluded("/pkg/test/fixture.txt")
    assert not excluded("/pkg/src/test.txt")


def test_directory_source(tmp_path):
    (tmp_path / "go.mod").write_text("module example.com/m\n")
    source = Source.from_path(str(tmp_path))
    assert source.scheme == Scheme.DIRECTORY
    assert source.metadata.path == str(tmp_path)
    assert source.metadata.id == Source.from_directory(str(tmp_path)).metadata.id
    resolver = source.file_resolver()
    assert isinstance(resolver, DirectoryResolver)
    # the resolver is built once
    assert source.file_resolver() is resolver


def test_file_source(tmp_path):
    path = tmp_path / "requirements.txt"
    path.write_text("requests==2.31.0\n")
    source = Source.from_path(str(path))
    assert source.scheme == Scheme.FILE
    assert [loc.real_path for loc in source.file_resolver().all_locations()] == ["/requirements.txt"]


def test_missing_path(tmp_path):
    with pytest.raises(FileNotFoundError):
        Source.from_path(str(tmp_path / "missing"))


def test_exclusions_wrap_the_resolver(tmp_path):
    (tmp_path / "keep.txt").write_text("")
    (tmp_path / "drop.txt").write_text("")
    source = Source.from_directory(str(tmp_path), exclusions=["./drop.txt"])
    resolver = source.file_resolver()
    assert isinstance(resolver, ExcludingResolver)
    assert [loc.real_path for loc in resolver.all_locations()] == ["/keep.txt"]


def test_image_source(tmp_path):
    layer = tmp_path / "layer"
    (layer / "etc").mkdir(parents=True)
    (layer / "etc" / "alpine-release").write_text("3.19.1\n")
    image = ImageMetadata(user_input="alpine:3.19", layers=[Layer("sha256:abc", str(layer))])
    source = Source.from_image(image)
    assert source.scheme == Scheme.IMAGE
    assert source.metadata.image_metadata is image
    [location] = source.file_resolver().files_by_path("/etc/alpine-release")
    assert location.file_system_id == "sha256:abc"
