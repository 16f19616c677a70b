import json
import time

from surveyor.artifact import RelationshipType, relate
from surveyor.cataloger import Cataloger, CatalogerRegistry, catalog_packages, catalog_source
from surveyor.cataloger.python import new_python_index_cataloger, new_python_package_cataloger
from surveyor.config import CatalogerConfig
from surveyor.pkg import Package, PackageType, PythonRequirementsMetadata
from surveyor.source import DirectoryResolver, Location, Source


class StaticCataloger(Cataloger):
    """Reports one go module at each of the given paths."""

    def __init__(self, name, paths, version="v1.2.3"):
        self._name = name
        self.paths = paths
        self.version = version

    def name(self):
        return self._name

    def catalog(self, resolver):
        packages = []
        for path in self.paths:
            packages.append(
                Package(
                    name="github.com/x/y",
                    version=self.version,
                    type=PackageType.GO_MODULE,
                    locations=resolver.files_by_path(path),
                )
            )
        return packages, []


class BrokenCataloger(Cataloger):
    def name(self):
        return "broken-cataloger"

    def catalog(self, resolver):
        raise RuntimeError("parser exploded")


class LinkingCataloger(Cataloger):
    def name(self):
        return "linking-cataloger"

    def catalog(self, resolver):
        parent = Package(name="parent", version="1")
        child = Package(name="child", version="1")
        edge = relate(parent, child, RelationshipType.DEPENDENCY_OF)
        return [parent, child], [edge, edge]


def make_tree(tmp_path):
    (tmp_path / "app").mkdir()
    (tmp_path / "app" / "go.mod").write_text("")
    (tmp_path / "vendor" / "lib").mkdir(parents=True)
    (tmp_path / "vendor" / "lib" / "go.sum").write_text("")
    return DirectoryResolver(str(tmp_path))


def test_identical_packages_from_two_catalogers_merge(tmp_path):
    resolver = make_tree(tmp_path)
    result = catalog_packages(
        resolver,
        [
            StaticCataloger("go-mod-file-cataloger", ["/app/go.mod"]),
            StaticCataloger("go-sum-cataloger", ["/vendor/lib/go.sum"]),
        ],
    )
    assert result.ok
    [p] = result.catalog.sorted()
    assert [loc.real_path for loc in p.locations] == ["/app/go.mod", "/vendor/lib/go.sum"]
    assert p.found_by == ["go-mod-file-cataloger", "go-sum-cataloger"]


def test_failing_cataloger_does_not_stop_the_others(tmp_path):
    resolver = make_tree(tmp_path)
    result = catalog_packages(
        resolver,
        [BrokenCataloger(), StaticCataloger("go-mod-file-cataloger", ["/app/go.mod"])],
        parallelism=2,
    )
    assert not result.ok
    [failure] = result.failures
    assert failure.cataloger == "broken-cataloger"
    assert isinstance(failure.error, RuntimeError)
    assert "parser exploded" in str(failure)
    assert result.catalog.package_count() == 1


def test_evident_by_relationships(tmp_path):
    resolver = make_tree(tmp_path)
    catalogers = [StaticCataloger("go-mod-file-cataloger", ["/app/go.mod"])]

    result = catalog_packages(resolver, catalogers)
    [p] = result.catalog.sorted()
    [rel] = result.relationships
    assert rel.type == RelationshipType.EVIDENT_BY
    assert (rel.from_id, rel.to_id) == (p.id, Location.new("/app/go.mod").coordinates.id())

    assert catalog_packages(resolver, catalogers, evident_by=False).relationships == []


def test_duplicate_relationships_collapse(tmp_path):
    result = catalog_packages(make_tree(tmp_path), [LinkingCataloger()], evident_by=False)
    assert [r.type for r in result.relationships] == [RelationshipType.DEPENDENCY_OF]


def test_result_is_independent_of_parallelism(tmp_path):
    resolver = make_tree(tmp_path)

    def run(parallelism):
        catalogers = [
            StaticCataloger(f"static-{i}-cataloger", ["/app/go.mod", "/vendor/lib/go.sum"], f"v1.{i}.0")
            for i in range(8)
        ] + [LinkingCataloger(), BrokenCataloger()]
        result = catalog_packages(resolver, catalogers, parallelism=parallelism)
        packages = [(p.id, p.name, p.version, p.found_by, [str(loc) for loc in p.locations]) for p in result.catalog]
        relationships = [(r.from_id, r.to_id, r.type.value, json.dumps(r.data)) for r in result.relationships]
        return packages, relationships, [f.cataloger for f in result.failures]

    assert run(1) == run(4) == run(16)


def test_catalog_source_selects_by_scheme_and_pattern(tmp_path):
    make_tree(tmp_path)
    registry = CatalogerRegistry(
        image=[StaticCataloger("image-only-cataloger", ["/app/go.mod"])],
        directory=[
            StaticCataloger("go-mod-file-cataloger", ["/app/go.mod"]),
            StaticCataloger("other-cataloger", ["/app/go.mod"], "v9.9.9"),
        ],
    )
    result = catalog_source(
        Source.from_directory(str(tmp_path)), CatalogerConfig(catalogers=["go"]), registry
    )
    [p] = result.catalog.sorted()
    assert p.version == "v1.2.3"
    assert p.found_by == ["go-mod-file-cataloger"]


class RequirementCataloger(Cataloger):
    """Reports req==1 with its own license and extras, optionally after a delay."""

    def __init__(self, name, license_name, extra, delay=0.0):
        self._name = name
        self.license_name = license_name
        self.extra = extra
        self.delay = delay

    def name(self):
        return self._name

    def catalog(self, resolver):
        time.sleep(self.delay)
        package = Package(
            name="req",
            version="1",
            type=PackageType.PYTHON,
            licenses=[self.license_name],
            metadata=PythonRequirementsMetadata(name="req", extras=[self.extra]),
        )
        return [package], []


def test_merge_does_not_depend_on_completion_order(tmp_path):
    resolver = make_tree(tmp_path)

    def run(parallelism):
        catalogers = [
            RequirementCataloger("slow-cataloger", "MIT", "x", delay=0.3),
            RequirementCataloger("fast-cataloger", "BSD", "y"),
        ]
        [p] = catalog_packages(resolver, catalogers, parallelism=parallelism).catalog.sorted()
        return p.id, p.licenses, p.metadata.extras, p.found_by

    serial = run(1)
    assert serial == run(2)
    # the first cataloger in the given order supplies the metadata
    assert serial[1:] == (["BSD", "MIT"], ["x"], ["fast-cataloger", "slow-cataloger"])


def test_requirement_and_installed_distribution_stay_separate(tmp_path):
    (tmp_path / "requirements.txt").write_text("requests==2.0\n")
    dist = tmp_path / "site" / "requests-2.0.dist-info"
    dist.mkdir(parents=True)
    (dist / "METADATA").write_text("Metadata-Version: 2.1\nName: requests\nVersion: 2.0\n")
    (dist / "RECORD").write_text("requests/__init__.py,,\n")
    resolver = DirectoryResolver(str(tmp_path))

    def shapes(catalogers):
        packages = catalog_packages(resolver, catalogers).catalog.sorted()
        return sorted((p.metadata_type.value, p.id) for p in packages)

    forward = shapes([new_python_index_cataloger(), new_python_package_cataloger()])
    backward = shapes([new_python_package_cataloger(), new_python_index_cataloger()])
    assert forward == backward
    assert [shape for shape, _ in forward] == ["PythonPackageMetadata", "PythonRequirementsMetadata"]
    assert forward[0][1] != forward[1][1]
