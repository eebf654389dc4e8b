"""Tests for MavenRepositoryClient against file:// repositories built in tmp_path."""

from unittest.mock import patch

from registry.maven.client import MavenRepositoryClient, module_path
from resolution.orchestrator import resolve
from versioning.models import RepoLocation
from versioning.parser import parse_coordinate

POM_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  {parent}
  <groupId>{group}</groupId>
  <artifactId>{artifact}</artifactId>
  <version>{version}</version>
  <packaging>{packaging}</packaging>
  {body}
</project>
"""


def _dependency(group, artifact, version=None, scope=None, optional=False, type_=None):
    parts = [f"<groupId>{group}</groupId>", f"<artifactId>{artifact}</artifactId>"]
    if version:
        parts.append(f"<version>{version}</version>")
    if scope:
        parts.append(f"<scope>{scope}</scope>")
    if type_:
        parts.append(f"<type>{type_}</type>")
    if optional:
        parts.append("<optional>true</optional>")
    return "<dependency>" + "".join(parts) + "</dependency>"


def publish(root, coordinate, packaging="jar", dependencies=(), files=None, body="", parent=""):
    """Write a POM (and artifact files) for ``coordinate`` into repository ``root``."""
    c = parse_coordinate(coordinate)
    directory = root / module_path(c.group, c.artifact, c.version)
    directory.mkdir(parents=True, exist_ok=True)
    if dependencies:
        body += "<dependencies>" + "".join(dependencies) + "</dependencies>"
    (directory / f"{c.artifact}-{c.version}.pom").write_text(
        POM_TEMPLATE.format(
            group=c.group, artifact=c.artifact, version=c.version,
            packaging=packaging, body=body, parent=parent,
        ),
        encoding="utf-8",
    )
    for extension in (files if files is not None else [packaging]):
        (directory / f"{c.artifact}-{c.version}.{extension}").write_bytes(b"binary")


def write_metadata(root, group, artifact, versions):
    directory = root / module_path(group, artifact)
    directory.mkdir(parents=True, exist_ok=True)
    items = "".join(f"<version>{v}</version>" for v in versions)
    (directory / "maven-metadata.xml").write_text(
        f"<metadata><groupId>{group}</groupId><artifactId>{artifact}</artifactId>"
        f"<versioning><versions>{items}</versions></versioning></metadata>",
        encoding="utf-8",
    )


def _repo(path):
    return RepoLocation(url=path.as_uri(), name=path.name)


def _packages(artifacts):
    return {a.package for a in artifacts}


class TestModulePath:
    """Tests for module_path."""

    def test_with_version(self):
        assert module_path("com.android.support", "appcompat-v7", "26.0.1") == "com/android/support/appcompat-v7/26.0.1"

    def test_without_version(self):
        assert module_path("com.example", "foo") == "com/example/foo"


class TestLookup:
    """Tests for MavenRepositoryClient.lookup."""

    def test_packaging_determines_artifact_type(self, tmp_path):
        publish(tmp_path, "com.example:widget:1.0", packaging="aar")

        found = MavenRepositoryClient().lookup([parse_coordinate("com.example:widget:1.0")], [_repo(tmp_path)])

        assert _packages(found) == {"com.example:widget:1.0@aar"}
        artifact = next(iter(found))
        assert artifact.location == (tmp_path / "com/example/widget/1.0/widget-1.0.aar").as_uri()
        assert artifact.repository == tmp_path.as_uri()

    def test_transitive_dependencies_are_included(self, tmp_path):
        publish(tmp_path, "com.example:lib:1.0")
        publish(tmp_path, "com.example:app:1.0", dependencies=[_dependency("com.example", "lib", "1.0")])

        found = MavenRepositoryClient().lookup([parse_coordinate("com.example:app:1.0")], [_repo(tmp_path)])

        assert _packages(found) == {"com.example:app:1.0@jar", "com.example:lib:1.0@jar"}

    def test_non_transitive_client(self, tmp_path):
        publish(tmp_path, "com.example:lib:1.0")
        publish(tmp_path, "com.example:app:1.0", dependencies=[_dependency("com.example", "lib", "1.0")])

        found = MavenRepositoryClient(transitive=False).lookup(
            [parse_coordinate("com.example:app:1.0")], [_repo(tmp_path)]
        )

        assert _packages(found) == {"com.example:app:1.0@jar"}

    def test_conflicts_select_highest_version(self, tmp_path):
        publish(tmp_path, "com.example:lib:1.0")
        publish(tmp_path, "com.example:lib:1.1")
        publish(tmp_path, "com.example:other:1.0", dependencies=[_dependency("com.example", "lib", "1.1")])
        publish(tmp_path, "com.example:app:1.0", dependencies=[
            _dependency("com.example", "lib", "1.0"),
            _dependency("com.example", "other", "1.0"),
        ])

        found = MavenRepositoryClient().lookup([parse_coordinate("com.example:app:1.0")], [_repo(tmp_path)])

        assert _packages(found) == {
            "com.example:app:1.0@jar",
            "com.example:lib:1.1@jar",
            "com.example:other:1.0@jar",
        }

    def test_test_and_optional_dependencies_are_skipped(self, tmp_path):
        publish(tmp_path, "junit:junit:4.12")
        publish(tmp_path, "com.example:extra:1.0")
        publish(tmp_path, "com.example:rt:1.0")
        publish(tmp_path, "com.example:app:1.0", dependencies=[
            _dependency("junit", "junit", "4.12", scope="test"),
            _dependency("com.example", "extra", "1.0", optional=True),
            _dependency("com.example", "rt", "1.0", scope="runtime"),
        ])

        found = MavenRepositoryClient().lookup([parse_coordinate("com.example:app:1.0")], [_repo(tmp_path)])

        assert _packages(found) == {"com.example:app:1.0@jar", "com.example:rt:1.0@jar"}

    def test_dependency_type_selects_extension(self, tmp_path):
        publish(tmp_path, "com.example:ui:2.0", packaging="jar", files=["aar"])
        publish(tmp_path, "com.example:app:1.0", dependencies=[_dependency("com.example", "ui", "2.0", type_="aar")])

        found = MavenRepositoryClient().lookup([parse_coordinate("com.example:app:1.0")], [_repo(tmp_path)])

        assert "com.example:ui:2.0@aar" in _packages(found)

    def test_dynamic_versions_use_metadata(self, tmp_path):
        for version in ("1.0", "1.1", "2.0"):
            publish(tmp_path, f"com.example:lib:{version}")
        write_metadata(tmp_path, "com.example", "lib", ["1.0", "1.1", "2.0"])
        client = MavenRepositoryClient()

        assert _packages(client.lookup([parse_coordinate("com.example:lib:1.+")], [_repo(tmp_path)])) == {
            "com.example:lib:1.1@jar"
        }
        assert _packages(client.lookup([parse_coordinate("com.example:lib")], [_repo(tmp_path)])) == {
            "com.example:lib:2.0@jar"
        }

    def test_parent_properties_and_managed_versions(self, tmp_path):
        publish(tmp_path, "com.example:lib:1.1")
        publish(
            tmp_path, "com.example:parent:3", packaging="pom", files=[],
            body=(
                "<properties><lib.version>1.1</lib.version></properties>"
                "<dependencyManagement><dependencies>"
                + _dependency("${project.groupId}", "lib", "${lib.version}")
                + "</dependencies></dependencyManagement>"
            ),
        )
        parent = (
            "<parent><groupId>com.example</groupId><artifactId>parent</artifactId>"
            "<version>3</version></parent>"
        )
        publish(
            tmp_path, "com.example:app:1.0", parent=parent,
            dependencies=[_dependency("${project.groupId}", "lib")],
        )

        found = MavenRepositoryClient().lookup([parse_coordinate("com.example:app:1.0")], [_repo(tmp_path)])

        assert _packages(found) == {"com.example:app:1.0@jar", "com.example:lib:1.1@jar"}

    def test_pom_packaging_has_no_artifact(self, tmp_path):
        publish(tmp_path, "com.example:bom:1.0", packaging="pom", files=[])

        assert MavenRepositoryClient().lookup([parse_coordinate("com.example:bom:1.0")], [_repo(tmp_path)]) == set()

    def test_pom_typed_dependency_has_no_artifact(self, tmp_path):
        publish(tmp_path, "com.example:bom:1.0", packaging="pom", files=[])
        publish(tmp_path, "com.example:app:1.0", dependencies=[_dependency("com.example", "bom", "1.0", type_="pom")])

        found = MavenRepositoryClient().lookup([parse_coordinate("com.example:app:1.0")], [_repo(tmp_path)])

        assert _packages(found) == {"com.example:app:1.0@jar"}

    def test_artifact_without_pom_defaults_to_jar(self, tmp_path):
        directory = tmp_path / "com/example/bare/1.0"
        directory.mkdir(parents=True)
        (directory / "bare-1.0.jar").write_bytes(b"binary")

        found = MavenRepositoryClient().lookup([parse_coordinate("com.example:bare:1.0")], [_repo(tmp_path)])

        assert _packages(found) == {"com.example:bare:1.0@jar"}

    def test_first_repository_with_the_file_wins(self, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        second = tmp_path / "second"
        third = tmp_path / "third"
        publish(second, "com.example:lib:1.0")
        publish(third, "com.example:lib:1.0")

        found = MavenRepositoryClient().lookup(
            [parse_coordinate("com.example:lib:1.0")], [_repo(empty), _repo(second), _repo(third)]
        )

        assert [a.repository for a in found] == [second.as_uri()]

    def test_unknown_coordinate_resolves_to_nothing(self, tmp_path):
        assert MavenRepositoryClient().lookup([parse_coordinate("com.example:nope:1.0")], [_repo(tmp_path)]) == set()

    def test_fallback_classifier_file(self, tmp_path):
        publish(tmp_path, "com.google.firebase:firebase-app-unity:4.3.0", packaging="srcaar")
        repos = [_repo(tmp_path)]
        client = MavenRepositoryClient()

        assert client.lookup([parse_coordinate("com.google.firebase:firebase-app-unity:4.3.0")], repos) == set()

        resolved = resolve({parse_coordinate("com.google.firebase:firebase-app-unity:4.3.0")}, repos, client)
        assert _packages(resolved) == {"com.google.firebase:firebase-app-unity:4.3.0@srcaar"}

    def test_remote_repository(self):
        pom = POM_TEMPLATE.format(
            group="com.example", artifact="lib", version="1.0", packaging="aar", body="", parent=""
        )
        base = "https://repo.example/maven2"

        def fake_get(url, **kwargs):
            if url == f"{base}/com/example/lib/1.0/lib-1.0.pom":
                return 200, {}, pom
            return 404, {}, ""

        class Head:
            status_code = 200

        with patch("registry.maven.client.http_client.robust_get", side_effect=fake_get), \
                patch("registry.maven.client.http_client.safe_head", return_value=Head()) as head:
            found = MavenRepositoryClient().lookup(
                [parse_coordinate("com.example:lib:1.0")], [RepoLocation(url=base, name="remote")]
            )

        assert _packages(found) == {"com.example:lib:1.0@aar"}
        assert next(iter(found)).location == f"{base}/com/example/lib/1.0/lib-1.0.aar"
        head.assert_called_once_with(f"{base}/com/example/lib/1.0/lib-1.0.aar", context="maven")
