"""Tests for the two-phase resolution orchestrator."""

from versioning.models import Coordinate, RepoLocation, ResolvedArtifact
from versioning.parser import parse_coordinate
from resolution.orchestrator import complete_coordinates, fallback_requests, resolve

REPOS = [RepoLocation(url="file:///repo", name="local")]


def _artifact(spec, type_="aar"):
    c = parse_coordinate(spec)
    return ResolvedArtifact(
        coordinate=Coordinate(c.group, c.artifact, c.version),
        type=type_,
        location=f"file:///repo/{c.artifact}.{type_}",
    )


class FakeRepositoryClient:
    """Returns canned artifacts keyed by the requested coordinate string."""

    def __init__(self, table):
        self.table = table
        self.calls = []

    def lookup(self, coordinates, repos):
        coordinates = set(coordinates)
        self.calls.append(coordinates)
        found = set()
        for coordinate in coordinates:
            found.update(self.table.get(str(coordinate), []))
        return found


class TestResolve:
    """Tests for resolve."""

    def test_fallback_classifier_used_only_for_misses(self):
        foo_src = _artifact("com.example:foo:1.0", "srcaar")
        bar = _artifact("com.example:bar:2.0")
        client = FakeRepositoryClient({
            "com.example:bar:2.0": [bar],
            "com.example:foo:1.0@srcaar": [foo_src],
        })

        resolved = resolve(
            {parse_coordinate("com.example:foo:1.0"), parse_coordinate("com.example:bar:2.0")},
            REPOS,
            client,
        )

        assert resolved == {foo_src, bar}
        assert len(client.calls) == 2
        assert client.calls[1] == {parse_coordinate("com.example:foo:1.0@srcaar")}

    def test_exactly_one_fallback_artifact_for_a_default_miss(self):
        foo_src = _artifact("com.example:foo:1.0", "srcaar")
        client = FakeRepositoryClient({"com.example:foo:1.0@srcaar": [foo_src]})

        resolved = resolve({parse_coordinate("com.example:foo:1.0")}, REPOS, client)

        assert len(resolved) == 1
        assert next(iter(resolved)).type == "srcaar"

    def test_no_second_phase_when_everything_resolves(self):
        bar = _artifact("com.example:bar:2.0")
        client = FakeRepositoryClient({"com.example:bar:2.0": [bar]})

        resolve({parse_coordinate("com.example:bar:2.0")}, REPOS, client)

        assert len(client.calls) == 1

    def test_explicit_classifier_is_not_retried(self):
        client = FakeRepositoryClient({})

        resolved = resolve({parse_coordinate("com.example:foo:1.0@aar")}, REPOS, client)

        assert resolved == set()
        assert len(client.calls) == 1

    def test_transitively_resolved_package_counts_as_found(self):
        # foo:1.0 was requested but the resolver returned foo:1.1 via another path.
        foo = _artifact("com.example:foo:1.1")
        client = FakeRepositoryClient({"com.example:app:1.0": [foo]})

        resolved = resolve(
            {parse_coordinate("com.example:app:1.0"), parse_coordinate("com.example:foo:1.0")},
            REPOS,
            client,
        )

        assert resolved == {foo}
        assert client.calls[1] == {parse_coordinate("com.example:app:1.0@srcaar")}

    def test_union_is_not_deduplicated_by_versionless_key(self):
        foo = _artifact("com.example:foo:1.0")
        foo_src = _artifact("com.example:foo:1.0", "srcaar")
        client = FakeRepositoryClient({
            "com.example:lib:1.0": [foo],
            "com.example:lib:1.0@srcaar": [foo_src],
        })

        resolved = resolve(
            {parse_coordinate("com.example:lib:1.0")},
            REPOS,
            client,
        )

        assert resolved == {foo, foo_src}

    def test_incomplete_coordinates_are_not_submitted(self):
        client = FakeRepositoryClient({})

        assert resolve({parse_coordinate("com.example")}, REPOS, client) == set()
        assert client.calls == []

    def test_unresolved_everywhere_is_not_an_error(self):
        client = FakeRepositoryClient({})

        assert resolve({parse_coordinate("com.example:bar:1.0")}, REPOS, client) == set()
        assert len(client.calls) == 2


class TestHelpers:
    """Tests for complete_coordinates and fallback_requests."""

    def test_complete_coordinates(self):
        coords = [parse_coordinate("a"), parse_coordinate("a:b"), parse_coordinate("a:b:1")]
        assert complete_coordinates(coords) == {parse_coordinate("a:b"), parse_coordinate("a:b:1")}

    def test_fallback_requests(self):
        requested = [parse_coordinate("g:found:1"), parse_coordinate("g:miss:1"), parse_coordinate("g:typed:1@jar")]
        resolved = [_artifact("g:found:2")]
        assert fallback_requests(requested, resolved) == {parse_coordinate("g:miss:1@srcaar")}
