"""Tests for module version resolution."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from scala_bootstrap.git.clone import NoTagError
from scala_bootstrap.model.module import (
    SCALA_PARTEST,
    SCALA_XML,
    SCALACHECK,
    module_definitions,
)
from scala_bootstrap.versioning.exceptions import MissingModuleTag, VersionNotFoundError
from scala_bootstrap.versioning.manifest import VersionManifest
from scala_bootstrap.versioning.modules import (
    ModuleVersioning,
    ModuleVersionResolver,
    nightly_version,
)


@pytest.fixture
def manifest():
    return VersionManifest(
        {
            "scala-xml.version.number": "1.0.6",
            "scala-parser-combinators.version.number": "1.0.4",
            "scala-swing.version.number": "2.0.0-M2",
            "partest.version.number": "1.1.0",
            "scalacheck.version.number": "1.11.6",
        }
    )


@pytest.fixture
def source():
    source = MagicMock()
    source.tag_exists.return_value = True
    source.fetch.side_effect = lambda owner, repo, revision: Path("/src") / repo
    source.describe.return_value = "v1.0.6-3-gabc1234"
    return source


@pytest.mark.short
class TestPinned:
    def test_versions_from_manifest(self, source, manifest):
        resolver = ModuleVersionResolver(ModuleVersioning.PINNED, source, manifest)

        specs = resolver.resolve_all(module_definitions())

        assert [s.name for s in specs] == ["xml", "parser-combinators", "swing", "partest"]
        assert [s.version for s in specs] == ["1.0.6", "1.0.4", "2.0.0-M2", "1.1.0"]
        for spec in specs:
            assert spec.revision == f"v{spec.version}"
            assert spec.built is False
        source.fetch.assert_not_called()

    def test_version_override(self, source, manifest):
        resolver = ModuleVersionResolver(
            "versions.properties", source, manifest, version_overrides={"xml": "1.0.7"}
        )

        spec = resolver.resolve(SCALA_XML)

        assert spec.version == "1.0.7"
        assert spec.revision == "v1.0.7"
        source.tag_exists.assert_called_once_with("scala", "scala-xml", "v1.0.7")

    def test_revision_override_is_ignored(self, source, manifest, capture_logs):
        resolver = ModuleVersionResolver(
            ModuleVersioning.PINNED,
            source,
            manifest,
            revision_overrides={"partest": "2.12.x"},
        )

        spec = resolver.resolve(SCALA_PARTEST)

        assert spec.revision == "v1.1.0"
        assert "Ignoring revision override for partest" in capture_logs.getvalue()

    def test_missing_tag(self, source, manifest):
        source.tag_exists.side_effect = lambda owner, repo, tag: repo != "scala-swing"
        resolver = ModuleVersionResolver(ModuleVersioning.PINNED, source, manifest)

        with pytest.raises(MissingModuleTag) as exc_info:
            resolver.resolve_all(module_definitions())

        assert exc_info.value.module == "swing"
        assert exc_info.value.tag == "v2.0.0-M2"
        # partest comes after swing and is never looked at
        assert source.tag_exists.call_count == 3

    def test_missing_version(self, source):
        resolver = ModuleVersionResolver(
            ModuleVersioning.PINNED, source, VersionManifest({})
        )
        with pytest.raises(VersionNotFoundError) as exc_info:
            resolver.resolve(SCALA_XML)
        assert exc_info.value.module == "xml"

    def test_needs_manifest(self, source):
        with pytest.raises(ValueError):
            ModuleVersionResolver(ModuleVersioning.PINNED, source)


@pytest.mark.short
class TestNightly:
    def test_nightly_defaults_to_master(self, source):
        resolver = ModuleVersionResolver(ModuleVersioning.NIGHTLY, source)

        spec = resolver.resolve(SCALA_XML)

        assert spec.revision == "master"
        assert spec.version == "1.0.6-3-gabc1234-nightly"
        source.fetch.assert_called_once_with("scala", "scala-xml", "master")
        source.describe.assert_called_once_with(Path("/src/scala-xml"), "v[0-9]*")

    def test_revision_override(self, source):
        resolver = ModuleVersionResolver(
            ModuleVersioning.NIGHTLY, source, revision_overrides={"partest": "1.0.x"}
        )
        spec = resolver.resolve(SCALA_PARTEST)
        assert spec.revision == "1.0.x"
        source.fetch.assert_called_once_with("scala", "scala-partest", "1.0.x")

    def test_version_override_is_ignored(self, source, capture_logs):
        resolver = ModuleVersionResolver(
            ModuleVersioning.NIGHTLY, source, version_overrides={"xml": "9.9.9"}
        )
        spec = resolver.resolve(SCALA_XML)
        assert spec.version.endswith("-nightly")
        assert "Ignoring version override for xml" in capture_logs.getvalue()

    def test_scalacheck_describes_any_tag(self, source):
        source.describe.return_value = "1.11.6-12-g0123abc"
        resolver = ModuleVersionResolver(ModuleVersioning.NIGHTLY, source)

        spec = resolver.resolve(SCALACHECK)

        assert spec.version == "1.11.6-12-g0123abc-nightly"
        source.describe.assert_called_once_with(Path("/src/scalacheck"), None)

    def test_no_tag(self, source):
        source.describe.side_effect = NoTagError("no names found")
        resolver = ModuleVersionResolver(ModuleVersioning.NIGHTLY, source)

        with pytest.raises(MissingModuleTag) as exc_info:
            resolver.resolve(SCALA_XML)
        assert exc_info.value.module == "xml"

    def test_invalid_revision(self, source):
        resolver = ModuleVersionResolver(
            ModuleVersioning.NIGHTLY, source, revision_overrides={"xml": "a b"}
        )
        with pytest.raises(ValueError):
            resolver.resolve(SCALA_XML)
        source.fetch.assert_not_called()


@pytest.mark.short
@pytest.mark.parametrize(
    "description,expected",
    [
        ("v1.0.6", "1.0.6-nightly"),
        ("v1.0.6-3-gabc1234", "1.0.6-3-gabc1234-nightly"),
        ("1.11.6-12-g0123abc\n", "1.11.6-12-g0123abc-nightly"),
    ],
)
def test_nightly_version(description, expected):
    assert nightly_version(description) == expected
