"""Tests for properties files and the versions.properties manifest."""

import pytest

from scala_bootstrap.versioning.exceptions import VersioningError
from scala_bootstrap.versioning.manifest import VersionManifest, read_properties

VERSIONS_PROPERTIES = """\
# Scala version used for bootstrapping
starr.version=2.12.0
starr.use.released=1

! modules
scala-xml.version.number=1.0.6
scala-parser-combinators.version.number = 1.0.4
scala-swing.version.number=2.0.0-M2
partest.version.number=1.1.0
scalacheck.version.number=1.11.6
jline.version=2.14.1
"""


@pytest.fixture
def workspace(tmp_path):
    (tmp_path / "versions.properties").write_text(VERSIONS_PROPERTIES)
    return tmp_path


@pytest.mark.short
class TestReadProperties:
    def test_read(self, workspace):
        props = read_properties(workspace / "versions.properties")
        assert props["starr.version"] == "2.12.0"
        assert props["scala-parser-combinators.version.number"] == "1.0.4"
        assert "# Scala version used for bootstrapping" not in props

    def test_keys_keep_case(self, tmp_path):
        path = tmp_path / "buildcharacter.properties"
        path.write_text("maven.version.base=2.12.1\nMaven.Version.Suffix=-x\n")
        assert read_properties(path) == {
            "maven.version.base": "2.12.1",
            "Maven.Version.Suffix": "-x",
        }

    def test_missing_file(self, tmp_path):
        with pytest.raises(VersioningError, match="not found"):
            read_properties(tmp_path / "missing.properties")

    def test_unparseable(self, tmp_path):
        path = tmp_path / "broken.properties"
        path.write_text("starr.version=2.12.0\nnot a property line\n")
        with pytest.raises(VersioningError, match="Failed to parse"):
            read_properties(path)


@pytest.mark.short
class TestVersionManifest:
    def test_load(self, workspace):
        manifest = VersionManifest.load(workspace)
        assert manifest.path == workspace / "versions.properties"
        assert manifest.get("scala-xml.version.number") == "1.0.6"
        assert manifest.get("scala-swing.version.number") == "2.0.0-M2"

    def test_missing_key(self, workspace):
        manifest = VersionManifest.load(workspace)
        assert manifest.get("scala-java8-compat.version.number") is None
        assert "scala-java8-compat.version.number" not in manifest
        assert "partest.version.number" in manifest

    def test_blank_value_counts_as_missing(self):
        manifest = VersionManifest({"partest.version.number": "  "})
        assert manifest.get("partest.version.number") is None

    def test_as_dict_is_a_copy(self, workspace):
        manifest = VersionManifest.load(workspace)
        entries = manifest.as_dict()
        entries["starr.version"] = "2.11.8"
        assert manifest.get("starr.version") == "2.12.0"

    def test_load_without_manifest(self, tmp_path):
        with pytest.raises(VersioningError):
            VersionManifest.load(tmp_path)
