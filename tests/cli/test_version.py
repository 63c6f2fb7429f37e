import pytest

from click.testing import CliRunner
from unittest.mock import patch

from scala_bootstrap.cli.main import cli
from scala_bootstrap.model.module import SCALA_XML, ModuleSpec
from scala_bootstrap.model.release import ReleaseDecision, ReleaseFlow
from scala_bootstrap.versioning.exceptions import MalformedVersionTag


@pytest.fixture
def mock_bootstrap():
    with patch("scala_bootstrap.cli.version.Bootstrap") as mock:
        instance = mock.return_value
        instance.determine_scala_version.return_value = ReleaseDecision(
            scala_version="2.12.0-M2",
            scala_version_base="2.12.0",
            scala_version_suffix="-M2",
            binary_version="2.12.0-M2",
            publish_to_sonatype=True,
            scaladoc_source_links_ver="v2.12.0-M2",
            flow=ReleaseFlow.TAGGED,
        )
        instance.derive_module_versions.return_value = [
            ModuleSpec(definition=SCALA_XML, version="1.0.6", revision="v1.0.6")
        ]
        yield mock


@pytest.mark.short
def test_version(mock_bootstrap, tmp_path):
    runner = CliRunner()
    result = runner.invoke(cli, ["version", "-w", str(tmp_path)], catch_exceptions=False)

    assert result.exit_code == 0
    assert "Scala 2.12.0-M2 (binary 2.12.0-M2, tagged build" in result.output
    assert "v2.12.0-M2" in result.output
    assert "xml" in result.output
    assert "1.0.6" in result.output
    mock_bootstrap.return_value.run.assert_not_called()


@pytest.mark.short
def test_version_malformed_tag(mock_bootstrap, tmp_path):
    mock_bootstrap.return_value.determine_scala_version.side_effect = (
        MalformedVersionTag("nightly-1")
    )
    runner = CliRunner()
    result = runner.invoke(cli, ["version", "-w", str(tmp_path)])

    assert result.exit_code == 1


@pytest.mark.short
def test_version_outside_a_git_checkout(tmp_path, capture_logs):
    runner = CliRunner()
    result = runner.invoke(
        cli, ["version", "-w", str(tmp_path), "--module-versioning", "nightly"]
    )

    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert "Not a git repository" in capture_logs.getvalue()
