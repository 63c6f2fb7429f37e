"""cli command showing the versions a run would build"""

import click

from scala_bootstrap.artifacts.exceptions import RepositoryError
from scala_bootstrap.bootstrap import Bootstrap
from scala_bootstrap.build.sbt import BuildFailure
from scala_bootstrap.cli.run import log_error_and_quit, make_config
from scala_bootstrap.cli.utils.args import version_options, yes_no
from scala_bootstrap.cli.utils.logging import logger
from scala_bootstrap.git.clone import FetchError
from scala_bootstrap.versioning.exceptions import VersioningError


@click.command(name="version")
@version_options
def version(
    workspace,
    scala_version_base,
    scala_version_suffix,
    publish_to_sonatype,
    module_versioning,
    module_versions,
    module_revisions,
    build_scalacheck,
    integration_repo_url,
):
    """
    Show the Scala version and module versions a run would use.

    Nothing is built or published. Nightly versions still need sbt and
    module checkouts to be computed.
    """
    config = make_config(
        workspace,
        module_versions=module_versions,
        module_revisions=module_revisions,
        scala_version_base=scala_version_base,
        scala_version_suffix=scala_version_suffix,
        publish_to_sonatype=yes_no(publish_to_sonatype),
        module_versioning=module_versioning,
        build_scalacheck=build_scalacheck,
        integration_repo_url=integration_repo_url,
    )
    bootstrap = Bootstrap(config)

    try:
        decision = bootstrap.determine_scala_version()
        modules = bootstrap.derive_module_versions()
    except (VersioningError, FetchError, BuildFailure, RepositoryError) as e:
        log_error_and_quit(logger, f"Could not determine versions: {e}")

    click.echo(decision.summary())
    click.echo(f"scaladoc source links: {decision.scaladoc_source_links_ver}")
    click.echo("")
    click.echo(f"Modules ({config.module_versioning.value}):")
    for module in modules:
        click.echo(f"  {module.name:<20} {module.version:<24} {module.revision}")
