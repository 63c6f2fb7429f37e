"""cli commands related to the bootstrap run"""

import sys

import click
import humanfriendly

from scala_bootstrap.artifacts.exceptions import RepositoryError
from scala_bootstrap.bootstrap import Bootstrap
from scala_bootstrap.build.sbt import BuildFailure
from scala_bootstrap.cli.utils.args import version_options, yes_no
from scala_bootstrap.cli.utils.logging import logger
from scala_bootstrap.config import BootstrapConfig
from scala_bootstrap.git.clone import FetchError
from scala_bootstrap.versioning.exceptions import VersioningError


@click.command(name="run")
@version_options
@click.option(
    "--integration-repo-credentials",
    envvar="PRIVATE_REPO_PASS",
    default=None,
    help="user:password for the integration repository.",
)
@click.option(
    "-f",
    "--force-rebuild",
    envvar="forceRebuild",
    is_flag=True,
    default=False,
    help="Rebuild modules even if their artifacts already exist.",
)
@click.option(
    "--test-stability",
    envvar="testStability",
    is_flag=True,
    default=False,
    help="Rebuild the compiler with quick and compare the two builds.",
)
@click.option(
    "--no-clean",
    is_flag=True,
    default=False,
    help="Skip `clean` before builds.",
)
@click.option(
    "--sbt-cmd",
    envvar="SBT_CMD",
    default=None,
    help="sbt launcher to run. Defaults to the site configuration.",
)
@click.option(
    "-t",
    "--build-timeout",
    default=None,
    help="Per-build timeout, e.g. 2h or 90m. Default is no timeout.",
)
def run(
    workspace,
    scala_version_base,
    scala_version_suffix,
    publish_to_sonatype,
    module_versioning,
    module_versions,
    module_revisions,
    build_scalacheck,
    integration_repo_url,
    integration_repo_credentials,
    force_rebuild,
    test_stability,
    no_clean,
    sbt_cmd,
    build_timeout,
):
    """Build and publish a Scala release with its modules."""
    if build_timeout is None:
        timeout_s = None
    else:
        try:
            timeout_s = int(humanfriendly.parse_timespan(build_timeout))
        except humanfriendly.InvalidTimespan:
            logger.error(f"Invalid timeout value: {build_timeout}")
            sys.exit(1)

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
        integration_repo_credentials=integration_repo_credentials,
        force_rebuild=force_rebuild,
        test_stability=test_stability,
        clean=not no_clean,
        sbt_cmd=sbt_cmd,
        build_timeout=timeout_s,
    )

    try:
        Bootstrap(config).run()
    except (VersioningError, FetchError, BuildFailure, RepositoryError) as e:
        log_error_and_quit(logger, f"Bootstrap failed: {e}")
    except ValueError as e:
        log_error_and_quit(logger, f"Invalid configuration: {e}")

    logger.info("Bootstrap run has finished successfully.")


def make_config(workspace, **options) -> BootstrapConfig:
    try:
        return BootstrapConfig.create(workspace, **options)
    except ValueError as e:
        log_error_and_quit(logger, f"Invalid configuration: {e}")


def log_error_and_quit(logger, error):
    logger.error(error)
    sys.exit(1)
