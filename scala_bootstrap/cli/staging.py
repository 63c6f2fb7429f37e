"""cli commands for Sonatype staging repositories"""

import click

from scala_bootstrap.artifacts.exceptions import RepositoryError
from scala_bootstrap.artifacts.staging import SonatypeStaging
from scala_bootstrap.cli.run import log_error_and_quit
from scala_bootstrap.cli.utils.logging import logger
from scala_bootstrap.config import config


def _staging() -> SonatypeStaging:
    return SonatypeStaging(
        config.get("repositories", "sonatype_api"),
        config.get("repositories", "sonatype_profile"),
    )


@click.group(name="staging")
@click.pass_context
def staging(ctx):
    """Manage open Sonatype staging repositories."""
    ctx.ensure_object(dict)


@staging.command(name="list")
def list_repos():
    """List open staging repositories of the profile."""
    try:
        repos = _staging().list_open_repos()
    except RepositoryError as e:
        log_error_and_quit(logger, str(e))

    if not repos:
        click.echo("No open staging repositories.")
        return
    for repo in repos:
        click.echo(f"{repo.id}\t{repo.uri}")


@staging.command(name="close")
@click.argument("ids", nargs=-1, required=True)
@click.option("-m", "--message", default="Closed by scala-bootstrap", show_default=True)
def close(ids, message):
    """Close staging repositories."""
    try:
        _staging().close_repos(list(ids), message)
    except RepositoryError as e:
        log_error_and_quit(logger, str(e))


@staging.command(name="drop")
@click.argument("ids", nargs=-1, required=True)
@click.option("-m", "--message", default="Dropped by scala-bootstrap", show_default=True)
@click.option("-y", "--yes", is_flag=True, default=False, help="Do not ask for confirmation.")
def drop(ids, message, yes):
    """Drop staging repositories."""
    if not yes:
        click.confirm(f"Are you sure you want to drop {', '.join(ids)}?", abort=True)
    try:
        _staging().drop_repos(list(ids), message)
    except RepositoryError as e:
        log_error_and_quit(logger, str(e))
