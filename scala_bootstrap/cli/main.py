"""scala-bootstrap CLI"""

import click

from scala_bootstrap import __version__
from scala_bootstrap.cli.run import run
from scala_bootstrap.cli.staging import staging
from scala_bootstrap.cli.version import version

from .debug import add_debug_option


@click.group()
@click.version_option(__version__, prog_name="scala-bootstrap")
@click.pass_context
def cli(ctx):
    """
    Bootstrap a Scala release: core, modules, and Sonatype staging.
    """
    ctx.ensure_object(dict)


cli.add_command(add_debug_option(run))
cli.add_command(add_debug_option(version))
cli.add_command(add_debug_option(staging))

add_debug_option(cli)


if __name__ == "__main__":
    cli(obj={})
