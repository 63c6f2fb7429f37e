from functools import wraps
from typing import Optional

import click

from scala_bootstrap.versioning.modules import ModuleVersioning


def yes_no(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    return value == "yes"


def version_options(f):
    """Options deciding the Scala and module versions, shared by `run` and `version`."""

    @click.option(
        "-w",
        "--workspace",
        envvar="WORKSPACE",
        default=".",
        show_default=True,
        type=click.Path(exists=True, file_okay=False),
        help="The scala/scala checkout to release.",
    )
    @click.option(
        "--scala-version-base",
        envvar="SCALA_VER_BASE",
        help="Explicit version base, e.g. 2.12.1. Without it, the HEAD tag or a nightly version is used.",
    )
    @click.option(
        "--scala-version-suffix",
        envvar="SCALA_VER_SUFFIX",
        help="Suffix for the explicit version base, e.g. -RC1.",
    )
    @click.option(
        "--publish-to-sonatype",
        envvar="publishToSonatype",
        type=click.Choice(["yes", "no"]),
        default=None,
        help="Stage the release on Sonatype. Defaults to yes, never for nightlies.",
    )
    @click.option(
        "--module-versioning",
        envvar="moduleVersioning",
        type=click.Choice([v.value for v in ModuleVersioning]),
        default=ModuleVersioning.PINNED.value,
        show_default=True,
        help="Take module versions from versions.properties or derive nightly versions from git.",
    )
    @click.option(
        "-m",
        "--module-version",
        "module_versions",
        multiple=True,
        metavar="MODULE=VERSION",
        help="Override a module version (versions.properties strategy).",
    )
    @click.option(
        "-r",
        "--module-ref",
        "module_revisions",
        multiple=True,
        metavar="MODULE=REF",
        help="Override a module revision (nightly strategy).",
    )
    @click.option(
        "--with-scalacheck",
        "build_scalacheck",
        is_flag=True,
        default=False,
        help="Also resolve and build scalacheck (integration repository only).",
    )
    @click.option(
        "--integration-repo-url",
        envvar="integrationRepoUrl",
        default=None,
        help="Repository locker, quick and modules are published to.",
    )
    @wraps(f)
    def wrapper(*args, **kwargs):
        return f(*args, **kwargs)

    return wrapper

