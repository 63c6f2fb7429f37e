import logging
import os
import shlex
import signal
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from scala_bootstrap.constants import (
    BUILD_CHARACTER_FILE,
    NIGHTLY_BASE_VERSION_SUFFIX,
    Phase,
)
from scala_bootstrap.versioning.exceptions import VersioningError
from scala_bootstrap.versioning.manifest import read_properties

from .tasks import BuildRequest, BuildStep, Command, Publish, RunTask, SetSetting

logger = logging.getLogger(__name__)


class BuildFailure(Exception):
    """Raised when the build tool exits non-zero or times out."""

    def __init__(self, description: str, exit_code: Optional[int], log_file: Path):
        self.description = description
        self.exit_code = exit_code
        self.log_file = log_file
        if exit_code is None:
            reason = "timed out"
        else:
            reason = f"failed with exit code {exit_code}"
        super().__init__(f"Build '{description}' {reason}. See {log_file} for details.")


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


class SbtBuildTool:
    """
    Runs sbt for the bootstrap.

    Every invocation appends its output to ``<log_dir>/builds``; nothing of
    it is parsed except the generated ``buildcharacter.properties``.
    """

    def __init__(
        self,
        sbt_cmd: str,
        log_dir: Path,
        integration_repo_url: str,
        ivy_dir: Optional[Path] = None,
        repositories_file: Optional[Path] = None,
        extra_args: Sequence[str] = (),
        timeout: Optional[int] = None,
    ):
        self.sbt_cmd = shlex.split(sbt_cmd)
        self.log_dir = Path(log_dir)
        self.integration_repo_url = integration_repo_url
        self.ivy_dir = ivy_dir
        self.repositories_file = repositories_file
        self.extra_args = list(extra_args)
        self.timeout = timeout

    @property
    def build_log(self) -> Path:
        return self.log_dir / "builds"

    def write_repositories_config(self, resolvers: Sequence[str]) -> Path:
        """Write the sbt repositories file resolving from ``resolvers`` only."""
        if self.repositories_file is None:
            self.repositories_file = self.log_dir.parent / "repositories"
        lines = ["[repositories]"]
        lines.append(f"  private-repo: {self.integration_repo_url}")
        for i, url in enumerate(resolvers):
            if url.rstrip("/") != self.integration_repo_url.rstrip("/"):
                lines.append(f"  resolver-{i}: {url}")
        lines.append("  local")
        self.repositories_file.parent.mkdir(parents=True, exist_ok=True)
        self.repositories_file.write_text("\n".join(lines) + "\n")
        logger.debug(f"Wrote sbt repositories config to {self.repositories_file}")
        return self.repositories_file

    def base_args(self) -> List[str]:
        args = list(self.sbt_cmd)
        if self.ivy_dir is not None:
            args.extend(["-ivy", Path(self.ivy_dir).as_posix()])
        if self.repositories_file is not None:
            args.append("-Dsbt.override.build.repos=true")
            args.append(
                f"-Dsbt.repository.config={Path(self.repositories_file).as_posix()}"
            )
        args.extend(self.extra_args)
        return args

    def render_step(self, step: BuildStep) -> List[str]:
        if isinstance(step, SetSetting):
            scope = f" in {step.scope}" if step.scope else ""
            return [f"set {step.key}{scope} := {_quote(step.value)}"]
        if isinstance(step, RunTask):
            return [step.name]
        if isinstance(step, Command):
            return [" ".join((step.name,) + tuple(step.args))]
        if isinstance(step, Publish):
            if step.target is Phase.INTERNAL:
                return [
                    'set credentials += Credentials(Path.userHome / ".credentials-private-repo")',
                    "set every publishTo := Some("
                    f'"private-repo" at {_quote(self.integration_repo_url)})',
                    "publish",
                ]
            return [
                'set credentials += Credentials(Path.userHome / ".credentials-sonatype")',
                "set pgpPassphrase := Some(Array.empty)",
                "publishSigned",
            ]
        raise TypeError(f"Unknown build step: {step!r}")

    def render(self, request: BuildRequest) -> List[str]:
        """Translate a request into the sbt command line."""
        argv = self.base_args()
        argv.extend(f"-D{k}={v}" for k, v in request.system_properties.items())
        if request.scala_version:
            argv.append(f"set every scalaVersion := {_quote(request.scala_version)}")
        for step in request.steps:
            argv.extend(self.render_step(step))
        return argv

    def run(self, request: BuildRequest) -> None:
        """
        Run a build request to completion.

        Raises:
            BuildFailure: On non-zero exit or timeout
        """
        command = self.render(request)
        logger.info(f"### sbt: {request}")
        logger.debug(" ".join(shlex.quote(c) for c in command))
        self._execute(command, Path(request.project_dir), str(request))
        logger.info(f"### sbt: {request} finished")

    def run_script(self, script: Path, cwd: Path) -> None:
        """Run a workspace script (e.g. the stability test) under the same rules."""
        self._execute([Path(script).as_posix()], Path(cwd), Path(script).name)

    def _execute(self, command: List[str], cwd: Path, description: str) -> None:
        self.log_dir.mkdir(parents=True, exist_ok=True)
        process = None
        try:
            with open(self.build_log, "a") as log:
                log.write(f"### {description}: {' '.join(command)}\n")
                log.flush()
                # New process group so a timeout can kill sbt's forked JVMs too
                process = subprocess.Popen(
                    command,
                    cwd=cwd,
                    stdout=log,
                    stderr=subprocess.STDOUT,
                    text=True,
                    start_new_session=True,
                )
                try:
                    exit_code = process.wait(timeout=self.timeout)
                except subprocess.TimeoutExpired:
                    logger.error(f"{description} timed out after {self.timeout}s")
                    os.killpg(os.getpgid(process.pid), signal.SIGTERM)
                    process.wait()
                    raise BuildFailure(description, None, self.build_log)
        except OSError as e:
            raise BuildFailure(description, -1, self.build_log) from e
        finally:
            if process is not None and process.poll() is None:
                try:
                    os.killpg(os.getpgid(process.pid), signal.SIGKILL)
                    process.wait()
                except OSError:
                    pass

        if exit_code != 0:
            raise BuildFailure(description, exit_code, self.build_log)

    def generate_build_character(self, workspace: Path) -> Tuple[str, str]:
        """
        Have the build derive a nightly version and return ``(base, suffix)``.

        Raises:
            BuildFailure: If sbt fails or the properties lack the version keys
        """
        workspace = Path(workspace)
        self.run(
            BuildRequest(
                project_dir=workspace,
                steps=(
                    SetSetting(
                        "baseVersionSuffix", NIGHTLY_BASE_VERSION_SUFFIX, scope="Global"
                    ),
                    RunTask("generateBuildCharacterPropertiesFile"),
                ),
                description="generate build character",
            )
        )
        path = workspace / BUILD_CHARACTER_FILE
        try:
            props = {
                k.replace(".", "_"): v for k, v in read_properties(path).items()
            }
            return props["maven_version_base"], props.get("maven_version_suffix", "")
        except (KeyError, VersioningError) as e:
            raise BuildFailure(f"read {BUILD_CHARACTER_FILE}: {e}", -1, path) from e
