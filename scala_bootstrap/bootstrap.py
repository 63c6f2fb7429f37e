"""
The bootstrap run.

Steps, strictly in order, each aborting the run on failure:

1. determine the Scala version (explicit, tagged or nightly)
2. resolve module versions and revisions
3. remove earlier builds of this version from the integration repository
   and the local ivy cache
4. build locker and publish it to the integration repository
5. build modules against locker (``Phase.INTERNAL``)
6. build quick against those modules
7. optionally test stability (quick rebuilding itself as strap)
8. optionally publish core and modules to Sonatype and close the staging
   repositories (``Phase.PUBLIC_STAGING``)
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from scala_bootstrap.artifacts.repository import IntegrationRepository
from scala_bootstrap.artifacts.resolver import ArtifactResolver
from scala_bootstrap.artifacts.staging import SonatypeStaging, StagingRepository
from scala_bootstrap.build.modules import ModuleBuilder
from scala_bootstrap.build.sbt import SbtBuildTool
from scala_bootstrap.build.tasks import BuildRequest, Command, RunTask
from scala_bootstrap.config import BootstrapConfig
from scala_bootstrap.constants import PUBLISHED_ORGANISATIONS, RUN_OUTPUT_FILE, Phase
from scala_bootstrap.git.clone import SourceFetcher
from scala_bootstrap.model.module import ModuleSpec, module_definitions
from scala_bootstrap.model.release import ReleaseDecision
from scala_bootstrap.rebuild import ModuleOutcome, PhaseState, RebuildDecisionEngine
from scala_bootstrap.versioning.manifest import VersionManifest
from scala_bootstrap.versioning.modules import ModuleVersioning, ModuleVersionResolver
from scala_bootstrap.versioning.release import ReleaseVersionSelector

logger = logging.getLogger(__name__)

STABILITY_SCRIPT = Path("scripts") / "stability-test.sh"


def write_run_output(workspace: Path, decision: ReleaseDecision) -> Path:
    """
    Write the properties downstream jobs (distribution packaging) consume.
    """
    path = Path(workspace) / RUN_OUTPUT_FILE
    with open(path, "a") as f:
        f.write(f"version={decision.scala_version}\n")
        f.write(f"sbtDistVersionOverride=-Dproject.version={decision.scala_version}\n")
    logger.debug(f"Wrote run output to {path}")
    return path


def clear_ivy_cache(ivy_dir: Path) -> None:
    """Drop cached artifacts of the organisations this run publishes."""
    cache = Path(ivy_dir) / "cache"
    for organisation in PUBLISHED_ORGANISATIONS:
        path = cache / organisation.replace("/", ".")
        if path.exists():
            logger.debug(f"Removing {path}")
            shutil.rmtree(path)


@dataclass
class RunResult:
    decision: ReleaseDecision
    modules: List[ModuleSpec] = field(default_factory=list)
    internal: List[ModuleOutcome] = field(default_factory=list)
    public: List[ModuleOutcome] = field(default_factory=list)
    closed_staging_repos: List[StagingRepository] = field(default_factory=list)

    @property
    def updated_module_versions(self) -> Dict[str, str]:
        """Manifest entries of the modules built this run."""
        return {m.definition.manifest_key: m.version for m in self.modules if m.built}


class Bootstrap:
    def __init__(
        self,
        config: BootstrapConfig,
        fetcher: Optional[SourceFetcher] = None,
        build_tool: Optional[SbtBuildTool] = None,
        integration_repo: Optional[IntegrationRepository] = None,
        staging: Optional[SonatypeStaging] = None,
    ):
        self.config = config
        self.workspace = Path(config.workspace)
        self.ivy_dir = config.ivy_dir or Path.home() / ".ivy2"
        self.fetcher = fetcher or SourceFetcher(self.workspace)
        self.build_tool = build_tool or SbtBuildTool(
            config.sbt_cmd,
            config.log_dir,
            config.integration_repo_url,
            ivy_dir=self.ivy_dir,
            extra_args=config.sbt_args,
            timeout=config.build_timeout,
        )
        self.integration_repo = integration_repo or IntegrationRepository(
            config.integration_repo_url, config.integration_repo_credentials
        )
        self.staging = staging or SonatypeStaging(
            config.sonatype_api, config.sonatype_profile
        )

    # 1. and 2.

    def determine_scala_version(self) -> ReleaseDecision:
        selector = ReleaseVersionSelector(
            self.workspace,
            source=self.fetcher,
            build_character=lambda: self.build_tool.generate_build_character(
                self.workspace
            ),
            version_base=self.config.scala_version_base,
            version_suffix=self.config.scala_version_suffix,
            publish_to_sonatype=self.config.publish_to_sonatype,
        )
        return selector.select()

    def derive_module_versions(self) -> List[ModuleSpec]:
        manifest = None
        if self.config.module_versioning is ModuleVersioning.PINNED:
            manifest = VersionManifest.load(self.workspace)
        resolver = ModuleVersionResolver(
            self.config.module_versioning,
            source=self.fetcher,
            manifest=manifest,
            version_overrides=self.config.module_versions,
            revision_overrides=self.config.module_revisions,
        )
        return resolver.resolve_all(module_definitions(self.config.build_scalacheck))

    # 3. to 8.

    def remove_existing_builds(self, decision: ReleaseDecision) -> None:
        self.integration_repo.remove_existing_builds(decision.scala_version)
        clear_ivy_cache(self.ivy_dir)

    def _core_request(
        self, command: str, steps, decision: ReleaseDecision, result: RunResult, what: str
    ) -> BuildRequest:
        properties = {}
        if command != "setupBootstrapLocker":
            properties["starr.version"] = decision.scala_version
            properties.update(result.updated_module_versions)
        return BuildRequest(
            project_dir=self.workspace,
            steps=(
                Command(
                    command,
                    (self.config.integration_repo_url, decision.scala_version),
                ),
            )
            + tuple(steps),
            system_properties=properties,
            description=what,
        )

    def _clean(self) -> list:
        return [RunTask("clean")] if self.config.clean else []

    def build_locker(self, decision: ReleaseDecision, result: RunResult) -> None:
        self.build_tool.run(
            self._core_request(
                "setupBootstrapLocker",
                self._clean() + [RunTask("publish")],
                decision,
                result,
                "locker",
            )
        )

    def build_quick(self, decision: ReleaseDecision, result: RunResult) -> None:
        clear_ivy_cache(self.ivy_dir)
        self.build_tool.run(
            self._core_request(
                "setupBootstrapQuick",
                self._clean() + [RunTask("publish")],
                decision,
                result,
                "quick",
            )
        )

    def test_stability(self, decision: ReleaseDecision, result: RunResult) -> None:
        """Rebuild the compiler with quick ("strap") and compare the two."""
        build = self.workspace / "build"
        quick_copy = self.workspace / "quick1"
        shutil.move(str(build / "quick"), str(quick_copy))
        shutil.rmtree(build)

        self.build_tool.run(
            self._core_request(
                "setupBootstrapQuick",
                self._clean()
                + [
                    RunTask("library/compile"),
                    RunTask("reflect/compile"),
                    RunTask("compiler/compile"),
                ],
                decision,
                result,
                "strap",
            )
        )
        shutil.move(str(build / "quick"), str(build / "strap"))
        shutil.move(str(quick_copy), str(build / "quick"))
        self.build_tool.run_script(self.workspace / STABILITY_SCRIPT, self.workspace)

    def publish_sonatype(
        self,
        decision: ReleaseDecision,
        result: RunResult,
        engine: RebuildDecisionEngine,
        state: PhaseState,
    ) -> None:
        logger.info("### Publishing core to sonatype")
        self.build_tool.run(
            self._core_request(
                "setupBootstrapPublish",
                [RunTask("publishSigned")],
                decision,
                result,
                "publish core",
            )
        )

        logger.info("### Publishing modules to sonatype")
        public = state.advance()
        result.public = engine.run(public)

        open_repos = self.staging.list_open_repos()
        if not open_repos:
            logger.warning("No open staging repositories to close.")
            return
        self.staging.close_repos(
            [r.id for r in open_repos], f"Scala {decision.scala_version}"
        )
        result.closed_staging_repos = open_repos
        logger.info(
            "Closed sonatype staging repos: " + ", ".join(r.uri for r in open_repos)
        )

    def run(self) -> RunResult:
        decision = self.determine_scala_version()
        write_run_output(self.workspace, decision)

        modules = self.derive_module_versions()
        result = RunResult(decision=decision, modules=modules)

        self.build_tool.write_repositories_config(self.config.resolver_urls)
        self.remove_existing_builds(decision)

        self.build_locker(decision, result)

        builder = ModuleBuilder(
            self.fetcher,
            self.build_tool,
            decision.scala_version,
            module_versions={m.name: m.version for m in modules},
            clean=self.config.clean,
        )
        resolver = ArtifactResolver(
            self.config.resolver_urls, decision.scala_version, decision.binary_version
        )
        engine = RebuildDecisionEngine(resolver, builder, self.config.force_rebuild)
        internal = PhaseState(Phase.INTERNAL, modules)
        result.internal = engine.run(internal)

        self.build_quick(decision, result)

        if self.config.test_stability:
            self.test_stability(decision, result)

        if decision.publish_to_sonatype:
            self.publish_sonatype(decision, result, engine, internal)
        else:
            logger.info("Not publishing to Sonatype.")

        logger.info(f"Done building Scala {decision.scala_version}.")
        if result.updated_module_versions:
            logger.info("Module versions built by this run:")
            for key, version in result.updated_module_versions.items():
                logger.info(f"  {key}={version}")
        return result
