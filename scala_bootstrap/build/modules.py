import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Protocol, Tuple

from scala_bootstrap.constants import Phase
from scala_bootstrap.model.module import SCALACHECK, ModuleSpec

from .tasks import BuildRequest, BuildStep, Publish, RunTask, SetSetting

logger = logging.getLogger(__name__)

# Build settings pinning the versions of other modules of this run
VERSION_BINDINGS: Dict[str, Tuple[Tuple[str, str], ...]] = {
    "scalacheck": (("VersionKeys.scalaParserCombinatorsVersion", "parser-combinators"),),
    "partest": (
        ("VersionKeys.scalaXmlVersion", "xml"),
        ("VersionKeys.scalaCheckVersion", "scalacheck"),
    ),
}


class ModuleCheckout(Protocol):
    def fetch(self, owner: str, repo: str, revision: str) -> Path: ...


class BuildTool(Protocol):
    def run(self, request: BuildRequest) -> None: ...


class ModuleBuilder:
    """
    Fetches, tests and publishes one module against the Scala version of the run.

    Scaladoc of a module can not be generated while the module's own version
    is on the classpath of scaladoc, so docs are built under a ``-DOC``
    version first and the real version is published without regenerating them.
    """

    def __init__(
        self,
        checkout: ModuleCheckout,
        build_tool: BuildTool,
        scala_version: str,
        module_versions: Optional[Mapping[str, str]] = None,
        clean: bool = True,
    ):
        self.checkout = checkout
        self.build_tool = build_tool
        self.scala_version = scala_version
        self.module_versions = dict(module_versions or {})
        self.clean = clean

    def bindings(self, module: ModuleSpec) -> List[BuildStep]:
        """Settings for the versions of modules this one depends on, where known."""
        steps: List[BuildStep] = []
        for key, dependency in VERSION_BINDINGS.get(module.name, ()):
            version = self.module_versions.get(dependency)
            if version:
                steps.append(SetSetting(key, version))
        return steps

    def steps(self, module: ModuleSpec, phase: Phase) -> List[BuildStep]:
        clean: List[BuildStep] = [RunTask("clean")] if self.clean else []
        bindings = self.bindings(module)

        if module.definition == SCALACHECK:
            # tests time out; only ever published to the integration repository
            return (
                [SetSetting("version", module.version)]
                + bindings
                + clean
                + [Publish(Phase.INTERNAL)]
            )

        return (
            bindings
            + [SetSetting("version", f"{module.version}-DOC")]
            + clean
            + [
                RunTask("doc"),
                SetSetting("version", module.version),
                RunTask("test"),
                Publish(phase),
            ]
        )

    def build(self, module: ModuleSpec, phase: Phase) -> None:
        """
        Raises:
            FetchError: If the module source can not be checked out
            BuildFailure: If the module fails to build, test or publish
        """
        definition = module.definition
        work_tree = self.checkout.fetch(definition.owner, definition.repo, module.revision)
        self.build_tool.run(
            BuildRequest(
                project_dir=work_tree,
                steps=tuple(self.steps(module, phase)),
                scala_version=self.scala_version,
                description=f"{definition.repo} {module.version} ({phase.value})",
            )
        )
