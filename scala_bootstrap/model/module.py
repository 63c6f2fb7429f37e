from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from scala_bootstrap.versioning.version import Revision


class CrossVersion(str, Enum):
    """How the Scala version is appended to an artifact id."""

    BINARY = "binary"
    FULL = "full"
    DISABLED = "disabled"


class ModuleDefinition(BaseModel):
    """Static description of a satellite module"""

    model_config = ConfigDict(frozen=True)

    name: str
    owner: str
    repo: str
    group_id: str
    artifact_id: str
    manifest_key: str
    env_prefix: str
    # None: `git describe` may match any tag
    describe_match: Optional[str] = "v[0-9]*"
    public: bool = True
    cross: CrossVersion = CrossVersion.BINARY


class ModuleSpec(BaseModel):
    """A module resolved for this run: version, source revision, built flag."""

    definition: ModuleDefinition = Field(frozen=True)
    version: str = Field(frozen=True, min_length=1)
    revision: str = Field(frozen=True)

    _built: bool = PrivateAttr(default=False)

    @field_validator("revision")
    @classmethod
    def _as_revision(cls, value: str) -> Revision:
        return Revision(value)

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def built(self) -> bool:
        return self._built

    def mark_built(self) -> None:
        """Record that the module was built this run. There is no way back."""
        self._built = True

    def carry_over(self) -> "ModuleSpec":
        """Copy for the next phase, keeping the built flag."""
        spec = ModuleSpec(
            definition=self.definition, version=self.version, revision=self.revision
        )
        if self._built:
            spec.mark_built()
        return spec

    def __str__(self) -> str:
        return f"{self.name} {self.version} at {self.revision}"


SCALA_XML = ModuleDefinition(
    name="xml",
    owner="scala",
    repo="scala-xml",
    group_id="org.scala-lang.modules",
    artifact_id="scala-xml",
    manifest_key="scala-xml.version.number",
    env_prefix="XML",
)

SCALA_PARSER_COMBINATORS = ModuleDefinition(
    name="parser-combinators",
    owner="scala",
    repo="scala-parser-combinators",
    group_id="org.scala-lang.modules",
    artifact_id="scala-parser-combinators",
    manifest_key="scala-parser-combinators.version.number",
    env_prefix="PARSERS",
)

SCALA_SWING = ModuleDefinition(
    name="swing",
    owner="scala",
    repo="scala-swing",
    group_id="org.scala-lang.modules",
    artifact_id="scala-swing",
    manifest_key="scala-swing.version.number",
    env_prefix="SWING",
)

SCALACHECK = ModuleDefinition(
    name="scalacheck",
    owner="rickynils",
    repo="scalacheck",
    group_id="org.scalacheck",
    artifact_id="scalacheck",
    manifest_key="scalacheck.version.number",
    env_prefix="SCALACHECK",
    describe_match=None,
    public=False,
)

SCALA_PARTEST = ModuleDefinition(
    name="partest",
    owner="scala",
    repo="scala-partest",
    group_id="org.scala-lang.modules",
    artifact_id="scala-partest",
    manifest_key="partest.version.number",
    env_prefix="PARTEST",
)

# Build order. Scalacheck only takes part when explicitly enabled.
ALL_MODULES: List[ModuleDefinition] = [
    SCALA_XML,
    SCALA_PARSER_COMBINATORS,
    SCALA_SWING,
    SCALACHECK,
    SCALA_PARTEST,
]


def module_definitions(include_scalacheck: bool = False) -> List[ModuleDefinition]:
    return [m for m in ALL_MODULES if include_scalacheck or m is not SCALACHECK]
