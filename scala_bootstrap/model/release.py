from enum import Enum

from pydantic import BaseModel, ConfigDict


class ReleaseFlow(str, Enum):
    """Which of the three version determination paths was taken."""

    EXPLICIT = "explicit"
    TAGGED = "tagged"
    NIGHTLY = "nightly"


class ReleaseDecision(BaseModel):
    """The Scala version being built, decided once per run."""

    model_config = ConfigDict(frozen=True)

    scala_version: str
    scala_version_base: str
    scala_version_suffix: str
    binary_version: str
    publish_to_sonatype: bool
    scaladoc_source_links_ver: str
    flow: ReleaseFlow

    def summary(self) -> str:
        publish = "yes" if self.publish_to_sonatype else "no"
        return (
            f"Scala {self.scala_version} (binary {self.binary_version}, "
            f"{self.flow.value} build, publishToSonatype={publish})"
        )
