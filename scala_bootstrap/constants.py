from enum import Enum


class Phase(Enum):
    """Where a module build publishes to."""

    INTERNAL = "internal"
    PUBLIC_STAGING = "public-staging"


DEFAULT_INTEGRATION_REPO = "https://scala-ci.typesafe.com/artifactory/scala-integration/"
MAVEN_CENTRAL = "https://repo1.maven.org/maven2/"
SONATYPE_API = "https://oss.sonatype.org/service/local"
SONATYPE_PROFILE = "org.scala-lang"

# Organisations whose artifacts a run (re)publishes, as repository paths
PUBLISHED_ORGANISATIONS = ("org/scala-lang", "org/scala-lang/modules", "org/scalacheck")

RUN_OUTPUT_FILE = "jenkins.properties"
BUILD_CHARACTER_FILE = "buildcharacter.properties"
NIGHTLY_BASE_VERSION_SUFFIX = "SHA-NIGHTLY"
