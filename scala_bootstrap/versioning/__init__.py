"""
Versioning module for scala-bootstrap.

All version logic of a bootstrap run lives here:

1. **Version values** (version.py):
   - Version: immutable ``major.minor.patch`` base plus suffix, parsed from
     release tags (``v2.12.0-RC1``) or explicit parts
   - BinaryVersion, Revision: validated string value types
   - binary_version(): the cross-version key rule

2. **Release version selection** (release.py):
   - ReleaseVersionSelector: explicit, tagged or nightly Scala version and
     whether the run publishes to Sonatype

3. **Module versions** (modules.py):
   - ModuleVersionResolver: pinned (versions.properties) or nightly
     (git describe) module versions and revisions

4. **Manifests** (manifest.py):
   - VersionManifest and read_properties() for ``.properties`` files

5. **Exceptions** (exceptions.py)

``release`` and ``modules`` depend on the model layer and are imported from
their submodules directly.
"""

from .exceptions import (
    MalformedVersionTag,
    MissingModuleTag,
    VersionFormatError,
    VersioningError,
    VersionNotFoundError,
)
from .manifest import VersionManifest, read_properties
from .version import BinaryVersion, Revision, Version, binary_version, parse_tag

__all__ = [
    "Version",
    "BinaryVersion",
    "Revision",
    "binary_version",
    "parse_tag",
    "VersionManifest",
    "read_properties",
    "VersioningError",
    "VersionFormatError",
    "MalformedVersionTag",
    "MissingModuleTag",
    "VersionNotFoundError",
]
