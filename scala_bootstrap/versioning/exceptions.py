"""
Exception classes for the versioning module.
"""


class VersioningError(Exception):
    """Base exception for all versioning-related errors."""

    pass


class VersionFormatError(VersioningError):
    """Raised when a version string has an invalid format."""

    def __init__(self, version_string: str, expected_format: str = "x.y.z"):
        self.version_string = version_string
        self.expected_format = expected_format
        super().__init__(
            f"Invalid version format: '{version_string}'. "
            f"Expected format: {expected_format}"
        )


class MalformedVersionTag(VersionFormatError):
    """Raised when a release tag cannot be split into base and suffix."""

    def __init__(self, tag: str):
        super().__init__(tag, expected_format="v<major>.<minor>.<patch><suffix>")
        self.tag = tag


class MissingModuleTag(VersioningError):
    """Raised when a module revision has no usable tag upstream."""

    def __init__(self, module: str, tag: str, detail: str = ""):
        self.module = module
        self.tag = tag
        message = f"Tag {tag} not found for module {module}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class VersionNotFoundError(VersioningError):
    """Raised when no version is known for a module."""

    def __init__(self, module: str, source: str = "versions.properties"):
        self.module = module
        self.source = source
        super().__init__(f"No version for {module} in {source} or overrides")
