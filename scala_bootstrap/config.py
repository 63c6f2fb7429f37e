"""Site configuration file and the per-run bootstrap configuration"""

import configparser
import os
import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from scala_bootstrap.constants import (
    DEFAULT_INTEGRATION_REPO,
    MAVEN_CENTRAL,
    SONATYPE_API,
    SONATYPE_PROFILE,
)
from scala_bootstrap.model.module import ALL_MODULES
from scala_bootstrap.versioning.modules import ModuleVersioning

APP_NAME = "scala-bootstrap"

_home = os.path.expanduser("~")

xdg_config_home = os.environ.get("XDG_CONFIG_HOME") or os.path.join(_home, ".config")

if platform.system() == "Darwin":
    config_dir = Path(f"~/Library/Application Support/{APP_NAME}").expanduser()
else:
    config_dir = Path(os.path.join(xdg_config_home, APP_NAME))

default_cfg = {
    "repositories": {
        "integration": DEFAULT_INTEGRATION_REPO,
        "resolvers": MAVEN_CENTRAL,
        "sonatype_api": SONATYPE_API,
        "sonatype_profile": SONATYPE_PROFILE,
    },
    "build": {"sbt_cmd": "sbt", "sbt_args": ""},
    "dirs": {"ivy": ""},
}


def get_config_file() -> Path:
    return config_dir / f"{APP_NAME}.cfg"


class ConfigAccessor:
    """
    Dict-like access to the site configuration file.

    Missing sections or keys fall back to ``default_cfg``.

    Usage:
        config = ConfigAccessor()
        url = config.get('repositories', 'integration')
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path if config_path is not None else get_config_file()
        self.config = configparser.ConfigParser(interpolation=None)
        if self.config_path.exists():
            self.config.read(self.config_path)

    def get(self, section: str, key: str, default: Any = None) -> Any:
        try:
            return self.config[section][key]
        except KeyError:
            pass
        if default is not None:
            return default
        return default_cfg.get(section, {}).get(key)

    def get_list(self, section: str, key: str) -> List[str]:
        value = self.get(section, key) or ""
        return [v.strip() for v in value.replace("\n", ",").split(",") if v.strip()]


config = ConfigAccessor()


def _parse_assignments(values: Sequence[str], what: str) -> Dict[str, str]:
    """``["xml=1.0.6"]`` -> ``{"xml": "1.0.6"}``"""
    known = {m.name for m in ALL_MODULES}
    parsed = {}
    for value in values:
        name, sep, setting = value.partition("=")
        name, setting = name.strip(), setting.strip()
        if not sep or not name or not setting:
            raise ValueError(f"Expected MODULE={what.upper()}, got '{value}'")
        if name not in known:
            raise ValueError(
                f"Unknown module '{name}'. Known modules: {', '.join(sorted(known))}"
            )
        parsed[name] = setting
    return parsed


def module_overrides_from_env(env: Mapping[str, str]) -> Dict[str, Dict[str, str]]:
    """Read ``<PREFIX>_VER`` and ``<PREFIX>_REF`` (``XML_VER``, ``PARTEST_REF``...)."""
    versions, revisions = {}, {}
    for definition in ALL_MODULES:
        version = env.get(f"{definition.env_prefix}_VER")
        revision = env.get(f"{definition.env_prefix}_REF")
        if version:
            versions[definition.name] = version
        if revision:
            revisions[definition.name] = revision
    return {"versions": versions, "revisions": revisions}


@dataclass(frozen=True)
class BootstrapConfig:
    """
    Every override point of a bootstrap run, fixed at startup.

    Nothing downstream reads the environment; it is handed this object.
    """

    workspace: Path
    scala_version_base: Optional[str] = None
    scala_version_suffix: Optional[str] = None
    publish_to_sonatype: Optional[bool] = None
    module_versioning: ModuleVersioning = ModuleVersioning.PINNED
    module_versions: Mapping[str, str] = field(default_factory=dict)
    module_revisions: Mapping[str, str] = field(default_factory=dict)
    force_rebuild: bool = False
    test_stability: bool = False
    build_scalacheck: bool = False
    clean: bool = True
    integration_repo_url: str = DEFAULT_INTEGRATION_REPO
    integration_repo_credentials: Optional[str] = None
    resolvers: Sequence[str] = (MAVEN_CENTRAL,)
    sonatype_api: str = SONATYPE_API
    sonatype_profile: str = SONATYPE_PROFILE
    sbt_cmd: str = "sbt"
    sbt_args: Sequence[str] = ()
    ivy_dir: Optional[Path] = None
    build_timeout: Optional[int] = None

    @property
    def log_dir(self) -> Path:
        return self.workspace / "logs"

    @property
    def resolver_urls(self) -> List[str]:
        """The integration repository first, then the configured resolvers."""
        urls = [self.integration_repo_url]
        integration = self.integration_repo_url.rstrip("/")
        urls.extend(r for r in self.resolvers if r.rstrip("/") != integration)
        return urls

    @classmethod
    def create(
        cls,
        workspace: Path,
        env: Optional[Mapping[str, str]] = None,
        site: Optional[ConfigAccessor] = None,
        module_versions: Sequence[str] = (),
        module_revisions: Sequence[str] = (),
        **overrides: Any,
    ) -> "BootstrapConfig":
        """
        Combine site configuration, module environment variables and
        explicit overrides (highest precedence).

        ``module_versions``/``module_revisions`` are ``name=value`` strings.
        Overrides that are None are treated as not given.
        """
        site = site if site is not None else config
        env = env if env is not None else os.environ

        from_env = module_overrides_from_env(env)
        versions = {**from_env["versions"], **_parse_assignments(module_versions, "version")}
        revisions = {
            **from_env["revisions"],
            **_parse_assignments(module_revisions, "ref"),
        }

        ivy = site.get("dirs", "ivy")
        values: Dict[str, Any] = {
            "integration_repo_url": site.get("repositories", "integration"),
            "resolvers": tuple(site.get_list("repositories", "resolvers")),
            "sonatype_api": site.get("repositories", "sonatype_api"),
            "sonatype_profile": site.get("repositories", "sonatype_profile"),
            "sbt_cmd": site.get("build", "sbt_cmd"),
            "sbt_args": tuple((site.get("build", "sbt_args") or "").split()),
            "ivy_dir": Path(ivy).expanduser() if ivy else None,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        if "module_versioning" in values:
            values["module_versioning"] = ModuleVersioning(values["module_versioning"])

        return cls(
            workspace=Path(workspace),
            module_versions=versions,
            module_revisions=revisions,
            **values,
        )
