from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .lib.repos import RepoSection

DEFAULT_REPO_FILE = "/etc/yum.repos.d/CentOS-Base.repo"
DEFAULT_REPO_BASEURL = "http://vault.centos.org/7.9.2009"
DEFAULT_REPO_GPGKEY = "file:///etc/pki/rpm-gpg/RPM-GPG-KEY-CentOS-7"
DEFAULT_REPOS = {"base": "os", "updates": "updates", "extras": "extras"}

DEFAULT_BUILD_DEPS = [
    "wget",
    "zlib-devel",
    "bzip2-devel",
    "openssl-devel",
    "libffi-devel",
    "ncurses-devel",
    "sqlite-devel",
    "readline-devel",
    "tk-devel",
    "gdbm-devel",
    "xz-devel",
    "perl-core",
    "pcre-devel",
]

DEFAULT_OPENSSL_VERSION = "1.1.1w"
DEFAULT_OPENSSL_URL = "https://www.openssl.org/source/openssl-{version}.tar.gz"
DEFAULT_PYTHON_VERSION = "3.11.11"
DEFAULT_PYTHON_URL = "https://www.python.org/ftp/python/{version}/Python-{version}.tgz"


def _section(raw: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = raw.get(name) or {}
    if not isinstance(value, dict):
        raise ValueError(f"config section {name!r} must be a mapping")
    return value


def _str_list(raw: Dict[str, Any], section: str, key: str, default: List[str]) -> List[str]:
    value = _section(raw, section).get(key)
    if not value:
        return list(default)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"{section}.{key} must be a list of strings")
    return list(value)


@dataclass(frozen=True)
class ProvisionConfig:
    raw: Dict[str, Any]

    # repos

    @property
    def repo_file(self) -> str:
        return str(_section(self.raw, "repos").get("file") or DEFAULT_REPO_FILE)

    @property
    def repo_sections(self) -> List[RepoSection]:
        repos = _section(self.raw, "repos")
        baseurl = str(repos.get("baseurl") or DEFAULT_REPO_BASEURL).rstrip("/")
        gpgkey = str(repos.get("gpgkey") or DEFAULT_REPO_GPGKEY)
        release = str(repos.get("release_name") or "CentOS-7")
        names = repos.get("names") or DEFAULT_REPOS
        if not isinstance(names, dict):
            raise ValueError("repos.names must map repo ids to vault subdirectories")
        return [
            RepoSection(
                repo_id=str(repo_id),
                name=f"{release} - {str(repo_id).capitalize()}",
                baseurl=f"{baseurl}/{subdir}/$basearch/",
                gpgkey=gpgkey,
            )
            for repo_id, subdir in names.items()
        ]

    # packages

    @property
    def remove_packages(self) -> List[str]:
        return _str_list(self.raw, "packages", "remove", ["ansible"])

    @property
    def dev_group(self) -> str:
        return str(_section(self.raw, "packages").get("group") or "Development Tools")

    @property
    def build_deps(self) -> List[str]:
        return _str_list(self.raw, "packages", "build_deps", DEFAULT_BUILD_DEPS)

    @property
    def required_tools(self) -> List[str]:
        return _str_list(self.raw, "packages", "required_tools", ["gcc", "make"])

    # openssl

    @property
    def openssl_version(self) -> str:
        return str(_section(self.raw, "openssl").get("version") or DEFAULT_OPENSSL_VERSION)

    @property
    def openssl_url(self) -> str:
        tmpl = str(_section(self.raw, "openssl").get("url") or DEFAULT_OPENSSL_URL)
        return tmpl.format(version=self.openssl_version)

    @property
    def openssl_src_dir(self) -> str:
        return str(_section(self.raw, "openssl").get("src_dir") or "/usr/local/src")

    @property
    def openssl_tag(self) -> str:
        """Version with dots removed, e.g. 111w."""
        return self.openssl_version.replace(".", "")

    @property
    def openssl_prefix(self) -> str:
        return str(_section(self.raw, "openssl").get("prefix") or f"/usr/local/openssl{self.openssl_tag}")

    @property
    def openssl_ld_name(self) -> str:
        return f"openssl{self.openssl_tag}"

    # python

    @property
    def python_version(self) -> str:
        return str(_section(self.raw, "python").get("version") or DEFAULT_PYTHON_VERSION)

    @property
    def python_short_version(self) -> str:
        return ".".join(self.python_version.split(".")[:2])

    @property
    def python_url(self) -> str:
        tmpl = str(_section(self.raw, "python").get("url") or DEFAULT_PYTHON_URL)
        return tmpl.format(version=self.python_version)

    @property
    def python_src_dir(self) -> str:
        return str(_section(self.raw, "python").get("src_dir") or "/usr/src")

    @property
    def python_prefix(self) -> str:
        return str(_section(self.raw, "python").get("prefix") or "/usr/local")

    @property
    def python_configure_extra(self) -> List[str]:
        return _str_list(self.raw, "python", "configure_extra", [])

    @property
    def python_bin(self) -> str:
        return f"python{self.python_short_version}"

    @property
    def python_path(self) -> str:
        return f"{self.python_prefix}/bin/{self.python_bin}"

    @property
    def pip_path(self) -> str:
        return f"{self.python_prefix}/bin/pip{self.python_short_version}"

    @property
    def ansible_path(self) -> str:
        return f"{self.python_prefix}/bin/ansible"

    @property
    def python_ld_name(self) -> str:
        return f"python{self.python_short_version}"

    # ansible

    @property
    def ansible_package(self) -> str:
        return str(_section(self.raw, "ansible").get("package") or "ansible")

    @property
    def ansible_upgrade(self) -> bool:
        return bool(_section(self.raw, "ansible").get("upgrade", False))

    # build

    @property
    def build_jobs(self) -> Optional[int]:
        jobs = _section(self.raw, "build").get("jobs")
        if not jobs:
            return None
        try:
            n = int(jobs)
        except (TypeError, ValueError):
            raise ValueError(f"build.jobs must be a positive integer, got {jobs!r}") from None
        if n < 1:
            raise ValueError(f"build.jobs must be a positive integer, got {jobs!r}")
        return n

    def validate(self) -> "ProvisionConfig":
        """Evaluate every setting once so bad values fail before any step runs."""

        for name in ("repos", "packages", "openssl", "python", "ansible", "build"):
            _section(self.raw, name)

        for name in ("openssl_url", "python_url"):
            try:
                getattr(self, name)
            except (KeyError, IndexError) as e:
                raise ValueError(f"{name}: only {{version}} may be used in the template") from e

        self.remove_packages
        self.build_deps
        self.required_tools
        self.python_configure_extra
        self.repo_sections
        self.build_jobs
        return self


def load_config(path: Optional[str]) -> ProvisionConfig:
    """Load overrides from YAML; no path (or a missing default) means all defaults."""

    if not path:
        return ProvisionConfig(raw={})

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("provision config must be YAML")

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"{path} is not valid YAML: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a mapping/object")

    return ProvisionConfig(raw=raw).validate()
