from __future__ import annotations

import pytest

from ansible_bootstrap.config import DEFAULT_BUILD_DEPS, ProvisionConfig, load_config


def test_defaults_match_centos7_bootstrap() -> None:
    cfg = load_config(None)

    assert cfg.openssl_version == "1.1.1w"
    assert cfg.openssl_prefix == "/usr/local/openssl111w"
    assert cfg.openssl_url == "https://www.openssl.org/source/openssl-1.1.1w.tar.gz"
    assert cfg.python_url == "https://www.python.org/ftp/python/3.11.11/Python-3.11.11.tgz"
    assert cfg.python_bin == "python3.11"
    assert cfg.pip_path == "/usr/local/bin/pip3.11"
    assert cfg.build_deps == DEFAULT_BUILD_DEPS
    assert cfg.build_jobs is None
    assert [s.repo_id for s in cfg.repo_sections] == ["base", "updates", "extras"]


def test_yaml_overrides(tmp_path) -> None:
    p = tmp_path / "provision.yaml"
    p.write_text(
        "openssl:\n"
        "  version: 3.0.15\n"
        "python:\n"
        "  version: 3.12.8\n"
        "  configure_extra: ['--enable-optimizations']\n"
        "build:\n"
        "  jobs: 2\n"
        "ansible:\n"
        "  package: ansible-core==2.17.0\n",
        encoding="utf-8",
    )

    cfg = load_config(str(p))

    assert cfg.openssl_prefix == "/usr/local/openssl3015"
    assert cfg.openssl_ld_name == "openssl3015"
    assert cfg.python_short_version == "3.12"
    assert cfg.pip_path == "/usr/local/bin/pip3.12"
    assert cfg.python_configure_extra == ["--enable-optimizations"]
    assert cfg.build_jobs == 2
    assert cfg.ansible_package == "ansible-core==2.17.0"


def test_repo_names_and_baseurl_override() -> None:
    cfg = ProvisionConfig(raw={"repos": {"baseurl": "http://mirror.local/centos/7/", "names": {"base": "os"}}})

    (section,) = cfg.repo_sections
    assert section.baseurl == "http://mirror.local/centos/7/os/$basearch/"
    assert section.name == "CentOS-7 - Base"


def test_missing_file_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yaml"))


def test_non_mapping_document_rejected(tmp_path) -> None:
    p = tmp_path / "list.yml"
    p.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(str(p))


def test_section_must_be_mapping() -> None:
    cfg = ProvisionConfig(raw={"openssl": "1.1.1w"})

    with pytest.raises(ValueError, match="openssl"):
        cfg.openssl_version


def test_invalid_yaml_is_a_value_error(tmp_path) -> None:
    p = tmp_path / "cfg.yaml"
    p.write_text("repos: [unclosed\n", encoding="utf-8")

    with pytest.raises(ValueError, match="not valid YAML"):
        load_config(str(p))


@pytest.mark.parametrize(
    "text, match",
    [
        ("repos: [a, b]\n", "repos"),
        ("build:\n  jobs: abc\n", "build.jobs"),
        ("openssl:\n  url: 'https://example.com/{nope}.tar.gz'\n", "openssl_url"),
        ("packages:\n  build_deps: gcc\n", "build_deps"),
        ("packages:\n  remove: [1, 2]\n", "packages.remove"),
    ],
)
def test_load_config_validates_every_setting(tmp_path, text: str, match: str) -> None:
    p = tmp_path / "cfg.yaml"
    p.write_text(text, encoding="utf-8")

    with pytest.raises(ValueError, match=match):
        load_config(str(p))


def test_explicit_paths_under_prefix() -> None:
    cfg = ProvisionConfig(raw={"python": {"prefix": "/opt/py"}})

    assert cfg.python_path == "/opt/py/bin/python3.11"
    assert cfg.ansible_path == "/opt/py/bin/ansible"
