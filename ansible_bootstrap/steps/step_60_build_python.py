from __future__ import annotations

import logging

from ..config import ProvisionConfig
from ..lib.build import configure, extract_tarball, make, make_clean, make_install
from ..lib.download import fetch
from ..lib.host import Host
from ..lib.ldconfig import register_lib_dir
from ..lib.probe import python_ssl_version, version_matches

logger = logging.getLogger(__name__)


class BuildPythonStep:
    """Build CPython from source against the OpenSSL prefix.

    Installed with `make altinstall` so the system python stays untouched.
    A matching version whose ssl module reports the target OpenSSL counts as
    done; run with force to rebuild anyway.
    """

    step_id = "60_build_python"

    def __init__(self, cfg: ProvisionConfig) -> None:
        self.cfg = cfg

    @property
    def source_dir(self) -> str:
        return f"{self.cfg.python_src_dir}/Python-{self.cfg.python_version}"

    def _installed_ok(self, host: Host) -> bool:
        # Checked by full path: sudo's secure_path leaves out /usr/local/bin.
        python = self.cfg.python_path
        if not host.exists(python):
            logger.info("%s not found", python)
            return False
        if not version_matches(host, [python, "--version"], self.cfg.python_version):
            return False
        ssl_version = python_ssl_version(host, python)
        logger.info("%s ssl module: %s", python, ssl_version)
        return ssl_version is not None and self.cfg.openssl_version in ssl_version.split()

    def precondition(self, host: Host) -> bool:
        return self._installed_ok(host)

    def run(self, host: Host) -> None:
        cfg = self.cfg
        archive = fetch(host, cfg.python_url, cfg.python_src_dir)
        extract_tarball(host, archive, cfg.python_src_dir)

        make_clean(host, self.source_dir)
        configure(
            host,
            self.source_dir,
            [
                "--enable-shared",
                f"--with-openssl={cfg.openssl_prefix}",
                "--with-openssl-rpath=auto",
                "--enable-loadable-sqlite-extensions",
                f"--prefix={cfg.python_prefix}",
                *cfg.python_configure_extra,
            ],
            variables={
                "LDFLAGS": f"-L{cfg.openssl_prefix}/lib",
                "CPPFLAGS": f"-I{cfg.openssl_prefix}/include",
            },
        )
        make(host, self.source_dir, jobs=cfg.build_jobs)
        make_install(host, self.source_dir, target="altinstall")

        register_lib_dir(host, cfg.python_ld_name, f"{cfg.python_prefix}/lib")
        logger.info("Python %s installed to %s/bin/%s", cfg.python_version, cfg.python_prefix, cfg.python_bin)

    def postcondition(self, host: Host) -> bool:
        return self._installed_ok(host)
