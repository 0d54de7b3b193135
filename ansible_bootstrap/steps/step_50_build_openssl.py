from __future__ import annotations

import logging

from ..config import ProvisionConfig
from ..lib.build import configure, extract_tarball, make, make_install
from ..lib.download import fetch
from ..lib.host import Host
from ..lib.ldconfig import is_registered, register_lib_dir
from ..lib.probe import version_matches

logger = logging.getLogger(__name__)


class BuildOpenSSLStep:
    """Build OpenSSL from source into its own prefix.

    CentOS 7 ships 1.0.2, which CPython 3.10+ refuses to link against.
    """

    step_id = "50_build_openssl"

    def __init__(self, cfg: ProvisionConfig) -> None:
        self.cfg = cfg

    @property
    def source_dir(self) -> str:
        return f"{self.cfg.openssl_src_dir}/openssl-{self.cfg.openssl_version}"

    @property
    def lib_dir(self) -> str:
        return f"{self.cfg.openssl_prefix}/lib"

    def precondition(self, host: Host) -> bool:
        binary = f"{self.cfg.openssl_prefix}/bin/openssl"
        return (
            host.exists(binary)
            and version_matches(host, [binary, "version"], self.cfg.openssl_version)
            and is_registered(host, self.cfg.openssl_ld_name, self.lib_dir)
        )

    def run(self, host: Host) -> None:
        cfg = self.cfg
        archive = fetch(host, cfg.openssl_url, cfg.openssl_src_dir)
        extract_tarball(host, archive, cfg.openssl_src_dir)

        configure(
            host,
            self.source_dir,
            [f"--prefix={cfg.openssl_prefix}", f"--openssldir={cfg.openssl_prefix}", "shared", "zlib"],
            script="./config",
        )
        make(host, self.source_dir, jobs=cfg.build_jobs)
        make_install(host, self.source_dir)

        register_lib_dir(host, cfg.openssl_ld_name, self.lib_dir)
        logger.info("OpenSSL %s installed to %s", cfg.openssl_version, cfg.openssl_prefix)

    def postcondition(self, host: Host) -> bool:
        return self.precondition(host)
