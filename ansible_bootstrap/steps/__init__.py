from .step_10_remove_yum_ansible import RemoveYumAnsibleStep
from .step_20_configure_repos import ConfigureReposStep
from .step_30_refresh_packages import RefreshPackagesStep
from .step_40_install_build_deps import InstallBuildDepsStep
from .step_50_build_openssl import BuildOpenSSLStep
from .step_60_build_python import BuildPythonStep
from .step_70_install_ansible import InstallAnsibleStep

__all__ = [
    "RemoveYumAnsibleStep",
    "ConfigureReposStep",
    "RefreshPackagesStep",
    "InstallBuildDepsStep",
    "BuildOpenSSLStep",
    "BuildPythonStep",
    "InstallAnsibleStep",
]
