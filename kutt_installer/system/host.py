# Path and File Name : /home/kutt/kutt-installer/kutt_installer/system/host.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Bundles every host capability the installer drives behind one object

"""
Host: the set of capabilities components receive instead of shelling out
themselves. Host.production() wires the real implementations onto a single
CommandRunner; tests build a Host from in-memory fakes.
"""

from dataclasses import dataclass
from typing import Any, Optional

from .accounts import AccountManager
from .commands import CommandRunner
from .containers import DockerEngine
from .firewall import UfwFirewall
from .node import NodeRuntime
from .packages import AptPackageManager
from .supervisor import SystemctlSupervisor


@dataclass
class Host:
    packages: Any
    supervisor: Any
    firewall: Any
    accounts: Any
    docker: Any
    node: Any
    nginx: Any
    certbot: Any
    runner: Optional[CommandRunner] = None

    @classmethod
    def production(cls, runner: Optional[CommandRunner] = None) -> "Host":
        from ..certs.certbot import CertbotClient
        from ..proxy.nginx import NginxController

        runner = runner or CommandRunner()
        return cls(
            packages=AptPackageManager(runner),
            supervisor=SystemctlSupervisor(runner),
            firewall=UfwFirewall(runner),
            accounts=AccountManager(runner),
            docker=DockerEngine(runner),
            node=NodeRuntime(runner),
            nginx=NginxController(runner),
            certbot=CertbotClient(runner),
            runner=runner,
        )
