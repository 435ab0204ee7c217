# Path and File Name : /home/kutt/kutt-installer/kutt_installer/system/__init__.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: System package initialization - command runner and host capabilities

from .accounts import AccountManager
from .commands import CommandRunner
from .containers import DockerEngine
from .firewall import UfwFirewall
from .host import Host
from .node import NodeRuntime
from .os_check import OSCheck, require_root
from .packages import AptPackageManager
from .supervisor import SystemctlSupervisor

__all__ = [
    'AccountManager',
    'AptPackageManager',
    'CommandRunner',
    'DockerEngine',
    'Host',
    'NodeRuntime',
    'OSCheck',
    'SystemctlSupervisor',
    'UfwFirewall',
    'require_root',
]
