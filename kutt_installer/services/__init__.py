# Path and File Name : /home/kutt/kutt-installer/kutt_installer/services/__init__.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Services package initialization - systemd unit writer

from .systemd_writer import SystemdWriter

__all__ = ['SystemdWriter']
