# Path and File Name : /home/kutt/kutt-installer/kutt_installer/runtime/__init__.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Runtime package initialization

"""
Runtime activation for the deployed application.
"""

from .service_activator import ServiceActivator

__all__ = ['ServiceActivator']
