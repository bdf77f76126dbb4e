"""
flowwinstaller - Self-hosted Floww deployment installer
"""

__version__ = "0.1.0"

from .core import FlowwInstaller, InstallerError

__all__ = ["FlowwInstaller", "InstallerError"]
