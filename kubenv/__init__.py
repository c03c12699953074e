# kubenv/__init__.py
"""
KubEnv Package Initialization

This file initializes the kubenv package and provides version information.
KubEnv keeps a collection of named kubeconfig files and switches which one
the Kubernetes client uses.
"""

# Package metadata
__version__ = "0.3.2"
__author__ = "KubEnv Development Team"
__description__ = "CLI application for managing kubernetes environments"

__all__ = [
    "ConfigStore",
    "KubeConfig",
    "KubenvError",
    "__version__",
]

from .errors import KubenvError
from .store import ConfigStore, KubeConfig

