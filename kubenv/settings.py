# kubenv/settings.py
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class KubenvSettings(BaseSettings):
    """
    Centralized configuration for KubEnv.
    Reads from environment variables, .env file, and defaults.
    """
    # Directory the Kubernetes client reads its config from
    KUBE_DIR: Path = Path.home() / ".kube"

    # Store directory; defaults to KUBE_DIR/kubenv if not set
    STORE_DIR: Optional[Path] = None

    # File layout
    CONFIG_SUFFIX: str = ".kubeconfig"
    ACTIVE_CONFIG_NAME: str = "config"

    # Logging
    LOG_LEVEL: str = "WARNING"

    # Load from .env file if present
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="KUBENV_",  # Variables must start with KUBENV_, e.g., KUBENV_KUBE_DIR
        extra='ignore'
    )

    @property
    def store_dir(self) -> Path:
        """Resolved store directory."""
        if self.STORE_DIR is not None:
            return self.STORE_DIR
        return self.KUBE_DIR / "kubenv"


# Instantiate global settings object
settings = KubenvSettings()
