# kubenv/store.py
"""
Config Store

This module holds the on-disk collection of named kubeconfig files and the
"active pointer" (the file the Kubernetes client reads, usually
~/.kube/config). Every stored config is one `<name>.kubeconfig` file inside
the store directory; applying a config replaces the active pointer with a
copy of its bytes.

The store never parses the configs. Content is treated as opaque bytes and
identified by its SHA-256 digest, which is how the current config is
recognised and how duplicate content is refused.
"""

import hashlib
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel

from .errors import (
    AlreadyAppliedError,
    ConfigNotFoundError,
    InvalidNameError,
    NameConflictError,
    StoreIOError,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

# Length of the hash prefix used to label an active config that is not stored
SHORT_HASH_LEN = 8


class KubeConfig(BaseModel):
    name: str
    path: Path
    hash: str
    stored: bool = True

    @property
    def short_hash(self) -> str:
        return self.hash[:SHORT_HASH_LEN]


def content_hash(content: bytes) -> str:
    """Hex SHA-256 digest of a config's bytes."""
    return hashlib.sha256(content).hexdigest()


def file_hash(path: Path) -> str:
    try:
        return content_hash(path.read_bytes())
    except OSError as e:
        raise StoreIOError(f"Cannot get hash from file '{path}': {e}") from e


def atomic_write(path: Path, content: bytes):
    """
    Write bytes to `path` so that readers see either the old file or the
    complete new one, never a truncated mix.

    The data goes to a temporary file in the same directory which is then
    renamed over the target. The temporary file is created with mode 0600.
    """
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


class ConfigStore:
    """
    Manages the store directory and the active pointer.

    Both locations are passed in explicitly so that tests (and users with
    unusual layouts) can point the store anywhere.
    """

    def __init__(
        self,
        store_dir: PathLike,
        kube_dir: PathLike,
        suffix: str = ".kubeconfig",
        active_name: str = "config",
    ):
        self.store_dir = Path(store_dir)
        self.kube_dir = Path(kube_dir)
        self.suffix = suffix
        self.active_path = self.kube_dir / active_name

    @classmethod
    def from_settings(cls, settings, store_dir: Optional[PathLike] = None, kube_dir: Optional[PathLike] = None):
        """Build a store from KubenvSettings, letting explicit paths win."""
        if kube_dir is not None:
            # A --kube-dir override moves the default store along with it
            settings = settings.model_copy(update={"KUBE_DIR": Path(kube_dir)})
        return cls(
            store_dir=store_dir if store_dir is not None else settings.store_dir,
            kube_dir=settings.KUBE_DIR,
            suffix=settings.CONFIG_SUFFIX,
            active_name=settings.ACTIVE_CONFIG_NAME,
        )

    # --- paths and names ---

    def _validate_name(self, name: str):
        bad_chars = [os.sep, "\0"]
        if os.altsep:
            bad_chars.append(os.altsep)
        if not name or name in (".", "..") or any(c in name for c in bad_chars):
            raise InvalidNameError(name)

    def path_for(self, name: str) -> Path:
        self._validate_name(name)
        return self.store_dir / f"{name}{self.suffix}"

    def _ensure_store_dir(self):
        if self.store_dir.is_dir():
            return
        try:
            self.store_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreIOError(f"Cannot create kubenv directory '{self.store_dir}': {e}") from e
        logger.info("Created store directory %s", self.store_dir)

    # --- queries ---

    def list(self) -> List[KubeConfig]:
        """Return all stored configs sorted by name. Missing store -> empty list."""
        if not self.store_dir.is_dir():
            logger.debug("Store directory %s does not exist yet", self.store_dir)
            return []

        try:
            entries = list(self.store_dir.iterdir())
        except OSError as e:
            raise StoreIOError(f"Cannot read files from directory '{self.store_dir}': {e}") from e

        configs = []
        for path in entries:
            if not path.name.endswith(self.suffix) or not path.is_file():
                continue
            name = path.name[: -len(self.suffix)]
            if not name:
                continue
            try:
                digest = file_hash(path)
            except StoreIOError as e:
                logger.warning("Skipping unreadable config %s: %s", path, e)
                continue
            configs.append(KubeConfig(name=name, path=path, hash=digest))

        configs.sort(key=lambda kc: kc.name)
        return configs

    def current(self) -> Optional[KubeConfig]:
        """
        Identify the config currently in the active pointer.

        Returns the stored config with the same content hash, an unstored
        record named after the short hash when nothing matches, or None if
        the active pointer does not exist.
        """
        if not self.active_path.is_file():
            return None
        digest = file_hash(self.active_path)
        for kc in self.list():
            if kc.hash == digest:
                return kc
        return KubeConfig(
            name=digest[:SHORT_HASH_LEN],
            path=self.active_path,
            hash=digest,
            stored=False,
        )

    # --- operations ---

    def read_config(self, name: str) -> bytes:
        """Return the raw bytes of a stored config."""
        path = self.path_for(name)
        if not path.is_file():
            raise ConfigNotFoundError(name)
        try:
            return path.read_bytes()
        except OSError as e:
            raise StoreIOError(f"Cannot open file '{path}': {e}") from e

    def show(self, name: str) -> bytes:
        return self.read_config(name)

    def add(self, name: Optional[str], content: bytes) -> KubeConfig:
        """
        Store `content` under `name`. Without a name the content hash is
        used. Existing names and already stored content are refused.
        """
        digest = content_hash(content)
        if name is None:
            name = digest
        path = self.path_for(name)

        for kc in self.list():
            if kc.hash == digest:
                raise NameConflictError(f"Config already exists with name '{kc.name}'")

        if path.exists():
            raise NameConflictError(f"Config with name '{name}' already exists")

        self._ensure_store_dir()
        try:
            atomic_write(path, content)
        except OSError as e:
            raise StoreIOError(f"Cannot write file '{path}': {e}") from e

        logger.info("Added config '%s' (%d bytes)", name, len(content))
        return KubeConfig(name=name, path=path, hash=digest)

    def remove(self, name: str):
        path = self.path_for(name)
        if not path.is_file():
            raise ConfigNotFoundError(name)
        try:
            path.unlink()
        except OSError as e:
            raise StoreIOError(f"Cannot remove config with name '{name}': {e}") from e
        logger.info("Removed config '%s'", name)

    def export(self, name: str, destination: PathLike):
        """
        Copy a stored config's bytes to `destination`. The destination is
        written in place, so symlinks are followed and an existing file keeps
        its permissions.
        """
        content = self.read_config(name)
        destination = Path(destination)
        try:
            destination.write_bytes(content)
        except OSError as e:
            raise StoreIOError(f"Cannot open file '{destination}': {e}") from e
        logger.info("Exported config '%s' to %s", name, destination)

    def apply(self, name: str) -> KubeConfig:
        """
        Make `name` the active config by replacing the active pointer with
        its bytes. The previous pointer stays intact if the write fails.
        """
        content = self.read_config(name)
        digest = content_hash(content)

        if self.active_path.is_file():
            try:
                if file_hash(self.active_path) == digest:
                    raise AlreadyAppliedError(name)
            except StoreIOError as e:
                # Unreadable pointer: overwrite it anyway
                logger.debug("Cannot hash active config: %s", e)

        try:
            self.kube_dir.mkdir(parents=True, exist_ok=True)
            atomic_write(self.active_path, content)
        except OSError as e:
            raise StoreIOError(f"Cannot copy config '{name}' to config file: {e}") from e

        logger.info("Applied config '%s' to %s", name, self.active_path)
        return KubeConfig(name=name, path=self.path_for(name), hash=digest)
