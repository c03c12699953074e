# kubenv/errors.py
"""
Exceptions raised by the config store.

Every failure the CLI reports to the user derives from KubenvError, so the
command layer can catch one type and turn it into an error message and a
non-zero exit code.
"""


class KubenvError(Exception):
    """Base class for all KubEnv failures."""


class ConfigNotFoundError(KubenvError):
    """The named config does not exist in the store."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Cannot find config with name '{name}'")


class NameConflictError(KubenvError):
    """A config with this name (or identical content) is already stored."""


class InvalidNameError(KubenvError):
    """The name cannot be used as a config file name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Invalid config name '{name}'")


class StoreIOError(KubenvError):
    """Reading or writing a file failed."""


class AlreadyAppliedError(KubenvError):
    """The active pointer already holds the requested config."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Config '{name}' already applied")
