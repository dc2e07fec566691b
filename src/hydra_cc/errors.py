"""
Hail Hydra - Multi-headed speculative execution framework for Claude Code
Copyright (c) 2025 Hail Hydra contributors
Licensed under MIT License

Exception types.

Most failures never reach the caller as exceptions: unreadable settings are
recovered as an empty document, per-file write errors are collected into the
operation report, and update-check failures end up in the cache file.
"""


class HydraError(Exception):
    """Base class for Hydra errors."""


class ConfigReadError(HydraError):
    """settings.json is missing, unreadable or not a JSON object."""


class FileWriteError(HydraError):
    """A single asset could not be written or removed."""

    def __init__(self, path, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"{path}: {cause}")


class UserCancelled(HydraError):
    """The user declined a confirmation. Not an error condition."""


class NetworkError(HydraError):
    """The latest version could not be fetched."""
