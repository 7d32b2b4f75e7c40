"""Checks that are performed to configuration options."""

import os
from pathlib import Path

from pydantic import FilePath


class InvalidConfigurationError(Exception):
    """Chat relay configuration is invalid."""


def file_check(path: FilePath, desc: str) -> None:
    """
    Ensure the given path is an existing regular file and is readable.

    Raises:
        InvalidConfigurationError: If `path` does not point to a file or is not
        readable.
    """
    if not os.path.isfile(path):
        raise InvalidConfigurationError(f"{desc} '{path}' is not a file")
    if not os.access(path, os.R_OK):
        raise InvalidConfigurationError(f"{desc} '{path}' is not readable")


def directory_check(path: Path, desc: str) -> None:
    """Ensure the given path is an existing directory the service can write to."""
    if not path.is_dir():
        raise InvalidConfigurationError(f"{desc} '{path}' is not a directory")
    if not os.access(path, os.W_OK):
        raise InvalidConfigurationError(f"{desc} '{path}' is not writable")


def read_prompt_file(path: FilePath, desc: str) -> str:
    """
    Read a prompt text shipped as a separate file.

    Trailing whitespace is stripped. A file holding only whitespace is
    rejected since an empty prompt would silently replace the default one.

    Raises:
        InvalidConfigurationError: If the file is missing, not readable or empty.
    """
    file_check(path, desc)
    with open(path, encoding="utf-8") as f:
        text = f.read().rstrip()
    if not text:
        raise InvalidConfigurationError(f"{desc} '{path}' is empty")
    return text
