"""Utility helpers for the reviewer."""

from .fileio import read_source, read_text_file, read_yaml_file
from .code import discover_files, glob_files

__all__ = [
    "read_source",
    "read_text_file",
    "read_yaml_file",
    "discover_files",
    "glob_files",
]
