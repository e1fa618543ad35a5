"""Filesystem metadata and path helpers."""

from .metadata import file_exists, modified_time, read_text
from .paths import (
    default_output_dir,
    ensure_dir,
    generated_file_path,
    norm_dir_separator,
    resolve_against,
)

__all__ = [
    "default_output_dir",
    "ensure_dir",
    "file_exists",
    "generated_file_path",
    "modified_time",
    "norm_dir_separator",
    "read_text",
    "resolve_against",
]
