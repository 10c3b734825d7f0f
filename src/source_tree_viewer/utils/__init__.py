"""Utility functions and helpers"""

from source_tree_viewer.utils.display import prompt_for_zip_file, read_zip_as_base64

__all__ = [
    "prompt_for_zip_file",
    "read_zip_as_base64",
]
