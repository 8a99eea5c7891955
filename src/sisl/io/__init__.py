"""Input and output helpers."""

from .file_writer import FileWriter

__all__ = ["FileWriter"]
