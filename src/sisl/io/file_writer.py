"""File input and output for the command-line front end."""

import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import Optional, TextIO, Union
from ..types import ErrorCode, ErrorType, SislError


PathLike = Union[str, Path]


class FileWriter:
    """
    Reads command input and writes command output.

    Output files are written to a temporary sibling and renamed into
    place, so a failed run never leaves a partial or empty file behind.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the file writer.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def read_input(self, path: Optional[PathLike] = None,
                   stream: Optional[TextIO] = None) -> str:
        """
        Read UTF-8 text from a file, or from a stream when no path is given.

        Args:
            path: Optional input file path
            stream: Stream used when path is None (defaults to stdin)

        Returns:
            The input text

        Raises:
            SislError: If the file cannot be opened or decoded
        """
        if path is None:
            return (stream or sys.stdin).read()

        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SislError(
                f"Cannot open input file: {path} ({e})",
                ErrorType.IO, ErrorCode.INPUT_UNREADABLE,
                context={"path": str(path)}
            )

        self.logger.debug(f"Read {len(text)} characters from {path}")
        return text

    def write_output(self, text: str, path: Optional[PathLike] = None,
                     stream: Optional[TextIO] = None) -> None:
        """
        Write text to a file atomically, or to a stream when no path is given.

        Args:
            text: Text to write
            path: Optional output file path
            stream: Stream used when path is None (defaults to stdout)

        Raises:
            SislError: If the file cannot be created or replaced
        """
        if path is None:
            (stream or sys.stdout).write(text)
            return

        output_path = Path(path)
        temp_name = None
        try:
            fd, temp_name = tempfile.mkstemp(
                prefix=f".{output_path.name}.", suffix=".tmp",
                dir=str(output_path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                handle.write(text)
            os.replace(temp_name, output_path)
            temp_name = None
        except OSError as e:
            raise SislError(
                f"Cannot open output file: {path} ({e})",
                ErrorType.IO, ErrorCode.OUTPUT_UNWRITABLE,
                context={"path": str(path)}
            )
        finally:
            if temp_name is not None and os.path.exists(temp_name):
                os.unlink(temp_name)

        self.logger.debug(f"Wrote {len(text)} characters to {output_path}")
