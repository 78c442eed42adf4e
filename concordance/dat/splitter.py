"""
DAT Splitter

Splits a large DAT file into numbered part files of at most N rows each.
The input is streamed once; every part repeats the header row.
"""

import logging
import os
from dataclasses import replace
from itertools import chain, islice
from pathlib import Path
from typing import Optional

from ..common.constants import DEFAULT_WRITE_ENCODING
from ..models import DEFAULT_OPTIONS, DatFileOptions, EmptyField
from .cancellation import CancellationToken
from .reader import read
from .writer import write_file

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROWS = 10_000


def part_path(input_path: str | os.PathLike, output_dir: str | os.PathLike, index: int) -> Path:
    """Output path for part number index, e.g. export-0003.dat."""
    return Path(output_dir) / f"{Path(input_path).stem}-{index:04d}.dat"


def split_dat(
    input_path: str | os.PathLike,
    output_dir: str | os.PathLike,
    max_rows_per_file: int = DEFAULT_MAX_ROWS,
    options: Optional[DatFileOptions] = None,
    encoding: str = DEFAULT_WRITE_ENCODING,
    cancel_token: Optional[CancellationToken] = None,
) -> int:
    """
    Split a DAT file into parts.

    Args:
        input_path: DAT file to split
        output_dir: Directory for part files (created if missing)
        max_rows_per_file: Maximum data rows per part
        options: Reader options for the input file
        encoding: Output encoding (default: UTF-8 with BOM)
        cancel_token: Optional CancellationToken

    Returns:
        Number of part files written (0 for a file with no data rows)
    """
    if max_rows_per_file < 1:
        raise ValueError("max_rows_per_file must be at least 1")

    os.makedirs(output_dir, exist_ok=True)

    # Every column must be present in the first row of each part
    options = replace(options or DEFAULT_OPTIONS, empty_field=EmptyField.KEEP)
    rows = read(input_path, options=options, cancel_token=cancel_token)
    file_index = 0

    for first in rows:
        file_index += 1
        out_path = part_path(input_path, output_dir, file_index)
        logger.info("Creating split file %s", out_path)

        batch = chain([first], islice(rows, max_rows_per_file - 1))
        written = write_file(out_path, batch, encoding=encoding, cancel_token=cancel_token)
        logger.info("Wrote %d rows to %s", written, out_path)

    return file_index
