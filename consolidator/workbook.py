"""Decoding uploaded bytes into ordered sheet grids.

pandas does the actual parsing: openpyxl for ``.xlsx``/``.xlsm``, xlrd for
legacy ``.xls`` and its own C parser for ``.csv``. Cells come back raw (numbers
stay numbers, dates stay datetimes) and missing cells become ``""``. CSV text
that looks like a number is typed as one.
"""
import csv
import io
import logging
import os
import re

import pandas as pd

from .errors import DecodeError

logger = logging.getLogger(__name__)

CSV_SHEET_NAME = "Sheet1"
TEXT_SUFFIXES = {".csv"}

INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")
NUMBER_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def frame_to_grid(df):
    """Turns a headerless DataFrame into a list of rows with "" for missing cells."""
    if df.empty:
        return []
    df = df.astype(object)
    return df.where(df.notna(), "").values.tolist()


def parse_number(value):
    """Types numeric CSV text the way a spreadsheet would. Anything else stays as it is."""
    if not isinstance(value, str):
        return value
    text = value.strip()
    if INTEGER_PATTERN.match(text):
        return int(text)
    if NUMBER_PATTERN.match(text):
        return float(text)
    return value


def _decode_text(data):
    try:
        return data.decode('utf-8-sig')
    except UnicodeDecodeError:
        logger.warning("File is not valid UTF-8, retrying with latin-1")
        return data.decode('latin-1')


def _read_csv(data):
    text = _decode_text(data)
    # Size the frame to the widest line so rows longer than the first one keep every field
    width = max((len(row) for row in csv.reader(io.StringIO(text))), default=0)
    if width == 0:
        return {CSV_SHEET_NAME: []}
    df = pd.read_csv(
        io.StringIO(text),
        header=None,
        names=list(range(width)),
        dtype=object,
        keep_default_na=False,
        skip_blank_lines=False,
    )
    return {CSV_SHEET_NAME: frame_to_grid(df.map(parse_number))}


def _read_excel(data):
    # sheet_name=None keeps every sheet, in the order the workbook declares them
    sheets = pd.read_excel(io.BytesIO(data), sheet_name=None, header=None, dtype=object)
    return {name: frame_to_grid(df) for name, df in sheets.items()}


def decode(input_file):
    """Returns an ordered ``{sheet name: grid}`` mapping for one uploaded file.

    Any parser failure is raised as DecodeError so the caller can abort the run.
    """
    suffix = os.path.splitext(input_file.name)[1].lower()
    try:
        if suffix in TEXT_SUFFIXES:
            workbook = _read_csv(input_file.data)
        else:
            workbook = _read_excel(input_file.data)
    except Exception as e:
        raise DecodeError(input_file.name, e) from e

    logger.debug("Decoded '%s' with %d sheet(s): %s", input_file.name, len(workbook), list(workbook))
    return workbook
