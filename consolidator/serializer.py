import io
import logging
from datetime import datetime

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from .errors import SerializationError

logger = logging.getLogger(__name__)

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

THIN = Side(style="thin", color="000000")


def style_header_row(worksheet, fill_color):
    """Bold, filled, bordered and centered. Touches formatting of row 1 only."""
    fill = PatternFill("solid", fgColor=fill_color)
    for cell in worksheet[1]:
        cell.font = Font(bold=True)
        cell.fill = fill
        cell.border = Border(left=THIN, right=THIN, top=THIN, bottom=THIN)
        cell.alignment = Alignment(horizontal="center", vertical="center")


def keep_text_literal(worksheet):
    """openpyxl turns strings starting with "=" into formulas; store them as plain text."""
    for row in worksheet.iter_rows():
        for cell in row:
            if cell.data_type == "f":
                cell.data_type = "s"


def serialize(result, settings):
    """Writes the result into a one-sheet .xlsx workbook and returns its bytes."""
    sheet_name = settings["output_sheet_name"]
    df = result.to_frame()
    has_header = result.columns() is not None

    buffer = io.BytesIO()
    try:
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name=sheet_name, index=False, header=has_header)
            keep_text_literal(writer.sheets[sheet_name])
            if result.header is not None and settings["style_header"]:
                style_header_row(writer.sheets[sheet_name], settings["header_fill"])
    except Exception as e:
        logger.error("Could not build the output workbook", exc_info=True)
        raise SerializationError() from e

    logger.info("Serialized %d row(s) into sheet '%s'", result.total_rows, sheet_name)
    return buffer.getvalue()


def download_filename(kind, now=None):
    timestamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return f"consolidated_{kind}_{timestamp}.xlsx"
