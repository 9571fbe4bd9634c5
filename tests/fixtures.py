import io

from openpyxl import Workbook

from consolidator.config import DEFAULT_SETTINGS
from consolidator.models import FileStatus, InputFile


def xlsx_bytes(sheets):
    """Builds an .xlsx file in memory from ``{sheet name: list of rows}``."""
    wb = Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(name)
        for row in rows:
            ws.append(row)
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def queued(name, sheets):
    return FileStatus(file=InputFile(name=name, data=xlsx_bytes(sheets)))


def settings(**overrides):
    return {**DEFAULT_SETTINGS, **overrides}
