import logging

from . import models
from .errors import DecodeError, EmptyResultError
from .models import ConsolidatedResult
from .workbook import decode

logger = logging.getLogger(__name__)


def _notify(on_status, entry):
    if on_status is not None:
        on_status(entry)


def consolidate(files, strategy, on_status=None):
    """Runs every queued file through ``strategy`` and returns the combined rows.

    Files are processed one at a time in queue order. ``on_status`` is called
    with the FileStatus entry each time its state changes. A file that cannot
    be decoded aborts the whole run; so does a run that yields no rows.
    """
    files = list(files)
    logger.info("Consolidating %d file(s) with the '%s' strategy", len(files), strategy.kind)

    rows = []
    file_row_counts = {}

    for entry in files:
        entry.status = models.PROCESSING
        _notify(on_status, entry)

        try:
            workbook = decode(entry.file)
        except DecodeError:
            entry.status = models.ERROR
            _notify(on_status, entry)
            logger.error("Aborting run, '%s' could not be decoded", entry.name, exc_info=True)
            raise

        file_rows = 0
        for sheet_name, grid in workbook.items():
            sheet_rows = strategy.transform_sheet(grid, entry.name, sheet_name)
            logger.debug("'%s' / '%s': %d row(s)", entry.name, sheet_name, len(sheet_rows))
            rows.extend(sheet_rows)
            file_rows += len(sheet_rows)

        entry.status = models.COMPLETED
        entry.row_count = file_rows
        file_row_counts[entry.id] = file_rows
        _notify(on_status, entry)

    if not rows:
        logger.warning("No data rows found across %d file(s)", len(files))
        raise EmptyResultError()

    logger.info("Consolidated %d row(s) from %d file(s)", len(rows), len(files))
    return ConsolidatedResult(
        kind=strategy.kind,
        rows=rows,
        header=strategy.header,
        file_row_counts=file_row_counts,
    )
