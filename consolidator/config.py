import json
import logging
import os

from openpyxl.utils import get_column_letter

logger = logging.getLogger(__name__)

# --- ⚙️ Settings File ---
SETTINGS_FILE = os.environ.get("CONSOLIDATOR_SETTINGS", "consolidator_settings.json")

DEFAULT_EXTRACT_POSITIONS = [2, 3, 7, 8, 9, 10, 11, 12, 13, 14]


def _default_labels(positions):
    return [f"Column {get_column_letter(pos + 1)}" for pos in positions]


DEFAULT_SETTINGS = {
    "extract_positions": DEFAULT_EXTRACT_POSITIONS,
    "extract_labels": _default_labels(DEFAULT_EXTRACT_POSITIONS),
    "comments_label": "Comments",
    "output_sheet_name": "Consolidated",
    "source_file_field": "source_file",
    "style_header": True,
    "header_fill": "D9E1F2",
    "accepted_types": ["xlsx", "xlsm", "xls", "csv"],
    "log_level": "INFO",
}


def validate_settings(settings):
    """Raises ValueError when the extractor columns are inconsistent."""
    positions = settings["extract_positions"]
    labels = settings["extract_labels"]
    if not positions:
        raise ValueError("extract_positions must list at least one column.")
    if any(not isinstance(pos, int) or pos < 0 for pos in positions):
        raise ValueError(f"extract_positions must be non-negative integers, got {positions}")
    if len(labels) != len(positions):
        raise ValueError(
            f"extract_labels has {len(labels)} entries but extract_positions has {len(positions)}"
        )
    return settings


def load_settings(path=None):
    """Loads the settings file, writing the defaults if it is missing or unreadable."""
    path = path or SETTINGS_FILE
    try:
        with open(path, 'r', encoding='utf-8') as f:
            stored = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError):
        logger.warning("No usable settings at '%s', writing defaults", path)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(DEFAULT_SETTINGS, f, indent=2)
        stored = {}

    settings = {**DEFAULT_SETTINGS, **stored}
    # Positions changed without labels: derive labels from the new positions
    if "extract_positions" in stored and "extract_labels" not in stored:
        settings["extract_labels"] = _default_labels(settings["extract_positions"])
    return validate_settings(settings)
