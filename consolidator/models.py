import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pandas as pd

PENDING = "pending"
PROCESSING = "processing"
COMPLETED = "completed"
ERROR = "error"


@dataclass(frozen=True)
class InputFile:
    name: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class FileStatus:
    file: InputFile
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    status: str = PENDING
    row_count: Optional[int] = None

    @property
    def name(self) -> str:
        return self.file.name

    @property
    def size_kb(self) -> float:
        return self.file.size / 1024


@dataclass
class ConsolidatedResult:
    """The rows of one successful run plus its summary counters.

    ``rows`` are lists for the extract and concatenate strategies and dicts for
    the merge strategy. ``header`` is only set when the strategy synthesizes
    an explicit header row.
    """
    kind: str
    rows: list
    header: Optional[List[str]] = None
    file_row_counts: Dict[str, int] = field(default_factory=dict)

    @property
    def total_rows(self) -> int:
        return len(self.rows)

    @property
    def files_processed(self) -> int:
        return len(self.file_row_counts)

    @property
    def is_records(self) -> bool:
        return bool(self.rows) and isinstance(self.rows[0], dict)

    def columns(self) -> Optional[List[str]]:
        """Column labels for the output sheet, or None when rows are headerless."""
        if self.header is not None:
            return list(self.header)
        if self.is_records:
            # First record fixes the order; keys seen later are appended
            seen = {}
            for record in self.rows:
                seen.update(dict.fromkeys(record))
            return list(seen)
        return None

    def to_frame(self) -> pd.DataFrame:
        # object dtype stops integer columns with gaps from turning into floats
        return pd.DataFrame(self.rows, columns=self.columns(), dtype=object)
