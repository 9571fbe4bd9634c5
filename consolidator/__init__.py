from .engine import consolidate
from .errors import (
    ConsolidationError,
    DecodeError,
    EmptyResultError,
    RunInProgressError,
    SerializationError,
)
from .models import ConsolidatedResult, FileStatus, InputFile
from .serializer import XLSX_MIME, download_filename, serialize
from .session import ConsolidationSession
from .strategies import CONCATENATE, EXTRACT, MERGE, get_strategy
