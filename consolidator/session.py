import logging

from .engine import consolidate
from .errors import ConsolidationError, RunInProgressError, SerializationError
from .models import PENDING, FileStatus
from .serializer import serialize

logger = logging.getLogger(__name__)


class ConsolidationSession:
    """Per-user state: the file queue, the last result and the last error.

    The Streamlit pages keep one instance in ``st.session_state``; the engine
    only ever sees a snapshot of the queue.
    """

    def __init__(self):
        self.files = []
        self.result = None
        self.error = None
        self.is_running = False

    def add_files(self, input_files):
        entries = [FileStatus(file=f) for f in input_files]
        self.files.extend(entries)
        self.result = None
        self.error = None
        return entries

    def remove_file(self, file_id):
        for index, entry in enumerate(self.files):
            if entry.id == file_id:
                del self.files[index]
                return entry
        raise KeyError(file_id)

    def clear(self):
        self.files = []
        self.result = None
        self.error = None

    def run(self, strategy, on_status=None):
        if self.is_running:
            raise RunInProgressError()

        self.is_running = True
        self.error = None
        # Files added while the run is in flight wait for the next run
        queue = list(self.files)
        for entry in queue:
            entry.status = PENDING
            entry.row_count = None
        try:
            self.result = consolidate(queue, strategy, on_status=on_status)
        except ConsolidationError as e:
            self.result = None
            self.error = str(e)
            raise
        finally:
            self.is_running = False
        return self.result

    def build_download(self, settings):
        """Serializes the stored result. The result survives a failure so the user can retry."""
        if self.result is None:
            raise ValueError("Nothing to download yet, run a consolidation first.")
        try:
            data = serialize(self.result, settings)
        except SerializationError as e:
            self.error = str(e)
            raise
        self.error = None
        return data

    @property
    def summary(self):
        if self.result is None:
            return None
        return {
            "files_processed": self.result.files_processed,
            "total_rows": self.result.total_rows,
        }
