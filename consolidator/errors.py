class ConsolidationError(Exception):
    """Base class for every failure surfaced to the user as a single message."""


class DecodeError(ConsolidationError):
    def __init__(self, file_name, reason):
        self.file_name = file_name
        super().__init__(f"Could not read '{file_name}': {reason}")


class EmptyResultError(ConsolidationError):
    def __init__(self, message="No data found in the uploaded files."):
        super().__init__(message)


class SerializationError(ConsolidationError):
    def __init__(self, message="Failed to generate download file."):
        super().__init__(message)


class RunInProgressError(ConsolidationError):
    def __init__(self, message="A consolidation is already running. Please wait for it to finish."):
        super().__init__(message)
