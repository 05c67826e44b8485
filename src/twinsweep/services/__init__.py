from .activity import LoggingActivityRecorder
from .file_service import FileService

__all__ = ["LoggingActivityRecorder", "FileService"]
