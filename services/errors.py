# services/errors.py
from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    AGENT_REJECTED = "agent_rejected"
    TRANSPORT = "transport"
    STORAGE = "storage"


class NothingToSaveError(RuntimeError):
    """Raised when saving a workflow that has no agent result yet."""
