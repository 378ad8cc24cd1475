from .error_log_model import ErrorLog
from .system_log_model import SystemLog

__all__ = [
    "SystemLog",
    "ErrorLog",
]
