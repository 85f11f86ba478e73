from .base import Dispatcher, DispatchResult
from .logging_dispatcher import LoggingDispatcher
from .smtp import SmtpDispatcher

__all__ = ["Dispatcher", "DispatchResult", "LoggingDispatcher", "SmtpDispatcher"]
