from typing import Optional

from .client import ApiResult, Client
from .config import Settings, configure as _configure, get_scheduler
from .dispatch import Dispatcher, LoggingDispatcher, SmtpDispatcher
from .server.scheduler import JobScheduler
from .storage import MemoryJobRegistry

_client: Client | None = None


def configure(scheduler: Optional[JobScheduler]) -> None:
    _configure(scheduler)
    global _client
    _client = None


def get_client() -> Client:
    global _client
    if _client is None:
        _client = Client(get_scheduler())
    return _client


def create_dispatcher(settings: Settings) -> Dispatcher:
    if settings.dispatcher == "log":
        return LoggingDispatcher()
    return SmtpDispatcher(
        hostname=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.email_user,
        password=settings.email_pass,
        sender=settings.email_from,
        timeout=settings.smtp_timeout,
    )


def create_scheduler(
    settings: Settings, dispatcher: Optional[Dispatcher] = None
) -> JobScheduler:
    return JobScheduler(
        MemoryJobRegistry(),
        dispatcher or create_dispatcher(settings),
        default_interval=settings.default_interval,
    )


__all__ = [
    "ApiResult",
    "Client",
    "JobScheduler",
    "Settings",
    "configure",
    "create_dispatcher",
    "create_scheduler",
    "get_client",
    "get_scheduler",
]
