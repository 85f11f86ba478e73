# pyrecurmail/config.py
import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv

from pyrecurmail.server.scheduler import JobScheduler

DISPATCHERS = ("smtp", "log")


def _env_number(name: str, default: str, cast=float):
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be a number, got {raw!r}") from None


@dataclass
class Settings:
    email_user: str = ""
    email_pass: str = ""
    email_from: str = ""
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_timeout: float = 30.0
    default_interval_minutes: float = 1.0
    dispatcher: str = "smtp"
    host: str = "0.0.0.0"
    port: int = 5000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv()
        email_user = os.getenv("EMAIL_USER", "")
        settings = cls(
            email_user=email_user,
            email_pass=os.getenv("EMAIL_PASS", ""),
            email_from=os.getenv("PYRECURMAIL_EMAIL_FROM", email_user),
            smtp_host=os.getenv("PYRECURMAIL_SMTP_HOST", "smtp.gmail.com"),
            smtp_port=_env_number("PYRECURMAIL_SMTP_PORT", "587", int),
            smtp_timeout=_env_number("PYRECURMAIL_SMTP_TIMEOUT", "30"),
            default_interval_minutes=_env_number("PYRECURMAIL_DEFAULT_INTERVAL_MINUTES", "1"),
            dispatcher=os.getenv("PYRECURMAIL_DISPATCHER", "smtp").strip().lower(),
            host=os.getenv("PYRECURMAIL_HOST", "0.0.0.0"),
            port=_env_number("PORT", "5000", int),
            log_level=os.getenv("PYRECURMAIL_LOG_LEVEL", "INFO").upper(),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        if self.default_interval_minutes <= 0:
            raise ValueError("Default interval must be greater than zero minutes")
        if self.dispatcher not in DISPATCHERS:
            raise ValueError(f"dispatcher must be one of {', '.join(DISPATCHERS)}")

    @property
    def default_interval(self) -> timedelta:
        return timedelta(minutes=self.default_interval_minutes)


class _GlobalConfig:
    def __init__(self):
        self.scheduler: Optional[JobScheduler] = None


_GLOBAL_CONFIG = _GlobalConfig()


def configure(scheduler: Optional[JobScheduler]) -> None:
    _GLOBAL_CONFIG.scheduler = scheduler


def get_scheduler() -> JobScheduler:
    if not _GLOBAL_CONFIG.scheduler:
        raise RuntimeError("PyRecurMail has not been configured. Call pyrecurmail.configure() first.")
    return _GLOBAL_CONFIG.scheduler
