"""
school_portal.jobs.housekeeping

Hourly housekeeping tasks.

Responsibilities:
- Ensure the configured system admin account exists.
- Mail the log file of the previous hour to the system admin.
- Run both tasks at the top of every hour while the API is up.

Tasks run sequentially and never raise; a failed run is simply retried by the
next tick.
"""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from school_portal.auth.passwords import hash_password
from school_portal.db.models import UserType
from school_portal.db.repositories.admins import AdminRepo
from school_portal.observability.logging import get_logger, hourly_log_path
from school_portal.services.mailer import Attachment, Mailer, MailResult
from school_portal.settings import Settings

log = get_logger(__name__)

DEFAULT_ADMIN_NAME = "Default Admin"


async def ensure_default_admin(
    session_factory: async_sessionmaker[AsyncSession], settings: Settings
) -> bool:
    """
    Creates the system admin when missing. Returns True when a row was created.
    """

    email = settings.system_admin_email
    password = settings.system_admin_password
    if not email or not password:
        log.info("housekeeping.default_admin_skipped", reason="system admin not configured")
        return False

    try:
        async with session_factory() as session:
            admins = AdminRepo(session)
            if await admins.get_by_email(email) is not None:
                return False
            await admins.create(
                name=DEFAULT_ADMIN_NAME,
                email=email,
                password_hash=hash_password(password),
                user_type=UserType.super_admin,
            )
            await session.commit()
    except SQLAlchemyError as e:
        log.error("housekeeping.default_admin_failed", error=str(e))
        return False

    log.info("housekeeping.default_admin_created", email=email.lower())
    return True


async def send_logs_via_email(
    settings: Settings, mailer: Mailer, now: datetime | None = None
) -> MailResult:
    now = now or datetime.now(tz=UTC)
    if not settings.log_dir:
        log.warning("housekeeping.logs_skipped", reason="log directory not configured")
        return MailResult(sent=False, error="log directory not configured")
    if not settings.system_admin_email:
        log.warning("housekeeping.logs_skipped", reason="system admin email not configured")
        return MailResult(sent=False, error="system admin email not configured")

    # The current hour's file is still being written; mail the last complete one.
    previous = now - timedelta(hours=1)
    path = hourly_log_path(settings.log_dir, previous)
    if not path.is_file():
        log.warning("housekeeping.log_file_missing", path=str(path))
        return MailResult(sent=False, error="log file not found")

    return await mailer.send(
        to=settings.system_admin_email,
        subject=f"{settings.api_name} logs {previous:%Y-%m-%d %H}:00 UTC",
        body=f"Attached is the log file for {previous:%Y-%m-%d %H}:00-{now:%H}:00 UTC.",
        attachments=[Attachment(path=path, content_type="text/plain")],
    )


def seconds_until_next_hour(now: datetime) -> float:
    next_hour = now.replace(minute=0, second=0, microsecond=0) + timedelta(hours=1)
    return (next_hour - now).total_seconds()


class HousekeepingScheduler:
    def __init__(
        self,
        *,
        session_factory: async_sessionmaker[AsyncSession],
        settings: Settings,
        mailer: Mailer,
    ) -> None:
        self._session_factory = session_factory
        self._settings = settings
        self._mailer = mailer
        self._stop = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            log.info("housekeeping.already_running")
            return
        self._stop.clear()
        self._task = asyncio.create_task(self._loop(), name="housekeeping")
        log.info("housekeeping.started")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._stop.set()
        await self._task
        self._task = None
        log.info("housekeeping.stopped")

    async def run_once(self, now: datetime | None = None) -> None:
        await ensure_default_admin(self._session_factory, self._settings)
        await send_logs_via_email(self._settings, self._mailer, now)

    async def _loop(self) -> None:
        while True:
            delay = seconds_until_next_hour(datetime.now(tz=UTC))
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=delay)
                return
            except TimeoutError:
                pass
            try:
                await self.run_once()
            except Exception:
                log.exception("housekeeping.tick_failed")


# --- Module Notes -----------------------------------------------------------
# The scheduler lives on app.state and is started/stopped by the app lifespan.
