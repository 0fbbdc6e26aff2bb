"""
school_portal.services.inbox

Public submissions: newsletter subscriptions and contact messages.

Responsibilities:
- Subscribe an email address to the newsletter (idempotent).
- Store a contact message and notify the sender and the system admin.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from school_portal.db.repositories.entries import EntryRepo
from school_portal.observability.logging import get_logger
from school_portal.resources.catalog import CONTACT, NEWSLETTER
from school_portal.services.crud import CrudService, ServiceResult
from school_portal.services.mailer import Mailer
from school_portal.settings import Settings

log = get_logger(__name__)


async def subscribe_to_newsletter(session: AsyncSession, email: str) -> ServiceResult:
    email = email.lower()
    if await EntryRepo(session, NEWSLETTER.model).exists({"email": email}):
        return ServiceResult(status.HTTP_200_OK, "User is already subscribed to the newsletter.")

    await CrudService(session=session, spec=NEWSLETTER).create_entry({"email": email})
    log.info("newsletter.subscribed")
    return ServiceResult(status.HTTP_200_OK, "Newsletter subscription successful.")


async def submit_contact_message(
    session: AsyncSession,
    mailer: Mailer,
    settings: Settings,
    values: dict[str, Any],
) -> ServiceResult:
    created = await CrudService(session=session, spec=CONTACT).create_entry(values)

    # Delivery is best-effort: the message is already stored for the admin console.
    await mailer.send(
        to=values["email"],
        subject="Thank you for reaching out to us!",
        body=(
            "We have received your message and will get back to you soon.\n\n"
            f"Subject: {values['subject']}\n\n{values['message']}"
        ),
    )
    if settings.system_admin_email:
        await mailer.send(
            to=settings.system_admin_email,
            subject=f"New message - {values['subject']}",
            body=f"From: {values['email']}\n\n{values['message']}",
        )
    else:
        log.warning("contact.admin_mail_skipped", reason="system admin email not configured")

    return ServiceResult(status.HTTP_200_OK, "Contact email sent successfully.", created.data)
