"""
Notification service functions.

Notifications are written after the action that caused them has been
committed, in their own session. A failed notification write is logged and
swallowed: the caller's action has already happened and its loaded objects
stay usable.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.security import Identity
from database.models.applications import ApplicationStatus
from database.models.communications import Notification, NotificationType
from database.models.users import UserRole
from database.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationDraft:
    """A notification addressed to exactly one user."""

    user_id: str
    type: NotificationType
    message: str
    link: Optional[str] = None


def dashboard_segment(role: UserRole) -> str:
    return "job-seeker" if role == UserRole.JOB_SEEKER else "company"


def conversation_link(receiver_role: UserRole, application_id: str) -> str:
    return f"/dashboard/{dashboard_segment(receiver_role)}/messages?conversationId={application_id}"


# ==================== Drafts ===================== #
def new_application_notice(
    company_user_id: str, applicant_name: Optional[str], job_title: str, application_id: str
) -> NotificationDraft:
    return NotificationDraft(
        user_id=company_user_id,
        type=NotificationType.NEW_APPLICATION,
        message=f"{applicant_name or 'A candidate'} applied for the position: {job_title}.",
        link=f"/dashboard/company/jobs?viewApplication={application_id}",
    )


def status_update_notice(
    seeker_user_id: str,
    job_title: Optional[str],
    status: ApplicationStatus,
    application_id: str,
) -> NotificationDraft:
    readable = status.value.lower().replace("_", " ")
    return NotificationDraft(
        user_id=seeker_user_id,
        type=NotificationType.APPLICATION_STATUS_UPDATE,
        message=f'Your application for "{job_title or "a position"}" was updated to {readable}.',
        link=f"/dashboard/job-seeker/applications?applicationId={application_id}",
    )


def invitation_notice(seeker_user_id: str, job_title: str) -> NotificationDraft:
    return NotificationDraft(
        user_id=seeker_user_id,
        type=NotificationType.JOB_INVITATION,
        message=f"You have been invited to apply for the position: {job_title}.",
        link="/dashboard/job-seeker/invitations",
    )


def new_message_notice(
    receiver_user_id: str,
    receiver_role: UserRole,
    sender_name: Optional[str],
    application_id: str,
) -> NotificationDraft:
    return NotificationDraft(
        user_id=receiver_user_id,
        type=NotificationType.NEW_MESSAGE,
        message=f"You have a new message from {sender_name or 'a user'}.",
        link=conversation_link(receiver_role, application_id),
    )


def interview_scheduled_notice(seeker_user_id: str, interview_title: str) -> NotificationDraft:
    return NotificationDraft(
        user_id=seeker_user_id,
        type=NotificationType.INTERVIEW_SCHEDULED,
        message=f"You have been invited to an interview for the position: {interview_title}.",
        link="/dashboard/job-seeker/interviews",
    )


def interview_updated_notice(seeker_user_id: str, interview_title: str) -> NotificationDraft:
    return NotificationDraft(
        user_id=seeker_user_id,
        type=NotificationType.INTERVIEW_UPDATED,
        message=f'Your interview for "{interview_title}" has been updated.',
        link="/dashboard/job-seeker/interviews",
    )


# ==================== Delivery ===================== #
async def deliver(db: AsyncSession, draft: NotificationDraft) -> Optional[Notification]:
    """
    Persist a notification in its own session and unit of work.

    Returns:
        The stored notification, or None if the write failed
    """
    notification = Notification(
        user_id=draft.user_id,
        type=draft.type,
        message=draft.message,
        link=draft.link,
        read=False,
    )
    try:
        # A separate session keeps a failed write from expiring the caller's objects
        async with AsyncSession(bind=db.bind, expire_on_commit=False) as session:
            async with UnitOfWork(session):
                session.add(notification)
    except SQLAlchemyError:
        logger.exception(
            f"Failed to write {draft.type.value} notification for user {draft.user_id}"
        )
        return None

    logger.info(f"Notified user {draft.user_id}: {draft.type.value}")
    return notification


# ==================== Reading ===================== #
async def list_notifications(
    db: AsyncSession,
    identity: Identity,
    unread_only: bool = False,
    limit: int = 50,
) -> list[Notification]:
    stmt = select(Notification).where(Notification.user_id == identity.user_id)
    if unread_only:
        stmt = stmt.where(Notification.read.is_(False))
    stmt = stmt.order_by(Notification.created_at.desc()).limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def mark_read(db: AsyncSession, identity: Identity, notification_id: str) -> int:
    """Mark one of the caller's notifications read. Other users' rows are untouched."""
    async with UnitOfWork(db):
        result = await db.execute(
            update(Notification)
            .where(
                Notification.id == notification_id,
                Notification.user_id == identity.user_id,
            )
            .values(read=True)
            .execution_options(synchronize_session=False)
        )
    return result.rowcount


async def mark_all_read(db: AsyncSession, identity: Identity) -> int:
    async with UnitOfWork(db):
        result = await db.execute(
            update(Notification)
            .where(
                Notification.user_id == identity.user_id,
                Notification.read.is_(False),
            )
            .values(read=True)
            .execution_options(synchronize_session=False)
        )
    logger.info(f"Marked {result.rowcount} notifications read for user {identity.user_id}")
    return result.rowcount
