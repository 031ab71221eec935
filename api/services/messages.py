"""
Messaging service functions.

Every conversation is anchored on an application; its id doubles as the
conversation id. Only the two parties of the application (the job seeker's
user and the company's user) may read or write it.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from api.schemas.communications import ConversationJob, ConversationResponse, MessageCreate
from api.services import notifications
from api.services.profiles import (
    get_company_by_user,
    get_job_seeker_by_user,
    get_or_create_company,
    get_or_create_job_seeker,
)
from core.exceptions import InvalidInput, PermissionDenied, ResourceNotFound
from core.security import Identity
from database.models.applications import Application, ApplicationStatus
from database.models.candidates import JobSeeker
from database.models.communications import Message, Notification, NotificationType
from database.models.jobs import Job
from database.models.organizations import Company
from database.models.users import User, UserRole
from database.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

NO_MESSAGES_PLACEHOLDER = "No messages yet."


@dataclass(frozen=True)
class ConversationFilter:
    candidate_user_id: Optional[str] = None
    job_id: Optional[str] = None
    application_id: Optional[str] = None
    include_all: bool = False


def role_slug(role: UserRole) -> str:
    """JOB_SEEKER -> job-seeker"""
    return role.value.lower().replace("_", "-")


def _party_clause(user_id: str):
    return or_(JobSeeker.user_id == user_id, Company.user_id == user_id)


async def get_party_application(
    db: AsyncSession, identity: Identity, application_id: str
) -> Application:
    """Load an application the caller is a party to; anything else is not found."""
    result = await db.execute(
        select(Application)
        .join(Application.job_seeker)
        .join(Application.company)
        .where(Application.id == application_id, _party_clause(identity.user_id))
        .options(
            selectinload(Application.job_seeker).selectinload(JobSeeker.user),
            selectinload(Application.company).selectinload(Company.user),
        )
    )
    application = result.scalar_one_or_none()
    if application is None:
        raise ResourceNotFound("Conversation not found")
    return application


# ==================== Conversations ===================== #
async def _last_messages(db: AsyncSession, application_ids: list[str]) -> dict[str, Message]:
    ranked = (
        select(
            Message.id,
            func.row_number()
            .over(
                partition_by=Message.application_id,
                order_by=(Message.created_at.desc(), Message.id.desc()),
            )
            .label("position"),
        )
        .where(Message.application_id.in_(application_ids))
        .subquery()
    )
    result = await db.execute(
        select(Message).join(ranked, ranked.c.id == Message.id).where(ranked.c.position == 1)
    )
    return {message.application_id: message for message in result.scalars().all()}


async def _unread_counts(
    db: AsyncSession, application_ids: list[str], user_id: str
) -> dict[str, int]:
    result = await db.execute(
        select(Message.application_id, func.count(Message.id))
        .where(
            Message.application_id.in_(application_ids),
            Message.receiver_id == user_id,
            Message.read.is_(False),
        )
        .group_by(Message.application_id)
    )
    return {application_id: count for application_id, count in result.all()}


async def list_conversations(
    db: AsyncSession, identity: Identity, filters: ConversationFilter
) -> list[ConversationResponse]:
    """
    The caller's conversations, most recent message first.

    Applications without messages are left out unless ``include_all`` is
    set; conversations without a timestamp then sort last.
    """
    stmt = (
        select(Application)
        .join(Application.job_seeker)
        .join(Application.company)
        .where(_party_clause(identity.user_id))
        .options(
            selectinload(Application.job),
            selectinload(Application.job_seeker).selectinload(JobSeeker.user),
            selectinload(Application.company).selectinload(Company.user),
        )
    )
    if identity.is_company and filters.candidate_user_id:
        stmt = stmt.where(JobSeeker.user_id == filters.candidate_user_id)
    if filters.job_id:
        stmt = stmt.where(Application.job_id == filters.job_id)
    if filters.application_id:
        stmt = stmt.where(
            Application.id == filters.application_id,
            Application.messages.any(),
        )

    result = await db.execute(stmt)
    applications = list(result.scalars().all())
    if not applications:
        return []

    ids = [application.id for application in applications]
    last_messages = await _last_messages(db, ids)
    unread = await _unread_counts(db, ids, identity.user_id)

    conversations = []
    for application in applications:
        last = last_messages.get(application.id)
        if last is None and not filters.include_all:
            continue

        seeker_user = application.job_seeker.user
        company_user = application.company.user
        other = seeker_user if identity.is_company else company_user
        job = application.job

        conversations.append(
            ConversationResponse(
                id=application.id,
                job_seeker_user_id=seeker_user.id,
                name=other.name,
                logo_url=application.company.logo_url if identity.is_job_seeker else other.image,
                role=role_slug(other.role),
                last_message=last.content if last else NO_MESSAGES_PLACEHOLDER,
                timestamp=last.created_at if last else None,
                unread_count=unread.get(application.id, 0),
                job=ConversationJob.model_validate(job) if job else None,
            )
        )

    conversations.sort(key=lambda c: (c.timestamp is not None, c.timestamp), reverse=True)
    return conversations


async def get_thread(db: AsyncSession, identity: Identity, application_id: str) -> list[Message]:
    """Messages of one conversation, oldest first."""
    await get_party_application(db, identity, application_id)
    result = await db.execute(
        select(Message)
        .where(Message.application_id == application_id)
        .options(selectinload(Message.sender), selectinload(Message.receiver))
        .order_by(Message.created_at.asc(), Message.id.asc())
    )
    return list(result.scalars().all())


async def mark_conversation_read(
    db: AsyncSession, identity: Identity, application_id: str
) -> tuple[int, int]:
    """
    Mark the caller's unread messages in one conversation read, together
    with the NEW_MESSAGE notifications pointing at it.

    Returns:
        (messages updated, notifications updated)
    """
    await get_party_application(db, identity, application_id)

    async with UnitOfWork(db):
        messages = await db.execute(
            update(Message)
            .where(
                Message.application_id == application_id,
                Message.receiver_id == identity.user_id,
                Message.read.is_(False),
            )
            .values(read=True)
            .execution_options(synchronize_session=False)
        )
        marked = await db.execute(
            update(Notification)
            .where(
                Notification.user_id == identity.user_id,
                Notification.type == NotificationType.NEW_MESSAGE,
                Notification.link.contains(f"conversationId={application_id}", autoescape=True),
                Notification.read.is_(False),
            )
            .values(read=True)
            .execution_options(synchronize_session=False)
        )

    logger.info(
        f"User {identity.user_id} read conversation {application_id}: "
        f"{messages.rowcount} messages, {marked.rowcount} notifications"
    )
    return messages.rowcount, marked.rowcount


# ==================== Sending ===================== #
async def _find_application(
    db: AsyncSession,
    company: Company,
    job_seeker: JobSeeker,
    data: MessageCreate,
) -> Optional[Application]:
    pair = (Application.company_id == company.id, Application.job_seeker_id == job_seeker.id)

    if data.application_id:
        result = await db.execute(select(Application).where(Application.id == data.application_id))
        application = result.scalar_one_or_none()
        if application is None:
            raise ResourceNotFound("Conversation not found")
        if application.company_id != company.id or application.job_seeker_id != job_seeker.id:
            raise InvalidInput("The receiver is not a party to this conversation")
        return application

    stmt = select(Application).where(*pair)
    if data.job_id:
        stmt = stmt.where(Application.job_id == data.job_id)
    result = await db.execute(stmt.order_by(Application.created_at.desc()).limit(1))
    return result.scalar_one_or_none()


async def send_message(db: AsyncSession, identity: Identity, data: MessageCreate) -> Message:
    """
    Send a message to the other party of a conversation.

    The conversation is the given application, else the pair's application
    for ``job_id``, else their latest application. A company writing to a
    seeker it has no application with opens a conversation-holder
    application; a seeker cannot.
    """
    if data.receiver_id:
        receiver_id = data.receiver_id
    else:
        application = await get_party_application(db, identity, data.application_id)
        if application.job_seeker.user_id == identity.user_id:
            receiver_id = application.company.user_id
        else:
            receiver_id = application.job_seeker.user_id

    receiver = await db.get(User, receiver_id)
    if receiver is None:
        raise ResourceNotFound("Receiver not found")
    if receiver.role == identity.role:
        if identity.is_company:
            raise PermissionDenied("Companies cannot message other companies.")
        raise PermissionDenied("Job seekers cannot message other job seekers.")

    if identity.is_company:
        company = await get_or_create_company(db, identity)
        job_seeker = await get_job_seeker_by_user(db, receiver.id)
    else:
        job_seeker = await get_or_create_job_seeker(db, identity)
        company = await get_company_by_user(db, receiver.id)
    if company is None or job_seeker is None:
        raise ResourceNotFound("Could not find the company or job seeker profile for this conversation")

    async with UnitOfWork(db) as uow:
        application = await _find_application(db, company, job_seeker, data)

        if application is None:
            if not identity.is_company:
                raise PermissionDenied(
                    "A message can only be sent if there is an associated job application."
                )
            if data.job_id:
                owned = await db.execute(
                    select(Job.id).where(Job.id == data.job_id, Job.company_id == company.id)
                )
                if owned.scalar_one_or_none() is None:
                    raise ResourceNotFound("Job not found")
            application = Application(
                company_id=company.id,
                job_seeker_id=job_seeker.id,
                job_id=data.job_id,
                status=ApplicationStatus.PENDING,
            )
            db.add(application)
            await uow.flush()
            logger.info(f"Company {company.id} opened conversation {application.id} with job seeker {job_seeker.id}")

        message = Message(
            sender_id=identity.user_id,
            receiver_id=receiver.id,
            application_id=application.id,
            content=data.content,
            read=False,
        )
        db.add(message)

    logger.info(f"User {identity.user_id} sent message {message.id} in conversation {application.id}")

    await notifications.deliver(
        db,
        notifications.new_message_notice(
            receiver_user_id=receiver.id,
            receiver_role=receiver.role,
            sender_name=identity.name,
            application_id=application.id,
        ),
    )
    return message
