"""Column default helpers shared by every model."""

import uuid
from datetime import datetime

from core.utils.datetime import now


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return now()
