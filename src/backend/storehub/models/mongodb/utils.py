import random
import re
import string
from datetime import datetime
from datetime import timezone

from bson import ObjectId


def datetime_utc_now():
    return datetime.now(timezone.utc)


def random_code(length: int, alphabet: str = string.ascii_uppercase + string.digits) -> str:
    return "".join(random.choice(alphabet) for _ in range(length))


def slugify(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


def to_serializable(value):
    """Recursively converts ObjectIds to strings so documents can be returned as JSON."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {key: to_serializable(item) for key, item in value.items()}
    if isinstance(value, list):
        return [to_serializable(item) for item in value]
    return value
