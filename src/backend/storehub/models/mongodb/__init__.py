# Import all models here to ensure they are registered with MongoEngine

# Define exported symbols
__all__ = [
    "BaseDocument",
    "StoreOwner",
    "EntityKind",
    "ENTITY_DEFINITIONS",
    "datetime_utc_now",  # from utils
]

# Base models and utils
from .base import BaseDocument
from .utils import datetime_utc_now
from .enums import EntityKind

# Main database
from .store_owner import StoreOwner

# Tenant databases
from .tenant import ENTITY_DEFINITIONS
