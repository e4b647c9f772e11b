from mongoengine import connect, disconnect

from storehub.core.config import settings


def connect_to_db(**kwargs):
    """Connects the default alias to the main (directory) database."""
    return connect(host=settings.MAIN_DB_URI, uuidRepresentation="standard", **kwargs)


def disconnect_from_db():
    return disconnect()
