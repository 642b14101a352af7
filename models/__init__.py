"""Persistence layer: the global DBStorage instance used by the API."""
from models.db_storage import DBStorage

storage = DBStorage()
