"""CRUD for user_settings table. Values are stored JSON-encoded."""
import json
import logging

from db.database import query_db, execute_db

logger = logging.getLogger(__name__)


def get(key, default=None):
    row = query_db("SELECT value FROM user_settings WHERE key=?", (key,), one=True)
    if row is None:
        return default
    return json.loads(row['value'])


def get_all():
    settings = {}
    for row in query_db("SELECT key, value FROM user_settings ORDER BY key"):
        try:
            settings[row['key']] = json.loads(row['value'])
        except ValueError:
            logger.warning('Ignoring undecodable setting %s', row['key'])
    return settings


def set(key, value):
    execute_db(
        "INSERT OR REPLACE INTO user_settings (key, value) VALUES (?, ?)",
        (key, json.dumps(value)),
    )


def set_many(settings):
    for key, value in settings.items():
        set(key, value)
