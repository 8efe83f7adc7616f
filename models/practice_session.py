"""CRUD for practice_sessions table."""
import json

from db.database import query_db, execute_db


def _decode(row):
    if row is not None:
        row['details'] = json.loads(row['details']) if row.get('details') else []
    return row


def create(session_id, mode, total_questions, correct_count=0, group_id=None,
           start_time=None, end_time=None, duration=0, details=None):
    execute_db(
        """INSERT INTO practice_sessions
           (id, group_id, mode, start_time, end_time, duration,
            total_questions, correct_count, details)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        (session_id, group_id, mode, start_time, end_time, duration,
         total_questions, correct_count,
         json.dumps(details) if details is not None else None),
    )
    return session_id


def get_by_id(session_id):
    return _decode(query_db(
        "SELECT * FROM practice_sessions WHERE id=?", (session_id,), one=True
    ))


def get_all(limit=100):
    """Newest first; limit=None returns every session."""
    sql = "SELECT * FROM practice_sessions ORDER BY created_at DESC, rowid DESC"
    if limit is None:
        rows = query_db(sql)
    else:
        rows = query_db(sql + " LIMIT ?", (limit,))
    return [_decode(r) for r in rows]
