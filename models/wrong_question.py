"""CRUD for wrong_questions table, the review list."""
import uuid

from db.database import query_db, execute_db, update_db
from models.question import decode_row


def add(question_id, notes=''):
    """Put a question on the review list (replaces an existing entry)."""
    wrong_id = f'wrong_{uuid.uuid4().hex}'
    execute_db(
        """INSERT OR REPLACE INTO wrong_questions (id, question_id, notes)
           VALUES (?, ?, ?)""",
        (wrong_id, question_id, notes),
    )
    return wrong_id


def is_marked(question_id):
    row = query_db(
        "SELECT COUNT(*) as cnt FROM wrong_questions WHERE question_id=?",
        (question_id,), one=True,
    )
    return bool(row and row['cnt'])


def get_all():
    return query_db("SELECT * FROM wrong_questions ORDER BY added_at DESC, rowid DESC")


def get_with_details():
    """Review-list entries joined with the full question, ready to practise."""
    rows = query_db(
        """SELECT wq.*, q.question, q.options, q.answer, q.explanation, q.tags,
                  q.image_url, q.difficulty, q.source
           FROM wrong_questions wq
           JOIN questions q ON wq.question_id = q.id
           ORDER BY wq.added_at DESC, wq.rowid DESC"""
    )
    return [decode_row(r) for r in rows]


def record_review(question_id, is_correct, notes=''):
    return update_db(
        """UPDATE wrong_questions
           SET reviewed_at=CURRENT_TIMESTAMP, times_reviewed=times_reviewed + 1,
               last_result=?, notes=?
           WHERE question_id=?""",
        (1 if is_correct else 0, notes, question_id),
    ) > 0


def remove(question_id):
    return update_db(
        "DELETE FROM wrong_questions WHERE question_id=?", (question_id,)
    ) > 0


def toggle(question_id, notes=''):
    """Flip the marked state. Returns True if the question is now marked."""
    if is_marked(question_id):
        remove(question_id)
        return False
    add(question_id, notes)
    return True
