"""CRUD for questions table."""
import json
import uuid

from db.database import query_db, execute_db, update_db
from config.settings import DIFFICULTY_DEFAULTS


class QuestionNotFound(LookupError):
    """No question row with the given id."""


class InvalidDifficulty(ValueError):
    """Difficulty outside the allowed range."""


def _validate_difficulty(difficulty):
    if difficulty is None:
        return None
    if isinstance(difficulty, bool) or not isinstance(difficulty, int):
        raise InvalidDifficulty(f'difficulty must be an integer, got {difficulty!r}')
    lo = DIFFICULTY_DEFAULTS['min_difficulty']
    hi = DIFFICULTY_DEFAULTS['max_difficulty']
    if not lo <= difficulty <= hi:
        raise InvalidDifficulty(f'difficulty must be between {lo} and {hi}, got {difficulty}')
    return difficulty


def decode_row(row):
    """Decode the JSON list columns of a question row in place."""
    if row is None:
        return None
    for col in ('options', 'answer', 'tags'):
        row[col] = json.loads(row[col]) if row.get(col) else []
    return row


def get_by_id(question_id):
    return decode_row(query_db("SELECT * FROM questions WHERE id=?", (question_id,), one=True))


def get_all():
    rows = query_db("SELECT * FROM questions ORDER BY created_at, id")
    return [decode_row(r) for r in rows]


def create(question, options=None, answer=None, explanation=None, tags=None,
           image_url=None, difficulty=None, source=None, question_id=None):
    """Insert a question. Returns its id (generated when not given)."""
    question_id = question_id or f'q_{uuid.uuid4().hex}'
    execute_db(
        """INSERT INTO questions
           (id, question, options, answer, explanation, tags, image_url,
            difficulty, source)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        (question_id, question, json.dumps(options or []), json.dumps(answer or []),
         explanation, json.dumps(tags or []), image_url,
         _validate_difficulty(difficulty), source),
    )
    return question_id


UPDATABLE_FIELDS = ('question', 'options', 'answer', 'explanation', 'tags',
                    'image_url', 'difficulty', 'source')
JSON_FIELDS = ('options', 'answer', 'tags')


def update(question_id, **fields):
    """Overwrite the given columns of a question.

    Unknown field names raise ValueError; a missing question raises
    QuestionNotFound.
    """
    unknown = set(fields) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValueError(f'cannot update fields: {", ".join(sorted(unknown))}')
    if 'difficulty' in fields:
        _validate_difficulty(fields['difficulty'])
    if not fields:
        if get_by_id(question_id) is None:
            raise QuestionNotFound(question_id)
        return
    assignments = []
    params = []
    for name, value in fields.items():
        assignments.append(f'{name}=?')
        params.append(json.dumps(value or []) if name in JSON_FIELDS else value)
    count = update_db(
        f"UPDATE questions SET {', '.join(assignments)}, updated_at=CURRENT_TIMESTAMP WHERE id=?",
        (*params, question_id),
    )
    if count == 0:
        raise QuestionNotFound(question_id)


def get_for_group(group_id):
    rows = query_db(
        """SELECT q.* FROM questions q
           JOIN question_group_relations r ON r.question_id = q.id
           WHERE r.group_id=?
           ORDER BY q.created_at, q.id""",
        (group_id,),
    )
    return [decode_row(r) for r in rows]


def delete(question_id):
    return update_db("DELETE FROM questions WHERE id=?", (question_id,)) > 0


def get_difficulty(question_id):
    """Current difficulty, or None when the question was never scored.

    Raises QuestionNotFound if the question does not exist.
    """
    row = query_db("SELECT difficulty FROM questions WHERE id=?", (question_id,), one=True)
    if row is None:
        raise QuestionNotFound(question_id)
    return row['difficulty']


def set_difficulty(question_id, difficulty):
    """Persist a new difficulty (or None to clear it)."""
    count = update_db(
        "UPDATE questions SET difficulty=?, updated_at=CURRENT_TIMESTAMP WHERE id=?",
        (_validate_difficulty(difficulty), question_id),
    )
    if count == 0:
        raise QuestionNotFound(question_id)
