"""Practice session submission: persist, then rescore and collect misses."""
import logging
import threading
from datetime import datetime

from models import practice_session as session_model
from models import question as question_model
from models import user_setting as setting_model
from models import wrong_question as wrong_model
from engine import difficulty
from config.settings import SESSION_DEFAULTS

logger = logging.getLogger(__name__)

# Striped locks serializing the difficulty read-modify-write; a question id
# always maps to the same lock and the pool never grows
_question_locks = [threading.Lock() for _ in range(SESSION_DEFAULTS['lock_stripes'])]


class InvalidSession(ValueError):
    """Session payload is missing fields or has the wrong types."""


def question_lock(question_id):
    return _question_locks[hash(question_id) % len(_question_locks)]


def _require_str(data, key):
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise InvalidSession(f'{key} must be a non-empty string')
    return value


def _require_count(data, key, default=None):
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidSession(f'{key} must be a number')
    if (isinstance(value, float) and not value.is_integer()) or value < 0:
        raise InvalidSession(f'{key} must be a non-negative integer')
    return int(value)


def _optional_time(data, key):
    value = data.get(key)
    if value in (None, ''):
        return None
    if not isinstance(value, str):
        raise InvalidSession(f'{key} must be an ISO-8601 string')
    try:
        # fromisoformat only learned the trailing Z in 3.11
        return datetime.fromisoformat(value.replace('Z', '+00:00')).isoformat()
    except ValueError as e:
        raise InvalidSession(f'failed to parse {key}: {e}') from e


def parse_session(session_data):
    """Validate a submitted session payload into model kwargs."""
    if not isinstance(session_data, dict):
        raise InvalidSession('session payload must be an object')
    total = _require_count(session_data, 'totalQuestions')
    correct = _require_count(session_data, 'correctCount')
    if correct > total:
        raise InvalidSession('correctCount cannot exceed totalQuestions')
    group_id = session_data.get('groupId')
    if group_id is not None and not isinstance(group_id, str):
        raise InvalidSession('groupId must be a string')
    return {
        'session_id': _require_str(session_data, 'id'),
        'mode': _require_str(session_data, 'mode'),
        'group_id': group_id,
        'total_questions': total,
        'correct_count': correct,
        'duration': _require_count(session_data, 'duration', default=0),
        'start_time': _optional_time(session_data, 'startTime'),
        'end_time': _optional_time(session_data, 'endTime'),
        'details': session_data.get('questions'),
    }


def update_difficulties(session):
    """Best-effort difficulty pass for a saved session row.

    Returns {'applied': n, 'skipped': [...]}; never raises.
    """
    try:
        applied, skipped = difficulty.adjust_difficulties(
            {
                'total_questions': session['total_questions'],
                'correct_count': session['correct_count'],
                'per_question': session['details'],
            },
            store=question_model,
            lock_for=question_lock,
        )
    except Exception as e:
        logger.warning('Failed to update question difficulties for session %s: %s',
                       session['id'], e)
        return {'applied': 0, 'skipped': []}
    return {'applied': applied, 'skipped': skipped}


def add_wrong_questions(per_question):
    """Put each missed question on the review list unless already there.

    Returns the number of questions added.
    """
    if not setting_model.get(SESSION_DEFAULTS['auto_add_wrong_setting'], True):
        return 0
    if not isinstance(per_question, list):
        return 0
    added = 0
    for entry in per_question:
        if not isinstance(entry, dict) or entry.get('isCorrect') is not False:
            continue
        question_id = entry.get('questionId')
        if not isinstance(question_id, str):
            continue
        try:
            if wrong_model.is_marked(question_id):
                continue
            wrong_model.add(question_id, SESSION_DEFAULTS['wrong_question_note'])
            added += 1
        except Exception as e:
            logger.warning('Failed to add wrong question %s: %s', question_id, e)
    return added


def save_practice_session(session_data):
    """Persist a completed session, then run the post-commit steps.

    Raises InvalidSession before anything is written. Difficulty and
    review-list failures are logged and never fail the save.
    """
    fields = parse_session(session_data)
    session_model.create(**fields)
    session = session_model.get_by_id(fields['session_id'])
    logger.info('Saved practice session %s (%d/%d correct)',
                session['id'], session['correct_count'], session['total_questions'])

    result = update_difficulties(session)
    wrong_added = add_wrong_questions(session['details'])
    return {'session': session, 'difficulty': result, 'wrong_added': wrong_added}
