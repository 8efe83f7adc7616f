"""JSON import/export of the question bank and practice history."""
import json
import logging
import sqlite3
from datetime import datetime, timezone

from models import question as question_model
from models import question_group as group_model
from models import practice_session as session_model
from models import user_setting as setting_model
from config.settings import EXPORT_VERSION

logger = logging.getLogger(__name__)


def _new_result():
    return {'success': True, 'imported': 0, 'errors': [], 'duplicates': 0}


def _pick(item, key, alt_key=None):
    """Read a field by its export name, falling back to the client's camelCase name."""
    if key in item:
        return item[key]
    return item.get(alt_key) if alt_key else None


def _dedup_key(text, options):
    return f'{text}-{json.dumps(options or [])}'


def _question_fields(item):
    """Validate one question mapping into create() kwargs. Raises ValueError."""
    text = item.get('question')
    if not isinstance(text, str) or not text.strip():
        raise ValueError('Missing question field')
    fields = {'question': text}
    for key in ('options', 'answer', 'tags'):
        value = item.get(key)
        if value is not None and not isinstance(value, list):
            raise ValueError(f'{key} must be a list')
        fields[key] = value
    for key, alt in (('explanation', None), ('image_url', 'imageUrl'), ('source', None)):
        value = _pick(item, key, alt)
        if value is not None and not isinstance(value, str):
            raise ValueError(f'{key} must be a string')
        fields[key] = value
    difficulty = item.get('difficulty')
    if isinstance(difficulty, float) and difficulty.is_integer():
        difficulty = int(difficulty)
    fields['difficulty'] = difficulty
    return fields


def import_questions(items, group_id=None):
    """Add questions from a list of mappings, skipping duplicates.

    A question is a duplicate when its text and options match an existing
    one. Each row may name a `group` (created on first use); otherwise
    `group_id` applies. Bad rows are reported in `errors` and skipped.
    """
    result = _new_result()
    if not isinstance(items, list):
        result['success'] = False
        result['errors'].append('Import data must be a list of questions')
        return result

    existing = {_dedup_key(q['question'], q['options']) for q in question_model.get_all()}
    for i, item in enumerate(items, start=1):
        if not isinstance(item, dict):
            result['errors'].append(f'Row {i}: not an object')
            continue
        try:
            fields = _question_fields(item)
        except ValueError as e:
            result['errors'].append(f'Row {i}: {e}')
            continue

        key = _dedup_key(fields['question'], fields['options'])
        if key in existing:
            result['duplicates'] += 1
            continue

        try:
            question_id = question_model.create(**fields)
        except (ValueError, sqlite3.Error) as e:
            result['errors'].append(f'Row {i}: Failed to save question: {e}')
            continue

        group_name = item.get('group')
        target = group_id
        if isinstance(group_name, str) and group_name:
            target = group_model.get_or_create(group_name)
        if target:
            try:
                group_model.add_question(target, question_id)
            except sqlite3.Error as e:
                result['errors'].append(f'Row {i}: Failed to add to group: {e}')

        result['imported'] += 1
        existing.add(key)

    logger.info('Imported %d questions (%d duplicates, %d errors)',
                result['imported'], result['duplicates'], len(result['errors']))
    return result


def export_user_data():
    return {
        'version': EXPORT_VERSION,
        'exportedAt': datetime.now(timezone.utc).isoformat(),
        'questions': question_model.get_all(),
        'groups': group_model.get_all(),
        'sessions': session_model.get_all(limit=None),
        'settings': setting_model.get_all(),
    }


def _import_questions_by_id(items, result):
    for item in items:
        if not isinstance(item, dict):
            result['errors'].append('Skipped question entry that is not an object')
            continue
        question_id = item.get('id')
        try:
            fields = _question_fields(item)
            question_model.create(question_id=question_id, **fields)
        except sqlite3.IntegrityError:
            result['duplicates'] += 1
            continue
        except (ValueError, sqlite3.Error) as e:
            result['errors'].append(f'Failed to import question {question_id}: {e}')
            continue
        result['imported'] += 1


def _import_groups(items, result):
    parents = {}
    for item in items:
        if not isinstance(item, dict) or not isinstance(item.get('name'), str):
            result['errors'].append('Skipped group entry without a name')
            continue
        group_id = item.get('id')
        try:
            group_id = group_model.create(
                item['name'], description=item.get('description') or '',
                color=item.get('color') or group_model.DEFAULT_COLOR,
                icon=item.get('icon') or group_model.DEFAULT_ICON,
                group_id=group_id,
            )
        except sqlite3.IntegrityError:
            result['duplicates'] += 1
            continue
        except sqlite3.Error as e:
            result['errors'].append(f'Failed to import group {group_id}: {e}')
            continue
        result['imported'] += 1
        parent_id = _pick(item, 'parent_id', 'parentId')
        if parent_id:
            parents[group_id] = parent_id
        for question_id in _pick(item, 'question_ids', 'questionIds') or []:
            try:
                group_model.add_question(group_id, question_id)
            except sqlite3.Error as e:
                result['errors'].append(f'Group {group_id}: cannot add question {question_id}: {e}')

    # parents may appear after their children in the export
    for group_id, parent_id in parents.items():
        try:
            group_model.set_parent(group_id, parent_id)
        except (ValueError, sqlite3.Error) as e:
            result['errors'].append(f'Group {group_id}: cannot set parent {parent_id}: {e}')


def _import_sessions(items, result):
    for item in items:
        if not isinstance(item, dict):
            result['errors'].append('Skipped session entry that is not an object')
            continue
        session_id = item.get('id')
        if not isinstance(session_id, str) or not session_id:
            result['errors'].append('Skipped session entry without an id')
            continue
        try:
            session_model.create(
                session_id, item['mode'], item['total_questions'],
                correct_count=item.get('correct_count', 0),
                group_id=item.get('group_id'),
                start_time=item.get('start_time'),
                end_time=item.get('end_time'),
                duration=item.get('duration', 0),
                details=item.get('details'),
            )
        except sqlite3.IntegrityError:
            result['duplicates'] += 1
            continue
        except (KeyError, sqlite3.Error) as e:
            result['errors'].append(f'Failed to import session {session_id}: {e}')
            continue
        result['imported'] += 1


def import_user_data(data):
    """Restore an export. Existing ids are counted as duplicates, not overwritten.

    Imported sessions are history only; they do not rescore questions.
    """
    result = _new_result()
    if not isinstance(data, dict) or data.get('version') is None:
        result['success'] = False
        result['errors'].append('Invalid data format: missing version')
        return result

    sections = (
        ('questions', list, _import_questions_by_id),
        ('groups', list, _import_groups),
        ('sessions', list, _import_sessions),
    )
    for key, kind, importer in sections:
        items = data.get(key)
        if isinstance(items, kind):
            logger.info('Importing %d %s', len(items), key)
            importer(items, result)

    settings = data.get('settings')
    if isinstance(settings, dict):
        logger.info('Importing %d settings', len(settings))
        for key, value in settings.items():
            setting_model.set(key, value)
            result['imported'] += 1

    return result
