"""Adaptive difficulty adjustment after a completed practice session.

Session accuracy picks a base adjustment:
  > 80%  -> +1 (harder)
  >= 60% ->  0
  >= 40% -> -1
  >= 20% -> -2
  else   -> -3 (much easier)

Each answered question then gets an individual adjustment: a correct answer
in a session at or below 60% never makes that question harder (0), and a
miss in a session at or above 80% nudges it easier (-1). The result is
clamped to [1, 5]; never-scored questions start from 3.
"""
import contextlib
import json
import logging

from config.settings import DIFFICULTY_DEFAULTS

logger = logging.getLogger(__name__)


class MalformedSessionPayload(ValueError):
    """Per-question session data is not a list of mappings."""


def accuracy_rate(correct_count, total_questions):
    """Percentage of correct answers, 0-100."""
    return correct_count / total_questions * 100.0


def base_adjustment(rate):
    """Session-wide difficulty delta for an accuracy rate.

    Only the top band is strict (exactly 80% keeps difficulty unchanged).
    """
    if rate > 80:
        return 1
    if rate >= 60:
        return 0
    if rate >= 40:
        return -1
    if rate >= 20:
        return -2
    return -3


def individual_adjustment(base, is_correct, rate):
    if is_correct and rate <= 60:
        return 0
    if not is_correct and rate >= 80:
        return -1
    return base


def clamp_difficulty(value,
                     lo=DIFFICULTY_DEFAULTS['min_difficulty'],
                     hi=DIFFICULTY_DEFAULTS['max_difficulty']):
    return max(lo, min(hi, value))


def next_difficulty(current, adjustment,
                    baseline=DIFFICULTY_DEFAULTS['baseline_difficulty']):
    """Apply an adjustment to a stored difficulty (None = never scored)."""
    start = baseline if current is None else current
    return clamp_difficulty(start + adjustment)


def parse_per_question(per_question):
    """Decode per-question results into a list of dicts.

    Accepts an already-decoded list or a JSON string. null entries are kept
    and skipped later like any malformed entry. Raises
    MalformedSessionPayload for anything else.
    """
    if per_question is None:
        return []
    if isinstance(per_question, (str, bytes)):
        try:
            per_question = json.loads(per_question)
        except ValueError as e:
            raise MalformedSessionPayload(f'per-question data is not valid JSON: {e}') from e
        if per_question is None:
            return []
    if not isinstance(per_question, list):
        raise MalformedSessionPayload(
            f'per-question data must be a list, got {type(per_question).__name__}')
    for i, entry in enumerate(per_question):
        if entry is not None and not isinstance(entry, dict):
            raise MalformedSessionPayload(
                f'per-question entry {i} must be an object, got {type(entry).__name__}')
    return per_question


def adjust_difficulties(session, store, lock_for=None):
    """Rescore every question answered in a completed session.

    Args:
        session: dict with total_questions, correct_count and per_question
            (a list of {'questionId', 'isCorrect', ...} or its JSON text).
        store: object exposing get_difficulty(question_id) and
            set_difficulty(question_id, difficulty).
        lock_for: optional callable returning a context manager that
            serializes read-modify-write for one question id.

    Returns (applied_count, skipped_question_ids). Store failures skip the
    question and are logged; MalformedSessionPayload aborts the whole pass.
    """
    total = session.get('total_questions') or 0
    if total == 0:
        return 0, []

    entries = parse_per_question(session.get('per_question'))
    rate = accuracy_rate(session.get('correct_count') or 0, total)
    base = base_adjustment(rate)
    logger.info('Session accuracy: %.1f%%, difficulty adjustment: %d', rate, base)

    applied = 0
    skipped = []
    for i, entry in enumerate(entries):
        entry = entry or {}
        question_id = entry.get('questionId')
        is_correct = entry.get('isCorrect')
        if not isinstance(question_id, str) or not isinstance(is_correct, bool):
            logger.warning('Skipping malformed question entry %d: questionId=%r isCorrect=%r',
                           i, question_id, is_correct)
            continue

        adjustment = individual_adjustment(base, is_correct, rate)
        lock = lock_for(question_id) if lock_for else contextlib.nullcontext()
        with lock:
            try:
                old = store.get_difficulty(question_id)
            except Exception as e:
                logger.warning('Failed to get question %s: %s', question_id, e)
                skipped.append(question_id)
                continue

            new = next_difficulty(old, adjustment)
            try:
                store.set_difficulty(question_id, new)
            except Exception as e:
                logger.warning('Failed to update difficulty for question %s: %s',
                               question_id, e)
                skipped.append(question_id)
                continue

        applied += 1
        logger.info('Updated question %s difficulty: %s -> %d (accuracy=%.1f%%, adjustment=%d)',
                    question_id, 'absent' if old is None else old, new, rate, adjustment)

    return applied, skipped
