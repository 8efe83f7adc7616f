"""Tests for services/practice_service.py (real DB, failure injection via mock)."""
import threading
from unittest.mock import patch

import pytest

from models import question as question_model
from models import practice_session as session_model
from models import user_setting as setting_model
from models import wrong_question as wrong_model
from services import practice_service


def _payload(session_id='s1', total=5, correct=4, questions=None, **extra):
    data = {
        'id': session_id,
        'groupId': 'g1',
        'mode': 'practice',
        'totalQuestions': total,
        'correctCount': correct,
        'duration': 120,
        'startTime': '2026-10-18T09:00:00Z',
        'endTime': '2026-10-18T09:02:00Z',
        'questions': questions if questions is not None else [],
    }
    data.update(extra)
    return data


def test_save_session_adjusts_difficulties():
    right = question_model.create("Right", difficulty=2)
    wrong = question_model.create("Wrong", difficulty=2)
    result = practice_service.save_practice_session(_payload(questions=[
        {'questionId': right, 'isCorrect': True, 'userAnswer': ['A'], 'timeSpent': 10},
        {'questionId': wrong, 'isCorrect': False, 'userAnswer': ['B'], 'timeSpent': 12},
    ]))
    assert result['difficulty'] == {'applied': 2, 'skipped': []}
    assert question_model.get_difficulty(right) == 2
    assert question_model.get_difficulty(wrong) == 1
    assert session_model.get_by_id('s1')['correct_count'] == 4


def test_save_session_skips_unknown_question():
    known = question_model.create("Known")
    result = practice_service.save_practice_session(_payload(total=2, correct=0, questions=[
        {'questionId': 'ghost', 'isCorrect': False},
        {'questionId': known, 'isCorrect': False},
    ]))
    assert result['difficulty']['skipped'] == ['ghost']
    assert question_model.get_difficulty(known) == 1


def test_zero_question_session_is_saved():
    result = practice_service.save_practice_session(_payload(total=0, correct=0))
    assert result['difficulty'] == {'applied': 0, 'skipped': []}
    assert session_model.get_by_id('s1') is not None


def test_malformed_details_still_saves_session():
    result = practice_service.save_practice_session(_payload(questions='oops'))
    assert result['difficulty'] == {'applied': 0, 'skipped': []}
    assert session_model.get_by_id('s1') is not None


@patch('services.practice_service.difficulty.adjust_difficulties',
       side_effect=RuntimeError('boom'))
def test_difficulty_failure_never_fails_save(mock_adjust):
    qid = question_model.create("Q", difficulty=3)
    result = practice_service.save_practice_session(
        _payload(questions=[{'questionId': qid, 'isCorrect': False}]))
    assert mock_adjust.called
    assert result['session']['id'] == 's1'
    assert question_model.get_difficulty(qid) == 3


def test_wrong_answers_added_to_review_list():
    a = question_model.create("A")
    b = question_model.create("B")
    result = practice_service.save_practice_session(_payload(questions=[
        {'questionId': a, 'isCorrect': True},
        {'questionId': b, 'isCorrect': False},
    ]))
    assert result['wrong_added'] == 1
    assert wrong_model.is_marked(b)
    assert not wrong_model.is_marked(a)
    assert wrong_model.get_all()[0]['notes'] == 'Added from practice session'


def test_already_marked_question_not_readded():
    qid = question_model.create("A")
    wrong_model.add(qid, 'my note')
    result = practice_service.save_practice_session(
        _payload(questions=[{'questionId': qid, 'isCorrect': False}]))
    assert result['wrong_added'] == 0
    assert wrong_model.get_all()[0]['notes'] == 'my note'


def test_auto_add_can_be_disabled():
    setting_model.set('autoAddWrongQuestions', False)
    qid = question_model.create("A")
    result = practice_service.save_practice_session(
        _payload(questions=[{'questionId': qid, 'isCorrect': False}]))
    assert result['wrong_added'] == 0
    assert not wrong_model.is_marked(qid)


def test_invalid_payloads_rejected():
    bad_payloads = [
        None,
        _payload(id=''),
        _payload(mode=None),
        _payload(total=-1),
        _payload(total=3, correct=4),
        _payload(total=2.5),
        _payload(correct=True),
        _payload(startTime='yesterday'),
        _payload(groupId=7),
    ]
    for data in bad_payloads:
        with pytest.raises(practice_service.InvalidSession):
            practice_service.save_practice_session(data)
    assert session_model.get_all() == []


def test_integral_floats_accepted():
    fields = practice_service.parse_session(_payload(total=5.0, correct=4.0))
    assert fields['total_questions'] == 5
    assert fields['correct_count'] == 4
    assert fields['start_time'] == '2026-10-18T09:00:00+00:00'


def test_question_lock_pool_is_bounded():
    assert practice_service.question_lock('q1') is practice_service.question_lock('q1')
    before = len(practice_service._question_locks)
    practice_service.save_practice_session(_payload(
        total=500, correct=0,
        questions=[{'questionId': f'ghost{n}', 'isCorrect': False} for n in range(500)]))
    assert len(practice_service._question_locks) == before
    assert {id(practice_service.question_lock(f'ghost{n}')) for n in range(500)} <= \
        {id(lock) for lock in practice_service._question_locks}


def test_concurrent_sessions_do_not_lose_updates():
    qid = question_model.create("Shared", difficulty=5)
    real_get = question_model.get_difficulty
    barrier = threading.Barrier(2)
    errors = []

    def interleaving_get(question_id):
        # Without the lock both threads read 5 here before either writes
        value = real_get(question_id)
        try:
            barrier.wait(timeout=0.5)
        except threading.BrokenBarrierError:
            pass
        return value

    def submit(n):
        try:
            practice_service.save_practice_session(_payload(
                session_id=f's{n}', total=10, correct=0,
                questions=[{'questionId': qid, 'isCorrect': False}]))
        except Exception as e:
            errors.append(e)

    with patch.object(question_model, 'get_difficulty', side_effect=interleaving_get):
        threads = [threading.Thread(target=submit, args=(n,)) for n in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

    assert errors == []
    # 5 -> 2 -> 1; a lost update would leave 2
    assert question_model.get_difficulty(qid) == 1
