"""JSON CRUD routes for the question bank."""
import logging
import sqlite3

from flask import Blueprint, request, jsonify

from models import question as question_model
from services import transfer_service

logger = logging.getLogger(__name__)
questions_bp = Blueprint('questions', __name__)


@questions_bp.route('/')
def index():
    return jsonify(question_model.get_all())


@questions_bp.route('/', methods=['POST'])
def create():
    data = request.get_json(silent=True) or {}
    text = data.get('question')
    if not isinstance(text, str) or not text.strip():
        return jsonify({'error': 'question text is required'}), 400
    try:
        question_id = question_model.create(
            text.strip(),
            options=data.get('options'),
            answer=data.get('answer'),
            explanation=data.get('explanation'),
            tags=data.get('tags'),
            image_url=data.get('imageUrl'),
            difficulty=data.get('difficulty'),
            source=data.get('source'),
            question_id=data.get('id'),
        )
    except question_model.InvalidDifficulty as e:
        return jsonify({'error': str(e)}), 400
    except sqlite3.IntegrityError:
        return jsonify({'error': 'question already exists'}), 409
    logger.info('Created question %s', question_id)
    return jsonify(question_model.get_by_id(question_id)), 201


@questions_bp.route('/<question_id>')
def detail(question_id):
    q = question_model.get_by_id(question_id)
    if not q:
        return jsonify({'error': 'Not found'}), 404
    return jsonify(q)


@questions_bp.route('/<question_id>/difficulty', methods=['PUT'])
def set_difficulty(question_id):
    """Manual difficulty edit; null clears the score."""
    data = request.get_json(silent=True) or {}
    if 'difficulty' not in data:
        return jsonify({'error': 'difficulty is required'}), 400
    try:
        question_model.set_difficulty(question_id, data['difficulty'])
    except question_model.InvalidDifficulty as e:
        return jsonify({'error': str(e)}), 400
    except question_model.QuestionNotFound:
        return jsonify({'error': 'Not found'}), 404
    return jsonify(question_model.get_by_id(question_id))


@questions_bp.route('/<question_id>', methods=['DELETE'])
def delete(question_id):
    if not question_model.delete(question_id):
        return jsonify({'error': 'Not found'}), 404
    logger.info('Deleted question %s', question_id)
    return '', 204


@questions_bp.route('/<question_id>', methods=['PUT'])
def update(question_id):
    """Replace every editable field of a question."""
    data = request.get_json(silent=True) or {}
    text = data.get('question')
    if not isinstance(text, str) or not text.strip():
        return jsonify({'error': 'question text is required'}), 400
    for key in ('options', 'answer', 'tags'):
        if data.get(key) is not None and not isinstance(data[key], list):
            return jsonify({'error': f'{key} must be a list'}), 400
    try:
        question_model.update(
            question_id,
            question=text.strip(),
            options=data.get('options'),
            answer=data.get('answer'),
            explanation=data.get('explanation'),
            tags=data.get('tags'),
            image_url=data.get('imageUrl', data.get('image_url')),
            difficulty=data.get('difficulty'),
            source=data.get('source'),
        )
    except question_model.InvalidDifficulty as e:
        return jsonify({'error': str(e)}), 400
    except question_model.QuestionNotFound:
        return jsonify({'error': 'Not found'}), 404
    return jsonify(question_model.get_by_id(question_id))


@questions_bp.route('/import', methods=['POST'])
def import_questions():
    """Bulk add from {"questions": [...], "groupId": optional}."""
    data = request.get_json(silent=True) or {}
    group_id = data.get('groupId')
    if group_id is not None and not isinstance(group_id, str):
        return jsonify({'error': 'groupId must be a string'}), 400
    result = transfer_service.import_questions(data.get('questions'), group_id=group_id)
    return jsonify(result), 200 if result['success'] else 400
