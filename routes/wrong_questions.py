"""Review-list routes for questions answered incorrectly."""
import sqlite3

from flask import Blueprint, request, jsonify

from models import wrong_question as wrong_model

wrong_bp = Blueprint('wrong_questions', __name__)


@wrong_bp.route('/')
def index():
    return jsonify(wrong_model.get_with_details())


@wrong_bp.route('/<question_id>/toggle', methods=['POST'])
def toggle(question_id):
    data = request.get_json(silent=True) or {}
    try:
        marked = wrong_model.toggle(question_id, data.get('notes', ''))
    except sqlite3.IntegrityError:
        return jsonify({'error': 'Not found'}), 404
    return jsonify({'questionId': question_id, 'marked': marked})


@wrong_bp.route('/<question_id>/review', methods=['POST'])
def review(question_id):
    data = request.get_json(silent=True) or {}
    is_correct = data.get('isCorrect')
    if not isinstance(is_correct, bool):
        return jsonify({'error': 'isCorrect must be a boolean'}), 400
    if not wrong_model.record_review(question_id, is_correct, data.get('notes', '')):
        return jsonify({'error': 'Not found'}), 404
    return '', 204


@wrong_bp.route('/<question_id>', methods=['DELETE'])
def remove(question_id):
    if not wrong_model.remove(question_id):
        return jsonify({'error': 'Not found'}), 404
    return '', 204
