"""Question group routes."""
import logging
import sqlite3

from flask import Blueprint, request, jsonify

from models import question as question_model
from models import question_group as group_model

logger = logging.getLogger(__name__)
groups_bp = Blueprint('groups', __name__)


def _group_fields(data):
    """Validate a group body. Returns (fields, error message)."""
    name = data.get('name')
    if not isinstance(name, str) or not name.strip():
        return None, 'name is required'
    fields = {'name': name.strip()}
    for key, alt, default in (('description', None, ''),
                              ('parent_id', 'parentId', None),
                              ('color', None, group_model.DEFAULT_COLOR),
                              ('icon', None, group_model.DEFAULT_ICON)):
        value = data.get(key, data.get(alt) if alt else None)
        if value is not None and not isinstance(value, str):
            return None, f'{key} must be a string'
        fields[key] = value or default
    return fields, None


@groups_bp.route('/')
def index():
    return jsonify(group_model.get_all())


@groups_bp.route('/', methods=['POST'])
def create():
    data = request.get_json(silent=True) or {}
    fields, error = _group_fields(data)
    if error:
        return jsonify({'error': error}), 400
    try:
        group_id = group_model.create(group_id=data.get('id'), **fields)
    except sqlite3.IntegrityError:
        return jsonify({'error': 'group already exists or parent not found'}), 409
    logger.info('Created group %s', group_id)
    return jsonify(group_model.get_by_id(group_id)), 201


@groups_bp.route('/<group_id>')
def detail(group_id):
    group = group_model.get_by_id(group_id)
    if not group:
        return jsonify({'error': 'Not found'}), 404
    return jsonify(group)


@groups_bp.route('/<group_id>', methods=['PUT'])
def update(group_id):
    fields, error = _group_fields(request.get_json(silent=True) or {})
    if error:
        return jsonify({'error': error}), 400
    try:
        group_model.update(group_id, **fields)
    except group_model.GroupNotFound:
        return jsonify({'error': 'Not found'}), 404
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except sqlite3.IntegrityError:
        return jsonify({'error': 'parent group not found'}), 400
    return jsonify(group_model.get_by_id(group_id))


@groups_bp.route('/<group_id>', methods=['DELETE'])
def delete(group_id):
    if not group_model.delete(group_id):
        return jsonify({'error': 'Not found'}), 404
    logger.info('Deleted group %s', group_id)
    return '', 204


@groups_bp.route('/<group_id>/questions')
def questions(group_id):
    if not group_model.get_by_id(group_id):
        return jsonify({'error': 'Not found'}), 404
    return jsonify(question_model.get_for_group(group_id))


@groups_bp.route('/<group_id>/questions/<question_id>', methods=['PUT'])
def add_question(group_id, question_id):
    try:
        group_model.add_question(group_id, question_id)
    except sqlite3.IntegrityError:
        return jsonify({'error': 'Not found'}), 404
    return '', 204


@groups_bp.route('/<group_id>/questions/<question_id>', methods=['DELETE'])
def remove_question(group_id, question_id):
    if not group_model.remove_question(group_id, question_id):
        return jsonify({'error': 'Not found'}), 404
    return '', 204
