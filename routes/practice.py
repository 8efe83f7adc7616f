"""Practice session submission and history routes."""
import logging
import sqlite3

from flask import Blueprint, request, jsonify

from models import practice_session as session_model
from services import practice_service

logger = logging.getLogger(__name__)
practice_bp = Blueprint('practice', __name__)


@practice_bp.route('/sessions', methods=['POST'])
def submit():
    """Save a completed session; difficulty and review list update afterwards."""
    data = request.get_json(silent=True)
    try:
        result = practice_service.save_practice_session(data)
    except practice_service.InvalidSession as e:
        logger.warning('Rejected practice session: %s', e)
        return jsonify({'error': str(e)}), 400
    except sqlite3.IntegrityError:
        return jsonify({'error': 'session already saved'}), 409
    return jsonify(result), 201


@practice_bp.route('/sessions')
def history():
    limit = max(1, request.args.get('limit', 100, type=int))
    return jsonify(session_model.get_all(limit=limit))


@practice_bp.route('/sessions/<session_id>')
def detail(session_id):
    sess = session_model.get_by_id(session_id)
    if not sess:
        return jsonify({'error': 'Not found'}), 404
    return jsonify(sess)
