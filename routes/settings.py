"""User settings routes."""
from flask import Blueprint, request, jsonify

from models import user_setting as setting_model

settings_bp = Blueprint('settings', __name__)


@settings_bp.route('/')
def index():
    return jsonify(setting_model.get_all())


@settings_bp.route('/', methods=['PUT'])
def update_many():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'settings must be an object'}), 400
    setting_model.set_many(data)
    return jsonify(setting_model.get_all())


@settings_bp.route('/<key>')
def detail(key):
    missing = object()
    value = setting_model.get(key, missing)
    if value is missing:
        return jsonify({'error': 'Not found'}), 404
    return jsonify({'key': key, 'value': value})


@settings_bp.route('/<key>', methods=['PUT'])
def update(key):
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or 'value' not in data:
        return jsonify({'error': 'value is required'}), 400
    setting_model.set(key, data['value'])
    return jsonify({'key': key, 'value': data['value']})
