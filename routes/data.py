"""Backup routes: full JSON export and import."""
from flask import Blueprint, request, jsonify

from services import transfer_service

data_bp = Blueprint('data', __name__)


@data_bp.route('/export')
def export():
    return jsonify(transfer_service.export_user_data())


@data_bp.route('/import', methods=['POST'])
def import_():
    result = transfer_service.import_user_data(request.get_json(silent=True))
    return jsonify(result), 200 if result['success'] else 400
