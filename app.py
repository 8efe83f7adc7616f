"""ExamDrill — Flask application entry point."""
import logging
import logging.handlers
import traceback

from flask import Flask, jsonify, request as flask_request
from werkzeug.exceptions import HTTPException

from config.settings import LOG_FILE, SECRET_KEY
from db.database import init_db
from routes.questions import questions_bp
from routes.practice import practice_bp
from routes.wrong_questions import wrong_bp
from routes.settings import settings_bp
from routes.groups import groups_bp
from routes.data import data_bp

# --- File logging with daily rotation, 3-day retention ---
file_handler = logging.handlers.TimedRotatingFileHandler(
    LOG_FILE, when='midnight', backupCount=3, encoding='utf-8', delay=True,
)
file_handler.setLevel(logging.DEBUG)
file_handler.setFormatter(logging.Formatter(
    '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
))

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    handlers=[logging.StreamHandler(), file_handler],
)


def create_app():
    app = Flask(__name__)
    app.secret_key = SECRET_KEY

    app.register_blueprint(questions_bp, url_prefix='/questions')
    app.register_blueprint(practice_bp, url_prefix='/practice')
    app.register_blueprint(wrong_bp, url_prefix='/wrong-questions')
    app.register_blueprint(settings_bp, url_prefix='/settings')
    app.register_blueprint(groups_bp, url_prefix='/groups')
    app.register_blueprint(data_bp, url_prefix='/data')

    @app.route('/')
    def index():
        return jsonify({'status': 'ok'})

    # --- Request/response logging ---
    req_logger = logging.getLogger('examdrill.requests')

    @app.before_request
    def log_request():
        req_logger.info('>>> %s %s', flask_request.method,
                        flask_request.full_path.rstrip('?'))

    @app.after_request
    def log_response(response):
        req_logger.info('<<< %s %s  status=%d',
                        flask_request.method,
                        flask_request.full_path.rstrip('?'),
                        response.status_code)
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['Content-Security-Policy'] = "default-src 'self'"
        return response

    @app.errorhandler(Exception)
    def log_error(error):
        if isinstance(error, HTTPException):
            return error
        req_logger.error('!!! %s %s  EXCEPTION:\n%s',
                         flask_request.method,
                         flask_request.full_path.rstrip('?'),
                         traceback.format_exc())
        return jsonify({'error': 'Internal Server Error'}), 500

    with app.app_context():
        init_db()

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(debug=True, host='127.0.0.1', port=5002, threaded=True)
