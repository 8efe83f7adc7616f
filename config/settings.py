"""ExamDrill — centralized configuration."""
import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DB_PATH = os.environ.get('EXAMDRILL_DB_PATH', os.path.join(BASE_DIR, 'examdrill.db'))
LOG_FILE = os.path.join(BASE_DIR, 'examdrill_debug.log')

SECRET_KEY = os.environ.get('SECRET_KEY', 'examdrill-dev-key')

# Difficulty scale
DIFFICULTY_DEFAULTS = {
    'min_difficulty': 1,
    'max_difficulty': 5,
    'baseline_difficulty': 3,  # used when a question was never scored
}

# Session submission
SESSION_DEFAULTS = {
    'auto_add_wrong_setting': 'autoAddWrongQuestions',
    'wrong_question_note': 'Added from practice session',
    'lock_stripes': 64,
}

# JSON export format
EXPORT_VERSION = '1.0.0'
