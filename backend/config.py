import os


def _origins(raw):
    origins = [o.strip() for o in (raw or '').split(',') if o.strip()]
    return origins or None


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Rounds each player must clear before they are finished
    TOTAL_ROUNDS = int(os.environ.get('TOTAL_ROUNDS', '10'))
    MAX_NAME_LENGTH = int(os.environ.get('MAX_NAME_LENGTH', '24'))
    MAX_ROOM_CODE_LENGTH = int(os.environ.get('MAX_ROOM_CODE_LENGTH', '12'))
    # Comma-separated; unset allows any origin
    CORS_ORIGINS = _origins(os.environ.get('CORS_ORIGINS', 'http://localhost:5173,http://127.0.0.1:5173'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
