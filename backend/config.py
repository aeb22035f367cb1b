import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


def _flag(name, default):
    return os.environ.get(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Card catalog (compact pack-index file unless CARDS_FORMAT=full)
    CARDS_PATH = os.environ.get('CARDS_PATH') or os.path.join(BASE_DIR, 'cards.json')
    CARDS_FORMAT = os.environ.get('CARDS_FORMAT', 'compact')
    # Feature flags
    ALLOW_SAME_NAMES = _flag('ALLOW_SAME_NAMES', 'false')
    ROOMS_FUNCTIONALITY = _flag('ROOMS_FUNCTIONALITY', 'true')
    # Auto-advance from roundOver to the next round (seconds)
    ROUND_OVER_DELAY_SEC = float(os.environ.get('ROUND_OVER_DELAY_SEC', '5'))
    MIN_PLAYERS = int(os.environ.get('MIN_PLAYERS', '3'))
    MAX_HAND_SIZE = int(os.environ.get('MAX_HAND_SIZE', '10'))
    LOBBY_CODE_LENGTH = int(os.environ.get('LOBBY_CODE_LENGTH', '5'))
    # Optional: fixed seed for every shuffle (debugging only)
    SHUFFLE_SEED = os.environ.get('SHUFFLE_SEED')
    CORS_ORIGINS = [
        o.strip() for o in os.environ.get(
            'CORS_ORIGINS', 'http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173'
        ).split(',') if o.strip()
    ]
