import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Board and win/bonus rules
    TILES_ON_BOARD = int(os.environ.get('TILES_ON_BOARD', '8'))
    TOTAL_TO_WIN = int(os.environ.get('TOTAL_TO_WIN', '120'))
    BONUS_EVERY = int(os.environ.get('BONUS_EVERY', '5'))
    BONUS_SECONDS = int(os.environ.get('BONUS_SECONDS', '20'))
    # Countdown (seconds)
    INITIAL_TIME = int(os.environ.get('INITIAL_TIME', '60'))
    TICK_INTERVAL_SEC = float(os.environ.get('TICK_INTERVAL_SEC', '1.0'))
    # Presentation delays (ms)
    MATCH_REMOVE_DELAY_MS = int(os.environ.get('MATCH_REMOVE_DELAY_MS', '600'))
    WRONG_CLEAR_DELAY_MS = int(os.environ.get('WRONG_CLEAR_DELAY_MS', '700'))
    BONUS_POPUP_MS = int(os.environ.get('BONUS_POPUP_MS', '1500'))
    # Optional: fixed seed for reproducible boards. Empty means random.
    RANDOM_SEED = os.environ.get('RANDOM_SEED') or None
    # 'socketio' runs delayed work as background tasks; 'manual' waits for an explicit advance
    SCHEDULER = os.environ.get('SCHEDULER', 'socketio')
    # Grace period before an abandoned session is closed (sec)
    OWNER_GRACE_SEC = float(os.environ.get('OWNER_GRACE_SEC', '2.0'))
    CORS_ORIGINS = [
        o.strip() for o in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:5173,http://127.0.0.1:5173,http://localhost:5174,http://127.0.0.1:5174',
        ).split(',') if o.strip()
    ]
