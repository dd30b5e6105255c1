import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///deckdash.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Deck content: published CSV wins over sheet id + tab name
    GOOGLE_SHEETS_ID = os.environ.get('GOOGLE_SHEETS_ID', '')
    GOOGLE_SHEETS_PUBLISHED_URL = os.environ.get('GOOGLE_SHEETS_PUBLISHED_URL', '')
    SHEET_NAME = os.environ.get('SHEET_NAME', 'deck_dash_cards')
    # Row cache freshness window (seconds)
    SHEET_CACHE_SECONDS = int(os.environ.get('SHEET_CACHE_SECONDS', str(24 * 60 * 60)))
    SHEET_FETCH_TIMEOUT_SEC = int(os.environ.get('SHEET_FETCH_TIMEOUT_SEC', '10'))
    # Cards per round
    ROUND_SIZE = int(os.environ.get('ROUND_SIZE', '30'))
    MAX_ROUND_SIZE = int(os.environ.get('MAX_ROUND_SIZE', '100'))
    # Optional: fixed seed for card/choice shuffling. Unset means unseeded.
    SHUFFLE_SEED = os.environ.get('SHUFFLE_SEED')
