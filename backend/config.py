import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///' + os.path.join(BASE_DIR, 'dungeongame.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Create the hiscores table on startup if it is missing
    AUTO_CREATE_TABLES = os.environ.get('AUTO_CREATE_TABLES', '1') == '1'
    # Dungeon generation parameters (used for every level)
    # Strings from the environment are checked when the game server starts
    DUNGEON_WIDTH = os.environ.get('DUNGEON_WIDTH', 20)
    DUNGEON_HEIGHT = os.environ.get('DUNGEON_HEIGHT', 20)
    DUNGEON_ROOM_COUNT = os.environ.get('DUNGEON_ROOM_COUNT', 7)
    DUNGEON_AVG_ROOM_SIZE = os.environ.get('DUNGEON_AVG_ROOM_SIZE', 8)
    # Optional: fixed seed for reproducible dungeons. Unset = random.
    DUNGEON_SEED = os.environ.get('DUNGEON_SEED') or None
    # Network
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '8081'))
    DEBUG = os.environ.get('DEBUG', '0') == '1'
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', '*').split(',') if o.strip()]
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/')
    # Browser client assets, served from /
    STATIC_FOLDER = os.environ.get('STATIC_FOLDER') or os.path.join(BASE_DIR, 'public')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
