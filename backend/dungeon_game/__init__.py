from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def create_app(config_class=Config, maze_generator=None):
    flask_app = Flask(
        __name__,
        static_folder=getattr(config_class, 'STATIC_FOLDER', None),
        static_url_path='',
    )
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'
    if allowed_origins == ['*']:
        allowed_origins = '*'

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from dungeon_game.models import HiScore
    if flask_app.config.get('AUTO_CREATE_TABLES'):
        with flask_app.app_context():
            db.create_all()

    # One game world per app; transport handlers find it in app.extensions
    from dungeon_game.services.game_loop import GameServer
    from dungeon_game.services.leaderboard import HiScoreStore
    from dungeon_game.services.mazegen import RandomMazeGenerator
    from dungeon_game.services.session import GenerationConfig
    from dungeon_game.socketio_events import SocketIOBroadcaster, register_socketio_handlers

    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    if maze_generator is None:
        maze_generator = RandomMazeGenerator(seed=flask_app.config.get('DUNGEON_SEED'))
    game_server = GameServer(
        maze_generator,
        GenerationConfig.from_mapping(flask_app.config),
        HiScoreStore(),
        SocketIOBroadcaster(socketio, namespace=namespace, logger=flask_app.logger),
        logger=flask_app.logger,
    )
    with flask_app.app_context():
        # GenerationError propagates: never serve a broken dungeon
        game_server.start()
    flask_app.extensions['dungeon_game'] = game_server

    from dungeon_game.main import main
    flask_app.register_blueprint(main)

    from dungeon_game.api.dungeon import dungeon
    flask_app.register_blueprint(dungeon, url_prefix='/api/dungeon')

    register_socketio_handlers(namespace=namespace)

    @click.command('init-db')
    def init_db_command():
        """Drops and recreates the hiscores table."""
        with flask_app.app_context():
            HiScore.__table__.drop(db.engine, checkfirst=True)
            HiScore.__table__.create(db.engine)
            print('Hiscores table has been recreated!')

    flask_app.cli.add_command(init_db_command)

    return flask_app
