from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

from cah.catalog import CardCatalog
from cah.registry import LobbyRegistry

catalog = CardCatalog()
registry = LobbyRegistry()
socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS')

    # A missing or broken catalog is fatal: never serve lobbies without cards
    catalog.init_app(flask_app)
    registry.init_app(flask_app)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from cah.routes import main
    flask_app.register_blueprint(main)

    from cah.api.lobbies import lobbies
    flask_app.register_blueprint(lobbies, url_prefix='/api')

    # Importing here ensures the handlers bind to the initialized socketio instance
    from cah.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @click.command('list-packs')
    def list_packs_command():
        """Prints the packs available in the loaded card catalog."""
        for pack in catalog.list_packs():
            counts = pack['counts']
            marker = '*' if pack['official'] else ' '
            click.echo(f"{pack['id']:>4} {marker} {pack['name']} ({counts['white']} white, {counts['black']} black)")

    flask_app.cli.add_command(list_packs_command)

    return flask_app
