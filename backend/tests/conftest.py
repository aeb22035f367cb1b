import os
import sys
import pytest

# Ensure the backend root (containing the `cah` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from cah import create_app, socketio
from cah.catalog import CardCatalog
from cah.registry import LobbyRegistry
from cah.services.games.rounds import start_game

FIXTURE_CARDS = os.path.join(CURRENT_DIR, 'fixtures', 'cards.json')
NAMESPACE = '/ws'


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CARDS_PATH = FIXTURE_CARDS
    CARDS_FORMAT = 'compact'
    ALLOW_SAME_NAMES = False
    ROOMS_FUNCTIONALITY = True
    ROUND_OVER_DELAY_SEC = 0
    MIN_PLAYERS = 3
    MAX_HAND_SIZE = 10
    LOBBY_CODE_LENGTH = 5
    SHUFFLE_SEED = 1234
    CORS_ORIGINS = ['http://localhost:3000']


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def connect(flask_app):
    """Factory for Socket.IO test clients on the game namespace."""
    clients = []

    def _connect():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace=NAMESPACE
        )
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        if test_client.is_connected(NAMESPACE):
            test_client.disconnect(namespace=NAMESPACE)


@pytest.fixture()
def card_catalog():
    return CardCatalog.from_compact(FIXTURE_CARDS)


@pytest.fixture()
def lobby_registry():
    reg = LobbyRegistry()
    reg.seed = 42
    return reg


@pytest.fixture()
def make_lobby(lobby_registry):
    """Create a waiting lobby with `count` players named Player0..PlayerN."""

    def _make(count=3, settings=None):
        lobby, _ = lobby_registry.create_lobby('sid-0', 'Player0', settings)
        for i in range(1, count):
            lobby_registry.join_lobby(f'sid-{i}', lobby.code, f'Player{i}')
        return lobby

    return _make


@pytest.fixture()
def started_lobby(make_lobby, card_catalog):
    """Create a lobby and start its game; the host is the first czar."""

    def _make(count=3, settings=None):
        lobby = make_lobby(count, settings)
        start_game(lobby, card_catalog, lobby.host_id)
        return lobby

    return _make

