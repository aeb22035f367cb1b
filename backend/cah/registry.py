"""Process-wide registry of live lobbies.

Every Socket.IO handler and timer callback runs under ``registry.lock`` so
the lobby it touches changes atomically with respect to other events, even
though Flask-SocketIO may dispatch handlers from several workers.
"""
import logging
import random
import string
import threading

from cah.exceptions import (
    AlreadyInLobby,
    InvalidSettings,
    LobbyNotFound,
    NotHost,
    PlayerNotFound,
)
from cah.models import GameState, Lobby, LobbySettings
from cah.services.games import roster
from cah.services.games.rounds import MIN_PLAYERS, require_state

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits


class LobbyRegistry:
    def __init__(self, app=None):
        self.lock = threading.RLock()
        self.lobbies = {}
        self._sids = {}
        self.code_length = 5
        self.allow_same_names = False
        self.rooms_functionality = True
        self.min_players = MIN_PLAYERS
        self.seed = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        with self.lock:
            self.lobbies.clear()
            self._sids.clear()
        self.code_length = int(app.config.get('LOBBY_CODE_LENGTH', 5))
        self.allow_same_names = bool(app.config.get('ALLOW_SAME_NAMES', False))
        self.rooms_functionality = bool(app.config.get('ROOMS_FUNCTIONALITY', True))
        self.min_players = int(app.config.get('MIN_PLAYERS', MIN_PLAYERS))
        self.seed = app.config.get('SHUFFLE_SEED')
        app.extensions['cah_registry'] = self

    # ---- lookup ----

    def generate_code(self):
        """Generate a unique, short lobby code."""
        while True:
            code = ''.join(random.choices(CODE_ALPHABET, k=self.code_length))
            if code not in self.lobbies:
                return code

    def get(self, code):
        if not isinstance(code, str):
            return None
        return self.lobbies.get(code.strip().upper())

    def lookup(self, code):
        lobby = self.get(code)
        if lobby is None:
            raise LobbyNotFound()
        return lobby

    def lobby_for_sid(self, sid):
        """Return (lobby, player) for a connection, or (None, None)."""
        entry = self._sids.get(sid)
        if entry is None:
            return None, None
        code, player_id = entry
        lobby = self.lobbies.get(code)
        if lobby is None:
            return None, None
        return lobby, lobby.find_player(player_id)

    def member(self, code, sid):
        """Resolve the acting player of an event against the named lobby."""
        lobby = self.lookup(code)
        player = lobby.find_by_sid(sid)
        if player is None:
            raise PlayerNotFound('You are not in this lobby.')
        return lobby, player

    # ---- lifecycle ----

    def create_lobby(self, sid, player_name, settings_payload=None, catalog=None):
        if sid in self._sids:
            raise AlreadyInLobby()
        name = roster.clean_name(player_name)
        settings = parse_settings(settings_payload or {}, LobbySettings(), catalog)
        if not self.rooms_functionality:
            settings.is_private = True

        lobby = Lobby(self.generate_code(), settings=settings, seed=self.seed)
        player = roster.join(lobby, sid, name, self.allow_same_names)
        self.lobbies[lobby.code] = lobby
        self._sids[sid] = (lobby.code, player.id)
        logger.info(f"[lobby-create] lobby={lobby.code} host={player.id} private={settings.is_private}")
        return lobby, player

    def join_lobby(self, sid, code, player_name):
        if sid in self._sids:
            raise AlreadyInLobby()
        lobby = self.lookup(code)
        player = roster.join(lobby, sid, player_name, self.allow_same_names)
        self._sids[sid] = (lobby.code, player.id)
        logger.info(f"[lobby-join] lobby={lobby.code} player={player.id} name={player.name!r}")
        return lobby, player

    def forget_sid(self, sid):
        self._sids.pop(sid, None)

    def delete(self, code):
        lobby = self.lobbies.pop(code, None)
        if lobby is not None:
            for player in lobby.players:
                self._sids.pop(player.sid, None)
            logger.info(f"[lobby-delete] lobby={code}")
        return lobby

    def update_settings(self, lobby, player_id, payload, catalog=None):
        if lobby.host_id != player_id:
            raise NotHost('Only the host can change settings.')
        require_state(lobby, GameState.WAITING)
        settings = parse_settings(payload, lobby.settings, catalog)
        if settings.max_players < len(lobby.players):
            raise InvalidSettings('Max players cannot be lower than the current number of players.')
        if not self.rooms_functionality:
            settings.is_private = True
        lobby.settings = settings
        return settings

    def public_lobbies(self, catalog=None):
        listed = []
        for lobby in self.lobbies.values():
            if (lobby.settings.is_private or lobby.state != GameState.WAITING
                    or len(lobby.players) >= lobby.settings.max_players):
                continue
            host = lobby.host
            listed.append({
                'code': lobby.code,
                'hostName': host.name if host else 'Unknown Host',
                'playerCount': len(lobby.players),
                'settings': {
                    'maxPlayers': lobby.settings.max_players,
                    'scoreToWin': lobby.settings.score_to_win,
                    'selectedPackNames': [
                        catalog.pack_name(idx) if catalog else f"Pack {idx}"
                        for idx in lobby.settings.selected_pack_indexes
                    ],
                },
            })
        return listed


def parse_settings(payload, base, catalog=None):
    """Merge a client settings payload onto ``base``; returns a new object."""
    if not isinstance(payload, dict):
        raise InvalidSettings()
    settings = LobbySettings(
        score_to_win=base.score_to_win,
        max_players=base.max_players,
        selected_pack_indexes=base.selected_pack_indexes,
        is_private=base.is_private,
    )

    if payload.get('scoreToWin') is not None:
        settings.score_to_win = _positive_int(payload['scoreToWin'], 'Score to win', minimum=1)
    if payload.get('maxPlayers') is not None:
        settings.max_players = _positive_int(payload['maxPlayers'], 'Max players', minimum=MIN_PLAYERS)
    if payload.get('selectedPackIndexes') is not None:
        indexes = payload['selectedPackIndexes']
        if not isinstance(indexes, list) or not indexes:
            raise InvalidSettings('Select at least one pack.')
        parsed = [_positive_int(idx, 'Pack index', minimum=0) for idx in indexes]
        if catalog is not None and not all(catalog.has_pack(idx) for idx in parsed):
            raise InvalidSettings('Unknown pack selected.')
        # Keep the client's order but drop repeats
        settings.selected_pack_indexes = list(dict.fromkeys(parsed))
    if payload.get('isPrivate') is not None:
        if not isinstance(payload['isPrivate'], bool):
            raise InvalidSettings('isPrivate must be true or false.')
        settings.is_private = payload['isPrivate']
    return settings


def _positive_int(value, label, minimum):
    if isinstance(value, bool):
        raise InvalidSettings(f"{label} must be a whole number.")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise InvalidSettings(f"{label} must be a whole number.")
    if number != value and not isinstance(value, str):
        raise InvalidSettings(f"{label} must be a whole number.")
    if number < minimum:
        raise InvalidSettings(f"{label} must be at least {minimum}.")
    return number
