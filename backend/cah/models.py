import enum
import random
import secrets

from cah.services.games.deck import CardSupply


class GameState(str, enum.Enum):
    WAITING = 'waiting'
    PLAYING = 'playing'
    JUDGING = 'judging'
    ROUND_OVER = 'roundOver'
    GAME_OVER = 'gameOver'


class WhiteCard:
    __slots__ = ('id', 'text', 'pack', 'icon')

    def __init__(self, id, text, pack, icon=None):
        self.id = id
        self.text = text
        self.pack = pack
        self.icon = icon

    def to_dict(self):
        data = {'id': self.id, 'text': self.text, 'pack': self.pack}
        if self.icon:
            data['icon'] = self.icon
        return data

    def __repr__(self):
        return f"WhiteCard({self.id!r}, {self.text!r})"


class BlackCard:
    __slots__ = ('id', 'text', 'pick', 'pack', 'icon')

    def __init__(self, id, text, pick, pack, icon=None):
        self.id = id
        self.text = text
        # Prompts without a usable pick count take a single card
        self.pick = pick if isinstance(pick, int) and pick >= 1 else 1
        self.pack = pack
        self.icon = icon

    def to_dict(self):
        data = {'id': self.id, 'text': self.text, 'pick': self.pick, 'pack': self.pack}
        if self.icon:
            data['icon'] = self.icon
        return data

    def __repr__(self):
        return f"BlackCard({self.id!r}, {self.text!r}, pick={self.pick})"


class Player:
    def __init__(self, sid, name):
        # Stable for the life of the player; the connection id may change.
        self.id = secrets.token_hex(8)
        self.sid = sid
        self.name = name
        self.score = 0
        self.hand = []
        self.submission = None

    @property
    def has_submitted(self):
        return self.submission is not None

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'score': self.score,
        }

    def __repr__(self):
        return f"Player({self.id!r}, {self.name!r})"


class Submission:
    def __init__(self, player_id, player_name, cards):
        self.player_id = player_id
        self.player_name = player_name
        self.cards = list(cards)

    def to_dict(self):
        return {
            'playerId': self.player_id,
            'cards': [c.to_dict() for c in self.cards],
        }


class RoundWinnerInfo:
    def __init__(self, winner_name, winning_cards_text, black_card_text):
        self.winner_name = winner_name
        self.winning_cards_text = list(winning_cards_text)
        self.black_card_text = black_card_text

    def to_dict(self):
        return {
            'winnerName': self.winner_name,
            'winningCardsText': self.winning_cards_text,
            'blackCardText': self.black_card_text,
        }


class LobbySettings:
    DEFAULT_SCORE_TO_WIN = 7
    DEFAULT_MAX_PLAYERS = 10

    def __init__(self, score_to_win=DEFAULT_SCORE_TO_WIN, max_players=DEFAULT_MAX_PLAYERS,
                 selected_pack_indexes=None, is_private=False):
        self.score_to_win = score_to_win
        self.max_players = max_players
        self.selected_pack_indexes = list(selected_pack_indexes) if selected_pack_indexes is not None else [0]
        self.is_private = is_private

    def to_dict(self):
        return {
            'scoreToWin': self.score_to_win,
            'maxPlayers': self.max_players,
            'selectedPackIndexes': list(self.selected_pack_indexes),
            'isPrivate': self.is_private,
        }


class Lobby:
    def __init__(self, code, settings=None, seed=None):
        self.code = code
        self.players = []
        self.host_id = None
        self.state = GameState.WAITING
        self.settings = settings or LobbySettings()
        self.rng = random.Random(seed)
        self.white = CardSupply(rng=self.rng)
        self.black = CardSupply(rng=self.rng)
        self.current_black_card = None
        self.czar_id = None
        self.submissions = []
        self.round_winner_info = None
        # Bumped on every round start; lets deferred work detect it is stale
        self.round_number = 0

    @property
    def host(self):
        return self.find_player(self.host_id)

    @property
    def czar(self):
        return self.find_player(self.czar_id)

    @property
    def in_progress(self):
        return self.state not in (GameState.WAITING, GameState.GAME_OVER)

    def find_player(self, player_id):
        if player_id is None:
            return None
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def find_by_sid(self, sid):
        for player in self.players:
            if player.sid == sid:
                return player
        return None

    def non_czar_players(self):
        return [p for p in self.players if p.id != self.czar_id]

    def __repr__(self):
        return f"Lobby({self.code!r}, state={self.state.value}, players={len(self.players)})"
