"""Round state machine for a lobby.

waiting -> playing -> judging -> roundOver -> playing ... -> gameOver

Every state change goes through ``transition`` so an action that does not
match the table is rejected instead of silently corrupting the lobby.
"""
import logging

from cah.exceptions import (
    InvalidTransition,
    NotEnoughCards,
    NotEnoughPlayers,
    NotHost,
    PlayerNotFound,
    WrongState,
)
from cah.models import GameState
from cah.services.games.deck import CardSupply
from cah.services.games.roster import deal

logger = logging.getLogger(__name__)

MIN_PLAYERS = 3
MAX_HAND_SIZE = 10

TRANSITIONS = {
    GameState.WAITING: frozenset({GameState.PLAYING}),
    # playing -> playing is a forced restart after the czar leaves
    GameState.PLAYING: frozenset({GameState.JUDGING, GameState.PLAYING, GameState.GAME_OVER}),
    GameState.JUDGING: frozenset({GameState.ROUND_OVER, GameState.PLAYING, GameState.GAME_OVER}),
    GameState.ROUND_OVER: frozenset({GameState.PLAYING, GameState.GAME_OVER}),
    GameState.GAME_OVER: frozenset(),
}


class RoundOutcome:
    """What happened when a round was (re)started or the game was ended."""

    def __init__(self, round_number=None, game_over=False, message=None, winner_name=None):
        self.round_number = round_number
        self.game_over = game_over
        self.message = message
        self.winner_name = winner_name


def can_transition(current: GameState, target: GameState) -> bool:
    return target in TRANSITIONS[current]


def transition(lobby, target: GameState) -> None:
    if not can_transition(lobby.state, target):
        raise InvalidTransition(f"Cannot go from {lobby.state.value} to {target.value}.")
    logger.debug(f"[state] lobby={lobby.code} {lobby.state.value} -> {target.value}")
    lobby.state = target


def require_state(lobby, *states) -> None:
    if lobby.state not in states:
        raise WrongState()


def discard_round(lobby) -> None:
    """Send every pending submission's cards to the white discard pile."""
    for submission in lobby.submissions:
        lobby.white.discard(submission.cards)
    lobby.submissions = []


def start_game(lobby, catalog, player_id, min_players=MIN_PLAYERS, hand_size=MAX_HAND_SIZE) -> RoundOutcome:
    if lobby.host_id != player_id:
        raise NotHost('Only the host can start the game.')
    require_state(lobby, GameState.WAITING)
    if len(lobby.players) < min_players:
        raise NotEnoughPlayers(f"Need at least {min_players} players to start.")

    pools = catalog.get_packs(lobby.settings.selected_pack_indexes)
    if not pools['black'] or len(pools['white']) < hand_size * len(lobby.players):
        raise NotEnoughCards()

    lobby.white = CardSupply(pools['white'], rng=lobby.rng)
    lobby.black = CardSupply(pools['black'], rng=lobby.rng)
    lobby.white.shuffle()
    lobby.black.shuffle()
    lobby.current_black_card = None
    lobby.submissions = []

    for player in lobby.players:
        player.score = 0
        player.hand = []
        player.submission = None
        deal(lobby, player, hand_size)

    logger.info(
        f"[game-start] lobby={lobby.code} players={len(lobby.players)} "
        f"white={len(lobby.white)} black={len(lobby.black)}"
    )
    return _begin_round(lobby, lobby.players[0].id, hand_size)


def start_next_round(lobby, vacated_index=None, hand_size=MAX_HAND_SIZE) -> RoundOutcome:
    """Rotate the czar and deal a fresh round.

    ``vacated_index`` is the roster position the czar held if they just
    left, so the member who slid into that slot takes over.
    """
    require_state(lobby, GameState.PLAYING, GameState.JUDGING, GameState.ROUND_OVER)
    if not lobby.players:
        return RoundOutcome()

    count = len(lobby.players)
    czar = lobby.czar
    if czar is not None:
        next_czar = lobby.players[(lobby.players.index(czar) + 1) % count]
    elif vacated_index is not None:
        next_czar = lobby.players[vacated_index % count]
    else:
        next_czar = lobby.players[0]
    return _begin_round(lobby, next_czar.id, hand_size)


def _begin_round(lobby, czar_id, hand_size) -> RoundOutcome:
    discard_round(lobby)
    lobby.round_winner_info = None
    for player in lobby.players:
        player.submission = None
    lobby.czar_id = czar_id

    prompt = lobby.black.draw_one()
    if prompt is None:
        return end_game(lobby, message='No more black cards!')
    if lobby.current_black_card is not None:
        lobby.black.discard([lobby.current_black_card])
    lobby.current_black_card = prompt

    for player in lobby.players:
        deal(lobby, player, hand_size)

    lobby.round_number += 1
    transition(lobby, GameState.PLAYING)
    logger.info(
        f"[round-start] lobby={lobby.code} round={lobby.round_number} "
        f"czar={czar_id} pick={prompt.pick}"
    )
    return RoundOutcome(round_number=lobby.round_number)


def end_game(lobby, message=None, winner_name=None) -> RoundOutcome:
    discard_round(lobby)
    transition(lobby, GameState.GAME_OVER)
    logger.info(f"[game-over] lobby={lobby.code} winner={winner_name} reason={message}")
    return RoundOutcome(game_over=True, message=message, winner_name=winner_name)


def request_next_round(lobby, player_id, hand_size=MAX_HAND_SIZE) -> RoundOutcome:
    """Anyone may move past a finished round; only the host may skip a live one."""
    if lobby.find_player(player_id) is None:
        raise PlayerNotFound()
    require_state(lobby, GameState.PLAYING, GameState.JUDGING, GameState.ROUND_OVER)
    if lobby.state != GameState.ROUND_OVER and player_id != lobby.host_id:
        raise NotHost('Only the host can skip a round in progress.')
    return start_next_round(lobby, hand_size=hand_size)
