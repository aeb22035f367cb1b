"""Disconnect and leave handling: host migration, czar migration and the
minimum-player rule for games in progress."""
import logging

from cah.models import GameState
from cah.services.games.roster import leave
from cah.services.games.rounds import MAX_HAND_SIZE, MIN_PLAYERS, end_game, start_next_round
from cah.services.games.scoring import maybe_start_judging

logger = logging.getLogger(__name__)


class Departure:
    """Everything the transport layer needs to announce after a player leaves."""

    def __init__(self, lobby, player):
        self.lobby = lobby
        self.player = player
        self.lobby_closed = False
        self.new_host = None
        self.was_czar = False
        self.round = None
        self.judging_started = False


def depart(registry, lobby, player_id, min_players=MIN_PLAYERS, hand_size=MAX_HAND_SIZE):
    """Remove a player from a lobby and repair whatever their leaving broke.

    Returns None when the player was not a member.
    """
    was_host = lobby.host_id == player_id
    was_czar = lobby.czar_id == player_id
    player, index = leave(lobby, player_id)
    if player is None:
        return None
    registry.forget_sid(player.sid)

    departure = Departure(lobby, player)
    departure.was_czar = was_czar

    # Their cards go back into circulation rather than vanishing.
    lobby.white.discard(player.hand)
    player.hand = []
    pending = [s for s in lobby.submissions if s.player_id == player.id]
    for submission in pending:
        lobby.submissions.remove(submission)
        lobby.white.discard(submission.cards)
    player.submission = None

    logger.info(f"[leave] lobby={lobby.code} player={player.id} name={player.name!r} remaining={len(lobby.players)}")

    if not lobby.players:
        registry.delete(lobby.code)
        departure.lobby_closed = True
        return departure

    if was_host:
        lobby.host_id = lobby.players[0].id
        departure.new_host = lobby.players[0]
        logger.info(f"[host-migrate] lobby={lobby.code} host={lobby.host_id}")

    if lobby.in_progress:
        if was_czar:
            lobby.czar_id = None
            departure.round = start_next_round(lobby, vacated_index=index, hand_size=hand_size)
        elif len(lobby.players) < min_players:
            departure.round = end_game(lobby, message='Not enough players to continue.')
        elif lobby.state == GameState.PLAYING:
            departure.judging_started = maybe_start_judging(lobby)
    return departure
