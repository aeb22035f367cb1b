"""Player-safe views of a lobby.

Hands only ever travel in ``hand_payload`` to their owner. While judging,
submissions are shuffled and carry no name, but each keeps its ``playerId``
because ``selectWinner`` picks by player id, so a client that cross-checks
``players`` can still tell who played what.
"""
from cah.models import GameState


def public_state(lobby):
    czar = lobby.czar
    submissions = None
    if lobby.state == GameState.JUDGING:
        submissions = [s.to_dict() for s in lobby.submissions]
    return {
        'code': lobby.code,
        'players': [
            {
                'id': p.id,
                'name': p.name,
                'score': p.score,
                'isCzar': p.id == lobby.czar_id,
                'hasSubmitted': p.has_submitted,
            }
            for p in lobby.players
        ],
        'hostId': lobby.host_id,
        'gameState': lobby.state.value,
        'settings': lobby.settings.to_dict(),
        'currentBlackCard': lobby.current_black_card.to_dict() if lobby.current_black_card else None,
        'roundSubmissions': submissions,
        'roundWinnerInfo': lobby.round_winner_info.to_dict() if lobby.round_winner_info else None,
        'czarId': lobby.czar_id,
        'czarName': czar.name if czar else None,
    }


def hand_payload(player):
    return [card.to_dict() for card in player.hand]


def scoreboard(lobby):
    return [p.to_dict() for p in lobby.players]
