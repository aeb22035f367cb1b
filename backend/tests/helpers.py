"""Shared assertions and shortcuts for service-level tests."""
from cah.services.games.scoring import submit_cards


def white_card_ids(lobby):
    """Every white card id the lobby holds, wherever it currently sits."""
    ids = [c.id for c in lobby.white.draw_pile]
    ids += [c.id for c in lobby.white.discard_pile]
    for player in lobby.players:
        ids += [c.id for c in player.hand]
    for submission in lobby.submissions:
        ids += [c.id for c in submission.cards]
    return ids


def submit_all(lobby, skip=()):
    """Every non-czar (except those in `skip`) plays the first card(s) of their hand."""
    pick = lobby.current_black_card.pick
    for player in list(lobby.non_czar_players()):
        if player.id in skip:
            continue
        submit_cards(lobby, player.id, [c.id for c in player.hand[:pick]])
