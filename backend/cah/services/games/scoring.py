import logging

from cah.exceptions import (
    AlreadySubmitted,
    CzarCannotSubmit,
    InvalidCard,
    InvalidSubmission,
    NotCzar,
    PlayerNotFound,
)
from cah.models import GameState, RoundWinnerInfo, Submission
from cah.services.games.rounds import discard_round, end_game, require_state, transition

logger = logging.getLogger(__name__)


class RoundResult:
    def __init__(self, winner, winner_info, outcome=None):
        self.winner = winner
        self.winner_info = winner_info
        # Set only when this win ended the game
        self.outcome = outcome

    @property
    def game_over(self):
        return self.outcome is not None


def submit_cards(lobby, player_id, card_ids) -> bool:
    """Record a player's answer for the current prompt.

    Validation happens before anything is touched, so a rejected submission
    leaves the hand and the round untouched. Returns True when this was the
    last outstanding submission and the round moved to judging.
    """
    require_state(lobby, GameState.PLAYING)
    player = lobby.find_player(player_id)
    if player is None:
        raise PlayerNotFound()
    if player.id == lobby.czar_id:
        raise CzarCannotSubmit()
    if player.has_submitted:
        raise AlreadySubmitted()

    pick = lobby.current_black_card.pick
    if not isinstance(card_ids, (list, tuple)) or len(card_ids) != pick:
        raise InvalidSubmission(f"Invalid submission. This card requires {pick} card(s).")

    by_id = {card.id: card for card in player.hand}
    if any(not isinstance(cid, str) or cid not in by_id for cid in card_ids):
        raise InvalidCard()
    if len(set(card_ids)) != len(card_ids):
        raise InvalidCard('The same card cannot be played twice.')

    cards = [by_id[cid] for cid in card_ids]
    chosen = set(card_ids)
    player.hand = [card for card in player.hand if card.id not in chosen]
    player.submission = cards
    lobby.submissions.append(Submission(player.id, player.name, cards))
    logger.debug(f"[submit] lobby={lobby.code} player={player.id} cards={list(card_ids)}")

    return maybe_start_judging(lobby)


def maybe_start_judging(lobby) -> bool:
    """Move to judging once every non-czar member has an answer in."""
    if lobby.state != GameState.PLAYING or not lobby.submissions:
        return False
    if len(lobby.submissions) != len(lobby.non_czar_players()):
        return False
    transition(lobby, GameState.JUDGING)
    # Display order must not follow submission order
    lobby.rng.shuffle(lobby.submissions)
    logger.info(f"[judging] lobby={lobby.code} round={lobby.round_number} submissions={len(lobby.submissions)}")
    return True


def select_winner(lobby, czar_id, winning_player_id) -> RoundResult:
    """Apply scoring for the current round.

    +1 to the author of the chosen submission; every submitted card goes to
    the discard pile whoever played it.
    """
    require_state(lobby, GameState.JUDGING)
    if lobby.find_player(czar_id) is None:
        raise PlayerNotFound()
    if czar_id != lobby.czar_id:
        raise NotCzar()

    winning = next((s for s in lobby.submissions if s.player_id == winning_player_id), None)
    winner = lobby.find_player(winning_player_id)
    if winning is None or winner is None:
        raise PlayerNotFound('That player has no submission this round.')

    winner.score += 1
    info = RoundWinnerInfo(winner.name, [c.text for c in winning.cards], lobby.current_black_card.text)
    lobby.round_winner_info = info
    discard_round(lobby)
    logger.info(f"[round-won] lobby={lobby.code} round={lobby.round_number} winner={winner.id} score={winner.score}")

    if winner.score >= lobby.settings.score_to_win:
        return RoundResult(winner, info, end_game(lobby, winner_name=winner.name))
    transition(lobby, GameState.ROUND_OVER)
    return RoundResult(winner, info)
