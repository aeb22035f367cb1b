import pytest

from cah.exceptions import (
    AlreadySubmitted,
    CzarCannotSubmit,
    InvalidCard,
    InvalidSubmission,
    NotCzar,
    PlayerNotFound,
    WrongState,
)
from cah.models import BlackCard, GameState
from cah.services.games.scoring import select_winner, submit_cards
from helpers import submit_all, white_card_ids


def _snapshot(lobby):
    return [list(p.hand) for p in lobby.players], list(lobby.submissions)


def test_wrong_card_count_is_rejected_without_changes(started_lobby):
    lobby = started_lobby(3)
    assert lobby.current_black_card.pick == 1
    player = lobby.non_czar_players()[0]
    before = _snapshot(lobby)

    with pytest.raises(InvalidSubmission) as excinfo:
        submit_cards(lobby, player.id, [c.id for c in player.hand[:2]])

    assert 'requires 1 card(s)' in excinfo.value.message
    assert _snapshot(lobby) == before
    assert not player.has_submitted


@pytest.mark.parametrize('card_ids', [None, 'w_1', {'id': 'w_1'}])
def test_malformed_card_lists_are_rejected(started_lobby, card_ids):
    lobby = started_lobby(3)
    player = lobby.non_czar_players()[0]
    with pytest.raises(InvalidSubmission):
        submit_cards(lobby, player.id, card_ids)


def test_cards_outside_the_hand_are_rejected(started_lobby):
    lobby = started_lobby(3)
    player, other = lobby.non_czar_players()
    before = _snapshot(lobby)
    with pytest.raises(InvalidCard):
        submit_cards(lobby, player.id, [other.hand[0].id])
    with pytest.raises(InvalidCard):
        submit_cards(lobby, player.id, ['w_does_not_exist'])
    with pytest.raises(InvalidCard):
        submit_cards(lobby, player.id, [7])
    assert _snapshot(lobby) == before


def test_same_card_twice_is_rejected(started_lobby):
    lobby = started_lobby(3)
    lobby.current_black_card = BlackCard('b_x', '_ and _', 2, 0)
    player = lobby.non_czar_players()[0]
    with pytest.raises(InvalidCard):
        submit_cards(lobby, player.id, [player.hand[0].id, player.hand[0].id])
    assert len(player.hand) == 10


def test_czar_cannot_submit(started_lobby):
    lobby = started_lobby(3)
    czar = lobby.czar
    with pytest.raises(CzarCannotSubmit):
        submit_cards(lobby, czar.id, [czar.hand[0].id])


def test_duplicate_submission_is_rejected(started_lobby):
    lobby = started_lobby(4)
    player = lobby.non_czar_players()[0]
    submit_cards(lobby, player.id, [player.hand[0].id])
    with pytest.raises(AlreadySubmitted):
        submit_cards(lobby, player.id, [player.hand[0].id])
    assert len(lobby.submissions) == 1
    assert lobby.state == GameState.PLAYING


def test_submit_outside_playing_is_rejected(make_lobby):
    lobby = make_lobby(3)
    with pytest.raises(WrongState):
        submit_cards(lobby, lobby.players[1].id, [])


def test_submission_moves_cards_out_of_the_hand_in_order(started_lobby):
    lobby = started_lobby(3)
    lobby.current_black_card = BlackCard('b_x', '_ and _', 2, 0)
    player = lobby.non_czar_players()[0]
    chosen = [player.hand[4], player.hand[1]]

    started_judging = submit_cards(lobby, player.id, [c.id for c in chosen])

    assert not started_judging
    assert player.submission == chosen
    assert lobby.submissions[0].cards == chosen
    assert all(c not in player.hand for c in chosen)
    assert len(player.hand) == 8


def test_judging_starts_exactly_when_last_non_czar_submits(started_lobby):
    lobby = started_lobby(4)
    first, second, third = lobby.non_czar_players()
    assert not submit_cards(lobby, first.id, [first.hand[0].id])
    assert not submit_cards(lobby, second.id, [second.hand[0].id])
    assert lobby.state == GameState.PLAYING
    assert submit_cards(lobby, third.id, [third.hand[0].id])
    assert lobby.state == GameState.JUDGING
    assert {s.player_id for s in lobby.submissions} == {first.id, second.id, third.id}
    with pytest.raises(WrongState):
        submit_cards(lobby, third.id, [third.hand[0].id])


def test_card_ids_resolve_to_the_same_card_wherever_it_is(started_lobby):
    lobby = started_lobby(3)
    player = lobby.non_czar_players()[0]
    card = player.hand[0]
    submit_all(lobby)
    assert any(card in s.cards for s in lobby.submissions)
    select_winner(lobby, lobby.czar_id, player.id)
    matches = [c for c in lobby.white.discard_pile if c.id == card.id]
    assert matches == [card]


def test_select_winner_scores_and_discards(started_lobby):
    lobby = started_lobby(3)
    submit_all(lobby)
    winner = lobby.non_czar_players()[1]
    submitted = [c for s in lobby.submissions for c in s.cards]
    winning_text = winner.submission[0].text
    prompt_text = lobby.current_black_card.text

    result = select_winner(lobby, lobby.czar_id, winner.id)

    assert not result.game_over
    assert winner.score == 1
    assert sum(p.score for p in lobby.players) == 1
    assert lobby.state == GameState.ROUND_OVER
    assert lobby.round_winner_info.to_dict() == {
        'winnerName': winner.name,
        'winningCardsText': [winning_text],
        'blackCardText': prompt_text,
    }
    assert all(c in lobby.white.discard_pile for c in submitted)
    assert lobby.submissions == []
    assert len(set(white_card_ids(lobby))) == 40


def test_select_winner_reaching_threshold_ends_game(started_lobby):
    lobby = started_lobby(3, {'scoreToWin': 2})
    winner = lobby.non_czar_players()[0]
    winner.score = 1
    submit_all(lobby)

    result = select_winner(lobby, lobby.czar_id, winner.id)

    assert result.game_over
    assert result.outcome.winner_name == winner.name
    assert winner.score == 2
    assert lobby.state == GameState.GAME_OVER


def test_only_the_czar_can_pick(started_lobby):
    lobby = started_lobby(3)
    submit_all(lobby)
    player, other = lobby.non_czar_players()
    with pytest.raises(NotCzar):
        select_winner(lobby, player.id, other.id)
    with pytest.raises(PlayerNotFound):
        select_winner(lobby, lobby.czar_id, lobby.czar_id)
    with pytest.raises(PlayerNotFound):
        select_winner(lobby, 'stranger', other.id)
    assert lobby.state == GameState.JUDGING
    assert all(p.score == 0 for p in lobby.players)


def test_select_winner_outside_judging(started_lobby):
    lobby = started_lobby(3)
    with pytest.raises(WrongState):
        select_winner(lobby, lobby.czar_id, lobby.players[1].id)
