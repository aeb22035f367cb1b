from cah.models import GameState
from cah.services.games.presence import depart
from cah.services.games.rounds import start_next_round
from cah.services.games.scoring import select_winner, submit_cards
from helpers import submit_all, white_card_ids


def test_last_player_leaving_tears_the_lobby_down(make_lobby, lobby_registry):
    lobby = make_lobby(1)
    departure = depart(lobby_registry, lobby, lobby.host_id)
    assert departure.lobby_closed
    assert lobby_registry.get(lobby.code) is None


def test_unknown_player_is_a_no_op(make_lobby, lobby_registry):
    lobby = make_lobby(2)
    assert depart(lobby_registry, lobby, 'ghost') is None
    assert len(lobby.players) == 2


def test_host_migrates_to_first_remaining_member(make_lobby, lobby_registry):
    lobby = make_lobby(3)
    old_host = lobby.host
    departure = depart(lobby_registry, lobby, old_host.id)
    assert departure.new_host is lobby.players[0]
    assert lobby.host_id == lobby.players[0].id
    assert lobby.state == GameState.WAITING
    assert lobby_registry.lobby_for_sid(old_host.sid) == (None, None)


def test_czar_leaving_starts_a_fresh_round(started_lobby, lobby_registry):
    lobby = started_lobby(4)
    czar = lobby.czar
    expected_czar = lobby.players[1]
    previous_prompt = lobby.current_black_card
    first = lobby.non_czar_players()[0]
    submit_cards(lobby, first.id, [first.hand[0].id])

    departure = depart(lobby_registry, lobby, czar.id)

    assert departure.was_czar
    assert not departure.round.game_over
    assert lobby.state == GameState.PLAYING
    assert lobby.round_number == 2
    assert lobby.czar_id == expected_czar.id
    assert previous_prompt in lobby.black.discard_pile
    assert all(len(p.hand) == 10 for p in lobby.players)
    assert all(not p.has_submitted for p in lobby.players)
    assert len(set(white_card_ids(lobby))) == 40


def test_czar_leaving_from_the_end_wraps_around(started_lobby, lobby_registry):
    lobby = started_lobby(4)
    for _ in range(3):
        start_next_round(lobby)
    assert lobby.czar_id == lobby.players[3].id

    depart(lobby_registry, lobby, lobby.czar_id)

    assert lobby.czar_id == lobby.players[0].id


def test_dropping_below_three_ends_the_game(started_lobby, lobby_registry):
    lobby = started_lobby(3)
    leaver = lobby.non_czar_players()[0]
    departure = depart(lobby_registry, lobby, leaver.id)
    assert departure.round.game_over
    assert departure.round.message == 'Not enough players to continue.'
    assert lobby.state == GameState.GAME_OVER


def test_leaving_after_game_over_changes_nothing_else(started_lobby, lobby_registry):
    lobby = started_lobby(3)
    lobby.state = GameState.GAME_OVER
    departure = depart(lobby_registry, lobby, lobby.czar_id)
    assert departure.round is None
    assert lobby.state == GameState.GAME_OVER


def test_leaver_cards_return_to_the_discard_pile(started_lobby, lobby_registry):
    lobby = started_lobby(4)
    leaver = lobby.non_czar_players()[0]
    hand = list(leaver.hand)
    submit_cards(lobby, leaver.id, [hand[0].id])

    depart(lobby_registry, lobby, leaver.id)

    assert all(c in lobby.white.discard_pile for c in hand)
    assert lobby.submissions == []
    assert len(set(white_card_ids(lobby))) == 40


def test_last_holdout_leaving_moves_round_to_judging(started_lobby, lobby_registry):
    lobby = started_lobby(4)
    holdout = lobby.non_czar_players()[2]
    submit_all(lobby, skip={holdout.id})
    assert lobby.state == GameState.PLAYING

    departure = depart(lobby_registry, lobby, holdout.id)

    assert departure.judging_started
    assert lobby.state == GameState.JUDGING
    assert len(lobby.submissions) == 2


def test_non_czar_leaving_during_judging_keeps_judging(started_lobby, lobby_registry):
    lobby = started_lobby(4)
    submit_all(lobby)
    leaver = lobby.non_czar_players()[0]
    depart(lobby_registry, lobby, leaver.id)
    assert lobby.state == GameState.JUDGING
    assert leaver.id not in {s.player_id for s in lobby.submissions}
    remaining = lobby.submissions[0].player_id
    select_winner(lobby, lobby.czar_id, remaining)
    assert lobby.state == GameState.ROUND_OVER
