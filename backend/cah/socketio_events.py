from functools import wraps

from flask import current_app, request
from flask_socketio import emit, join_room, leave_room

from cah import catalog, registry, socketio
from cah.broadcast import (
    NAMESPACE,
    announce_game_over,
    announce_round,
    broadcast_lobby_state,
    room_name,
    send_error,
    send_hand,
    send_message,
)
from cah.exceptions import GameError, ValidationError
from cah.services.games.presence import depart
from cah.services.games.rounds import request_next_round, start_game
from cah.services.games.scheduler import schedule_round_advance
from cah.services.games.scoring import select_winner, submit_cards


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _payload(data) -> dict:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Malformed request.')
    return data


def _hand_size() -> int:
    return int(current_app.config.get('MAX_HAND_SIZE', 10))


def _guarded(handler, report_errors=True):
    """Run a handler under the registry lock and turn rule violations into
    a failed ack (plus a gameError to the sender for in-game actions)."""

    @wraps(handler)
    def wrapper(*args):
        with registry.lock:
            try:
                return handler(*args)
            except GameError as exc:
                current_app.logger.info(f"[rejected] event={handler.__name__} sid={_get_sid()} reason={exc.message!r}")
                if report_errors:
                    send_error(_get_sid(), exc.message)
                return {'success': False, 'message': exc.message}

    return wrapper


def handle_connect(auth=None):
    emit('serverConfig', {
        'allowSameNames': registry.allow_same_names,
        'roomsFunctionality': registry.rooms_functionality,
    })


def handle_disconnect(reason=None):
    sid = _get_sid()
    lobby, player = registry.lobby_for_sid(sid)
    current_app.logger.info(f"[disconnect] sid={sid} lobby={lobby.code if lobby else None}")
    if lobby is None or player is None:
        return
    _depart(lobby, player)


def _depart(lobby, player):
    departure = depart(
        registry,
        lobby,
        player.id,
        min_players=registry.min_players,
        hand_size=_hand_size(),
    )
    if departure is None or departure.lobby_closed:
        return
    if departure.was_czar and departure.round and not departure.round.game_over:
        send_message(lobby, f"{player.name} (Czar) disconnected. Starting new round.")
    if departure.round is not None:
        announce_round(lobby, departure.round)
    else:
        broadcast_lobby_state(lobby)


def handle_leave_lobby(data):
    data = _payload(data)
    lobby, player = registry.member(data.get('lobbyCode'), _get_sid())
    leave_room(room_name(lobby.code))
    _depart(lobby, player)
    return {'success': True}


def handle_get_pack_list(data=None):
    return catalog.list_packs()


def handle_create_lobby(data):
    data = _payload(data)
    lobby, player = registry.create_lobby(_get_sid(), data.get('playerName'), data.get('settings'), catalog)
    join_room(room_name(lobby.code))
    broadcast_lobby_state(lobby)
    send_hand(player)
    return {'success': True, 'lobbyCode': lobby.code, 'playerId': player.id}


def handle_join_lobby(data):
    data = _payload(data)
    lobby, player = registry.join_lobby(_get_sid(), data.get('lobbyCode'), data.get('playerName'))
    join_room(room_name(lobby.code))
    broadcast_lobby_state(lobby)
    send_hand(player)
    return {
        'success': True,
        'lobbyCode': lobby.code,
        'playerId': player.id,
        'settings': lobby.settings.to_dict(),
        'packList': catalog.list_packs(),
    }


def handle_get_public_lobbies(data=None):
    if not registry.rooms_functionality:
        return []
    return registry.public_lobbies(catalog)


def handle_update_settings(data):
    data = _payload(data)
    lobby, player = registry.member(data.get('lobbyCode'), _get_sid())
    registry.update_settings(lobby, player.id, data.get('settings'), catalog)
    broadcast_lobby_state(lobby)
    return {'success': True}


def handle_start_game(data):
    data = _payload(data)
    lobby, player = registry.member(data.get('lobbyCode'), _get_sid())
    outcome = start_game(lobby, catalog, player.id, min_players=registry.min_players, hand_size=_hand_size())
    current_app.logger.info(f"[start] lobby={lobby.code} by={player.id}")
    announce_round(lobby, outcome)
    return {'success': True}


def handle_submit_cards(data):
    data = _payload(data)
    lobby, player = registry.member(data.get('lobbyCode'), _get_sid())
    submit_cards(lobby, player.id, data.get('cardIds'))
    send_hand(player)
    broadcast_lobby_state(lobby)
    return {'success': True}


def handle_select_winner(data):
    data = _payload(data)
    lobby, player = registry.member(data.get('lobbyCode'), _get_sid())
    result = select_winner(lobby, player.id, data.get('winningPlayerId'))
    if result.game_over:
        announce_game_over(lobby, result.outcome)
        broadcast_lobby_state(lobby)
    else:
        broadcast_lobby_state(lobby)
        schedule_round_advance(current_app._get_current_object(), lobby)
    return {'success': True}


def handle_request_next_round(data):
    data = _payload(data)
    lobby, player = registry.member(data.get('lobbyCode'), _get_sid())
    outcome = request_next_round(lobby, player.id, hand_size=_hand_size())
    announce_round(lobby, outcome)
    return {'success': True}


HANDLERS = (
    ('getPackList', handle_get_pack_list, False),
    ('createLobby', handle_create_lobby, False),
    ('joinLobby', handle_join_lobby, False),
    ('getPublicLobbies', handle_get_public_lobbies, False),
    ('updateSettings', handle_update_settings, True),
    ('startGame', handle_start_game, True),
    ('submitCards', handle_submit_cards, True),
    ('selectWinner', handle_select_winner, True),
    ('requestNextRound', handle_request_next_round, True),
    ('leaveLobby', handle_leave_lobby, True),
)


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on the '/ws' namespace."""
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('disconnect', _guarded(handle_disconnect, report_errors=False), namespace=NAMESPACE)
    for event, handler, report_errors in HANDLERS:
        socketio.on_event(event, _guarded(handler, report_errors), namespace=NAMESPACE)
