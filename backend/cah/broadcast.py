"""Outbound Socket.IO notifications.

Uses ``socketio.emit`` rather than the request-bound ``emit`` so the same
helpers work from event handlers and from background timer tasks.
"""
from cah import socketio
from cah.projection import hand_payload, public_state, scoreboard

NAMESPACE = '/ws'


def room_name(code):
    return f"lobby:{code}"


def broadcast_lobby_state(lobby):
    socketio.emit('lobbyUpdate', public_state(lobby), to=room_name(lobby.code), namespace=NAMESPACE)


def send_hand(player):
    socketio.emit('handUpdate', hand_payload(player), to=player.sid, namespace=NAMESPACE)


def send_hands(lobby):
    for player in lobby.players:
        send_hand(player)


def send_message(lobby, message):
    socketio.emit('gameMessage', message, to=room_name(lobby.code), namespace=NAMESPACE)


def send_error(sid, message):
    socketio.emit('gameError', message, to=sid, namespace=NAMESPACE)


def announce_game_over(lobby, outcome):
    payload = {'players': scoreboard(lobby)}
    if outcome.winner_name is not None:
        payload['winnerName'] = outcome.winner_name
    if outcome.message is not None:
        payload['message'] = outcome.message
    socketio.emit('gameOver', payload, to=room_name(lobby.code), namespace=NAMESPACE)


def announce_round(lobby, outcome):
    """Tell everyone about a round that just started (or the game ending instead)."""
    if outcome.game_over:
        announce_game_over(lobby, outcome)
    else:
        send_hands(lobby)
    broadcast_lobby_state(lobby)
