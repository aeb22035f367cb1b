from cah.exceptions import DuplicateName, GameInProgress, InvalidName, LobbyFull
from cah.models import GameState, Player

MAX_NAME_LENGTH = 32


def clean_name(name) -> str:
    if not isinstance(name, str) or not name.strip():
        raise InvalidName()
    return name.strip()[:MAX_NAME_LENGTH]


def join(lobby, sid, name, allow_same_names=False) -> Player:
    """Add a new player to a lobby that has not started yet."""
    name = clean_name(name)
    if len(lobby.players) >= lobby.settings.max_players:
        raise LobbyFull()
    if lobby.state != GameState.WAITING:
        raise GameInProgress()
    if not allow_same_names and any(p.name.lower() == name.lower() for p in lobby.players):
        raise DuplicateName()

    player = Player(sid, name)
    lobby.players.append(player)
    if lobby.host_id is None:
        lobby.host_id = player.id
    return player


def leave(lobby, player_id):
    """Remove a player; returns (player, roster index) or (None, None)."""
    for index, player in enumerate(lobby.players):
        if player.id == player_id:
            del lobby.players[index]
            return player, index
    return None, None


def deal(lobby, player, hand_size) -> int:
    """Top a hand up to hand_size from the white supply; returns cards dealt."""
    needed = hand_size - len(player.hand)
    if needed <= 0:
        return 0
    drawn = lobby.white.draw(needed)
    player.hand.extend(drawn)
    return len(drawn)
