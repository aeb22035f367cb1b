"""Domain exceptions for lobby and round rule violations.

Service modules raise subclasses of GameError; the Socket.IO handler
boundary (socketio_events.py) catches them, reports the message to the
acting connection only and leaves lobby state untouched.
"""


class GameError(Exception):
    """Base exception for anything a client did that the game rejects."""

    default_message = 'Invalid action.'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ---- Validation: illegal action for the current state/role ----

class ValidationError(GameError):
    default_message = 'Invalid action.'


class InvalidSubmission(ValidationError):
    default_message = 'Invalid submission.'


class InvalidCard(ValidationError):
    default_message = 'Invalid card submitted.'


class InvalidName(ValidationError):
    default_message = 'Player name is required.'


class InvalidSettings(ValidationError):
    default_message = 'Invalid lobby settings.'


class InvalidTransition(ValidationError):
    default_message = 'That action is not possible right now.'


class WrongState(ValidationError):
    default_message = 'That action is not allowed in the current game state.'


class GameInProgress(ValidationError):
    default_message = 'Game has already started.'


class NotHost(ValidationError):
    default_message = 'Only the host can do that.'


class NotCzar(ValidationError):
    default_message = 'Only the Card Czar can pick a winner.'


class CzarCannotSubmit(ValidationError):
    default_message = 'The Card Czar does not submit cards this round.'


class AlreadySubmitted(ValidationError):
    default_message = 'You have already submitted cards this round.'


class DuplicateName(ValidationError):
    default_message = 'Player name already taken in this lobby.'


class AlreadyInLobby(ValidationError):
    default_message = 'You are already in a lobby.'


# ---- Capacity: not enough room, players or cards ----

class CapacityError(GameError):
    default_message = 'Capacity exceeded.'


class LobbyFull(CapacityError):
    default_message = 'Lobby is full.'


class NotEnoughPlayers(CapacityError):
    default_message = 'Need at least 3 players to start.'


class NotEnoughCards(CapacityError):
    default_message = 'The selected packs do not have enough cards to play.'


# ---- Lookup failures ----

class NotFoundError(GameError):
    default_message = 'Not found.'


class LobbyNotFound(NotFoundError):
    default_message = 'Lobby not found.'


class PlayerNotFound(NotFoundError):
    default_message = 'Player not found in this lobby.'


class CatalogError(Exception):
    """The card catalog could not be loaded; fatal at startup."""
