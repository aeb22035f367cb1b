import logging

from cah import socketio
from cah.broadcast import announce_round
from cah.models import GameState
from cah.services.games.rounds import start_next_round

logger = logging.getLogger(__name__)


def schedule_round_advance(app, lobby) -> None:
    """Schedule the automatic move from roundOver to the next round.

    - No-ops in TESTING mode unless ENABLE_SCHEDULER_IN_TESTS is set
    - Never cancelled: the worker re-checks the lobby when it fires
    - Keyed by (code, round number) so a timer from an older round is ignored
    """
    if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        return

    delay = float(app.config.get('ROUND_OVER_DELAY_SEC', 5))
    code, round_number = lobby.code, lobby.round_number
    logger.info(f"[timer-set] lobby={code} round={round_number} delay={delay}s")

    def _worker():
        socketio.sleep(delay)
        with app.app_context():
            advance_round(app, lobby, round_number)

    socketio.start_background_task(_worker)


def advance_round(app, lobby, expected_round):
    """Timer callback body; returns True if it started a new round."""
    registry = app.extensions['cah_registry']
    code = lobby.code
    with registry.lock:
        # A closed lobby's code can be reused by a new one
        if registry.get(code) is not lobby:
            logger.info(f"[timer-abort] lobby={code} no longer exists")
            return False
        if lobby.state != GameState.ROUND_OVER or lobby.round_number != expected_round:
            logger.info(
                f"[timer-abort] lobby={code} expected_round={expected_round} "
                f"actual_state={lobby.state.value} actual_round={lobby.round_number}"
            )
            return False

        logger.info(f"[timer-fire] lobby={code} round={expected_round}")
        outcome = start_next_round(lobby, hand_size=int(app.config.get('MAX_HAND_SIZE', 10)))
        announce_round(lobby, outcome)
        return True
