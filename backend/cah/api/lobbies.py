from flask import Blueprint, jsonify

from cah import catalog, registry
from cah.projection import public_state

lobbies = Blueprint('lobbies', __name__)


@lobbies.route('/packs', methods=['GET'])
def get_packs():
    """Returns the card packs a lobby can be configured with."""
    return jsonify(catalog.list_packs()), 200


@lobbies.route('/lobbies', methods=['GET'])
def get_public_lobbies():
    """Returns joinable public lobbies, or 404 when listing is switched off."""
    if not registry.rooms_functionality:
        return jsonify({'error': 'Public lobbies are disabled'}), 404
    with registry.lock:
        listed = registry.public_lobbies(catalog)
    return jsonify(listed), 200


@lobbies.route('/lobbies/<string:lobby_code>', methods=['GET'])
def get_lobby(lobby_code):
    """Returns the public state of one lobby."""
    with registry.lock:
        lobby = registry.get(lobby_code)
        if lobby is None:
            return jsonify({'error': 'Lobby not found'}), 404
        return jsonify(public_state(lobby)), 200
