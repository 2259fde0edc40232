import os

from flask import Blueprint, current_app, jsonify, send_from_directory

main = Blueprint('main', __name__)


def _coordinator():
    return current_app.extensions['sessions']


@main.route('/health')
def health():
    return jsonify({'status': 'ok', 'rooms': _coordinator().room_count()})


@main.route('/api/rooms/<string:room_id>')
def get_room(room_id):
    # Lets a share link check the room before opening a socket
    state = _coordinator().snapshot(room_id)
    if state is None:
        return jsonify({'error': 'Game not found'}), 404
    return jsonify(state)


@main.route('/', defaults={'path': ''})
@main.route('/<path:path>')
def index(path):
    """Serve the single page client; unknown paths fall back to index.html."""
    static_dir = current_app.static_folder
    if path and static_dir and os.path.isfile(os.path.join(static_dir, path)):
        return send_from_directory(static_dir, path)
    if static_dir and os.path.isfile(os.path.join(static_dir, 'index.html')):
        return send_from_directory(static_dir, 'index.html')
    return jsonify({'message': 'Welcome to the Tap Race server!'})
