from flask import Blueprint, current_app, jsonify

rooms = Blueprint('rooms', __name__)


@rooms.route('/<string:room_code>/state', methods=['GET'])
def get_room_state(room_code):
    """Read-only snapshot of a live room."""
    registry = current_app.extensions['rekognize.registry']
    with registry.locked(room_code) as code:
        room = registry.get(code)
        if room is None:
            return jsonify({'error': 'Room not found'}), 404
        return jsonify(room.to_dict())
