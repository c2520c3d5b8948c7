from flask import Blueprint, current_app, jsonify

from dungeon_game.protocol import HiscoreData

dungeon = Blueprint('dungeon', __name__)


@dungeon.route('/state', methods=['GET'])
def get_state():
    """
    Returns the current level, the roster and the leaderboard in one snapshot.
    """
    return jsonify(current_app.extensions['dungeon_game'].state())


@dungeon.route('/hiscores', methods=['GET'])
def get_hiscores():
    leaderboard = current_app.extensions['dungeon_game'].leaderboard
    return jsonify(HiscoreData(leaderboard.snapshot()).to_payload())
