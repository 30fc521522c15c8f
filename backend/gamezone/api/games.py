from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user

from gamezone.api.validation import require_decimal_string, require_number
from gamezone.services.games import get_hub, get_session_store, ledger, resolvers
from gamezone.services.games.broadcast import winner_announcement
from gamezone.services.games.leaderboard import obstacle_leaderboard, typing_leaderboard


games = Blueprint('games', __name__)


def _user():
    return current_user._get_current_object()


def _announce(game_type: str, winner=None) -> None:
    """Push the refreshed leaderboard for ``game_type`` to every viewer."""
    get_hub().broadcast(game_type, winner)


# ---- Guessing game ----

@games.route('/guessing/start', methods=['POST'])
@games.route('/guessing/new', methods=['POST'])
@login_required
def start_guessing():
    user = _user()
    get_session_store().start(user.id)
    ledger.increment_games_played(user)
    current_app.logger.info(f"[guessing-start] user={user.id}")
    return jsonify({'success': True})


@games.route('/guessing/guess', methods=['POST'])
@login_required
def make_guess():
    cfg = current_app.config
    guess = require_number(
        request.get_json(silent=True), 'guess', 'Invalid guess',
        minimum=cfg.get('GUESS_MIN', 1), maximum=cfg.get('GUESS_MAX', 100), integer=True,
    )
    user = _user()
    outcome = get_session_store().guess(
        user.id, guess,
        on_win=lambda attempts: ledger.record_score(user, 'guessing', attempts),
    )
    if outcome.score is not None:
        current_app.logger.info(f"[guessing-win] user={user.id} attempts={outcome.score}")
        _announce('guessing')
    return jsonify(outcome.to_dict())


@games.route('/guessing/stats', methods=['GET'])
@login_required
def guessing_stats():
    return jsonify(resolvers.guessing_stats(_user()))


# ---- Spin wheel ----

@games.route('/spinwheel/spin', methods=['POST'])
@login_required
def spin_wheel():
    result = resolvers.spin_wheel(_user())
    if result['value'] > 0:
        _announce('spinwheel')
    return jsonify(result)


# ---- Red light, green light ----

@games.route('/redlight/start', methods=['POST'])
@login_required
def start_redlight():
    ledger.increment_games_played(_user())
    return jsonify({'success': True})


@games.route('/redlight/score', methods=['POST'])
@login_required
def submit_redlight_score():
    seconds = require_decimal_string(
        request.get_json(silent=True), 'time', 'Invalid score submission', minimum=0,
    )
    result = resolvers.submit_redlight(_user(), seconds)
    _announce('redlight')
    return jsonify(result)


@games.route('/redlight/stats', methods=['GET'])
@login_required
def redlight_stats():
    return jsonify(resolvers.redlight_stats(_user()))


# ---- Type racer ----

@games.route('/typeracer/start', methods=['POST'])
@login_required
def start_typeracer():
    ledger.increment_games_played(_user())
    return jsonify({'text': resolvers.pick_prompt()})


@games.route('/typeracer/score', methods=['POST'])
@login_required
def submit_typeracer_score():
    data = request.get_json(silent=True)
    wpm = require_number(data, 'wpm', 'Invalid score submission', minimum=0)
    accuracy = require_number(data, 'accuracy', 'Invalid score submission', minimum=0, maximum=100)
    user = _user()
    result = resolvers.submit_typeracer(user, wpm, accuracy)
    winner = None
    if result['isHighScore']:
        score_text = ledger.format_score('typeracer', wpm)
        winner = winner_announcement(
            user, 'typeracer', score_text,
            f"{user.username} just achieved a new high score of {score_text} "
            f"with {accuracy}% accuracy in Type Racer!",
        )
    _announce('typeracer', winner)
    return jsonify(result)


@games.route('/typeracer/leaderboard', methods=['GET'])
def typeracer_leaderboard():
    return jsonify(typing_leaderboard())


# ---- Bread (obstacle) game ----

@games.route('/bread/start', methods=['POST'])
@login_required
def start_bread():
    cfg = current_app.config
    ledger.increment_games_played(_user())
    return jsonify({
        'success': True,
        'obstacles': resolvers.generate_obstacles(cfg.get('OBSTACLE_COUNT', 5)),
        'highScores': obstacle_leaderboard(cfg.get('OBSTACLE_TOP_N', 5)),
    })


@games.route('/bread/score', methods=['POST'])
@login_required
def submit_bread_score():
    score = require_number(request.get_json(silent=True), 'score', 'Invalid score submission', minimum=0)
    user = _user()
    result = resolvers.submit_bread(user, score, top_n=current_app.config.get('OBSTACLE_TOP_N', 5))
    winner = None
    if result['isHighScore']:
        winner = winner_announcement(
            user, 'cse17', ledger.format_score('cse17', score),
            f"{user.username} just achieved a new high score of {score} in the Bread Game!",
        )
    _announce('cse17', winner)
    return jsonify(result)


@games.route('/bread/stats', methods=['GET'])
@login_required
def bread_stats():
    return jsonify(resolvers.bread_stats(_user(), top_n=current_app.config.get('OBSTACLE_TOP_N', 5)))
