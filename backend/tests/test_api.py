import random

import pytest

from conftest import register
from gamezone import db
from gamezone.models import Score, User
from gamezone.services.games.leaderboard import OBSTACLE_PLACEHOLDERS, TYPING_PLACEHOLDERS
from gamezone.services.games.resolvers import TYPING_PROMPTS


def user_row(test_client):
    return db.session.get(User, test_client.user['id'])


def test_register_login_logout(client):
    register(client, 'dana')
    assert client.get('/check_login').get_json()['username'] == 'dana'
    assert client.post('/logout').status_code == 200
    assert client.get('/check_login').status_code == 401
    res = client.post('/login', json={'username': 'dana', 'password': 'password'})
    assert res.status_code == 200
    assert client.post('/login', json={'username': 'dana', 'password': 'nope'}).status_code == 401


def test_game_routes_require_login(client):
    res = client.post('/api/games/guessing/start')
    assert res.status_code == 401
    assert res.get_json() == {'message': 'Authentication required'}


def test_guessing_start_counts_a_play(alice):
    res = alice.post('/api/games/guessing/start')
    assert res.get_json() == {'success': True}
    alice.post('/api/games/guessing/new')
    assert user_row(alice).games_played == 2


def test_guessing_seeded_example(alice, sessions):
    alice.post('/api/games/guessing/start')
    sessions.start(alice.user['id'], target_number=42)

    first = alice.post('/api/games/guessing/guess', json={'guess': 50}).get_json()
    assert first['message'] == 'too high'
    assert first['isCorrect'] is False
    assert first['attemptsLeft'] == 9

    second = alice.post('/api/games/guessing/guess', json={'guess': 42}).get_json()
    assert second['message'] == 'correct'
    assert second['isCorrect'] is True
    assert second['correctNumber'] == 42
    assert second['previousGuesses'] == [50, 42]

    scores = Score.query.filter_by(user_id=alice.user['id']).all()
    assert [s.value for s in scores] == [2]

    stats = alice.get('/api/games/guessing/stats').get_json()
    assert stats == {'gamesPlayed': 1, 'winRate': 33, 'bestScore': 2}


def test_guessing_soft_errors_come_back_as_200(alice, sessions):
    res = alice.post('/api/games/guessing/guess', json={'guess': 10})
    assert res.status_code == 200
    assert res.get_json() == {'error': 'No active guessing game found'}

    alice.post('/api/games/guessing/start')
    sessions.start(alice.user['id'], target_number=42)
    alice.post('/api/games/guessing/guess', json={'guess': 10})
    res = alice.post('/api/games/guessing/guess', json={'guess': 10})
    assert res.status_code == 200
    assert res.get_json() == {'error': 'You already tried this number'}
    assert sessions.get(alice.user['id']).attempts == 1

    alice.post('/api/games/guessing/guess', json={'guess': 42})
    res = alice.post('/api/games/guessing/guess', json={'guess': 43})
    assert res.get_json() == {'error': 'Game is already over'}


def test_guessing_loss_reveals_number_without_score(alice, sessions):
    alice.post('/api/games/guessing/start')
    sessions.start(alice.user['id'], target_number=100)
    for value in range(1, 11):
        data = alice.post('/api/games/guessing/guess', json={'guess': value}).get_json()
    assert data['attemptsLeft'] == 0
    assert data['isCorrect'] is False
    assert data['correctNumber'] == 100
    assert Score.query.count() == 0


@pytest.mark.parametrize('body', [
    {'guess': 0},
    {'guess': 101},
    {'guess': 4.5},
    {'guess': '42'},
    {'guess': True},
    {},
    None,
])
def test_invalid_guess_is_400(alice, body):
    alice.post('/api/games/guessing/start')
    res = alice.post('/api/games/guessing/guess', json=body)
    assert res.status_code == 400
    assert res.get_json() == {'message': 'Invalid guess'}


def test_spin_wheel_records_points(alice, monkeypatch):
    monkeypatch.setattr(random, 'random', lambda: 0.1)
    data = alice.post('/api/games/spinwheel/spin').get_json()
    assert data['prize'] == '100 Points'
    assert data['value'] == 100
    assert data['degrees'] == pytest.approx(1800 + 0.1 * 36)
    assert [s.value for s in Score.query.all()] == [100]
    assert user_row(alice).games_played == 1


def test_spin_wheel_try_again_records_nothing(alice, monkeypatch):
    monkeypatch.setattr(random, 'random', lambda: 0.6)
    data = alice.post('/api/games/spinwheel/spin').get_json()
    assert data['prize'] == 'Try Again'
    assert data['value'] == 0
    assert Score.query.count() == 0


def test_redlight_flow_and_leaderboard_example(alice, bob):
    alice.post('/api/games/redlight/start')
    res = alice.post('/api/games/redlight/score', json={'time': '12.3'})
    assert res.get_json() == {
        'success': True,
        'stats': {'attempts': 1, 'bestTime': '12.3', 'successRate': 17},
    }
    bob.post('/api/games/redlight/score', json={'time': '9.8'})

    board = alice.get('/api/leaderboard?gameType=redlight').get_json()
    assert [(e['rank'], e['player'], e['score']) for e in board] == [
        (1, 'bob', '9.8s'),
        (2, 'alice', '12.3s'),
    ]


def test_redlight_stats_empty(alice):
    assert alice.get('/api/games/redlight/stats').get_json() == {
        'attempts': 0, 'bestTime': '0.0', 'successRate': 0,
    }


@pytest.mark.parametrize('body', [{'time': 'fast'}, {'time': 9.8}, {'time': '-1'}, {}])
def test_redlight_invalid_time(alice, body):
    res = alice.post('/api/games/redlight/score', json=body)
    assert res.status_code == 400
    assert res.get_json() == {'message': 'Invalid score submission'}


def test_typeracer_start_returns_prompt(alice):
    data = alice.post('/api/games/typeracer/start').get_json()
    assert data['text'] in TYPING_PROMPTS
    assert user_row(alice).games_played == 1


def test_typeracer_leaderboard_placeholder_then_real(client, alice):
    assert client.get('/api/games/typeracer/leaderboard').get_json() == list(TYPING_PLACEHOLDERS)

    first = alice.post('/api/games/typeracer/score', json={'wpm': 72, 'accuracy': 96}).get_json()
    assert first['success'] is True
    assert first['isHighScore'] is True
    second = alice.post('/api/games/typeracer/score', json={'wpm': 50, 'accuracy': 90}).get_json()
    assert second['isHighScore'] is False

    board = client.get('/api/games/typeracer/leaderboard').get_json()
    assert board == [{'rank': 1, 'player': 'alice', 'wpm': 72, 'accuracy': 96}]


@pytest.mark.parametrize('body', [
    {'wpm': -1, 'accuracy': 90},
    {'wpm': 50, 'accuracy': 101},
    {'wpm': 50},
    {'accuracy': 90},
])
def test_typeracer_invalid_submission(alice, body):
    res = alice.post('/api/games/typeracer/score', json=body)
    assert res.status_code == 400
    assert Score.query.count() == 0


def test_bread_start_and_scores(alice, bob):
    start = alice.post('/api/games/bread/start').get_json()
    assert start['success'] is True
    assert len(start['obstacles']) == 5
    assert start['highScores'] == list(OBSTACLE_PLACEHOLDERS)

    res = alice.post('/api/games/bread/score', json={'score': 400}).get_json()
    assert res['isHighScore'] is True
    assert res['highScore'] == 400
    assert res['highScores'] == [{'player': 'alice', 'score': 400}]

    res = alice.post('/api/games/bread/score', json={'score': 200}).get_json()
    assert res['isHighScore'] is False
    assert res['highScore'] == 400

    bob.post('/api/games/bread/score', json={'score': 900})
    stats = alice.get('/api/games/bread/stats').get_json()
    assert stats['gamesPlayed'] == 2
    assert stats['highScore'] == 400
    assert stats['averageScore'] == 300
    assert stats['highScores'] == [
        {'player': 'bob', 'score': 900},
        {'player': 'alice', 'score': 400},
    ]


def test_bread_negative_score_rejected(alice):
    res = alice.post('/api/games/bread/score', json={'score': -5})
    assert res.status_code == 400


def test_leaderboard_all_and_unknown_filter(client, alice):
    alice.post('/api/games/redlight/score', json={'time': '5.5'})
    alice.post('/api/games/bread/score', json={'score': 10})
    board = client.get('/api/leaderboard').get_json()
    assert [e['rank'] for e in board] == [1, 2]
    assert client.get('/api/leaderboard?gameType=all').get_json() == board
    res = client.get('/api/leaderboard?gameType=pinball')
    assert res.status_code == 400


def test_admin_routes(flask_app, alice):
    assert alice.get('/api/admin/stats').status_code == 403

    admin = flask_app.test_client()
    register(admin, 'root')
    db.session.get(User, admin.get('/check_login').get_json()['id']).role = 'admin'
    db.session.commit()

    alice.post('/api/games/redlight/score', json={'time': '7.0'})
    stats = admin.get('/api/admin/stats').get_json()
    assert stats['totalUsers'] == 2
    assert stats['totalScores'] == 1
    assert stats['topGame'] == 'Red Light, Green Light'

    users = admin.get('/api/admin/users').get_json()
    assert {u['username'] for u in users} == {'alice', 'root'}

    assert admin.delete(f"/api/admin/users/{alice.user['id']}").status_code == 200
    assert Score.query.count() == 0
    assert admin.delete(f"/api/admin/users/{alice.user['id']}").status_code == 404
