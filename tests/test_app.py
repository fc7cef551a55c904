import pytest

from starbattle_hints import app as app_module
from starbattle_hints.errors import DeductionContradiction


@pytest.fixture
def client():
    app_module.app.config['TESTING'] = True
    with app_module.app.test_client() as client:
        yield client


def payload(board, **extra):
    data = {'regionGrid': board.regions, 'playerGrid': board.grid, 'starsPerRegion': board.stars_per_unit}
    data.update(extra)
    return data


def test_hint(client, make_board):
    response = client.post('/api/hint', json=payload(make_board(5, stars=[(2, 2)])))
    assert response.status_code == 200
    hint = response.get_json()['hint']
    assert hint['kind'] == 'place-cross'
    assert hint['technique'] == 'trivial-marks'
    assert hint['resultCells'] == [[2, 0], [2, 1], [2, 3], [2, 4]]


def test_hint_on_solved_board_is_null(client, solved5):
    response = client.post('/api/hint', json=payload(solved5))
    assert response.status_code == 200
    assert response.get_json() == {'hint': None}


@pytest.mark.parametrize("route", ['/api/hint', '/api/solve_steps', '/api/validate', '/api/count'])
def test_missing_fields(client, route):
    assert client.post(route, json={'regionGrid': [[1]]}).status_code == 400
    assert client.post(route, data="not json").status_code == 400


def test_malformed_board(client):
    response = client.post('/api/hint', json={'regionGrid': [[1, 1], [1]], 'starsPerRegion': 1})
    assert response.status_code == 400
    assert 'error' in response.get_json()


def test_contradiction_is_a_conflict(client, monkeypatch, board5):
    def contradict(board, config=None):
        raise DeductionContradiction("R1C1 cannot be both")

    monkeypatch.setattr(app_module, 'find_next_hint', contradict)
    response = client.post('/api/hint', json=payload(board5))
    assert response.status_code == 409
    assert response.get_json()['error'] == "R1C1 cannot be both"


def test_unexpected_errors_are_hidden(client, monkeypatch, board5):
    def explode(board, config=None):
        raise RuntimeError("secret detail")

    monkeypatch.setattr(app_module, 'find_next_hint', explode)
    response = client.post('/api/hint', json=payload(board5))
    assert response.status_code == 500
    assert response.get_json() == {'error': 'An internal error occurred'}


def test_solve_steps(client, board5):
    response = client.post('/api/solve_steps', json=payload(board5))
    assert response.status_code == 200
    body = response.get_json()
    assert body['steps']
    assert all(step['kind'] in ('place-star', 'place-cross') for step in body['steps'])
    assert isinstance(body['solved'], bool)


def test_validate(client, make_board, solved5):
    response = client.post('/api/validate', json=payload(make_board(5, stars=[(0, 0), (0, 3)])))
    assert response.get_json()['violations']
    assert client.post('/api/validate', json=payload(solved5)).get_json() == {'violations': []}


def test_count(client, solved5):
    response = client.post('/api/count', json=payload(solved5))
    assert response.get_json() == {'count': 1, 'timedOut': False}
