# --- File: starbattle_hints/app.py ---
import logging

from flask import Flask, jsonify, request
from flask_cors import CORS

from starbattle_hints.board import Board
from starbattle_hints.config import EngineConfig
from starbattle_hints.constants import DEFAULT_ORACLE_TIMEOUT_MS
from starbattle_hints.errors import DeductionContradiction, InvalidBoardError
from starbattle_hints.runner import find_next_hint, solve_step_by_step
from starbattle_hints.validation import validate_state
from starbattle_hints.z3_solver import Z3SolutionCounter

app = Flask(__name__)
CORS(app)


def _board_from_request(data):
    region_grid, player_grid, stars_per_region = data.get('regionGrid'), data.get('playerGrid'), data.get('starsPerRegion')
    if not region_grid or stars_per_region is None:
        return None
    return Board(region_grid, stars_per_region, player_grid)


def _config_from_request(data):
    oracle = Z3SolutionCounter() if data.get('useOracle') else None
    return EngineConfig(oracle=oracle, oracle_timeout_ms=data.get('timeoutMs', DEFAULT_ORACLE_TIMEOUT_MS))


@app.route('/api/hint', methods=['POST'])
def get_hint():
    data = request.get_json(silent=True) or {}
    try:
        board = _board_from_request(data)
        if board is None:
            return jsonify({'error': 'Missing regionGrid or starsPerRegion in request'}), 400
        hint = find_next_hint(board, _config_from_request(data))
        return jsonify({'hint': hint.to_dict() if hint else None})
    except InvalidBoardError as e:
        return jsonify({'error': str(e)}), 400
    except DeductionContradiction as e:
        logging.warning(f"Contradiction in /api/hint: {e}")
        return jsonify({'error': str(e)}), 409
    except Exception as e:
        logging.error(f"Error in /api/hint: {e}")
        return jsonify({'error': 'An internal error occurred'}), 500


@app.route('/api/solve_steps', methods=['POST'])
def get_solve_steps():
    data = request.get_json(silent=True) or {}
    try:
        board = _board_from_request(data)
        if board is None:
            return jsonify({'error': 'Missing regionGrid or starsPerRegion in request'}), 400
        steps, final_board = solve_step_by_step(board, _config_from_request(data))
        return jsonify({'steps': [hint.to_dict() for hint in steps], 'solved': final_board.is_solved()})
    except InvalidBoardError as e:
        return jsonify({'error': str(e)}), 400
    except DeductionContradiction as e:
        logging.warning(f"Contradiction in /api/solve_steps: {e}")
        return jsonify({'error': str(e)}), 409
    except Exception as e:
        logging.error(f"Error in /api/solve_steps: {e}")
        return jsonify({'error': 'An internal error occurred'}), 500


@app.route('/api/validate', methods=['POST'])
def validate_board():
    data = request.get_json(silent=True) or {}
    try:
        board = _board_from_request(data)
        if board is None:
            return jsonify({'error': 'Missing regionGrid or starsPerRegion in request'}), 400
        return jsonify({'violations': validate_state(board)})
    except InvalidBoardError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logging.error(f"Error in /api/validate: {e}")
        return jsonify({'error': 'An internal error occurred'}), 500


@app.route('/api/count', methods=['POST'])
def count_solutions():
    data = request.get_json(silent=True) or {}
    try:
        board = _board_from_request(data)
        if board is None:
            return jsonify({'error': 'Missing regionGrid or starsPerRegion in request'}), 400
        outcome = Z3SolutionCounter().count_solutions(
            board, max_count=data.get('maxCount', 2), timeout_ms=data.get('timeoutMs', DEFAULT_ORACLE_TIMEOUT_MS))
        return jsonify({'count': outcome.count, 'timedOut': outcome.timed_out})
    except InvalidBoardError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logging.error(f"Error in /api/count: {e}")
        return jsonify({'error': 'An internal error occurred'}), 500
