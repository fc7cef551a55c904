"""**********************************************************************************
 * Title: puzzle_handler.py
 * -------------------------------------------------------------------------------
 * Description:
 * Turns puzzle strings into boards the hint engine can work on, and boards
 * back into strings.
 *
 *   SBN       <size code><stars><flag><region borders>[<marks>]
 *             The flag is 'e' when player marks follow the borders.
 *   Web task  comma separated region ids in reading order; the star count
 *             comes from the size table. Marks may be glued to the end.
 *
 * Anything after a '~' is ignored.
 **********************************************************************************"""

import re
import math
import logging
from collections import deque

from starbattle_hints.board import Board
from starbattle_hints.constants import (
    PUZZLE_DEFINITIONS, STATE_EMPTY, STATE_STAR, STATE_CROSS,
    SBN_CHAR_TO_INT, SBN_INT_TO_CHAR, SBN_CODE_TO_DIM_MAP, DIM_TO_SBN_CODE_MAP
)
from starbattle_hints.errors import PuzzleFormatError

# Mark digits as written in SBN; they differ from the engine's cell states.
SBN_TO_STATE = {0: STATE_EMPTY, 1: STATE_CROSS, 2: STATE_STAR}
STATE_TO_SBN = {state: digit for digit, state in SBN_TO_STATE.items()}

SBN_HEADER_LENGTH = 4
MARKS_PER_CHAR = 3


def _border_char_count(dim):
    return math.ceil(2 * dim * (dim - 1) / 6)


def _has_leading_mark_digit(dim):
    return dim in (10, 11)


# --- BOARD LEVEL ---
def board_from_string(input_string):
    """
    Builds a board from an SBN or web task string.

    :raises PuzzleFormatError: When the string is not a recognisable puzzle.
    """
    puzzle = universal_import(input_string)
    if puzzle is None:
        raise PuzzleFormatError(f"Could not recognize puzzle string: {input_string[:40]!r}")
    regions = regions_from_task(puzzle['task'])
    return Board(regions, puzzle['stars'], puzzle['player_grid'])


def board_to_sbn(board):
    return encode_to_sbn(board.regions, board.stars_per_unit, board.grid)


def universal_import(input_string):
    """
    Decodes a puzzle string of either supported format.

    :param str input_string: SBN or web task string.
    :returns: Dict with 'task', 'stars' and 'player_grid', or None when unrecognised.
    :rtype: dict | None
    """
    text = input_string.strip().split('~')[0]
    if len(text) >= SBN_HEADER_LENGTH and text[:2] in SBN_CODE_TO_DIM_MAP:
        try:
            puzzle, marks = decode_sbn(text)
        except (KeyError, IndexError, ValueError) as e:
            logging.error(f"SBN parsing failed: {e}")
            return None
        logging.info("Decoded puzzle as SBN.")
    else:
        puzzle, marks = _split_web_task(text)
        if puzzle is None:
            logging.error(f"Input is neither SBN nor a web task: {text[:40]!r}")
            return None
        logging.info("Decoded puzzle as a web task.")
    dim = math.isqrt(len(puzzle['task'].split(',')))
    puzzle['player_grid'] = decode_player_annotations(marks, dim)
    return puzzle


# --- WEB TASK ---
def regions_from_task(task_string):
    """Region rows of a web task string, or None when it is not a square list of integers."""
    if not task_string:
        return None
    try:
        ids = [int(part) for part in task_string.split(',')]
    except ValueError:
        return None
    dim = math.isqrt(len(ids))
    if not ids or dim * dim != len(ids):
        return None
    return [ids[row * dim:(row + 1) * dim] for row in range(dim)]


def decode_web_task_string(task_string):
    regions = regions_from_task(task_string)
    if regions is None:
        return None
    dim = len(regions)
    stars = next((entry['stars'] for entry in PUZZLE_DEFINITIONS if entry['dim'] == dim), 1)
    return {'task': task_string, 'stars': stars}


def _split_web_task(text):
    """
    Separates a web task from marks glued to its end.

    The longest prefix of comma separated integers whose count is a perfect
    square is the task; the rest is mark data.

    :returns: (puzzle, marks) or (None, "").
    """
    for end in range(len(text), 0, -1):
        prefix = text[:end]
        if not prefix[-1].isdigit() or not re.fullmatch(r'[\d,]+', prefix):
            continue
        count = len([part for part in prefix.split(',') if part])
        if count and math.isqrt(count) ** 2 == count:
            puzzle = decode_web_task_string(prefix)
            if puzzle:
                return puzzle, text[end:]
    return None, ""


# --- PLAYER MARKS ---
def encode_player_annotations(player_grid):
    """Packs cell marks three to a character (base 4); 10 and 11 wide grids lead with one digit."""
    if not player_grid:
        return ""
    dim = len(player_grid)
    digits = [STATE_TO_SBN.get(state, 0) for row in player_grid for state in row]
    if not any(digits):
        return ""
    out = []
    if _has_leading_mark_digit(dim):
        out.append(str(digits[0]))
        digits = digits[1:]
    for start in range(0, len(digits), MARKS_PER_CHAR):
        a, b, c = (digits[start:start + MARKS_PER_CHAR] + [0, 0])[:MARKS_PER_CHAR]
        out.append(SBN_INT_TO_CHAR[a * 16 + b * 4 + c])
    return "".join(out)


def decode_player_annotations(annotation_data, dim):
    digits = []
    data = annotation_data or ""
    if data and _has_leading_mark_digit(dim) and data[0].isdigit():
        digits.append(int(data[0]))
        data = data[1:]
    for char in data:
        if len(digits) >= dim * dim:
            break
        value = SBN_CHAR_TO_INT.get(char, 0)
        digits.extend((value // 16, (value // 4) % 4, value % 4))
    digits = (digits + [0] * (dim * dim))[:dim * dim]
    states = [SBN_TO_STATE.get(digit, STATE_EMPTY) for digit in digits]
    return [states[row * dim:(row + 1) * dim] for row in range(dim)]


# --- SBN ---
def encode_to_sbn(region_grid, stars, player_grid=None):
    """
    Encodes a region layout (and optional marks) as SBN.

    :param region_grid: N x N region ids.
    :param int stars: Stars per unit.
    :param player_grid: Optional N x N cell states.
    :returns: The SBN string, or None for unsupported sizes.
    :rtype: str | None
    """
    dim = len(region_grid)
    size_code = DIM_TO_SBN_CODE_MAP.get(dim)
    if size_code is None:
        return None
    bits = _border_bits(region_grid)
    bits = '0' * (-len(bits) % 6) + bits
    borders = "".join(SBN_INT_TO_CHAR[int(bits[i:i + 6], 2)] for i in range(0, len(bits), 6))
    marks = encode_player_annotations(player_grid)
    return f"{size_code}{stars}{'e' if marks else 'W'}{borders}{marks}"


def decode_sbn(sbn_string):
    """
    Splits an SBN string into its puzzle and its raw mark data.

    :returns: ({'task', 'stars'}, marks)
    :rtype: tuple
    """
    dim = SBN_CODE_TO_DIM_MAP[sbn_string[:2]]
    stars = int(sbn_string[2])
    border_end = SBN_HEADER_LENGTH + _border_char_count(dim)
    border_chars = sbn_string[SBN_HEADER_LENGTH:border_end]
    bits = "".join(format(SBN_CHAR_TO_INT.get(char, 0), '06b') for char in border_chars)
    bits = bits.rjust(6 * _border_char_count(dim), '0')[-2 * dim * (dim - 1):]
    regions = reconstruct_grid_from_borders(dim, bits[:dim * (dim - 1)], bits[dim * (dim - 1):])
    task = ",".join(str(region) for row in regions for region in row)
    marks = sbn_string[border_end:] if sbn_string[3] == 'e' else ""
    return {'task': task, 'stars': stars}, marks


def _border_bits(region_grid):
    # Walls between horizontal neighbours row by row, then between vertical neighbours column by column.
    dim = len(region_grid)
    walls = [region_grid[r][c] != region_grid[r][c + 1] for r in range(dim) for c in range(dim - 1)]
    walls += [region_grid[r][c] != region_grid[r + 1][c] for c in range(dim) for r in range(dim - 1)]
    return "".join('1' if wall else '0' for wall in walls)


def reconstruct_grid_from_borders(dim, v_bits, h_bits):
    """Flood fills regions (numbered from 1 in reading order) between the encoded walls."""
    def open_between(a, b):
        (r1, c1), (r2, c2) = sorted((a, b))
        if r1 == r2:
            return v_bits[r1 * (dim - 1) + c1] == '0'
        return h_bits[c1 * (dim - 1) + r1] == '0'

    regions = [[0] * dim for _ in range(dim)]
    next_id = 1
    for start in ((r, c) for r in range(dim) for c in range(dim)):
        if regions[start[0]][start[1]]:
            continue
        regions[start[0]][start[1]] = next_id
        queue = deque([start])
        while queue:
            r, c = queue.popleft()
            for nr, nc in ((r, c + 1), (r, c - 1), (r + 1, c), (r - 1, c)):
                if 0 <= nr < dim and 0 <= nc < dim and not regions[nr][nc] and open_between((r, c), (nr, nc)):
                    regions[nr][nc] = next_id
                    queue.append((nr, nc))
        next_id += 1
    return regions
