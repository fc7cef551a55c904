# --- File: starbattle_hints/constants.py ---
# Description: Static data constants and engine tunables for the Star Battle hint engine.
STATE_EMPTY = 0
STATE_STAR = 1
STATE_CROSS = 2

STAR = 'star'
CROSS = 'cross'

KIND_PLACE_STAR = 'place-star'
KIND_PLACE_CROSS = 'place-cross'

ROW = 'row'
COLUMN = 'column'
REGION = 'region'

SBN_B64_ALPHABET = '0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz-_'
SBN_CHAR_TO_INT = {c: i for i, c in enumerate(SBN_B64_ALPHABET)}
SBN_INT_TO_CHAR = {i: c for i, c in enumerate(SBN_B64_ALPHABET)}
SBN_CODE_TO_DIM_MAP = {
    '55': 5,  '66': 6,  '77': 7,  '88': 8,  '99': 9, 'AA': 10, 'BB': 11, 'CC': 12, 'DD': 13,
    'EE': 14, 'FF': 15, 'GG': 16, 'HH': 17, 'II': 18, 'JJ': 19, 'KK': 20, 'LL': 21, 'MM': 22,
    'NN': 23, 'OO': 24, 'PP': 25
}
DIM_TO_SBN_CODE_MAP = {v: k for k, v in SBN_CODE_TO_DIM_MAP.items()}
BASE64_DISPLAY_ALPHABET = SBN_B64_ALPHABET

# Stars per unit for the sizes the puzzle site publishes; web task strings carry no star count.
PUZZLE_DEFINITIONS = [
    {'dim': 5, 'stars': 1},
    {'dim': 6, 'stars': 1},
    {'dim': 8, 'stars': 1},
    {'dim': 10, 'stars': 2},
    {'dim': 14, 'stars': 3},
    {'dim': 17, 'stars': 4},
    {'dim': 21, 'stars': 5},
    {'dim': 25, 'stars': 6},
]

# Terminal colours used by the CLI grid display.
UNIFIED_COLORS_BG_TERMINAL = [
    ("Bright Red", "\033[48;2;255;204;204m\033[38;2;0;0;0m"), ("Bright Green", "\033[48;2;204;255;204m\033[38;2;0;0;0m"),
    ("Bright Yellow", "\033[48;2;255;255;204m\033[38;2;0;0;0m"), ("Bright Blue", "\033[48;2;204;229;255m\033[38;2;0;0;0m"),
    ("Bright Magenta", "\033[48;2;255;204;255m\033[38;2;0;0;0m"), ("Bright Cyan", "\033[48;2;204;255;255m\033[38;2;0;0;0m"),
    ("Light Orange", "\033[48;2;255;229;204m\033[38;2;0;0;0m"), ("Light Purple", "\033[48;2;229;204;255m\033[38;2;0;0;0m"),
    ("Light Gray", "\033[48;2;224;224;224m\033[38;2;0;0;0m"), ("Mint", "\033[48;2;210;240;210m\033[38;2;0;0;0m"),
]

# --- Engine tunables (defaults for EngineConfig) ---
DEFAULT_ORACLE_TIMEOUT_MS = 2000
DEFAULT_ORACLE_CALL_BUDGET = 60
DEFAULT_MAX_GROUP_SIZE = 4
DEFAULT_MAX_PLACEMENTS = 64
DEFAULT_MAX_PLACEMENT_CANDIDATES = 16
MAX_EXACT_INDEPENDENT_CELLS = 30
MAX_PROPAGATION_ROUNDS = 50
DEFAULT_MAX_SOLVE_STEPS = 1000
