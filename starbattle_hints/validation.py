"""State validation: report every broken board invariant in a board."""
from starbattle_hints.board import format_cell


def validate_state(board):
    """
    Checks the unit quotas, star adjacency and the 2x2 rule.

    :param Board board: The board to inspect.
    :returns: Human readable violation descriptions, empty when the board is consistent.
    :rtype: list
    """
    violations = []
    k = board.stars_per_unit
    for unit in board.units():
        stars = board.count_stars(unit.cells)
        if stars > k:
            violations.append(f"{unit.label} has {stars} stars (max {k})")

    stars = board.stars()
    star_set = set(stars)
    for r, c in stars:
        # Only look forward so each pair is reported once.
        for nr, nc in ((r, c + 1), (r + 1, c - 1), (r + 1, c), (r + 1, c + 1)):
            if (nr, nc) in star_set:
                violations.append(f"Stars at {format_cell((r, c))} and {format_cell((nr, nc))} are adjacent")

    for block in board.blocks():
        count = board.count_stars(board.block_cells(block))
        if count > 1:
            violations.append(f"2x2 block at {format_cell(block)} holds {count} stars")
    return violations
