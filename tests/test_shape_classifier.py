import pytest

from match3.components.match import ShapeType, shape_priority
from match3.components.token import TokenKind
from match3.systems.conflict_resolver import find_matches
from match3.systems.shape_classifier import classify
from match3.world import create_world
from tests.helpers import build_grid, tokens_by_cell


def shapes_in(selection):
    return sorted(candidate.shape for candidate in selection)


def test_classify_without_grid_fails_fast():
    with pytest.raises(ValueError):
        classify(None)


def test_empty_grid_yields_no_candidates():
    grid = create_world("test", width=4, height=4)
    assert classify(grid) == []


def test_board_without_runs_has_no_matches():
    grid = build_grid(
        "RGBY",
        "GBYR",
        "BYRG",
        "YRGB",
    )
    assert classify(grid) == []
    assert not find_matches(grid)


def test_line3_is_a_single_candidate_after_resolution():
    grid = build_grid(
        "GBYPO",
        "BRRRG",
        "YGBOP",
    )
    cells = tokens_by_cell(grid)
    line = {cells[(1, 1)], cells[(2, 1)], cells[(3, 1)]}
    selection = find_matches(grid)
    assert len(selection) == 1
    candidate = selection.candidates[0]
    assert candidate.shape == ShapeType.LINE3
    assert set(candidate.tokens) == line
    assert candidate.axis == "horizontal"
    assert candidate.kind == TokenKind.RED


def test_vertical_line4_is_rocket():
    grid = build_grid(
        "GBY",
        "BRG",
        "YRB",
        "GRY",
        "BRG",
        "YGB",
    )
    selection = find_matches(grid)
    assert shapes_in(selection) == [ShapeType.LINE4]
    assert selection.candidates[0].axis == "vertical"
    assert selection.candidates[0].token_count == 4


def test_line5_beats_everything():
    grid = build_grid(
        "GBYPOG",
        "RRRRRB",
        "YGBOPY",
    )
    selection = find_matches(grid)
    assert shapes_in(selection) == [ShapeType.LINE5]
    assert selection.candidates[0].token_count == 5


def test_cross_yields_one_tshape_of_five_tokens():
    grid = build_grid(
        "GBRYO",
        "YRRRB",
        "OGRBY",
    )
    selection = find_matches(grid)
    assert shapes_in(selection) == [ShapeType.TSHAPE]
    cross = selection.candidates[0]
    assert cross.token_count == 5
    assert len(set(cross.tokens)) == 5
    assert cross.priority > shape_priority(ShapeType.LINE3, 3)
    assert cross.priority > shape_priority(ShapeType.LINE4, 4)


def test_t_with_stem_below_bar():
    grid = build_grid(
        "RRRG",
        "BRYB",
        "GRBY",
    )
    selection = find_matches(grid)
    assert shapes_in(selection) == [ShapeType.TSHAPE]
    assert selection.candidates[0].token_count == 5


def test_corner_arrangement_is_lshape():
    grid = build_grid(
        "RGB",
        "RBY",
        "RRR",
    )
    selection = find_matches(grid)
    assert shapes_in(selection) == [ShapeType.LSHAPE]
    assert selection.candidates[0].token_count == 5


def test_square_block():
    grid = build_grid(
        "GBYG",
        "BRRY",
        "YRRB",
        "GBYG",
    )
    selection = find_matches(grid)
    assert shapes_in(selection) == [ShapeType.SQUARE]
    assert selection.candidates[0].token_count == 4


def test_square_plus_one_takes_perimeter_neighbour():
    grid = build_grid(
        "GBYG",
        "BRRY",
        "RRRB",
        "GBYG",
    )
    cells = tokens_by_cell(grid)
    selection = find_matches(grid)
    assert shapes_in(selection) == [ShapeType.SQUARE_PLUS_ONE]
    candidate = selection.candidates[0]
    assert candidate.token_count == 5
    assert cells[(0, 1)] in candidate.tokens


def test_square_plus_one_keeps_first_of_several_neighbours():
    grid = build_grid(
        "GBYGB",
        "RRRYG",
        "BRRRG",
        "GBYGY",
    )
    cells = tokens_by_cell(grid)
    from_seed = [c for c in classify(grid) if c.seed == (1, 1)]
    assert len(from_seed) == 1
    candidate = from_seed[0]
    assert candidate.shape == ShapeType.SQUARE_PLUS_ONE
    # Upper-left neighbour precedes the right one in perimeter order.
    assert cells[(0, 2)] in candidate.tokens
    assert cells[(3, 1)] not in candidate.tokens
    assert candidate.token_count == 5


def test_each_seed_yields_at_most_one_candidate():
    grid = build_grid(
        "RRRRR",
        "RGBYR",
        "RRRRR",
    )
    candidates = classify(grid)
    seeds = [candidate.seed for candidate in candidates]
    assert len(seeds) == len(set(seeds))


def test_candidates_follow_column_major_scan_order():
    grid = build_grid(
        "RGB",
        "RGB",
        "RGB",
    )
    seeds = [candidate.seed for candidate in classify(grid)]
    assert seeds == sorted(seeds)


def test_line4_with_single_stem_is_tshape():
    grid = build_grid(
        "GBYGB",
        "BRRYG",
        "RRRRB",
        "GBYGY",
    )
    cells = tokens_by_cell(grid)
    selection = find_matches(grid)
    assert shapes_in(selection) == [ShapeType.TSHAPE]
    t_shape = selection.candidates[0]
    assert set(t_shape.tokens) == {cells[(0, 1)], cells[(1, 1)], cells[(2, 1)], cells[(3, 1)], cells[(1, 2)]}
