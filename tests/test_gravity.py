import pytest

from match3.components.grid_position import GridPosition
from match3.components.token import TokenKind, TokenType
from match3.errors import MissingCollaboratorError
from match3.events.bus import EventBus, EVENT_TOKEN_MOVED, EVENT_TOKEN_SPAWNED
from match3.factories.tokens import EntityTokenFactory
from match3.systems.board_ops import has_gaps, token_kind, token_position
from match3.systems.gravity import GravityCompactor
from tests.helpers import ScriptedRng, build_grid

import esper


def test_compactor_requires_factory():
    with pytest.raises(MissingCollaboratorError):
        GravityCompactor(None)


def test_column_compacts_stably_then_refills():
    grid = build_grid(
        "G",
        ".",
        "B",
        ".",
        "R",
    )
    a, b, c = grid.get(0, 0), grid.get(0, 2), grid.get(0, 4)
    compactor = GravityCompactor(EntityTokenFactory(), rng=ScriptedRng([TokenKind.YELLOW]))
    result = compactor.apply(grid)

    assert [grid.get(0, row) for row in range(3)] == [a, b, c]
    assert token_position(b) == (0, 1)
    assert token_position(c) == (0, 2)
    assert grid.count_empty() == 0
    assert [token_kind(grid.get(0, row)) for row in (3, 4)] == [TokenKind.YELLOW, TokenKind.YELLOW]
    assert result.moved
    assert len(result.spawned) == 2
    assert not has_gaps(grid)


def test_full_column_reports_no_movement():
    grid = build_grid(
        "RG",
        "BY",
    )
    before = grid.snapshot()
    compactor = GravityCompactor(EntityTokenFactory())
    assert compactor.compact(grid) is False
    assert grid.snapshot() == before


def test_refill_only_reports_no_movement():
    grid = build_grid(
        "..",
        "BY",
    )
    compactor = GravityCompactor(EntityTokenFactory(), rng=ScriptedRng([TokenKind.RED]))
    assert compactor.compact(grid) is False
    assert grid.count_empty() == 0


def test_gravity_emits_placement_events():
    bus = EventBus()
    grid = build_grid(
        "R.",
        ".B",
    )
    moved = []
    spawned = []
    bus.subscribe(EVENT_TOKEN_MOVED, lambda s, **k: moved.append(k))
    bus.subscribe(EVENT_TOKEN_SPAWNED, lambda s, **k: spawned.append(k))
    red = grid.get(0, 1)
    compactor = GravityCompactor(EntityTokenFactory(), bus, rng=ScriptedRng([TokenKind.GREEN]))
    compactor.compact(grid)
    assert moved == [dict(token=red, col=0, row=0, from_col=0, from_row=1)]
    assert [(k['col'], k['row']) for k in spawned] == [(0, 1), (1, 1)]
    assert all(k['kind'] == TokenKind.GREEN for k in spawned)
    for k in spawned:
        assert esper.component_for_entity(k['token'], GridPosition).as_tuple() == (k['col'], k['row'])
        assert esper.component_for_entity(k['token'], TokenType).kind == TokenKind.GREEN
