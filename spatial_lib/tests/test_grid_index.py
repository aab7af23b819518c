"""
Tests for GridIndex insertion and queries.
"""

import pytest
import numpy as np
from shapely.geometry import (
    LineString,
    MultiPolygon,
    Point,
    Polygon,
    box,
)
from spatial_lib.core.types import Envelope
from spatial_lib.core.errors import InvalidConfiguration
from spatial_lib.params import GridParams
from spatial_lib.spatial.grid_index import GridIndex, EMPTY


@pytest.fixture
def index():
    return GridIndex(Envelope(0.0, 100.0, 0.0, 100.0), n_cols=10, n_rows=10)


def test_index_creation(index):
    assert index.cells.shape == (10, 10)
    assert index.cells.dtype == np.int64
    assert np.all(index.cells == EMPTY)
    assert index.bucket_count == 0
    assert len(index) == 0


def test_index_accepts_bounds_tuple():
    index = GridIndex((0.0, 0.0, 50.0, 20.0), n_cols=5, n_rows=2)
    
    assert index.lattice.envelope == Envelope(0.0, 50.0, 0.0, 20.0)
    assert index.lattice.cell_size_j == pytest.approx(10.0)


def test_degenerate_envelope_rejected():
    with pytest.raises(InvalidConfiguration):
        GridIndex(Envelope(0.0, 0.0, 0.0, 10.0), 4, 4)


def test_insert_box_covers_four_cells(index):
    n_cells = index.insert(box(5, 5, 15, 15), 1)
    
    assert n_cells == 4
    for cell in [(0, 0), (0, 1), (1, 0), (1, 1)]:
        assert index.cell_ids(*cell) == [1]
    assert index.cell_ids(2, 2) == []
    assert len(index) == 1


def test_insert_skips_cells_outside_shape():
    """Corner cells of the candidate range are tested against the real shape."""
    index = GridIndex(Envelope(0.0, 30.0, 0.0, 30.0), n_cols=3, n_rows=3)
    triangle = Polygon([(0, 0), (30, 0), (0, 30)])
    
    n_cells = index.insert(triangle, 7)
    
    # the hypotenuse only touches cells (1, 2) and (2, 1) at a corner
    assert n_cells == 8
    assert index.cell_ids(2, 2) == []
    assert index.cell_ids(1, 2) == [7]
    assert index.query(Envelope(21, 29, 21, 29)) == set()


def test_insert_diagonal_line():
    index = GridIndex(Envelope(0.0, 30.0, 0.0, 30.0), n_cols=3, n_rows=3)
    
    n_cells = index.insert(LineString([(0, 0), (30, 30)]), 3)
    
    assert n_cells == 7
    assert index.cell_ids(0, 2) == []
    assert index.cell_ids(2, 0) == []


def test_insert_shape_on_cell_edge(index):
    """A box aligned to cell edges is also recorded in the cells it touches."""
    n_cells = index.insert(box(10, 0, 20, 10), 4)
    
    assert n_cells == 6
    for cell in [(0, 0), (0, 1), (0, 2), (1, 0), (1, 1), (1, 2)]:
        assert index.cell_ids(*cell) == [4]
    assert index.cell_ids(0, 3) == []
    assert index.cell_ids(2, 1) == []


def test_insert_vertical_line_on_grid_line(index):
    n_cells = index.insert(LineString([(10, 1), (10, 9)]), 5)
    
    assert n_cells == 2
    assert index.cell_ids(0, 0) == [5]
    assert index.cell_ids(0, 1) == [5]


def test_insert_point(index):
    assert index.insert(Point(55, 25), 9) == 1
    assert index.cell_ids(2, 5) == [9]


def test_insert_outside_is_noop(index):
    assert index.insert(box(200, 200, 210, 210), 3) == 0
    assert index.insert(Point(-5, 50), 4) == 0
    
    assert index.bucket_count == 0
    assert len(index) == 0
    assert np.all(index.cells == EMPTY)


def test_insert_partially_outside(index):
    assert index.insert(box(-10, -10, 5, 5), 2) == 1
    assert index.cell_ids(0, 0) == [2]


def test_insert_empty_geometry(index):
    assert index.insert(Polygon(), 1) == 0
    assert index.insert(None, 1) == 0


@pytest.mark.parametrize("feature_id", ["a", 1.5, None, True])
def test_insert_rejects_non_integer_id(index, feature_id):
    with pytest.raises(TypeError, match="feature_id must be an integer"):
        index.insert(Point(1, 1), feature_id)


def test_insert_accepts_numpy_integer(index):
    index.insert(Point(1, 1), np.int64(12))
    
    assert index.cell_ids(0, 0) == [12]
    assert type(index.cell_ids(0, 0)[0]) is int


def test_buckets_allocated_lazily_in_order(index):
    index.insert(Point(95, 95), 1)
    index.insert(Point(5, 5), 2)
    index.insert(Point(6, 6), 3)
    
    assert index.bucket_count == 2
    assert index.cells[9, 9] == 0
    assert index.cells[0, 0] == 1
    assert index.cell_ids(0, 0) == [2, 3]


def test_single_insert_adds_id_once_per_cell(index):
    shape = MultiPolygon([box(1, 1, 2, 2), box(3, 3, 4, 4)])
    
    assert index.insert(shape, 8) == 1
    assert index.cell_ids(0, 0) == [8]


def test_query_deduplicates(index):
    index.insert(box(1, 1, 99, 99), 1)
    
    result = index.query(Envelope(0, 100, 0, 100))
    
    assert result == {1}
    assert isinstance(result, set)


def test_query_bounds_tuple(index):
    index.insert(box(5, 5, 15, 15), 1)
    
    assert index.query((0.0, 0.0, 10.0, 10.0)) == {1}


def test_query_outside_is_empty(index):
    index.insert(box(1, 1, 99, 99), 1)
    
    assert index.query(Envelope(200, 300, 200, 300)) == set()
    assert index.query(Envelope(-300, -200, 0, 100)) == set()


def test_query_empty_index(index):
    assert index.query(Envelope(0, 100, 0, 100)) == set()


def test_query_is_idempotent(index):
    index.insert(box(5, 5, 35, 15), 1)
    index.insert(Point(30, 12), 2)
    window = Envelope(20, 40, 0, 20)
    
    first = index.query(window)
    assert index.query(window) == first
    assert first == {1, 2}


def test_query_geometry(index):
    index.insert(box(5, 5, 15, 15), 1)
    index.insert(Point(80, 80), 2)
    
    assert index.query_geometry(LineString([(0, 0), (9, 9)])) == {1}
    assert index.query_geometry(Polygon()) == set()


def test_cell_ids_out_of_range(index):
    with pytest.raises(IndexError):
        index.cell_ids(10, 0)


def test_occupied_cells(index):
    index.insert(box(5, 5, 15, 8), 1)
    
    assert list(index.occupied_cells()) == [(0, 0), (0, 1)]


UNIT = Envelope(0.0, 1.0, 0.0, 1.0)
OFFSET = Envelope(0.1, 0.7, 0.1, 0.7)
HUNDRED = Envelope(0.0, 100.0, 0.0, 100.0)


@pytest.mark.parametrize("envelope, n, shape", [
    (HUNDRED, 10, Polygon([(13.3, 4.1), (71.7, 22.9), (48.2, 87.6), (21.4, 53.3)])),
    (HUNDRED, 10, LineString([(2.5, 97.5), (47.3, 3.1), (96.1, 61.7)])),
    (HUNDRED, 10, box(33.3, 33.3, 36.6, 36.6)),
    (HUNDRED, 10, Point(71.2, 18.9).buffer(12.5)),
    # cell sizes that are not exactly representable
    (UNIT, 10, Point(0.3, 0.55)),
    (UNIT, 10, Point(0.7, 0.55)),
    (UNIT, 10, Point(0.0, 0.3)),
    (UNIT, 10, Point(0.6, 0.0)),
    (UNIT, 10, LineString([(0.3, 0.05), (0.3, 0.95)])),
    (UNIT, 10, LineString([(0.05, 0.7), (0.95, 0.7)])),
    (UNIT, 10, box(0.1, 0.2, 0.3, 0.6)),
    (UNIT, 10, Polygon([(0.0, 0.0), (0.9, 0.0), (0.0, 0.9)])),
    (OFFSET, 6, Point(0.3, 0.4)),
    (OFFSET, 6, Point(0.1, 0.5)),
    (OFFSET, 6, LineString([(0.1, 0.15), (0.1, 0.65)])),
    (OFFSET, 6, box(0.2, 0.2, 0.5, 0.3)),
    (OFFSET, 6, LineString([(0.4, 0.1), (0.6, 0.7)])),
])
def test_every_intersecting_cell_holds_id(envelope, n, shape):
    """Exactly the cells whose rectangle intersects the shape record it."""
    index = GridIndex(envelope, n_cols=n, n_rows=n)
    assert index.insert(shape, 42) > 0
    lat = index.lattice

    for row in range(lat.n_rows):
        for col in range(lat.n_cols):
            cell_env = lat.cell_envelope(row, col)
            hit = cell_env.to_geometry().intersects(shape)
            assert (42 in index.cell_ids(row, col)) == hit
            if hit:
                assert 42 in index.query(cell_env)


@pytest.mark.parametrize("x, y", [(0.3, 0.55), (0.7, 0.55), (0.0, 0.3), (0.3, 0.0)])
def test_point_on_grid_line_is_stored(x, y):
    """Points on grid lines of a lattice with inexact cell sizes are found."""
    index = GridIndex(UNIT, n_cols=10, n_rows=10)

    assert index.insert(Point(x, y), 0) >= 1
    assert index.query((x, y, x, y)) == {0}


def test_query_infinite_window(index):
    inf = float("inf")
    index.insert(box(5, 5, 15, 15), 1)
    index.insert(Point(95, 95), 2)

    assert index.query(Envelope(-inf, inf, -inf, inf)) == {1, 2}
    assert index.query(Envelope(50, inf, 50, inf)) == {2}


def test_query_nan_window_is_empty(index):
    index.insert(box(5, 5, 15, 15), 1)

    assert index.query(Envelope(float("nan"), 10, 0, 10)) == set()


def test_query_just_outside_is_empty(index):
    """Padding the candidate range does not leak cells past the lattice edge."""
    index.insert(box(90, 90, 99.5, 99.5), 1)
    index.insert(box(0.5, 0.5, 5, 5), 2)

    assert index.query(Envelope(100.5, 120, 0, 100)) == set()
    assert index.query(Envelope(-20, -0.5, -20, -0.5)) == set()
    assert index.query(Envelope(100, 120, 95, 120)) == {1}


def test_extend(index):
    n_cells = index.extend([
        (box(5, 5, 15, 15), 1),
        (Point(50.5, 50.5), 2),
        (box(500, 500, 501, 501), 3),
    ])
    
    assert n_cells == 5
    assert len(index) == 2


def test_from_geometries_derives_envelope():
    geometries = [box(0, 0, 1, 1), box(9, 9, 10, 10)]
    
    index = GridIndex.from_geometries(geometries, n_cols=10, n_rows=10)
    
    assert index.lattice.envelope == Envelope(0.0, 10.0, 0.0, 10.0)
    assert index.query(Envelope(0, 1, 0, 1)) == {0}
    assert index.query(Envelope(0, 10, 0, 10)) == {0, 1}


def test_from_geometries_with_margin():
    index = GridIndex.from_geometries([Point(5, 5)], n_cols=2, n_rows=2, margin=1.0)
    
    assert index.lattice.envelope == Envelope(4.0, 6.0, 4.0, 6.0)
    assert index.query(Envelope(4, 6, 4, 6)) == {0}


def test_from_geometries_skips_empty():
    index = GridIndex.from_geometries(
        [Polygon(), box(0, 0, 4, 4), None],
        n_cols=2, n_rows=2,
    )
    
    assert index.query(Envelope(0, 4, 0, 4)) == {1}


def test_from_geometries_degenerate():
    with pytest.raises(InvalidConfiguration):
        GridIndex.from_geometries([], n_cols=4, n_rows=4)
    with pytest.raises(InvalidConfiguration):
        GridIndex.from_geometries([Point(5, 5)], n_cols=4, n_rows=4)


def test_from_geometries_explicit_envelope():
    index = GridIndex.from_geometries(
        [Point(5, 5), Point(500, 500)],
        n_cols=4, n_rows=4,
        envelope=Envelope(0, 100, 0, 100),
    )
    
    assert index.query(Envelope(0, 100, 0, 100)) == {0}


def test_from_params():
    params = GridParams(n_cols=4, n_rows=2, margin=1.0)
    
    index = GridIndex.from_params(Envelope(0, 10, 0, 10), params)
    
    assert index.lattice.envelope == Envelope(-1.0, 11.0, -1.0, 11.0)
    assert index.lattice.shape == (2, 4)


def test_repr(index):
    text = repr(index)
    
    assert text.startswith("GridIndex(")
    assert "n_cols=10" in text
