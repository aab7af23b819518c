import pytest
from shapely.geometry import Point, Polygon, box
from spatial_lib import GridIndex, Envelope


@pytest.fixture
def main_envelope():
    """Main bounding rectangle (0,0)-(100,100)."""
    return Envelope(0.0, 100.0, 0.0, 100.0)


@pytest.fixture
def grid_index(main_envelope):
    """Empty 10x10 index with 10x10 cells."""
    return GridIndex(main_envelope, n_cols=10, n_rows=10)


@pytest.fixture
def parcels():
    """A small set of disjoint shapes keyed by feature id."""
    return {
        1: box(5, 5, 15, 15),
        2: Point(50, 50),
        3: Polygon([(62, 61), (88, 64), (75, 93)]),
        4: box(81.5, 2.5, 97.5, 8.5),
    }
