"""Unit coverage for vectorized AABB collections."""
import numpy
import numpy.ma
import pytest

from spenvelope import AABB, AABBVect, bound_all


@pytest.fixture
def boxes():
    return [
        AABB.from_corners((0., 0.), (10., 10.)),
        AABB.from_corners((3., 3.), (6., 6.)),
        AABB.from_corners((12., -4.), (13., -1.)),
        AABB.from_point((-2.5, 7.)),
    ]


@pytest.fixture
def vect(boxes):
    return AABBVect.from_aabbs(boxes)


@pytest.fixture
def points():
    return numpy.array([[5., 5.], [12., 4.], [-1., -1.], [13., -4.]])


def test_interleaved_coords():
    vect = AABBVect([[0, 1, 0, 2], [2, 3, 2, 5]])
    assert vect.mins.tolist() == [[0, 0], [2, 2]]
    assert vect.maxs.tolist() == [[1, 2], [3, 5]]


def test_corner_coords():
    vect = AABBVect([[0, 0, 1, 2]], interleaved=False)
    assert vect.mins.tolist() == [[0, 0]]
    assert vect.maxs.tolist() == [[1, 2]]


def test_pair_coords():
    vect = AABBVect([[[0, 1], [0, 2]]], dtype="float32")
    assert vect.dtype == numpy.float32
    assert vect[0] == AABB.from_corners((0, 0), (1, 2))


def test_invalid_arguments():
    with pytest.raises(ValueError, match="Either coords"):
        AABBVect()
    with pytest.raises(ValueError, match="Either coords"):
        AABBVect([[0, 1]], mins=[[0]], maxs=[[1]])
    with pytest.raises(ValueError, match="even length"):
        AABBVect([[0, 1, 2]])
    with pytest.raises(ValueError, match="same shape"):
        AABBVect(mins=[[0, 0]], maxs=[[1, 1, 1]])
    with pytest.raises(ValueError, match="Unsupported coordinate dtype"):
        AABBVect(mins=[[0]], maxs=[[1]], dtype="uint8")


def test_from_aabbs(vect, boxes):
    assert len(vect) == 4
    assert vect.ndims == 2
    assert list(vect) == boxes
    assert vect[2] == boxes[2]
    sub = vect[1:3]
    assert isinstance(sub, AABBVect)
    assert list(sub) == boxes[1:3]
    assert list(vect[numpy.array([3, 0])]) == [boxes[3], boxes[0]]


def test_from_no_aabbs():
    vect = AABBVect.from_aabbs([], ndims=3)
    assert len(vect) == 0
    assert vect.ndims == 3
    assert vect.merged() == AABB.new_empty(3)
    with pytest.raises(ValueError, match="ndims is required"):
        AABBVect.from_aabbs([])


def test_measures_match_scalar(vect, boxes):
    assert vect.areas().tolist() == [b.area() for b in boxes]
    assert vect.margin_values().tolist() == [b.margin_value() for b in boxes]
    assert vect.centers.tolist() == [b.center().tolist() for b in boxes]


@pytest.mark.parametrize("dtype", ["int64", "float64"])
def test_measures_of_empty_rows(dtype):
    vect = AABBVect.from_aabbs([
        AABB.from_corners((0, 0), (10, 10), dtype=dtype),
        AABB.new_empty(2, dtype),
    ])
    assert vect.areas().tolist() == [100, 0]
    assert vect.margin_values().tolist() == [20, 0]
    assert vect.margin_values().dtype == numpy.dtype(dtype)


def test_intersects_matches_scalar(vect, boxes):
    other = AABBVect.from_aabbs([
        AABB.from_corners((10., 10.), (11., 11.)),
        AABB.from_corners((-5., -5.), (-4., 20.)),
    ])
    res = vect.intersects(other)
    assert res.shape == (4, 2)
    expected = [[a.intersects(b) for b in other] for a in boxes]
    assert res.tolist() == expected
    assert res[0, 0]


def test_point_queries_match_scalar(vect, boxes, points):
    contains = vect.contains_points(points)
    dist = vect.distance_2(points)
    minmax = vect.min_max_dist_2(points)
    assert contains.shape == dist.shape == minmax.shape == (4, 4)
    for i, box in enumerate(boxes):
        for j, q in enumerate(points):
            assert contains[i, j] == box.contains_point(q)
            assert dist[i, j] == box.distance_2(q)
            assert minmax[i, j] == box.min_max_dist_2(q)


def test_single_point_query(vect, boxes):
    dist = vect.distance_2([12., 4.])
    assert dist.shape == (4, 1)
    assert dist[0, 0] == 4.


def test_dimension_mismatch(vect):
    with pytest.raises(ValueError, match="Incompatible number of dimensions"):
        vect.intersects(AABBVect(mins=[[0, 0, 0]], maxs=[[1, 1, 1]]))
    with pytest.raises(ValueError, match=r"\(M, 2\)"):
        vect.distance_2([[1., 2., 3.]])


def test_merged(vect, boxes):
    assert vect.merged() == bound_all(boxes)


def test_mergeby(vect, boxes):
    indexes = numpy.ma.array([[0, 2], [3, 0], [1, 1]],
                             mask=[[False, False], [False, True],
                                   [True, True]])
    merged = vect.mergeby(indexes)
    assert len(merged) == 3
    assert merged[0] == boxes[0].merged(boxes[2])
    assert merged[1] == boxes[3]
    assert merged[2].is_empty()


def test_mergeby_ignores_out_of_range_padding(vect, boxes):
    indexes = numpy.ma.masked_equal([[0, 99], [2, 99], [99, 99]], 99)
    merged = vect.mergeby(indexes)
    assert merged[0] == boxes[0]
    assert merged[1] == boxes[2]
    assert merged[2].is_empty()


def test_mergeby_plain_array(vect, boxes):
    merged = vect.mergeby(numpy.array([[0, 1], [2, 3]]))
    assert list(merged) == [boxes[0].merged(boxes[1]),
                            boxes[2].merged(boxes[3])]


def test_argsort(vect):
    assert vect.argsort(0).tolist() == [3, 0, 1, 2]
    assert vect.argsort(1).tolist() == [2, 0, 1, 3]
    with pytest.raises(IndexError, match="out of range"):
        vect.argsort(2)


def test_argsort_is_stable():
    vect = AABBVect(mins=[[1], [0], [1], [0]], maxs=[[2], [2], [2], [2]])
    assert vect.argsort(0).tolist() == [1, 3, 0, 2]


def test_argsort_rejects_nan():
    vect = AABBVect(mins=[[0.], [numpy.nan]], maxs=[[1.], [1.]])
    with pytest.raises(ValueError, match="NaN"):
        vect.argsort(0)


def test_repr(vect):
    assert repr(vect) == "AABBVect(n=4, ndims=2, dtype=float64)"
