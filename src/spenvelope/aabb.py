# Copyright (C) 2018 DataStorm
#
# This file is part of spenvelope.
#
# spenvelope is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# spenvelope is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# A copy of the GNU General Public License is available at
# <http://www.gnu.org/licenses/>.
'''
Axis-aligned bounding boxes.

An AABB is stored as its two extreme corners: the componentwise minimum
(`lower`) and maximum (`upper`) of the enclosed region. The box is closed, so
points and boxes on the boundary are contained and intersecting.

The empty box has `lower` set to the largest representable scalar and `upper`
to the smallest one. Every comparison against it fails, and merging anything
into it gives back the other operand.
'''
import functools
import logging
import operator

import numpy
import toolz

from . import dtypes
from . import envelope
from . import point

logger = logging.getLogger(__name__)


def _extents(lower, upper):
    # Inverted dimensions count as zero width. They are never subtracted so
    # that the integer empty box cannot wrap around.
    res = numpy.zeros_like(upper)
    numpy.subtract(upper, lower, out=res, where=upper >= lower)
    return res


def _midpoint(lower, upper):
    total = lower + upper
    if total.dtype.kind == "i":
        # Halve towards zero, keeping the integer dtype.
        return numpy.sign(total) * (numpy.abs(total) // 2)
    return total / 2


def _has_nan(arr):
    return arr.dtype.kind == "f" and bool(numpy.isnan(arr).any())


@functools.total_ordering
class AABB(envelope.Envelope):
    """
    Axis-aligned bounding box in any number of dimensions.

    Prefer the constructors :meth:`from_point`, :meth:`from_corners`,
    :meth:`from_points` and :meth:`new_empty`: calling the class directly
    keeps the corners as given, whether or not `lower <= upper`.

    Args:
        lower (array-like): lower corner.
        upper (array-like): upper corner.
        dtype (numpy dtype-like, optional): coordinate dtype. Defaults to the
            promotion of the corners' dtypes.
    """
    __slots__ = ('_lower', '_upper')

    def __init__(self, lower, upper, dtype=None):
        lower = point.as_point(lower, dtype)
        upper = point.as_point(upper, dtype)
        point.check_dims(lower, upper)
        common = dtypes.result_dtype(lower.dtype, upper.dtype)
        self._lower = lower.astype(common, copy=False)
        self._upper = upper.astype(common, copy=False)

    @classmethod
    def _make(cls, lower, upper):
        # Trusted arrays, skip validation.
        res = cls.__new__(cls)
        res._lower = lower
        res._upper = upper
        return res

    # ============================  Constructors  ============================

    @classmethod
    def from_point(cls, p, dtype=None):
        """Returns the AABB enclosing the single point `p`."""
        p = point.as_point(p, dtype)
        return cls._make(p, p.copy())

    @classmethod
    def from_corners(cls, p1, p2, dtype=None):
        """Returns the AABB with opposite corners `p1` and `p2`, in any order."""
        p1 = point.as_point(p1, dtype)
        p2 = point.as_point(p2, dtype)
        return cls._make(point.min_point(p1, p2), point.max_point(p1, p2))

    @classmethod
    def from_points(cls, points, ndims=None, dtype=None):
        """
        Returns the smallest AABB enclosing every point of `points`.

        Args:
            points (iterable of array-like): points of equal dimensionality.
            ndims (int, optional): dimensionality of the result, needed only
                when `points` may be empty and is not an (N, D) array.
            dtype (numpy dtype-like, optional): coordinate dtype.

        Returns:
            AABB: the empty AABB if `points` is empty.
        """
        shape = getattr(points, "shape", None)
        if shape is not None and len(shape) == 2:
            # An (N, D) array tells its dimensionality even when N is 0.
            ndims = shape[1] if ndims is None else ndims
            dtype = points.dtype if dtype is None else dtype
        try:
            first, points = toolz.peek(points)
        except StopIteration:
            if ndims is None:
                raise ValueError(
                    "ndims is required to bound an empty collection of "
                    "points."
                ) from None
            logger.debug("Bounding no points in %d dimensions", ndims)
            return cls.new_empty(ndims, dtype)
        first = point.as_point(first, dtype)
        res = cls.new_empty(point.dimensions(first), first.dtype)
        for p in points:
            res.extend(point.as_point(p, dtype))
        return res

    @classmethod
    def new_empty(cls, ndims, dtype=None):
        """Returns the empty AABB in `ndims` dimensions."""
        lowest, highest = dtypes.scalar_bounds(dtype)
        return cls._make(point.from_value(highest, ndims, dtype),
                         point.from_value(lowest, ndims, dtype))

    def copy(self):
        return self._make(self._lower.copy(), self._upper.copy())

    __copy__ = copy

    # =============================  Accessors  ==============================

    @property
    def lower(self):
        """Corner with the smallest coordinate in each dimension."""
        return self._lower.copy()

    @property
    def upper(self):
        """Corner with the largest coordinate in each dimension."""
        return self._upper.copy()

    @property
    def ndims(self):
        return point.dimensions(self._lower)

    @property
    def dtype(self):
        return self._lower.dtype

    def is_empty(self):
        """True if the box is inverted in some dimension."""
        return bool(numpy.any(self._lower > self._upper))

    def __repr__(self):
        return "AABB(lower={}, upper={})".format(
            self._lower.tolist(), self._upper.tolist())

    # ========================  Ordering and equality  =======================

    def sort_key(self):
        """
        Returns the `(lower, upper)` tuple defining the lexicographic order.

        Raises:
            ValueError: if some coordinate is NaN.
        """
        if _has_nan(self._lower) or _has_nan(self._upper):
            raise ValueError("Cannot order {!r}: NaN coordinate.".format(self))
        return tuple(self._lower.tolist()), tuple(self._upper.tolist())

    def __eq__(self, other):
        if not isinstance(other, AABB):
            return NotImplemented
        return (self.ndims == other.ndims
                and bool(numpy.all(self._lower == other._lower))
                and bool(numpy.all(self._upper == other._upper)))

    def __lt__(self, other):
        if not isinstance(other, AABB):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    # Mutable through merge and extend.
    __hash__ = None

    # ============================  Predicates  ==============================

    def _as_query(self, p):
        p = point.as_point(p)
        point.check_dims(self._lower, p)
        return p

    def contains_point(self, p):
        p = self._as_query(p)
        return (point.all_component_wise(self._lower, p, numpy.less_equal)
                and point.all_component_wise(self._upper, p,
                                             numpy.greater_equal))

    def contains_envelope(self, other):
        return (
            point.all_component_wise(self._lower, other._lower,
                                     numpy.less_equal)
            and point.all_component_wise(self._upper, other._upper,
                                         numpy.greater_equal)
        )

    def intersects(self, other):
        return (
            point.all_component_wise(self._lower, other._upper,
                                     numpy.less_equal)
            and point.all_component_wise(self._upper, other._lower,
                                         numpy.greater_equal)
        )

    # ============================  Combinations  ============================

    def merge(self, other):
        self._lower = point.min_point(self._lower, other._lower)
        self._upper = point.max_point(self._upper, other._upper)

    def merged(self, other):
        return self._make(point.min_point(self._lower, other._lower),
                          point.max_point(self._upper, other._upper))

    def extend(self, p):
        """Grows the box, in place, to include the point `p`."""
        p = self._as_query(p)
        self._lower = point.min_point(self._lower, p)
        self._upper = point.max_point(self._upper, p)

    def extended(self, p):
        """Returns the smallest box containing `self` and the point `p`."""
        res = self.copy()
        res.extend(p)
        return res

    # =============================  Measures  ===============================

    def area(self):
        """
        Product of the side lengths.

        Inverted sides count as zero, so the empty box, and the candidate
        intersection of disjoint boxes, have zero area.
        """
        one = self.dtype.type(1)
        return point.fold(_extents(self._lower, self._upper), one,
                          operator.mul)

    def margin_value(self):
        """Sum of the side lengths, clamped at zero."""
        zero = dtypes.zero(self.dtype)
        if self.dtype.kind == "i" and self.is_empty():
            # upper - lower may not fit in the dtype, use python ints.
            total = sum(int(u) - int(l)
                        for l, u in zip(self._lower, self._upper))
            return self.dtype.type(max(total, 0))
        with numpy.errstate(over="ignore"):
            total = numpy.sum(point.sub(self._upper, self._lower),
                              dtype=self.dtype)
        return max(total, zero)

    def intersection_area(self, other):
        """Area shared by `self` and `other`, zero if they are disjoint."""
        return self._make(
            point.max_point(self._lower, other._lower),
            point.min_point(self._upper, other._upper),
        ).area()

    def center(self):
        """
        Componentwise midpoint of the corners.

        Integer boxes keep their dtype, halving towards zero.

        Raises:
            ValueError: on an empty box.
        """
        if self.is_empty():
            raise ValueError("The empty AABB has no center.")
        return point.component_wise(self._lower, self._upper, _midpoint)

    # =============================  Distances  ==============================

    def min_point(self, p):
        """
        Returns the point of the box closest to `p`, `p` itself if it is
        inside.
        """
        p = self._as_query(p)
        return point.min_point(self._upper, point.max_point(self._lower, p))

    def distance_2(self, p):
        p = self._as_query(p)
        if self.contains_point(p):
            return dtypes.zero(dtypes.result_dtype(self.dtype, p.dtype))
        return point.length_2(point.sub(self.min_point(p), p))

    def min_max_dist_2(self, p):
        """
        Returns MINMAXDIST, squared, from `p` to the box.

        Per dimension, the corner offset of smaller magnitude is the near one
        and the other the far one, ties making the upper corner near. The
        result is the smallest squared norm among the offset vectors taking
        the near offset in every dimension but one, where they take the far
        offset.
        """
        p = self._as_query(p)
        lower = point.sub(self._lower, p)
        upper = point.sub(self._upper, p)
        near = point.new(self.ndims, lower.dtype)
        far = point.new(self.ndims, lower.dtype)
        for i in range(self.ndims):
            l, u = point.nth(lower, i), point.nth(upper, i)
            if abs(l) < abs(u):
                point.set_nth(near, i, l)
                point.set_nth(far, i, u)
            else:
                point.set_nth(near, i, u)
                point.set_nth(far, i, l)
        # Row k is the near offsets with the far one in dimension k.
        candidates = numpy.tile(near, (self.ndims, 1))
        numpy.fill_diagonal(candidates, far)
        return numpy.sum(candidates * candidates, axis=1,
                         dtype=candidates.dtype).min()

    # ===============================  Sorting  ==============================

    @classmethod
    def sort_envelopes(cls, axis, items, key=None):
        """
        Sorts `items` in place by `key(item).lower[axis]`, ascending.

        The sort is stable. All keys are computed before `items` is modified.

        Args:
            axis (int): dimension to sort along.
            items (list): objects to sort.
            key (callable, optional): maps an item to its AABB. Defaults to
                the identity.

        Raises:
            IndexError: if `axis` is not a dimension of some envelope.
            ValueError: if some key coordinate is NaN.
        """
        if key is None:
            key = toolz.identity

        def lower_along_axis(item):
            envel = key(item)
            if not 0 <= axis < envel.ndims:
                raise IndexError(
                    "Axis {} out of range for {} dimensions."
                    .format(axis, envel.ndims)
                )
            value = point.nth(envel._lower, axis)
            if value != value:  # NaN
                raise ValueError(
                    "Cannot sort along axis {}: NaN in {!r}."
                    .format(axis, envel)
                )
            return value

        keys = [lower_along_axis(item) for item in items]
        order = sorted(range(len(keys)), key=keys.__getitem__)
        items[:] = [items[i] for i in order]
        logger.debug("Sorted %d envelopes along axis %d", len(keys), axis)
