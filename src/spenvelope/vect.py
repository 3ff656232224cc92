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
"""
Vectorized collections of axis-aligned bounding boxes.

:class:`AABBVect` holds N boxes as two (N, D) arrays of lower and upper
corners. Queries against M other boxes or points broadcast to (N, M)
results, which is what batched searches through an index level need.
Semantics are those of :class:`spenvelope.aabb.AABB`, row by row.
"""
import numbers

import numpy
import numpy.ma

from . import aabb
from . import dtypes


class AABBVect:
    def __init__(self, coords=None, maxs=None, mins=None, interleaved=True,
                 dtype=None):
        """
        Either pass coords and optionally interleaved, or pass it mins and maxs
        separately.

        Args:
            coords (array-like): either an (N, D, 2) array of (min, max) pairs
                per dimension, or an (N, 2D) array. Rows of the latter are
                (min0, max0, min1, max1, ...) if `interleaved`, else
                (min0, min1, ..., max0, max1, ...).
            mins, maxs (array-like): (N, D) arrays of corners.
            dtype (numpy dtype-like, optional): coordinate dtype.
        """
        cases = {
            "mixed": (coords is not None and maxs is None and mins is None),
            "mins-maxs": (
                maxs is not None and coords is None and mins is not None),
        }
        if cases["mixed"]:
            self._from_array(coords, interleaved, dtype)
        elif cases["mins-maxs"]:
            self._from_mins_maxs(mins, maxs, dtype)
        else:
            raise ValueError(
                "Either coords or both mins and maxs must be given (but not "
                "all together)."
            )

    @classmethod
    def from_aabbs(cls, aabbs, ndims=None, dtype=None):
        """
        Collects an iterable of AABB. `ndims` is needed if it may be empty.
        """
        aabbs = list(aabbs)
        if not aabbs:
            if ndims is None:
                raise ValueError(
                    "ndims is required to collect no envelopes.")
            dtype = dtypes.scalar_dtype(dtype)
            return cls(mins=numpy.zeros((0, ndims), dtype=dtype),
                       maxs=numpy.zeros((0, ndims), dtype=dtype))
        return cls(mins=[a.lower for a in aabbs],
                   maxs=[a.upper for a in aabbs], dtype=dtype)

    def _from_array(self, coords, interleaved=True, dtype=None):
        coords = numpy.array(coords, dtype=dtype)
        three_dims = (coords.ndim == 3 and coords.shape[2] == 2)
        two_dims = (coords.ndim == 2 and coords.shape[1] % 2 == 0)
        if not (three_dims or two_dims):
            raise ValueError(
                "Coords third dimension must correspond to mins and "
                "maxs in each coordinate dimension, and must be of "
                "of even length."
            )
        if two_dims:
            if interleaved:
                coords = coords.reshape(coords.shape[0], -1, 2)
            else:  # corners
                coords = numpy.swapaxes(
                    coords.reshape(coords.shape[0], 2, -1), 1, 2)
        self._from_mins_maxs(coords[:, :, 0], coords[:, :, 1])

    def _from_mins_maxs(self, mins, maxs, dtype=None):
        mins = numpy.array(mins, dtype=dtype)
        maxs = numpy.array(maxs, dtype=dtype)
        if mins.shape != maxs.shape:
            raise ValueError("Mins and maxs must be of same shape")
        if mins.ndim != 2 or mins.shape[1] == 0:
            raise ValueError(
                "Mins and maxs must be (N, D) arrays with D > 0, got shape {}."
                .format(mins.shape)
            )
        common = dtypes.result_dtype(mins.dtype, maxs.dtype)
        self.mins = mins.astype(common, copy=False)
        self.maxs = maxs.astype(common, copy=False)

    def __getitem__(self, idx):
        if isinstance(idx, numbers.Integral):
            return aabb.AABB(self.mins[idx], self.maxs[idx])
        return self.__class__(mins=self.mins[idx], maxs=self.maxs[idx])

    def __len__(self):
        return self.mins.shape[0]

    def __iter__(self):
        for i in range(len(self)):
            yield self[i]

    def __repr__(self):
        return "{}(n={}, ndims={}, dtype={})".format(
            self.__class__.__name__, len(self), self.ndims, self.dtype)

    @property
    def ndims(self):
        return self.mins.shape[1]

    @property
    def dtype(self):
        return self.mins.dtype

    def check_dims(self, other):
        if self.ndims != other.ndims:
            raise ValueError(
                "Incompatible number of dimensions {} and {} in {}."
                .format(self.ndims, other.ndims, self.__class__.__name__)
            )

    def _as_points(self, points):
        points = numpy.asarray(points)
        if points.ndim == 1:
            points = points.reshape(1, -1)
        if points.ndim != 2 or points.shape[1] != self.ndims:
            raise ValueError(
                "Expected an (M, {}) array of points, got shape {}."
                .format(self.ndims, points.shape)
            )
        dtypes.scalar_dtype(points.dtype)
        return points

    def _empty_rows(self):
        return (self.mins > self.maxs).any(axis=1)

    # Broadcast (N, D) corners against (M, D) points to (N, M, D).
    def _broadcast(self, points):
        points = self._as_points(points)
        n_shape = (len(self), 1, self.ndims)
        m_shape = (1, points.shape[0], self.ndims)
        return (self.mins.reshape(n_shape), self.maxs.reshape(n_shape),
                points.reshape(m_shape))

    # ==============================  Measures  ==============================

    @property
    def centers(self):
        """(N, D) midpoints. Empty rows give meaningless values."""
        return aabb._midpoint(self.mins, self.maxs)

    def areas(self):
        return numpy.prod(aabb._extents(self.mins, self.maxs), axis=1,
                          dtype=self.dtype)

    def margin_values(self):
        if self.dtype.kind == "i" and self._empty_rows().any():
            # maxs - mins may not fit in the dtype, use python ints.
            diag = self.maxs.astype(object) - self.mins.astype(object)
        else:
            with numpy.errstate(over="ignore"):
                diag = self.maxs - self.mins
        return numpy.maximum(diag.sum(axis=1), 0).astype(self.dtype)

    # =============================  Predicates  =============================

    def _intersects_by_dims(self, other):
        # Uses broadcasting to vectorize comparisons between all pairs of self
        # and other
        self_shape = (len(self), 1, self.ndims)
        other_shape = (1, len(other), other.ndims)
        return (
            (self.mins.reshape(self_shape) <= other.maxs.reshape(other_shape))
            & (self.maxs.reshape(self_shape) >= other.mins.reshape(other_shape))
        )

    def intersects(self, other):
        """(N, M) boolean matrix of intersecting pairs."""
        self.check_dims(other)
        return self._intersects_by_dims(other).all(axis=2)

    def contains_points(self, points):
        mins, maxs, points = self._broadcast(points)
        return ((mins <= points) & (maxs >= points)).all(axis=2)

    # ==============================  Distances  =============================

    def distance_2(self, points):
        """(N, M) squared distances between boxes and points."""
        mins, maxs, points = self._broadcast(points)
        diff = numpy.minimum(maxs, numpy.maximum(mins, points)) - points
        return (diff * diff).sum(axis=2, dtype=diff.dtype)

    def min_max_dist_2(self, points):
        """(N, M) squared MINMAXDIST between boxes and points."""
        mins, maxs, points = self._broadcast(points)
        lower = mins - points
        upper = maxs - points
        near_lower = numpy.abs(lower) < numpy.abs(upper)
        near = numpy.where(near_lower, lower, upper)
        far = numpy.where(near_lower, upper, lower)
        # (N, M, D, D): candidate k takes the far offset in dimension k only.
        diagonal = numpy.eye(self.ndims, dtype=bool)
        candidates = numpy.where(diagonal, far[..., numpy.newaxis, :],
                                 near[..., numpy.newaxis, :])
        return (candidates * candidates).sum(
            axis=3, dtype=candidates.dtype).min(axis=2)

    # ============================  Combinations  ============================

    def merged(self):
        """The AABB of the whole collection, empty if there are no rows."""
        if len(self) == 0:
            return aabb.AABB.new_empty(self.ndims, self.dtype)
        return aabb.AABB(self.mins.min(axis=0), self.maxs.max(axis=0))

    def mergeby(self, indexes):
        """
        Merges groups of rows.

        Args:
            indexes (2d-int-array): (G, K) row indices, one group per row.
                Masked entries of a masked array are ignored, a fully masked
                group yields the empty box.

        Returns:
            AABBVect: G merged boxes.
        """
        lowest, highest = dtypes.scalar_bounds(self.dtype)
        # Masked slots may hold any padding value, point them at row 0.
        data = numpy.ma.filled(indexes, 0)
        mask = numpy.repeat(numpy.ma.getmaskarray(indexes), self.ndims)
        mask = mask.reshape(*data.shape, self.ndims)
        return self.__class__(
            mins=numpy.ma.array(self.mins[data], mask=mask)
            .min(axis=1).filled(highest),
            maxs=numpy.ma.array(self.maxs[data], mask=mask)
            .max(axis=1).filled(lowest),
        )

    # ===============================  Sorting  ==============================

    def argsort(self, axis):
        """
        Stable order of the rows by lower coordinate along `axis`.

        Raises:
            IndexError: if `axis` is not a dimension.
            ValueError: if some of these coordinates are NaN.
        """
        if not 0 <= axis < self.ndims:
            raise IndexError(
                "Axis {} out of range for {} dimensions."
                .format(axis, self.ndims)
            )
        values = self.mins[:, axis]
        if aabb._has_nan(values):
            raise ValueError("Cannot sort along axis {}: NaN coordinate."
                             .format(axis))
        return numpy.argsort(values, kind="stable")
