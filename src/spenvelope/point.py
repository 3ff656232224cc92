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
Points as seen by envelopes.

A point is any 1-d array-like of coordinates. It is normalized to a 1-d numpy
array whose dtype passes :func:`spenvelope.dtypes.scalar_dtype`, and the
functions below give envelopes the few coordinate operations they rely on.
Binary operations require points of the same dimensionality.
"""
import functools

import numpy

from . import dtypes


def as_point(coords, dtype=None):
    """
    Normalizes `coords` to a fresh 1-d coordinate array.

    Args:
        coords (array-like): coordinates, one per dimension.
        dtype (numpy dtype-like, optional): coordinate dtype. Inferred from
            `coords` when omitted.

    Raises:
        ValueError: if `coords` is not 1-d, is empty or has an unsupported
            dtype.
    """
    if dtype is not None:
        dtype = dtypes.scalar_dtype(dtype)
    arr = numpy.array(coords, dtype=dtype)
    if arr.ndim != 1:
        raise ValueError(
            "A point must be a 1-d sequence of coordinates, got shape {}."
            .format(arr.shape)
        )
    if arr.shape[0] == 0:
        raise ValueError("Zero-dimensional points are not supported.")
    dtypes.scalar_dtype(arr.dtype)
    return arr


def check_dims(p, q):
    if p.shape != q.shape:
        raise ValueError(
            "Incompatible number of dimensions {} and {}."
            .format(dimensions(p), dimensions(q))
        )


def dimensions(p):
    return p.shape[0]


def new(ndims, dtype=None):
    """Point with unspecified coordinates, meant to be overwritten."""
    return numpy.empty(ndims, dtype=dtypes.scalar_dtype(dtype))


def from_value(value, ndims, dtype=None):
    """Point all of whose coordinates equal `value`."""
    if ndims < 1:
        raise ValueError("Zero-dimensional points are not supported.")
    return numpy.full(ndims, value, dtype=dtypes.scalar_dtype(dtype))


def nth(p, i):
    return p[i]


def set_nth(p, i, value):
    p[i] = value


def min_point(p, q):
    check_dims(p, q)
    return numpy.minimum(p, q)


def max_point(p, q):
    check_dims(p, q)
    return numpy.maximum(p, q)


def component_wise(p, q, fnc):
    """
    Combines `p` and `q` coordinate by coordinate.

    `fnc` receives whole arrays and must act elementwise, as numpy ufuncs and
    arithmetic operators do.
    """
    check_dims(p, q)
    return numpy.asarray(fnc(p, q))


def all_component_wise(p, q, pred):
    """True if the elementwise predicate `pred` holds in every dimension."""
    check_dims(p, q)
    return bool(numpy.all(pred(p, q)))


def fold(p, init, fnc):
    """Left fold of `fnc` over the coordinates of `p`."""
    return functools.reduce(fnc, p, init)


def sub(p, q):
    check_dims(p, q)
    return p - q


def length_2(p):
    """Sum of squared coordinates, in the dtype of `p`."""
    return numpy.sum(p * p, dtype=p.dtype)


__all__ = [
    "all_component_wise",
    "as_point",
    "check_dims",
    "component_wise",
    "dimensions",
    "fold",
    "from_value",
    "length_2",
    "max_point",
    "min_point",
    "new",
    "nth",
    "set_nth",
    "sub",
]
