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
Scalar policy for envelope coordinates.

Coordinates are stored in numpy arrays. Squared distances and the MINMAXDIST
algebra need negative offsets, so only signed integer and floating point
dtypes are accepted.
"""
import logging

import numpy

logger = logging.getLogger(__name__)

# Used when no dtype can be inferred, e.g. for an empty envelope.
DEFAULT_DTYPE = numpy.float64

_SIGNED_KINDS = "if"


def scalar_dtype(dtype=None):
    """
    Validates and returns a coordinate dtype.

    Args:
        dtype (numpy dtype-like, optional): Defaults to DEFAULT_DTYPE.

    Raises:
        ValueError: if the dtype is not a signed integer or floating dtype.
    """
    if dtype is None:
        logger.debug("No dtype given, falling back to %s", DEFAULT_DTYPE)
        dtype = DEFAULT_DTYPE
    dtype = numpy.dtype(dtype)
    if dtype.kind not in _SIGNED_KINDS:
        raise ValueError(
            "Unsupported coordinate dtype {}: must be a signed integer or "
            "floating point type.".format(dtype)
        )
    return dtype


def result_dtype(*dtypes):
    """Promoted dtype of combined operands, validated."""
    return scalar_dtype(numpy.result_type(*dtypes))


def scalar_bounds(dtype=None):
    """
    Returns the (MIN, MAX) representable finite values of `dtype`.
    """
    dtype = scalar_dtype(dtype)
    info = numpy.iinfo(dtype) if dtype.kind == "i" else numpy.finfo(dtype)
    return dtype.type(info.min), dtype.type(info.max)


def zero(dtype=None):
    return scalar_dtype(dtype).type(0)


__all__ = [
    "DEFAULT_DTYPE",
    "result_dtype",
    "scalar_bounds",
    "scalar_dtype",
    "zero",
]
