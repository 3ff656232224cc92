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
Envelope interface.

Spatial indexes never look at the indexed geometries directly. They reason on
simplified shapes enclosing them, called envelopes: choosing a subtree on
insertion, scoring splits and pruning nearest-neighbour searches are all
expressed through the small algebra defined here.

The axis-aligned bounding box, :class:`spenvelope.aabb.AABB`, is the concrete
envelope shipped with this package.
'''
import abc
import logging

import toolz

logger = logging.getLogger(__name__)


# Dispatching bound_all to its class method
def bound_all(envelopes):
    """
    Returns the smallest envelope containing all of `envelopes`.

    The envelope class is the one of the first element.

    Raises:
        ValueError: if `envelopes` is empty.
    """
    try:
        first, envelopes = toolz.peek(envelopes)
    except StopIteration:
        raise ValueError(
            "Cannot bound an empty collection of envelopes.") from None
    return type(first).merge_all(envelopes)


class Envelope(abc.ABC):
    """
    Abstract interface for envelopes.

    An envelope is a closed region of n-dimensional space. Implementations
    must provide an empty envelope which contains nothing, intersects
    nothing, and is the identity of :meth:`merge`.
    """
    __slots__ = ()

    @classmethod
    @abc.abstractmethod
    def new_empty(cls, ndims, dtype=None):
        """Returns the empty envelope in `ndims` dimensions."""
        pass

    @property
    @abc.abstractmethod
    def ndims(self):
        pass

    @property
    @abc.abstractmethod
    def dtype(self):
        """Coordinate dtype."""
        pass

    @abc.abstractmethod
    def contains_point(self, point):
        pass

    @abc.abstractmethod
    def contains_envelope(self, other):
        pass

    @abc.abstractmethod
    def intersects(self, other):
        """
        Returns True if `self` and `other` share at least one point.
        """
        pass

    @abc.abstractmethod
    def merge(self, other):
        """Grows `self`, in place, to the envelope of `self` and `other`."""
        pass

    @abc.abstractmethod
    def merged(self, other):
        """Returns the envelope of `self` and `other` as a new value."""
        pass

    @abc.abstractmethod
    def area(self):
        pass

    @abc.abstractmethod
    def margin_value(self):
        pass

    @abc.abstractmethod
    def intersection_area(self, other):
        pass

    @abc.abstractmethod
    def center(self):
        pass

    @abc.abstractmethod
    def distance_2(self, point):
        """
        Returns the squared distance from `point` to the envelope, zero
        inside.
        """
        pass

    @abc.abstractmethod
    def min_max_dist_2(self, point):
        """
        Returns an upper bound on the squared distance from `point` to its
        nearest object within the envelope.
        """
        pass

    @classmethod
    @abc.abstractmethod
    def sort_envelopes(cls, axis, items, key=None):
        """
        Sorts `items` in place by the lower coordinate along `axis` of
        their envelope `key(item)`.
        """
        pass

    @classmethod
    def merge_all(cls, envelopes, ndims=None, dtype=None):
        """
        Returns the envelope of a collection of envelopes.

        Args:
            envelopes (iterable): envelopes of class `cls`.
            ndims (int, optional): dimensionality, only needed when
                `envelopes` may be empty.
            dtype (numpy dtype-like, optional): coordinate dtype of the empty
                envelope the fold starts from. Defaults to the dtype of the
                first envelope.
        """
        try:
            first, envelopes = toolz.peek(envelopes)
        except StopIteration:
            if ndims is None:
                raise ValueError(
                    "ndims is required to bound an empty collection."
                ) from None
            logger.debug("Bounding an empty collection in %d dimensions",
                         ndims)
            return cls.new_empty(ndims, dtype)
        result = cls.new_empty(
            first.ndims, first.dtype if dtype is None else dtype)
        for envel in envelopes:
            result.merge(envel)
        return result
