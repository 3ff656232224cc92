"""
Envelopes for spatial indexing.

R-trees and other bounding volume hierarchies decide where to insert an
object, how to split an overflowing node and which branches to prune during a
nearest-neighbour search by looking only at envelopes: simple shapes that
enclose the indexed geometries. This package provides the envelope algebra.

:class:`AABB` is an n-dimensional axis-aligned bounding box over numpy
coordinates, implementing the :class:`Envelope` interface. :class:`AABBVect`
evaluates the same queries for many boxes at once.
"""
import logging

from .aabb import AABB  # noqa: F401
from .envelope import Envelope, bound_all  # noqa: F401
from .vect import AABBVect  # noqa: F401

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
