"""Unit coverage for the coordinate dtype policy."""
import numpy
import pytest

from spenvelope import dtypes


def test_default_dtype():
    assert dtypes.scalar_dtype() == numpy.float64


@pytest.mark.parametrize("dtype", ["int8", "int32", "int64", "float16",
                                   "float32", "float64"])
def test_signed_dtypes_are_accepted(dtype):
    assert dtypes.scalar_dtype(dtype) == numpy.dtype(dtype)


@pytest.mark.parametrize("dtype", ["uint8", "uint64", bool, complex, object])
def test_unsigned_and_non_numeric_dtypes_are_rejected(dtype):
    with pytest.raises(ValueError, match="Unsupported coordinate dtype"):
        dtypes.scalar_dtype(dtype)


def test_integer_bounds():
    assert dtypes.scalar_bounds("int8") == (-128, 127)
    lowest, highest = dtypes.scalar_bounds("int64")
    assert lowest == numpy.iinfo(numpy.int64).min
    assert highest == numpy.iinfo(numpy.int64).max
    assert lowest.dtype == numpy.int64


def test_float_bounds_are_finite():
    lowest, highest = dtypes.scalar_bounds("float32")
    assert numpy.isfinite(lowest) and numpy.isfinite(highest)
    assert highest == numpy.finfo(numpy.float32).max
    assert lowest == -highest


def test_result_dtype_promotes():
    assert dtypes.result_dtype(numpy.int64, numpy.float32) == numpy.float64
    assert dtypes.result_dtype(numpy.int8, numpy.int16) == numpy.int16


def test_zero_keeps_dtype():
    assert dtypes.zero("int32").dtype == numpy.int32
    assert dtypes.zero() == 0.
