"""
Tests for Shape & Tensor
========================

Validates shape queries, tensor allocation, element-wise operations and
borrowed axis-0 views.
"""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from neural.core.tensor import (
    INVALID_SHAPE,
    Shape,
    Tensor,
    axpy,
    tensor_add,
    tensor_assign,
    tensor_constant,
    tensor_copy,
    tensor_ones,
    tensor_random_uniform,
    tensor_sub,
    tensor_zeros,
)
from neural.errors import BorrowedViewError, ShapeError, ShapeMismatchError


# ────────────────────────────────────────────────────────────────────
# Shape
# ────────────────────────────────────────────────────────────────────
class TestShape:
    @pytest.mark.parametrize("dims", [(0,), (3, 0), (2, -1), (1, 1, 1, 1, 0), (-1, 4)])
    def test_non_positive_axis_is_invalid(self, dims):
        assert not Shape(*dims).is_valid()

    def test_invalid_sentinel(self):
        assert not INVALID_SHAPE.is_valid()
        assert INVALID_SHAPE.dimension == (-1, -1, -1, -1, -1)

    @pytest.mark.parametrize("dims", [(1,), (7,), (3, 4), (2, 3, 4), (2, 1, 3, 1, 5)])
    def test_elem_count_is_product(self, dims):
        shape = Shape(*dims)
        assert shape.is_valid()
        assert shape.elem_count() == int(np.prod(dims))

    @pytest.mark.parametrize(
        "dims, expected",
        [((1,), 0), ((5,), 1), ((5, 2), 2), ((1, 1, 3), 3), ((2, 1, 1, 4), 4), ((2, 1, 1, 1, 4), 5)],
    )
    def test_num_dimensions(self, dims, expected):
        assert Shape(*dims).num_dimensions() == expected

    def test_is_nd_queries(self):
        assert Shape(5).is_1d()
        assert Shape(5, 2).is_2d() and not Shape(5, 2).is_1d()
        assert Shape(2, 2, 2).is_3d()
        assert Shape(2, 2, 2, 2).is_4d()
        assert Shape(2, 2, 2, 2, 2).is_5d()

    def test_item_stride_and_dimension(self):
        shape = Shape(4, 3, 2)
        assert shape.item_stride() == 6
        assert shape.item_dimension() == Shape(3, 2)
        assert Shape(10).item_dimension() == Shape(1)

    def test_with_batch_size(self):
        assert Shape(16).with_batch_size(8) == Shape(8)
        assert Shape(4, 3).with_batch_size(2) == Shape(2, 3)

    def test_batched_inverts_item_dimension(self):
        assert Shape(3).batched(10) == Shape(10, 3)
        assert Shape(10, 3).item_dimension() == Shape(3)

    def test_batched_5d_rejected(self):
        with pytest.raises(ShapeError):
            Shape(1, 1, 1, 1, 2).batched(3)

    def test_equality_and_hash(self):
        assert Shape(3) == Shape(3, 1, 1, 1, 1)
        assert Shape(3, 2) != Shape(2, 3)
        assert len({Shape(3), Shape(3, 1)}) == 1

    def test_from_dims(self):
        assert Shape.from_dims((2, 3)) == Shape(2, 3)
        assert Shape.from_dims(()) == Shape(1)
        with pytest.raises(ShapeError):
            Shape.from_dims((1, 2, 3, 4, 5, 6))

    def test_as_tuple(self):
        assert Shape(4, 3).as_tuple() == (4, 3)
        assert Shape(1).as_tuple() == (1,)


# ────────────────────────────────────────────────────────────────────
# Tensor allocation
# ────────────────────────────────────────────────────────────────────
class TestTensor:
    def test_default_is_unallocated(self):
        t = Tensor()
        assert t.shape == INVALID_SHAPE
        assert t.raw_data.size == 0
        assert len(t) == 0
        assert not t.is_view

    def test_allocation_zero_filled_float32(self):
        t = Tensor(Shape(2, 3))
        assert t.raw_data.shape == (6,)
        assert t.raw_data.dtype == np.float32
        np.testing.assert_array_equal(t.raw_data, np.zeros(6))

    def test_resize_invalid_shape(self):
        with pytest.raises(ShapeError):
            Tensor().resize(INVALID_SHAPE)

    def test_resize_same_count_keeps_buffer(self):
        t = Tensor(Shape(6))
        buf = t.raw_data
        t.resize(Shape(2, 3))
        assert t.raw_data is buf
        assert t.shape == Shape(2, 3)

    def test_resize_new_count_reallocates(self):
        t = Tensor(Shape(2))
        t.fill_with(5.0)
        t.resize(Shape(3))
        np.testing.assert_array_equal(t.raw_data, np.zeros(3))

    def test_fill_with(self):
        t = Tensor(Shape(4))
        t.fill_with(2.5)
        np.testing.assert_array_equal(t.raw_data, np.full(4, 2.5))

    def test_from_array_infers_shape(self):
        data = np.arange(6, dtype=np.float64).reshape(2, 3)
        t = Tensor.from_array(data)
        assert t.shape == Shape(2, 3)
        np.testing.assert_array_equal(t.to_numpy(), data)

    def test_from_array_copies(self):
        data = np.zeros(3, dtype=np.float32)
        t = Tensor.from_array(data)
        t.raw_data[0] = 1.0
        assert data[0] == 0.0

    def test_from_array_explicit_shape(self):
        t = Tensor.from_array([1.0, 2.0, 3.0, 4.0], Shape(2, 2))
        assert t.shape == Shape(2, 2)
        with pytest.raises(ShapeMismatchError):
            Tensor.from_array([1.0, 2.0, 3.0], Shape(2, 2))


# ────────────────────────────────────────────────────────────────────
# Element-wise operations
# ────────────────────────────────────────────────────────────────────
class TestTensorOps:
    @pytest.mark.parametrize("dims", [(1,), (5,), (3, 4), (2, 2, 3)])
    def test_copy_round_trip(self, dims):
        rng = np.random.default_rng(0)
        t = Tensor.from_array(rng.standard_normal(dims))
        t2 = Tensor()
        tensor_assign(t2, t)
        t3 = Tensor(t2.shape)
        tensor_copy(t3, t2)
        assert t3.shape == t.shape
        np.testing.assert_array_equal(t3.raw_data, t.raw_data)

    def test_assign_makes_independent_copy(self):
        t = Tensor.from_array([1.0, 2.0])
        t2 = Tensor()
        tensor_assign(t2, t)
        t2.raw_data[0] = 9.0
        assert t.raw_data[0] == 1.0

    def test_copy_shape_mismatch(self):
        with pytest.raises(ShapeMismatchError):
            tensor_copy(Tensor(Shape(3)), Tensor(Shape(4)))
        with pytest.raises(ShapeMismatchError):
            tensor_copy(Tensor(), Tensor(Shape(4)))

    def test_add_sub(self):
        a = Tensor.from_array([1.0, 2.0, 3.0])
        b = Tensor.from_array([0.5, 0.5, 0.5])
        tensor_add(a, b)
        np.testing.assert_allclose(a.raw_data, [1.5, 2.5, 3.5])
        tensor_sub(a, b)
        tensor_sub(a, b)
        np.testing.assert_allclose(a.raw_data, [0.5, 1.5, 2.5])

    def test_add_sub_shape_mismatch(self):
        with pytest.raises(ShapeMismatchError):
            tensor_add(Tensor(Shape(2)), Tensor(Shape(2, 2)))
        with pytest.raises(ShapeMismatchError):
            tensor_sub(Tensor(Shape(2)), Tensor(Shape(3)))

    def test_constructors(self):
        np.testing.assert_array_equal(tensor_constant(3.0, Shape(2)).raw_data, [3.0, 3.0])
        np.testing.assert_array_equal(tensor_zeros(Shape(3)).raw_data, np.zeros(3))
        np.testing.assert_array_equal(tensor_ones(Shape(2, 2)).raw_data, np.ones(4))

    def test_random_uniform_range_and_seed(self):
        a = tensor_random_uniform(Shape(100), np.random.default_rng(7))
        b = tensor_random_uniform(Shape(100), np.random.default_rng(7))
        assert np.all(a.raw_data >= 0.0) and np.all(a.raw_data < 1.0)
        np.testing.assert_array_equal(a.raw_data, b.raw_data)

    def test_axpy(self):
        y = np.array([1.0, 1.0], dtype=np.float32)
        axpy(2.0, np.array([1.0, -1.0], dtype=np.float32), y)
        np.testing.assert_allclose(y, [3.0, -1.0])


# ────────────────────────────────────────────────────────────────────
# Borrowed views
# ────────────────────────────────────────────────────────────────────
class TestTensorViews:
    @pytest.fixture
    def batch(self):
        return Tensor.from_array(np.arange(12, dtype=np.float32).reshape(4, 3))

    def test_view_shape_and_values(self, batch):
        v = batch[1]
        assert v.shape == Shape(3)
        np.testing.assert_array_equal(v.raw_data, [3.0, 4.0, 5.0])

    def test_view_shares_buffer(self, batch):
        v = batch[2]
        assert v.is_view and v.base is batch
        v.raw_data[0] = 100.0
        assert batch.raw_data[6] == 100.0

    def test_view_resize(self, batch):
        v = batch[0]
        v.resize(Shape(3))
        with pytest.raises(BorrowedViewError):
            v.resize(Shape(4))

    def test_index_out_of_range(self, batch):
        with pytest.raises(IndexError):
            batch[4]
        with pytest.raises(IndexError):
            batch[-1]

    def test_index_unallocated(self):
        with pytest.raises(ShapeError):
            Tensor()[0]

    def test_iteration(self, batch):
        items = list(batch)
        assert len(items) == 4
        np.testing.assert_array_equal(items[3].raw_data, [9.0, 10.0, 11.0])

    def test_view_of_view(self):
        t = Tensor.from_array(np.arange(12, dtype=np.float32).reshape(2, 2, 3))
        inner = t[1][0]
        assert inner.shape == Shape(3)
        np.testing.assert_array_equal(inner.raw_data, [6.0, 7.0, 8.0])

    def test_scalar_items(self):
        t = Tensor.from_array([1.0, 2.0, 3.0])
        assert t[2].shape == Shape(1)
        assert t[2].raw_data[0] == 3.0

    def test_reallocation_blocked_by_live_view(self, batch):
        v = batch[1]
        with pytest.raises(BorrowedViewError):
            batch.resize(Shape(5, 3))
        # buffer still shared after the refused resize
        v.raw_data[0] = -7.0
        assert batch.raw_data[3] == -7.0

    def test_same_count_resize_with_live_view(self, batch):
        v = batch[0]
        batch.resize(Shape(3, 4))
        assert batch.shape == Shape(3, 4)
        v.raw_data[0] = 42.0
        assert batch.raw_data[0] == 42.0

    def test_reallocation_after_views_released(self, batch):
        v = batch[2]
        del v
        batch.resize(Shape(5, 3))
        assert batch.shape == Shape(5, 3)
        np.testing.assert_array_equal(batch.raw_data, np.zeros(15))
