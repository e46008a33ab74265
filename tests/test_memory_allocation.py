"""Tests for storage rack allocation (contiguous fit strategies).

Classic textbook layout: racks of 100, 500, 200, 300 and 600 units and
orders of 212, 417, 112 and 426 units.
"""
import pytest

from warehouse_os.exceptions import InvalidParameterError
from warehouse_os.memory_allocation import FIT_STRATEGIES, MemoryAllocator
from warehouse_os.models import StorageBlock

from .conftest import make_tasks

_RACKS = [100, 500, 200, 300, 600]
_ORDERS = [212, 417, 112, 426]


def _allocator(racks=_RACKS, orders=_ORDERS) -> MemoryAllocator:
	blocks = [StorageBlock(i + 1, size) for i, size in enumerate(racks)]
	tasks = make_tasks(*[(i + 1, 0, size) for i, size in enumerate(orders)])
	return MemoryAllocator(blocks, tasks, sum(racks))


class TestFirstFit:
	def test_assignments(self) -> None:
		"""Each order takes the first free rack that is big enough."""
		result = _allocator().first_fit()
		assert result.assignments == {1: 2, 2: 5, 3: 3, 4: None}

	def test_statistics(self) -> None:
		"""Statistics only count orders that were placed."""
		result = _allocator().first_fit()
		assert result.allocated_count == 3
		assert result.total_tasks == 4
		assert result.total_allocated == 1300
		assert result.total_used == 741
		assert result.wasted_space == 559
		assert result.utilization == pytest.approx(100 * 741 / 1700)


class TestBestFit:
	def test_assignments(self) -> None:
		"""Each order takes the tightest free rack."""
		result = _allocator().best_fit()
		assert result.assignments == {1: 4, 2: 2, 3: 3, 4: 5}
		assert result.wasted_space == 1600 - 1167

	def test_tie_goes_to_first_rack(self) -> None:
		"""Equally tight racks resolve to the lower position."""
		result = _allocator([300, 300], [250]).best_fit()
		assert result.assignments == {1: 1}

	def test_never_wastes_more_than_first_fit(self) -> None:
		"""Per order, Best Fit leftover is at most First Fit leftover."""
		first = _allocator().first_fit()
		best = _allocator().best_fit()
		sizes = {i + 1: size for i, size in enumerate(_RACKS)}
		for order_id, size in enumerate(_ORDERS, start=1):
			if first.assignments[order_id] and best.assignments[order_id]:
				assert sizes[best.assignments[order_id]] - size <= sizes[first.assignments[order_id]] - size


class TestWorstFit:
	def test_assignments(self) -> None:
		"""Each order takes the largest free rack."""
		result = _allocator().worst_fit()
		assert result.assignments == {1: 5, 2: 2, 3: 4, 4: None}

	def test_tie_goes_to_first_rack(self) -> None:
		result = _allocator([300, 300], [250]).worst_fit()
		assert result.assignments == {1: 1}


class TestNextFit:
	def test_assignments(self) -> None:
		"""Scanning resumes after the rack used last, wrapping around."""
		allocator = _allocator()
		result = allocator.next_fit()
		assert result.assignments == {1: 2, 2: 5, 3: 3, 4: None}
		assert allocator.next_fit_index == 3

	def test_cursor_persists_between_calls(self) -> None:
		"""A second pass on the same allocator does not restart at rack one."""
		allocator = _allocator([100, 100, 100], [50])
		picks = []
		for _ in range(4):
			allocator.release_all()
			picks.append(allocator.next_fit().assignments[1])
		assert picks == [1, 2, 3, 1]

	def test_first_fit_always_restarts(self) -> None:
		"""First Fit has no cursor, so a freed layout gives the same pick."""
		allocator = _allocator([100, 100, 100], [50])
		picks = []
		for _ in range(3):
			allocator.release_all()
			picks.append(allocator.first_fit().assignments[1])
		assert picks == [1, 1, 1]


class TestMemoryAllocator:
	@pytest.mark.parametrize('strategy', sorted(FIT_STRATEGIES))
	def test_never_places_order_in_smaller_rack(self, strategy) -> None:
		"""Whatever the strategy, a placed order fits its rack."""
		result = _allocator().allocate(strategy)
		sizes = {b.block_id: b.size for b in result.blocks}
		for task in result.tasks:
			block_id = result.assignments[task.id]
			if block_id is not None:
				assert sizes[block_id] >= task.burst_time

	def test_racks_are_copied(self) -> None:
		"""The caller's rack list is not marked allocated."""
		blocks = [StorageBlock(1, 500)]
		MemoryAllocator(blocks, make_tasks((1, 0, 10)), 500).first_fit()
		assert not blocks[0].is_allocated

	def test_racks_stay_allocated_within_allocator(self) -> None:
		"""Without a release, a second pass finds the racks taken."""
		allocator = _allocator([100], [50])
		allocator.first_fit()
		assert allocator.first_fit().assignments == {1: None}

	def test_oversized_order_is_reported_not_raised(self) -> None:
		"""An order larger than every rack simply stays unplaced."""
		result = _allocator([10, 20], [50]).best_fit()
		assert result.assignments == {1: None}
		assert result.allocated_count == 0
		assert result.wasted_space == 0

	def test_unknown_strategy(self) -> None:
		with pytest.raises(InvalidParameterError):
			_allocator().allocate('random-fit')
