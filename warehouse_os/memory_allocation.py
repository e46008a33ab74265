"""Storage rack allocation: contiguous fit strategies over fixed racks."""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .exceptions import InvalidParameterError
from .models import StorageBlock, Task, copy_blocks, copy_tasks

logger = logging.getLogger(__name__)


@dataclass
class AllocationResult:
	strategy: str
	title: str
	tasks: List[Task]
	blocks: List[StorageBlock]
	assignments: Dict[int, Optional[int]] = field(default_factory=dict)
	warehouse_size: int = 0

	def _assigned(self):
		sizes = {b.block_id: b.size for b in self.blocks}
		for task in self.tasks:
			block_id = self.assignments.get(task.id)
			if block_id is not None:
				yield task, sizes[block_id]

	@property
	def total_tasks(self) -> int:
		return len(self.tasks)

	@property
	def allocated_count(self) -> int:
		return sum(1 for _ in self._assigned())

	@property
	def total_allocated(self) -> int:
		return sum(size for _, size in self._assigned())

	@property
	def total_used(self) -> int:
		return sum(task.burst_time for task, _ in self._assigned())

	@property
	def wasted_space(self) -> int:
		return self.total_allocated - self.total_used

	@property
	def utilization(self) -> float:
		if self.warehouse_size <= 0:
			return 0.0
		return 100.0 * self.total_used / self.warehouse_size


class MemoryAllocator:
	"""Places each order in at most one free rack per pass.

	Racks are never released during a pass and never resized. The Next Fit
	cursor lives on the instance and carries over between calls.
	"""

	def __init__(self, blocks: List[StorageBlock], tasks: List[Task], warehouse_size: int):
		self.blocks = copy_blocks(blocks)
		self.tasks = copy_tasks(tasks)
		self.warehouse_size = warehouse_size
		self.next_fit_index = 0

	def _fits(self, block: StorageBlock, task: Task) -> bool:
		return not block.is_allocated and block.size >= task.burst_time

	def _place(self, index: int, task: Task, assignments: Dict[int, Optional[int]]):
		block = self.blocks[index]
		block.is_allocated = True
		block.assigned_task_id = task.id
		assignments[task.id] = block.block_id
		logger.debug('Order P%d (%d) -> rack B%d (%d)', task.id, task.burst_time, block.block_id, block.size)

	def _run(self, strategy: str, title: str, choose) -> AllocationResult:
		logger.info('Allocating %d orders over %d racks using %s', len(self.tasks), len(self.blocks), title)
		assignments: Dict[int, Optional[int]] = {}
		for task in self.tasks:
			index = choose(task)
			if index is None:
				assignments[task.id] = None
				logger.warning('No rack can hold order P%d (size %d) using %s', task.id, task.burst_time, title)
			else:
				self._place(index, task, assignments)
		return AllocationResult(strategy, title, self.tasks, copy_blocks(self.blocks),
								assignments, self.warehouse_size)

	def first_fit(self) -> AllocationResult:
		def choose(task):
			for i, block in enumerate(self.blocks):
				if self._fits(block, task):
					return i
			return None
		return self._run('first-fit', 'First Fit', choose)

	def best_fit(self) -> AllocationResult:
		def choose(task):
			best = None
			for i, block in enumerate(self.blocks):
				if self._fits(block, task) and (best is None or block.size < self.blocks[best].size):
					best = i
			return best
		return self._run('best-fit', 'Best Fit', choose)

	def worst_fit(self) -> AllocationResult:
		def choose(task):
			worst = None
			for i, block in enumerate(self.blocks):
				if self._fits(block, task) and (worst is None or block.size > self.blocks[worst].size):
					worst = i
			return worst
		return self._run('worst-fit', 'Worst Fit', choose)

	def next_fit(self) -> AllocationResult:
		def choose(task):
			count = len(self.blocks)
			for offset in range(count):
				i = (self.next_fit_index + offset) % count
				if self._fits(self.blocks[i], task):
					self.next_fit_index = (i + 1) % count
					return i
			return None
		return self._run('next-fit', 'Next Fit', choose)

	def allocate(self, strategy: str) -> AllocationResult:
		method = FIT_STRATEGIES.get(strategy)
		if method is None:
			raise InvalidParameterError(f'Unknown allocation strategy: {strategy}')
		return method(self)

	def release_all(self):
		# next_fit_index is kept
		for block in self.blocks:
			block.is_allocated = False
			block.assigned_task_id = None


FIT_STRATEGIES = {
	'first-fit': MemoryAllocator.first_fit,
	'best-fit': MemoryAllocator.best_fit,
	'next-fit': MemoryAllocator.next_fit,
	'worst-fit': MemoryAllocator.worst_fit,
}
