from dataclasses import dataclass
from typing import List, Optional


@dataclass
class Task:
	"""A warehouse order handled by a worker (a process to the CPU scheduler).

	burst_time doubles as the order's rack-space requirement for the
	memory allocator.
	"""
	id: int
	arrival_time: int
	burst_time: int
	priority: int = 1
	completion_time: int = 0
	waiting_time: int = 0
	turnaround_time: int = 0

	def finish(self, completion_time: int):
		self.completion_time = completion_time
		self.turnaround_time = completion_time - self.arrival_time
		self.waiting_time = self.turnaround_time - self.burst_time


@dataclass
class StorageBlock:
	block_id: int
	size: int
	is_allocated: bool = False
	assigned_task_id: Optional[int] = None


@dataclass(frozen=True)
class DiskRequest:
	request_id: int
	cylinder: int
	arrival_time: int


@dataclass
class Workload:
	tasks: List[Task]
	blocks: List[StorageBlock]
	disk_requests: List[DiskRequest]
	warehouse_size: int
	disk_size: int
	head_position: int
	max_burst_time: int = 0
	max_priority: int = 0
	max_block_size: int = 0
	max_task_size: int = 0
	buffer_size: int = 1


def copy_tasks(tasks: List[Task]) -> List[Task]:
	# Fresh objects with outputs reset so algorithm runs never share state
	return [Task(id=t.id, arrival_time=t.arrival_time, burst_time=t.burst_time, priority=t.priority)
			for t in tasks]


def copy_blocks(blocks: List[StorageBlock]) -> List[StorageBlock]:
	return [StorageBlock(block_id=b.block_id, size=b.size,
						 is_allocated=b.is_allocated, assigned_task_id=b.assigned_task_id)
			for b in blocks]
