"""Truck movement management: disk-head (forklift) seek scheduling.

The order functions only decide the visiting sequence; DiskScheduler owns
the head position, which carries over from one algorithm call to the next on
the same instance.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .exceptions import InvalidParameterError
from .models import DiskRequest

logger = logging.getLogger(__name__)


class Direction(Enum):
	UP = 'up'      # toward higher cylinder numbers
	DOWN = 'down'


@dataclass
class DiskResult:
	algorithm: str
	title: str
	requests: List[DiskRequest]
	head_sequence: List[int]
	total_seek_time: int
	direction: Optional[Direction] = None

	@property
	def average_seek_time(self) -> float:
		if not self.requests:
			return 0.0
		return self.total_seek_time / len(self.requests)


def seek_distance(sequence: List[int]) -> int:
	return sum(abs(b - a) for a, b in zip(sequence, sequence[1:]))


def fcfs_order(requests: List[DiskRequest], head: int) -> List[int]:
	return [r.cylinder for r in sorted(requests, key=lambda r: r.arrival_time)]


def sstf_order(requests: List[DiskRequest], head: int) -> List[int]:
	remaining = [r.cylinder for r in requests]
	order: List[int] = []
	current = head
	while remaining:
		# min() keeps the first of equally distant cylinders
		nearest = min(remaining, key=lambda c: abs(c - current))
		remaining.remove(nearest)
		order.append(nearest)
		current = nearest
	return order


def _split(requests: List[DiskRequest], head: int, direction: Direction):
	cylinders = sorted(r.cylinder for r in requests)
	if direction is Direction.UP:
		ahead = [c for c in cylinders if c >= head]
		behind = [c for c in cylinders if c < head]
	else:
		ahead = [c for c in reversed(cylinders) if c <= head]
		behind = [c for c in reversed(cylinders) if c > head]
	return ahead, behind


def scan_order(requests: List[DiskRequest], head: int, direction: Direction = Direction.UP) -> List[int]:
	"""Sweep toward direction, then reverse and serve what is left.

	The head turns at the last request in the sweep direction, it does not
	travel on to the disk edge.
	"""
	ahead, behind = _split(requests, head, direction)
	return ahead + list(reversed(behind))


def cscan_order(requests: List[DiskRequest], head: int, disk_size: int,
				direction: Direction = Direction.UP) -> List[int]:
	"""Sweep toward direction up to the disk edge, jump to the opposite edge
	and keep sweeping the same way.

	Both edges appear in the returned sequence, so the wrap is paid as
	ordinary head movement: the rest of the way to the edge plus the full
	disk_size for the jump back.
	"""
	if not requests:
		return []
	ahead, behind = _split(requests, head, direction)
	if direction is Direction.UP:
		edges = [disk_size, 0]
	else:
		edges = [0, disk_size]
	return ahead + edges + behind


class DiskScheduler:
	def __init__(self, requests: List[DiskRequest], head_position: int, disk_size: int):
		self.requests = list(requests)
		self.head_position = head_position
		self.disk_size = disk_size

	def _service(self, algorithm: str, title: str, order: List[int],
				 direction: Optional[Direction] = None) -> DiskResult:
		sequence = [self.head_position] + order
		total = seek_distance(sequence)
		logger.info('%s: %d requests, head %d -> %d, total seek %d',
					title, len(self.requests), self.head_position, sequence[-1], total)
		self.head_position = sequence[-1]
		return DiskResult(algorithm, title, list(self.requests), sequence, total, direction)

	def fcfs(self) -> DiskResult:
		return self._service('fcfs', 'FCFS', fcfs_order(self.requests, self.head_position))

	def sstf(self) -> DiskResult:
		return self._service('sstf', 'SSTF', sstf_order(self.requests, self.head_position))

	def scan(self, direction: Direction = Direction.UP) -> DiskResult:
		order = scan_order(self.requests, self.head_position, direction)
		return self._service('scan', 'SCAN', order, direction)

	def cscan(self, direction: Direction = Direction.UP) -> DiskResult:
		order = cscan_order(self.requests, self.head_position, self.disk_size, direction)
		return self._service('cscan', 'C-SCAN', order, direction)

	def run(self, algorithm: str, direction: Direction = Direction.UP) -> DiskResult:
		if algorithm not in DISK_ALGORITHMS:
			raise InvalidParameterError(f'Unknown disk scheduling algorithm: {algorithm}')
		method = getattr(self, algorithm)
		if algorithm in SWEEP_ALGORITHMS:
			return method(direction)
		return method()


DISK_ALGORITHMS = ('fcfs', 'sstf', 'scan', 'cscan')
SWEEP_ALGORITHMS = ('scan', 'cscan')
