import logging
import os
import random
from typing import List

from .config import SimulationConfig
from .exceptions import WorkloadError
from .models import DiskRequest, StorageBlock, Task, Workload

logger = logging.getLogger(__name__)

SECTION_SEPARATOR = '---'
MIN_BLOCK_SIZE = 100


def generate_tasks(num_tasks: int, max_burst_time: int, max_priority: int, rng: random.Random) -> List[Task]:
	tasks: List[Task] = []
	for i in range(num_tasks):
		tasks.append(Task(id=i + 1,
						  arrival_time=rng.randint(0, max_burst_time * 2),
						  burst_time=rng.randint(1, max_burst_time),
						  priority=rng.randint(1, max_priority)))
	# Sort by arrival time for convenience
	tasks.sort(key=lambda t: t.arrival_time)
	return tasks


def generate_blocks(warehouse_size: int, max_block_size: int, rng: random.Random) -> List[StorageBlock]:
	"""Cut the warehouse into racks that exactly cover its capacity.

	Rack sizes are drawn from [100, max_block_size]; the last rack is clipped
	to what is left.
	"""
	if max_block_size < 1:
		raise WorkloadError(f'Max rack size must be positive, got {max_block_size}')
	low = min(MIN_BLOCK_SIZE, max_block_size)
	blocks: List[StorageBlock] = []
	offset = 0
	while offset < warehouse_size:
		size = min(rng.randint(low, max_block_size), warehouse_size - offset)
		blocks.append(StorageBlock(block_id=len(blocks) + 1, size=size))
		offset += size
	return blocks


def generate_disk_requests(num_requests: int, disk_size: int, max_arrival: int,
						   rng: random.Random) -> List[DiskRequest]:
	return [DiskRequest(request_id=i + 1,
						cylinder=rng.randint(0, disk_size),
						arrival_time=rng.randint(0, max_arrival))
			for i in range(num_requests)]


def generate_workload(config: SimulationConfig) -> Workload:
	# Tasks, racks and requests draw from seed, seed + 1 and seed + 2
	seed = config.seed if config.seed is not None else random.randrange(2 ** 32)
	tasks = generate_tasks(config.num_tasks, config.max_burst_time, config.max_priority,
						   random.Random(seed))
	blocks = generate_blocks(config.warehouse_size, config.max_block_size, random.Random(seed + 1))
	requests = generate_disk_requests(config.num_disk_requests, config.disk_size,
									  config.num_tasks * config.max_burst_time // 2,
									  random.Random(seed + 2))
	logger.info('Generated %d tasks, %d racks, %d disk requests (seed %d)',
				len(tasks), len(blocks), len(requests), seed)
	return Workload(tasks=tasks, blocks=blocks, disk_requests=requests,
					warehouse_size=config.warehouse_size,
					disk_size=config.disk_size,
					head_position=config.head_position,
					max_burst_time=config.max_burst_time,
					max_priority=config.max_priority,
					max_block_size=config.max_block_size,
					max_task_size=config.max_task_size,
					buffer_size=config.buffer_size)


def validate_workload(workload: Workload):
	"""Reject a workload the engines cannot run on. Raises WorkloadError."""
	task_ids = [t.id for t in workload.tasks]
	if len(set(task_ids)) != len(task_ids):
		raise WorkloadError('Duplicate task ids in workload')
	for t in workload.tasks:
		if t.arrival_time < 0:
			raise WorkloadError(f'Task {t.id} has negative arrival time {t.arrival_time}')
		if t.burst_time <= 0:
			raise WorkloadError(f'Task {t.id} has non-positive burst time {t.burst_time}')

	block_ids = [b.block_id for b in workload.blocks]
	if len(set(block_ids)) != len(block_ids):
		raise WorkloadError('Duplicate rack ids in workload')
	for b in workload.blocks:
		if b.size <= 0:
			raise WorkloadError(f'Rack {b.block_id} has non-positive size {b.size}')
	covered = sum(b.size for b in workload.blocks)
	if covered != workload.warehouse_size:
		raise WorkloadError(f'Racks cover {covered} units but warehouse size is {workload.warehouse_size}')

	if workload.disk_size <= 0:
		raise WorkloadError(f'Disk size must be positive, got {workload.disk_size}')
	if not 0 <= workload.head_position <= workload.disk_size:
		raise WorkloadError(f'Head position {workload.head_position} is outside [0, {workload.disk_size}]')
	for r in workload.disk_requests:
		if not 0 <= r.cylinder <= workload.disk_size:
			raise WorkloadError(f'Disk request {r.request_id} targets cylinder {r.cylinder} '
								f'outside [0, {workload.disk_size}]')
		if r.arrival_time < 0:
			raise WorkloadError(f'Disk request {r.request_id} has negative arrival time')


def save_workload(workload: Workload, path: str):
	directory = os.path.dirname(path)
	if directory:
		os.makedirs(directory, exist_ok=True)
	header = [len(workload.tasks), workload.max_burst_time, workload.max_priority,
			  workload.warehouse_size, workload.max_block_size, workload.max_task_size,
			  len(workload.disk_requests), workload.disk_size, workload.head_position,
			  workload.buffer_size]
	with open(path, 'w') as f:
		for value in header:
			f.write(f'{value}\n')
		for t in workload.tasks:
			f.write(f'{t.id},{t.arrival_time},{t.burst_time},{t.priority}\n')
		f.write(f'{SECTION_SEPARATOR}\n')
		for b in workload.blocks:
			f.write(f'{b.block_id},{b.size}\n')
		f.write(f'{SECTION_SEPARATOR}\n')
		for r in workload.disk_requests:
			f.write(f'{r.request_id},{r.cylinder},{r.arrival_time}\n')
	logger.info('Saved workload to %s', path)


def _parse_row(line: str, width: int, line_no: int) -> List[int]:
	parts = line.split(',')
	if len(parts) != width:
		raise WorkloadError(f'Line {line_no}: expected {width} comma-separated values, got {line!r}')
	try:
		return [int(p) for p in parts]
	except ValueError:
		raise WorkloadError(f'Line {line_no}: non-integer value in {line!r}') from None


def load_workload(path: str) -> Workload:
	try:
		with open(path) as f:
			lines = [line.strip() for line in f]
	except OSError as e:
		raise WorkloadError(f'Cannot read workload file {path}: {e}') from e

	if len(lines) < 10:
		raise WorkloadError(f'{path}: truncated header')
	try:
		(_, max_burst, max_priority, warehouse_size, max_block_size, max_task_size,
		 _, disk_size, head_position, buffer_size) = [int(v) for v in lines[:10]]
	except ValueError:
		raise WorkloadError(f'{path}: header values must be integers') from None

	sections: List[List[List[int]]] = [[], [], []]
	widths = (4, 2, 3)
	section = 0
	for line_no, line in enumerate(lines[10:], start=11):
		if not line:
			continue
		if line == SECTION_SEPARATOR:
			section += 1
			if section > 2:
				raise WorkloadError(f'Line {line_no}: unexpected extra section')
			continue
		sections[section].append(_parse_row(line, widths[section], line_no))

	workload = Workload(
		tasks=[Task(id=i, arrival_time=a, burst_time=b, priority=p) for i, a, b, p in sections[0]],
		blocks=[StorageBlock(block_id=i, size=s) for i, s in sections[1]],
		disk_requests=[DiskRequest(request_id=i, cylinder=c, arrival_time=a) for i, c, a in sections[2]],
		warehouse_size=warehouse_size,
		disk_size=disk_size,
		head_position=head_position,
		max_burst_time=max_burst,
		max_priority=max_priority,
		max_block_size=max_block_size,
		max_task_size=max_task_size,
		buffer_size=buffer_size)
	validate_workload(workload)
	logger.info('Loaded workload from %s', path)
	return workload
