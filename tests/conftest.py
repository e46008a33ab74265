import matplotlib

matplotlib.use('Agg')

import pytest

from warehouse_os.models import DiskRequest, StorageBlock, Task, Workload


def make_tasks(*rows):
	"""Build tasks from (id, arrival, burst[, priority]) tuples."""
	return [Task(*row) for row in rows]


@pytest.fixture
def small_workload() -> Workload:
	return Workload(
		tasks=make_tasks((1, 0, 5, 1), (2, 1, 3, 2)),
		blocks=[StorageBlock(1, 100), StorageBlock(2, 200)],
		disk_requests=[DiskRequest(1, 50, 0), DiskRequest(2, 20, 1), DiskRequest(3, 80, 2)],
		warehouse_size=300,
		disk_size=100,
		head_position=40,
		max_burst_time=5,
		max_priority=2,
		max_block_size=200,
		max_task_size=5,
		buffer_size=2)
