"""Worker task management: CPU scheduling over a fixed, fully known workload.

Every simulate_* function works on a private copy of the tasks and returns a
CPUResult carrying the per-task timeline, the Gantt segments and the
aggregate metrics. Ties are always broken by the lowest index in the working
list (first found wins), so runs are reproducible.

Priority values follow the warehouse convention: a higher number means a
more urgent order.
"""
import logging
from collections import deque
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Dict, List, Optional, Tuple

from .exceptions import InvalidParameterError
from .models import Task, copy_tasks

logger = logging.getLogger(__name__)

IDLE = 'IDLE'

Segment = Tuple[str, int, int]


@dataclass
class CPUResult:
	algorithm: str
	title: str
	tasks: List[Task]
	gantt: List[Segment] = field(default_factory=list)
	total_time: int = 0

	@property
	def execution_order(self) -> List[int]:
		order: List[int] = []
		for label, _, _ in self.gantt:
			if label == IDLE:
				continue
			task_id = int(label[1:])
			if not order or order[-1] != task_id:
				order.append(task_id)
		return order

	@property
	def total_burst(self) -> int:
		return sum(t.burst_time for t in self.tasks)

	@property
	def cpu_utilization(self) -> float:
		if self.total_time <= 0:
			return 0.0
		return 100.0 * self.total_burst / self.total_time

	@property
	def average_waiting_time(self) -> float:
		if not self.tasks:
			return 0.0
		return sum(t.waiting_time for t in self.tasks) / len(self.tasks)

	@property
	def average_turnaround_time(self) -> float:
		if not self.tasks:
			return 0.0
		return sum(t.turnaround_time for t in self.tasks) / len(self.tasks)

	@property
	def throughput(self) -> float:
		if self.total_time <= 0:
			return 0.0
		return len(self.tasks) / self.total_time

	def by_id(self) -> Dict[int, Task]:
		return {t.id: t for t in self.tasks}


def _label(task: Task) -> str:
	return f'P{task.id}'


def _add_segment(gantt: List[Segment], label: str, start: int, end: int):
	if end <= start:
		return
	# Merge with the previous slice when the same label continues without a gap
	if gantt and gantt[-1][0] == label and gantt[-1][2] == start:
		gantt[-1] = (label, gantt[-1][1], end)
	else:
		gantt.append((label, start, end))


def _by_arrival(tasks: List[Task]) -> List[Task]:
	# sorted() is stable, so equal arrivals keep their input order
	return sorted(copy_tasks(tasks), key=lambda t: t.arrival_time)


def simulate_fcfs(tasks: List[Task]) -> CPUResult:
	procs = _by_arrival(tasks)
	time = 0
	gantt: List[Segment] = []

	for p in procs:
		if time < p.arrival_time:
			_add_segment(gantt, IDLE, time, p.arrival_time)
			time = p.arrival_time
		_add_segment(gantt, _label(p), time, time + p.burst_time)
		time += p.burst_time
		p.finish(time)

	return CPUResult('fcfs', 'FCFS', procs, gantt, time)


def _simulate_non_preemptive(procs: List[Task], rank: Callable[[Task], int]) -> Tuple[List[Segment], int]:
	"""Run whole tasks one at a time, always picking the lowest rank among
	the tasks that have already arrived.

	When nothing has arrived yet the clock jumps straight to the next arrival
	before the selection pass.
	"""
	pending = list(procs)
	time = 0
	gantt: List[Segment] = []

	while pending:
		arrived = [p for p in pending if p.arrival_time <= time]
		if not arrived:
			next_time = min(p.arrival_time for p in pending)
			_add_segment(gantt, IDLE, time, next_time)
			time = next_time
			continue
		# min() keeps the first of equally ranked candidates
		selected = min(arrived, key=rank)
		pending.remove(selected)
		logger.debug('t=%d selected P%d', time, selected.id)
		_add_segment(gantt, _label(selected), time, time + selected.burst_time)
		time += selected.burst_time
		selected.finish(time)

	return gantt, time


def _simulate_ticks(procs: List[Task], rank: Callable[[Task, int], int]) -> Tuple[List[Segment], int]:
	"""Preemptive simulation in unit ticks.

	rank receives the task and its remaining time; the eligible task with the
	lowest rank runs for one tick. Empty stretches are skipped by jumping the
	clock to the next arrival.
	"""
	remaining = [p.burst_time for p in procs]
	time = 0
	finished = 0
	gantt: List[Segment] = []

	while finished < len(procs):
		eligible = [i for i, p in enumerate(procs) if p.arrival_time <= time and remaining[i] > 0]
		if not eligible:
			next_time = min(p.arrival_time for i, p in enumerate(procs) if remaining[i] > 0)
			_add_segment(gantt, IDLE, time, next_time)
			time = next_time
			continue

		current = min(eligible, key=lambda i: rank(procs[i], remaining[i]))
		remaining[current] -= 1
		_add_segment(gantt, _label(procs[current]), time, time + 1)
		time += 1

		if remaining[current] == 0:
			procs[current].finish(time)
			finished += 1
			logger.debug('t=%d P%d complete', time, procs[current].id)

	return gantt, time


def simulate_sjf(tasks: List[Task]) -> CPUResult:
	procs = copy_tasks(tasks)
	gantt, time = _simulate_non_preemptive(procs, rank=lambda p: p.burst_time)
	return CPUResult('sjf', 'SJF', procs, gantt, time)


def simulate_srjf(tasks: List[Task]) -> CPUResult:
	procs = _by_arrival(tasks)
	gantt, time = _simulate_ticks(procs, rank=lambda p, remaining: remaining)
	return CPUResult('srjf', 'SRJF', procs, gantt, time)


def simulate_priority(tasks: List[Task], preemptive: bool = False) -> CPUResult:
	procs = copy_tasks(tasks)
	if preemptive:
		gantt, time = _simulate_ticks(procs, rank=lambda p, remaining: -p.priority)
		return CPUResult('priority-preemptive', 'Priority (Preemptive)', procs, gantt, time)
	gantt, time = _simulate_non_preemptive(procs, rank=lambda p: -p.priority)
	return CPUResult('priority', 'Priority (Non-Preemptive)', procs, gantt, time)


def simulate_round_robin(tasks: List[Task], quantum: Optional[int]) -> CPUResult:
	if quantum is None or quantum < 1:
		raise InvalidParameterError(f'Round Robin needs a positive time quantum, got {quantum!r}')

	procs = _by_arrival(tasks)
	remaining = [p.burst_time for p in procs]
	time = 0
	finished = 0
	gantt: List[Segment] = []
	ready: deque = deque()
	in_queue = set()

	def admit(i: int):
		ready.append(i)
		in_queue.add(i)

	for i, p in enumerate(procs):
		if p.arrival_time <= time:
			admit(i)

	while finished < len(procs):
		if not ready:
			# Earliest unfinished task; procs is sorted by arrival
			nxt = next(i for i in range(len(procs)) if remaining[i] > 0)
			if procs[nxt].arrival_time > time:
				_add_segment(gantt, IDLE, time, procs[nxt].arrival_time)
				time = procs[nxt].arrival_time
			admit(nxt)
			continue

		current = ready.popleft()
		in_queue.discard(current)
		run_time = min(quantum, remaining[current])
		_add_segment(gantt, _label(procs[current]), time, time + run_time)
		time += run_time
		remaining[current] -= run_time

		# Arrivals during the slice queue up ahead of the preempted task
		for i, p in enumerate(procs):
			if i != current and remaining[i] > 0 and p.arrival_time <= time and i not in in_queue:
				admit(i)

		if remaining[current] > 0:
			admit(current)
		else:
			procs[current].finish(time)
			finished += 1

	return CPUResult('rr', f'Round Robin (TQ={quantum})', procs, gantt, time)


CPU_ALGORITHMS: Dict[str, Callable[..., CPUResult]] = {
	'fcfs': simulate_fcfs,
	'sjf': simulate_sjf,
	'srjf': simulate_srjf,
	'priority': partial(simulate_priority, preemptive=False),
	'priority-preemptive': partial(simulate_priority, preemptive=True),
	'rr': simulate_round_robin,
}


class CPUScheduler:
	def __init__(self, tasks: List[Task]):
		self.tasks = copy_tasks(tasks)
		self.last_result: Optional[CPUResult] = None

	def run(self, algorithm: str, quantum: Optional[int] = None) -> CPUResult:
		simulate = CPU_ALGORITHMS.get(algorithm)
		if simulate is None:
			raise InvalidParameterError(f'Unknown CPU scheduling algorithm: {algorithm}')
		logger.info('Running %s on %d tasks', algorithm, len(self.tasks))
		if algorithm == 'rr':
			result = simulate(self.tasks, quantum)
		else:
			result = simulate(self.tasks)
		logger.info('%s finished at t=%d, avg wait %.2f', result.title, result.total_time,
					result.average_waiting_time)
		self.last_result = result
		return result
