"""Console tables, CSV files and matplotlib charts for algorithm results."""
import csv
import logging
import os
from typing import Dict, List, Optional, Sequence

import matplotlib.pyplot as plt

from .cpu_scheduling import CPUResult, IDLE
from .disk_scheduling import DiskResult
from .memory_allocation import AllocationResult

logger = logging.getLogger(__name__)

CPU_CSV_NAMES = {
	'fcfs': 'fcfs_cpu_results.csv',
	'sjf': 'sjf_cpu_results.csv',
	'srjf': 'srjf_cpu_results.csv',
	'priority': 'priority_non_preemptive_cpu_results.csv',
	'priority-preemptive': 'priority_preemptive_cpu_results.csv',
	'rr': 'rr_cpu_results.csv',
}


def print_header(title: str):
	print('\n' + '=' * 60)
	print(f'  {title}')
	print('=' * 60)


def print_section(title: str):
	print('\n' + '-' * 50)
	print(f'=> {title}')
	print('-' * 50)


def gantt_line(result: CPUResult) -> str:
	return 'Gantt Chart: |' + ''.join(f'P{task_id}|' for task_id in result.execution_order)


def print_cpu_result(result: CPUResult):
	print_section(f'SCHEDULING RESULTS - {result.title}')
	header = f"{'ID':>4} {'Arrival':>7} {'Burst':>6} {'Prio':>5} {'Finish':>7} {'Wait':>6} {'Turnaround':>11}"
	print(header)
	print('-' * len(header))
	for t in sorted(result.tasks, key=lambda x: x.id):
		print(f"{t.id:>4} {t.arrival_time:>7} {t.burst_time:>6} {t.priority:>5} "
			  f"{t.completion_time:>7} {t.waiting_time:>6} {t.turnaround_time:>11}")
	print(f'Total Time: {result.total_time} units')
	print(f'CPU Utilization: {result.cpu_utilization:.2f}%')
	print(f'Avg Waiting Time: {result.average_waiting_time:.2f} units')
	print(f'Avg Turnaround Time: {result.average_turnaround_time:.2f} units')
	print(f'Throughput: {result.throughput:.2f} orders/unit')
	print(f'\n{gantt_line(result)}')


def print_allocation_result(result: AllocationResult):
	print_section(f'STORAGE ALLOCATION RESULTS - {result.title}')
	print(f"{'Order_ID':<12}{'Order_Size':<12}{'Rack_Number':<12}")
	print('-' * 36)
	for t in result.tasks:
		block_id = result.assignments.get(t.id)
		rack = f'B{block_id}' if block_id is not None else 'Not Allocated'
		print(f"{'P' + str(t.id):<12}{t.burst_time:<12}{rack:<12}")
	print('\n' + '-' * 36)
	print('ALLOCATION STATISTICS:')
	print(f'Successfully Allocated: {result.allocated_count}/{result.total_tasks}')
	print(f'Total Space Allocated: {result.total_allocated} units')
	print(f'Total Space Used: {result.total_used} units')
	print(f'Wasted Space: {result.wasted_space} units')
	if result.total_allocated > 0:
		print(f'Memory Utilization: {result.utilization:.2f}%')


def format_sequence(sequence: Sequence[int]) -> str:
	return ' -> '.join(str(c) for c in sequence)


def print_disk_result(result: DiskResult):
	print_section(f'DISK SCHEDULING RESULTS - {result.title}')
	print(f'Head Sequence: {format_sequence(result.head_sequence)}')
	print(f'Total Seek Time: {result.total_seek_time} units')
	print(f'Avg Seek Time: {result.average_seek_time:.2f} units')


def _write_rows(path: str, rows: List[List]) -> str:
	directory = os.path.dirname(path)
	if directory:
		os.makedirs(directory, exist_ok=True)
	with open(path, 'w', newline='') as f:
		csv.writer(f).writerows(rows)
	logger.info('Results saved to %s', path)
	return path


def save_cpu_csv(result: CPUResult, output_dir: str) -> str:
	rows: List[List] = [['Order_ID', 'Arrival_Time', 'Burst_Time', 'Priority',
						 'Completion_Time', 'Waiting_Time', 'Turnaround_Time']]
	for t in result.tasks:
		rows.append([t.id, t.arrival_time, t.burst_time, t.priority,
					 t.completion_time, t.waiting_time, t.turnaround_time])
	rows.append([gantt_line(result)])
	return _write_rows(os.path.join(output_dir, CPU_CSV_NAMES[result.algorithm]), rows)


def save_allocation_csv(result: AllocationResult, output_dir: str) -> str:
	sizes = {b.block_id: b.size for b in result.blocks}
	rows: List[List] = [['Order_ID', 'Order_Size', 'Rack_Number', 'Rack_Size']]
	for t in result.tasks:
		block_id = result.assignments.get(t.id)
		if block_id is None:
			rows.append([t.id, t.burst_time, 'Not Allocated', ''])
		else:
			rows.append([t.id, t.burst_time, block_id, sizes[block_id]])
	rows.append([])
	rows.append(['Allocated', f'{result.allocated_count}/{result.total_tasks}'])
	rows.append(['Total Space Allocated', result.total_allocated])
	rows.append(['Total Space Used', result.total_used])
	rows.append(['Wasted Space', result.wasted_space])
	rows.append(['Utilization', f'{result.utilization:.2f}'])
	name = result.strategy.replace('-', '_') + '_memory_results.csv'
	return _write_rows(os.path.join(output_dir, name), rows)


def save_disk_csv(result: DiskResult, output_dir: str) -> str:
	rows: List[List] = [['Truck_Request_ID', 'Dock_Cylinder', 'Arrival_Time']]
	for r in result.requests:
		rows.append([r.request_id, r.cylinder, r.arrival_time])
	rows.append([])
	rows.append(['Head Sequence:'])
	rows.append([format_sequence(result.head_sequence)])
	rows.append(['Total Seek Time', result.total_seek_time])
	rows.append(['Avg Seek Time', f'{result.average_seek_time:.2f}'])
	return _write_rows(os.path.join(output_dir, f'{result.algorithm}_disk_results.csv'), rows)


def _finish_plot(output_path: Optional[str]):
	plt.tight_layout()
	if output_path:
		directory = os.path.dirname(output_path)
		if directory:
			os.makedirs(directory, exist_ok=True)
		plt.savefig(output_path)
		plt.close()
		logger.info('Chart saved to %s', output_path)
	else:
		plt.show()


def plot_gantt(result: CPUResult, output_path: Optional[str] = None):
	fig, ax = plt.subplots(figsize=(10, 3))
	y = 0
	for label, start, end in result.gantt:
		color = 'lightgray' if label == IDLE else None
		ax.barh(y, end - start, left=start, height=0.6, align='center', color=color)
		ax.text((start + end) / 2, y, label, va='center', ha='center', fontsize=8)
	ax.set_xlabel('Time')
	ax.set_ylabel('Worker')
	ax.set_title(f'{result.title} Gantt Chart')
	ax.set_yticks([])
	ax.grid(axis='x', linestyle='--', alpha=0.4)
	_finish_plot(output_path)


def plot_cpu_comparison(results: List[CPUResult], output_path: Optional[str] = None):
	fig, ax = plt.subplots(figsize=(8, 4))
	algos = [r.title for r in results]
	waits = [r.average_waiting_time for r in results]
	turns = [r.average_turnaround_time for r in results]
	xs = range(len(algos))
	ax.bar([x - 0.2 for x in xs], waits, width=0.4, label='Avg Waiting', color='steelblue')
	ax.bar([x + 0.2 for x in xs], turns, width=0.4, label='Avg Turnaround', color='seagreen')
	for i, v in enumerate(waits):
		ax.text(i - 0.2, v + 0.5, f'{v:.1f}', ha='center', fontsize=7)
	ax.set_xticks(list(xs))
	ax.set_xticklabels(algos, rotation=20, ha='right')
	ax.set_ylabel('Time units')
	ax.set_title('Worker Scheduling Comparison')
	ax.legend()
	_finish_plot(output_path)


def plot_head_movement(result: DiskResult, disk_size: int, output_path: Optional[str] = None):
	fig, ax = plt.subplots(figsize=(8, 4))
	steps = list(range(len(result.head_sequence)))
	ax.plot(result.head_sequence, steps, marker='o', color='steelblue')
	for step, cylinder in zip(steps, result.head_sequence):
		ax.text(cylinder, step, f' {cylinder}', va='center', fontsize=7)
	ax.set_xlim(0, disk_size)
	ax.invert_yaxis()
	ax.set_xlabel('Dock (cylinder)')
	ax.set_ylabel('Step')
	ax.set_title(f'{result.title} Forklift Movement (total seek {result.total_seek_time})')
	ax.grid(axis='x', linestyle='--', alpha=0.4)
	_finish_plot(output_path)


def summarize_cpu_results(results: List[CPUResult]) -> Dict[str, Dict[str, float]]:
	return {r.title: {'avg_waiting': r.average_waiting_time,
					  'avg_turnaround': r.average_turnaround_time,
					  'cpu_utilization': r.cpu_utilization,
					  'throughput': r.throughput}
			for r in results}


def print_cpu_comparison(results: List[CPUResult]):
	print_section('ALGORITHM COMPARISON')
	header = f"{'Algorithm':<28}{'AvgWait':>9}{'AvgTurn':>9}{'CPU%':>8}{'Thruput':>9}"
	print(header)
	print('-' * len(header))
	for title, m in summarize_cpu_results(results).items():
		print(f"{title:<28}{m['avg_waiting']:>9.2f}{m['avg_turnaround']:>9.2f}"
			  f"{m['cpu_utilization']:>8.2f}{m['throughput']:>9.3f}")
