import argparse
import logging
import os
import shutil
import sys
from dataclasses import fields
from typing import Callable, List, Optional

from . import reporting
from .config import SimulationConfig, check_config, configure_logging
from .cpu_scheduling import CPUResult, CPUScheduler
from .disk_scheduling import SWEEP_ALGORITHMS, Direction, DiskScheduler
from .exceptions import WarehouseError, WorkloadError
from .memory_allocation import MemoryAllocator
from .models import Workload
from .synchronization import run_producer_consumer
from .workload import generate_workload, load_workload, save_workload, validate_workload

logger = logging.getLogger(__name__)

CPU_MENU = [
	('A', 'First Come First Serve (FCFS)', 'fcfs'),
	('B', 'Shortest Job First (SJF)', 'sjf'),
	('C', 'Shortest Remaining Job First (SRJF)', 'srjf'),
	('D', 'Priority Scheduling', 'priority'),
	('E', 'Round Robin (RR)', 'rr'),
]
STORAGE_MENU = [
	('A', 'First Fit', 'first-fit'),
	('B', 'Best Fit', 'best-fit'),
	('C', 'Next Fit', 'next-fit'),
	('D', 'Worst Fit', 'worst-fit'),
]
DISK_MENU = [
	('A', 'First Come First Serve (FCFS)', 'fcfs'),
	('B', 'Shortest Seek Time First (SSTF)', 'sstf'),
	('C', 'SCAN (Elevator Algorithm)', 'scan'),
	('D', 'C-SCAN (Circular SCAN)', 'cscan'),
]

ROLES = {'produce': ('Producer', 'produced'), 'consume': ('Consumer', 'consumed')}

INT_SETTINGS = [f.name for f in fields(SimulationConfig) if f.type is int]

# (config field, prompt, upper bound)
GENERATION_PROMPTS = [
	('num_tasks', '  Number of orders (processes, max 500): ', 500),
	('max_burst_time', '  Max order completion time (max burst): ', None),
	('max_priority', '  Max priority level (1-10): ', 10),
	('warehouse_size', '  Total warehouse rack space (size): ', None),
	('max_block_size', '  Max individual rack size: ', None),
	('max_task_size', '  Max order/process size: ', None),
	('num_disk_requests', '  Number of truck requests: ', None),
	('disk_size', '  Max disk/truck capacity: ', None),
	('head_position', '  Initial forklift position (dock): ', None),  # bounded by disk_size
	('buffer_size', '  Stock buffer capacity: ', None),
]


class WarehouseSimulator:
	def __init__(self, config: SimulationConfig, input_func: Callable[[str], str] = input):
		self.config = config
		self.input = input_func
		self.workload: Optional[Workload] = None
		self.allocator: Optional[MemoryAllocator] = None
		self.disk: Optional[DiskScheduler] = None

	# --- Input validation ---

	def prompt_positive_int(self, prompt: str, max_value: Optional[int] = None) -> int:
		while True:
			raw = self.input(prompt).strip()
			try:
				value = int(raw)
			except ValueError:
				print('[ERROR] Invalid input. Please enter a valid number.')
				continue
			if value <= 0:
				print('[ERROR] Please enter a positive number.')
				continue
			if max_value is not None and value > max_value:
				print(f'[ERROR] Value exceeds maximum ({max_value}). Please try again.')
				continue
			return value

	def prompt_choice(self, low: int, high: int) -> int:
		while True:
			raw = self.input(f'Enter your choice ({low}-{high}): ').strip()
			if raw.isdigit() and low <= int(raw) <= high:
				return int(raw)
			print(f'[ERROR] Invalid choice. Please enter a number between {low} and {high}.')

	def prompt_letter(self, letters: str) -> str:
		while True:
			raw = self.input(f'Enter choice ({letters[0]}-{letters[-1]}): ').strip().upper()
			if len(raw) == 1 and raw in letters:
				return raw
			print('[ERROR] Invalid choice')

	def prompt_yes_no(self, prompt: str) -> bool:
		while True:
			raw = self.input(f'{prompt} (y/n): ').strip().lower()
			if raw in ('y', 'n'):
				return raw == 'y'
			print("[ERROR] Please enter 'y' or 'n'.")

	# --- Workload ---

	def configure_interactively(self):
		print('\nWAREHOUSE PARAMETERS:')
		for name, prompt, max_value in GENERATION_PROMPTS:
			if name == 'head_position':
				max_value = self.config.disk_size
			setattr(self.config, name, self.prompt_positive_int(prompt, max_value))

	def use_workload(self, workload: Workload):
		validate_workload(workload)
		self.workload = workload
		self.allocator = MemoryAllocator(workload.blocks, workload.tasks, workload.warehouse_size)
		self.disk = DiskScheduler(workload.disk_requests, workload.head_position, workload.disk_size)

	def initialize(self, use_saved: Optional[bool] = None):
		reporting.print_header('WAREHOUSE OPERATING SYSTEM SIMULATOR')
		if use_saved is None:
			use_saved = self.prompt_yes_no('Do you want to load previously saved data?')
		if use_saved:
			try:
				self.use_workload(load_workload(self.config.data_file))
				print('[OK] Loaded previously saved warehouse data')
				self.print_statistics()
				return
			except WorkloadError as e:
				print(f'[WARN] {e}; generating new data instead')

		reporting.print_header('WAREHOUSE DATA GENERATION')
		if not self.prompt_yes_no('Use default warehouse parameters?'):
			self.configure_interactively()
		workload = generate_workload(self.config)
		self.use_workload(workload)
		save_workload(workload, self.config.data_file)
		self.print_statistics()

	def print_statistics(self):
		w = self.workload
		reporting.print_section('GENERATED DATA STATISTICS')
		print(f'Orders: {len(w.tasks)}')
		print(f'Racks: {len(w.blocks)}')
		print(f'Truck Requests: {len(w.disk_requests)}')
		print(f'Warehouse Capacity: {w.warehouse_size} units')
		print(f'Buffer Capacity: {w.buffer_size} units')

	# --- Reporting ---

	def _chart_path(self, name: str) -> Optional[str]:
		if not self.config.plots:
			return None
		return os.path.join(self.config.output_dir, name)

	def report_cpu(self, result: CPUResult):
		reporting.print_cpu_result(result)
		reporting.save_cpu_csv(result, self.config.output_dir)
		path = self._chart_path(f'{result.algorithm}_gantt.png')
		if path:
			reporting.plot_gantt(result, path)

	# --- Menus ---

	def _show_menu(self, title: str, entries, back_letter: str):
		reporting.print_header(title)
		for letter, label, _ in entries:
			print(f'{letter}. {label}')
		print(f'{back_letter}. Back to Main Menu')

	def run_worker_task_management(self):
		self._show_menu('WORKER TASK MANAGEMENT', CPU_MENU, 'F')
		letter = self.prompt_letter('ABCDEF')
		if letter == 'F':
			return
		algorithm = _menu_value(CPU_MENU, letter)
		quantum = None
		if algorithm == 'priority':
			print('Choose priority scheduling mode:')
			print('1. Non-Preemptive Priority Scheduling')
			print('2. Preemptive Priority Scheduling')
			if self.prompt_choice(1, 2) == 2:
				algorithm = 'priority-preemptive'
		elif algorithm == 'rr':
			quantum = self.prompt_positive_int('Enter time quantum (time slice per order): ', 1000)

		scheduler = CPUScheduler(self.workload.tasks)
		self.report_cpu(scheduler.run(algorithm, quantum))

	def run_storage_rack_allocation(self):
		self._show_menu('STORAGE RACK ALLOCATION', STORAGE_MENU, 'E')
		letter = self.prompt_letter('ABCDE')
		if letter == 'E':
			return
		strategy = _menu_value(STORAGE_MENU, letter)
		# Racks start empty for every run; the Next Fit cursor carries over
		self.allocator.release_all()
		result = self.allocator.allocate(strategy)
		reporting.print_allocation_result(result)
		reporting.save_allocation_csv(result, self.config.output_dir)

	def run_truck_movement_management(self):
		self._show_menu('TRUCK MOVEMENT MANAGEMENT', DISK_MENU + [('E', 'Reset forklift to initial dock', None)], 'F')
		letter = self.prompt_letter('ABCDEF')
		if letter == 'F':
			return
		if letter == 'E':
			self.disk.head_position = self.workload.head_position
			print(f'[OK] Forklift returned to dock {self.disk.head_position}')
			return
		algorithm = _menu_value(DISK_MENU, letter)
		direction = Direction.UP
		if algorithm in SWEEP_ALGORITHMS:
			if not self.prompt_yes_no('Start moving towards higher dock numbers'):
				direction = Direction.DOWN
		print(f'Forklift starts at dock {self.disk.head_position}')
		result = self.disk.run(algorithm, direction)
		reporting.print_disk_result(result)
		reporting.save_disk_csv(result, self.config.output_dir)
		path = self._chart_path(f'{algorithm}_head_movement.png')
		if path:
			reporting.plot_head_movement(result, self.workload.disk_size, path)

	def run_stock_replenishment(self):
		reporting.print_header('STOCK REPLENISHMENT COORDINATION')
		workers = self.prompt_positive_int('Enter number of threads: ')
		report = run_producer_consumer(self.workload.buffer_size, workers, workers)
		for kind, worker, item, size in report.events:
			role, verb = ROLES[kind]
			print(f"[{kind.upper()}] {role} {worker} {verb} item {item} "
				  f"| Buffer: {size}/{self.workload.buffer_size}")
		print('[OK] Stock coordination completed')
		print(f'Final Buffer Size: {report.final_buffer_size}')

	def run_comparison(self):
		quantum = self.prompt_positive_int('Enter time quantum for Round Robin: ', 1000)
		results = run_all_cpu(self.workload, quantum)
		reporting.print_cpu_comparison(results)
		path = self._chart_path('cpu_comparison.png')
		if path:
			reporting.plot_cpu_comparison(results, path)

	def exit_simulation(self):
		reporting.print_header('EXITING WAREHOUSE SIMULATOR')
		if self.prompt_yes_no('Clear generated data and output files?'):
			for path in (os.path.dirname(self.config.data_file), self.config.output_dir):
				clear_directory(path)
			print('[OK] All data cleared.')
		print('Goodbye!')

	def run(self, use_saved: Optional[bool] = None):
		self.initialize(use_saved)
		actions = {
			1: self.run_worker_task_management,
			2: self.run_storage_rack_allocation,
			3: self.run_truck_movement_management,
			4: self.run_stock_replenishment,
			5: self.run_comparison,
		}
		while True:
			reporting.print_header('WAREHOUSE MANAGEMENT SYSTEM MAIN MENU')
			print('\n1. Worker Task Management (CPU Scheduling)')
			print('2. Storage Rack Allocation (Memory Management)')
			print('3. Truck Movement Management (Disk Scheduling)')
			print('4. Stock Replenishment Coordination (Synchronization)')
			print('5. Compare All Worker Scheduling Algorithms')
			print('6. Exit')
			choice = self.prompt_choice(1, 6)
			if choice == 6:
				self.exit_simulation()
				return
			try:
				actions[choice]()
			except (WarehouseError, ValueError) as e:
				logger.error('Action %d failed: %s', choice, e)
				print(f'[ERROR] {e}')


def _menu_value(entries, letter: str) -> str:
	return next(value for key, _, value in entries if key == letter)


def clear_directory(path: str):
	if not path or not os.path.isdir(path):
		return
	for name in os.listdir(path):
		full = os.path.join(path, name)
		if os.path.isdir(full):
			shutil.rmtree(full)
		else:
			os.remove(full)


def run_all_cpu(workload: Workload, quantum: int) -> List[CPUResult]:
	scheduler = CPUScheduler(workload.tasks)
	results = []
	for algorithm in ('fcfs', 'sjf', 'srjf', 'priority', 'priority-preemptive', 'rr'):
		results.append(scheduler.run(algorithm, quantum))
	return results


def run_batch(workload: Workload, config: SimulationConfig, quantum: int, direction: Direction):
	"""Run every algorithm once and write all reports."""
	validate_workload(workload)
	out = config.output_dir

	reporting.print_header('WORKER TASK MANAGEMENT')
	cpu_results = run_all_cpu(workload, quantum)
	for result in cpu_results:
		reporting.print_cpu_result(result)
		reporting.save_cpu_csv(result, out)
		if config.plots:
			reporting.plot_gantt(result, os.path.join(out, f'{result.algorithm}_gantt.png'))
	reporting.print_cpu_comparison(cpu_results)
	if config.plots:
		reporting.plot_cpu_comparison(cpu_results, os.path.join(out, 'cpu_comparison.png'))

	reporting.print_header('STORAGE RACK ALLOCATION')
	allocator = MemoryAllocator(workload.blocks, workload.tasks, workload.warehouse_size)
	for _, _, strategy in STORAGE_MENU:
		allocator.release_all()
		result = allocator.allocate(strategy)
		reporting.print_allocation_result(result)
		reporting.save_allocation_csv(result, out)

	reporting.print_header('TRUCK MOVEMENT MANAGEMENT')
	for _, _, algorithm in DISK_MENU:
		disk = DiskScheduler(workload.disk_requests, workload.head_position, workload.disk_size)
		result = disk.run(algorithm, direction)
		reporting.print_disk_result(result)
		reporting.save_disk_csv(result, out)
		if config.plots:
			reporting.plot_head_movement(result, workload.disk_size,
										 os.path.join(out, f'{algorithm}_head_movement.png'))


def parse_args(argv=None) -> argparse.Namespace:
	p = argparse.ArgumentParser(description='Warehouse Operating System Simulator')
	p.add_argument('--load', action='store_true', help='Load the saved workload instead of asking')
	p.add_argument('--batch', action='store_true', help='Run every algorithm without menus')
	p.add_argument('--seed', type=int, default=None)
	p.add_argument('--data-file', default=SimulationConfig.data_file)
	p.add_argument('--output-dir', default=SimulationConfig.output_dir)
	p.add_argument('--quantum', type=int, default=4, help='Round Robin time quantum for --batch')
	p.add_argument('--direction', choices=[d.value for d in Direction], default=Direction.UP.value,
				   help='SCAN/C-SCAN sweep direction for --batch')
	p.add_argument('--plots', action=argparse.BooleanOptionalAction, default=False,
				   help='Save matplotlib charts next to the CSV reports')
	p.add_argument('--log-level', default='WARNING')
	p.add_argument('--log-file', default=None)
	for name in INT_SETTINGS:
		p.add_argument(f"--{name.replace('_', '-')}", type=int, default=getattr(SimulationConfig, name))
	return p.parse_args(argv)


def main(argv=None) -> int:
	args = parse_args(argv)
	configure_logging(args.log_level, args.log_file)

	config = SimulationConfig(seed=args.seed, data_file=args.data_file,
							  output_dir=args.output_dir, plots=args.plots)
	for name in INT_SETTINGS:
		setattr(config, name, getattr(args, name))

	try:
		check_config(config)
		if args.quantum < 1:
			raise WarehouseError(f'--quantum must be positive, got {args.quantum}')
		if args.batch:
			if args.load:
				workload = load_workload(config.data_file)
			else:
				workload = generate_workload(config)
				validate_workload(workload)
				save_workload(workload, config.data_file)
			run_batch(workload, config, args.quantum, Direction(args.direction))
		else:
			WarehouseSimulator(config).run(use_saved=True if args.load else None)
	except WarehouseError as e:
		logger.error('Fatal error: %s', e)
		print(f'Fatal Error: {e}', file=sys.stderr)
		return 1
	except (EOFError, KeyboardInterrupt):
		print('\nGoodbye!')
	return 0
