"""Tests for console, CSV and chart output."""
import csv

from warehouse_os import reporting
from warehouse_os.cpu_scheduling import simulate_fcfs, simulate_priority
from warehouse_os.disk_scheduling import DiskScheduler
from warehouse_os.memory_allocation import MemoryAllocator


def _read_rows(path):
	with open(path, newline='') as f:
		return list(csv.reader(f))


class TestCPUReports:
	def test_console_summary(self, capsys, small_workload) -> None:
		reporting.print_cpu_result(simulate_fcfs(small_workload.tasks))
		out = capsys.readouterr().out
		assert 'SCHEDULING RESULTS - FCFS' in out
		assert 'Total Time: 8 units' in out
		assert 'CPU Utilization: 100.00%' in out
		assert 'Gantt Chart: |P1|P2|' in out

	def test_csv(self, tmp_path, small_workload) -> None:
		"""One row per order plus a trailing Gantt row."""
		path = reporting.save_cpu_csv(simulate_fcfs(small_workload.tasks), str(tmp_path))
		rows = _read_rows(path)
		assert path.endswith('fcfs_cpu_results.csv')
		assert rows[0][0] == 'Order_ID'
		assert rows[1] == ['1', '0', '5', '1', '5', '0', '5']
		assert rows[2] == ['2', '1', '3', '2', '8', '4', '7']
		assert rows[-1] == ['Gantt Chart: |P1|P2|']

	def test_csv_name_for_priority_mode(self, tmp_path, small_workload) -> None:
		result = simulate_priority(small_workload.tasks, preemptive=True)
		path = reporting.save_cpu_csv(result, str(tmp_path))
		assert path.endswith('priority_preemptive_cpu_results.csv')

	def test_gantt_chart_saved(self, tmp_path, small_workload) -> None:
		path = tmp_path / 'charts' / 'fcfs_gantt.png'
		reporting.plot_gantt(simulate_fcfs(small_workload.tasks), str(path))
		assert path.exists()

	def test_comparison(self, capsys, tmp_path, small_workload) -> None:
		results = [simulate_fcfs(small_workload.tasks), simulate_priority(small_workload.tasks)]
		summary = reporting.summarize_cpu_results(results)
		assert summary['FCFS']['avg_waiting'] == 2.0
		reporting.print_cpu_comparison(results)
		assert 'Priority (Non-Preemptive)' in capsys.readouterr().out
		path = tmp_path / 'cpu_comparison.png'
		reporting.plot_cpu_comparison(results, str(path))
		assert path.exists()


class TestAllocationReports:
	def test_console_lists_unallocated(self, capsys, small_workload) -> None:
		small_workload.tasks[1].burst_time = 500
		result = MemoryAllocator(small_workload.blocks, small_workload.tasks, 300).first_fit()
		reporting.print_allocation_result(result)
		out = capsys.readouterr().out
		assert 'Not Allocated' in out
		assert 'Successfully Allocated: 1/2' in out

	def test_csv(self, tmp_path, small_workload) -> None:
		result = MemoryAllocator(small_workload.blocks, small_workload.tasks, 300).best_fit()
		rows = _read_rows(reporting.save_allocation_csv(result, str(tmp_path)))
		assert rows[1] == ['1', '5', '1', '100']
		assert rows[2] == ['2', '3', '2', '200']
		assert ['Wasted Space', '292'] in rows
		assert (tmp_path / 'best_fit_memory_results.csv').exists()


class TestDiskReports:
	def test_console(self, capsys, small_workload) -> None:
		result = DiskScheduler(small_workload.disk_requests, 40, 100).fcfs()
		reporting.print_disk_result(result)
		out = capsys.readouterr().out
		assert 'Head Sequence: 40 -> 50 -> 20 -> 80' in out
		assert 'Total Seek Time: 100 units' in out
		assert 'Avg Seek Time: 33.33 units' in out

	def test_csv(self, tmp_path, small_workload) -> None:
		result = DiskScheduler(small_workload.disk_requests, 40, 100).fcfs()
		rows = _read_rows(reporting.save_disk_csv(result, str(tmp_path)))
		assert rows[0] == ['Truck_Request_ID', 'Dock_Cylinder', 'Arrival_Time']
		assert ['40 -> 50 -> 20 -> 80'] in rows
		assert ['Total Seek Time', '100'] in rows
		assert (tmp_path / 'fcfs_disk_results.csv').exists()

	def test_head_movement_chart(self, tmp_path, small_workload) -> None:
		result = DiskScheduler(small_workload.disk_requests, 40, 100).cscan()
		path = tmp_path / 'cscan.png'
		reporting.plot_head_movement(result, 100, str(path))
		assert path.exists()
