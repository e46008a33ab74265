"""Warehouse Operating System Simulator.

CPU scheduling, storage rack (contiguous memory) allocation and forklift
(disk head) scheduling over a synthetic warehouse workload.
"""
from .cpu_scheduling import CPU_ALGORITHMS, CPUResult, CPUScheduler
from .disk_scheduling import DISK_ALGORITHMS, Direction, DiskResult, DiskScheduler
from .exceptions import InvalidParameterError, WarehouseError, WorkloadError
from .memory_allocation import FIT_STRATEGIES, AllocationResult, MemoryAllocator
from .models import DiskRequest, StorageBlock, Task, Workload

__version__ = '1.0.0'
