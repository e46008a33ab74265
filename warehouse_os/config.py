import logging
from dataclasses import dataclass, fields
from typing import Optional

from .exceptions import InvalidParameterError

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


@dataclass
class SimulationConfig:
	# Worker & task configuration
	num_tasks: int = 10
	max_burst_time: int = 20
	max_priority: int = 5
	# Storage & rack configuration
	warehouse_size: int = 1000
	max_block_size: int = 200
	max_task_size: int = 20
	# Truck & dispatch configuration
	num_disk_requests: int = 8
	disk_size: int = 199
	head_position: int = 53
	# Stock buffer
	buffer_size: int = 5

	seed: Optional[int] = None
	data_file: str = 'data/warehouse_data.txt'
	output_dir: str = 'output'
	plots: bool = False


def configure_logging(level: str = 'WARNING', log_file: Optional[str] = None):
	kwargs = {'level': getattr(logging, level.upper(), logging.WARNING), 'format': LOG_FORMAT}
	if log_file:
		kwargs['filename'] = log_file
	logging.basicConfig(**kwargs)


def check_config(config: SimulationConfig):
	"""Reject generation parameters that cannot describe a warehouse."""
	for f in fields(config):
		value = getattr(config, f.name)
		if f.type is int and f.name != 'head_position' and value < 1:
			raise InvalidParameterError(f'{f.name} must be positive, got {value}')
	if not 0 <= config.head_position <= config.disk_size:
		raise InvalidParameterError(
			f'head_position {config.head_position} is outside [0, {config.disk_size}]')
