class WarehouseError(Exception):
	"""Base class for errors raised by the warehouse simulator."""


class WorkloadError(WarehouseError, ValueError):
	"""The workload is malformed or the workload file cannot be read."""


class InvalidParameterError(WarehouseError, ValueError):
	"""An algorithm was asked to run with an unusable parameter."""
