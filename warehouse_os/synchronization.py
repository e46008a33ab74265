"""Stock replenishment coordination: bounded producer/consumer buffer.

This is a side demonstration and is independent of the scheduling engines.
"""
import logging
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import List, Tuple

logger = logging.getLogger(__name__)

# (kind, worker id, item id, buffer size after the operation)
Event = Tuple[str, int, int, int]


class StockBuffer:
	def __init__(self, capacity: int):
		if capacity < 1:
			raise ValueError(f'Buffer capacity must be positive, got {capacity}')
		self.capacity = capacity
		self.items: deque = deque()
		self.events: List[Event] = []
		self.max_seen = 0
		self._cond = threading.Condition()

	def produce(self, producer_id: int, item_id: int):
		with self._cond:
			self._cond.wait_for(lambda: len(self.items) < self.capacity)
			self.items.append(item_id)
			self.max_seen = max(self.max_seen, len(self.items))
			self.events.append(('produce', producer_id, item_id, len(self.items)))
			logger.info('[PRODUCE] Producer %d produced item %d | Buffer: %d/%d',
						producer_id, item_id, len(self.items), self.capacity)
			self._cond.notify_all()

	def consume(self, consumer_id: int) -> int:
		with self._cond:
			self._cond.wait_for(lambda: len(self.items) > 0)
			item = self.items.popleft()
			self.events.append(('consume', consumer_id, item, len(self.items)))
			logger.info('[CONSUME] Consumer %d consumed item %d | Buffer: %d/%d',
						consumer_id, item, len(self.items), self.capacity)
			self._cond.notify_all()
			return item

	def size(self) -> int:
		with self._cond:
			return len(self.items)


@dataclass
class ReplenishmentReport:
	events: List[Event] = field(default_factory=list)
	final_buffer_size: int = 0
	max_buffer_size: int = 0


def run_producer_consumer(buffer_size: int, producers: int, consumers: int,
						  delay: float = 0.0) -> ReplenishmentReport:
	"""Start one thread per producer and consumer, each handling a single item.

	Every thread must be able to finish: there can be no more consumers than
	produced items, and the items nobody consumes must fit in the buffer.
	"""
	if consumers > producers:
		raise ValueError(f'{consumers} consumers would wait forever on {producers} items')
	if producers - consumers > buffer_size:
		raise ValueError(f'{producers - consumers} unconsumed items do not fit in a buffer of {buffer_size}')
	buffer = StockBuffer(buffer_size)

	def producer(i: int):
		buffer.produce(i, i * 100)
		time.sleep(delay)

	def consumer(i: int):
		buffer.consume(i)
		time.sleep(delay)

	threads = [threading.Thread(target=producer, args=(i,)) for i in range(1, producers + 1)]
	threads += [threading.Thread(target=consumer, args=(i,)) for i in range(1, consumers + 1)]
	for t in threads:
		t.start()
	for t in threads:
		t.join()

	return ReplenishmentReport(events=list(buffer.events),
							   final_buffer_size=buffer.size(),
							   max_buffer_size=buffer.max_seen)
