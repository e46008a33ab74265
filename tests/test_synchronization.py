"""Tests for the stock replenishment producer/consumer buffer."""
import threading

import pytest

from warehouse_os.synchronization import StockBuffer, run_producer_consumer


class TestStockBuffer:
	def test_fifo(self) -> None:
		buffer = StockBuffer(3)
		buffer.produce(1, 100)
		buffer.produce(2, 200)
		assert buffer.consume(1) == 100
		assert buffer.consume(2) == 200
		assert buffer.size() == 0

	def test_producer_blocks_when_full(self) -> None:
		"""A producer waits until a consumer frees a slot."""
		buffer = StockBuffer(1)
		buffer.produce(1, 100)
		blocked = threading.Thread(target=buffer.produce, args=(2, 200))
		blocked.start()
		blocked.join(timeout=0.2)
		assert blocked.is_alive()
		assert buffer.consume(1) == 100
		blocked.join(timeout=2)
		assert not blocked.is_alive()
		assert buffer.size() == 1

	def test_rejects_empty_capacity(self) -> None:
		with pytest.raises(ValueError):
			StockBuffer(0)


class TestRunProducerConsumer:
	def test_balanced_run_drains_buffer(self) -> None:
		report = run_producer_consumer(buffer_size=2, producers=5, consumers=5)
		assert report.final_buffer_size == 0
		assert report.max_buffer_size <= 2
		assert len(report.events) == 10
		produced = sorted(item for kind, _, item, _ in report.events if kind == 'produce')
		assert produced == [100, 200, 300, 400, 500]

	def test_leftover_items_stay_buffered(self) -> None:
		report = run_producer_consumer(buffer_size=3, producers=5, consumers=2)
		assert report.final_buffer_size == 3

	def test_rejects_runs_that_cannot_finish(self) -> None:
		with pytest.raises(ValueError):
			run_producer_consumer(buffer_size=2, producers=1, consumers=2)
		with pytest.raises(ValueError):
			run_producer_consumer(buffer_size=1, producers=4, consumers=1)
