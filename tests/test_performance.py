"""Performance and load tests."""

import random
import time

from eventail.__main__ import run_benchmark
from eventail.registry import ListenerRegistry


class TestPerformance:
    """Loose throughput checks; bounds are generous to stay stable on slow CI."""

    def test_random_priority_registration(self):
        # Arrange
        registry = ListenerRegistry()
        rng = random.Random(1234)

        def callback(ctx):
            pass

        contexts = [object() for _ in range(10000)]

        # Act
        start = time.perf_counter()
        for ctx in contexts:
            registry.register("x", callback, ctx, rng.randint(0, 1000))
        elapsed = time.perf_counter() - start

        # Assert
        values = [listener.priority for listener in registry.listeners("x")]
        assert values == sorted(values)
        assert elapsed < 2.0

    def test_many_listeners_single_emit(self):
        # Arrange
        registry = ListenerRegistry()
        calls = {"count": 0}

        def callback(ctx):
            calls["count"] += 1

        for i in range(10000):
            registry.register("x", callback, {"id": i})

        # Act
        start = time.perf_counter()
        registry.emit("x")
        elapsed = time.perf_counter() - start

        # Assert
        assert calls["count"] == 10000
        assert elapsed < 1.0

    def test_many_channels(self):
        # Arrange
        registry = ListenerRegistry()
        calls = {"count": 0}

        def callback():
            calls["count"] += 1

        for i in range(10000):
            registry.register(f"event{i}", callback)

        # Act
        start = time.perf_counter()
        for i in range(10000):
            registry.emit(f"event{i}")
        elapsed = time.perf_counter() - start

        # Assert
        assert calls["count"] == 10000
        assert elapsed < 2.0

    def test_benchmark_phases_complete(self):
        # Act
        timings = run_benchmark(2000, 3, seed=7)

        # Assert
        assert set(timings) == {"register", "emit", "once", "remove"}
        assert all(seconds >= 0 for seconds in timings.values())
