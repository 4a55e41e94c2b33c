"""Tests for performance profiler."""

from json_butler.profiler import PerformanceProfiler


class TestPerformanceProfiler:
    """Tests for PerformanceProfiler class."""

    def test_profile_operation(self):
        """Test metrics are filled in when the block ends."""
        profiler = PerformanceProfiler()

        with profiler.profile_operation("generate_code", input_size=128) as metrics:
            metrics.output_size = 64

        assert metrics.operation_name == "generate_code"
        assert metrics.input_size == 128
        assert metrics.output_size == 64
        assert metrics.duration >= 0
        assert metrics.memory_start_mb > 0

    def test_disabled_profiler_skips_memory(self):
        """Test memory sampling can be disabled."""
        profiler = PerformanceProfiler(enabled=False)

        with profiler.profile_operation("serialize_type") as metrics:
            pass

        assert metrics.memory_start_mb == 0.0
        assert metrics.memory_delta_mb == 0.0
