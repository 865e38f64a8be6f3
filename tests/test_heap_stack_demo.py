#!/usr/bin/env python3
"""
Tests for the heap vs. stack demonstration driver
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock, call, patch

import psutil
import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from lifetime import heap_stack_demo
from lifetime.exceptions import CleanupWaitInterrupted, ConfigurationError
from lifetime.heap_stack_demo import (
    DemoConfig, main, pause_for_cleanup, run_batch_demo, run_single_scope_demo, scoped_method
)
from lifetime.services.cleanup_coordinator import CleanupCoordinator
from tests.helpers.notice_recorder import NoticeRecorder


@pytest.fixture
def coordinator():
    coordinator = CleanupCoordinator(thread_name="demo-cleaner")
    yield coordinator
    coordinator.shutdown()


@pytest.fixture
def recorder():
    return NoticeRecorder()


@pytest.fixture
def no_sleep():
    with patch('lifetime.heap_stack_demo.time.sleep') as mock_sleep:
        yield mock_sleep


class TestDemoConfig:

    def test_defaults(self):
        config = DemoConfig()
        assert config.single_payload == 23
        assert config.batch_size == 100000
        assert config.cleanup_wait_ms == 1000
        assert config.debug_logging is False

    def test_negative_batch_size_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            DemoConfig(batch_size=-1)
        assert exc_info.value.context['setting_key'] == 'demo.batch_size'

    def test_negative_wait_rejected(self):
        with pytest.raises(ConfigurationError):
            DemoConfig(cleanup_wait_ms=-5)

    def test_from_settings(self):
        settings = MagicMock()
        settings.single_payload = 5
        settings.batch_size = 10
        settings.cleanup_wait_ms = 0
        settings.debug_logging = True

        config = DemoConfig.from_settings(settings)

        assert config == DemoConfig(single_payload=5, batch_size=10,
                                    cleanup_wait_ms=0, debug_logging=True)


class TestPauseForCleanup:

    def test_sleeps_for_configured_duration(self, no_sleep):
        pause_for_cleanup(250)
        no_sleep.assert_called_once_with(0.25)

    def test_interruption_is_reported_as_lifetime_error(self, no_sleep):
        no_sleep.side_effect = KeyboardInterrupt

        with pytest.raises(CleanupWaitInterrupted) as exc_info:
            pause_for_cleanup(1000)

        assert exc_info.value.context['waited_ms'] == 1000
        assert isinstance(exc_info.value.__cause__, KeyboardInterrupt)


class TestScenarios:

    def test_scoped_method_resource_dies_with_frame(self, coordinator, recorder):
        scoped_method(coordinator, 23, recorder)

        assert recorder.messages[:2] == [
            "Object created with value: 23",
            "Inside method: Object value = 23",
        ]
        assert coordinator.wait_for_pending(timeout=5)
        assert recorder.cleaned_payloads() == [23]

    def test_single_scope_demo(self, coordinator, recorder, no_sleep):
        run_single_scope_demo(DemoConfig(cleanup_wait_ms=1000), coordinator, recorder)
        assert coordinator.wait_for_pending(timeout=5)

        assert "Requesting garbage collection..." in recorder.messages
        cleanup_notices = [m for m in recorder.messages if "is being cleaned" in m]
        assert cleanup_notices == ["TrackedResource with value: 23 is being cleaned"]
        no_sleep.assert_called_once_with(1.0)

    def test_batch_demo_reports_memory_and_cleans_everything(self, coordinator, recorder, no_sleep):
        report = run_batch_demo(DemoConfig(batch_size=2000, cleanup_wait_ms=0), coordinator, recorder)
        assert coordinator.wait_for_pending(timeout=10)

        assert report.created == 2000
        assert isinstance(report.memory_before.used_bytes, int)
        assert report.memory_before.used_bytes >= 0
        assert report.memory_after.used_bytes >= 0
        assert report.collected >= 0

        assert sorted(recorder.cleaned_payloads()) == list(range(2000))
        memory_lines = [m for m in recorder.messages if m.startswith("Memory used")]
        assert len(memory_lines) == 2
        assert str(report.memory_before.used_bytes) in memory_lines[0]

    def test_empty_batch(self, coordinator, recorder, no_sleep):
        report = run_batch_demo(DemoConfig(batch_size=0, cleanup_wait_ms=0), coordinator, recorder)
        assert report.created == 0
        assert recorder.cleaned_payloads() == []


class TestMain:

    @pytest.fixture
    def small_config(self):
        with patch.object(heap_stack_demo.DemoConfig, 'from_settings',
                          return_value=DemoConfig(batch_size=10, cleanup_wait_ms=0)):
            yield

    def test_main_runs_both_scenarios(self, coordinator, small_config, no_sleep):
        with patch('lifetime.heap_stack_demo.get_default_coordinator', return_value=coordinator), \
             patch('lifetime.heap_stack_demo.logger') as mock_logger:
            assert main([]) == 0

        assert coordinator.wait_for_pending(timeout=5)
        assert coordinator.get_statistics()['total_registered'] == 11
        mock_logger.info.assert_any_call("End of Main method")
        mock_logger.error.assert_not_called()

    def test_main_reports_interruption_and_returns_normally(self, coordinator, small_config):
        with patch('lifetime.heap_stack_demo.get_default_coordinator', return_value=coordinator), \
             patch('lifetime.heap_stack_demo.logger') as mock_logger, \
             patch('lifetime.heap_stack_demo.time.sleep', side_effect=KeyboardInterrupt):
            assert main(["unused"]) == 0

        mock_logger.error.assert_called_once_with("An error occurred: Cleanup wait interrupted")

    def test_main_enables_debug_logging_from_settings(self, coordinator, no_sleep):
        config = DemoConfig(batch_size=1, cleanup_wait_ms=0, debug_logging=True)
        with patch.object(heap_stack_demo.DemoConfig, 'from_settings', return_value=config), \
             patch('lifetime.heap_stack_demo.get_default_coordinator', return_value=coordinator), \
             patch('lifetime.heap_stack_demo.logger') as mock_logger:
            main()

        mock_logger.enable_debug.assert_called_once_with(True)

    def test_main_reports_unexpected_errors_and_returns_normally(self, coordinator, small_config, no_sleep):
        with patch('lifetime.heap_stack_demo.get_default_coordinator', return_value=coordinator), \
             patch('lifetime.heap_stack_demo.logger') as mock_logger, \
             patch('lifetime.heap_stack_demo.sample_memory', side_effect=psutil.AccessDenied(1)):
            assert main([]) == 0

        mock_logger.error.assert_called_once()
        assert mock_logger.error.call_args[0][0].startswith("An error occurred: ")
        assert call("End of Main method") not in mock_logger.info.call_args_list
