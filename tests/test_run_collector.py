"""
Tests for the collector runner script
"""

import json
from unittest.mock import AsyncMock, patch

import pytest

from jenkins_metrics import run_collector
from jenkins_metrics.collectors.base import UpstreamFetchError
from jenkins_metrics.collectors.jenkins_metrics import JenkinsCollector
from jenkins_metrics.secure_config import ConfigurationError


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep the test session's logging configuration intact"""
    with patch("jenkins_metrics.run_collector.setup_logging"):
        yield


class TestParseArgs:
    """Test command line parsing"""

    def test_defaults(self):
        args = run_collector.parse_args([])

        assert args.once is False
        assert args.interval == run_collector.DEFAULT_INTERVAL
        assert args.log_level == "INFO"

    def test_rejects_non_positive_interval(self):
        with pytest.raises(SystemExit):
            run_collector.parse_args(["--interval", "0"])


class TestMain:
    """Test main() entry point"""

    def test_sample_config(self, capsys):
        """Test --sample-config prints the sample and exits cleanly"""
        assert run_collector.main(["--sample-config"]) == 0
        assert "JENKINS_URL" in capsys.readouterr().out

    def test_configuration_error_exits_1(self):
        """Test invalid configuration fails fast"""
        with patch.object(run_collector, "validate_config_on_startup", side_effect=ConfigurationError("missing")):
            assert run_collector.main(["--once"]) == 1

    def test_once_writes_measurements(self, jenkins_config, fake_client, capsys):
        """Test --once runs a cycle and writes JSON lines to stdout"""
        with patch.object(run_collector, "validate_config_on_startup", return_value=jenkins_config), patch.object(
            JenkinsCollector, "build_client", return_value=fake_client
        ):
            assert run_collector.main(["--once"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert [json.loads(line)["name"] for line in lines] == ["queue", "workers"]

    def test_once_failed_cycle_exits_1(self, jenkins_config, fake_client, capsys):
        """Test a failed --once cycle still outputs earlier measurements and exits 1"""
        fake_client.fail("fetch_workers", RuntimeError("down"))

        with patch.object(run_collector, "validate_config_on_startup", return_value=jenkins_config), patch.object(
            JenkinsCollector, "build_client", return_value=fake_client
        ):
            assert run_collector.main(["--once"]) == 1

        lines = capsys.readouterr().out.splitlines()
        assert [json.loads(line)["name"] for line in lines] == ["queue"]


class StopPolling(Exception):
    """Breaks out of the polling loop"""


class TestPollForever:
    """Test the polling loop"""

    @pytest.mark.asyncio
    async def test_failed_cycle_does_not_stop_loop(self, jenkins_config):
        """Test a failed cycle is logged and the next tick still runs"""
        collector = JenkinsCollector(jenkins_config)
        collector.run = AsyncMock(side_effect=[UpstreamFetchError("fetch_queue", RuntimeError("down")), [], []])
        sleep = AsyncMock(side_effect=[None, None, StopPolling])

        with patch("jenkins_metrics.run_collector.asyncio.sleep", sleep):
            with pytest.raises(StopPolling):
                await run_collector.poll_forever(collector, sink=None, interval=5)

        assert collector.run.await_count == 3
        assert sleep.await_count == 3
