"""Tests for the scheduled job status sweep task."""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from core.config import settings
from workers.celery_config import beat_schedule, task_routes
from workers.tasks.jobs import sweep_url, trigger_job_status_sweep


@pytest.fixture
def http_client():
    with patch("workers.tasks.jobs.httpx.Client") as client_cls:
        client = client_cls.return_value.__enter__.return_value
        yield client


class TestSweepUrl:
    def test_default_base(self):
        assert sweep_url() == "http://api.test/api/v1/cron/update-job-status"

    def test_trailing_slash_trimmed(self):
        assert sweep_url("https://jobs.example.com/") == (
            "https://jobs.example.com/api/v1/cron/update-job-status"
        )


class TestTriggerJobStatusSweep:
    def test_posts_with_cron_secret(self, http_client):
        response = MagicMock()
        response.json.return_value = {"success": True, "updatedJobs": 3}
        http_client.post.return_value = response

        result = trigger_job_status_sweep()

        assert result == {"status": "success", "updated_jobs": 3}
        http_client.post.assert_called_once_with(
            "http://api.test/api/v1/cron/update-job-status",
            headers={"Authorization": "Bearer test-cron-secret"},
        )
        response.raise_for_status.assert_called_once()

    def test_skipped_without_secret(self, http_client):
        with patch.object(settings, "cron_secret", None):
            result = trigger_job_status_sweep()

        assert result["status"] == "skipped"
        http_client.post.assert_not_called()

    def test_http_failure_is_raised_for_retry(self, http_client):
        http_client.post.side_effect = httpx.ConnectError("connection refused")

        # Called outside a worker, retry() re-raises the original error
        with pytest.raises(httpx.ConnectError):
            trigger_job_status_sweep()

    def test_error_status_is_raised_without_retry(self, http_client):
        request = httpx.Request("POST", "http://api.test/api/v1/cron/update-job-status")
        response = MagicMock()
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "401 Unauthorized", request=request, response=httpx.Response(401, request=request)
        )
        http_client.post.return_value = response

        with patch.object(trigger_job_status_sweep, "retry") as retry:
            with pytest.raises(httpx.HTTPStatusError):
                trigger_job_status_sweep()

        retry.assert_not_called()

    def test_transport_failure_schedules_retry(self, http_client):
        http_client.post.side_effect = httpx.ReadTimeout("timed out")

        with patch.object(trigger_job_status_sweep, "retry", side_effect=RuntimeError("retrying")) as retry:
            with pytest.raises(RuntimeError):
                trigger_job_status_sweep()

        retry.assert_called_once()
        assert isinstance(retry.call_args.kwargs["exc"], httpx.ReadTimeout)


class TestSchedule:
    def test_sweep_runs_daily(self):
        entry = beat_schedule["close-expired-jobs"]

        assert entry["task"] == trigger_job_status_sweep.name
        assert entry["schedule"].hour == {0}

    def test_routed_to_maintenance_queue(self):
        assert task_routes["workers.tasks.jobs.*"] == {"queue": "maintenance"}
