"""Tests for cistatus.orchestrator."""

from __future__ import annotations

import io
import logging
import sys
from pathlib import Path
from unittest import mock

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cistatus.config.settings import RunConfig  # noqa: E402
from cistatus.errors import ConfigError, LogArtifactError, StatusReportError  # noqa: E402
from cistatus.exit_codes import EXIT_FAILURE, EXIT_SUCCESS  # noqa: E402
from cistatus.orchestrator import prepare_config, run_status_task  # noqa: E402
from cistatus.status import CommitStatus, StatusState  # noqa: E402
from cistatus.task_runner import CommandResult, TaskRunner  # noqa: E402


class RecordingReporter:
    """Reporter double that records each post."""

    def __init__(self, fail_on: int | None = None):
        self.calls: list[tuple[str, str, str, StatusState]] = []
        self.fail_on = fail_on

    def post(self, owner: str, repo: str, revision: str, status: CommitStatus) -> None:
        if self.fail_on is not None and len(self.calls) == self.fail_on:
            raise StatusReportError("HTTP 502 Bad Gateway")
        self.calls.append((owner, repo, revision, status.state))


def make_config(tmp_path: Path, **overrides) -> RunConfig:
    values = {
        "owner": "acme",
        "repo": "widget",
        "revision": "abc123",
        "token": "t",
        "description": "Unit tests",
        "artifacts_dir": str(tmp_path),
        "show_output": False,
    }
    values.update(overrides)
    return RunConfig(**values)


class TestRunStatusTask:
    """Tests for the pending -> run -> final sequence."""

    def test_success_posts_pending_then_success(self, tmp_path: Path) -> None:
        reporter = RecordingReporter()

        code = run_status_task(make_config(tmp_path), "echo ok", env={}, reporter=reporter)

        assert code == EXIT_SUCCESS
        assert reporter.calls == [
            ("acme", "widget", "abc123", StatusState.PENDING),
            ("acme", "widget", "abc123", StatusState.SUCCESS),
        ]
        assert (tmp_path / "status.txt").read_bytes() == b"ok\n"

    def test_failure_posts_pending_then_failure(self, tmp_path: Path) -> None:
        reporter = RecordingReporter()

        code = run_status_task(make_config(tmp_path), "echo noisy >&2; exit 1", env={}, reporter=reporter)

        assert code == EXIT_FAILURE
        assert [call[3] for call in reporter.calls] == [StatusState.PENDING, StatusState.FAILURE]

    def test_output_does_not_affect_outcome(self, tmp_path: Path) -> None:
        reporter = RecordingReporter()

        code = run_status_task(make_config(tmp_path), "echo error: FAILED >&2; exit 0", env={}, reporter=reporter)

        assert code == EXIT_SUCCESS
        assert reporter.calls[-1][3] is StatusState.SUCCESS

    def test_log_named_after_context(self, tmp_path: Path) -> None:
        run_status_task(
            make_config(tmp_path, context="lint"),
            "echo linted",
            env={},
            reporter=RecordingReporter(),
        )

        assert (tmp_path / "lint.txt").read_bytes() == b"linted\n"

    def test_pending_failure_skips_command(self, tmp_path: Path) -> None:
        reporter = RecordingReporter(fail_on=0)
        runner = mock.Mock(spec=TaskRunner)

        with pytest.raises(StatusReportError):
            run_status_task(make_config(tmp_path), "touch should-not-exist", env={}, reporter=reporter, runner=runner)

        runner.run.assert_not_called()
        assert reporter.calls == []

    def test_pending_failure_has_no_command_side_effects(self, tmp_path: Path) -> None:
        marker = tmp_path / "marker"

        with pytest.raises(StatusReportError):
            run_status_task(
                make_config(tmp_path),
                f"touch {marker}",
                env={},
                reporter=RecordingReporter(fail_on=0),
            )

        assert not marker.exists()
        assert not (tmp_path / "status.txt").exists()

    def test_final_failure_propagates(self, tmp_path: Path) -> None:
        reporter = RecordingReporter(fail_on=1)

        with pytest.raises(StatusReportError):
            run_status_task(make_config(tmp_path), "true", env={}, reporter=reporter)

        assert [call[3] for call in reporter.calls] == [StatusState.PENDING]

    def test_start_failure_still_reports_failure(self, tmp_path: Path) -> None:
        reporter = RecordingReporter()
        runner = mock.Mock(spec=TaskRunner)
        runner.run.return_value = CommandResult(succeeded=False, error="bash: not found")

        code = run_status_task(make_config(tmp_path), "true", env={}, reporter=reporter, runner=runner)

        assert code == EXIT_FAILURE
        assert [call[3] for call in reporter.calls] == [StatusState.PENDING, StatusState.FAILURE]

    def test_runner_receives_flags(self, tmp_path: Path) -> None:
        runner = mock.Mock(spec=TaskRunner)
        runner.run.return_value = CommandResult(succeeded=True, returncode=0)
        config = make_config(tmp_path, show_output=True, suppress_command_echo=True, context="build")

        run_status_task(config, "make", env={}, reporter=RecordingReporter(), runner=runner)

        runner.run.assert_called_once_with(
            "make",
            tmp_path / "build.txt",
            tee_to_console=True,
            echo_command=False,
        )

    def test_log_error_is_fatal_after_pending(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")
        reporter = RecordingReporter()

        with pytest.raises(LogArtifactError):
            run_status_task(make_config(tmp_path, artifacts_dir=str(blocker)), "true", env={}, reporter=reporter)

        assert [call[3] for call in reporter.calls] == [StatusState.PENDING]

    def test_simulate_never_touches_network(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO, logger="cistatus")
        config = make_config(tmp_path, token="", simulate=True)

        with mock.patch("cistatus.utils.github_api.safe_urlopen") as urlopen:
            code = run_status_task(config, "exit 1", env={}, runner=TaskRunner(console=io.BytesIO()))

        urlopen.assert_not_called()
        assert code == EXIT_FAILURE
        messages = [r.message for r in caplog.records if r.message.startswith("[Fake Github]")]
        assert messages == [
            "[Fake Github] Updating status for 'status' to pending",
            "[Fake Github] Updating status for 'status' to failure",
        ]

    def test_missing_command_is_fatal(self, tmp_path: Path) -> None:
        reporter = RecordingReporter()

        with pytest.raises(ConfigError, match="No command provided"):
            run_status_task(make_config(tmp_path), "", env={}, reporter=reporter)

        assert reporter.calls == []

    def test_missing_provider_variable_is_fatal_before_any_post(self, tmp_path: Path) -> None:
        reporter = RecordingReporter()
        runner = mock.Mock(spec=TaskRunner)
        config = make_config(tmp_path, owner="", repo="", revision="")
        env = {"CI": "true", "TRAVIS": "true", "TRAVIS_REPO_SLUG": "acme/widget"}

        with pytest.raises(ConfigError, match="TRAVIS_COMMIT"):
            run_status_task(config, "true", env=env, reporter=reporter, runner=runner)

        assert reporter.calls == []
        runner.run.assert_not_called()

    def test_provider_values_reach_reporter(self, tmp_path: Path) -> None:
        reporter = RecordingReporter()
        config = make_config(tmp_path, owner="", repo="", revision="")
        env = {
            "CI": "true",
            "TRAVIS": "true",
            "TRAVIS_REPO_SLUG": "octo/lib",
            "TRAVIS_COMMIT": "f00d",
        }

        run_status_task(config, "true", env=env, reporter=reporter)

        assert reporter.calls[0][:3] == ("octo", "lib", "f00d")


class TestPrepareConfig:
    """Tests for config completion and validation."""

    def test_requires_description(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="description"):
            prepare_config(make_config(tmp_path, description=""), env={})

    def test_reads_token_from_env(self, tmp_path: Path) -> None:
        config = prepare_config(make_config(tmp_path, token=""), env={"GITHUB_API_TOKEN": "from-env"})

        assert config.token == "from-env"

    def test_missing_token_is_fatal(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="GITHUB_API_TOKEN"):
            prepare_config(make_config(tmp_path, token=""), env={})

    def test_simulate_ignores_token(self, tmp_path: Path) -> None:
        config = prepare_config(
            make_config(tmp_path, token="", simulate=True),
            env={"GITHUB_API_TOKEN": "unused"},
        )

        assert config.token == ""

    def test_empty_context_is_fatal(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="context"):
            prepare_config(make_config(tmp_path, context=""), env={})

    def test_empty_context_never_posts_or_writes_log(self, tmp_path: Path) -> None:
        reporter = RecordingReporter()

        with pytest.raises(ConfigError):
            run_status_task(make_config(tmp_path, context=""), "true", env={}, reporter=reporter)

        assert reporter.calls == []
        assert not (tmp_path / ".txt").exists()

    def test_local_run_requires_identity(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="owner, repo, revision"):
            prepare_config(make_config(tmp_path, owner="", repo="", revision=""), env={})
