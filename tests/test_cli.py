from unittest.mock import MagicMock, patch

from sqlalchemy.exc import OperationalError

from matcha_watch.cli import EXIT_CONFIG_ERROR, EXIT_ITERATION_ERROR, main
from matcha_watch.errors import ConfigurationError, SendError


@patch("matcha_watch.cli.get_settings")
def test_configuration_error_exits_before_loop(mock_settings):
    mock_settings.side_effect = ConfigurationError("JOB_INTERVAL_MINUTES: Field required")

    with patch("matcha_watch.cli.JobScheduler") as mock_scheduler_cls:
        assert main(["run"]) == EXIT_CONFIG_ERROR

    mock_scheduler_cls.assert_not_called()


@patch("matcha_watch.cli.configure_logging")
@patch("matcha_watch.cli.CheckerJob")
@patch("matcha_watch.cli.get_settings")
def test_check_runs_one_iteration(mock_settings, mock_job_cls, _logging, make_settings):
    mock_settings.return_value = make_settings()
    mock_job = MagicMock()
    mock_job.run_iteration.return_value = 2
    mock_job_cls.return_value = mock_job

    assert main(["check"]) == 0

    mock_job.run_iteration.assert_called_once()
    mock_job.close.assert_called_once()


@patch("matcha_watch.cli.configure_logging")
@patch("matcha_watch.cli.JobScheduler")
@patch("matcha_watch.cli.CheckerJob")
@patch("matcha_watch.cli.get_settings")
def test_run_stops_with_error_code_on_iteration_failure(
    mock_settings, mock_job_cls, mock_scheduler_cls, _logging, make_settings
):
    mock_settings.return_value = make_settings()
    mock_scheduler_cls.return_value.start.side_effect = SendError("Could not send email")

    assert main(["run"]) == EXIT_ITERATION_ERROR

    mock_job_cls.return_value.close.assert_called_once()
    assert mock_scheduler_cls.call_args.args[1] == 15


@patch("matcha_watch.cli.configure_logging")
@patch("matcha_watch.cli.JobScheduler")
@patch("matcha_watch.cli.CheckerJob")
@patch("matcha_watch.cli.get_settings")
def test_run_reports_store_failure_as_iteration_error(
    mock_settings, mock_job_cls, mock_scheduler_cls, _logging, make_settings
):
    mock_settings.return_value = make_settings(dedup_enabled=True)
    mock_scheduler_cls.return_value.start.side_effect = OperationalError(
        "SELECT 1", {}, Exception("unable to open database file")
    )

    assert main(["run"]) == EXIT_ITERATION_ERROR

    mock_job_cls.return_value.close.assert_called_once()


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "usage" in capsys.readouterr().out
