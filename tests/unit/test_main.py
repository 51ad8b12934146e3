"""
Unit tests for the recurcal command line

Runs main() in-process with argv lists and inspects stdout/stderr.
"""

import pytest

from recurcal.__main__ import _create_parser, main
from recurcal.ics_importer import load_ics_file

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run each command from an empty directory so no recurcal.yaml is found."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestParser:
    """Argument parsing."""

    def test_subcommand_is_required(self):
        with pytest.raises(SystemExit):
            _create_parser().parse_args([])

    def test_bare_end_date_covers_whole_day(self):
        args = _create_parser().parse_args(
            ["expand", "cal.ics", "--start", "2026-01-15", "--end", "2026-01-19"]
        )

        assert args.end.isoformat() == "2026-01-19T23:59:59.999999"
        assert args.start.isoformat() == "2026-01-15T00:00:00"

    def test_end_with_time_is_kept(self):
        args = _create_parser().parse_args(
            ["expand", "cal.ics", "--start", "2026-01-15", "--end", "2026-01-19T12:00:00"]
        )

        assert args.end.isoformat() == "2026-01-19T12:00:00"

    def test_bad_date_is_rejected(self, capsys):
        with pytest.raises(SystemExit):
            _create_parser().parse_args(["expand", "cal.ics", "--start", "soon", "--end", "2026-01-19"])

        assert "invalid date/time" in capsys.readouterr().err


class TestDescribe:
    """describe subcommand."""

    def test_describes_rule(self, capsys):
        assert main(["describe", "FREQ=WEEKLY;INTERVAL=2;BYDAY=MO,WE;COUNT=5"]) == 0

        assert capsys.readouterr().out.strip() == "Every 2 weeks on Mon, Wed, 5 times"

    def test_empty_rule(self, capsys):
        assert main(["describe", ""]) == 0

        assert capsys.readouterr().out.strip() == "(does not repeat)"


class TestExpand:
    """expand subcommand."""

    def test_lists_occurrences(self, isolated_cwd, sample_ics_recurring, capsys):
        path = isolated_cwd / "standup.ics"
        path.write_text(sample_ics_recurring, encoding="utf-8")

        status = main(["expand", str(path), "--start", "2026-01-16T00:00:00Z", "--end", "2026-01-17"])

        lines = capsys.readouterr().out.strip().splitlines()
        assert status == 0
        assert lines == [
            "2026-01-16T09:00:00+00:00  Daily Standup  [ics-test-event-002@recurcal.test-instance-1]",
            "2026-01-17T09:00:00+00:00  Daily Standup  [ics-test-event-002@recurcal.test-instance-2]",
        ]

    def test_config_caps_occurrences(self, isolated_cwd, sample_ics_recurring, capsys):
        (isolated_cwd / "recurcal.yaml").write_text("max_occurrences: 2\n", encoding="utf-8")
        path = isolated_cwd / "standup.ics"
        path.write_text(sample_ics_recurring, encoding="utf-8")

        main(["expand", str(path), "--start", "2026-01-01T00:00:00Z", "--end", "2026-02-01"])

        assert len(capsys.readouterr().out.strip().splitlines()) == 2

    def test_missing_file_reports_error(self, capsys):
        status = main(["expand", "absent.ics", "--start", "2026-01-01", "--end", "2026-01-31"])

        assert status == 1
        assert "recurcal: Unable to read" in capsys.readouterr().err

    def test_invalid_calendar_reports_error(self, isolated_cwd, capsys):
        path = isolated_cwd / "broken.ics"
        path.write_text("not a calendar", encoding="utf-8")

        status = main(["expand", str(path), "--start", "2026-01-01", "--end", "2026-01-31"])

        assert status == 1
        assert "Invalid ICS content" in capsys.readouterr().err


class TestExport:
    """export subcommand."""

    def test_round_trips_through_file(self, isolated_cwd, sample_ics_mixed, capsys):
        source = isolated_cwd / "in.ics"
        source.write_text(sample_ics_mixed, encoding="utf-8")
        target = isolated_cwd / "out.ics"

        status = main(["--log-level", "WARNING", "export", str(source), "-o", str(target)])

        assert status == 0
        assert capsys.readouterr().out.strip() == f"Exported 2 events to {target}"
        exported = load_ics_file(target)
        assert [event.title for event in exported.events] == ["Gym", "Call"]
        assert exported.events[0].recurrence.days_of_week == [1, 3]

    def test_uses_configured_prodid(self, isolated_cwd, sample_ics_simple):
        (isolated_cwd / "recurcal.yaml").write_text(
            "ics_prodid: -//Home//EN\ncalendar_name: Home\n", encoding="utf-8"
        )
        source = isolated_cwd / "in.ics"
        source.write_text(sample_ics_simple, encoding="utf-8")
        target = isolated_cwd / "out.ics"

        main(["export", str(source), "-o", str(target)])

        content = target.read_text(encoding="utf-8")
        assert "PRODID:-//Home//EN" in content
        assert "X-WR-CALNAME:Home" in content

    def test_bad_config_reports_error(self, isolated_cwd, capsys):
        (isolated_cwd / "recurcal.yaml").write_text("- not\n- a mapping\n", encoding="utf-8")

        assert main(["describe", "FREQ=DAILY"]) == 1
        assert "mapping" in capsys.readouterr().err


class TestConfigOption:
    """--config handling."""

    def test_unreadable_config_reports_error(self, isolated_cwd, capsys):
        assert main(["--config", str(isolated_cwd), "describe", "FREQ=DAILY"]) == 1
        assert "Unable to read config" in capsys.readouterr().err
