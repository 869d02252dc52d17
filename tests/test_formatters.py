from canvas_sync.cli.formatters import print_summary_panel
from canvas_sync.models.stats import SyncStats


def test_summary_names_failed_files(capsys):
    stats = SyncStats(
        files_listed=3,
        files_dispatched=3,
        files_failed=1,
        failed_names=["lab[2].zip"],
    )

    print_summary_panel(stats, 4.0)

    out = capsys.readouterr().out
    assert "Failed:" in out
    assert "lab[2].zip" in out


def test_summary_without_failures_lists_no_names(capsys):
    print_summary_panel(SyncStats(files_listed=1, files_dispatched=1), 1.0)

    assert "Failed" not in capsys.readouterr().out
