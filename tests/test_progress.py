from lfops.cli.common.progress import (
    _MAX_TABLE_NAME_WIDTH,
    GrantProgress,
    _truncate,
    outcome_line,
)
from lfops.core.catalog import DiscoveryResult
from lfops.core.models import (
    CatalogIdentifier,
    GrantOutcome,
    GrantStatus,
    TableRef,
    WorkItem,
)

ITEM = WorkItem(
    catalog=CatalogIdentifier("123456789012", "fed-catalog"),
    table=TableRef("sales", "orders"),
    principal="IAM_ALLOWED_PRINCIPALS",
)


def test_outcome_line_marks_granted_and_already_granted():
    granted = outcome_line(GrantOutcome(item=ITEM, status=GrantStatus.SUCCEEDED))
    again = outcome_line(GrantOutcome(item=ITEM, status=GrantStatus.ALREADY_GRANTED))

    assert "✓" in granted and "sales.orders" in granted
    assert "already granted" in again


def test_outcome_line_includes_failure_reason():
    line = outcome_line(
        GrantOutcome(item=ITEM, status=GrantStatus.FAILED, reason="AccessDeniedException")
    )

    assert "✗" in line
    assert line.endswith("sales.orders: AccessDeniedException")


def test_truncate_long_table_names():
    long_name = "x" * (_MAX_TABLE_NAME_WIDTH + 10)

    assert len(_truncate(long_name, _MAX_TABLE_NAME_WIDTH)) == _MAX_TABLE_NAME_WIDTH
    assert _truncate(long_name, _MAX_TABLE_NAME_WIDTH).endswith("...")
    assert _truncate("short", _MAX_TABLE_NAME_WIDTH) == "short"


def test_outcome_line_escapes_markup_in_names_and_reasons():
    item = WorkItem(
        catalog=ITEM.catalog, table=TableRef("db", "b[/]"), principal=ITEM.principal
    )
    line = outcome_line(
        GrantOutcome(item=item, status=GrantStatus.FAILED, reason="[bold]bad[/bold]")
    )

    assert "db.b\\[/]" in line
    assert line.endswith("\\[bold]bad\\[/bold]")


def test_grant_progress_prints_names_containing_markup(capsys):
    item = WorkItem(
        catalog=ITEM.catalog, table=TableRef("db", "b[/]"), principal=ITEM.principal
    )

    with GrantProgress() as progress:
        progress.start_grants(
            DiscoveryResult(databases=["db"], tables=[item.table], skipped=[])
        )
        progress.advance(GrantOutcome(item=item, status=GrantStatus.SUCCEEDED))

    assert "db.b[/]" in capsys.readouterr().out
