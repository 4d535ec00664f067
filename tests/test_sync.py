import pytest

from lfops.core.catalog import DiscoveryError
from lfops.core.errors import AccessDenied, NotFound, TransientError
from lfops.core.models import (
    CatalogIdentifier,
    GrantFailure,
    GrantStatus,
    TableRef,
)
from lfops.core.sync import sync_catalog_permissions

CATALOG = CatalogIdentifier(account_id="123456789012", catalog_name="fed-catalog")


class _Glue:
    def __init__(self, tables_by_db, *, table_errors=None, db_error=None):
        self.tables_by_db = tables_by_db
        self.table_errors = table_errors or {}
        self.db_error = db_error

    def list_databases(self, catalog_id):
        if self.db_error:
            raise self.db_error
        return list(self.tables_by_db)

    def list_tables(self, catalog_id, database):
        if database in self.table_errors:
            raise self.table_errors[database]
        return list(self.tables_by_db[database])


class _LakeFormation:
    """In-memory grant store with Lake Formation's idempotent semantics."""

    def __init__(self, errors=None):
        self.errors = errors or {}
        self.granted: set[tuple[str, str, str, str, tuple[str, ...]]] = set()
        self.calls = 0

    def grant_table_permission(self, catalog_id, database, table, principal, permissions):
        self.calls += 1
        if table in self.errors:
            raise self.errors[table]
        key = (str(catalog_id), database, table, principal, tuple(permissions))
        if key in self.granted:
            return GrantStatus.ALREADY_GRANTED
        self.granted.add(key)
        return GrantStatus.SUCCEEDED


def _scenario_catalog(**kwargs) -> _Glue:
    return _Glue({"db1": ["a", "b"], "db2": [], "db3": ["c"]}, **kwargs)


def test_sync_grants_every_table():
    lf = _LakeFormation()

    result = sync_catalog_permissions(_scenario_catalog(), lf, CATALOG, max_parallel=2)

    summary = result.summary
    assert len(result.work_items) == 3
    assert (summary.total_items, summary.succeeded, summary.failed) == (3, 3, 0)
    assert summary.failures == ()
    assert {(db, t) for _, db, t, _, _ in lf.granted} == {
        ("db1", "a"),
        ("db1", "b"),
        ("db3", "c"),
    }


def test_sync_is_idempotent_across_reruns():
    glue = _scenario_catalog()
    lf = _LakeFormation()

    first = sync_catalog_permissions(glue, lf, CATALOG, max_parallel=2).summary
    second = sync_catalog_permissions(glue, lf, CATALOG, max_parallel=2).summary

    assert (first.succeeded, first.failed, first.already_granted) == (3, 0, 0)
    assert (second.succeeded, second.failed, second.already_granted) == (3, 0, 3)
    assert len(lf.granted) == 3


def test_sync_skips_database_whose_tables_cannot_be_listed():
    glue = _scenario_catalog(
        table_errors={"db2": TransientError("slow down", code="ThrottlingException")}
    )

    result = sync_catalog_permissions(glue, _LakeFormation(), CATALOG, max_parallel=2)

    summary = result.summary
    assert [i.table.full_name for i in result.work_items] == ["db1.a", "db1.b", "db3.c"]
    assert (summary.total_items, summary.succeeded, summary.failed) == (3, 3, 0)
    assert [s.database for s in summary.skipped_databases] == ["db2"]


def test_sync_reports_failed_grant_without_aborting_the_run():
    lf = _LakeFormation(errors={"b": AccessDenied("denied", code="AccessDeniedException")})

    summary = sync_catalog_permissions(
        _scenario_catalog(), lf, CATALOG, max_parallel=2
    ).summary

    assert (summary.total_items, summary.succeeded, summary.failed) == (3, 2, 1)
    assert summary.failures == (
        GrantFailure(table=TableRef("db1", "b"), reason="AccessDeniedException: denied"),
    )


def test_sync_reports_tables_that_vanished_before_the_grant():
    lf = _LakeFormation(errors={"c": NotFound("gone", code="EntityNotFoundException")})

    summary = sync_catalog_permissions(
        _scenario_catalog(), lf, CATALOG, max_parallel=2
    ).summary

    assert summary.failed == 1
    assert summary.failures[0].table == TableRef("db3", "c")


def test_sync_aborts_before_any_grant_when_catalog_is_missing():
    glue = _Glue({}, db_error=NotFound("no catalog", code="EntityNotFoundException"))
    lf = _LakeFormation()

    with pytest.raises(DiscoveryError):
        sync_catalog_permissions(glue, lf, CATALOG)

    assert lf.calls == 0


def test_sync_dry_run_discovers_without_granting():
    lf = _LakeFormation()
    discovered = []

    result = sync_catalog_permissions(
        _scenario_catalog(),
        lf,
        CATALOG,
        dry_run=True,
        on_discovered=discovered.append,
    )

    assert result.dry_run is True
    assert result.summary.total_items == 3
    assert result.summary.succeeded == 0
    assert lf.calls == 0
    assert len(discovered) == 1


def test_sync_uses_principal_and_permissions():
    lf = _LakeFormation()

    sync_catalog_permissions(
        _Glue({"db": ["t"]}),
        lf,
        CATALOG,
        principal="arn:aws:iam::123456789012:role/analyst",
        permissions=["SELECT", "DESCRIBE"],
    )

    assert lf.granted == {
        (
            "123456789012:fed-catalog",
            "db",
            "t",
            "arn:aws:iam::123456789012:role/analyst",
            ("SELECT", "DESCRIBE"),
        )
    }
