import pytest
from botocore.exceptions import ClientError, EndpointConnectionError, ReadTimeoutError

from lfops.core.adapters.glue import GlueCatalogAdapter
from lfops.core.adapters.lakeformation import LakeFormationAdapter
from lfops.core.errors import (
    AccessDenied,
    CatalogApiError,
    NotFound,
    TransientError,
    translate_error,
)
from lfops.core.models import CatalogIdentifier, GrantStatus

CATALOG = CatalogIdentifier(account_id="123456789012", catalog_name="fed-catalog")


def _client_error(code: str, operation: str = "GrantPermissions") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": f"{code} message"}}, operation)


class _Paginator:
    def __init__(self, pages, error=None):
        self.pages = pages
        self.error = error
        self.calls: list[dict] = []

    def paginate(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return iter(self.pages)


class _GlueClient:
    def __init__(self, paginators):
        self.paginators = paginators

    def get_paginator(self, name):
        return self.paginators[name]


class _LakeFormationClient:
    def __init__(self, error=None):
        self.error = error
        self.calls: list[dict] = []

    def grant_permissions(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return {}


def test_glue_list_databases_walks_all_pages():
    paginator = _Paginator(
        [
            {"DatabaseList": [{"Name": "db1"}, {"Name": "db2"}]},
            {"DatabaseList": [{"Name": "db3"}, {}]},
        ]
    )
    adapter = GlueCatalogAdapter(_GlueClient({"get_databases": paginator}))

    assert adapter.list_databases(CATALOG) == ["db1", "db2", "db3"]
    assert paginator.calls == [{"CatalogId": "123456789012:fed-catalog"}]


def test_glue_list_tables_scopes_to_catalog_and_database():
    paginator = _Paginator([{"TableList": [{"Name": "a"}]}, {"TableList": []}])
    adapter = GlueCatalogAdapter(_GlueClient({"get_tables": paginator}))

    assert adapter.list_tables(CATALOG, "db1") == ["a"]
    assert paginator.calls == [
        {"CatalogId": "123456789012:fed-catalog", "DatabaseName": "db1"}
    ]


def test_glue_errors_are_translated():
    paginator = _Paginator([], error=_client_error("EntityNotFoundException", "GetDatabases"))
    adapter = GlueCatalogAdapter(_GlueClient({"get_databases": paginator}))

    with pytest.raises(NotFound) as excinfo:
        adapter.list_databases(CATALOG)

    assert excinfo.value.code == "EntityNotFoundException"


def test_lakeformation_grant_names_the_table_explicitly():
    client = _LakeFormationClient()
    adapter = LakeFormationAdapter(client)

    status = adapter.grant_table_permission(
        CATALOG, "db1", "a", "IAM_ALLOWED_PRINCIPALS", ("ALL",)
    )

    assert status == GrantStatus.SUCCEEDED
    assert client.calls == [
        {
            "Principal": {"DataLakePrincipalIdentifier": "IAM_ALLOWED_PRINCIPALS"},
            "Resource": {
                "Table": {
                    "CatalogId": "123456789012:fed-catalog",
                    "DatabaseName": "db1",
                    "Name": "a",
                }
            },
            "Permissions": ["ALL"],
        }
    ]


def test_lakeformation_already_exists_is_not_an_error():
    adapter = LakeFormationAdapter(
        _LakeFormationClient(error=_client_error("AlreadyExistsException"))
    )

    status = adapter.grant_table_permission(CATALOG, "db1", "a", "P", ["ALL"])

    assert status == GrantStatus.ALREADY_GRANTED


def test_lakeformation_access_denied_is_raised():
    adapter = LakeFormationAdapter(
        _LakeFormationClient(error=_client_error("AccessDeniedException"))
    )

    with pytest.raises(AccessDenied):
        adapter.grant_table_permission(CATALOG, "db1", "a", "P", ["ALL"])


@pytest.mark.parametrize(
    ("code", "expected"),
    [
        ("EntityNotFoundException", NotFound),
        ("AccessDeniedException", AccessDenied),
        ("ThrottlingException", TransientError),
        ("InternalServiceException", TransientError),
        ("ConcurrentModificationException", TransientError),
        ("InvalidInputException", CatalogApiError),
    ],
)
def test_translate_error_maps_client_error_codes(code, expected):
    err = translate_error(_client_error(code))

    assert type(err) is expected
    assert err.code == code
    assert err.reason == code


def test_error_detail_keeps_the_provider_message():
    err = translate_error(_client_error("InvalidInputException"))

    assert err.reason == "InvalidInputException"
    assert err.detail == "InvalidInputException: InvalidInputException message"
    assert CatalogApiError("boom").detail == "boom"
    assert CatalogApiError("", code="ThrottlingException").detail == "ThrottlingException"


def test_translate_error_treats_network_failures_as_transient():
    conn = translate_error(EndpointConnectionError(endpoint_url="https://glue"))
    timeout = translate_error(ReadTimeoutError(endpoint_url="https://lakeformation"))

    assert isinstance(conn, TransientError)
    assert isinstance(timeout, TransientError)
    assert timeout.code == "ReadTimeoutError"
