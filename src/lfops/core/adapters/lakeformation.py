from __future__ import annotations

from typing import Sequence

from botocore.exceptions import BotoCoreError, ClientError

from lfops.core.errors import is_already_exists, translate_error
from lfops.core.models import CatalogIdentifier, GrantStatus


class LakeFormationAdapter:
    """Adapter around the boto3 Lake Formation permission APIs."""

    def __init__(self, client) -> None:
        self.client = client

    def grant_table_permission(
        self,
        catalog_id: CatalogIdentifier,
        database: str,
        table: str,
        principal: str,
        permissions: Sequence[str],
    ) -> GrantStatus:
        """
        Grant `permissions` on a single table to `principal`.

        Federated catalogs reject `TableWildcard`, so the table is always
        named explicitly. An identical existing grant is reported as
        `ALREADY_GRANTED` rather than raised.
        """
        try:
            self.client.grant_permissions(
                Principal={"DataLakePrincipalIdentifier": principal},
                Resource={
                    "Table": {
                        "CatalogId": str(catalog_id),
                        "DatabaseName": database,
                        "Name": table,
                    }
                },
                Permissions=list(permissions),
            )
        except ClientError as exc:
            if is_already_exists(exc):
                return GrantStatus.ALREADY_GRANTED
            raise translate_error(exc) from exc
        except BotoCoreError as exc:
            raise translate_error(exc) from exc
        return GrantStatus.SUCCEEDED
