from __future__ import annotations

from botocore.exceptions import BotoCoreError, ClientError

from lfops.core.errors import translate_error
from lfops.core.models import CatalogIdentifier


class GlueCatalogAdapter:
    """Adapter around the boto3 Glue Data Catalog APIs (databases/tables)."""

    def __init__(self, client) -> None:
        self.client = client

    def list_databases(self, catalog_id: CatalogIdentifier) -> list[str]:
        """List database names in a catalog, in provider order."""
        out: list[str] = []
        try:
            paginator = self.client.get_paginator("get_databases")
            for page in paginator.paginate(CatalogId=str(catalog_id)):
                for db in page.get("DatabaseList", []):
                    name = db.get("Name")
                    if name:
                        out.append(name)
        except (ClientError, BotoCoreError) as exc:
            raise translate_error(exc) from exc
        return out

    def list_tables(self, catalog_id: CatalogIdentifier, database: str) -> list[str]:
        """List table names in a database of the catalog."""
        out: list[str] = []
        try:
            paginator = self.client.get_paginator("get_tables")
            pages = paginator.paginate(CatalogId=str(catalog_id), DatabaseName=database)
            for page in pages:
                for t in page.get("TableList", []):
                    name = t.get("Name")
                    if name:
                        out.append(name)
        except (ClientError, BotoCoreError) as exc:
            raise translate_error(exc) from exc
        return out
