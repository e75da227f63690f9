"""
ZeroDB Tables API Wrapper

Provides methods for NoSQL table operations. Filters and updates use
MongoDB-style documents, so guarded writes ("update only if the list does not
yet contain X") are applied by the store in a single operation.
"""

import json
from typing import Any, List, Optional


class TablesAPI:
    """
    Wrapper for ZeroDB Tables API operations.

    Provides methods for:
    - Creating, listing, inspecting and deleting tables
    - Inserting and querying rows
    - Filtered bulk updates and deletes
    """

    def __init__(self, client):
        """
        Initialize TablesAPI wrapper.

        Args:
            client: ZeroDBClient instance
        """
        self.client = client

    def _tables_path(self) -> str:
        return f"/v1/public/projects/{self.client.project_id}/database/tables"

    def _rows_path(self, table_name: str) -> str:
        return f"{self._tables_path()}/{table_name}/rows"

    async def create(
        self,
        name: str,
        schema: dict[str, Any],
        description: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Create a new table.

        Args:
            name: Table name
            schema: Table schema definition
            description: Optional table description

        Returns:
            Dict with table details
        """
        payload = {"name": name, "schema": schema}
        if description:
            payload["description"] = description

        return await self.client._request("POST", self._tables_path(), json=payload)

    async def list(self, skip: int = 0, limit: int = 100) -> list[dict[str, Any]]:
        """List all tables in the project."""
        params = {"skip": skip, "limit": limit}
        response = await self.client._request("GET", self._tables_path(), params=params)
        return response.get("tables", [])

    async def delete(self, table_name: str) -> dict[str, Any]:
        """Delete a table."""
        return await self.client._request("DELETE", f"{self._tables_path()}/{table_name}")

    async def insert_rows(
        self,
        table_name: str,
        rows: List[dict[str, Any]],
    ) -> dict[str, Any]:
        """
        Insert rows into a table.

        Args:
            table_name: Name of the table
            rows: List of row objects to insert

        Returns:
            Dict with inserted row IDs

        Example:
            result = await client.tables.insert_rows(
                "events",
                [{"event_id": "uuid1", "title": "Spring Hack"}],
            )
        """
        return await self.client._request(
            "POST", self._rows_path(table_name), json={"rows": rows}
        )

    async def query_rows(
        self,
        table_name: str,
        filter: Optional[dict[str, Any]] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[dict[str, Any]]:
        """
        Query rows from a table.

        Args:
            table_name: Name of the table
            filter: MongoDB-style query filter (optional)
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            List of matching rows

        Example:
            rows = await client.tables.query_rows(
                "events",
                filter={"status": "active"},
                limit=10
            )
        """
        params: dict[str, Any] = {"skip": skip, "limit": limit}
        if filter:
            params["filter"] = json.dumps(filter)

        response = await self.client._request("GET", self._rows_path(table_name), params=params)
        return response.get("rows", [])

    async def query_all_rows(
        self,
        table_name: str,
        filter: Optional[dict[str, Any]] = None,
        page_size: int = 500,
    ) -> List[dict[str, Any]]:
        """
        Query every row matching the filter, paging until a short page.

        Args:
            table_name: Name of the table
            filter: MongoDB-style query filter (optional)
            page_size: Rows fetched per request

        Returns:
            List of all matching rows
        """
        rows: List[dict[str, Any]] = []
        skip = 0
        while True:
            page = await self.query_rows(table_name, filter=filter, skip=skip, limit=page_size)
            rows.extend(page)
            if len(page) < page_size:
                return rows
            skip += page_size

    async def update_rows(
        self,
        table_name: str,
        filter: dict[str, Any],
        update: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Apply a MongoDB-style update to every row matching the filter.

        The filter and update are evaluated together by the store, so a
        guard placed in the filter holds at the moment of the write.

        Args:
            table_name: Name of the table
            filter: MongoDB-style query filter
            update: Update document ($set, $addToSet, $push, $pull)

        Returns:
            Dict with matched_count and modified_count

        Example:
            result = await client.tables.update_rows(
                "events",
                filter={"event_id": "e1", "participants": {"$ne": "u1"}},
                update={"$addToSet": {"participants": "u1"}},
            )
        """
        payload = {"filter": filter, "update": update}
        return await self.client._request(
            "PATCH", self._rows_path(table_name), json=payload
        )

    async def delete_rows(
        self,
        table_name: str,
        filter: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Delete every row matching the filter.

        Returns:
            Dict with deleted_count
        """
        return await self.client._request(
            "DELETE", self._rows_path(table_name), json={"filter": filter}
        )
