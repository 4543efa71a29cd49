"""Catalog client backed by the Jellyfin REST API."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import requests

from core.logging_utils import redact_secret

from .errors import CatalogError
from .types import CatalogItem, DeleteOptions, ItemQuery, LibraryRoot

LOGGER = logging.getLogger("offvocal.catalog.jellyfin")

DEFAULT_BASE_URL = "http://127.0.0.1:8096"


@dataclass(slots=True)
class CatalogSettings:
    base_url: str = DEFAULT_BASE_URL
    api_key: Optional[str] = None
    user_id: Optional[str] = None
    timeout_s: float = 30.0
    verify_tls: bool = True

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> "CatalogSettings":
        data = dict(mapping or {})
        base_url = str(data.get("base_url") or DEFAULT_BASE_URL).strip().rstrip("/")
        api_key = data.get("api_key")
        user_id = data.get("user_id")
        return cls(
            base_url=base_url,
            api_key=str(api_key).strip() if api_key else None,
            user_id=str(user_id).strip() if user_id else None,
            timeout_s=float(data.get("timeout_s", 30) or 30),
            verify_tls=bool(data.get("verify_tls", True)),
        )

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> "CatalogSettings":
        raw = settings.get("catalog")
        return cls.from_mapping(raw if isinstance(raw, Mapping) else {})


class JellyfinCatalogClient:
    """Query and delete library items on a Jellyfin server.

    Keywords go to ``SearchTerm``, which Jellyfin matches against the cleaned
    item name and ``OriginalTitle``. Results can therefore include items whose
    display name does not literally contain the keyword.
    """

    def __init__(self, settings: CatalogSettings, *, session: Optional[requests.Session] = None) -> None:
        self.settings = settings
        self._session = session or requests.Session()
        self._session.headers.update({"Accept": "application/json"})
        if settings.api_key:
            self._session.headers["Authorization"] = f'MediaBrowser Token="{settings.api_key}"'
        LOGGER.debug(
            "Jellyfin client ready (url=%s, api_key=%s)",
            settings.base_url,
            redact_secret(settings.api_key),
        )

    # ------------------------------------------------------------------
    def _request(self, method: str, path: str, *, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        url = f"{self.settings.base_url}{path}"
        try:
            response = self._session.request(
                method,
                url,
                params=params,
                timeout=self.settings.timeout_s,
                verify=self.settings.verify_tls,
            )
        except requests.RequestException as exc:
            raise CatalogError(f"{method} {path} failed: {exc}") from exc
        if response.status_code >= 400:
            raise CatalogError(
                f"{method} {path} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return response

    def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = self._request("GET", path, params=params)
        try:
            return response.json()
        except ValueError as exc:
            raise CatalogError(f"GET {path} returned invalid JSON") from exc

    def _query_params(self, query: ItemQuery) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "Recursive": "true" if query.recursive else "false",
            "IncludeItemTypes": ",".join(sorted(kind.value for kind in query.item_types)),
            "MediaTypes": query.media_type,
            "SearchTerm": query.keyword,
            "EnableImages": "false",
            "EnableUserData": "false",
        }
        if query.exclude_virtual:
            params["ExcludeLocationTypes"] = "Virtual"
        if query.scope.parent_id is not None:
            params["ParentId"] = query.scope.parent_id
        if self.settings.user_id:
            params["UserId"] = self.settings.user_id
        return params

    # ------------------------------------------------------------------
    def list_roots(self) -> List[LibraryRoot]:
        data = self._get_json("/Library/VirtualFolders")
        if not isinstance(data, list):
            raise CatalogError("GET /Library/VirtualFolders returned an unexpected payload")
        roots: List[LibraryRoot] = []
        for entry in data:
            if not isinstance(entry, dict):
                continue
            item_id = entry.get("ItemId")
            roots.append(LibraryRoot(name=str(entry.get("Name") or ""), id=str(item_id) if item_id else None))
        return roots

    def count(self, query: ItemQuery) -> int:
        params = self._query_params(query)
        params.update({"Limit": 0, "EnableTotalRecordCount": "true"})
        data = self._get_json("/Items", params)
        try:
            return int(data.get("TotalRecordCount", 0))
        except (AttributeError, TypeError, ValueError) as exc:
            raise CatalogError("GET /Items returned no usable TotalRecordCount") from exc

    def page(self, query: ItemQuery, offset: int, limit: int) -> List[CatalogItem]:
        params = self._query_params(query)
        params.update(
            {
                "StartIndex": int(offset),
                "Limit": int(limit),
                "Fields": "Path",
                "EnableTotalRecordCount": "false",
            }
        )
        data = self._get_json("/Items", params)
        rows = data.get("Items") if isinstance(data, dict) else None
        if not isinstance(rows, list):
            raise CatalogError("GET /Items returned no Items list")
        items: List[CatalogItem] = []
        for row in rows:
            if not isinstance(row, dict) or not row.get("Id"):
                continue
            items.append(CatalogItem(id=str(row["Id"]), path=row.get("Path"), name=row.get("Name")))
        return items

    def delete(self, item: CatalogItem, options: DeleteOptions) -> None:
        if not options.remove_file_from_disk:
            # DELETE /Items/{id} always removes the backing file.
            raise CatalogError("Jellyfin cannot remove a catalog entry while keeping its file")
        self._request("DELETE", f"/Items/{item.id}")

    def close(self) -> None:
        self._session.close()


__all__ = ["CatalogSettings", "JellyfinCatalogClient"]
