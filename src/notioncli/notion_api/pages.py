"""Page API wrappers for the Notion API.

Thin wrappers around the ``/pages`` endpoints.  All HTTP concerns (auth,
retries) are delegated to the transport.  IDs are expected to be
normalized already.
"""

from __future__ import annotations

from typing import Any

from .transport import NotionTransport


class PageAPI:
    """Wrapper for the Notion Pages API.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport` instance.
    """

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def create(
        self,
        parent: dict[str, Any],
        properties: dict[str, Any],
        children: list[dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        """Create a new page.

        Parameters
        ----------
        parent:
            Parent object, e.g. ``{"page_id": "..."}``.
        properties:
            Page properties.  For pages under another page the minimal
            shape is ``{"title": {"title": [{"text": {"content": "..."}}]}}``.
        children:
            Optional block objects to use as page content (at most 100).

        Returns
        -------
        dict
            The created page object.
        """
        body: dict[str, Any] = {
            "parent": parent,
            "properties": properties,
        }
        if children is not None:
            body["children"] = children
        return self._transport.request("POST", "/pages", json=body)

    def retrieve(self, page_id: str) -> dict[str, Any]:
        return self._transport.request("GET", f"/pages/{page_id}")

    def update(
        self,
        page_id: str,
        properties: dict[str, Any] | None = None,
        icon: dict[str, Any] | None = None,
        archived: bool | None = None,
    ) -> dict[str, Any]:
        """Update a page.  Only the arguments that are not ``None`` are sent.

        Parameters
        ----------
        page_id:
            The UUID of the page to update.
        properties:
            Property values to change; omitted properties are untouched.
        icon:
            Icon object, e.g. ``{"type": "emoji", "emoji": "🚀"}``.
        archived:
            ``True`` moves the page to the trash, ``False`` restores it.

        Returns
        -------
        dict
            The updated page object.
        """
        body: dict[str, Any] = {}
        if properties is not None:
            body["properties"] = properties
        if icon is not None:
            body["icon"] = icon
        if archived is not None:
            body["archived"] = archived
        return self._transport.request("PATCH", f"/pages/{page_id}", json=body)
