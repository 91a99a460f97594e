"""
Trello Client

This module provides the async client for the Trello REST API. Every tool
handler shares one TrelloClient; the client outlives all handlers and owns
the underlying httpx connection pool.

Authentication is the key/token pair sent as query parameters on every
request. Error statuses are mapped to the TrelloAPIError hierarchy and are
never retried here: throttling for bulk operations is the BatchExecutor's job.

Pattern: Client adapter for an external REST API
Anti-Pattern §1.1 Avoided: Uses Optional[T] with explicit None defaults
"""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Awaitable, Callable, Optional, Sequence

import httpx
import structlog

from trello_mcp.clients.http import DEFAULT_TIMEOUT_SECONDS, create_http_client
from trello_mcp.core.exceptions import (
    ConfigurationError,
    TrelloAPIError,
    TrelloAuthError,
    TrelloNetworkError,
    TrelloNotFoundError,
    TrelloRateLimitError,
    TrelloServerError,
)
from trello_mcp.models.domain import BulkResult
from trello_mcp.models.trello import (
    Attachment,
    Board,
    Card,
    Checklist,
    ChecklistProgress,
    CheckItem,
    Comment,
    Label,
    Member,
    TrelloList,
)
from trello_mcp.observability.logging import get_logger
from trello_mcp.resilience.rate_limiter import BatchExecutor, RateLimiter


DEFAULT_BASE_URL: str = "https://api.trello.com/1"

DEFAULT_SEARCH_LIMIT: int = 25

SEARCH_CARD_FIELDS: str = (
    "id,name,desc,idList,idBoard,url,shortUrl,closed,due,labels"
)

MEMBER_CARD_FIELDS: str = (
    "id,name,desc,idList,idBoard,url,shortUrl,due,dueComplete,labels,idMembers"
)

Position = str | float | int


# =============================================================================
# TrelloClient
# =============================================================================


class TrelloClient:
    """
    Async client for the Trello REST API.

    Example:
        >>> async with TrelloClient(api_key="k", api_token="t") as client:
        ...     boards = await client.get_boards()
        ...     card = await client.move_card(card_id, list_id, "top")
    """

    def __init__(
        self,
        api_key: str,
        api_token: str,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        batch_executor: Optional[BatchExecutor] = None,
        logger: Optional[structlog.BoundLogger] = None,
    ) -> None:
        """
        Initialize TrelloClient.

        Args:
            api_key: Trello API key
            api_token: Trello API token
            base_url: Base URL of the Trello API
            http_client: Optional pre-configured HTTP client (for testing)
            timeout_seconds: Request timeout in seconds
            batch_executor: Executor for bulk operations (default: 100 req / 10 s)
            logger: Structured logger (default: module logger)

        Raises:
            ConfigurationError: If the key or the token is empty
        """
        if not api_key or not api_token:
            raise ConfigurationError("Trello API key and token are required")

        self._auth = {"key": api_key, "token": api_token}
        self._logger = logger or get_logger(__name__)

        if http_client is not None:
            self._client = http_client
            self._owns_client = False
        else:
            self._client = create_http_client(
                base_url=base_url or DEFAULT_BASE_URL,
                timeout_seconds=timeout_seconds,
            )
            self._owns_client = True

        self.batch_executor = batch_executor or BatchExecutor(
            RateLimiter(logger=self._logger), logger=self._logger
        )

    async def close(self) -> None:
        """Close the HTTP client if owned by this instance."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "TrelloClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    # =========================================================================
    # Request Helper
    # =========================================================================

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> Any:
        """
        Send one request and decode the JSON body.

        Args:
            method: HTTP method
            path: Path relative to the API base URL
            params: Query parameters (auth is added)
            json: JSON body

        Returns:
            Decoded JSON body, or None for an empty body

        Raises:
            TrelloAPIError: Mapped from the HTTP status or transport failure
        """
        query = {**self._auth, **(params or {})}
        try:
            response = await self._client.request(method, path, params=query, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise self._map_status_error(e.response) from e
        except httpx.TimeoutException as e:
            self._logger.error("trello_timeout", method=method, path=path)
            raise TrelloNetworkError("request timed out") from e
        except httpx.TransportError as e:
            self._logger.error("trello_unreachable", method=method, path=path, error=str(e))
            raise TrelloNetworkError(str(e)) from e

        self._logger.debug(
            "trello_request", method=method, path=path, status=response.status_code
        )
        if not response.content:
            return None
        return response.json()

    def _map_status_error(self, response: httpx.Response) -> TrelloAPIError:
        status = response.status_code
        detail = _error_detail(response)
        self._logger.warning(
            "trello_error_status",
            status=status,
            path=response.request.url.path,
            detail=detail,
        )
        if status in (401, 403):
            return TrelloAuthError(status)
        if status == 404:
            return TrelloNotFoundError(detail)
        if status == 429:
            return TrelloRateLimitError(_parse_retry_after(response.headers.get("Retry-After")))
        return TrelloServerError(status, detail)

    # =========================================================================
    # Boards
    # =========================================================================

    async def get_boards(self) -> list[Board]:
        data = await self._request("GET", "/members/me/boards")
        return [Board.model_validate(b) for b in data]

    async def get_board(self, board_id: str) -> Board:
        return Board.model_validate(await self._request("GET", f"/boards/{board_id}"))

    async def create_board(self, name: str, desc: Optional[str] = None) -> Board:
        body = {"name": name, "desc": desc or "", "defaultLists": False}
        return Board.model_validate(await self._request("POST", "/boards", json=body))

    async def close_board(self, board_id: str) -> Board:
        data = await self._request("PUT", f"/boards/{board_id}", json={"closed": True})
        return Board.model_validate(data)

    async def reopen_board(self, board_id: str) -> Board:
        data = await self._request("PUT", f"/boards/{board_id}", json={"closed": False})
        return Board.model_validate(data)

    async def delete_board(self, board_id: str) -> None:
        await self._request("DELETE", f"/boards/{board_id}")

    # =========================================================================
    # Lists
    # =========================================================================

    async def get_lists(self, board_id: str) -> list[TrelloList]:
        data = await self._request("GET", f"/boards/{board_id}/lists")
        return [TrelloList.model_validate(item) for item in data]

    async def get_list(self, list_id: str) -> TrelloList:
        return TrelloList.model_validate(await self._request("GET", f"/lists/{list_id}"))

    async def create_list(self, board_id: str, name: str) -> TrelloList:
        data = await self._request("POST", "/lists", json={"name": name, "idBoard": board_id})
        return TrelloList.model_validate(data)

    # =========================================================================
    # Cards
    # =========================================================================

    async def get_cards(self, list_id: str) -> list[Card]:
        data = await self._request("GET", f"/lists/{list_id}/cards")
        return [Card.model_validate(c) for c in data]

    async def get_board_cards(self, board_id: str) -> list[Card]:
        data = await self._request("GET", f"/boards/{board_id}/cards")
        return [Card.model_validate(c) for c in data]

    async def get_card(self, card_id: str) -> Card:
        return Card.model_validate(await self._request("GET", f"/cards/{card_id}"))

    async def get_card_details(self, card_id: str) -> Card:
        """Fetch a card with members, checklists, attachments and custom fields."""
        params = {
            "fields": "all",
            "members": "true",
            "member_fields": "fullName,username",
            "checklists": "all",
            "attachments": "true",
            "customFieldItems": "true",
        }
        return Card.model_validate(
            await self._request("GET", f"/cards/{card_id}", params=params)
        )

    async def create_card(
        self, list_id: str, name: str, desc: Optional[str] = None
    ) -> Card:
        body = {"idList": list_id, "name": name, "desc": desc or ""}
        return Card.model_validate(await self._request("POST", "/cards", json=body))

    async def update_card(self, card_id: str, updates: dict[str, Any]) -> Card:
        """Apply a partial update (Trello field names) to a card."""
        return Card.model_validate(
            await self._request("PUT", f"/cards/{card_id}", json=updates)
        )

    async def update_card_name(self, card_id: str, name: str) -> Card:
        return await self.update_card(card_id, {"name": name})

    async def archive_card(self, card_id: str) -> Card:
        return await self.update_card(card_id, {"closed": True})

    async def unarchive_card(self, card_id: str) -> Card:
        return await self.update_card(card_id, {"closed": False})

    async def delete_card(self, card_id: str) -> None:
        await self._request("DELETE", f"/cards/{card_id}")

    async def move_card(
        self, card_id: str, list_id: str, position: Position = "top"
    ) -> Card:
        return await self.update_card(card_id, {"idList": list_id, "pos": position})

    async def duplicate_card(
        self,
        card_id: str,
        list_id: str,
        keep_from_source: Sequence[str] = (),
        name: Optional[str] = None,
        desc: Optional[str] = None,
        position: Position = "top",
    ) -> Card:
        """
        Copy a card into a list.

        Args:
            card_id: Source card
            list_id: Destination list
            keep_from_source: Trello keepFromSource values
                (attachments, checklists, comments, due, labels, members)
            name: New name (default: the source card's name)
            desc: New description (default: the source card's description)
            position: "top", "bottom" or a numeric rank
        """
        body: dict[str, Any] = {
            "idList": list_id,
            "idCardSource": card_id,
            "keepFromSource": ",".join(keep_from_source) if keep_from_source else "none",
            "pos": position,
        }
        if name is not None:
            body["name"] = name
        if desc is not None:
            body["desc"] = desc
        return Card.model_validate(await self._request("POST", "/cards", json=body))

    async def search_cards(
        self,
        query: str,
        board_ids: Optional[Sequence[str]] = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
        partial: bool = False,
    ) -> list[Card]:
        params: dict[str, Any] = {
            "query": query,
            "modelTypes": "cards",
            "cards_limit": limit,
            "card_fields": SEARCH_CARD_FIELDS,
            "partial": "true" if partial else "false",
        }
        if board_ids:
            params["idBoards"] = ",".join(board_ids)
        data = await self._request("GET", "/search", params=params)
        return [Card.model_validate(c) for c in (data or {}).get("cards", [])]

    async def add_comment(self, card_id: str, text: str) -> Comment:
        data = await self._request(
            "POST", f"/cards/{card_id}/actions/comments", json={"text": text}
        )
        return Comment.model_validate(data)

    async def get_comments(self, card_id: str) -> list[Comment]:
        data = await self._request(
            "GET", f"/cards/{card_id}/actions", params={"filter": "commentCard"}
        )
        return [Comment.model_validate(a) for a in data]

    # =========================================================================
    # Labels
    # =========================================================================

    async def get_labels(self, board_id: str) -> list[Label]:
        data = await self._request("GET", f"/boards/{board_id}/labels")
        return [Label.model_validate(item) for item in data]

    async def create_label(self, board_id: str, name: str, color: str) -> Label:
        data = await self._request(
            "POST", f"/boards/{board_id}/labels", json={"name": name, "color": color}
        )
        return Label.model_validate(data)

    async def update_label(
        self, label_id: str, name: Optional[str] = None, color: Optional[str] = None
    ) -> Label:
        updates: dict[str, Any] = {}
        if name is not None:
            updates["name"] = name
        if color is not None:
            updates["color"] = color
        data = await self._request("PUT", f"/labels/{label_id}", json=updates)
        return Label.model_validate(data)

    async def add_label_to_card(self, card_id: str, label_id: str) -> None:
        await self._request("POST", f"/cards/{card_id}/idLabels", json={"value": label_id})

    async def remove_label_from_card(self, card_id: str, label_id: str) -> None:
        await self._request("DELETE", f"/cards/{card_id}/idLabels/{label_id}")

    # =========================================================================
    # Due Dates
    # =========================================================================

    async def set_card_due_date(self, card_id: str, due: str) -> Card:
        return await self.update_card(card_id, {"due": due})

    async def remove_card_due_date(self, card_id: str) -> Card:
        return await self.update_card(card_id, {"due": None})

    async def mark_due_date_complete(self, card_id: str, complete: bool = True) -> Card:
        return await self.update_card(card_id, {"dueComplete": complete})

    async def get_cards_by_due_date(self, board_id: str) -> list[Card]:
        """Board cards that have a due date, earliest first."""
        cards = await self.get_board_cards(board_id)
        dated = [c for c in cards if c.due is not None]
        return sorted(dated, key=lambda c: c.due)

    # =========================================================================
    # Members
    # =========================================================================

    async def get_board_members(self, board_id: str) -> list[Member]:
        data = await self._request("GET", f"/boards/{board_id}/members")
        return [Member.model_validate(m) for m in data]

    async def add_member_to_card(self, card_id: str, member_id: str) -> list[Member]:
        """Assign a member; returns the card's member list after the change."""
        data = await self._request(
            "POST", f"/cards/{card_id}/idMembers", params={"value": member_id}
        )
        return [Member.model_validate(m) for m in data or []]

    async def remove_member_from_card(self, card_id: str, member_id: str) -> None:
        await self._request("DELETE", f"/cards/{card_id}/idMembers/{member_id}")

    async def get_member_cards(
        self, member_id: str, board_id: Optional[str] = None
    ) -> list[Card]:
        """Open cards assigned to a member, optionally restricted to one board."""
        data = await self._request(
            "GET",
            f"/members/{member_id}/cards",
            params={"filter": "open", "fields": MEMBER_CARD_FIELDS},
        )
        cards = [Card.model_validate(c) for c in data]
        if board_id:
            cards = [c for c in cards if c.id_board == board_id]
        return cards

    # =========================================================================
    # Checklists
    # =========================================================================

    async def add_checklist(
        self, card_id: str, name: str, pos: Optional[Position] = None
    ) -> Checklist:
        body: dict[str, Any] = {"name": name}
        if pos is not None:
            body["pos"] = pos
        data = await self._request("POST", f"/cards/{card_id}/checklists", json=body)
        return Checklist.model_validate(data)

    async def add_checklist_item(
        self,
        checklist_id: str,
        name: str,
        pos: Optional[Position] = None,
        checked: bool = False,
    ) -> CheckItem:
        body: dict[str, Any] = {"name": name, "checked": checked}
        if pos is not None:
            body["pos"] = pos
        data = await self._request(
            "POST", f"/checklists/{checklist_id}/checkItems", json=body
        )
        return CheckItem.model_validate(data)

    async def update_checklist_item(
        self, card_id: str, check_item_id: str, state: str
    ) -> CheckItem:
        data = await self._request(
            "PUT", f"/cards/{card_id}/checkItem/{check_item_id}", json={"state": state}
        )
        return CheckItem.model_validate(data)

    async def get_checklist_progress(self, card_id: str) -> ChecklistProgress:
        data = await self._request(
            "GET",
            f"/cards/{card_id}",
            params={"fields": "id,name", "checklists": "all"},
        )
        checklists = [Checklist.model_validate(c) for c in data.get("checklists", [])]
        return ChecklistProgress.from_checklists(checklists)

    async def delete_checklist(self, checklist_id: str) -> None:
        await self._request("DELETE", f"/checklists/{checklist_id}")

    # =========================================================================
    # Attachments
    # =========================================================================

    async def add_attachment_url(
        self,
        card_id: str,
        url: str,
        name: Optional[str] = None,
        set_cover: bool = False,
    ) -> Attachment:
        body: dict[str, Any] = {"url": url, "setCover": set_cover}
        if name:
            body["name"] = name
        data = await self._request("POST", f"/cards/{card_id}/attachments", json=body)
        return Attachment.model_validate(data)

    async def get_attachments(self, card_id: str) -> list[Attachment]:
        data = await self._request("GET", f"/cards/{card_id}/attachments")
        return [Attachment.model_validate(a) for a in data]

    async def delete_attachment(self, card_id: str, attachment_id: str) -> None:
        await self._request("DELETE", f"/cards/{card_id}/attachments/{attachment_id}")

    async def set_card_cover(
        self, card_id: str, attachment_id: Optional[str] = None
    ) -> Card:
        """Use an attachment as the card cover; None removes the cover."""
        return await self.update_card(card_id, {"idAttachmentCover": attachment_id})

    # =========================================================================
    # Bulk
    # =========================================================================

    async def execute_bulk(
        self,
        item_ids: Sequence[str],
        operation: Callable[[str], Awaitable[Any]],
    ) -> BulkResult:
        """
        Apply an operation to every item id in rate-limited batches.

        Args:
            item_ids: Identifiers to process
            operation: Async callable taking one identifier

        Returns:
            BulkResult with per-item failures
        """
        return await self.batch_executor.run(item_ids, operation)


def _error_detail(response: httpx.Response) -> str:
    """Best-effort error text from a Trello error response."""
    try:
        body = response.json()
    except ValueError:
        return response.text.strip()
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or "")
    return str(body)


def _parse_retry_after(value: Optional[str]) -> Optional[float]:
    """
    Seconds to wait from a Retry-After header.

    Accepts both the delay-seconds and the HTTP-date forms. Anything
    unparseable yields None rather than masking the 429.
    """
    if not value:
        return None
    try:
        return max(float(value), 0.0)
    except ValueError:
        pass
    try:
        retry_at = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)
    return max((retry_at - datetime.now(timezone.utc)).total_seconds(), 0.0)
