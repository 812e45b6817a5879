"""Client-side product actions.

Every call dispatches ``*_REQUEST`` right before the HTTP request and then exactly
one of ``*_SUCCESS`` (payload: decoded response body) or ``*_FAIL`` (payload: an
error message). Errors never propagate to the caller; re-invoking the action is the
recovery path.

Each action carries ``meta.seq``, a counter per action kind, so reducers can drop
completions that arrive after a newer request of the same kind.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple
from urllib.parse import quote

import httpx

from .constants import (
    PRODUCT_LIST_REQUEST,
    PRODUCT_LIST_SUCCESS,
    PRODUCT_LIST_FAIL,
    PRODUCT_DETAILS_REQUEST,
    PRODUCT_DETAILS_SUCCESS,
    PRODUCT_DETAILS_FAIL,
    PRODUCT_DELETE_REQUEST,
    PRODUCT_DELETE_SUCCESS,
    PRODUCT_DELETE_FAIL,
    PRODUCT_CREATE_REQUEST,
    PRODUCT_CREATE_SUCCESS,
    PRODUCT_CREATE_FAIL,
    PRODUCT_UPDATE_REQUEST,
    PRODUCT_UPDATE_SUCCESS,
    PRODUCT_UPDATE_FAIL,
    PRODUCT_CREATE_REVIEW_REQUEST,
    PRODUCT_CREATE_REVIEW_SUCCESS,
    PRODUCT_CREATE_REVIEW_FAIL,
    PRODUCT_TOP_REQUEST,
    PRODUCT_TOP_SUCCESS,
    PRODUCT_TOP_FAIL,
)

logger = logging.getLogger(__name__)

Action = Dict[str, Any]
Dispatch = Callable[[Action], None]
CredentialProvider = Callable[[], Optional[str]]
Phases = Tuple[str, str, str]
Send = Callable[[Optional[Dict[str, str]]], Awaitable[httpx.Response]]

_LIST = (PRODUCT_LIST_REQUEST, PRODUCT_LIST_SUCCESS, PRODUCT_LIST_FAIL)
_DETAILS = (PRODUCT_DETAILS_REQUEST, PRODUCT_DETAILS_SUCCESS, PRODUCT_DETAILS_FAIL)
_DELETE = (PRODUCT_DELETE_REQUEST, PRODUCT_DELETE_SUCCESS, PRODUCT_DELETE_FAIL)
_CREATE = (PRODUCT_CREATE_REQUEST, PRODUCT_CREATE_SUCCESS, PRODUCT_CREATE_FAIL)
_UPDATE = (PRODUCT_UPDATE_REQUEST, PRODUCT_UPDATE_SUCCESS, PRODUCT_UPDATE_FAIL)
_REVIEW = (
    PRODUCT_CREATE_REVIEW_REQUEST,
    PRODUCT_CREATE_REVIEW_SUCCESS,
    PRODUCT_CREATE_REVIEW_FAIL,
)
_TOP = (PRODUCT_TOP_REQUEST, PRODUCT_TOP_SUCCESS, PRODUCT_TOP_FAIL)


def _product_path(product_id) -> str:
    return f"/products/{quote(str(product_id), safe='')}"


def error_message(exc: Exception) -> str:
    """Prefer the server's ``message`` field; fall back to the transport error text."""
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            body = exc.response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
    return str(exc) or exc.__class__.__name__


class ProductActions:
    def __init__(
        self,
        client: httpx.AsyncClient,
        dispatch: Dispatch,
        credentials: Optional[CredentialProvider] = None,
    ):
        self._client = client
        self._dispatch = dispatch
        self._credentials = credentials or (lambda: None)
        self._seq: Dict[str, int] = defaultdict(int)

    def _auth_headers(self) -> Dict[str, str]:
        # A missing token is left for the server to reject
        token = self._credentials()
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def _run(self, phases: Phases, send: Send, *, auth: bool = False) -> Any:
        request_type, success_type, fail_type = phases
        self._seq[request_type] += 1
        meta = {"seq": self._seq[request_type]}

        self._dispatch({"type": request_type, "meta": meta})
        try:
            response = await send(self._auth_headers() if auth else None)
            response.raise_for_status()
            payload = response.json() if response.content else None
        except Exception as exc:  # every failure becomes a FAIL action
            message = error_message(exc)
            logger.warning("%s: %s", fail_type, message)
            self._dispatch({"type": fail_type, "payload": message, "meta": meta})
            return None

        self._dispatch({"type": success_type, "payload": payload, "meta": meta})
        return payload

    async def list_products(self, keyword: str = "", category: str = "", page_number="") -> Any:
        params = {"pageNumber": page_number}
        if keyword:
            params["keyword"] = keyword
        if category:
            params["category"] = category
        return await self._run(
            _LIST, lambda _: self._client.get("/products", params=params)
        )

    async def list_products_by_category(self, category: str, page_number="") -> Any:
        url = f"/products/category/{quote(category or '', safe='')}"
        return await self._run(
            _LIST,
            lambda _: self._client.get(url, params={"pageNumber": page_number}),
        )

    async def list_product_details(self, product_id: str) -> Any:
        return await self._run(
            _DETAILS, lambda _: self._client.get(_product_path(product_id))
        )

    async def delete_product(self, product_id: str) -> Any:
        return await self._run(
            _DELETE,
            lambda headers: self._client.delete(_product_path(product_id), headers=headers),
            auth=True,
        )

    async def create_product(self) -> Any:
        return await self._run(
            _CREATE,
            lambda headers: self._client.post("/products", json={}, headers=headers),
            auth=True,
        )

    async def update_product(self, product: Dict[str, Any]) -> Any:
        """``product`` is the edited product dict; only truthy fields take effect server side."""
        return await self._run(
            _UPDATE,
            lambda headers: self._client.put(
                _product_path(product["id"]), json=product, headers=headers
            ),
            auth=True,
        )

    async def create_product_review(self, product_id: str, review: Dict[str, Any]) -> Any:
        return await self._run(
            _REVIEW,
            lambda headers: self._client.post(
                f"{_product_path(product_id)}/reviews", json=review, headers=headers
            ),
            auth=True,
        )

    async def list_top_products(self) -> Any:
        return await self._run(_TOP, lambda _: self._client.get("/products/top"))
