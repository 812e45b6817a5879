"""Reducers for the product state slices.

A reducer takes ``(state, action)`` and returns the next state without mutating its
input. Terminal actions whose ``meta.seq`` is older than the slice's latest request
are stale and leave the state unchanged.
"""

from typing import Any, Dict, Optional

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
    PRODUCT_CREATE_RESET,
    PRODUCT_UPDATE_REQUEST,
    PRODUCT_UPDATE_SUCCESS,
    PRODUCT_UPDATE_FAIL,
    PRODUCT_UPDATE_RESET,
    PRODUCT_CREATE_REVIEW_REQUEST,
    PRODUCT_CREATE_REVIEW_SUCCESS,
    PRODUCT_CREATE_REVIEW_FAIL,
    PRODUCT_CREATE_REVIEW_RESET,
    PRODUCT_TOP_REQUEST,
    PRODUCT_TOP_SUCCESS,
    PRODUCT_TOP_FAIL,
)

State = Dict[str, Any]
Action = Dict[str, Any]


def _seq(action: Action) -> int:
    return (action.get("meta") or {}).get("seq", 0)


def _is_stale(state: State, action: Action) -> bool:
    return _seq(action) < state.get("seq", 0)


def product_list_reducer(state: Optional[State], action: Action) -> State:
    state = state if state is not None else {"products": []}
    kind = action.get("type")
    if kind == PRODUCT_LIST_REQUEST:
        return {"loading": True, "products": [], "seq": _seq(action)}
    if kind in (PRODUCT_LIST_SUCCESS, PRODUCT_LIST_FAIL) and _is_stale(state, action):
        return state
    if kind == PRODUCT_LIST_SUCCESS:
        payload = action.get("payload") or {}
        return {
            "loading": False,
            "products": payload.get("products", []),
            "page": payload.get("page"),
            "pages": payload.get("pages"),
            "seq": state.get("seq", 0),
        }
    if kind == PRODUCT_LIST_FAIL:
        return {"loading": False, "error": action.get("payload"), "seq": state.get("seq", 0)}
    return state


def product_details_reducer(state: Optional[State], action: Action) -> State:
    state = state if state is not None else {"product": {"reviews": []}}
    kind = action.get("type")
    if kind == PRODUCT_DETAILS_REQUEST:
        return {**state, "loading": True, "seq": _seq(action)}
    if kind in (PRODUCT_DETAILS_SUCCESS, PRODUCT_DETAILS_FAIL) and _is_stale(state, action):
        return state
    if kind == PRODUCT_DETAILS_SUCCESS:
        return {"loading": False, "product": action.get("payload"), "seq": state.get("seq", 0)}
    if kind == PRODUCT_DETAILS_FAIL:
        return {**state, "loading": False, "error": action.get("payload")}
    return state


def _mutation_reducer(request, success, fail, reset=None, result_key=None):
    """Reducer for create/update/delete/review slices: loading, success, error."""

    def reducer(state: Optional[State], action: Action) -> State:
        state = state if state is not None else {}
        kind = action.get("type")
        if kind == request:
            return {"loading": True, "seq": _seq(action)}
        if kind in (success, fail) and _is_stale(state, action):
            return state
        if kind == success:
            new_state = {"loading": False, "success": True, "seq": state.get("seq", 0)}
            if result_key:
                new_state[result_key] = action.get("payload")
            return new_state
        if kind == fail:
            return {"loading": False, "error": action.get("payload"), "seq": state.get("seq", 0)}
        if reset is not None and kind == reset:
            # Keep the counter so completions of abandoned requests stay stale
            return {"seq": state.get("seq", 0)}
        return state

    return reducer


product_delete_reducer = _mutation_reducer(
    PRODUCT_DELETE_REQUEST, PRODUCT_DELETE_SUCCESS, PRODUCT_DELETE_FAIL
)
product_create_reducer = _mutation_reducer(
    PRODUCT_CREATE_REQUEST,
    PRODUCT_CREATE_SUCCESS,
    PRODUCT_CREATE_FAIL,
    reset=PRODUCT_CREATE_RESET,
    result_key="product",
)
product_update_reducer = _mutation_reducer(
    PRODUCT_UPDATE_REQUEST,
    PRODUCT_UPDATE_SUCCESS,
    PRODUCT_UPDATE_FAIL,
    reset=PRODUCT_UPDATE_RESET,
    result_key="product",
)
product_review_create_reducer = _mutation_reducer(
    PRODUCT_CREATE_REVIEW_REQUEST,
    PRODUCT_CREATE_REVIEW_SUCCESS,
    PRODUCT_CREATE_REVIEW_FAIL,
    reset=PRODUCT_CREATE_REVIEW_RESET,
)


def product_top_rated_reducer(state: Optional[State], action: Action) -> State:
    state = state if state is not None else {"products": []}
    kind = action.get("type")
    if kind == PRODUCT_TOP_REQUEST:
        return {"loading": True, "products": [], "seq": _seq(action)}
    if kind in (PRODUCT_TOP_SUCCESS, PRODUCT_TOP_FAIL) and _is_stale(state, action):
        return state
    if kind == PRODUCT_TOP_SUCCESS:
        return {"loading": False, "products": action.get("payload") or [], "seq": state.get("seq", 0)}
    if kind == PRODUCT_TOP_FAIL:
        return {"loading": False, "error": action.get("payload"), "seq": state.get("seq", 0)}
    return state


PRODUCT_REDUCERS = {
    "productList": product_list_reducer,
    "productDetails": product_details_reducer,
    "productDelete": product_delete_reducer,
    "productCreate": product_create_reducer,
    "productUpdate": product_update_reducer,
    "productReviewCreate": product_review_create_reducer,
    "productTopRated": product_top_rated_reducer,
}
