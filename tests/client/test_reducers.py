from src.client.products import constants as c
from src.client.products.reducers import (
    PRODUCT_REDUCERS,
    product_create_reducer,
    product_details_reducer,
    product_list_reducer,
)
from src.client.store import Store, token_from_state


def action(kind, seq, payload=None):
    act = {"type": kind, "meta": {"seq": seq}}
    if payload is not None:
        act["payload"] = payload
    return act


def test_list_reducer_phases():
    state = product_list_reducer(None, {"type": "@@INIT"})
    assert state == {"products": []}

    state = product_list_reducer(state, action(c.PRODUCT_LIST_REQUEST, 1))
    assert state["loading"] is True

    page = {"products": [{"id": "p1"}], "page": 2, "pages": 3}
    state = product_list_reducer(state, action(c.PRODUCT_LIST_SUCCESS, 1, page))
    assert state["loading"] is False
    assert (state["products"], state["page"], state["pages"]) == ([{"id": "p1"}], 2, 3)

    state = product_list_reducer(state, action(c.PRODUCT_LIST_REQUEST, 2))
    state = product_list_reducer(state, action(c.PRODUCT_LIST_FAIL, 2, "boom"))
    assert state["error"] == "boom"
    assert state["loading"] is False


def test_stale_completion_is_ignored():
    state = product_list_reducer(None, action(c.PRODUCT_LIST_REQUEST, 1))
    state = product_list_reducer(state, action(c.PRODUCT_LIST_REQUEST, 2))
    fresh = product_list_reducer(
        state, action(c.PRODUCT_LIST_SUCCESS, 2, {"products": ["new"], "page": 1, "pages": 1})
    )
    after = product_list_reducer(fresh, action(c.PRODUCT_LIST_FAIL, 1, "late failure"))
    assert after == fresh


def test_details_keeps_previous_product_while_loading():
    state = product_details_reducer(None, action(c.PRODUCT_DETAILS_REQUEST, 1))
    state = product_details_reducer(state, action(c.PRODUCT_DETAILS_SUCCESS, 1, {"id": "p1"}))
    state = product_details_reducer(state, action(c.PRODUCT_DETAILS_REQUEST, 2))
    assert state["loading"] is True
    assert state["product"] == {"id": "p1"}


def test_create_reset_keeps_sequence():
    state = product_create_reducer(None, action(c.PRODUCT_CREATE_REQUEST, 3))
    state = product_create_reducer(state, {"type": c.PRODUCT_CREATE_RESET})
    assert state == {"seq": 3}
    # completion of the abandoned request still lands (same seq), older ones do not
    assert product_create_reducer(state, action(c.PRODUCT_CREATE_SUCCESS, 2, {"id": "x"})) == state
    done = product_create_reducer(state, action(c.PRODUCT_CREATE_SUCCESS, 3, {"id": "p9"}))
    assert done["product"] == {"id": "p9"}
    assert done["success"] is True


def test_store_dispatch_notifies_and_unsubscribes():
    store = Store(PRODUCT_REDUCERS, history_size=10)
    seen = []
    unsubscribe = store.subscribe(seen.append)

    store.dispatch(action(c.PRODUCT_TOP_REQUEST, 1))
    unsubscribe()
    store.dispatch(action(c.PRODUCT_TOP_SUCCESS, 1, [{"id": "p1"}]))

    assert len(seen) == 1
    assert store.get_state()["productTopRated"]["products"] == [{"id": "p1"}]
    assert [a["type"] for a in store.history] == [c.PRODUCT_TOP_REQUEST, c.PRODUCT_TOP_SUCCESS]


def test_token_from_state():
    store = Store({}, initial_state={"userLogin": {"userInfo": {"token": "abc"}}})
    assert token_from_state(store)() == "abc"

    assert token_from_state(Store({}))() is None


def test_store_keeps_no_history_by_default():
    store = Store(PRODUCT_REDUCERS)
    for seq in range(1, 4):
        store.dispatch(action(c.PRODUCT_TOP_REQUEST, seq))

    assert list(store.history) == []
    assert store.get_state()["productTopRated"]["loading"] is True


def test_store_history_is_bounded():
    store = Store(PRODUCT_REDUCERS, history_size=2)
    for seq in range(1, 6):
        store.dispatch(action(c.PRODUCT_TOP_REQUEST, seq))

    assert [a["meta"]["seq"] for a in store.history] == [4, 5]
