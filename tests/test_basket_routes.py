import json
from types import SimpleNamespace

import pytest
import stripe

from cookwho.services import basket_service

SESSION = {"X-Basket-Session": "tab-1"}


@pytest.fixture
def alerts(monkeypatch):
    sent = []

    def fake_alert(cook_email, item_name, cook_display_name=None):
        sent.append((cook_email, item_name, cook_display_name))
        return {"success": True, "message": "sent"}

    monkeypatch.setattr(basket_service, "send_cook_alert", fake_alert)
    return sent


def add(client, restaurant_id, item_id, confirm_clear=False, headers=SESSION):
    return client.post(
        "/basket/items",
        json={"restaurant_id": restaurant_id, "item_id": item_id, "confirm_clear": confirm_clear},
        headers=headers,
    )


def test_empty_basket(client):
    res = client.get("/basket", headers=SESSION)
    assert res.status_code == 200
    assert res.json() == {"items": [], "total_price": 0, "notifications": []}


def test_add_item_snapshots_menu_item_and_alerts_cook(client, kv, alerts):
    res = add(client, "cook-a", "breakfast-a")

    assert res.status_code == 200
    body = res.json()
    assert body["items"][0]["name"] == "Full Breakfast"
    assert body["items"][0]["restaurant_name"] == "Alice's Kitchen"
    assert body["items"][0]["quantity"] == 1
    assert body["total_price"] == pytest.approx(8.5)
    assert body["notifications"][0]["title"] == "Item Added"
    assert alerts == [("cook-a@example.com", "Full Breakfast", "Alice's Kitchen")]
    assert json.loads(kv.get("basket:tab-1"))[0]["id"] == "breakfast-a"


def test_add_same_item_twice(client, alerts):
    add(client, "cook-a", "breakfast-a")
    body = add(client, "cook-a", "breakfast-a").json()

    assert len(body["items"]) == 1
    assert body["items"][0]["quantity"] == 2
    assert body["total_price"] == pytest.approx(17.0)


def test_unknown_item_is_404(client, alerts):
    assert add(client, "cook-a", "nope").status_code == 404
    assert add(client, "nobody", "breakfast-a").status_code == 404


def test_cross_restaurant_add_requires_confirmation(client, alerts):
    add(client, "cook-a", "breakfast-a")

    res = add(client, "cook-c", "curry-c")
    assert res.status_code == 409
    items = client.get("/basket", headers=SESSION).json()["items"]
    assert [i["id"] for i in items] == ["breakfast-a"]

    res = add(client, "cook-c", "curry-c", confirm_clear=True)
    assert res.status_code == 200
    assert [(i["id"], i["restaurant_id"]) for i in res.json()["items"]] == [("curry-c", "cook-c")]


def test_quantity_routes(client, alerts):
    add(client, "cook-a", "breakfast-a")
    add(client, "cook-a", "toast-a")

    body = client.post("/basket/items/toast-a/increment", headers=SESSION).json()
    assert {i["id"]: i["quantity"] for i in body["items"]} == {"breakfast-a": 1, "toast-a": 2}

    body = client.post("/basket/items/breakfast-a/decrement", headers=SESSION).json()
    assert [i["id"] for i in body["items"]] == ["toast-a"]
    assert [n["title"] for n in body["notifications"]] == ["Item Removed"]

    body = client.delete("/basket/items/missing", headers=SESSION).json()
    assert body["notifications"] == []
    assert body["total_price"] == pytest.approx(2.5)

    body = client.delete("/basket", headers=SESSION).json()
    assert body["items"] == []


def test_sessions_are_isolated(client, alerts):
    add(client, "cook-a", "breakfast-a")
    other = client.get("/basket", headers={"X-Basket-Session": "tab-2"}).json()
    assert other["items"] == []


def test_confirm_order_records_and_clears(client, customer, alerts, monkeypatch, seeded_store):
    add(client, "cook-a", "breakfast-a")
    add(client, "cook-a", "toast-a")
    monkeypatch.setattr(
        stripe.PaymentIntent, "retrieve",
        lambda intent_id, **kwargs: SimpleNamespace(id=intent_id, status="succeeded", amount=975),
    )

    res = client.post("/basket/confirm", json={"payment_intent_id": "pi_123"}, headers={**SESSION, **customer})

    assert res.status_code == 201
    order = res.json()
    assert order["total_price"] == 975
    assert order["cook_id"] == "cook-a"
    assert order["status"] == "paid"
    assert client.get("/basket", headers=SESSION).json()["items"] == []
    orders = client.get("/users/me/orders", headers=customer).json()
    assert [o["stripe_payment_intent_id"] for o in orders] == ["pi_123"]


def test_confirm_order_with_unpaid_intent_keeps_basket(client, customer, alerts, monkeypatch):
    add(client, "cook-a", "breakfast-a")
    monkeypatch.setattr(
        stripe.PaymentIntent, "retrieve",
        lambda intent_id, **kwargs: SimpleNamespace(id=intent_id, status="requires_payment_method", amount=850),
    )

    res = client.post("/basket/confirm", json={"payment_intent_id": "pi_1"}, headers={**SESSION, **customer})

    assert res.status_code == 402
    assert len(client.get("/basket", headers=SESSION).json()["items"]) == 1


def test_confirm_order_requires_login(client):
    res = client.post("/basket/confirm", json={"payment_intent_id": "pi_1"}, headers=SESSION)
    assert res.status_code == 401


def test_payment_intent_cannot_pay_for_two_orders(client, customer, alerts, monkeypatch):
    monkeypatch.setattr(
        stripe.PaymentIntent, "retrieve",
        lambda intent_id, **kwargs: SimpleNamespace(id=intent_id, status="succeeded", amount=850),
    )
    add(client, "cook-a", "breakfast-a")
    first = client.post("/basket/confirm", json={"payment_intent_id": "pi_once"}, headers={**SESSION, **customer})
    assert first.status_code == 201

    add(client, "cook-a", "breakfast-a")
    second = client.post("/basket/confirm", json={"payment_intent_id": "pi_once"}, headers={**SESSION, **customer})

    assert second.status_code == 402
    assert len(client.get("/basket", headers=SESSION).json()["items"]) == 1
    orders = client.get("/users/me/orders", headers=customer).json()
    assert [o["stripe_payment_intent_id"] for o in orders] == ["pi_once"]


def test_confirm_empty_basket_is_400(client, customer, monkeypatch):
    retrieved = []
    monkeypatch.setattr(stripe.PaymentIntent, "retrieve", lambda intent_id, **kwargs: retrieved.append(intent_id))

    res = client.post("/basket/confirm", json={"payment_intent_id": "pi_1"}, headers={**SESSION, **customer})

    assert res.status_code == 400
    assert res.json()["detail"] == "Basket is empty"
    assert retrieved == []
