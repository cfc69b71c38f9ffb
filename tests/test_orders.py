from livewithdesigns.extensions import db, mail
from livewithdesigns.models import Product

SHIPPING = {
    "name": "Asha Rao", "phone": "9876543210", "street": "12 MG Road",
    "city": "Bengaluru", "state": "Karnataka", "zipcode": "560001", "country": "India",
}


def _order(client, headers, items, **overrides):
    payload = {"items": items, "shippingAddress": SHIPPING, "paymentMethod": "upi"}
    payload.update(overrides)
    return client.post("/api/orders", json=payload, headers=headers)


def _stock(app, product_id):
    with app.app_context():
        p = db.session.get(Product, product_id)
        return p.stock_quantity, p.in_stock


def test_create_order_snapshots_items_and_takes_stock(client, app, user, make_product):
    _, headers = user
    lamp = make_product("Brass Lamp", price=100, stock=3)
    sofa = make_product("Velvet Sofa", price=250, stock=1)

    with mail.record_messages() as outbox:
        resp = _order(client, headers, [
            {"product": lamp, "quantity": 2},
            {"product": sofa, "quantity": 1},
        ], taxAmount=18, shippingCost=50)

    assert resp.status_code == 201
    order = resp.get_json()["data"]
    assert order["totalAmount"] == 100 * 2 + 250 + 18 + 50
    assert order["orderStatus"] == "processing"
    assert order["paymentStatus"] == "pending"
    assert [(it["name"], it["price"], it["quantity"]) for it in order["items"]] == [
        ("Brass Lamp", 100, 2), ("Velvet Sofa", 250, 1),
    ]
    assert order["statusHistory"][0]["note"] == "Order placed"

    assert _stock(app, lamp) == (1, True)
    assert _stock(app, sofa) == (0, False)
    assert len(outbox) == 1


def test_client_prices_are_ignored(client, user, make_product):
    _, headers = user
    lamp = make_product(price=100, stock=3)
    resp = _order(client, headers, [{"product": lamp, "quantity": 1, "price": 1}], totalAmount=1)
    assert resp.get_json()["data"]["totalAmount"] == 100


def test_insufficient_stock_rolls_back_everything(client, app, user, make_product):
    _, headers = user
    lamp = make_product("Brass Lamp", stock=5)
    sofa = make_product("Velvet Sofa", stock=1)

    resp = _order(client, headers, [{"product": lamp, "quantity": 2}, {"product": sofa, "quantity": 2}])
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Insufficient stock for Velvet Sofa"
    assert _stock(app, lamp) == (5, True)
    assert client.get("/api/orders", headers=headers).get_json()["data"] == []


def test_order_validation(client, user, make_product):
    _, headers = user
    lamp = make_product()

    resp = _order(client, headers, [])
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "No order items"

    resp = _order(client, headers, [{"product": 999, "quantity": 1}])
    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Product 999 not found"

    resp = _order(client, headers, [{"product": lamp, "quantity": 1}], shippingAddress={**SHIPPING, "city": ""})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "City is required"

    resp = _order(client, headers, [{"product": lamp, "quantity": 1}], paymentMethod="barter")
    assert resp.status_code == 400


def test_orders_are_private(client, make_user, make_product):
    _, owner = make_user()
    _, other = make_user()
    lamp = make_product()
    oid = _order(client, owner, [{"product": lamp, "quantity": 1}]).get_json()["data"]["id"]

    assert client.get(f"/api/orders/{oid}", headers=owner).status_code == 200
    assert client.get(f"/api/orders/{oid}", headers=other).status_code == 404
    assert client.get("/api/orders", headers=other).get_json()["data"] == []


def test_cancel_only_while_processing(client, admin, user, make_product):
    _, headers = user
    _, admin_headers = admin
    lamp = make_product(stock=5)
    first = _order(client, headers, [{"product": lamp, "quantity": 1}]).get_json()["data"]["id"]
    second = _order(client, headers, [{"product": lamp, "quantity": 1}]).get_json()["data"]["id"]

    resp = client.put(f"/api/orders/{first}/cancel", headers=headers)
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["orderStatus"] == "cancelled"
    assert data["statusHistory"][-1]["note"] == "Cancelled by customer"

    client.put(f"/api/admin/orders/{second}", json={"orderStatus": "shipped"}, headers=admin_headers)
    resp = client.put(f"/api/orders/{second}/cancel", headers=headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Cannot cancel order that is not in processing state"


def test_track_order(client, admin, user, make_product):
    _, headers = user
    _, admin_headers = admin
    lamp = make_product()
    oid = _order(client, headers, [{"product": lamp, "quantity": 1}]).get_json()["data"]["id"]
    client.put(f"/api/admin/orders/{oid}", json={
        "orderStatus": "shipped", "trackingNumber": "TRK123", "estimatedDelivery": "2030-01-05",
    }, headers=admin_headers)

    data = client.get(f"/api/orders/{oid}/track", headers=headers).get_json()["data"]
    assert data["orderStatus"] == "shipped"
    assert data["trackingNumber"] == "TRK123"
    assert data["estimatedDelivery"].startswith("2030-01-05")
    assert [h["status"] for h in data["statusHistory"]] == ["processing", "shipped"]


def test_admin_lists_all_orders(client, admin, make_user, make_product):
    _, admin_headers = admin
    lamp = make_product(stock=10)
    for _ in range(2):
        _, headers = make_user()
        _order(client, headers, [{"product": lamp, "quantity": 1}])

    body = client.get("/api/orders/all?status=processing", headers=admin_headers).get_json()
    assert body["pagination"]["totalOrders"] == 2
    assert body["data"][0]["user"]["email"].endswith("@example.com")

    _, headers = make_user()
    assert client.get("/api/orders/all", headers=headers).status_code == 403


def test_unparsable_quantity_is_rejected(client, app, user, make_product):
    _, headers = user
    lamp = make_product(stock=5)

    resp = _order(client, headers, [{"product": lamp, "quantity": "abc"}])
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid quantity"

    resp = _order(client, headers, [{"product": lamp, "quantity": 1}, {"product": lamp, "quantity": 1.5}])
    assert resp.status_code == 400
    assert _stock(app, lamp) == (5, True)
    assert client.get("/api/orders", headers=headers).get_json()["data"] == []

    resp = _order(client, headers, [{"product": lamp}])
    assert resp.status_code == 201
    assert resp.get_json()["data"]["items"][0]["quantity"] == 1
