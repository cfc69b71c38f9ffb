def test_empty_cart(client, user):
    _, headers = user
    assert client.get("/api/cart", headers=headers).get_json()["data"] == {"items": [], "total": 0}


def test_add_merges_lines_and_totals(client, user, make_product):
    _, headers = user
    lamp = make_product("Brass Lamp", price=100, stock=5)
    sofa = make_product("Velvet Sofa", price=250.5, stock=2)

    client.post("/api/cart/add", json={"productId": lamp, "quantity": 2}, headers=headers)
    client.post("/api/cart/add", json={"productId": lamp, "quantity": 1}, headers=headers)
    body = client.post("/api/cart/add", json={"productId": sofa}, headers=headers).get_json()["data"]

    assert [(it["product"]["name"], it["quantity"]) for it in body["items"]] == [
        ("Brass Lamp", 3), ("Velvet Sofa", 1),
    ]
    assert body["total"] == 550.5


def test_add_checks_stock_against_the_merged_quantity(client, user, make_product):
    _, headers = user
    lamp = make_product(stock=3)
    assert client.post("/api/cart/add", json={"productId": lamp, "quantity": 2}, headers=headers).status_code == 200
    resp = client.post("/api/cart/add", json={"productId": lamp, "quantity": 2}, headers=headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Insufficient stock"


def test_add_rejects_bad_quantity_and_unknown_product(client, user, make_product):
    _, headers = user
    lamp = make_product()
    assert client.post("/api/cart/add", json={"productId": lamp, "quantity": 0}, headers=headers).status_code == 400
    assert client.post("/api/cart/add", json={"productId": 999}, headers=headers).status_code == 404


def test_update_remove_and_clear(client, user, make_product):
    _, headers = user
    lamp = make_product(stock=10)
    sofa = make_product("Velvet Sofa", stock=10)

    assert client.put("/api/cart/update", json={"productId": lamp, "quantity": 2}, headers=headers).status_code == 404

    client.post("/api/cart/add", json={"productId": lamp}, headers=headers)
    client.post("/api/cart/add", json={"productId": sofa}, headers=headers)

    body = client.put("/api/cart/update", json={"productId": lamp, "quantity": 4}, headers=headers).get_json()
    assert body["data"]["items"][0]["quantity"] == 4
    assert client.put("/api/cart/update", json={"productId": lamp, "quantity": 11}, headers=headers).status_code == 400

    body = client.put("/api/cart/update", json={"productId": lamp, "quantity": 0}, headers=headers).get_json()
    assert [it["product"]["id"] for it in body["data"]["items"]] == [sofa]

    body = client.delete(f"/api/cart/{sofa}", headers=headers).get_json()
    assert body["data"]["items"] == []

    client.post("/api/cart/add", json={"productId": lamp}, headers=headers)
    resp = client.post("/api/cart/clear", headers=headers)
    assert resp.get_json()["message"] == "Cart cleared successfully"
    assert client.get("/api/cart", headers=headers).get_json()["data"]["items"] == []


def test_deleted_product_disappears_from_cart(client, admin, user, make_product):
    _, headers = user
    _, admin_headers = admin
    lamp = make_product()
    client.post("/api/cart/add", json={"productId": lamp}, headers=headers)
    client.delete(f"/api/products/{lamp}", headers=admin_headers)
    assert client.get("/api/cart", headers=headers).get_json()["data"]["items"] == []


def test_wishlist_add_is_idempotent_and_remove(client, user, make_product):
    _, headers = user
    lamp = make_product()
    assert client.get("/api/wishlist", headers=headers).get_json()["data"] == {"items": []}

    client.post("/api/wishlist/add", json={"productId": lamp}, headers=headers)
    body = client.post("/api/wishlist/add", json={"productId": lamp}, headers=headers).get_json()
    assert len(body["data"]["items"]) == 1

    body = client.delete(f"/api/wishlist/{lamp}", headers=headers).get_json()
    assert body["data"]["items"] == []


def test_move_to_cart(client, user, make_product):
    _, headers = user
    lamp = make_product()
    client.post("/api/wishlist/add", json={"productId": lamp}, headers=headers)

    resp = client.post(f"/api/wishlist/move-to-cart/{lamp}", headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()["message"] == "Item moved to cart successfully"
    assert resp.get_json()["wishlist"]["items"] == []

    cart = client.get("/api/cart", headers=headers).get_json()["data"]
    assert cart["items"][0]["product"]["id"] == lamp

    resp = client.post(f"/api/wishlist/move-to-cart/{lamp}", headers=headers)
    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Item not found in wishlist"


def test_unparsable_quantity_leaves_the_cart_alone(client, user, make_product):
    _, headers = user
    lamp = make_product(stock=5)
    client.post("/api/cart/add", json={"productId": lamp, "quantity": 2}, headers=headers)

    resp = client.put("/api/cart/update", json={"productId": lamp, "quantity": "two"}, headers=headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid quantity"

    resp = client.post("/api/cart/add", json={"productId": lamp, "quantity": "lots"}, headers=headers)
    assert resp.status_code == 400

    items = client.get("/api/cart", headers=headers).get_json()["data"]["items"]
    assert [(it["product"]["id"], it["quantity"]) for it in items] == [(lamp, 2)]
