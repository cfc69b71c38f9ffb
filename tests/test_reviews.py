from livewithdesigns.extensions import db
from livewithdesigns.models import Product

SHIPPING = {
    "name": "Asha", "phone": "9876543210", "street": "12 MG Road",
    "city": "Bengaluru", "state": "Karnataka", "zipcode": "560001", "country": "India",
}


def _review(client, headers, product_id, rating=5, comment="Lovely piece"):
    return client.post("/api/reviews", json={"productId": product_id, "rating": rating, "comment": comment},
                       headers=headers)


def _product_rating(app, product_id):
    with app.app_context():
        p = db.session.get(Product, product_id)
        return p.rating, p.review_count


def test_add_review_updates_product_rating(client, app, make_user, make_product):
    pid = make_product()
    _, alice = make_user()
    _, bob = make_user()

    resp = _review(client, alice, pid, rating=5)
    assert resp.status_code == 201
    assert resp.get_json()["message"] == "Review added successfully"
    assert resp.get_json()["data"]["isVerifiedPurchase"] is False
    _review(client, bob, pid, rating=2)

    assert _product_rating(app, pid) == (3.5, 2)


def test_one_review_per_user_and_product(client, user, make_product):
    pid = make_product()
    _, headers = user
    _review(client, headers, pid)
    resp = _review(client, headers, pid)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "You have already reviewed this product"


def test_review_validation(client, user, make_product):
    pid = make_product()
    _, headers = user
    assert _review(client, headers, pid, rating=6).status_code == 400
    assert _review(client, headers, pid, comment="").status_code == 400
    assert _review(client, headers, 9999).status_code == 404


def test_verified_purchase_requires_delivered_order(client, admin, user, make_product):
    pid = make_product(stock=3)
    _, admin_headers = admin
    _, headers = user

    order = client.post("/api/orders", json={
        "items": [{"product": pid, "quantity": 1}],
        "shippingAddress": SHIPPING,
        "paymentMethod": "cod",
    }, headers=headers).get_json()["data"]
    client.put(f"/api/admin/orders/{order['id']}", json={"orderStatus": "delivered"}, headers=admin_headers)

    resp = _review(client, headers, pid)
    assert resp.get_json()["data"]["isVerifiedPurchase"] is True


def test_product_reviews_breakdown_and_pagination(client, make_user, make_product):
    pid = make_product()
    for rating in (5, 5, 4, 1):
        _, headers = make_user()
        _review(client, headers, pid, rating=rating)

    body = client.get(f"/api/reviews/product/{pid}?limit=3").get_json()
    assert len(body["data"]) == 3
    assert body["pagination"]["totalReviews"] == 4
    assert body["ratingBreakdown"] == {"5": 2, "4": 1, "3": 0, "2": 0, "1": 1}


def test_only_owner_updates_and_owner_or_admin_deletes(client, app, make_user, admin, make_product):
    pid = make_product()
    _, owner = make_user()
    _, stranger = make_user()
    _, admin_headers = admin
    rid = _review(client, owner, pid, rating=4).get_json()["data"]["id"]

    assert client.put(f"/api/reviews/{rid}", json={"rating": 1}, headers=stranger).status_code == 403
    resp = client.put(f"/api/reviews/{rid}", json={"rating": 2}, headers=owner)
    assert resp.get_json()["data"]["rating"] == 2
    assert _product_rating(app, pid) == (2.0, 1)

    assert client.delete(f"/api/reviews/{rid}", headers=stranger).status_code == 403
    assert client.delete(f"/api/reviews/{rid}", headers=admin_headers).status_code == 200
    assert _product_rating(app, pid) == (0, 0)


def test_helpful_and_my_reviews(client, user, make_product):
    pid = make_product()
    _, headers = user
    rid = _review(client, headers, pid).get_json()["data"]["id"]

    assert client.post(f"/api/reviews/{rid}/helpful").get_json()["data"]["helpful"] == 1
    mine = client.get("/api/reviews/my-reviews", headers=headers).get_json()["data"]
    assert mine[0]["product"]["name"] == "Brass Lamp"


def test_rejected_reviews_leave_the_rating(client, app, admin, make_user, make_product):
    pid = make_product()
    _, admin_headers = admin
    _, a = make_user()
    _, b = make_user()
    _review(client, a, pid, rating=5)
    bad = _review(client, b, pid, rating=1).get_json()["data"]["id"]

    resp = client.put(f"/api/reviews/admin/{bad}/approve", json={"isApproved": False}, headers=admin_headers)
    assert resp.get_json()["message"] == "Review rejected successfully"
    assert _product_rating(app, pid) == (5.0, 1)

    pending = client.get("/api/reviews/admin/all?isApproved=false", headers=admin_headers).get_json()
    assert [r["id"] for r in pending["data"]] == [bad]

    public = client.get(f"/api/reviews/product/{pid}").get_json()
    assert public["pagination"]["totalReviews"] == 1
