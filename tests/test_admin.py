import io
import os

from livewithdesigns.models import Cart, CartItem, Wishlist, WishlistItem

SHIPPING = {
    "name": "Asha Rao", "phone": "9876543210", "street": "12 MG Road",
    "city": "Bengaluru", "state": "Karnataka", "zipcode": "560001", "country": "India",
}


def _place_order(client, headers, product_id, quantity=1):
    return client.post("/api/orders", json={
        "items": [{"product": product_id, "quantity": quantity}],
        "shippingAddress": SHIPPING,
        "paymentMethod": "cod",
    }, headers=headers).get_json()["data"]["id"]


def _stored(app, url):
    return os.path.join(app.config["UPLOAD_FOLDER"], os.path.basename(url))


# --- Dashboard and users -----------------------------------------------------

def test_admin_area_is_closed_to_customers(client, user):
    _, headers = user
    assert client.get("/api/admin/dashboard").status_code == 401
    resp = client.get("/api/admin/dashboard", headers=headers)
    assert resp.status_code == 403
    assert resp.get_json()["message"] == "Not authorized as an admin"


def test_dashboard_counts_and_revenue(client, admin, user, make_product, make_project):
    _, admin_headers = admin
    _, headers = user
    lamp = make_product(price=200, stock=10)
    make_project()

    delivered = _place_order(client, headers, lamp, quantity=2)
    _place_order(client, headers, lamp)
    client.put(f"/api/admin/orders/{delivered}", json={"orderStatus": "delivered"}, headers=admin_headers)

    data = client.get("/api/admin/dashboard", headers=admin_headers).get_json()["data"]
    assert data["totalUsers"] == 2
    assert data["totalCustomers"] == 1
    assert data["totalOrders"] == 2
    assert data["totalProducts"] == 1
    assert data["totalProjects"] == 1
    assert data["totalCategories"] == 2
    assert data["totalRevenue"] == 400
    assert data["newOrders"] == 1
    assert data["pendingOrders"] == 0


def test_user_list_and_role_change(client, admin, user):
    _, admin_headers = admin
    uid, _ = user

    body = client.get("/api/admin/users", headers=admin_headers).get_json()
    assert body["pagination"]["totalUsers"] == 2
    assert all("passwordHash" not in u and "password" not in u for u in body["data"])

    resp = client.put(f"/api/admin/users/{uid}", json={"role": "admin"}, headers=admin_headers)
    assert resp.get_json()["data"]["role"] == "admin"
    assert client.put(f"/api/admin/users/{uid}", json={"role": "owner"}, headers=admin_headers).status_code == 400
    assert client.put("/api/admin/users/999", json={"role": "user"}, headers=admin_headers).status_code == 404


def test_user_deletion_rules(client, app, admin, make_user, make_product):
    admin_id, admin_headers = admin
    buyer_id, buyer = make_user()
    idle_id, idle = make_user()
    lamp = make_product(stock=5)
    _place_order(client, buyer, lamp)
    client.post("/api/cart/add", json={"productId": lamp, "quantity": 2}, headers=idle)
    client.post("/api/wishlist/add", json={"productId": lamp}, headers=idle)
    client.post("/api/addresses", json={
        "fullName": "Idle", "phone": "9876543210", "street": "1 Road",
        "city": "Pune", "state": "MH", "pincode": "411001",
    }, headers=idle)

    resp = client.delete(f"/api/admin/users/{admin_id}", headers=admin_headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "You cannot delete your own account"

    resp = client.delete(f"/api/admin/users/{buyer_id}", headers=admin_headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Cannot delete a user with existing orders"

    resp = client.delete(f"/api/admin/users/{idle_id}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.get_json()["message"] == "User removed"
    with app.app_context():
        assert Cart.query.count() == CartItem.query.count() == 0
        assert Wishlist.query.count() == WishlistItem.query.count() == 0
    assert client.get("/api/admin/users", headers=admin_headers).get_json()["pagination"]["totalUsers"] == 2


# --- Orders ------------------------------------------------------------------

def test_order_status_update_records_history(client, admin, user, make_product):
    admin_id, admin_headers = admin
    _, headers = user
    oid = _place_order(client, headers, make_product())

    resp = client.put(f"/api/admin/orders/{oid}", json={"orderStatus": "shipped", "trackingNumber": " TRK9 "},
                      headers=admin_headers)
    data = resp.get_json()["data"]
    assert data["orderStatus"] == "shipped"
    assert data["trackingNumber"] == "TRK9"
    last = data["statusHistory"][-1]
    assert (last["status"], last["note"], last["changedBy"]) == ("shipped", "Status changed to shipped", admin_id)

    # same status again adds nothing
    data = client.put(f"/api/admin/orders/{oid}", json={"orderStatus": "shipped"},
                      headers=admin_headers).get_json()["data"]
    assert len(data["statusHistory"]) == 2

    assert client.put(f"/api/admin/orders/{oid}", json={"orderStatus": "lost"}, headers=admin_headers).status_code == 400
    assert client.put(f"/api/admin/orders/{oid}", json={"estimatedDelivery": "soon"},
                      headers=admin_headers).status_code == 400

    listing = client.get("/api/admin/orders?status=shipped", headers=admin_headers).get_json()
    assert listing["pagination"]["totalOrders"] == 1


# --- Categories --------------------------------------------------------------

def test_admin_categories_include_inactive(client, admin, make_category):
    _, headers = admin
    make_category("Lighting")
    make_category("Retired", is_active=False)

    body = client.get("/api/admin/categories", headers=headers).get_json()
    assert body["pagination"]["totalCategories"] == 2
    assert {c["name"] for c in body["data"]} == {"Lighting", "Retired"}
    assert [c["name"] for c in client.get("/api/categories").get_json()] == ["Lighting"]


def test_admin_category_create_and_duplicate(client, admin):
    _, headers = admin
    resp = client.post("/api/admin/categories", json={"name": "Kitchen", "type": "project"}, headers=headers)
    assert resp.status_code == 201
    assert resp.get_json()["data"]["slug"] == "kitchen"

    resp = client.post("/api/admin/categories", json={"name": "kitchen"}, headers=headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Category already exists"


def test_admin_category_image_replacement_deletes_old_file(client, app, admin, make_category, png_bytes):
    _, headers = admin
    cid = make_category("Lighting")

    def upload():
        return client.post("/api/admin/upload", data={"image": (png_bytes(), "a.png")}, headers=headers,
                           content_type="multipart/form-data").get_json()["url"]

    first, second = upload(), upload()
    client.put(f"/api/admin/categories/{cid}", json={"image": first}, headers=headers)
    client.put(f"/api/admin/categories/{cid}", json={"image": second}, headers=headers)
    assert not os.path.exists(_stored(app, first))
    assert os.path.exists(_stored(app, second))

    resp = client.delete(f"/api/admin/categories/{cid}", headers=headers)
    assert resp.get_json()["message"] == "Category deleted successfully"
    assert not os.path.exists(_stored(app, second))


def test_admin_category_delete_blocked_while_in_use(client, admin, make_product, make_category):
    _, headers = admin
    cid = make_category("Lighting")
    make_product(category_id=cid)
    assert client.delete(f"/api/admin/categories/{cid}", headers=headers).status_code == 400


def test_admin_category_stats(client, admin, make_category, make_project):
    _, headers = admin
    cid = make_category("Residential", type="project")
    make_project("Sea View Apartment", category_id=cid, views=10, likes=2)
    make_project("Hill Cottage", category_id=cid, views=5, likes=1, status="ongoing")

    data = client.get(f"/api/admin/categories/{cid}/stats", headers=headers).get_json()["data"]
    assert data["categoryName"] == "Residential"
    assert data["totalViews"] == 15
    assert data["totalLikes"] == 3
    assert [(p["slug"], p["status"]) for p in data["projects"]] == [
        ("sea-view-apartment", "completed"), ("hill-cottage", "ongoing"),
    ]
    assert client.get("/api/admin/categories/999/stats", headers=headers).status_code == 404


# --- Uploads -----------------------------------------------------------------

def test_upload_image_is_normalized_to_webp(client, app, admin, png_bytes):
    _, headers = admin
    resp = client.post("/api/admin/upload", data={"image": (png_bytes(size=(3000, 1500)), "big.png")},
                       headers=headers, content_type="multipart/form-data")
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["publicId"].endswith(".webp")
    assert body["url"] == f"/uploads/{body['publicId']}"

    from PIL import Image
    with Image.open(_stored(app, body["url"])) as img:
        assert img.size == (1600, 800)

    assert client.get(body["url"]).status_code == 200


def test_upload_errors(client, admin):
    _, headers = admin
    empty = {"headers": headers, "content_type": "multipart/form-data", "data": {}}
    assert client.post("/api/admin/upload", **empty).get_json()["message"] == "No file uploaded"
    assert client.post("/api/admin/upload-multiple", **empty).get_json()["message"] == "No files uploaded"
    assert client.post("/api/admin/upload-video", **empty).get_json()["message"] == "No video file uploaded"
    assert client.post("/api/admin/upload-3d", **empty).get_json()["message"] == "No 3D model file uploaded"

    resp = client.post("/api/admin/upload", data={"image": (io.BytesIO(b"hi"), "notes.txt", "text/plain")},
                       headers=headers, content_type="multipart/form-data")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Only image files are allowed"


def test_upload_multiple_validates_before_saving(client, app, admin, png_bytes):
    _, headers = admin
    resp = client.post("/api/admin/upload-multiple", data={
        "images": [(png_bytes(), "a.png"), (io.BytesIO(b"x"), "b.txt", "text/plain")],
    }, headers=headers, content_type="multipart/form-data")
    assert resp.status_code == 400
    assert os.listdir(app.config["UPLOAD_FOLDER"]) == []

    resp = client.post("/api/admin/upload-multiple", data={
        "images": [(png_bytes(), "a.png"), (png_bytes(), "b.png")],
    }, headers=headers, content_type="multipart/form-data")
    assert len(resp.get_json()["images"]) == 2

    resp = client.post("/api/admin/upload-multiple", data={
        "images": [(png_bytes(), f"{i}.png") for i in range(11)],
    }, headers=headers, content_type="multipart/form-data")
    assert resp.status_code == 400


def test_upload_video_and_model(client, app, admin):
    _, headers = admin
    resp = client.post("/api/admin/upload-video", data={"video": (io.BytesIO(b"\x00" * 64), "tour.mp4", "video/mp4")},
                       headers=headers, content_type="multipart/form-data")
    body = resp.get_json()
    assert body["format"] == "mp4"
    assert os.path.exists(_stored(app, body["url"]))

    payload = b"glTF" + b"\x00" * 96
    resp = client.post("/api/admin/upload-3d", data={"model": (io.BytesIO(payload), "chair.GLB")},
                       headers=headers, content_type="multipart/form-data")
    body = resp.get_json()
    assert body["format"] == "glb"
    assert body["size"] == len(payload)

    resp = client.post("/api/admin/upload-3d", data={"model": (io.BytesIO(payload), "chair.stl")},
                       headers=headers, content_type="multipart/form-data")
    assert resp.status_code == 400


# --- Content views -----------------------------------------------------------

def test_admin_product_filters(client, admin, make_product):
    _, headers = admin
    make_product("Brass Lamp", stock=2)
    make_product("Oak Table", stock=0)

    def names(query):
        body = client.get(f"/api/admin/products?{query}", headers=headers).get_json()
        return sorted(p["name"] for p in body["data"])

    assert names("search=oak") == ["Oak Table"]
    assert names("inStock=true") == ["Brass Lamp"]
    assert names("inStock=false") == ["Oak Table"]
    assert names("category=Lighting") == ["Brass Lamp", "Oak Table"]


def test_admin_project_blog_service_and_contact_views(client, admin, make_project):
    _, headers = admin
    make_project("Sea View Apartment")
    client.post("/api/blog", json={"title": "Colour Tips", "excerpt": "e", "content": "Use warm tones",
                                   "author": "Meera", "category": "Tips"}, headers=headers)
    client.post("/api/services", json={"title": "Styling", "description": "d"}, headers=headers)
    client.post("/api/contact", json={"name": "Ravi", "email": "ravi@example.com", "subject": "Kitchen",
                                      "message": "Hello"})

    assert client.get("/api/admin/projects?search=mumbai", headers=headers).get_json()["pagination"]["totalProjects"] == 1
    assert client.get("/api/admin/blogs?search=warm", headers=headers).get_json()["pagination"]["totalBlogs"] == 1
    assert client.get("/api/admin/services", headers=headers).get_json()["data"][0]["title"] == "Styling"

    contacts = client.get("/api/admin/contacts?search=ravi", headers=headers).get_json()
    assert contacts["pagination"]["totalMessages"] == 1
    cid = contacts["data"][0]["id"]
    assert client.get(f"/api/admin/contacts/{cid}", headers=headers).status_code == 200
    resp = client.get("/api/admin/contacts/999", headers=headers)
    assert resp.get_json()["message"] == "Contact message not found"


# --- Settings ----------------------------------------------------------------

def test_banner_update_replaces_media(client, app, admin, png_bytes):
    _, headers = admin
    resp = client.put("/api/admin/settings/home-banner", data={
        "title": "New Season", "media": (png_bytes(), "hero.png"),
    }, headers=headers, content_type="multipart/form-data")
    assert resp.get_json()["message"] == "Banner updated successfully"
    first = resp.get_json()["data"]
    assert first["title"] == "New Season"
    assert first["mediaType"] == "image"
    assert os.path.exists(_stored(app, first["mediaUrl"]))

    resp = client.put("/api/admin/settings/home-banner", data={
        "media": (io.BytesIO(b"\x00" * 32), "hero.mp4", "video/mp4"),
    }, headers=headers, content_type="multipart/form-data")
    second = resp.get_json()["data"]
    assert second["mediaType"] == "video"
    assert second["title"] == "New Season"
    assert not os.path.exists(_stored(app, first["mediaUrl"]))

    public = client.get("/api/settings/home-banner").get_json()["data"]
    assert public["mediaUrl"] == second["mediaUrl"]
