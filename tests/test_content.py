import io
import os

from livewithdesigns.extensions import mail


BLOG = {
    "title": "Small Spaces, Big Ideas",
    "excerpt": "Make a studio feel open.",
    "content": "Use mirrors and light colours.",
    "author": "Meera",
    "category": "Tips",
}


# --- Blog --------------------------------------------------------------------

def test_blog_slug_defaults_to_title_and_must_be_unique(client, admin):
    _, headers = admin
    resp = client.post("/api/blog", json=BLOG, headers=headers)
    assert resp.status_code == 201
    assert resp.get_json()["data"]["slug"] == "small-spaces-big-ideas"
    assert resp.get_json()["data"]["status"] == "draft"

    resp = client.post("/api/blog", json=BLOG, headers=headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "A blog post with this slug already exists"


def test_blog_requires_content(client, admin):
    _, headers = admin
    resp = client.post("/api/blog", json={**BLOG, "content": ""}, headers=headers)
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Content is required"


def test_blog_list_get_like_update_delete(client, admin):
    _, headers = admin
    blog_id = client.post("/api/blog", json={**BLOG, "status": "published"}, headers=headers).get_json()["data"]["id"]

    body = client.get("/api/blog?status=published").get_json()
    assert body["pagination"]["totalBlogs"] == 1
    assert client.get("/api/blog?category=Other").get_json()["data"] == []

    assert client.get("/api/blog/small-spaces-big-ideas").status_code == 200
    assert client.post(f"/api/blog/{blog_id}/like").get_json()["likes"] == 1

    resp = client.put(f"/api/blog/{blog_id}", json={"title": "Bigger Ideas"}, headers=headers)
    assert resp.get_json()["data"]["title"] == "Bigger Ideas"

    resp = client.delete(f"/api/blog/{blog_id}", headers=headers)
    assert resp.get_json()["message"] == "Blog post removed"
    assert client.get("/api/blog/small-spaces-big-ideas").status_code == 404


def test_blog_image_upload_replaces_old_file(client, app, admin, png_bytes):
    _, headers = admin
    resp = client.post(
        "/api/blog",
        data={**BLOG, "image": (png_bytes(), "cover.png")},
        headers=headers,
        content_type="multipart/form-data",
    )
    data = resp.get_json()["data"]
    first = os.path.join(app.config["UPLOAD_FOLDER"], os.path.basename(data["image"]))
    assert os.path.exists(first)

    resp = client.put(
        f"/api/blog/{data['id']}",
        data={"image": (png_bytes(color=(0, 0, 255)), "cover2.png")},
        headers=headers,
        content_type="multipart/form-data",
    )
    assert resp.status_code == 200
    assert not os.path.exists(first)


# --- Services ----------------------------------------------------------------

def test_services_sorted_by_order(client, admin):
    _, headers = admin
    client.post("/api/services", json={"title": "Styling", "description": "d", "order": 2}, headers=headers)
    client.post("/api/services", json={"title": "Planning", "description": "d", "order": 1,
                                       "features": ["Layouts", "3D renders"]}, headers=headers)

    data = client.get("/api/services").get_json()["data"]
    assert [s["title"] for s in data] == ["Planning", "Styling"]
    assert data[0]["features"] == ["Layouts", "3D renders"]


def test_service_update_and_delete(client, admin):
    _, headers = admin
    sid = client.post("/api/services", json={"title": "Styling", "description": "d"}, headers=headers).get_json()["data"]["id"]
    resp = client.put(f"/api/services/{sid}", json={"value": "From Rs. 5,000"}, headers=headers)
    assert resp.get_json()["data"]["value"] == "From Rs. 5,000"
    assert client.delete(f"/api/services/{sid}", headers=headers).get_json()["message"] == "Service removed"
    assert client.get(f"/api/services/{sid}").status_code == 404


def test_service_writes_need_admin(client, user):
    _, headers = user
    assert client.post("/api/services", json={"title": "x", "description": "y"}, headers=headers).status_code == 403


# --- Contact -----------------------------------------------------------------

def test_contact_submission_and_admin_workflow(client, admin):
    _, headers = admin
    resp = client.post("/api/contact", json={
        "name": "Ravi",
        "email": "Ravi@Example.com",
        "subject": "Kitchen remodel",
        "message": "Can you help?",
        "serviceType": "Kitchen",
    })
    assert resp.status_code == 201
    msg = resp.get_json()["data"]
    assert msg["email"] == "ravi@example.com"
    assert msg["status"] == "new"

    listing = client.get("/api/contact?status=new", headers=headers).get_json()
    assert listing["pagination"]["totalMessages"] == 1

    resp = client.put(f"/api/contact/{msg['id']}", json={"status": "read"}, headers=headers)
    assert resp.get_json()["data"]["status"] == "read"

    with mail.record_messages() as outbox:
        resp = client.post(f"/api/contact/{msg['id']}/respond", json={"message": "Sure, call us."}, headers=headers)
    data = resp.get_json()["data"]
    assert data["status"] == "replied"
    assert data["responses"][0]["respondedBy"] == "Admin"
    assert len(outbox) == 1
    assert outbox[0].recipients == ["ravi@example.com"]
    assert outbox[0].reply_to == "admin@example.com"

    assert client.delete(f"/api/contact/{msg['id']}", headers=headers).get_json()["message"] == "Message removed"
    assert client.get(f"/api/contact/{msg['id']}", headers=headers).status_code == 404


def test_contact_validation_and_privacy(client, user):
    resp = client.post("/api/contact", json={"name": "Ravi", "email": "not-an-email", "subject": "s", "message": "m"})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Please enter a valid email"

    _, headers = user
    assert client.get("/api/contact", headers=headers).status_code == 403
    assert client.get("/api/contact").status_code == 401


# --- Settings ----------------------------------------------------------------

def test_home_banner_defaults(client):
    data = client.get("/api/settings/home-banner").get_json()["data"]
    assert data["title"] == "Exceptional House Design & Interior Solutions"
    assert data["primaryButtonLink"] == "/store"
    assert data["mediaType"] == "image"


# --- Media -------------------------------------------------------------------

def test_media_upload_list_like_delete(client, app, admin, png_bytes):
    _, headers = admin
    resp = client.post("/api/media", data={}, headers=headers, content_type="multipart/form-data")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "No file provided"

    resp = client.post(
        "/api/media",
        data={"title": "Living room", "category": "interiors", "file": (png_bytes(), "room.png")},
        headers=headers,
        content_type="multipart/form-data",
    )
    assert resp.status_code == 201
    media = resp.get_json()["data"]
    assert media["type"] == "image"
    stored = os.path.join(app.config["UPLOAD_FOLDER"], media["publicId"])
    assert os.path.exists(stored)

    assert client.get("/api/media?category=interiors").get_json()["pagination"]["totalMedia"] == 1
    assert client.post(f"/api/media/{media['id']}/like").get_json()["likes"] == 1

    assert client.delete(f"/api/media/{media['id']}", headers=headers).get_json()["message"] == "Media removed"
    assert not os.path.exists(stored)


def test_media_upload_without_title_leaves_no_file(client, app, admin, png_bytes):
    _, headers = admin
    resp = client.post(
        "/api/media",
        data={"file": (png_bytes(), "room.png")},
        headers=headers,
        content_type="multipart/form-data",
    )
    assert resp.status_code == 400
    assert os.listdir(app.config["UPLOAD_FOLDER"]) == []


def test_media_rejects_other_file_types(client, admin):
    _, headers = admin
    resp = client.post(
        "/api/media",
        data={"title": "Notes", "file": (io.BytesIO(b"hello"), "notes.txt", "text/plain")},
        headers=headers,
        content_type="multipart/form-data",
    )
    assert resp.status_code == 400
