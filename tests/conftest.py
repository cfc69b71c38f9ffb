import io

import pytest
from PIL import Image

from livewithdesigns.app import create_app
from livewithdesigns.config import Config
from livewithdesigns.extensions import db
from livewithdesigns.auth.tokens import issue_auth_token
from livewithdesigns.models import User, Category, Product, Project


@pytest.fixture
def app(tmp_path):
    class TestConfig(Config):
        TESTING = True
        SECRET_KEY = "test-secret"
        SQLALCHEMY_DATABASE_URI = "sqlite:///" + str(tmp_path / "test.db")
        UPLOAD_FOLDER = str(tmp_path / "uploads")
        MAIL_SUPPRESS_SEND = True
        MAIL_DEFAULT_SENDER = "shop@example.com"
        BCRYPT_LOG_ROUNDS = 4
        PAYMENT_KEY_ID = "key_test"
        PAYMENT_KEY_SECRET = "secret_test"
        ORDER_NOTIFY_EMAIL = None

    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    """Create a user and return (id, auth headers)."""
    counter = {"n": 0}

    def _make(role="user", email=None, password="secret123", name="Test User"):
        counter["n"] += 1
        with app.app_context():
            u = User(name=name, email=email or f"user{counter['n']}@example.com", role=role)
            u.set_password(password)
            db.session.add(u)
            db.session.commit()
            token = issue_auth_token(u.id)
            return u.id, {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(role="admin", email="admin@example.com", name="Admin")


@pytest.fixture
def make_category(app):
    def _make(name="Lighting", type="product", **kw):
        with app.app_context():
            c = Category(name=name, type=type, **kw)
            db.session.add(c)
            db.session.commit()
            return c.id

    return _make


@pytest.fixture
def make_product(app, make_category):
    def _make(name="Brass Lamp", price=100, stock=5, category_id=None, **kw):
        if category_id is None:
            with app.app_context():
                c = Category.query.filter_by(name="Lighting").first()
                category_id = c.id if c else None
            category_id = category_id or make_category("Lighting")
        with app.app_context():
            category = db.session.get(Category, category_id)
            p = Product(
                name=name,
                slug=name.lower().replace(" ", "-"),
                category=category,
                category_name=category.name,
                price=price,
                stock_quantity=stock,
                **kw,
            )
            db.session.add(p)
            db.session.commit()
            return p.id

    return _make


@pytest.fixture
def make_project(app, make_category):
    def _make(title="Sea View Apartment", category_id=None, **kw):
        with app.app_context():
            if category_id is None:
                c = Category.query.filter_by(name="Residential").first()
                category_id = c.id if c else make_category("Residential", type="project")
            p = Project(
                title=title,
                slug=title.lower().replace(" ", "-"),
                category_id=category_id,
                description="A calm coastal home.",
                location="Mumbai",
                thumbnail="/uploads/thumb.webp",
                **kw,
            )
            db.session.add(p)
            db.session.commit()
            return p.id

    return _make


@pytest.fixture
def png_bytes():
    def _make(size=(40, 30), color=(200, 30, 30)):
        buf = io.BytesIO()
        Image.new("RGB", size, color).save(buf, format="PNG")
        buf.seek(0)
        return buf

    return _make
