# livewithdesigns/cli.py
import os

import click
from sqlalchemy import func

from livewithdesigns.extensions import db

PRODUCT_CATEGORIES = [
    ("Lighting", "Modern and classic lighting solutions including chandeliers, floor lamps, wall sconces, and pendant lights"),
    ("Sofas", "Luxury sofas and sectionals for your living room, from modern minimalist to classic designs"),
    ("Beds", "Premium beds and bedroom furniture for a perfect night sleep"),
    ("Wall Decoration", "Art pieces, mirrors, wall hangings and decorative elements for your walls"),
    ("Furniture", "Complete furniture solutions including cabinets, shelves, and storage units"),
    ("Decor Items", "Decorative accessories, vases, sculptures, and accent pieces"),
    ("Tables", "Coffee tables, dining tables, side tables, and console tables"),
    ("Chairs", "Accent chairs, dining chairs, office chairs, and lounge seating"),
    ("Storage", "Smart storage solutions, wardrobes, and organizational furniture"),
    ("Outdoor", "Outdoor furniture, garden decor, and patio essentials"),
]

PROJECT_CATEGORIES = [
    ("Residential", "Beautiful residential interior designs for homes, apartments, and villas", "Home"),
    ("Commercial", "Modern commercial space designs for businesses and retail", "Building"),
    ("Office", "Professional office interior designs for corporate spaces", "Briefcase"),
    ("Hospitality", "Elegant designs for hotels, resorts, and restaurants", "Coffee"),
    ("Retail", "Attractive retail space designs for shops and showrooms", "ShoppingBag"),
    ("Institutional", "Functional designs for schools, hospitals, and public spaces", "School"),
]


def register_cli(app):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables that do not exist yet."""
        db.create_all()
        click.echo("Database tables created.")

    @app.cli.command("create-admin")
    @click.option("--name", default=lambda: os.environ.get("ADMIN_NAME", "Admin"),
                  show_default=True, help="Display name")
    @click.option("--email", default=lambda: os.environ.get("ADMIN_EMAIL", "admin@example.com"),
                  show_default=True, help="Admin e-mail (login)")
    @click.option("--password", default=lambda: os.environ.get("ADMIN_PASSWORD"),
                  help="Password (prompted when omitted)")
    @click.option("--force", is_flag=True, default=False,
                  help="Reset password and role when the account already exists")
    def create_admin(name: str, email: str, password: str | None, force: bool):
        """Create or reset an admin account."""
        from livewithdesigns.models import User

        db.create_all()

        if not password:
            password = click.prompt("Password", hide_input=True, confirmation_prompt=True)

        email = email.strip().lower()
        u = User.query.filter_by(email=email).first()
        if u and not force:
            click.echo(f"User '{email}' already exists. Use --force to reset the password.")
            return

        if not u:
            u = User(name=name, email=email)
            db.session.add(u)
        u.role = "admin"
        u.set_password(password)
        db.session.commit()
        click.echo(f"Admin ready: {email}")

    @app.cli.command("seed-categories")
    def seed_categories():
        """Insert the default shop and portfolio categories; existing names are skipped."""
        from livewithdesigns.models import Category

        db.create_all()
        rows = [
            dict(name=n, description=d, type="product", order=i)
            for i, (n, d) in enumerate(PRODUCT_CATEGORIES, start=1)
        ] + [
            dict(name=n, description=d, type="project", icon=icon, order=i)
            for i, (n, d, icon) in enumerate(PROJECT_CATEGORIES, start=1)
        ]

        created = 0
        for row in rows:
            exists = Category.query.filter(
                func.lower(Category.name) == row["name"].lower(), Category.type == row["type"]
            ).first()
            if exists:
                continue
            db.session.add(Category(
                name=row["name"],
                description=row["description"],
                type=row["type"],
                icon=row.get("icon"),
                sort_order=row["order"],
            ))
            created += 1
        db.session.commit()
        click.echo(f"Categories created: {created}")
