from __future__ import annotations

from sqlalchemy import func

from livewithdesigns.extensions import db
from livewithdesigns.models import Product, Review


def recalculate_product_rating(product_id: int) -> Product | None:
    """
    Recompute `rating` (average, one decimal) and `review_count` of a product
    from its approved, active reviews. Both drop to 0 when none are left.
    The caller commits.
    """
    product = db.session.get(Product, product_id)
    if not product:
        return None

    db.session.flush()
    avg, count = (
        db.session.query(func.avg(Review.rating), func.count(Review.id))
        .filter(
            Review.product_id == product_id,
            Review.is_approved.is_(True),
            Review.is_active.is_(True),
        )
        .one()
    )
    count = int(count or 0)
    product.rating = round(float(avg), 1) if count else 0
    product.review_count = count
    return product
