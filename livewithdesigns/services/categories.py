from livewithdesigns.extensions import db
from livewithdesigns.models import Category, Project


def refresh_project_count(category_id) -> None:
    """Store the number of projects in a category; the caller commits."""
    if not category_id:
        return
    category = db.session.get(Category, category_id)
    if not category:
        return
    db.session.flush()
    category.project_count = Project.query.filter_by(category_id=category_id).count()


def deletion_blocker(category: Category):
    """Message explaining why `category` cannot be deleted, or None."""
    projects = Project.query.filter_by(category_id=category.id).count()
    if projects or category.project_count:
        return "Cannot delete category with existing projects. Please reassign or delete projects first."
    if category.products:
        return "Cannot delete category with existing products. Please reassign or delete products first."
    return None
