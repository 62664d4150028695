"""Category module — the category tree and its structural invariants."""

from catalog_admin.modules.category.service import CategoryService

__all__ = ["CategoryService"]
