from .categories import CATEGORY_IDS, provider_category_id, supported_categories

__all__ = ["CATEGORY_IDS", "provider_category_id", "supported_categories"]
