# coin_trail/core/categorizer.py
from typing import Dict, Iterable, List, Optional

from coin_trail.core.models import Category, CategoryType, Transaction


def index_categories(categories: Iterable[Category]) -> Dict[int, Category]:
    return {category.id: category for category in categories}


def categorize(tx: Transaction, categories_by_id: Dict[int, Category]) -> Optional[Category]:
    return categories_by_id.get(tx.category_id)


def filter_categories(
    categories: Iterable[Category],
    category_type: Optional[CategoryType],
) -> List[Category]:
    """Return the categories matching *category_type*, or all of them when unset."""
    if category_type is None:
        return list(categories)
    return [category for category in categories if category.type == category_type]
