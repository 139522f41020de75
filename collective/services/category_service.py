"""Keyword classifier that buckets task titles into chore categories.

Rules are evaluated in declaration order and the first rule whose keyword
appears in the lower-cased title wins, so "Clean kitchen" is ``cleaning``
rather than ``kitchen``. Titles matching no rule are left uncategorized.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from collective.domain.item import TrackedItem
from collective.models.service_models import CategoryTally


@dataclass(frozen=True)
class CategoryRule:
    """Map any of ``keywords`` found in a title to ``category``."""

    category: str
    keywords: tuple[str, ...]

    def matches(self, title: str) -> bool:
        lowered = title.lower()
        return any(keyword in lowered for keyword in self.keywords)


CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule("cleaning", ("clean", "vacuum")),
    CategoryRule("trash", ("trash",)),
    CategoryRule("dishes", ("dish",)),
    CategoryRule("bathroom", ("bathroom",)),
    CategoryRule("kitchen", ("kitchen",)),
)


def classify_title(title: str, rules: Iterable[CategoryRule] = CATEGORY_RULES) -> str | None:
    """Return the category of the first matching rule, or None."""
    for rule in rules:
        if rule.matches(title):
            return rule.category
    return None


def tally_by_category(
    items: Iterable[TrackedItem],
    rules: Iterable[CategoryRule] = CATEGORY_RULES,
) -> dict[str, CategoryTally]:
    """Count assigned and completed items per category.

    Categories without any matching item are absent from the result. Keys
    follow rule declaration order.
    """
    rules = tuple(rules)
    counts: dict[str, list[int]] = {rule.category: [0, 0] for rule in rules}

    for item in items:
        category = classify_title(item.title, rules)
        if category is None:
            continue
        counts[category][1] += 1
        if item.is_completed:
            counts[category][0] += 1

    return {
        category: CategoryTally(completed=completed, assigned=assigned)
        for category, (completed, assigned) in counts.items()
        if assigned > 0
    }
