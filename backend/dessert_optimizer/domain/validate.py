from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, List

from dessert_optimizer.core.errors import DomainError
from dessert_optimizer.domain.schema import DessertRequest

logger = logging.getLogger(__name__)


def validate_request(req: DessertRequest) -> None:
    if not req.ingredients:
        raise DomainError("Request must include at least one ingredient.")

    # Duplicates are allowed: name lookups resolve to the first match.
    dups = _duplicate_names([i.name for i in req.ingredients])
    if dups:
        logger.warning(
            "Duplicate ingredient names %s; lookups by name use the first occurrence.",
            dups,
        )


def _duplicate_names(names: List[str]) -> List[str]:
    counts: Dict[str, int] = defaultdict(int)
    for name in names:
        counts[name.lower()] += 1
    return sorted(n for n, k in counts.items() if k > 1)
