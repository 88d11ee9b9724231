"""
Unit Normalization

Ingredient quantities are normalized to grams. Milliliters count as grams
(water density). Unrecognized units pass through unconverted with a caveat.
"""

import logging
from typing import Dict, Optional, Tuple

logger = logging.getLogger(__name__)


GRAMS_PER_UNIT: Dict[str, float] = {
    "g": 1,
    "gram": 1,
    "grams": 1,
    "ml": 1,
    "milliliter": 1,
    "milliliters": 1,
    "millilitre": 1,
    "millilitres": 1,
    "piece": 100,
    "pieces": 100,
    "cup": 240,
    "cups": 240,
    "tbsp": 15,
    "tablespoon": 15,
    "tablespoons": 15,
    "tsp": 5,
    "teaspoon": 5,
    "teaspoons": 5,
}

BASE_UNIT = "g"


def to_grams(quantity: float, unit: str) -> Tuple[float, Optional[str]]:
    """
    Normalize a quantity to grams.

    Returns:
        (grams, caveat) where caveat is None for known units
    """
    factor = GRAMS_PER_UNIT.get((unit or "").strip().lower())
    if factor is None:
        caveat = f"Unknown unit '{unit}', quantity {quantity:g} used as grams"
        logger.warning(caveat)
        return quantity, caveat
    return quantity * factor, None
