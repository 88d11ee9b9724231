"""
Safety & Contraindication Evaluator

The only evaluator allowed to block. Runs for every candidate regardless of
the active framework.

PRINCIPLE: Safety does not negotiate. Any sub-check that blocks forces the
final score to 0 and removes the item from recommendations.

Sub-checks (independent, block = OR, all warnings kept):
- Allergies (explicit keyword table)
- Diabetes, acid reflux, hypertension, kidney disease
- Dietary preferences (vegetarian, vegan, halal)

Known precision limitation: keyword and category matching is a
case-insensitive substring test against name, category and tags, so an
unrelated word containing a keyword (e.g. "Butternut" for Nuts) also
matches. This errs on the side of blocking.

Version: safety_rules_v1
"""

from typing import Callable, Dict, Iterable, List, Tuple

from .models import FoodItem, UserHealthProfile
from .results import RuleResult, merge_rule_results


# ============================================================================
# KEYWORD TABLES
# ============================================================================

ALLERGEN_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "nuts": ("Nut", "Almond", "Cashew", "Walnut", "Peanut"),
    "dairy": ("Dairy", "Milk", "Cheese", "Yogurt", "Butter"),
    "gluten": ("Grain", "Wheat", "Barley", "Rye"),
    "soy": ("Soy", "Tofu", "Tempeh"),
    "shellfish": ("Shrimp", "Crab", "Lobster"),
    "fish": ("Fish", "Salmon", "Tuna"),
    "eggs": ("Egg",),
}

SUGARY_CATEGORIES = ("Dessert", "Sweet", "Candy", "Pastry")
SUGARY_TAGS = ("High-Sugar", "Sweet", "Sugary")
FRIED_METHODS = ("fried", "deep-fried")

NON_VEGETARIAN_CATEGORIES = ("Meat", "Fish", "Seafood")
NON_VEGAN_CATEGORIES = NON_VEGETARIAN_CATEGORIES + ("Dairy", "Egg")
NON_HALAL_TAGS = ("Non-Halal", "Pork")

DIABETES_NET_CARB_LIMIT = 40
ACID_REFLUX_FAT_LIMIT = 25
HYPERTENSION_SODIUM_LIMIT = 40
KIDNEY_PROTEIN_LIMIT = 25
KIDNEY_POTASSIUM_LIMIT = 30


def allergen_keywords(allergy: str) -> Tuple[str, ...]:
    """Keywords for a declared allergy; an unknown allergy matches its own name."""
    return ALLERGEN_KEYWORDS.get(allergy.strip().casefold(), (allergy.strip(),))


def _contains_any(texts: Iterable[str], keywords: Iterable[str]) -> bool:
    lowered = [t.casefold() for t in texts if t]
    return any(k.casefold() in t for k in keywords for t in lowered)


def _has_tag(item: FoodItem, candidates: Iterable[str]) -> bool:
    tags = {t.casefold() for t in item.tags}
    return any(c.casefold() in tags for c in candidates)


# ============================================================================
# SUB-CHECKS
# ============================================================================

def _check_allergies(profile: UserHealthProfile, item: FoodItem) -> RuleResult:
    result = RuleResult()
    searchable = [item.name, item.category, *item.tags]
    for allergy in profile.allergies:
        if _contains_any(searchable, allergen_keywords(allergy)):
            result.veto(f"BLOCKED: Contains {allergy} (known allergen)")
    return result


def _check_diabetes(profile: UserHealthProfile, item: FoodItem) -> RuleResult:
    result = RuleResult()
    if not profile.has_condition("Diabetes"):
        return result

    n = item.modern_nutrition
    if n is not None and n.carbs and n.net_carbs > DIABETES_NET_CARB_LIMIT:
        result.veto(f"BLOCKED: Net carbohydrate {n.net_carbs:g} g is unsuitable for diabetes")
    if _contains_any([item.category], SUGARY_CATEGORIES):
        result.veto("BLOCKED: Sugary food category is unsuitable for diabetes")
    if _has_tag(item, SUGARY_TAGS):
        result.veto("BLOCKED: High sugar content")
    return result


def _check_acid_reflux(profile: UserHealthProfile, item: FoodItem) -> RuleResult:
    result = RuleResult()
    if not profile.has_condition("Acid Reflux"):
        return result

    n = item.modern_nutrition
    if n is not None and n.fat > ACID_REFLUX_FAT_LIMIT:
        result.veto("BLOCKED: Very high fat content triggers acid reflux")
    if (item.cooking_method or "").casefold() in FRIED_METHODS:
        result.veto("BLOCKED: Fried foods aggravate acid reflux")
    if item.category.casefold() == "spice" or _has_tag(item, ("Spicy",)):
        result.veto("BLOCKED: Spicy foods worsen acid reflux")
    return result


def _check_hypertension(profile: UserHealthProfile, item: FoodItem) -> RuleResult:
    result = RuleResult()
    if not profile.has_condition("Hypertension"):
        return result

    n = item.modern_nutrition
    if n is not None and n.micronutrient("sodium") > HYPERTENSION_SODIUM_LIMIT:
        result.veto("BLOCKED: Very high sodium content is unsuitable for hypertension")
    if _has_tag(item, ("High-Sodium",)):
        result.veto("BLOCKED: High sodium content")
    return result


def _check_kidney_disease(profile: UserHealthProfile, item: FoodItem) -> RuleResult:
    result = RuleResult()
    if not profile.has_condition("Kidney Disease"):
        return result

    n = item.modern_nutrition
    if n is None:
        return result
    if n.protein > KIDNEY_PROTEIN_LIMIT:
        result.veto("BLOCKED: Very high protein content may strain kidneys")
    if n.micronutrient("potassium") > KIDNEY_POTASSIUM_LIMIT:
        result.veto("BLOCKED: High potassium content is unsuitable for kidney disease")
    return result


def _check_dietary_preferences(profile: UserHealthProfile, item: FoodItem) -> RuleResult:
    result = RuleResult()
    category = item.category.casefold()

    if profile.has_preference("Vegetarian"):
        if category in {c.casefold() for c in NON_VEGETARIAN_CATEGORIES}:
            result.veto("BLOCKED: Non-vegetarian food conflicts with dietary preference")
    if profile.has_preference("Vegan"):
        if category in {c.casefold() for c in NON_VEGAN_CATEGORIES}:
            result.veto("BLOCKED: Non-vegan food conflicts with dietary preference")
    if profile.has_preference("Halal"):
        if _has_tag(item, NON_HALAL_TAGS) or category == "pork":
            result.veto("BLOCKED: Non-Halal food")
    return result


SAFETY_CHECKS: List[Callable[[UserHealthProfile, FoodItem], RuleResult]] = [
    _check_allergies,
    _check_diabetes,
    _check_acid_reflux,
    _check_hypertension,
    _check_kidney_disease,
    _check_dietary_preferences,
]


def evaluate(profile: UserHealthProfile, item: FoodItem) -> RuleResult:
    """Run every safety sub-check and merge them."""
    return merge_rule_results(check(profile, item) for check in SAFETY_CHECKS)
