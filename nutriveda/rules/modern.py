"""
Modern Nutrition Evaluator

Evidence-based clinical nutrition scoring over the item's nutrition block:
- Calorie fit to BMI band
- Net-carbohydrate load for diabetes
- Fat, fried and spice tolerance for acid reflux
- Protein adequacy for activity level and age
- Micronutrient density (3+ nutrients above 10% of reference is "rich")
- Clinical goals (weight loss, muscle gain, metabolic health, ...)

Never blocks. Hard vetoes belong to the Safety evaluator.

Version: rule_engine_v1
"""

from .models import FoodItem, NutritionFacts, UserHealthProfile
from .results import RuleResult


UNDERWEIGHT_BMI = 18.5
OVERWEIGHT_BMI = 25
MICRONUTRIENT_SIGNIFICANT_PCT = 10
MICRONUTRIENT_RICH_COUNT = 3

FRIED_METHODS = ("fried", "deep-fried")
HIGH_ACTIVITY = ("High", "Very High")


def evaluate(profile: UserHealthProfile, item: FoodItem) -> RuleResult:
    """Neutral when the item carries no nutrition block."""
    nutrition = item.modern_nutrition
    if nutrition is None:
        return RuleResult.neutral()

    result = RuleResult()
    _score_bmi_calories(result, profile, nutrition)
    _score_diabetes(result, profile, nutrition)
    _score_acid_reflux(result, profile, nutrition, item)
    _score_protein(result, profile, nutrition)
    _score_micronutrients(result, nutrition)
    _score_goals(result, profile, nutrition)
    return result


def _score_bmi_calories(result: RuleResult, profile: UserHealthProfile, n: NutritionFacts) -> None:
    if profile.bmi is None or not n.calories:
        return

    if profile.bmi < UNDERWEIGHT_BMI:
        if n.calories > 150:
            result.add(15, reason="Calorie-dense food suitable for weight gain")
        else:
            result.add(-5)
    elif profile.bmi > OVERWEIGHT_BMI:
        if n.calories < 100:
            result.add(15, reason="Low-calorie food suitable for weight management")
        elif n.calories > 200:
            result.add(-10, warning="High-calorie food may hinder weight loss")
    else:
        result.add(5, reason="Balanced calorie content")


def _score_diabetes(result: RuleResult, profile: UserHealthProfile, n: NutritionFacts) -> None:
    if not profile.has_condition("Diabetes") or not n.carbs:
        return

    net_carbs = n.net_carbs
    if net_carbs < 10:
        result.add(20, reason="Low net carbs suitable for diabetes management")
    elif net_carbs < 20:
        result.add(10, reason="Moderate net carbs with fiber content")
    elif net_carbs > 30:
        result.add(-25, warning=f"High net carbohydrate ({net_carbs:g} g) may spike blood sugar")

    if n.fiber > 3:
        result.add(10, reason="High fiber helps regulate blood sugar")


def _score_acid_reflux(
    result: RuleResult,
    profile: UserHealthProfile,
    n: NutritionFacts,
    item: FoodItem,
) -> None:
    if not profile.has_condition("Acid Reflux"):
        return

    if n.fat > 15:
        result.add(-20, warning="High fat content may trigger acid reflux")
    elif n.fat < 5:
        result.add(15, reason="Low fat content suitable for acid reflux")

    if (item.cooking_method or "").lower() in FRIED_METHODS:
        result.add(-25, warning="Fried foods aggravate acid reflux")

    if item.category == "Spice":
        result.add(-15, warning="Spicy foods may worsen acid reflux")


def _score_protein(result: RuleResult, profile: UserHealthProfile, n: NutritionFacts) -> None:
    if not n.protein:
        return

    if n.protein > 10:
        result.add(10, reason="Good protein content for muscle maintenance")
    if profile.activity_level in HIGH_ACTIVITY and n.protein > 15:
        result.add(15, reason="High protein suitable for active lifestyle")
    if profile.age is not None and profile.age > 60 and n.protein > 8:
        result.add(10, reason="Adequate protein for seniors")


def _score_micronutrients(result: RuleResult, n: NutritionFacts) -> None:
    significant = [
        name for name, pct in n.micronutrients.items()
        if pct > MICRONUTRIENT_SIGNIFICANT_PCT
    ]
    if len(significant) >= MICRONUTRIENT_RICH_COUNT:
        result.add(15, reason=f"Rich in {', '.join(significant)}")
    elif significant:
        result.add(5, reason="Contains beneficial micronutrients")


def _score_goals(result: RuleResult, profile: UserHealthProfile, n: NutritionFacts) -> None:
    goals = {g.casefold() for g in profile.clinical_goals}
    if not goals or not n.calories:
        return

    protein_share = (n.protein * 4) / n.calories
    carb_share = (n.carbs * 4) / n.calories

    if "weight_loss" in goals:
        if protein_share >= 0.20:
            result.add(4, reason="Protein-rich calories support weight loss")
        if n.fiber >= 3:
            result.add(3, reason="Fiber improves satiety")
        if n.calories <= 150:
            result.add(3, reason="Low calorie density supports weight loss")
        elif n.calories >= 250:
            result.add(-4, warning="Calorie-dense food works against weight loss")

    if "muscle_gain" in goals:
        if n.protein >= 20:
            result.add(4, reason="High protein supports muscle gain")
        elif n.protein < 10:
            result.add(-3, warning="Low protein for a muscle gain goal")
        if 0.40 <= carb_share <= 0.55:
            result.add(2, reason="Carbohydrate share fuels training")

    if "metabolic_health" in goals or "manage_condition" in goals:
        if n.fiber >= 3:
            result.add(3, reason="Fiber supports metabolic health")
        if n.net_carbs > 30:
            result.add(-4, warning="High carbohydrate load for metabolic health")

    if "general_health" in goals and n.fiber >= 2:
        result.add(1, reason="Fiber supports general health")

    if "athletic_performance" in goals:
        if carb_share >= 0.45:
            result.add(3, reason="Carbohydrate-rich for athletic performance")
        if n.protein >= 15:
            result.add(2, reason="Protein supports recovery")
