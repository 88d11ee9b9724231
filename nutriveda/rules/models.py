"""
Rule Engine Models

Pydantic models for the user health profile and the food/recipe catalog
consumed by every evaluator.

Profiles and items are frozen: an evaluator can read them but never mutate
them during a scoring pass. Every traditional-system block is optional;
absence means that system has no opinion on the item.

Version: rule_engine_v1
"""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field


DoshaEffect = Literal["Increase", "Decrease", "Neutral"]
ThermalNature = Literal["Hot", "Warm", "Neutral", "Cool", "Cold"]
ColdHeat = Literal["Cold", "Heat", "Neutral"]
DigestiveStrength = Literal["weak", "variable", "slow", "balanced", "strong", "sharp"]
ActivityLevel = Literal["Sedentary", "Light", "Moderate", "High", "Very High"]


# ============================================================================
# USER HEALTH PROFILE
# ============================================================================

class DoshaScores(BaseModel):
    """Vata/Pitta/Kapha distribution in percent."""
    vata: float = Field(default=0, ge=0, le=100)
    pitta: float = Field(default=0, ge=0, le=100)
    kapha: float = Field(default=0, ge=0, le=100)

    class Config:
        extra = "forbid"
        frozen = True


class HumorScores(BaseModel):
    """Dam/Safra/Balgham/Sauda distribution in percent."""
    dam: float = Field(default=0, ge=0, le=100)
    safra: float = Field(default=0, ge=0, le=100)
    balgham: float = Field(default=0, ge=0, le=100)
    sauda: float = Field(default=0, ge=0, le=100)

    class Config:
        extra = "forbid"
        frozen = True


class UserHealthProfile(BaseModel):
    """
    Assessment-derived health profile, built once per request.

    Each traditional system has a baseline constitution and a separate
    current-imbalance overlay. Evaluators target the overlay and fall back
    to the baseline when no overlay has been assessed.
    """
    user_id: Optional[str] = None
    # Dosha system
    prakriti: Optional[DoshaScores] = None
    vikriti: Optional[DoshaScores] = None
    # Humor system
    humor_constitution: Optional[HumorScores] = None
    humor_imbalance: Optional[HumorScores] = None
    # Pattern system (pattern key -> score)
    tcm_constitution: Dict[str, float] = Field(default_factory=dict)
    tcm_patterns: Dict[str, float] = Field(default_factory=dict)
    cold_heat: Optional[ColdHeat] = None
    digestive_strength: Optional[DigestiveStrength] = None
    # Shared
    medical_conditions: List[str] = Field(default_factory=list)
    allergies: List[str] = Field(default_factory=list)
    dietary_preferences: List[str] = Field(default_factory=list)
    # Modern nutrition
    clinical_goals: List[str] = Field(default_factory=list)
    bmi: Optional[float] = Field(default=None, gt=0)
    age: Optional[int] = Field(default=None, ge=0)
    activity_level: Optional[ActivityLevel] = None

    class Config:
        extra = "forbid"
        frozen = True

    def has_condition(self, condition: str) -> bool:
        target = condition.casefold()
        return any(c.casefold() == target for c in self.medical_conditions)

    def has_preference(self, preference: str) -> bool:
        target = preference.casefold()
        return any(p.casefold() == target for p in self.dietary_preferences)

    def current_doshas(self) -> Dict[str, float]:
        scores = self.vikriti or self.prakriti
        return scores.model_dump() if scores else {}

    def current_humors(self) -> Dict[str, float]:
        scores = self.humor_imbalance or self.humor_constitution
        return scores.model_dump() if scores else {}

    def current_patterns(self) -> Dict[str, float]:
        return dict(self.tcm_patterns or self.tcm_constitution)


# ============================================================================
# NUTRITION
# ============================================================================

class NutritionFacts(BaseModel):
    """
    Macro and micronutrient block.

    Foods store values per 100 g (or 100 ml). Micronutrients are percent of
    daily reference intake, keyed by lowercase nutrient name.
    """
    calories: float = Field(default=0, ge=0)
    protein: float = Field(default=0, ge=0)
    carbs: float = Field(default=0, ge=0)
    fat: float = Field(default=0, ge=0)
    fiber: float = Field(default=0, ge=0)
    micronutrients: Dict[str, float] = Field(default_factory=dict)

    class Config:
        extra = "forbid"
        frozen = True

    @property
    def net_carbs(self) -> float:
        """Carbohydrate grams minus fiber grams."""
        return self.carbs - self.fiber

    def micronutrient(self, name: str) -> float:
        target = name.casefold()
        for key, value in self.micronutrients.items():
            if key.casefold() == target:
                return value
        return 0.0


class NutritionSnapshot(NutritionFacts):
    """Derived per-serving nutrition of a recipe. Always re-derivable."""
    serving_size: float = Field(default=0, ge=0)
    serving_unit: str = "g"
    per_serving: bool = True
    warnings: List[str] = Field(
        default_factory=list,
        description="Caveats raised while aggregating (unknown units, missing foods)"
    )

    def facts(self) -> NutritionFacts:
        """The nutrient values alone, without serving metadata."""
        return NutritionFacts(
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
            fiber=self.fiber,
            micronutrients=dict(self.micronutrients),
        )


# ============================================================================
# TRADITIONAL SYSTEM PROPERTY BLOCKS
# ============================================================================

class AyurvedaDoshaEffect(BaseModel):
    vata: Optional[DoshaEffect] = None
    pitta: Optional[DoshaEffect] = None
    kapha: Optional[DoshaEffect] = None

    class Config:
        extra = "forbid"
        frozen = True


class AyurvedaProperties(BaseModel):
    """Rasa (taste), guna (quality), virya (potency) and dosha effects."""
    rasa: List[str] = Field(default_factory=list)
    guna: List[str] = Field(default_factory=list)
    virya: Optional[Literal["Hot", "Cold"]] = None
    dosha_effect: Optional[AyurvedaDoshaEffect] = None

    class Config:
        extra = "forbid"
        frozen = True


class UnaniTemperament(BaseModel):
    """Degrees of hot/cold/moist/dry on a 0-4 scale."""
    hot_level: int = Field(default=0, ge=0, le=4)
    cold_level: int = Field(default=0, ge=0, le=4)
    moist_level: int = Field(default=0, ge=0, le=4)
    dry_level: int = Field(default=0, ge=0, le=4)

    class Config:
        extra = "forbid"
        frozen = True


class UnaniHumorEffects(BaseModel):
    """Effect on each humor: -1 reduces, 0 neutral, +1 increases."""
    dam: Optional[Literal[-1, 0, 1]] = None
    safra: Optional[Literal[-1, 0, 1]] = None
    balgham: Optional[Literal[-1, 0, 1]] = None
    sauda: Optional[Literal[-1, 0, 1]] = None

    class Config:
        extra = "forbid"
        frozen = True


class UnaniProperties(BaseModel):
    temperament: Optional[UnaniTemperament] = None
    humor_effects: Optional[UnaniHumorEffects] = None
    digestibility_level: Optional[int] = Field(
        default=None, ge=1, le=5,
        description="1 = very easy to digest, 5 = very heavy"
    )
    flatulence_potential: Optional[Literal["low", "medium", "high"]] = None

    class Config:
        extra = "forbid"
        frozen = True


class TcmProperties(BaseModel):
    thermal_nature: Optional[ThermalNature] = None
    flavor: List[str] = Field(default_factory=list)
    meridian: List[str] = Field(default_factory=list)
    tonifies_qi: bool = False
    nourishes_yin: bool = False
    warms_yang: bool = False
    clears_heat: bool = False
    resolves_dampness: bool = False
    moves_qi: bool = False
    damp_forming: bool = False

    class Config:
        extra = "forbid"
        frozen = True


# ============================================================================
# CATALOG ITEMS
# ============================================================================

class FoodItem(BaseModel):
    """
    A scoreable catalog item.

    Recipes are flattened into this shape before scoring; the recipe's
    nutrition snapshot stands in for modern_nutrition.
    """
    id: str
    name: str
    category: str = ""
    tags: List[str] = Field(default_factory=list)
    cooking_method: Optional[str] = None
    meal_types: List[str] = Field(
        default_factory=list,
        description="Meal slots this item suits; empty means any"
    )
    modern_nutrition: Optional[NutritionFacts] = None
    ayurveda: Optional[AyurvedaProperties] = None
    unani: Optional[UnaniProperties] = None
    tcm: Optional[TcmProperties] = None

    class Config:
        extra = "ignore"  # Catalog documents carry display-only fields
        frozen = True


class RecipeIngredient(BaseModel):
    """One (food reference, quantity, unit) triple."""
    food_id: str
    quantity: float = Field(ge=0)
    unit: str = "g"

    class Config:
        extra = "forbid"
        frozen = True


class Recipe(BaseModel):
    """A recipe owns its ingredient list; nutrition_snapshot is a cache."""
    id: str
    name: str
    category: str = "Recipe"
    tags: List[str] = Field(default_factory=list)
    cooking_method: Optional[str] = None
    meal_types: List[str] = Field(default_factory=list)
    ingredients: List[RecipeIngredient] = Field(default_factory=list)
    nutrition_snapshot: Optional[NutritionSnapshot] = None
    ayurveda: Optional[AyurvedaProperties] = None
    unani: Optional[UnaniProperties] = None
    tcm: Optional[TcmProperties] = None
    prep_time: int = Field(default=0, ge=0, description="Minutes")
    cook_time: int = Field(default=0, ge=0, description="Minutes")
    servings: int = Field(default=1, ge=1)

    class Config:
        extra = "ignore"
        frozen = True
