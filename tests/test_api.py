"""
HTTP API Tests

Exercises every router against an in-memory store swapped into the
Runtime.

Tests:
- test_health: root and module health endpoints
- test_config_read_and_patch: defaults, partial update, validation -> 422
- test_patch_during_store_outage: 503, stored config untouched
- test_admin_key_required: PATCH and override recording guarded by X-Admin-API-Key
- test_stateless_score / test_stored_score: result plus score breakdown
- test_recipe_snapshot_rederived: stateless routes recompute recipe nutrition
- test_rank_and_user_recommendations
- test_missing_profile_404
- test_override_store_outage: 503
- test_nutrition_aggregate_and_refresh

Version: api_v1
"""

import asyncio

import pytest
from fastapi.testclient import TestClient

from main import app
from nutriveda.config.models import SystemConfig
from nutriveda.rules.models import (
    AyurvedaDoshaEffect,
    AyurvedaProperties,
    DoshaScores,
    FoodItem,
    NutritionFacts,
    NutritionSnapshot,
    Recipe,
    RecipeIngredient,
    UserHealthProfile,
)
from nutriveda.runtime import Runtime
from nutriveda.store.memory import InMemoryStore


class FlakyReadStore(InMemoryStore):
    """Fails the next config read, then behaves normally."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.failures = 1

    async def load_config(self, config_key):
        if self.failures:
            self.failures -= 1
            raise ConnectionError("database unreachable")
        return await super().load_config(config_key)


class ReadOnlyOverrideStore(InMemoryStore):
    async def save_override(self, user_id, override):
        raise ConnectionError("overrides offline")


# ============================================================================
# TEST FIXTURES
# ============================================================================

@pytest.fixture
def profile() -> UserHealthProfile:
    return UserHealthProfile(
        user_id="u1",
        vikriti=DoshaScores(vata=20, pitta=70, kapha=10),
        allergies=["Dairy"],
    )


@pytest.fixture
def foods():
    return [
        FoodItem(
            id="cucumber",
            name="Cucumber",
            category="Vegetable",
            modern_nutrition=NutritionFacts(calories=15, carbs=3.6, fiber=0.5),
            ayurveda=AyurvedaProperties(
                rasa=["Sweet"],
                virya="Cold",
                dosha_effect=AyurvedaDoshaEffect(pitta="Decrease"),
            ),
        ),
        FoodItem(id="paneer", name="Paneer", category="Dairy", meal_types=["lunch"]),
        FoodItem(
            id="rice",
            name="Basmati Rice",
            category="Grain",
            meal_types=["breakfast", "lunch", "dinner"],
            modern_nutrition=NutritionFacts(calories=130, protein=2.7, carbs=28, fat=0.3, fiber=0.4),
        ),
        FoodItem(id="water", name="Water", category="Beverage", modern_nutrition=NutritionFacts()),
    ]


@pytest.fixture
def recipe():
    return Recipe(
        id="rice-bowl",
        name="Rice Bowl",
        meal_types=["lunch"],
        ingredients=[
            RecipeIngredient(food_id="rice", quantity=100),
            RecipeIngredient(food_id="water", quantity=200, unit="ml"),
        ],
    )


@pytest.fixture
def client(profile, foods, recipe, monkeypatch):
    monkeypatch.delenv("ADMIN_API_KEY", raising=False)
    Runtime.get_instance().configure(InMemoryStore(profiles=[profile], foods=foods, recipes=[recipe]))
    return TestClient(app)


# ============================================================================
# HEALTH
# ============================================================================

class TestHealth:
    @pytest.mark.parametrize("path", [
        "/health",
        "/api/v1/config/health",
        "/api/v1/nutrition/health",
        "/api/v1/scoring/health",
        "/api/v1/recommendations/health",
    ])
    def test_health(self, client, path):
        response = client.get(path)
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


# ============================================================================
# CONFIG
# ============================================================================

class TestConfigApi:
    def test_config_read_and_patch(self, client):
        response = client.get("/api/v1/config")
        assert response.status_code == 200
        assert response.json()["config"]["revision"] == 1

        response = client.patch("/api/v1/config", json={"patch": {"rule_weights": {"tcm": 0.5}}})
        assert response.status_code == 200
        config = response.json()["config"]
        assert config["rule_weights"]["tcm"] == 0.5
        assert config["revision"] == 2

    def test_invalid_patch(self, client):
        response = client.patch("/api/v1/config", json={"patch": {"scoring_rules": {"base_score": 150}}})
        assert response.status_code == 422
        assert response.json()["detail"]["error_code"] == "CONFIG_INVALID"

    def test_admin_key_required(self, client, monkeypatch):
        monkeypatch.setenv("ADMIN_API_KEY", "secret")
        assert client.patch("/api/v1/config", json={"patch": {}}).status_code == 401

        response = client.patch(
            "/api/v1/config",
            json={"patch": {}},
            headers={"X-Admin-API-Key": "secret"},
        )
        assert response.status_code == 200

    def test_patch_during_store_outage(self, profile, monkeypatch):
        monkeypatch.delenv("ADMIN_API_KEY", raising=False)
        store = FlakyReadStore(profiles=[profile])
        stored = SystemConfig.model_validate({"rule_weights": {"ayurveda": 0.3}, "revision": 9})
        asyncio.run(store.save_config(stored))
        Runtime.get_instance().configure(store)

        response = TestClient(app).patch("/api/v1/config", json={"patch": {"rule_weights": {"tcm": 0.5}}})
        assert response.status_code == 503
        assert asyncio.run(store.load_config("default")) == stored


# ============================================================================
# SCORING
# ============================================================================

class TestScoringApi:
    def test_stateless_score(self, client, profile, foods):
        response = client.post("/api/v1/scoring/score", json={
            "profile": profile.model_dump(mode="json"),
            "food": foods[0].model_dump(mode="json"),
        })
        assert response.status_code == 200
        result = response.json()["result"]
        assert result["final_score"] == 65
        assert result["active_framework"] == "ayurveda"

        breakdown = response.json()["breakdown"]
        assert breakdown["base_score"] == 50
        assert breakdown["clamped"] is False
        assert breakdown["calculation"] == "50 + 15 (ayurveda) + 0 (safety) = 65"
        assert breakdown["data_completeness"] == {
            "has_ayurveda_data": True,
            "has_unani_data": False,
            "has_tcm_data": False,
            "has_modern_data": True,
            "completeness_score": 50,
        }

    def test_blocked_score(self, client, profile, foods):
        response = client.post("/api/v1/scoring/score", json={
            "profile": profile.model_dump(mode="json"),
            "food": foods[1].model_dump(mode="json"),
        })
        result = response.json()["result"]
        assert result["blocked"] is True
        assert result["final_score"] == 0

    def test_score_requires_one_item(self, client, profile):
        response = client.post("/api/v1/scoring/score", json={"profile": profile.model_dump(mode="json")})
        assert response.status_code == 400

    def test_stored_score(self, client):
        response = client.get("/api/v1/scoring/users/u1/items/cucumber")
        assert response.status_code == 200
        assert response.json()["result"]["final_score"] == 65
        assert response.json()["breakdown"]["raw_total"] == 65

    def test_recipe_snapshot_rederived(self, client, profile, recipe):
        diabetic = profile.model_copy(update={"medical_conditions": ["Diabetes"]})
        # 200 g rice is 56 g carbs; the stale snapshot claims 5
        stale = recipe.model_copy(update={
            "ingredients": [RecipeIngredient(food_id="rice", quantity=200)],
            "nutrition_snapshot": NutritionSnapshot(calories=20, carbs=5, serving_size=200),
        })
        response = client.post("/api/v1/scoring/score", json={
            "profile": diabetic.model_dump(mode="json"),
            "recipe": stale.model_dump(mode="json"),
        })
        assert response.status_code == 200
        assert response.json()["result"]["blocked"] is True

    def test_inline_foods_win_over_catalog(self, client, profile, recipe):
        diabetic = profile.model_copy(update={"medical_conditions": ["Diabetes"]})
        low_carb_rice = FoodItem(
            id="rice",
            name="Cauliflower Rice",
            category="Vegetable",
            modern_nutrition=NutritionFacts(calories=25, carbs=5, fiber=2),
        )
        response = client.post("/api/v1/scoring/score", json={
            "profile": diabetic.model_dump(mode="json"),
            "recipe": recipe.model_dump(mode="json"),
            "foods": [low_carb_rice.model_dump(mode="json")],
        })
        assert response.json()["result"]["blocked"] is False
        assert response.json()["breakdown"]["data_completeness"]["has_modern_data"] is True

    def test_unknown_item(self, client):
        response = client.get("/api/v1/scoring/users/u1/items/durian")
        assert response.status_code == 404
        assert response.json()["detail"]["error_code"] == "ITEM_NOT_FOUND"


# ============================================================================
# RECOMMENDATIONS
# ============================================================================

class TestRecommendationApi:
    def test_rank(self, client, profile, foods):
        response = client.post("/api/v1/recommendations/rank", json={
            "profile": profile.model_dump(mode="json"),
            "foods": [f.model_dump(mode="json") for f in foods],
            "options": {"min_score": 0},
        })
        assert response.status_code == 200
        ids = [r["item_id"] for r in response.json()["result"]["recommendations"]]
        assert ids == ["cucumber", "rice", "water"]

    def test_rank_rederives_recipe_snapshot(self, client, profile, recipe):
        diabetic = profile.model_copy(update={"medical_conditions": ["Diabetes"]})
        stale = recipe.model_copy(update={
            "ingredients": [RecipeIngredient(food_id="rice", quantity=200)],
            "nutrition_snapshot": NutritionSnapshot(calories=20, carbs=5, serving_size=200),
        })
        response = client.post("/api/v1/recommendations/rank", json={
            "profile": diabetic.model_dump(mode="json"),
            "recipes": [stale.model_dump(mode="json")],
            "options": {"min_score": 0},
        })
        result = response.json()["result"]
        assert result["recommendations"] == []
        assert result["audit"]["blocked_count"] == 1

    def test_user_foods(self, client):
        response = client.get("/api/v1/recommendations/users/u1/foods", params={"limit": 1})
        assert response.status_code == 200
        result = response.json()["result"]
        assert [r["item_id"] for r in result["recommendations"]] == ["cucumber"]
        assert result["audit"]["blocked_count"] == 1

    def test_user_recipes(self, client):
        response = client.get("/api/v1/recommendations/users/u1/recipes")
        assert response.status_code == 200
        recommendations = response.json()["result"]["recommendations"]
        assert [r["item_type"] for r in recommendations] == ["recipe"]

    def test_meal(self, client):
        response = client.get("/api/v1/recommendations/users/u1/meal/lunch", params={"type": "food"})
        assert response.status_code == 200
        ids = [r["item_id"] for r in response.json()["result"]["recommendations"]]
        assert "paneer" not in ids
        assert ids[0] == "cucumber"

    def test_daily_plan(self, client):
        response = client.get("/api/v1/recommendations/users/u1/daily-plan", params={"type": "food"})
        assert response.status_code == 200
        plan = response.json()["plan"]
        assert plan["plan_hash"].startswith("sha256:")
        assert plan["breakfast"][0]["item_id"] == "cucumber"

    def test_record_override(self, client):
        response = client.post("/api/v1/recommendations/users/u1/overrides", json={
            "item_id": "water",
            "new_score": 99,
            "reason": "Hydration first",
        })
        assert response.status_code == 200

        result = client.get("/api/v1/recommendations/users/u1/foods").json()["result"]
        top = result["recommendations"][0]
        assert top["item_id"] == "water"
        assert top["overridden"] is True

    def test_override_store_outage(self, client, profile):
        Runtime.get_instance().configure(ReadOnlyOverrideStore(profiles=[profile]))
        response = client.post("/api/v1/recommendations/users/u1/overrides", json={
            "item_id": "water",
            "new_score": 99,
            "reason": "Hydration first",
        })
        assert response.status_code == 503
        assert response.json()["detail"]["error_code"] == "STORE_UNAVAILABLE"

    def test_missing_profile_404(self, client):
        response = client.get("/api/v1/recommendations/users/ghost/foods")
        assert response.status_code == 404
        assert response.json()["detail"]["error_code"] == "PROFILE_NOT_FOUND"


# ============================================================================
# NUTRITION
# ============================================================================

class TestNutritionApi:
    def test_aggregate_inline(self, client, foods):
        response = client.post("/api/v1/nutrition/aggregate", json={
            "ingredients": [
                {"food_id": "rice", "quantity": 100, "unit": "g"},
                {"food_id": "water", "quantity": 200, "unit": "ml"},
            ],
            "foods": [f.model_dump(mode="json") for f in foods],
        })
        assert response.status_code == 200
        nutrition = response.json()["nutrition"]
        assert nutrition["calories"] == 130
        assert nutrition["serving_size"] == 300

    def test_aggregate_from_catalog(self, client):
        response = client.post("/api/v1/nutrition/aggregate", json={
            "ingredients": [{"food_id": "rice", "quantity": 1, "unit": "cup"}],
        })
        assert response.json()["nutrition"]["calories"] == 312

    def test_refresh_recipe(self, client):
        response = client.post("/api/v1/nutrition/recipes/rice-bowl/refresh")
        assert response.status_code == 200
        snapshot = response.json()["recipe"]["nutrition_snapshot"]
        assert snapshot["calories"] == 130

    def test_refresh_unknown_recipe(self, client):
        assert client.post("/api/v1/nutrition/recipes/nope/refresh").status_code == 404
