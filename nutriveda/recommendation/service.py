"""
Recommendation Service

Async boundary around the pure ranking layer: loads the profile, candidate
set, overrides and configuration, then hands plain values to recommend().

Store failures on the profile or candidate set surface as
InputUnavailableError ("cannot score: input unavailable"). Nothing inside
the scoring path raises.

Version: recommendation_layer_v1
"""

import asyncio
import logging
from typing import List, Literal, Mapping, Optional, Tuple

from nutriveda.config.service import ConfigService
from nutriveda.errors import InputUnavailableError, NotFoundError, NutrivedaError, StoreUnavailableError
from nutriveda.rules.models import UserHealthProfile
from nutriveda.scoring.engine import explain_score, score_item
from nutriveda.scoring.models import ScoreBreakdown, ScoreResult
from nutriveda.store.base import Store

from .models import DailyPlan, MealTime, PractitionerOverride, RecommendationResult, RecommendOptions
from .rank import Candidate, build_daily_plan, options_for_meal, recommend

logger = logging.getLogger(__name__)


CandidateType = Literal["food", "recipe", "both"]


class RecommendationService:
    def __init__(self, store: Store, config_service: ConfigService):
        self._store = store
        self._config = config_service

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load_profile(self, user_id: str) -> UserHealthProfile:
        try:
            profile = await self._store.get_profile(user_id)
        except Exception as e:
            logger.error(f"Profile read failed for user {user_id}: {e}")
            raise InputUnavailableError(f"cannot score: profile for user '{user_id}' unavailable") from e
        if profile is None:
            raise NotFoundError(NutrivedaError.PROFILE_NOT_FOUND, f"No health profile for user '{user_id}'")
        return profile

    async def load_candidates(
        self,
        item_type: CandidateType,
        category: Optional[str] = None,
    ) -> List[Candidate]:
        try:
            candidates: List[Candidate] = []
            if item_type in ("food", "both"):
                candidates.extend(await self._store.list_foods(category))
            if item_type in ("recipe", "both"):
                candidates.extend(await self._store.list_recipes(category))
        except Exception as e:
            logger.error(f"Candidate read failed ({item_type}): {e}")
            raise InputUnavailableError("cannot score: candidate set unavailable") from e
        return candidates

    async def load_overrides(self, user_id: str) -> List[PractitionerOverride]:
        # Overrides only refine scores; ranking proceeds without them
        try:
            return await self._store.list_overrides(user_id)
        except Exception as e:
            logger.warning(f"Override read failed for user {user_id}, ranking without overrides: {e}")
            return []

    async def _load_inputs(self, user_id: str, item_type: CandidateType, category: Optional[str] = None):
        return await asyncio.gather(
            self.load_profile(user_id),
            self.load_candidates(item_type, category),
            self.load_overrides(user_id),
            self._config.get_config(),
        )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def recommend_for_user(
        self,
        user_id: str,
        item_type: CandidateType,
        options: Optional[RecommendOptions] = None,
        weights: Optional[Mapping[str, float]] = None,
    ) -> RecommendationResult:
        options = options or RecommendOptions()
        profile, candidates, overrides, config = await self._load_inputs(user_id, item_type, options.category)
        return recommend(profile, candidates, config, options, weights, overrides)

    async def recommend_meal(
        self,
        user_id: str,
        meal_time: MealTime,
        item_type: CandidateType = "both",
        limit: Optional[int] = None,
        min_score: Optional[float] = None,
    ) -> RecommendationResult:
        options = options_for_meal(meal_time, limit=limit, min_score=min_score)
        return await self.recommend_for_user(user_id, item_type, options)

    async def daily_plan(self, user_id: str, item_type: CandidateType = "recipe") -> DailyPlan:
        profile, candidates, overrides, config = await self._load_inputs(user_id, item_type)
        return build_daily_plan(profile, candidates, config, overrides=overrides)

    async def load_item(self, item_id: str, item_type: Literal["food", "recipe"] = "food") -> Candidate:
        try:
            if item_type == "recipe":
                item = await self._store.get_recipe(item_id)
            else:
                item = await self._store.get_food(item_id)
        except Exception as e:
            logger.error(f"Item read failed for {item_type} '{item_id}': {e}")
            raise InputUnavailableError(f"cannot score: {item_type} '{item_id}' unavailable") from e
        if item is None:
            raise NotFoundError(NutrivedaError.ITEM_NOT_FOUND, f"No {item_type} with id '{item_id}'")
        return item

    async def score_for_user(
        self,
        user_id: str,
        item_id: str,
        item_type: Literal["food", "recipe"] = "food",
        weights: Optional[Mapping[str, float]] = None,
    ) -> ScoreResult:
        result, _ = await self.explain_for_user(user_id, item_id, item_type, weights)
        return result

    async def explain_for_user(
        self,
        user_id: str,
        item_id: str,
        item_type: Literal["food", "recipe"] = "food",
        weights: Optional[Mapping[str, float]] = None,
    ) -> Tuple[ScoreResult, ScoreBreakdown]:
        """Score a stored item for a stored profile, with the breakdown behind the score."""
        profile, item, config = await asyncio.gather(
            self.load_profile(user_id),
            self.load_item(item_id, item_type),
            self._config.get_config(),
        )
        result = score_item(profile, item, config, weights)
        return result, explain_score(item, result, config, weights)

    async def record_override(self, user_id: str, override: PractitionerOverride) -> None:
        await self.load_profile(user_id)
        try:
            await self._store.save_override(user_id, override)
        except Exception as e:
            logger.error(f"Override write failed for user {user_id}, {override.item_type} {override.item_id}: {e}")
            raise StoreUnavailableError("override store unavailable") from e
        logger.info(
            f"Practitioner override stored for user {user_id}, {override.item_type} {override.item_id}: "
            f"score {override.new_score} ({override.reason})"
        )
