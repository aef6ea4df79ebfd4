"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status

from recipe_nutrition.api.models import (
    AnalysisResponse,
    IngredientTracePayload,
    NutritionRequest,
    RecipeNutritionResponse,
)
from recipe_nutrition.app_logging import configure_logging
from recipe_nutrition.containers import AppContainer
from recipe_nutrition.domain.estimates import EstimateResult
from recipe_nutrition.services.calculator import validate_calories
from recipe_nutrition.services.diagnostics import analyze
from recipe_nutrition.services.dietary import dietary_tags


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Nutrition API starting: entries=%s llm=%s",
            len(app.state.container.database),
            app.state.container.settings.ollama_enabled,
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/nutrition", response_model=RecipeNutritionResponse)
    async def calculate_nutrition(
        payload: NutritionRequest, request: Request
    ) -> RecipeNutritionResponse:
        """Per-serving nutrition from the local nutrient database."""
        _require_ingredients(payload)
        state_container: AppContainer = request.app.state.container
        result = state_container.nutrition_service.calculate(
            payload.ingredients, payload.servings
        )
        return RecipeNutritionResponse.from_domain(
            result, dietary_tags(payload.ingredients)
        )

    @app.post("/nutrition/estimate", response_model=EstimateResult)
    async def estimate_nutrition(
        payload: NutritionRequest, request: Request
    ) -> EstimateResult:
        """Language-model estimate with the local engine as fallback."""
        _require_ingredients(payload)
        state_container: AppContainer = request.app.state.container
        return await state_container.nutrition_service.estimate(
            payload.ingredients, payload.servings
        )

    @app.post("/nutrition/analyze", response_model=AnalysisResponse)
    async def analyze_nutrition(
        payload: NutritionRequest, request: Request
    ) -> AnalysisResponse:
        """Step-by-step diagnostics for a recipe calculation."""
        _require_ingredients(payload)
        state_container: AppContainer = request.app.state.container
        report = analyze(
            state_container.calculator, payload.ingredients, payload.servings
        )
        return AnalysisResponse(
            ingredients=[
                IngredientTracePayload.from_domain(trace) for trace in report.traces
            ],
            issues=report.issues,
            result=RecipeNutritionResponse.from_domain(
                report.result, dietary_tags(payload.ingredients)
            ),
            calorie_check_valid=validate_calories(report.result.nutrition).is_valid,
        )

    @app.get("/nutrition/ingredients")
    async def list_ingredients(request: Request) -> dict[str, list[str]]:
        """Return the canonical keys of the nutrient database."""
        state_container: AppContainer = request.app.state.container
        return {"ingredients": state_container.calculator.available_ingredients()}

    return app


def _require_ingredients(payload: NutritionRequest) -> None:
    if not payload.ingredients:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Ingredients array is required",
        )
