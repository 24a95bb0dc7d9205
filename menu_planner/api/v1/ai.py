from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from datetime import date

from menu_planner.database import get_db
from menu_planner.dependencies import get_current_user
from menu_planner.models.user import User
from menu_planner.schemas.result import Result
from menu_planner.schemas.ai import (
    GenerateMenuRequest,
    GenerateMenuResponse,
    GenerationContextResponse,
)
from menu_planner.services.menu_generator import MenuGenerator, GeminiMenuGenerator
from menu_planner.services.menu_generation_service import MenuGenerationService
from menu_planner.core.exception import CustomException, InternalServerException

router = APIRouter()


def get_menu_generator() -> MenuGenerator:
    """Generator used for menu requests; overridden in tests."""
    return GeminiMenuGenerator()


@router.post("/generate-menu", response_model=Result[GenerateMenuResponse], status_code=status.HTTP_200_OK)
async def generate_menu(
    request: GenerateMenuRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    generator: MenuGenerator = Depends(get_menu_generator),
):
    """
    Fill the selected calendar slots with AI-chosen menu items.

    - **selections**: (date, meal_type) slots to fill
    - **dietary_instructions** / **genre_weights**: default to saved household preferences
    - **overwrite**: must be true when any selected slot already has a meal;
      otherwise the request fails with 409 listing the occupied slots

    Nothing is saved if generation fails or proposes nothing usable.
    """
    try:
        service = MenuGenerationService(db, generator=generator)
        result = service.generate_menu(
            household_id=request.household_id,
            user_id=current_user.id,
            selections=request.selections,
            dietary_instructions=request.dietary_instructions,
            genre_weights=request.genre_weights,
            overwrite=request.overwrite,
        )
        return Result.successful(data=result)
    except CustomException:
        raise
    except Exception as e:
        raise InternalServerException(f"Failed to generate menu: {str(e)}")


@router.get("/menu-context", response_model=Result[GenerationContextResponse])
async def get_menu_context(
    household_id: int = Query(..., description="Household ID"),
    earliest_date: date = Query(..., description="First date that would be generated"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    generator: MenuGenerator = Depends(get_menu_generator),
):
    """Preview the catalog and the recently served items that would be avoided."""
    service = MenuGenerationService(db, generator=generator)
    context = service.get_generation_context(household_id, current_user.id, earliest_date)
    return Result.successful(data=context)
