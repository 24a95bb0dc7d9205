from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List

from menu_planner.database import get_db
from menu_planner.dependencies import get_current_user
from menu_planner.models.user import User
from menu_planner.schemas.recipe import RecipeCreate, RecipeUpdate, RecipeResponse
from menu_planner.schemas.result import Result
from menu_planner.services.recipe_service import RecipeService

router = APIRouter()


@router.post("", response_model=Result[RecipeResponse], status_code=status.HTTP_201_CREATED)
async def create_recipe(
    recipe_data: RecipeCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create the recipe for a menu item."""
    service = RecipeService(db)
    recipe = service.create_recipe(current_user.id, recipe_data)
    return Result.successful(data=recipe)


@router.get("", response_model=Result[List[RecipeResponse]])
async def get_household_recipes(
    household_id: int = Query(..., description="Household ID"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get all recipes for a household."""
    service = RecipeService(db)
    recipes = service.get_household_recipes(household_id, current_user.id)
    return Result.successful(data=recipes)


@router.get("/{recipe_id}", response_model=Result[RecipeResponse])
async def get_recipe(
    recipe_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get recipe details with ingredients."""
    service = RecipeService(db)
    recipe = service.get_recipe(recipe_id, current_user.id)
    return Result.successful(data=recipe)


@router.put("/{recipe_id}", response_model=Result[RecipeResponse])
async def update_recipe(
    recipe_id: int,
    recipe_data: RecipeUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update recipe details and/or replace its ingredients."""
    service = RecipeService(db)
    recipe = service.update_recipe(recipe_id, current_user.id, recipe_data)
    return Result.successful(data=recipe)


@router.delete("/{recipe_id}", response_model=Result[dict])
async def delete_recipe(
    recipe_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = RecipeService(db)
    result = service.delete_recipe(recipe_id, current_user.id)
    return Result.successful(data=result)
