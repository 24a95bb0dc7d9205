from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List

from menu_planner.database import get_db
from menu_planner.dependencies import get_current_user
from menu_planner.models.user import User
from menu_planner.schemas.menu_item import MenuItemCreate, MenuItemUpdate, MenuItemResponse
from menu_planner.schemas.side import SideResponse
from menu_planner.schemas.recipe import RecipeResponse
from menu_planner.schemas.result import Result
from menu_planner.services.menu_item_service import MenuItemService
from menu_planner.services.side_service import SideService
from menu_planner.services.recipe_service import RecipeService

router = APIRouter()


@router.post("", response_model=Result[MenuItemResponse], status_code=status.HTTP_201_CREATED)
async def create_menu_item(
    item_data: MenuItemCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Add an entree to the household catalog."""
    service = MenuItemService(db)
    item = service.create_menu_item(current_user.id, item_data)
    return Result.successful(data=item)


@router.get("", response_model=Result[List[MenuItemResponse]])
async def get_menu_items(
    household_id: int = Query(..., description="Household ID"),
    include_hidden: bool = Query(False, description="Include hidden items"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a household's menu items."""
    service = MenuItemService(db)
    items = service.get_household_menu_items(household_id, current_user.id, include_hidden)
    return Result.successful(data=items)


@router.get("/{menu_item_id}", response_model=Result[MenuItemResponse])
async def get_menu_item(
    menu_item_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = MenuItemService(db)
    item = service.get_menu_item(menu_item_id, current_user.id)
    return Result.successful(data=item)


@router.put("/{menu_item_id}", response_model=Result[MenuItemResponse])
async def update_menu_item(
    menu_item_id: int,
    item_data: MenuItemUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Rename an item or change its genre."""
    service = MenuItemService(db)
    item = service.update_menu_item(menu_item_id, current_user.id, item_data)
    return Result.successful(data=item)


@router.post("/{menu_item_id}/hide", response_model=Result[MenuItemResponse])
async def hide_menu_item(
    menu_item_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = MenuItemService(db)
    item = service.hide_menu_item(menu_item_id, current_user.id)
    return Result.successful(data=item)


@router.post("/{menu_item_id}/restore", response_model=Result[MenuItemResponse])
async def restore_menu_item(
    menu_item_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = MenuItemService(db)
    item = service.restore_menu_item(menu_item_id, current_user.id)
    return Result.successful(data=item)


@router.delete("/{menu_item_id}", response_model=Result[dict])
async def delete_menu_item(
    menu_item_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Permanently delete an item with its scheduled meals, votes and recipe."""
    service = MenuItemService(db)
    result = service.delete_menu_item(menu_item_id, current_user.id)
    return Result.successful(data=result)


@router.get("/{menu_item_id}/recipe", response_model=Result[RecipeResponse])
async def get_menu_item_recipe(
    menu_item_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = RecipeService(db)
    recipe = service.get_recipe_for_menu_item(menu_item_id, current_user.id)
    return Result.successful(data=recipe)


@router.get("/{menu_item_id}/sides", response_model=Result[List[SideResponse]])
async def get_menu_item_sides(
    menu_item_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Sides offered with this entree."""
    service = SideService(db)
    sides = service.get_entree_sides(menu_item_id, current_user.id)
    return Result.successful(data=sides)


@router.post("/{menu_item_id}/sides/{side_id}", response_model=Result[List[SideResponse]])
async def assign_side(
    menu_item_id: int,
    side_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = SideService(db)
    sides = service.assign_side(menu_item_id, side_id, current_user.id)
    return Result.successful(data=sides)


@router.delete("/{menu_item_id}/sides/{side_id}", response_model=Result[List[SideResponse]])
async def unassign_side(
    menu_item_id: int,
    side_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = SideService(db)
    sides = service.unassign_side(menu_item_id, side_id, current_user.id)
    return Result.successful(data=sides)
