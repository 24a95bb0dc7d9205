from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List

from menu_planner.database import get_db
from menu_planner.dependencies import get_current_user
from menu_planner.models.user import User
from menu_planner.schemas.shopping_list import (
    GenerateShoppingListRequest,
    ShoppingListCreate,
    ShoppingListResponse,
    ShoppingListSummary,
    ShoppingListExport,
    ShoppingItemCreate,
    ShoppingItemUpdate,
    ShoppingItemResponse,
    ReorderRequest,
    TemplateCreate,
    TemplateResponse,
    TemplateApplyRequest,
    ListFromTemplateRequest,
)
from menu_planner.schemas.result import Result
from menu_planner.services.shopping_list_service import ShoppingListService

router = APIRouter()


@router.post("/generate", response_model=Result[ShoppingListResponse], status_code=status.HTTP_201_CREATED)
async def generate_shopping_list(
    request: GenerateShoppingListRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Generate a shopping list from the seven days starting at week_start.

    Fails without saving anything when no meals are scheduled, when any
    scheduled item lacks a recipe, or when nothing would be on the list.
    """
    service = ShoppingListService(db)
    shopping_list = service.generate_from_week(request.household_id, request.week_start, current_user.id)
    return Result.successful(data=shopping_list)


@router.post("", response_model=Result[ShoppingListResponse], status_code=status.HTTP_201_CREATED)
async def create_shopping_list(
    list_data: ShoppingListCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create an empty shopping list."""
    service = ShoppingListService(db)
    shopping_list = service.create_empty_list(
        list_data.household_id, current_user.id, list_data.date_range_start, list_data.date_range_end
    )
    return Result.successful(data=shopping_list)


@router.get("", response_model=Result[List[ShoppingListSummary]])
async def get_household_shopping_lists(
    household_id: int = Query(..., description="Household ID"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = ShoppingListService(db)
    lists = service.get_household_lists(household_id, current_user.id, skip, limit)
    return Result.successful(data=lists)


# ===== Templates =====


@router.get("/templates", response_model=Result[List[TemplateResponse]])
async def get_templates(
    household_id: int = Query(..., description="Household ID"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List saved templates. A corrupt template is listed with no items."""
    service = ShoppingListService(db)
    templates = service.list_templates(household_id, current_user.id)
    return Result.successful(data=templates)


@router.post("/templates/{template_id}/load", response_model=Result[ShoppingListResponse])
async def load_template(
    template_id: int,
    request: TemplateApplyRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Append a template's items to an existing list."""
    service = ShoppingListService(db)
    shopping_list = service.load_template(template_id, request.shopping_list_id, current_user.id)
    return Result.successful(data=shopping_list)


@router.post(
    "/templates/{template_id}/lists",
    response_model=Result[ShoppingListResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_list_from_template(
    template_id: int,
    request: ListFromTemplateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a new list filled from a template."""
    service = ShoppingListService(db)
    shopping_list = service.create_list_from_template(
        template_id, current_user.id, request.date_range_start, request.date_range_end
    )
    return Result.successful(data=shopping_list)


@router.delete("/templates/{template_id}", response_model=Result[dict])
async def delete_template(
    template_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = ShoppingListService(db)
    result = service.delete_template(template_id, current_user.id)
    return Result.successful(data=result)


# ===== Items =====


@router.put("/items/{item_id}", response_model=Result[ShoppingItemResponse])
async def update_item(
    item_id: int,
    item_data: ShoppingItemUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = ShoppingListService(db)
    item = service.update_item(item_id, current_user.id, item_data)
    return Result.successful(data=item)


@router.post("/items/{item_id}/toggle", response_model=Result[ShoppingItemResponse])
async def toggle_item(
    item_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Check or uncheck an item."""
    service = ShoppingListService(db)
    item = service.toggle_item(item_id, current_user.id)
    return Result.successful(data=item)


@router.delete("/items/{item_id}", response_model=Result[dict])
async def remove_item(
    item_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = ShoppingListService(db)
    result = service.remove_item(item_id, current_user.id)
    return Result.successful(data=result)


# ===== Lists =====


@router.get("/{list_id}", response_model=Result[ShoppingListResponse])
async def get_shopping_list(
    list_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a shopping list with its items."""
    service = ShoppingListService(db)
    shopping_list = service.get_list(list_id, current_user.id)
    return Result.successful(data=shopping_list)


@router.delete("/{list_id}", response_model=Result[dict])
async def delete_shopping_list(
    list_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = ShoppingListService(db)
    result = service.delete_list(list_id, current_user.id)
    return Result.successful(data=result)


@router.get("/{list_id}/export", response_model=Result[ShoppingListExport])
async def export_shopping_list(
    list_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Export a list as plain text for printing or copying."""
    service = ShoppingListService(db)
    content = service.export_list(list_id, current_user.id)
    return Result.successful(data={"shopping_list_id": list_id, "content": content})


@router.post("/{list_id}/items", response_model=Result[ShoppingItemResponse], status_code=status.HTTP_201_CREATED)
async def add_item(
    list_id: int,
    item_data: ShoppingItemCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Add an item by hand at the end of the list."""
    service = ShoppingListService(db)
    item = service.add_manual_item(list_id, current_user.id, item_data)
    return Result.successful(data=item)


@router.post("/{list_id}/reorder", response_model=Result[List[ShoppingItemResponse]])
async def reorder_items(
    list_id: int,
    request: ReorderRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Drop an unchecked item onto the position of another unchecked item."""
    service = ShoppingListService(db)
    items = service.reorder_items(list_id, current_user.id, request.dragged_item_id, request.target_item_id)
    return Result.successful(data=items)


@router.post("/{list_id}/templates", response_model=Result[TemplateResponse], status_code=status.HTTP_201_CREATED)
async def save_as_template(
    list_id: int,
    request: TemplateCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Save the list's items as a reusable template."""
    service = ShoppingListService(db)
    template = service.save_as_template(list_id, current_user.id, request.name)
    return Result.successful(data=template)
