from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List

from menu_planner.database import get_db
from menu_planner.dependencies import get_current_user
from menu_planner.models.user import User
from menu_planner.schemas.side import SideCreate, SideUpdate, SideResponse
from menu_planner.schemas.result import Result
from menu_planner.services.side_service import SideService

router = APIRouter()


@router.post("", response_model=Result[SideResponse], status_code=status.HTTP_201_CREATED)
async def create_side(
    side_data: SideCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = SideService(db)
    side = service.create_side(current_user.id, side_data)
    return Result.successful(data=side)


@router.get("", response_model=Result[List[SideResponse]])
async def get_sides(
    household_id: int = Query(..., description="Household ID"),
    include_hidden: bool = Query(False),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = SideService(db)
    sides = service.get_household_sides(household_id, current_user.id, include_hidden)
    return Result.successful(data=sides)


@router.put("/{side_id}", response_model=Result[SideResponse])
async def update_side(
    side_id: int,
    side_data: SideUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = SideService(db)
    side = service.update_side(side_id, current_user.id, side_data)
    return Result.successful(data=side)


@router.post("/{side_id}/hide", response_model=Result[SideResponse])
async def hide_side(
    side_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = SideService(db)
    side = service.hide_side(side_id, current_user.id)
    return Result.successful(data=side)


@router.post("/{side_id}/restore", response_model=Result[SideResponse])
async def restore_side(
    side_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = SideService(db)
    side = service.restore_side(side_id, current_user.id)
    return Result.successful(data=side)


@router.delete("/{side_id}", response_model=Result[dict])
async def delete_side(
    side_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a side (scheduled meals keep their entree and lose the side)."""
    service = SideService(db)
    result = service.delete_side(side_id, current_user.id)
    return Result.successful(data=result)
