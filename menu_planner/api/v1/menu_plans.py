from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List
from datetime import date

from menu_planner.database import get_db
from menu_planner.dependencies import get_current_user
from menu_planner.models.user import User
from menu_planner.schemas.menu_plan import (
    MenuPlanCreate,
    MenuPlanUpdate,
    MenuPlanMove,
    MenuPlanResponse,
    MenuPlanMoveResponse,
)
from menu_planner.schemas.vote import VoteRequest, VoteResponse, VoteResultResponse
from menu_planner.schemas.result import Result
from menu_planner.services.menu_plan_service import MenuPlanService
from menu_planner.services.vote_service import VoteService
from menu_planner.services.popularity_service import PopularityService

router = APIRouter()


@router.post("", response_model=Result[MenuPlanResponse], status_code=status.HTTP_201_CREATED)
async def schedule_meal(
    plan_data: MenuPlanCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Schedule a menu item into an empty calendar slot."""
    service = MenuPlanService(db)
    plan = service.schedule_meal(current_user.id, plan_data)
    return Result.successful(data=plan)


@router.get("", response_model=Result[List[MenuPlanResponse]])
async def get_menu_plans(
    household_id: int = Query(..., description="Household ID"),
    start_date: date = Query(..., description="First day (inclusive)"),
    end_date: date = Query(..., description="Last day (inclusive)"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get scheduled meals in a date range."""
    service = MenuPlanService(db)
    plans = service.get_plans(household_id, current_user.id, start_date, end_date)
    return Result.successful(data=plans)


@router.get("/{plan_id}", response_model=Result[MenuPlanResponse])
async def get_menu_plan(
    plan_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = MenuPlanService(db)
    plan = service.get_plan(plan_id, current_user.id)
    return Result.successful(data=plan)


@router.put("/{plan_id}", response_model=Result[MenuPlanResponse])
async def update_menu_plan(
    plan_id: int,
    plan_data: MenuPlanUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Change the entree or side of a scheduled meal."""
    service = MenuPlanService(db)
    plan = service.update_plan(plan_id, current_user.id, plan_data)
    return Result.successful(data=plan)


@router.post("/{plan_id}/move", response_model=Result[MenuPlanMoveResponse])
async def move_menu_plan(
    plan_id: int,
    move_data: MenuPlanMove,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Move a scheduled meal; an occupied target slot swaps with it."""
    service = MenuPlanService(db)
    result = service.move_meal(plan_id, current_user.id, move_data.date, move_data.meal_type)
    return Result.successful(data=result)


@router.delete("/{plan_id}", response_model=Result[dict])
async def delete_menu_plan(
    plan_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    service = MenuPlanService(db)
    result = service.delete_plan(plan_id, current_user.id)
    return Result.successful(data=result)


# ===== Votes =====


@router.post("/{plan_id}/votes", response_model=Result[VoteResultResponse])
async def cast_vote(
    plan_id: int,
    vote_data: VoteRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Vote on a scheduled meal. Repeating a vote removes it, the opposite
    vote replaces it. The item's popularity is recomputed afterwards.
    """
    vote_service = VoteService(db)
    vote = vote_service.cast_vote(plan_id, current_user.id, vote_data.value)

    plan = MenuPlanService(db).get_plan(plan_id, current_user.id)
    item = PopularityService(db).recompute_popularity(plan.menu_item_id)

    return Result.successful(
        data={
            "menu_plan_id": plan_id,
            "menu_item_id": item.id,
            "score": vote_service.score_of(plan_id),
            "user_vote": vote.value if vote else None,
            "popularity_score": item.popularity_score,
            "is_hidden": item.is_hidden,
        }
    )


@router.get("/{plan_id}/votes", response_model=Result[List[VoteResponse]])
async def get_votes(
    plan_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List the votes on a scheduled meal."""
    service = VoteService(db)
    votes = service.get_votes(plan_id, current_user.id)
    return Result.successful(data=votes)
