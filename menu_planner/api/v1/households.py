from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from menu_planner.database import get_db
from menu_planner.dependencies import get_current_user
from menu_planner.models.user import User
from menu_planner.schemas.household import (
    HouseholdCreate,
    HouseholdResponse,
    HouseholdDetailResponse,
    HouseholdMemberResponse,
    ThresholdUpdate,
    AIPreferencesUpdate,
    AIPreferencesResponse,
    HouseholdStatistics,
)
from menu_planner.schemas.result import Result
from menu_planner.services.household_service import HouseholdService

router = APIRouter()


@router.post("", response_model=Result[HouseholdResponse], status_code=status.HTTP_201_CREATED)
async def create_household(
    household_data: HouseholdCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a new household with current user as head."""
    service = HouseholdService(db)
    household = service.create_household(current_user.id, household_data)
    return Result.successful(data=household)


@router.get("", response_model=Result[List[HouseholdResponse]])
async def get_my_households(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get all households the current user belongs to."""
    service = HouseholdService(db)
    households = service.get_user_households(current_user.id)
    return Result.successful(data=households)


@router.get("/{household_id}", response_model=Result[HouseholdDetailResponse])
async def get_household(
    household_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get household details with members."""
    service = HouseholdService(db)
    household = service.get_household(household_id, current_user.id)
    return Result.successful(data=household)


@router.post("/{household_id}/join", response_model=Result[HouseholdResponse])
async def join_household(
    household_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Join a household as a member."""
    service = HouseholdService(db)
    household = service.join_household(household_id, current_user.id)
    return Result.successful(data=household)


@router.get("/{household_id}/members", response_model=Result[List[HouseholdMemberResponse]])
async def get_household_members(
    household_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get all members of a household."""
    service = HouseholdService(db)
    members = service.get_household_members(household_id, current_user.id)
    return Result.successful(data=members)


@router.put("/{household_id}/threshold", response_model=Result[HouseholdResponse])
async def update_threshold(
    household_id: int,
    threshold_data: ThresholdUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Change the popularity threshold (head only). Visibility is recomputed immediately."""
    service = HouseholdService(db)
    household = service.update_threshold(household_id, current_user.id, threshold_data.threshold)
    return Result.successful(data=household)


@router.get("/{household_id}/statistics", response_model=Result[HouseholdStatistics])
async def get_statistics(
    household_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Most popular menu items and vote totals."""
    service = HouseholdService(db)
    stats = service.get_statistics(household_id, current_user.id)
    return Result.successful(data=stats)


@router.get("/{household_id}/ai-preferences", response_model=Result[AIPreferencesResponse])
async def get_ai_preferences(
    household_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get saved menu generation defaults."""
    service = HouseholdService(db)
    preferences = service.get_ai_preferences(household_id, current_user.id)
    return Result.successful(data=preferences)


@router.put("/{household_id}/ai-preferences", response_model=Result[AIPreferencesResponse])
async def save_ai_preferences(
    household_id: int,
    preferences_data: AIPreferencesUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Save menu generation defaults."""
    service = HouseholdService(db)
    preferences = service.save_ai_preferences(household_id, current_user.id, preferences_data)
    return Result.successful(data=preferences)
