"""
Association tables for many-to-many relationships.
Kept separate to avoid circular imports between models.
"""
from sqlalchemy import Column, Integer, Table, ForeignKey, String, DateTime, func
from menu_planner.models.base import Base

household_members = Table(
    'household_members',
    Base.metadata,
    Column('user_id', Integer, ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
    Column('household_id', Integer, ForeignKey('households.id', ondelete='CASCADE'), primary_key=True),
    Column('role', String(20), nullable=False, server_default='member'),  # 'head' or 'member'
    Column('joined_at', DateTime(timezone=True), server_default=func.now(), nullable=False)
)

# Sides offered as a choice when an entree is scheduled
entree_sides = Table(
    'entree_sides',
    Base.metadata,
    Column('entree_id', Integer, ForeignKey('menu_items.id', ondelete='CASCADE'), primary_key=True),
    Column('side_id', Integer, ForeignKey('sides.id', ondelete='CASCADE'), primary_key=True),
    Column('created_at', DateTime(timezone=True), server_default=func.now(), nullable=False)
)
