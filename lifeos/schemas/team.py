"""
Team Schemas
============

Pydantic schemas for team, membership and shared item endpoints.
"""

from typing import Optional, Union

from pydantic import BaseModel, Field


class TeamCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)


class TeamJoin(BaseModel):
    """Invite codes are matched case-insensitively after trimming."""

    invite_code: str = Field(min_length=1, max_length=32)


class SharedExpenseCreate(BaseModel):
    amount: Union[str, float]
    category: str = Field(min_length=1, max_length=50)
    note: Optional[str] = Field(None, max_length=500)


class TeamJoinResult(BaseModel):
    team: dict
    already_member: bool
