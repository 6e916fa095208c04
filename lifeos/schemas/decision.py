"""
Decision Schemas
================

Pydantic schemas for the decision helper.
"""

from typing import Optional

from pydantic import BaseModel, Field


class DecisionAnalyzeRequest(BaseModel):
    """Question to analyze; the analysis is stored as a new decision."""

    question: str = Field(min_length=1, max_length=1000)
    context: Optional[str] = Field(None, max_length=4000)


class DecisionAnalysis(BaseModel):
    """Shape the model is asked to answer with."""

    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)
    recommendation: str = ""
