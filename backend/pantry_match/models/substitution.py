"""
Pydantic models for ingredient substitutions.

A substitution edge is directed: "butter -> olive oil" says nothing about
"olive oil -> butter". The catalog stores edges; the resolver turns the
ones whose substitute the user actually has into SubstitutionMatch records.
"""

from pydantic import BaseModel, Field
from typing import Optional


class SubstitutionEdge(BaseModel):
    """
    A declared substitute for some original ingredient, as read from the catalog.

    Attributes:
        substitute: Substitute ingredient name
        confidence: How good the substitute is (1 = perfect)
        notes: Optional usage notes
    """
    substitute: str = Field(..., min_length=1, description="Substitute ingredient name")
    confidence: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="Substitution confidence (0-1)"
    )
    notes: Optional[str] = Field(None, description="Usage notes")

    model_config = {
        "json_schema_extra": {
            "example": {
                "substitute": "quinoa",
                "confidence": 0.9,
                "notes": "Use the same volume; cook 5 minutes less"
            }
        }
    }


class SubstitutionMatch(BaseModel):
    """
    A substitution the user can actually make with what they have on hand.

    Attributes:
        original: Missing recipe ingredient (normalized)
        substitute: Available substitute ingredient (as named by the catalog)
        confidence: Substitution confidence (0-1)
    """
    original: str = Field(..., description="Missing ingredient")
    substitute: str = Field(..., description="Available substitute")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Substitution confidence")


class SubstitutionSuggestion(BaseModel):
    """
    Response item for the substitution lookup endpoint.

    Attributes:
        original: Ingredient that was looked up
        substitute: Declared substitute
        confidence: Substitution confidence (0-1)
        notes: Optional usage notes
    """
    original: str
    substitute: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    notes: Optional[str] = None
