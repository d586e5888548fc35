"""Category data model"""

from pydantic import BaseModel, Field
from fintrack.constants import DEFAULT_ICON


class Category(BaseModel):
    """User-managed label with a display icon"""

    name: str = Field(..., min_length=1, description="Unique, case-sensitive name")
    icon: str = Field(DEFAULT_ICON, description="Icon reference for the UI")
    builtin: bool = Field(False, description="Seeded at startup")

    class Config:
        frozen = True
