from pydantic import BaseModel
from typing import List, Optional

# Response bodies of the two pipeline endpoints


class GenerateDinnerResponse(BaseModel):
    success: bool = True
    dateLine: str
    meals: List[str]
    encouragement: str


class CookMealResponse(BaseModel):
    success: bool = True
    message: str
    meal: str
    used: List[str]
    updated: int


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: Optional[str] = None
