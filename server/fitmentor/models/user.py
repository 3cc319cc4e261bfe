from pydantic import BaseModel, EmailStr, Field
from typing import Optional, Literal
from datetime import datetime

Gender = Literal["Male", "Female", "Other"]
Goal = Literal["Lose Weight", "Gain Weight", "Stay Fit"]
Category = Literal["lose_weight", "gain_weight", "stay_fit"]

# Physically plausible ranges; keeps BMI finite
MIN_WEIGHT_KG, MAX_WEIGHT_KG = 0, 500
MIN_HEIGHT_CM, MAX_HEIGHT_CM = 30, 300


class BodyMetrics(BaseModel):
    weight: float = Field(gt=MIN_WEIGHT_KG, le=MAX_WEIGHT_KG, allow_inf_nan=False, description="Weight in kilograms")
    height: float = Field(ge=MIN_HEIGHT_CM, le=MAX_HEIGHT_CM, allow_inf_nan=False, description="Height in centimeters")
    goal: Goal


class UserRegistration(BodyMetrics):
    name: str = Field(min_length=2)
    email: EmailStr
    password: str = Field(min_length=6)
    age: int = Field(ge=16, le=100)
    gender: Gender = "Male"


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class ProfileUpdateRequest(BaseModel):
    """Partial profile update; omitted fields keep their stored values"""
    name: Optional[str] = Field(default=None, min_length=2)
    age: Optional[int] = Field(default=None, ge=16, le=100)
    gender: Optional[Gender] = None
    weight: Optional[float] = Field(default=None, gt=MIN_WEIGHT_KG, le=MAX_WEIGHT_KG, allow_inf_nan=False)
    height: Optional[float] = Field(default=None, ge=MIN_HEIGHT_CM, le=MAX_HEIGHT_CM, allow_inf_nan=False)
    goal: Optional[Goal] = None


class ClassificationResponse(BaseModel):
    bmi: float
    category: str
    category_label: str
    is_goal_mismatched: bool


class UserResponse(BaseModel):
    """User response model for API"""
    id: str
    name: str
    email: str
    age: Optional[int] = None
    gender: Optional[str] = None
    weight: Optional[float] = None
    height: Optional[float] = None
    goal: Optional[str] = None
    category: Optional[str] = None
    bmi: Optional[float] = None
    role: str = "user"
    created_at: datetime
    updated_at: Optional[datetime] = None


class RegistrationResponse(BaseModel):
    message: str
    user_id: str
    access_token: str
    token_type: str = "bearer"
    bmi: float
    category: str
    is_goal_mismatched: bool


class TokenResponse(BaseModel):
    access_token: str
    token_type: str
    user: UserResponse


class ProfileUpdateResponse(BaseModel):
    user: UserResponse
    is_goal_mismatched: bool = False
