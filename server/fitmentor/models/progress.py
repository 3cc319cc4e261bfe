import datetime
from pydantic import BaseModel, Field
from typing import Optional, List, Literal


# -----------------
# Week completion
# -----------------
class WeekProgressIn(BaseModel):
    completed: bool = True


class WeekProgressOut(BaseModel):
    id: str
    week: int
    completed: bool
    completed_at: Optional[datetime.datetime] = None


# -----------------
# Workout logs
# -----------------
class WorkoutLogIn(BaseModel):
    notes: Optional[str] = ""
    intensity: Literal["low", "medium", "high"] = "medium"
    duration: int = Field(default=30, gt=0)  # minutes
    rating: int = Field(default=3, ge=1, le=5)


class WorkoutLogOut(WorkoutLogIn):
    id: str
    week: int
    logged_at: datetime.datetime


# -----------------
# Body measurements
# -----------------
MEASUREMENT_FIELDS = ("weight", "chest", "waist", "hips", "arms", "thighs")


class MeasurementIn(BaseModel):
    weight: Optional[float] = Field(default=None, gt=0)
    chest: Optional[float] = Field(default=None, gt=0)
    waist: Optional[float] = Field(default=None, gt=0)
    hips: Optional[float] = Field(default=None, gt=0)
    arms: Optional[float] = Field(default=None, gt=0)
    thighs: Optional[float] = Field(default=None, gt=0)


class MeasurementOut(MeasurementIn):
    id: str
    created_at: datetime.datetime


class MeasurementChart(BaseModel):
    label: str
    labels: List[str]
    values: List[float]


# -----------------
# Progress photos
# -----------------
class PhotoOut(BaseModel):
    id: str
    filename: str
    month: Optional[int] = None
    url: str
    content_type: Optional[str] = None
    uploaded_at: Optional[datetime.datetime] = None
