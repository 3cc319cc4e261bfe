import datetime
from pydantic import BaseModel, Field
from typing import Optional, List

from fitmentor.config import DAYS_PER_WEEK, PLAN_WEEKS
from fitmentor.models.user import Category


# -----------------
# Weekly summaries (dashboard)
# -----------------
class WeeklySummary(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None


class PlanWeek(BaseModel):
    week: int
    workout: Optional[WeeklySummary] = None
    meal: Optional[WeeklySummary] = None
    completed: bool = False


class PlanOverview(BaseModel):
    category: Optional[str] = None
    category_label: Optional[str] = None
    weeks: List[PlanWeek]
    completed_weeks: int = 0


# -----------------
# Daily content (authored by admins)
# -----------------
class DailyContentBase(BaseModel):
    week_number: int = Field(ge=1, le=PLAN_WEEKS)
    day_number: int = Field(ge=1, le=DAYS_PER_WEEK)
    category: Category
    name: str = Field(min_length=1)
    description: Optional[str] = ""


class DailyWorkoutIn(DailyContentBase):
    video_url: Optional[str] = ""
    duration: int = Field(default=30, gt=0)  # minutes


class DailyWorkoutOut(DailyWorkoutIn):
    id: str


class DailyMealIn(DailyContentBase):
    breakfast: Optional[str] = ""
    lunch: Optional[str] = ""
    dinner: Optional[str] = ""
    snacks: Optional[str] = ""


class DailyMealOut(DailyMealIn):
    id: str


class PlanDay(BaseModel):
    day: int
    workouts: List[DailyWorkoutOut] = Field(default_factory=list)
    meals: List[DailyMealOut] = Field(default_factory=list)


class PlanWeekDetail(BaseModel):
    week: int
    category: str
    days: List[PlanDay]
    completed: bool = False
    completed_at: Optional[datetime.datetime] = None


class AdminContentList(BaseModel):
    workouts: List[DailyWorkoutOut]
    meals: List[DailyMealOut]
