# fitmentor/routers/plan.py
from collections import defaultdict

from bson import ObjectId
from fastapi import APIRouter, Depends, HTTPException, Path

from fitmentor.auth.jwt_auth import get_current_user
from fitmentor.config import DAYS_PER_WEEK, PLAN_WEEKS
from fitmentor.database.connection import document_out, get_db
from fitmentor.models.plan import (
    DailyMealOut, DailyWorkoutOut, PlanDay, PlanOverview, PlanWeek,
    PlanWeekDetail, WeeklySummary,
)
from fitmentor.services.bmi_calculator import describe_category

router = APIRouter(prefix="/api/plan", tags=["Plan"])


def _summary(doc):
    if not doc:
        return None
    return WeeklySummary(
        title=doc.get("title") or doc.get("name"),
        description=doc.get("description"),
    )


def _user_category(user: dict) -> str:
    category = user.get("category")
    if not category:
        raise HTTPException(status_code=400, detail="Profile has no category; update weight, height and goal first")
    return category


@router.get("", response_model=PlanOverview)
def plan_overview(current_user=Depends(get_current_user)):
    """12-week dashboard for the user's category"""
    db = get_db()
    category = _user_category(current_user)

    workouts = {w["week"]: w for w in db.workouts.find({"category": category}).sort("week", 1)}
    meals = {m["week"]: m for m in db.meals.find({"category": category}).sort("week", 1)}
    completed = {
        p["week"] for p in db.progress.find({"user_id": ObjectId(current_user["_id"])})
        if p.get("completed")
    }

    weeks = [
        PlanWeek(
            week=week,
            workout=_summary(workouts.get(week)),
            meal=_summary(meals.get(week)),
            completed=week in completed,
        )
        for week in range(1, PLAN_WEEKS + 1)
    ]
    return PlanOverview(
        category=category,
        category_label=describe_category(category),
        weeks=weeks,
        completed_weeks=sum(1 for w in weeks if w.completed),
    )


@router.get("/week/{week}", response_model=PlanWeekDetail)
def plan_week(
    week: int = Path(..., ge=1, le=PLAN_WEEKS),
    current_user=Depends(get_current_user),
):
    """Daily workouts and meals for one week, grouped by day"""
    db = get_db()
    category = _user_category(current_user)
    query = {"category": category, "week_number": week}

    workouts_by_day = defaultdict(list)
    for doc in db.daily_workouts.find(query).sort("day_number", 1):
        workouts_by_day[doc["day_number"]].append(DailyWorkoutOut(**document_out(doc)))

    meals_by_day = defaultdict(list)
    for doc in db.daily_meals.find(query).sort("day_number", 1):
        meals_by_day[doc["day_number"]].append(DailyMealOut(**document_out(doc)))

    progress = db.progress.find_one({"user_id": ObjectId(current_user["_id"]), "week": week})

    return PlanWeekDetail(
        week=week,
        category=category,
        days=[
            PlanDay(day=day, workouts=workouts_by_day[day], meals=meals_by_day[day])
            for day in range(1, DAYS_PER_WEEK + 1)
        ],
        completed=bool(progress and progress.get("completed")),
        completed_at=progress.get("completed_at") if progress else None,
    )
