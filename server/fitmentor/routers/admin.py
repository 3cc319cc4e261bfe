from datetime import datetime
from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from fitmentor.auth.jwt_auth import require_admin
from fitmentor.config import PLAN_WEEKS
from fitmentor.database.connection import document_out, get_db, parse_object_id
from fitmentor.models.plan import (
    AdminContentList, DailyMealIn, DailyMealOut, DailyWorkoutIn, DailyWorkoutOut,
)
from fitmentor.models.user import Category

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


def _insert(collection: str, payload, admin: dict) -> dict:
    db = get_db()
    doc = payload.model_dump()
    doc["created_at"] = datetime.utcnow()
    doc["created_by"] = admin["_id"]
    try:
        result = db[collection].insert_one(doc)
    except Exception as e:
        logger.error(f"Failed to save {collection} entry: {e}")
        raise HTTPException(status_code=500, detail="Failed to save content")
    doc["_id"] = result.inserted_id
    logger.info(
        f"Admin {admin.get('email')} added {collection} '{payload.name}' "
        f"({payload.category}, week {payload.week_number}, day {payload.day_number})"
    )
    return document_out(doc)


def _delete(collection: str, item_id: str, admin: dict) -> dict:
    db = get_db()
    result = db[collection].delete_one({"_id": parse_object_id(item_id, "content ID")})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Content not found")
    logger.info(f"Admin {admin.get('email')} deleted {collection} entry {item_id}")
    return {"deleted": True, "id": item_id}


@router.post("/workouts", response_model=DailyWorkoutOut)
def create_daily_workout(payload: DailyWorkoutIn, admin=Depends(require_admin)):
    return DailyWorkoutOut(**_insert("daily_workouts", payload, admin))


@router.post("/meals", response_model=DailyMealOut)
def create_daily_meal(payload: DailyMealIn, admin=Depends(require_admin)):
    return DailyMealOut(**_insert("daily_meals", payload, admin))


@router.get("/content", response_model=AdminContentList)
def list_content(
    category: Category,
    week: Optional[int] = Query(None, ge=1, le=PLAN_WEEKS),
    admin=Depends(require_admin),
):
    """Daily content for a category, optionally narrowed to one week"""
    db = get_db()
    query = {"category": category}
    if week is not None:
        query["week_number"] = week
    order = [("week_number", 1), ("day_number", 1)]
    return AdminContentList(
        workouts=[DailyWorkoutOut(**document_out(d)) for d in db.daily_workouts.find(query).sort(order)],
        meals=[DailyMealOut(**document_out(d)) for d in db.daily_meals.find(query).sort(order)],
    )


@router.delete("/workouts/{item_id}")
def delete_daily_workout(item_id: str, admin=Depends(require_admin)):
    return _delete("daily_workouts", item_id, admin)


@router.delete("/meals/{item_id}")
def delete_daily_meal(item_id: str, admin=Depends(require_admin)):
    return _delete("daily_meals", item_id, admin)
