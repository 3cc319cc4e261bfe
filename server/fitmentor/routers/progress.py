from datetime import datetime
from typing import Annotated, List, Optional
import logging

from bson import ObjectId
from fastapi import APIRouter, Depends, HTTPException, Path

from fitmentor.auth.jwt_auth import get_current_user_id
from fitmentor.config import PLAN_WEEKS
from fitmentor.database.connection import document_out, get_db, parse_object_id
from fitmentor.models.progress import (
    MEASUREMENT_FIELDS, MeasurementChart, MeasurementIn, MeasurementOut,
    WeekProgressIn, WeekProgressOut, WorkoutLogIn, WorkoutLogOut,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Progress"])

Week = Annotated[int, Path(ge=1, le=PLAN_WEEKS)]


def _upsert_week_entry(collection: str, user_id: str, week: int, body: dict) -> dict:
    """Update the user's entry for a week, creating it on first write"""
    db = get_db()
    owner = {"user_id": ObjectId(user_id), "week": week}
    try:
        existing = db[collection].find_one(owner, {"_id": 1})
        if existing:
            db[collection].update_one({"_id": existing["_id"]}, {"$set": body})
            saved_id = existing["_id"]
        else:
            saved_id = db[collection].insert_one({**owner, **body}).inserted_id
    except Exception as e:
        logger.error(f"Failed to save {collection} for user {user_id}, week {week}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save progress")
    return {"_id": saved_id, **owner, **body}


# -------------------------
# Week completion
# -------------------------
@router.get("/progress", response_model=List[WeekProgressOut])
def list_progress(user_id: str = Depends(get_current_user_id)):
    db = get_db()
    docs = db.progress.find({"user_id": ObjectId(user_id)}).sort("week", 1)
    return [WeekProgressOut(**document_out(d)) for d in docs]


@router.get("/progress/week/{week}", response_model=Optional[WeekProgressOut])
def get_week_progress(week: Week, user_id: str = Depends(get_current_user_id)):
    db = get_db()
    doc = db.progress.find_one({"user_id": ObjectId(user_id), "week": week})
    return WeekProgressOut(**document_out(doc)) if doc else None


@router.put("/progress/week/{week}", response_model=WeekProgressOut)
def mark_week(payload: WeekProgressIn, week: Week, user_id: str = Depends(get_current_user_id)):
    """Mark a plan week completed (or reopen it)"""
    body = {
        "completed": payload.completed,
        "completed_at": datetime.utcnow() if payload.completed else None,
    }
    saved = _upsert_week_entry("progress", user_id, week, body)
    logger.info(f"User {user_id} set week {week} completed={payload.completed}")
    return WeekProgressOut(**document_out(saved))


# -------------------------
# Workout logs
# -------------------------
@router.get("/workout-logs", response_model=List[WorkoutLogOut])
def list_workout_logs(user_id: str = Depends(get_current_user_id)):
    db = get_db()
    docs = db.workout_logs.find({"user_id": ObjectId(user_id)}).sort("week", 1)
    return [WorkoutLogOut(**document_out(d)) for d in docs]


@router.get("/workout-logs/{week}", response_model=Optional[WorkoutLogOut])
def get_workout_log(week: Week, user_id: str = Depends(get_current_user_id)):
    db = get_db()
    doc = db.workout_logs.find_one({"user_id": ObjectId(user_id), "week": week})
    return WorkoutLogOut(**document_out(doc)) if doc else None


@router.put("/workout-logs/{week}", response_model=WorkoutLogOut)
def save_workout_log(payload: WorkoutLogIn, week: Week, user_id: str = Depends(get_current_user_id)):
    body = {**payload.model_dump(), "logged_at": datetime.utcnow()}
    saved = _upsert_week_entry("workout_logs", user_id, week, body)
    return WorkoutLogOut(**document_out(saved))


@router.delete("/workout-logs/{log_id}")
def delete_workout_log(log_id: str, user_id: str = Depends(get_current_user_id)):
    db = get_db()
    result = db.workout_logs.delete_one({"_id": parse_object_id(log_id, "log ID"), "user_id": ObjectId(user_id)})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Workout log not found")
    return {"deleted": True, "id": log_id}


# -------------------------
# Body measurements
# -------------------------
@router.get("/measurements", response_model=List[MeasurementOut])
def list_measurements(user_id: str = Depends(get_current_user_id)):
    db = get_db()
    docs = db.measurements.find({"user_id": ObjectId(user_id)}).sort("created_at", 1)
    return [MeasurementOut(**document_out(d)) for d in docs]


@router.post("/measurements", response_model=MeasurementOut)
def add_measurement(payload: MeasurementIn, user_id: str = Depends(get_current_user_id)):
    values = payload.model_dump()
    if all(values[field] is None for field in MEASUREMENT_FIELDS):
        raise HTTPException(status_code=400, detail="Enter at least one measurement")

    db = get_db()
    doc = {"user_id": ObjectId(user_id), **values, "created_at": datetime.utcnow()}
    try:
        doc["_id"] = db.measurements.insert_one(doc).inserted_id
    except Exception as e:
        logger.error(f"Failed to save measurement for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to save measurement")
    return MeasurementOut(**document_out(doc))


@router.delete("/measurements/{measurement_id}")
def delete_measurement(measurement_id: str, user_id: str = Depends(get_current_user_id)):
    db = get_db()
    result = db.measurements.delete_one(
        {"_id": parse_object_id(measurement_id, "measurement ID"), "user_id": ObjectId(user_id)}
    )
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Measurement not found")
    return {"deleted": True, "id": measurement_id}


def chart_series(measurements: List[dict], metric: str) -> MeasurementChart:
    """Date labels and values for one metric, skipping entries without it"""
    labels, values = [], []
    for entry in measurements:
        value = entry.get(metric)
        if value is None:
            continue
        labels.append(entry["created_at"].strftime("%Y-%m-%d"))
        values.append(value)
    return MeasurementChart(label=metric.capitalize(), labels=labels, values=values)


@router.get("/measurements/chart/{metric}", response_model=MeasurementChart)
def measurement_chart(metric: str, user_id: str = Depends(get_current_user_id)):
    if metric not in MEASUREMENT_FIELDS:
        raise HTTPException(status_code=400, detail=f"Unknown metric: {metric}")
    db = get_db()
    docs = list(db.measurements.find({"user_id": ObjectId(user_id)}).sort("created_at", 1))
    return chart_series(docs, metric)
