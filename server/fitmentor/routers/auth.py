from fastapi import APIRouter, HTTPException, Depends
from pymongo.errors import DuplicateKeyError
from datetime import datetime
import logging

from fitmentor.auth.jwt_auth import (
    create_access_token,
    get_current_user,
    hash_password,
    verify_password,
)
from fitmentor.database.connection import get_db
from fitmentor.models.user import (
    BodyMetrics,
    ClassificationResponse,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
    RegistrationResponse,
    TokenResponse,
    UserLogin,
    UserRegistration,
    UserResponse,
)
from fitmentor.services.bmi_calculator import classify, describe_category, normalize_goal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

CLASSIFIER_FIELDS = ("weight", "height", "goal")


def user_response(user: dict) -> UserResponse:
    """Build the API view of a user document"""
    return UserResponse(
        id=str(user["_id"]),
        name=user.get("full_name", ""),
        email=user["email"],
        age=user.get("age"),
        gender=user.get("gender"),
        weight=user.get("weight"),
        height=user.get("height"),
        goal=user.get("goal"),
        category=user.get("category"),
        bmi=user.get("bmi"),
        role=user.get("role", "user"),
        created_at=user["created_at"],
        updated_at=user.get("updated_at"),
    )


def _log_override(email: str, goal: str, result) -> None:
    if result.is_goal_mismatched:
        logger.info(
            f"BMI {result.bmi} overrides goal '{goal}' for {email}: category set to {result.category}"
        )


def _stored_mismatch(user: dict) -> bool:
    """Goal mismatch for a profile whose category is not being re-derived"""
    goal, category = user.get("goal"), user.get("category")
    if not goal or not category:
        return False
    return normalize_goal(goal) != category


# Form-based Authentication Endpoints
@router.post("/register", response_model=RegistrationResponse)
async def register_user(user_data: UserRegistration):
    """Register a new user and assign their plan category"""
    db = get_db()
    try:
        # Check if user already exists
        email = user_data.email.lower()
        if db.users.find_one({"email": email}):
            raise HTTPException(status_code=400, detail="User with this email already exists")

        result = classify(user_data.weight, user_data.height, user_data.goal)
        _log_override(email, user_data.goal, result)

        new_user = {
            "full_name": user_data.name,
            "email": email,
            "password": hash_password(user_data.password),
            "age": user_data.age,
            "gender": user_data.gender,
            "weight": user_data.weight,
            "height": user_data.height,
            "goal": user_data.goal,
            "category": result.category,
            "bmi": result.bmi,
            "role": "user",
            "created_at": datetime.utcnow(),
        }

        inserted = db.users.insert_one(new_user)
        user_id = str(inserted.inserted_id)
        logger.info(f"New user registered with ID: {user_id} (category={result.category})")

        return RegistrationResponse(
            message="User registered successfully",
            user_id=user_id,
            access_token=create_access_token(data={"sub": user_id}),
            bmi=result.bmi,
            category=result.category,
            is_goal_mismatched=result.is_goal_mismatched,
        )

    except HTTPException:
        raise
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail="User with this email already exists")
    except Exception as e:
        logger.error(f"Registration error: {e}")
        raise HTTPException(status_code=500, detail="Registration failed")


@router.post("/login", response_model=TokenResponse)
async def login_user(user_credentials: UserLogin):
    """Authenticate user with email and password"""
    db = get_db()
    try:
        user = db.users.find_one({"email": user_credentials.email.lower()})
        if not user or not verify_password(user_credentials.password, user["password"]):
            raise HTTPException(status_code=401, detail="Invalid email or password")

        access_token = create_access_token(data={"sub": str(user["_id"])})
        logger.info(f"User logged in: {user['email']}")

        return TokenResponse(
            access_token=access_token,
            token_type="bearer",
            user=user_response(user),
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Login error: {e}")
        raise HTTPException(status_code=500, detail="Login failed")


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user=Depends(get_current_user)):
    """Get current user information"""
    return user_response(current_user)


@router.put("/profile", response_model=ProfileUpdateResponse)
async def update_profile(updates: ProfileUpdateRequest, current_user=Depends(get_current_user)):
    """Update profile fields; weight/height/goal changes re-derive the category"""
    changes = updates.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No profile fields to update")

    db = get_db()
    try:
        update_data = {"updated_at": datetime.utcnow()}
        if "name" in changes:
            update_data["full_name"] = changes.pop("name")
        update_data.update(changes)

        mismatched = _stored_mismatch({**current_user, **update_data})
        if any(field in changes for field in CLASSIFIER_FIELDS):
            merged = {field: changes.get(field, current_user.get(field)) for field in CLASSIFIER_FIELDS}
            if all(merged[field] is not None for field in CLASSIFIER_FIELDS):
                result = classify(merged["weight"], merged["height"], merged["goal"])
                _log_override(current_user["email"], merged["goal"], result)
                update_data["category"] = result.category
                update_data["bmi"] = result.bmi
                mismatched = result.is_goal_mismatched
            else:
                logger.warning(
                    f"Profile for {current_user['email']} lacks body metrics; category left unchanged"
                )

        db.users.update_one({"_id": current_user["_id"]}, {"$set": update_data})
        logger.info(f"Profile updated for user: {current_user['email']}")

        return ProfileUpdateResponse(
            user=user_response({**current_user, **update_data}),
            is_goal_mismatched=mismatched,
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Profile update error: {e}")
        raise HTTPException(status_code=500, detail="Failed to update profile")


@router.post("/bmi-preview", response_model=ClassificationResponse)
async def bmi_preview(metrics: BodyMetrics):
    """Classify body metrics without saving anything"""
    result = classify(metrics.weight, metrics.height, metrics.goal)
    return ClassificationResponse(
        bmi=result.bmi,
        category=result.category,
        category_label=describe_category(result.category),
        is_goal_mismatched=result.is_goal_mismatched,
    )
