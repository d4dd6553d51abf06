import logging
import time
import uuid

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status
from starlette.concurrency import run_in_threadpool

from ..core.config import IMAGE_FOLDER
from ..core.errors import ValidationError
from ..crud import meal as meal_crud
from ..dependencies import get_current_user, get_owned_meal
from ..schemas.meal import Meal, MealList, NutritionTotals
from ..utils import stats
from ..utils.dates import parse_datetime, parse_optional_datetime, utcnow
from ..utils.image_store import get_image_store
from ..utils.jwt_handler import AuthContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/meals", tags=["meals"])


def _parse_number(value: str | None, field_name: str, cast):
    # 비어 있으면 0이 아니라 NULL로 저장 (기록 안 함과 0을 구분)
    if value is None or value.strip() == "":
        return None
    try:
        return cast(value.strip())
    except (ValueError, OverflowError):
        raise ValidationError(f"Invalid {field_name}")


def _to_int(value: str) -> int:
    # "500.5"처럼 소수로 들어온 칼로리는 정수 부분만 저장
    return int(float(value))


def _nutrition_fields(calories, protein, carbs, fat) -> dict:
    return {
        "calories": _parse_number(calories, "calories", _to_int),
        "protein": _parse_number(protein, "protein", float),
        "carbs": _parse_number(carbs, "carbs", float),
        "fat": _parse_number(fat, "fat", float),
    }


async def _store_meal_image(image: UploadFile | None, auth: AuthContext, image_store) -> str | None:
    if image is None or not image.filename:
        return None
    if not (image.content_type or "").startswith("image/"):
        raise ValidationError("File must be an image")
    data = await image.read()
    public_id = f"{IMAGE_FOLDER}/meal_{auth.user_id}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"
    url, _ = await run_in_threadpool(image_store.save, data, image.content_type, public_id)
    logger.info("Stored meal image %s for user %s", public_id, auth.user_id)
    return url


@router.get("", response_model=MealList)
async def list_meals(
    date: str | None = None,
    date_from: str | None = Query(None, alias="from"),
    date_to: str | None = Query(None, alias="to"),
    limit: int | None = Query(None, ge=1),
    auth: AuthContext = Depends(get_current_user),
):
    filters = meal_crud.MealFilter(
        date=parse_optional_datetime(date, "date"),
        date_from=parse_optional_datetime(date_from, "from date"),
        date_to=parse_optional_datetime(date_to, "to date"),
        limit=limit,
    )
    return {"meals": await meal_crud.list_meals(auth.user_id, filters)}


@router.post("", response_model=Meal, status_code=status.HTTP_201_CREATED)
async def create_meal(
    name: str | None = Form(None),
    date: str | None = Form(None),
    calories: str | None = Form(None),
    protein: str | None = Form(None),
    carbs: str | None = Form(None),
    fat: str | None = Form(None),
    notes: str | None = Form(None),
    image: UploadFile | None = File(None),
    auth: AuthContext = Depends(get_current_user),
    image_store=Depends(get_image_store),
):
    if not name or not date:
        raise ValidationError("Name and date are required")

    fields = {
        "name": name,
        "date": parse_datetime(date, "date"),
        "notes": notes or None,
        **_nutrition_fields(calories, protein, carbs, fat),
    }
    fields["image_url"] = await _store_meal_image(image, auth, image_store)
    return await meal_crud.create_meal(auth.user_id, fields)


@router.get("/totals", response_model=NutritionTotals)
async def read_daily_totals(date: str | None = None, auth: AuthContext = Depends(get_current_user)):
    """하루 동안 먹은 식사의 영양소 합계."""
    day = parse_optional_datetime(date, "date") or utcnow()
    day = day.replace(hour=0, minute=0, second=0, microsecond=0)
    meals = await meal_crud.list_meals(auth.user_id, meal_crud.MealFilter(date=day))
    return {"date": day, **stats.daily_nutrition_totals(meals)}


@router.get("/{meal_id}", response_model=Meal)
async def read_meal(meal: dict = Depends(get_owned_meal)):
    return meal


@router.put("/{meal_id}", response_model=Meal)
async def update_meal(
    name: str | None = Form(None),
    date: str | None = Form(None),
    calories: str | None = Form(None),
    protein: str | None = Form(None),
    carbs: str | None = Form(None),
    fat: str | None = Form(None),
    notes: str | None = Form(None),
    image: UploadFile | None = File(None),
    meal: dict = Depends(get_owned_meal),
    auth: AuthContext = Depends(get_current_user),
    image_store=Depends(get_image_store),
):
    if not name:
        raise ValidationError("Name is required")

    fields = {"name": name, "notes": notes or None, **_nutrition_fields(calories, protein, carbs, fat)}
    if date:
        fields["date"] = parse_datetime(date, "date")
    image_url = await _store_meal_image(image, auth, image_store)
    if image_url:
        fields["image_url"] = image_url
    return await meal_crud.update_meal(meal["id"], fields)


@router.delete("/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal(meal: dict = Depends(get_owned_meal)):
    await meal_crud.delete_meal(meal["id"])
    return Response(status_code=status.HTTP_204_NO_CONTENT)
