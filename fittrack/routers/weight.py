from fastapi import APIRouter, Depends, Query, Response, status

from ..core.errors import ValidationError
from ..crud import weight as weight_crud
from ..dependencies import get_current_user, get_owned_weight
from ..schemas.weight import WeightCreate, WeightUpdate, WeightEntry, WeightList, WeightStats
from ..utils import stats
from ..utils.dates import parse_optional_datetime
from ..utils.jwt_handler import AuthContext

router = APIRouter(prefix="/weight", tags=["weight"])


def _range(date_from, date_to):
    return parse_optional_datetime(date_from, "from date"), parse_optional_datetime(date_to, "to date")


@router.get("", response_model=WeightList)
async def list_weights(
    date_from: str | None = Query(None, alias="from"),
    date_to: str | None = Query(None, alias="to"),
    auth: AuthContext = Depends(get_current_user),
):
    start, end = _range(date_from, date_to)
    return {"weights": await weight_crud.list_weights(auth.user_id, start, end)}


@router.post("", response_model=WeightEntry, status_code=status.HTTP_201_CREATED)
async def create_weight(body: WeightCreate, auth: AuthContext = Depends(get_current_user)):
    if body.weight is None:
        raise ValidationError("Weight is required")
    return await weight_crud.create_weight(auth.user_id, body.weight, body.date, body.notes)


@router.get("/stats", response_model=WeightStats)
async def read_weight_stats(
    date_from: str | None = Query(None, alias="from"),
    date_to: str | None = Query(None, alias="to"),
    auth: AuthContext = Depends(get_current_user),
):
    """기간 내 현재 체중, 변화량, 평균, 추세."""
    start, end = _range(date_from, date_to)
    return stats.weight_trend(await weight_crud.list_weights(auth.user_id, start, end))


@router.get("/{entry_id}", response_model=WeightEntry)
async def read_weight(entry: dict = Depends(get_owned_weight)):
    return entry


@router.put("/{entry_id}", response_model=WeightEntry)
async def update_weight(body: WeightUpdate, entry: dict = Depends(get_owned_weight)):
    changes = body.model_dump(include=body.model_fields_set)
    if "weight" in changes and changes["weight"] is None:
        raise ValidationError("Weight is required")
    if "date" in changes and changes["date"] is None:
        # 빈 날짜는 변경하지 않음
        del changes["date"]
    return await weight_crud.update_weight(entry["id"], changes)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_weight(entry: dict = Depends(get_owned_weight)):
    await weight_crud.delete_weight(entry["id"])
    return Response(status_code=status.HTTP_204_NO_CONTENT)
