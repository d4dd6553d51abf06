# routers/user.py
import logging

from fastapi import APIRouter, Depends, Response
from starlette.concurrency import run_in_threadpool

from ..core.config import IMAGE_FOLDER, NEW_PASSWORD_MIN_LENGTH, SESSION_COOKIE_NAME
from ..core.errors import NotFound, ValidationError
from ..crud import user as user_crud
from ..dependencies import ensure_self, get_current_user
from ..schemas.user import UserProfile, ProfileUpdate, PasswordChange, AccountDelete
from ..utils.image_store import ImageStoreError, get_image_store
from ..utils.jwt_handler import AuthContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


async def _load_self(user_id: str, auth: AuthContext) -> dict:
    ensure_self(user_id, auth)
    user = await user_crud.get_user(user_id)
    if user is None:
        raise NotFound("User not found")
    return user


@router.get("/{user_id}", response_model=UserProfile)
async def read_user(user_id: str, auth: AuthContext = Depends(get_current_user)):
    user = await _load_self(user_id, auth)
    return user_crud.public_identity(user, user_crud.PROFILE_FIELDS)


@router.patch("/{user_id}", response_model=UserProfile)
async def update_user(
    user_id: str,
    body: ProfileUpdate,
    auth: AuthContext = Depends(get_current_user),
    image_store=Depends(get_image_store),
):
    current = await _load_self(user_id, auth)

    changes = body.model_dump(include=body.model_fields_set)
    if "name" in changes and changes["name"] is not None and len(changes["name"]) > 100:
        raise ValidationError("Invalid name format")
    # 본인이 업로드한 이미지의 public id만 저장할 수 있다
    public_id = changes.get("image_public_id")
    if public_id is not None and not public_id.startswith(f"{IMAGE_FOLDER}/user_{auth.user_id}_"):
        raise ValidationError("Invalid image id")

    updated = await user_crud.update_profile(user_id, changes)

    # 프로필 이미지가 바뀌면 이전 이미지는 저장소에서 지운다 (실패해도 수정은 유지)
    old_public_id = current.get("image_public_id")
    if "image_public_id" in changes and old_public_id and old_public_id != changes["image_public_id"]:
        try:
            await run_in_threadpool(image_store.delete, old_public_id)
        except ImageStoreError:
            logger.exception("Failed to delete previous profile image %s", old_public_id)

    return user_crud.public_identity(updated, user_crud.PROFILE_FIELDS)


@router.put("/{user_id}/password")
async def change_password(user_id: str, body: PasswordChange, auth: AuthContext = Depends(get_current_user)):
    ensure_self(user_id, auth)
    if not body.current_password or not body.new_password:
        raise ValidationError("Current password and new password are required")
    if len(body.new_password) < NEW_PASSWORD_MIN_LENGTH:
        raise ValidationError(f"New password must be at least {NEW_PASSWORD_MIN_LENGTH} characters long")

    user = await _load_self(user_id, auth)
    if not await user_crud.check_password(user, body.current_password):
        raise ValidationError("Current password is incorrect")

    await user_crud.set_password(user_id, body.new_password)
    logger.info("Password changed for user %s", user_id)
    return {"success": True}


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    body: AccountDelete,
    response: Response,
    auth: AuthContext = Depends(get_current_user),
):
    ensure_self(user_id, auth)
    if not body.password:
        raise ValidationError("Password is required")

    user = await _load_self(user_id, auth)
    if not await user_crud.check_password(user, body.password):
        raise ValidationError("Incorrect password")

    await user_crud.delete_user_cascade(user_id)
    response.delete_cookie(SESSION_COOKIE_NAME)
    return {"success": True}
