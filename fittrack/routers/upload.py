# routers/upload.py
import logging
import time
import uuid

from fastapi import APIRouter, Depends, File, UploadFile
from starlette.concurrency import run_in_threadpool

from ..core.config import IMAGE_FOLDER
from ..core.errors import ValidationError
from ..dependencies import get_current_user
from ..utils.image_store import get_image_store
from ..utils.jwt_handler import AuthContext

logger = logging.getLogger(__name__)

router = APIRouter(tags=["upload"])


@router.post("/upload")
async def upload_image(
    file: UploadFile | None = File(None),
    auth: AuthContext = Depends(get_current_user),
    image_store=Depends(get_image_store),
):
    """프로필 이미지를 업로드하고 공개 URL과 public id를 돌려줍니다."""
    if file is None or not file.filename:
        raise ValidationError("No file uploaded")
    if not (file.content_type or "").startswith("image/"):
        raise ValidationError("File must be an image")

    data = await file.read()
    public_id = f"{IMAGE_FOLDER}/user_{auth.user_id}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"
    image_url, public_id = await run_in_threadpool(image_store.save, data, file.content_type, public_id)
    logger.info("Stored image %s for user %s", public_id, auth.user_id)
    return {"imageUrl": image_url, "publicId": public_id}
