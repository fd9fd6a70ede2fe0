"""Settings Routes — read, replace and reset user preferences."""

from fastapi import APIRouter, Depends

from jobbook.api.dependencies import AppContainer, get_container
from jobbook.schemas.settings import AppSettings

router = APIRouter(prefix="/api/v1/settings", tags=["settings"])


@router.get("", response_model=AppSettings)
async def get_preferences(app: AppContainer = Depends(get_container)):
    return await app.preferences.load()


@router.put("", response_model=AppSettings)
async def put_preferences(
    body: AppSettings, app: AppContainer = Depends(get_container),
):
    await app.preferences.save(body)
    return body


@router.delete("", response_model=AppSettings)
async def reset_preferences(app: AppContainer = Depends(get_container)):
    return await app.preferences.reset()
