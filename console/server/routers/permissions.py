"""
Permission settings API router.

Settings are replaced as a whole collection; lookup shows which setting
governs a given resource.
"""

from fastapi import APIRouter, HTTPException, Query as QueryParam

from docwarden.permission.exceptions import SettingValidationError
from docwarden.permission.models import PermissionSetting

from server.dependencies import get_permission_engine
from server.schemas import PermissionSettingBody, PermissionSettingResponse

router = APIRouter(prefix="/api/permissions", tags=["permissions"])


def _setting_to_response(setting: PermissionSetting) -> PermissionSettingResponse:
    return PermissionSettingResponse(
        **setting.model_dump(),
        is_default=setting.is_default,
    )


@router.get("", response_model=list[PermissionSettingResponse])
async def list_settings() -> list[PermissionSettingResponse]:
    engine = get_permission_engine()
    settings = await engine.settings.list_settings()
    return [_setting_to_response(s) for s in settings]


@router.put("", response_model=list[PermissionSettingResponse])
async def replace_settings(
    body: list[PermissionSettingBody],
) -> list[PermissionSettingResponse]:
    """Replace every permission setting at once."""
    engine = get_permission_engine()
    try:
        stored = await engine.settings.replace_all(
            [PermissionSetting(**s.model_dump()) for s in body]
        )
    except SettingValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return [_setting_to_response(s) for s in stored]


@router.post("/reset", response_model=list[PermissionSettingResponse])
async def reset_settings() -> list[PermissionSettingResponse]:
    """Restore the canonical default settings."""
    engine = get_permission_engine()
    stored = await engine.settings.reset_to_defaults()
    return [_setting_to_response(s) for s in stored]


@router.get("/lookup", response_model=PermissionSettingResponse)
async def lookup_setting(
    resource_type: str = QueryParam(..., description="Resource type, e.g. document"),
    resource_id: str | None = QueryParam(default=None),
) -> PermissionSettingResponse:
    """Return the setting that governs a resource (specific before default)."""
    engine = get_permission_engine()
    setting = await engine.settings.lookup(resource_type, resource_id)
    if setting is None:
        raise HTTPException(status_code=404, detail="No permission setting applies")
    return _setting_to_response(setting)
