"""
User preferences stub: validates and echoes, nothing is stored.
"""
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from smartkisan.models.domain import UserSettings
from smartkisan.schemas import SettingsRequest

router = APIRouter(tags=["settings"])

REQUIRED_FIELDS = ("language", "cropType", "region")


@router.get("/settings")
async def get_settings():
    return {"success": True, "settings": UserSettings().model_dump()}


@router.post("/settings")
async def save_settings(req: SettingsRequest):
    submitted = req.settings or {}
    if any(not submitted.get(f) for f in REQUIRED_FIELDS):
        return JSONResponse(status_code=400, content={
            "success": False,
            "error": "Missing required settings fields",
        })
    return {"success": True, "message": "Settings saved successfully", "settings": submitted}


@router.api_route("/settings", methods=["PUT", "PATCH", "DELETE"], include_in_schema=False)
async def settings_method_not_allowed():
    return JSONResponse(status_code=405, content={"success": False, "error": "Method not allowed"})
