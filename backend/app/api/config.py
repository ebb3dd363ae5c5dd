from fastapi import APIRouter

from app.core.config import settings

router = APIRouter(tags=["config"])


@router.get("/config")
async def get_display_config():
    return {"appTitle": settings.APP_TITLE, "footerText": settings.footer_text}
