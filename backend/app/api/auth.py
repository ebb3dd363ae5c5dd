from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.services.identity import IdentityResolver, get_identity_resolver

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me")
async def auth_me(request: Request, resolver: IdentityResolver = Depends(get_identity_resolver)):
    email = resolver.resolve(request)
    if not email:
        return JSONResponse(status_code=401, content={"authenticated": False})
    return {"authenticated": True, "email": email}
