import hmac

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse

from api.deps import ADMIN_COOKIE
from config import Settings, get_settings

router = APIRouter(prefix="/api/admin", tags=["admin-auth"])

COOKIE_MAX_AGE = 60 * 60 * 24 * 14
FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def _is_form(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return any(t in content_type for t in FORM_CONTENT_TYPES)


async def _provided_token(request: Request) -> str:
    if _is_form(request):
        form = await request.form()
        return str(form.get("token") or "")
    try:
        body = await request.json()
    except ValueError:
        return ""
    if isinstance(body, dict):
        return str(body.get("token") or "")
    return ""


@router.post("/login")
async def login(request: Request, s: Settings = Depends(get_settings)):
    """Exchange the shared admin secret for an httpOnly cookie."""
    if not s.admin_token:
        return JSONResponse({"ok": False, "error": "ADMIN_TOKEN not configured"}, status_code=500)

    provided = await _provided_token(request)
    if not provided or not hmac.compare_digest(provided.encode("utf-8"), s.admin_token.encode("utf-8")):
        if _is_form(request):
            return RedirectResponse(url="/admin/login?error=1", status_code=303)
        return JSONResponse({"ok": False, "error": "Invalid token"}, status_code=401)

    response = RedirectResponse(url="/admin/submissions", status_code=303)
    response.set_cookie(
        key=ADMIN_COOKIE,
        value=provided,
        httponly=True,
        samesite="lax",
        secure=s.is_production,
        path="/",
        max_age=COOKIE_MAX_AGE,
    )
    return response


@router.post("/logout")
async def logout(s: Settings = Depends(get_settings)):
    response = JSONResponse({"ok": True})
    response.set_cookie(
        key=ADMIN_COOKIE,
        value="",
        httponly=True,
        samesite="lax",
        secure=s.is_production,
        path="/",
        max_age=0,
    )
    return response
