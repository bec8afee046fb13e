from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from starlette.concurrency import run_in_threadpool

from ..deps import authenticated_username, get_config, get_use_case, request_host
from ..domain import domain_of, user_dn
from ..session import SESSION_COOKIE
from ..use_case import ChangePasswordUseCase
from ..webui import htmx_alert, set_session_cookie, templates, ui_result


router = APIRouter()


def _is_hx(request: Request) -> bool:
    return bool(request.headers.get("HX-Request"))


def _login_error(request: Request, domain: str, username: str, error: str) -> HTMLResponse:
    if _is_hx(request):
        return htmx_alert(ui_result(False, error))
    return templates.TemplateResponse(
        request,
        "login.html",
        {"domain": domain, "username": username, "error": error},
    )


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request):
    domain = domain_of(request_host(request))
    if authenticated_username(request, get_config()):
        return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    return templates.TemplateResponse(
        request,
        "login.html",
        {"domain": domain, "username": "", "error": ""},
    )


@router.post("/login")
async def login(request: Request, use_case: ChangePasswordUseCase = Depends(get_use_case)):
    form = await request.form()
    username = str(form.get("username") or "").strip()
    password = str(form.get("password") or "")
    domain = domain_of(request_host(request))

    if not username:
        return _login_error(request, domain, username, "Enter your username.")
    if not password:
        return _login_error(request, domain, username, "Enter your password.")

    dn = user_dn(username, domain, use_case.config.root_domain)
    ok = await run_in_threadpool(use_case.directory.verify_credential, dn, password)
    if not ok:
        return _login_error(request, domain, username, "Invalid username or password.")

    if _is_hx(request):
        resp: Response = Response(status_code=200, headers={"HX-Redirect": "/"})
    else:
        resp = RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    set_session_cookie(resp, {"username": username, "domain": domain})
    return resp


@router.get("/logout")
def logout():
    resp = RedirectResponse(url="/login", status_code=status.HTTP_303_SEE_OTHER)
    resp.delete_cookie(SESSION_COOKIE)
    return resp
