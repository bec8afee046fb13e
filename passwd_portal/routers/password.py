from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from starlette.concurrency import run_in_threadpool

from ..deps import get_config, get_use_case, identity_context
from ..use_case import ChangeOutcome, ChangePasswordUseCase
from ..webui import htmx_alert, outcome_result, templates


router = APIRouter()

FORM_FIELDS = ("oldpassword", "password", "password2")


def _is_hx(request: Request) -> bool:
    return bool(request.headers.get("HX-Request"))


def _render(request: Request, outcome: ChangeOutcome) -> HTMLResponse:
    if _is_hx(request):
        return htmx_alert(outcome_result(outcome))
    return templates.TemplateResponse(
        request,
        "password.html",
        {"outcome": outcome, "username": outcome.username, "domain": outcome.domain},
    )


@router.get("/", response_class=HTMLResponse)
def password_page(request: Request, use_case: ChangePasswordUseCase = Depends(get_use_case)):
    ctx = identity_context(request, get_config())
    if not ctx.principal:
        if _is_hx(request):
            return Response(status_code=status.HTTP_401_UNAUTHORIZED, headers={"HX-Redirect": "/login"})
        return RedirectResponse(url="/login", status_code=status.HTTP_303_SEE_OTHER)

    # Без полей формы use case всегда возвращает idle: только показать форму.
    return _render(request, use_case.execute(ctx))


@router.post("/", response_class=HTMLResponse)
async def password_change(request: Request, use_case: ChangePasswordUseCase = Depends(get_use_case)):
    form = await request.form()
    fields = {name: str(form.get(name) or "") for name in FORM_FIELDS if name in form}
    ctx = identity_context(request, get_config(), fields)

    # LDAP-вызовы блокирующие: выполняем в threadpool.
    outcome = await run_in_threadpool(use_case.execute, ctx)
    return _render(request, outcome)
