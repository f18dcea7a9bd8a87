from __future__ import annotations

from datetime import date, timedelta
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, FastAPI, Form, HTTPException, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from coin_trail import actions
from coin_trail.auth import get_current_user_id
from coin_trail.config import load_config, with_defaults
from coin_trail.core.cashflow import build_cashflow
from coin_trail.core.categorizer import index_categories
from coin_trail.core.models import CategoryType
from coin_trail.database import (
    fetch_recent_transactions,
    fetch_transactions,
    get_transaction,
    list_categories,
    transaction_years,
)
from coin_trail.errors import ErrorKind
from coin_trail.presenter import format_currency, month_label, present
from coin_trail.utils import parse_month, parse_year

TEMPLATES_DIR = Path(__file__).with_name("templates")

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["currency"] = format_currency
templates.env.globals["month_label"] = month_label

router = APIRouter()


def _config(request: Request) -> Dict[str, object]:
    return request.app.state.config


def _db_path(request: Request) -> str:
    return str(_config(request)["db_path"])


def _challenge(request: Request) -> HTTPException:
    realm = _config(request).get("realm", "Coin Trail")
    return HTTPException(
        status_code=401,
        detail="Unauthorized",
        headers={"WWW-Authenticate": f'Basic realm="{realm}"', "Cache-Control": "no-store"},
    )


def current_user_id(request: Request) -> Optional[int]:
    return get_current_user_id(_db_path(request), request.headers.get("Authorization"))


def require_user(request: Request, user_id: Optional[int] = Depends(current_user_id)) -> int:
    if user_id is None:
        raise _challenge(request)
    return user_id


def _parse_type(value: Optional[str]) -> Optional[CategoryType]:
    try:
        return CategoryType(value) if value else None
    except ValueError:
        return None


def _selectable_years(db_path: str, user_id: int, selected: int, today: Optional[date] = None) -> List[int]:
    return sorted(set(transaction_years(db_path, user_id, today)) | {selected})


def _transactions_url(year: int, month: int, **extra: str) -> str:
    query = {"year": year, "month": month}
    query.update({key: value for key, value in extra.items() if value})
    return f"/dashboard/transactions?{urlencode(query)}"


@router.get("/")
async def index(request: Request):
    return templates.TemplateResponse(request, "index.html", {})


@router.get("/dashboard")
def dashboard(
    request: Request,
    cfyear: Optional[str] = None,
    message: Optional[str] = None,
    error: Optional[str] = None,
    user_id: int = Depends(require_user),
):
    db_path = _db_path(request)
    year = parse_year(cfyear)
    categories = list_categories(db_path)
    buckets, _ = build_cashflow(fetch_transactions(db_path, user_id, year), categories, year)
    limit = int(_config(request).get("recent_transactions", 5))
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "view": present(buckets, year),
            "years": _selectable_years(db_path, user_id, year),
            "recent": fetch_recent_transactions(db_path, user_id, limit),
            "categories_by_id": index_categories(categories),
            "message": message,
            "error": error,
        },
    )


@router.get("/dashboard/transactions")
def transactions(
    request: Request,
    year: Optional[str] = None,
    month: Optional[str] = None,
    message: Optional[str] = None,
    error: Optional[str] = None,
    user_id: int = Depends(require_user),
):
    db_path = _db_path(request)
    today = date.today()
    selected_year = parse_year(year, today)
    selected_month = parse_month(month, today)
    return templates.TemplateResponse(
        request,
        "transactions.html",
        {
            "year": selected_year,
            "month": selected_month,
            "years": _selectable_years(db_path, user_id, selected_year, today),
            "transactions": fetch_transactions(db_path, user_id, selected_year, selected_month),
            "categories_by_id": index_categories(list_categories(db_path)),
            "message": message,
            "error": error,
        },
    )


def _render_form(request: Request, transaction_type: CategoryType, values: Dict[str, str],
                 error: Optional[str] = None, status_code: int = 200):
    today = date.today()
    return templates.TemplateResponse(
        request,
        "new_transaction.html",
        {
            "transaction_type": transaction_type.value,
            "categories": list_categories(_db_path(request), transaction_type),
            "values": values,
            "today": today.isoformat(),
            "max_date": (today + timedelta(days=1)).isoformat(),
            "error": error,
        },
        status_code=status_code,
    )


@router.get("/dashboard/transactions/new")
def new_transaction(
    request: Request,
    selected_type: Optional[str] = Query(None, alias="type"),
    user_id: int = Depends(require_user),
):
    transaction_type = _parse_type(selected_type) or CategoryType.INCOME
    return _render_form(request, transaction_type, {})


@router.post("/dashboard/transactions/new")
def create_transaction(
    request: Request,
    transaction_type: str = Form(""),
    category_id: str = Form(""),
    transaction_date: str = Form(""),
    amount: str = Form(""),
    description: str = Form(""),
    user_id: Optional[int] = Depends(current_user_id),
):
    values = {
        "transaction_type": transaction_type,
        "category_id": category_id,
        "transaction_date": transaction_date,
        "amount": amount,
        "description": description,
    }
    data = {key: (value if value != "" else None) for key, value in values.items()}
    data["description"] = description

    result = actions.create_transaction(_db_path(request), user_id, data)
    if result.kind == ErrorKind.UNAUTHORIZED:
        raise _challenge(request)
    if result.error:
        return _render_form(
            request,
            _parse_type(transaction_type) or CategoryType.INCOME,
            values,
            error=result.message,
            status_code=400,
        )

    created_on = get_transaction(_db_path(request), result.id, user_id).transaction_date
    return RedirectResponse(
        _transactions_url(created_on.year, created_on.month, message="Transaction created"),
        status_code=303,
    )


@router.post("/dashboard/transactions/{transaction_id}/delete")
def delete_transaction(
    request: Request,
    transaction_id: int,
    year: str = Form(""),
    month: str = Form(""),
    user_id: Optional[int] = Depends(current_user_id),
):
    result = actions.delete_transaction(_db_path(request), user_id, transaction_id)
    if result.kind == ErrorKind.UNAUTHORIZED:
        raise _challenge(request)

    url = _transactions_url(
        parse_year(year),
        parse_month(month),
        message=None if result.error else "Transaction deleted",
        error=result.message if result.error else None,
    )
    return RedirectResponse(url, status_code=303)


@router.get("/api/cashflow")
def cashflow_api(request: Request, year: Optional[str] = None, user_id: int = Depends(require_user)):
    db_path = _db_path(request)
    selected_year = parse_year(year)
    buckets, _ = build_cashflow(
        fetch_transactions(db_path, user_id, selected_year),
        list_categories(db_path),
        selected_year,
    )
    return JSONResponse(present(buckets, selected_year).to_dict(), headers={"Cache-Control": "no-store"})


def create_app(config: Optional[Dict[str, object]] = None) -> FastAPI:
    app = FastAPI(title="Coin Trail")
    app.state.config = with_defaults(config) if config is not None else load_config()
    app.include_router(router)
    return app


app = create_app()
