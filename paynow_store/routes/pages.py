"""Storefront pages: home and payment result views"""

import os
from typing import Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from ..core.config import settings
from ..database.products import product_db
from ..services.scenarios import TEST_PHONE_NUMBERS

templates_dir = os.path.join(os.path.dirname(__file__), "..", "templates")
templates = Jinja2Templates(directory=templates_dir)

router = APIRouter(tags=["Pages"])


@router.get("/", response_class=HTMLResponse)
async def home(request: Request):
    """Storefront home page"""
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "title": settings.app_name,
            "products": product_db.get_all_products(),
            "test_mode": not settings.is_production,
            "test_numbers": TEST_PHONE_NUMBERS,
        },
    )


@router.get("/payment/success", response_class=HTMLResponse)
async def payment_success(request: Request):
    """Payment confirmation page"""
    return templates.TemplateResponse(
        request,
        "success.html",
        {"title": "Payment Successful"},
    )


@router.get("/payment/failed", response_class=HTMLResponse)
async def payment_failed(request: Request, error: Optional[str] = Query(None)):
    """Payment failure page, showing the error passed by the checkout"""
    return templates.TemplateResponse(
        request,
        "failed.html",
        {"title": "Payment Failed", "error": error},
    )
