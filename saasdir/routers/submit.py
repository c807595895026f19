from __future__ import annotations

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse

from saasdir.core import csrf
from saasdir.core.errors import SlugConflictError, ValidationError
from saasdir.db.models import PRICING_OPTIONS
from saasdir.domain.submissions import OTHER_CATEGORY, SubmissionForm
from saasdir.services.catalog_service import CatalogService
from saasdir.services.session_service import current_user
from saasdir.services.storage_service import UploadedFile
from saasdir.services.submission_service import SubmissionService

router = APIRouter(prefix="/submit", tags=["submit"])
catalog = CatalogService()
submission_service = SubmissionService()


async def _read_upload(upload: UploadFile | None) -> UploadedFile | None:
    if not upload or not upload.filename:
        return None
    data = await upload.read()
    return UploadedFile(filename=upload.filename, content_type=upload.content_type or "", data=data)


def _form_page(request: Request, form: SubmissionForm, error: str = "", field: str = "", status_code: int = 200):
    return csrf.render_protected(
        request,
        "submit.html",
        {
            "user": current_user(request),
            "categories": catalog.list_categories(),
            "pricing_options": PRICING_OPTIONS,
            "other_category": OTHER_CATEGORY,
            "form": form,
            "error": error,
            "error_field": field,
        },
        status_code=status_code,
    )


@router.get("", response_class=HTMLResponse)
def submit_page(request: Request):
    return _form_page(request, SubmissionForm())


@router.post("", response_class=HTMLResponse)
async def submit_product(
    request: Request,
    name: str = Form(""),
    description: str = Form(""),
    url: str = Form(""),
    category: str = Form(""),
    custom_category: str = Form(""),
    pricing: str = Form(""),
    slug: str = Form(""),
    email: str = Form(""),
    logo: UploadFile | None = File(None),
    image: UploadFile | None = File(None),
    csrf_token: str = Form(""),
):
    csrf.validate_csrf(request, csrf_token)
    form = SubmissionForm(
        name=name,
        description=description,
        url=url,
        category=category,
        custom_category=custom_category,
        pricing=pricing,
        slug=slug,
        email=email,
    )
    try:
        submission = submission_service.create_submission(
            form,
            logo=await _read_upload(logo),
            image=await _read_upload(image),
        )
    except ValidationError as exc:
        return _form_page(request, form, error=exc.message, field=exc.field or "", status_code=400)
    except SlugConflictError as exc:
        return _form_page(request, form, error=f"{exc.message}. Please try again.", field="slug", status_code=409)
    return csrf.render_protected(
        request,
        "submit_done.html",
        {"user": current_user(request), "submission": submission},
    )
