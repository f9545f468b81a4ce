from fastapi import APIRouter, Body, Depends, HTTPException, status
from typing import Any, Dict, List
from uuid import UUID
import logging

from app.agents.form_generator.form_generator_agent import (
    FormGeneratorAgent,
    get_form_generator_agent,
    get_form_store,
)
from app.core.exceptions import FormGenerationError
from app.core.form_store import FormStore
from app.core.security import get_current_owner_id
from app.core.submission_validator import validate_submission
from app.schemas.forms import (
    FormRecord,
    FormSubmissionRecord,
    FormSummary,
    GenerateFormRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/forms",
    tags=["Forms"]
)


def _to_http(error: FormGenerationError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.to_detail())


@router.post("/generate", response_model=FormRecord, status_code=status.HTTP_201_CREATED)
async def generate_form(
    body: GenerateFormRequest,
    agent: FormGeneratorAgent = Depends(get_form_generator_agent),
    owner_id: str = Depends(get_current_owner_id)
):
    """
    Generate a form from a natural language prompt

    Flow:
    1. Embed the prompt and pull the owner's similar forms as context
    2. Ask Gemini for a schema and validate it strictly
    3. Embed the new form and store it

    Nothing is stored when any step fails.
    """
    logger.info(f"🤖 Generating form for owner {owner_id}: '{body.prompt}'")

    try:
        return await agent.generate(body.prompt, owner_id)
    except FormGenerationError as e:
        raise _to_http(e)


@router.get("/", response_model=List[FormSummary])
async def list_forms(
    store: FormStore = Depends(get_form_store),
    owner_id: str = Depends(get_current_owner_id)
):
    try:
        return await store.find_by_owner(owner_id)
    except FormGenerationError as e:
        raise _to_http(e)


@router.get("/{form_id}", response_model=FormSummary)
async def get_form(form_id: UUID, store: FormStore = Depends(get_form_store)):
    """Public: anyone with the link can render and fill the form"""
    form = await store.get(form_id)

    if not form:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Form not found"
        )

    return form


@router.post(
    "/{form_id}/submissions",
    response_model=FormSubmissionRecord,
    status_code=status.HTTP_201_CREATED
)
async def submit_response(
    form_id: UUID,
    answers: Dict[str, Any] = Body(...),
    store: FormStore = Depends(get_form_store)
):
    form = await store.get(form_id)

    if not form:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Form not found"
        )

    try:
        cleaned = validate_submission(form.content, answers)
        submission = await store.add_submission(form_id, cleaned)
    except FormGenerationError as e:
        raise _to_http(e)

    logger.info(f"✅ Submission {submission.id} stored for form {form_id}")
    return submission


@router.get("/{form_id}/submissions", response_model=List[FormSubmissionRecord])
async def list_submissions(
    form_id: UUID,
    store: FormStore = Depends(get_form_store),
    owner_id: str = Depends(get_current_owner_id)
):
    form = await store.get(form_id)

    if not form or form.owner_id != owner_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Form not found or unauthorized"
        )

    return await store.list_submissions(form_id)
