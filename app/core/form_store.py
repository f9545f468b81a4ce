# app/core/form_store.py
"""
Persistence for generated forms and their submissions.

A form row and its vector in the similarity index are written in one unit of
work: the row is flushed, the vector upserted, then the transaction is
committed. Each of those steps is bounded by the store's own timeout. If
anything fails or the task is cancelled before the commit returns, the row is
rolled back and the vector removed, so a FormRecord is only ever visible fully
assembled. Nothing runs after the commit, so a stored form is never reported
as a failure.
"""

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Awaitable, Dict, List, Optional, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import PersistenceError
from app.core.qdrant_client import QdrantFormIndex
from app.models.form_submission import FormSubmission
from app.models.forms import Form
from app.schemas.form_schema import FormSchema
from app.schemas.forms import FormRecord, FormSubmissionRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FormStore:

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        index: QdrantFormIndex,
        timeout: float = 10.0
    ):
        self.session_factory = session_factory
        self.index = index
        self.timeout = timeout

    async def _bounded(self, step: str, awaitable: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise PersistenceError(f"{step.capitalize()} timed out after {self.timeout}s") from e

    async def save(
        self,
        owner_id: str,
        title: str,
        content: FormSchema,
        embedding: List[float]
    ) -> FormRecord:
        """
        Persist a validated form with its summary embedding

        Returns:
            The stored FormRecord

        Raises:
            PersistenceError: if the row or the index write failed or timed out
        """
        async with self.session_factory() as db:
            form = Form(
                id=uuid.uuid4(),
                owner_id=owner_id,
                title=title,
                content=content.model_dump(exclude_none=True),
                embedding=list(embedding),
                created_at=datetime.now(timezone.utc),
            )
            index_written = False

            try:
                db.add(form)
                await self._bounded("database flush", db.flush())

                # Set before the call: a timed out upsert may still land
                index_written = True
                await self._bounded("index write", self.index.upsert(
                    form_id=str(form.id),
                    owner_id=owner_id,
                    vector=embedding,
                    payload={
                        "title": content.title,
                        "description": content.description,
                        "fields": content.field_dicts(),
                    }
                ))

                await self._bounded("database commit", db.commit())
            except asyncio.CancelledError:
                logger.warning(f"⚠️ Save of form {form.id} cancelled, undoing")
                await asyncio.shield(self._undo(db, form.id, index_written))
                raise
            except Exception as e:
                await self._undo(db, form.id, index_written)
                logger.error(f"Failed to store form for owner {owner_id}: {e}")
                if isinstance(e, PersistenceError):
                    raise
                raise PersistenceError(f"Failed to store form: {e}") from e

            logger.info(f"📝 Form {form.id} saved for owner {owner_id}")
            return FormRecord.model_validate(form)

    async def _undo(self, db: AsyncSession, form_id: UUID, index_written: bool) -> None:
        try:
            await db.rollback()
        except Exception as e:
            logger.warning(f"⚠️ Rollback of form {form_id} failed: {e}")

        if index_written:
            await self._discard_point(form_id)

    async def _discard_point(self, form_id: UUID) -> None:
        try:
            await asyncio.wait_for(self.index.delete(str(form_id)), timeout=self.timeout)
        except Exception as e:
            logger.warning(f"⚠️ Could not remove orphaned index point {form_id}: {e}")

    async def find_by_owner(self, owner_id: str) -> List[FormRecord]:
        """All forms of an owner, most recent first"""
        async with self.session_factory() as db:
            result = await db.execute(
                select(Form)
                .where(Form.owner_id == owner_id)
                .order_by(Form.created_at.desc())
            )
            return [FormRecord.model_validate(form) for form in result.scalars().all()]

    async def get(self, form_id: UUID) -> Optional[FormRecord]:
        async with self.session_factory() as db:
            result = await db.execute(select(Form).where(Form.id == form_id))
            form = result.scalar_one_or_none()
            return FormRecord.model_validate(form) if form else None

    async def add_submission(self, form_id: UUID, answers: Dict[str, Any]) -> FormSubmissionRecord:
        async with self.session_factory() as db:
            submission = FormSubmission(
                id=uuid.uuid4(),
                form_id=form_id,
                content=answers,
                submitted_at=datetime.now(timezone.utc),
            )
            try:
                db.add(submission)
                await self._bounded("database commit", db.commit())
            except Exception as e:
                await db.rollback()
                logger.error(f"Failed to store submission for form {form_id}: {e}")
                if isinstance(e, PersistenceError):
                    raise
                raise PersistenceError(f"Failed to store submission: {e}") from e

            return FormSubmissionRecord.model_validate(submission)

    async def list_submissions(self, form_id: UUID) -> List[FormSubmissionRecord]:
        """Submissions of a form, most recent first"""
        async with self.session_factory() as db:
            result = await db.execute(
                select(FormSubmission)
                .where(FormSubmission.form_id == form_id)
                .order_by(FormSubmission.submitted_at.desc())
            )
            return [FormSubmissionRecord.model_validate(s) for s in result.scalars().all()]
