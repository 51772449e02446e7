import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces import (
    PersistenceError,
    SchoolNotFoundError,
    SchoolRepositoryInterface,
)
from app.models.school import School
from app.pipelines.schools.types import SchoolRecordData

logger = logging.getLogger(__name__)


class SQLAlchemySchoolRepository(SchoolRepositoryInterface):
    """SQLAlchemy implementation of the school record store"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, record: SchoolRecordData) -> School:
        db_school = School(
            name=record.name,
            address=record.address,
            city=record.city,
            state=record.state,
            contact=record.contact,
            email_id=record.email_id,
            image=record.image,
        )
        self.session.add(db_school)
        try:
            await self.session.commit()
            await self.session.refresh(db_school)
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise PersistenceError("Failed to insert school") from exc
        return db_school

    async def list_recent(self) -> List[School]:
        try:
            result = await self.session.execute(
                select(School).order_by(School.created_at.desc(), School.id.desc())
            )
        except SQLAlchemyError as exc:
            raise PersistenceError("Failed to list schools") from exc
        return list(result.scalars().all())

    async def delete_by_id(self, school_id: int) -> None:
        try:
            result = await self.session.execute(
                select(School).where(School.id == school_id)
            )
            db_school = result.scalar_one_or_none()
            if db_school is None:
                raise SchoolNotFoundError(school_id)

            await self.session.delete(db_school)
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise PersistenceError(f"Failed to delete school {school_id}") from exc
        logger.info("Deleted school id=%s", school_id)
