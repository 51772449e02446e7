from abc import ABC, abstractmethod
from typing import List

from app.models.school import School
from app.pipelines.schools.types import SchoolRecordData


class PersistenceError(RuntimeError):
    """Raised when the record store cannot complete an operation."""


class SchoolNotFoundError(LookupError):
    """Raised when no school exists with the requested id."""

    def __init__(self, school_id: int) -> None:
        self.school_id = school_id
        super().__init__(f"School {school_id} not found")


class SchoolRepositoryInterface(ABC):
    """Persistence contract for school records"""

    @abstractmethod
    async def create(self, record: SchoolRecordData) -> School:
        ...

    @abstractmethod
    async def list_recent(self) -> List[School]:
        ...

    @abstractmethod
    async def delete_by_id(self, school_id: int) -> None:
        ...
