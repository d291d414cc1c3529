"""
SQL Record Store

SQLAlchemy-backed StandardRecordStore. Each layer is one table; mutable
records are upserted by primary key with session.merge, or inserted
create-only where a key conflict must be reported. Blocking
session work runs in a worker thread so the async engine can gather
layer reads concurrently.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Callable, Iterable, TypeVar

from sqlalchemy import Column, DateTime, Integer, String, Text, create_engine, delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from standards_hub.errors import StoreUnavailable
from standards_hub.schemas.base import DEFAULT_STATE, StandardSource, Subject
from standards_hub.schemas.standards import (
    BaseStandard,
    DistrictAddition,
    SchoolOverride,
    StateStandardOverride,
)
from standards_hub.store.base import (
    DistrictAdditionKey,
    EntityKey,
    MutableEntity,
    SchoolOverrideKey,
    StandardRecordStore,
)

logger = logging.getLogger(__name__)

Base = declarative_base()

R = TypeVar("R")


class BaseStandardRow(Base):
    __tablename__ = "base_standards"

    source = Column(String(16), primary_key=True)
    state_code = Column(String(8), primary_key=True)
    subject = Column(String(32), primary_key=True)
    grade = Column(Integer, primary_key=True)
    standard_id = Column(String(128), primary_key=True)
    framework = Column(String(64), nullable=False)
    description = Column(Text, nullable=False)
    source_name = Column(String(128))


class StateOverrideRow(Base):
    __tablename__ = "state_standard_overrides"

    state_code = Column(String(8), primary_key=True)
    subject = Column(String(32), primary_key=True)
    grade = Column(Integer, primary_key=True)
    replaces_standard_id = Column(String(128), primary_key=True)
    new_standard_id = Column(String(128), nullable=False)
    description = Column(Text, nullable=False)


class DistrictStandardRow(Base):
    __tablename__ = "district_standards"

    district_id = Column(String(64), primary_key=True)
    standard_id = Column(String(128), primary_key=True)
    subject = Column(String(32), nullable=False, index=True)
    grade = Column(Integer, nullable=False)
    description = Column(Text, nullable=False)
    framework = Column(String(64), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class SchoolOverrideRow(Base):
    __tablename__ = "school_standard_overrides"

    school_id = Column(String(64), primary_key=True)
    standard_id = Column(String(128), primary_key=True)
    custom_description = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)


def _to_row(entity: MutableEntity) -> Base:
    if isinstance(entity, DistrictAddition):
        return DistrictStandardRow(
            district_id=entity.district_id,
            standard_id=entity.standard_id,
            subject=entity.subject.value,
            grade=entity.grade,
            description=entity.description,
            framework=entity.framework,
            created_at=entity.created_at,
        )
    if isinstance(entity, SchoolOverride):
        return SchoolOverrideRow(
            school_id=entity.school_id,
            standard_id=entity.target_standard_id,
            custom_description=entity.custom_description,
            created_at=entity.created_at,
        )
    raise TypeError(f"Not a mutable standards entity: {type(entity).__name__}")


class SQLStandardStore(StandardRecordStore):
    """Record store over any SQLAlchemy-supported database."""

    def __init__(self, database_url: str, **engine_kwargs: Any) -> None:
        self.engine = create_engine(database_url, **engine_kwargs)
        self._session_factory = sessionmaker(bind=self.engine)

    def init_db(self) -> None:
        Base.metadata.create_all(self.engine)

    def seed_base(self, standards: Iterable[BaseStandard]) -> int:
        """Upsert base standards; returns how many rows were written."""
        count = 0
        with self._session_factory.begin() as session:
            for standard in standards:
                session.merge(BaseStandardRow(
                    source=standard.source.value,
                    state_code=DEFAULT_STATE if standard.source == StandardSource.NATIONAL else standard.state_code,
                    subject=standard.subject.value,
                    grade=standard.grade,
                    standard_id=standard.standard_id,
                    framework=standard.framework,
                    description=standard.description,
                    source_name=standard.source_name,
                ))
                count += 1
        logger.info(f"Seeded {count} base standards")
        return count

    def seed_state_overrides(self, overrides: Iterable[StateStandardOverride]) -> int:
        count = 0
        with self._session_factory.begin() as session:
            for override in overrides:
                session.merge(StateOverrideRow(
                    state_code=override.state_code,
                    subject=override.subject.value,
                    grade=override.grade,
                    replaces_standard_id=override.replaces_standard_id,
                    new_standard_id=override.new_standard_id,
                    description=override.description,
                ))
                count += 1
        logger.info(f"Seeded {count} state overrides")
        return count

    async def _run(self, operation: str, work: Callable[[Session], R]) -> R:
        def call() -> R:
            with self._session_factory.begin() as session:
                return work(session)

        try:
            return await asyncio.to_thread(call)
        except SQLAlchemyError as e:
            logger.error(f"Store operation {operation} failed: {e}")
            raise StoreUnavailable(operation, str(e)) from e

    async def fetch_base(
        self,
        source: StandardSource,
        subject: Subject,
        grade: int,
        state_code: str = DEFAULT_STATE,
    ) -> list[BaseStandard]:
        source = StandardSource(source)
        if source == StandardSource.NATIONAL:
            state_code = DEFAULT_STATE

        def work(session: Session) -> list[BaseStandard]:
            rows = session.scalars(
                select(BaseStandardRow)
                .where(
                    BaseStandardRow.source == source.value,
                    BaseStandardRow.state_code == state_code,
                    BaseStandardRow.subject == Subject(subject).value,
                    BaseStandardRow.grade == grade,
                )
                .order_by(BaseStandardRow.standard_id)
            ).all()
            return [
                BaseStandard(
                    standard_id=r.standard_id,
                    framework=r.framework,
                    description=r.description,
                    subject=r.subject,
                    grade=r.grade,
                    source=r.source,
                    state_code=r.state_code,
                    source_name=r.source_name,
                )
                for r in rows
            ]

        return await self._run("fetch_base", work)

    async def fetch_state_overrides(
        self, state_code: str, subject: Subject, grade: int
    ) -> list[StateStandardOverride]:
        def work(session: Session) -> list[StateStandardOverride]:
            rows = session.scalars(
                select(StateOverrideRow)
                .where(
                    StateOverrideRow.state_code == state_code,
                    StateOverrideRow.subject == Subject(subject).value,
                    StateOverrideRow.grade == grade,
                )
                .order_by(StateOverrideRow.replaces_standard_id)
            ).all()
            return [
                StateStandardOverride(
                    state_code=r.state_code,
                    subject=r.subject,
                    grade=r.grade,
                    replaces_standard_id=r.replaces_standard_id,
                    new_standard_id=r.new_standard_id,
                    description=r.description,
                )
                for r in rows
            ]

        return await self._run("fetch_state_overrides", work)

    async def fetch_district_additions(
        self, district_id: str, subject: Subject, grade: int
    ) -> list[DistrictAddition]:
        def work(session: Session) -> list[DistrictAddition]:
            rows = session.scalars(
                select(DistrictStandardRow)
                .where(
                    DistrictStandardRow.district_id == district_id,
                    DistrictStandardRow.subject == Subject(subject).value,
                    DistrictStandardRow.grade == grade,
                )
                .order_by(DistrictStandardRow.created_at)
            ).all()
            return [
                DistrictAddition(
                    standard_id=r.standard_id,
                    district_id=r.district_id,
                    subject=r.subject,
                    grade=r.grade,
                    description=r.description,
                    framework=r.framework,
                    created_at=r.created_at,
                )
                for r in rows
            ]

        return await self._run("fetch_district_additions", work)

    async def fetch_school_overrides(self, school_id: str) -> list[SchoolOverride]:
        def work(session: Session) -> list[SchoolOverride]:
            rows = session.scalars(
                select(SchoolOverrideRow)
                .where(SchoolOverrideRow.school_id == school_id)
                .order_by(SchoolOverrideRow.created_at)
            ).all()
            return [
                SchoolOverride(
                    school_id=r.school_id,
                    target_standard_id=r.standard_id,
                    custom_description=r.custom_description,
                    created_at=r.created_at,
                )
                for r in rows
            ]

        return await self._run("fetch_school_overrides", work)

    async def persist(self, entity: MutableEntity) -> None:
        row = _to_row(entity)
        await self._run("persist", lambda session: session.merge(row))

    async def insert(self, entity: MutableEntity) -> bool:
        row = _to_row(entity)

        def call() -> None:
            with self._session_factory.begin() as session:
                session.add(row)

        try:
            await asyncio.to_thread(call)
        except IntegrityError:
            logger.debug(f"Insert skipped, {type(entity).__name__} key already exists")
            return False
        except SQLAlchemyError as e:
            logger.error(f"Store operation insert failed: {e}")
            raise StoreUnavailable("insert", str(e)) from e
        return True

    async def delete(self, key: EntityKey) -> bool:
        if isinstance(key, DistrictAdditionKey):
            stmt = delete(DistrictStandardRow).where(
                DistrictStandardRow.district_id == key.district_id,
                DistrictStandardRow.standard_id == key.standard_id,
            )
        elif isinstance(key, SchoolOverrideKey):
            stmt = delete(SchoolOverrideRow).where(
                SchoolOverrideRow.school_id == key.school_id,
                SchoolOverrideRow.standard_id == key.standard_id,
            )
        else:
            raise TypeError(f"Not a standards entity key: {key!r}")

        removed = await self._run("delete", lambda session: session.execute(stmt).rowcount)
        return removed > 0
