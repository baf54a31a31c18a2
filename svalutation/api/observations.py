from fastapi import APIRouter, Depends, HTTPException, Form
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload, selectinload
from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from ..core.database import get_db, storage_error, id_matches, ensure_exists
from ..core.auth import require_credentials
from ..models.observation import Observation
from ..models.teacher import Teacher
from ..models.student import Student
from ..models.remark import Remark
from .students import StudentResponse
from .teachers import TeacherResponse
from .remarks import RemarkResponse
import logging

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(require_credentials)])


class ObservationResponse(BaseModel):
    id: int
    # None when the referenced row has been deleted since
    teacher: Optional[TeacherResponse]
    student: Optional[StudentResponse]
    remark: Optional[RemarkResponse]
    achieved: bool
    date: datetime

    class Config:
        from_attributes = True


def observation_query():
    """Observations with teacher, student and remark loaded in a fixed number of queries"""
    return select(Observation).options(
        joinedload(Observation.teacher).selectinload(Teacher.classes),
        joinedload(Observation.student).joinedload(Student.school_class),
        joinedload(Observation.remark),
    )


async def list_observations(db: AsyncSession, *criteria) -> List[Observation]:
    result = await db.execute(observation_query().filter(*criteria).order_by(Observation.id))
    return result.scalars().all()


@router.get("/observations", response_model=List[ObservationResponse])
async def get_observations(db: AsyncSession = Depends(get_db)):
    try:
        return await list_observations(db)
    except SQLAlchemyError as e:
        logger.error(f"Error getting observations: {e}")
        raise storage_error(e)


@router.post("/observations", response_model=int)
async def create_observation(teacher_id: int = Form(..., alias="teacher"),
                             student_id: int = Form(..., alias="student"),
                             remark_id: int = Form(..., alias="remark"),
                             achieved: bool = Form(False),
                             date: Optional[datetime] = Form(None),
                             db: AsyncSession = Depends(get_db)):
    try:
        await ensure_exists(db, Teacher, teacher_id, "teacher")
        await ensure_exists(db, Student, student_id, "student")
        await ensure_exists(db, Remark, remark_id, "remark")

        db_observation = Observation(
            teacher_id=teacher_id,
            student_id=student_id,
            remark_id=remark_id,
            achieved=achieved
        )
        if date is not None:
            db_observation.date = date

        db.add(db_observation)
        await db.commit()
        logger.info(f"Created observation {db_observation.id} for student {student_id}")
        return db_observation.id
    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error creating observation: {e}")
        await db.rollback()
        raise storage_error(e)


@router.get("/observations/student/{student_id}", response_model=List[ObservationResponse])
async def get_observations_by_student(student_id: str, db: AsyncSession = Depends(get_db)):
    try:
        return await list_observations(db, id_matches(Observation.student_id, student_id))
    except SQLAlchemyError as e:
        logger.error(f"Error getting observations of student {student_id}: {e}")
        raise storage_error(e)


@router.get("/observations/teacher/{teacher_id}", response_model=List[ObservationResponse])
async def get_observations_by_teacher(teacher_id: str, db: AsyncSession = Depends(get_db)):
    try:
        return await list_observations(db, id_matches(Observation.teacher_id, teacher_id))
    except SQLAlchemyError as e:
        logger.error(f"Error getting observations of teacher {teacher_id}: {e}")
        raise storage_error(e)


@router.get("/observations/teacher/{teacher_id}/student/{student_id}",
            response_model=List[ObservationResponse])
async def get_observations_by_teacher_on_student(teacher_id: str, student_id: str,
                                                 db: AsyncSession = Depends(get_db)):
    try:
        return await list_observations(
            db,
            id_matches(Observation.teacher_id, teacher_id),
            id_matches(Observation.student_id, student_id)
        )
    except SQLAlchemyError as e:
        logger.error(f"Error getting observations of teacher {teacher_id} on student {student_id}: {e}")
        raise storage_error(e)


@router.get("/observations/{observation_id}", response_model=ObservationResponse)
async def get_observation(observation_id: str, db: AsyncSession = Depends(get_db)):
    try:
        result = await db.execute(observation_query().filter(id_matches(Observation.id, observation_id)))
        db_observation = result.scalar_one_or_none()
        if not db_observation:
            raise HTTPException(status_code=404, detail="Observation not found")
        return db_observation
    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error getting observation {observation_id}: {e}")
        raise storage_error(e)


@router.patch("/observations/{observation_id}")
async def update_observation(observation_id: str,
                             teacher_id: Optional[int] = Form(None, alias="teacher"),
                             student_id: Optional[int] = Form(None, alias="student"),
                             remark_id: Optional[int] = Form(None, alias="remark"),
                             achieved: Optional[bool] = Form(None),
                             date: Optional[datetime] = Form(None),
                             db: AsyncSession = Depends(get_db)):
    try:
        result = await db.execute(select(Observation).filter(id_matches(Observation.id, observation_id)))
        db_observation = result.scalar_one_or_none()
        if not db_observation:
            raise HTTPException(status_code=404, detail="Observation not found")

        if teacher_id is not None:
            await ensure_exists(db, Teacher, teacher_id, "teacher")
            db_observation.teacher_id = teacher_id
        if student_id is not None:
            await ensure_exists(db, Student, student_id, "student")
            db_observation.student_id = student_id
        if remark_id is not None:
            await ensure_exists(db, Remark, remark_id, "remark")
            db_observation.remark_id = remark_id
        if achieved is not None:
            db_observation.achieved = achieved
        if date is not None:
            db_observation.date = date

        await db.commit()
        return {"message": "Observation updated"}
    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error updating observation {observation_id}: {e}")
        await db.rollback()
        raise storage_error(e)


@router.delete("/observations/{observation_id}")
async def delete_observation(observation_id: str, db: AsyncSession = Depends(get_db)):
    try:
        await db.execute(delete(Observation).where(id_matches(Observation.id, observation_id)))
        await db.commit()
        return {"message": "Observation deleted"}
    except SQLAlchemyError as e:
        logger.error(f"Error deleting observation {observation_id}: {e}")
        await db.rollback()
        raise storage_error(e)
