from fastapi import APIRouter, Depends, HTTPException, Form
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
from pydantic import BaseModel
from typing import List, Optional
from ..core.database import get_db, storage_error, id_matches
from ..core.auth import require_credentials
from ..models.school_class import SchoolClass
from ..models.teacher import Teacher, classes_teachers
from ..utils.forms import parse_id_list, FormDecodeError
from .students import ClassResponse
import logging

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(require_credentials)])


class TeacherResponse(BaseModel):
    id: int
    name: str
    surname: str
    classes: List[ClassResponse]

    class Config:
        from_attributes = True


def teacher_query():
    return select(Teacher).options(selectinload(Teacher.classes))


async def load_classes(db: AsyncSession, raw: str) -> List[SchoolClass]:
    """Resolve the JSON id list of a ``classes`` form field to class rows"""
    try:
        class_ids = parse_id_list(raw)
    except FormDecodeError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not class_ids:
        return []

    result = await db.execute(
        select(SchoolClass).filter(SchoolClass.id.in_(class_ids)).order_by(SchoolClass.id)
    )
    classes = result.scalars().all()

    missing = set(class_ids) - {c.id for c in classes}
    if missing:
        raise HTTPException(status_code=400, detail=f"Unknown classes {sorted(missing)}")
    return list(classes)


@router.get("/teachers", response_model=List[TeacherResponse])
async def get_teachers(db: AsyncSession = Depends(get_db)):
    try:
        result = await db.execute(teacher_query().order_by(Teacher.id))
        return result.scalars().all()
    except SQLAlchemyError as e:
        logger.error(f"Error getting teachers: {e}")
        raise storage_error(e)


@router.post("/teachers", response_model=int)
async def create_teacher(name: str = Form(...), surname: str = Form(...),
                         classes: Optional[str] = Form(None),
                         db: AsyncSession = Depends(get_db)):
    try:
        db_teacher = Teacher(name=name, surname=surname)
        db_teacher.classes = await load_classes(db, classes) if classes is not None else []

        # Teacher row and junction rows go out in the same transaction
        db.add(db_teacher)
        await db.commit()
        logger.info(f"Created teacher {db_teacher.id} with {len(db_teacher.classes)} classes")
        return db_teacher.id
    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error creating teacher: {e}")
        await db.rollback()
        raise storage_error(e)


@router.get("/teachers/{teacher_id}", response_model=TeacherResponse)
async def get_teacher(teacher_id: str, db: AsyncSession = Depends(get_db)):
    try:
        result = await db.execute(teacher_query().filter(id_matches(Teacher.id, teacher_id)))
        db_teacher = result.scalar_one_or_none()
        if not db_teacher:
            raise HTTPException(status_code=404, detail="Teacher not found")
        return db_teacher
    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error getting teacher {teacher_id}: {e}")
        raise storage_error(e)


@router.patch("/teachers/{teacher_id}")
async def update_teacher(teacher_id: str,
                         name: Optional[str] = Form(None),
                         surname: Optional[str] = Form(None),
                         classes: Optional[str] = Form(None),
                         db: AsyncSession = Depends(get_db)):
    try:
        result = await db.execute(teacher_query().filter(id_matches(Teacher.id, teacher_id)))
        db_teacher = result.scalar_one_or_none()
        if not db_teacher:
            raise HTTPException(status_code=404, detail="Teacher not found")

        if name is not None:
            db_teacher.name = name
        if surname is not None:
            db_teacher.surname = surname
        if classes is not None:
            # The linked set becomes exactly the submitted set; the flush only
            # deletes dropped links and inserts new ones
            db_teacher.classes = await load_classes(db, classes)

        await db.commit()
        return {"message": "Teacher updated"}
    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error updating teacher {teacher_id}: {e}")
        await db.rollback()
        raise storage_error(e)


@router.delete("/teachers/{teacher_id}")
async def delete_teacher(teacher_id: str, db: AsyncSession = Depends(get_db)):
    try:
        await db.execute(delete(classes_teachers).where(id_matches(classes_teachers.c.teacher_id, teacher_id)))
        result = await db.execute(delete(Teacher).where(id_matches(Teacher.id, teacher_id)))
        await db.commit()
        logger.info(f"Deleted teacher {teacher_id} ({result.rowcount} rows)")
        return {"message": "Teacher deleted"}
    except SQLAlchemyError as e:
        logger.error(f"Error deleting teacher {teacher_id}: {e}")
        await db.rollback()
        raise storage_error(e)
