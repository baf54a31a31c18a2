from fastapi import APIRouter, Depends, HTTPException, Form
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload
from pydantic import BaseModel, Field
from typing import List, Optional
from ..core.database import get_db, storage_error, id_matches, ensure_exists
from ..core.auth import require_credentials
from ..models.school_class import SchoolClass
from ..models.student import Student
import logging

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(require_credentials)])


class ClassResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class StudentResponse(BaseModel):
    id: int
    name: str
    surname: str
    school_class: Optional[ClassResponse] = Field(None, serialization_alias="class")

    class Config:
        from_attributes = True


def student_query():
    return select(Student).options(joinedload(Student.school_class))


@router.get("/students", response_model=List[StudentResponse])
async def get_students(db: AsyncSession = Depends(get_db)):
    try:
        result = await db.execute(student_query().order_by(Student.id))
        return result.scalars().all()
    except SQLAlchemyError as e:
        logger.error(f"Error getting students: {e}")
        raise storage_error(e)


@router.post("/students", response_model=int)
async def create_student(name: str = Form(...), surname: str = Form(...),
                         class_id: Optional[int] = Form(None, alias="class"),
                         db: AsyncSession = Depends(get_db)):
    try:
        if class_id is not None:
            await ensure_exists(db, SchoolClass, class_id, "class")

        db_student = Student(name=name, surname=surname, class_id=class_id)
        db.add(db_student)
        await db.commit()
        logger.info(f"Created student {db_student.id}")
        return db_student.id
    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error creating student: {e}")
        await db.rollback()
        raise storage_error(e)


@router.get("/students/class/{class_id}", response_model=List[StudentResponse])
async def get_students_by_class(class_id: str, db: AsyncSession = Depends(get_db)):
    try:
        result = await db.execute(
            student_query().filter(id_matches(Student.class_id, class_id)).order_by(Student.id)
        )
        return result.scalars().all()
    except SQLAlchemyError as e:
        logger.error(f"Error getting students of class {class_id}: {e}")
        raise storage_error(e)


@router.get("/students/{student_id}", response_model=StudentResponse)
async def get_student(student_id: str, db: AsyncSession = Depends(get_db)):
    try:
        result = await db.execute(student_query().filter(id_matches(Student.id, student_id)))
        db_student = result.scalar_one_or_none()
        if not db_student:
            raise HTTPException(status_code=404, detail="Student not found")
        return db_student
    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error getting student {student_id}: {e}")
        raise storage_error(e)


@router.patch("/students/{student_id}")
async def update_student(student_id: str,
                         name: Optional[str] = Form(None),
                         surname: Optional[str] = Form(None),
                         class_id: Optional[int] = Form(None, alias="class"),
                         db: AsyncSession = Depends(get_db)):
    try:
        result = await db.execute(select(Student).filter(id_matches(Student.id, student_id)))
        db_student = result.scalar_one_or_none()
        if not db_student:
            raise HTTPException(status_code=404, detail="Student not found")

        # Only fields that were sent (and not blank) are written
        if name is not None:
            db_student.name = name
        if surname is not None:
            db_student.surname = surname
        if class_id is not None:
            await ensure_exists(db, SchoolClass, class_id, "class")
            db_student.class_id = class_id

        await db.commit()
        return {"message": "Student updated"}
    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error updating student {student_id}: {e}")
        await db.rollback()
        raise storage_error(e)


@router.delete("/students/{student_id}")
async def delete_student(student_id: str, db: AsyncSession = Depends(get_db)):
    try:
        result = await db.execute(delete(Student).where(id_matches(Student.id, student_id)))
        await db.commit()
        logger.info(f"Deleted student {student_id} ({result.rowcount} rows)")
        return {"message": "Student deleted"}
    except SQLAlchemyError as e:
        logger.error(f"Error deleting student {student_id}: {e}")
        await db.rollback()
        raise storage_error(e)
