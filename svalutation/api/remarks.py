from fastapi import APIRouter, Depends, HTTPException, Form
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from pydantic import BaseModel
from typing import List, Optional
from ..core.database import get_db, storage_error, id_matches
from ..core.auth import require_credentials
from ..models.remark import Remark
import logging

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(require_credentials)])


class RemarkResponse(BaseModel):
    id: int
    skill: str
    level: int
    description: str

    class Config:
        from_attributes = True


@router.get("/remarks", response_model=List[RemarkResponse])
async def get_remarks(db: AsyncSession = Depends(get_db)):
    try:
        result = await db.execute(select(Remark).order_by(Remark.id))
        return result.scalars().all()
    except SQLAlchemyError as e:
        logger.error(f"Error getting remarks: {e}")
        raise storage_error(e)


@router.post("/remarks", response_model=int)
async def create_remark(skill: str = Form(...), level: int = Form(...),
                        description: str = Form(""),
                        db: AsyncSession = Depends(get_db)):
    try:
        db_remark = Remark(skill=skill, level=level, description=description)
        db.add(db_remark)
        await db.commit()
        return db_remark.id
    except SQLAlchemyError as e:
        logger.error(f"Error creating remark: {e}")
        await db.rollback()
        raise storage_error(e)


@router.get("/remarks/{remark_id}", response_model=RemarkResponse)
async def get_remark(remark_id: str, db: AsyncSession = Depends(get_db)):
    try:
        result = await db.execute(select(Remark).filter(id_matches(Remark.id, remark_id)))
        db_remark = result.scalar_one_or_none()
        if not db_remark:
            raise HTTPException(status_code=404, detail="Remark not found")
        return db_remark
    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error getting remark {remark_id}: {e}")
        raise storage_error(e)


@router.patch("/remarks/{remark_id}")
async def update_remark(remark_id: str,
                        skill: Optional[str] = Form(None),
                        level: Optional[int] = Form(None),
                        description: Optional[str] = Form(None),
                        db: AsyncSession = Depends(get_db)):
    try:
        result = await db.execute(select(Remark).filter(id_matches(Remark.id, remark_id)))
        db_remark = result.scalar_one_or_none()
        if not db_remark:
            raise HTTPException(status_code=404, detail="Remark not found")

        if skill is not None:
            db_remark.skill = skill
        if level is not None:
            db_remark.level = level
        if description is not None:
            db_remark.description = description

        await db.commit()
        return {"message": "Remark updated"}
    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error updating remark {remark_id}: {e}")
        await db.rollback()
        raise storage_error(e)


@router.delete("/remarks/{remark_id}")
async def delete_remark(remark_id: str, db: AsyncSession = Depends(get_db)):
    try:
        await db.execute(delete(Remark).where(id_matches(Remark.id, remark_id)))
        await db.commit()
        return {"message": "Remark deleted"}
    except SQLAlchemyError as e:
        logger.error(f"Error deleting remark {remark_id}: {e}")
        await db.rollback()
        raise storage_error(e)
