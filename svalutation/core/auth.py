from typing import Optional
from passlib.context import CryptContext
from fastapi import HTTPException, Depends, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from .database import get_db
from ..models.credential import Credential
import logging

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
security = HTTPBasic(auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


async def verify_credentials(db: AsyncSession, username: str, password: str) -> bool:
    """
    Check a username/password pair against the credentials table.

    An unknown username fails closed: no comparison against an empty hash is
    attempted, but a dummy verification still runs so both failure paths
    take the same time. Hashing runs in the threadpool, off the event loop.
    """
    result = await db.execute(select(Credential).filter(Credential.username == username))
    credential = result.scalar_one_or_none()

    if credential is None:
        logger.warning(f"No credentials stored for user '{username}'")
        await run_in_threadpool(pwd_context.dummy_verify)
        return False

    try:
        return await run_in_threadpool(verify_password, password, credential.password)
    except ValueError as e:
        logger.error(f"Stored hash for user '{username}' is unusable: {e}")
        return False


def unauthorized(realm: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Authentication failed, you shall not pass",
        headers={"WWW-Authenticate": f'Basic realm="{realm}"'},
    )


async def require_credentials(
        request: Request,
        credentials: Optional[HTTPBasicCredentials] = Depends(security),
        db: AsyncSession = Depends(get_db)) -> str:
    if credentials is None:
        logger.warning("Request without basic auth credentials")
        raise unauthorized(request.app.state.settings.auth_realm)

    if not await verify_credentials(db, credentials.username, credentials.password):
        logger.warning(f"Authentication failed for user '{credentials.username}'")
        raise unauthorized(request.app.state.settings.auth_realm)

    return credentials.username
