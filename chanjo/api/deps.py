from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from chanjo import crud, models, schemas
from chanjo.core import security
from chanjo.db.session import get_db

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_mother(
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> models.Mother:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid Authorization header",
        )
    try:
        payload = security.decode_access_token(credentials.credentials)
        token_data = schemas.TokenPayload(**payload)
    except (JWTError, ValidationError):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid token",
        )
    mother = crud.mother.get(db, id=token_data.sub) if token_data.sub else None
    if not mother:
        raise HTTPException(status_code=404, detail="User not found")
    return mother
