from fastapi import APIRouter, HTTPException, Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from ..settings import settings

router = APIRouter(prefix="/auth", tags=["auth"])

# Tokens are minted by the hosted auth provider; this service only verifies them
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)


class User(BaseModel):
	user_id: str
	email: str | None = None


def decode_token(token: str) -> dict:
	options = {"verify_aud": settings.auth_jwt_audience is not None}
	return jwt.decode(
		token,
		settings.auth_jwt_secret,
		algorithms=[settings.auth_jwt_algorithm],
		audience=settings.auth_jwt_audience,
		options=options,
	)


def get_current_user(token: str | None = Depends(oauth2_scheme)) -> User:
	credentials_exception = HTTPException(
		status_code=401,
		detail="Could not validate credentials",
		headers={"WWW-Authenticate": "Bearer"},
	)
	if not token:
		raise credentials_exception
	try:
		payload = decode_token(token)
	except JWTError:
		raise credentials_exception
	user_id: str | None = payload.get("sub")
	if not user_id:
		raise credentials_exception
	return User(user_id=user_id, email=payload.get("email"))


@router.get("/me", response_model=User)
async def me(user: User = Depends(get_current_user)):
	return user
