from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException, Depends
from fastapi.security import OAuth2PasswordRequestForm, OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel
import logging

from ..settings import settings
from sqlalchemy.orm import Session
from ..db import get_db
from ..models import AdminUser

router = APIRouter(prefix="/admin", tags=["admin-auth"])

logging.getLogger('passlib').setLevel(logging.ERROR)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/admin/token")
logger = logging.getLogger(__name__)


class Token(BaseModel):
	access_token: str
	token_type: str = "bearer"
	message: str = "Login successful!"


class Admin(BaseModel):
	email: str


class LoginRequest(BaseModel):
	email: Optional[str] = None
	password: Optional[str] = None


def _bcrypt_safe(password: str) -> str:
	# Truncate password to 72 bytes for bcrypt compatibility
	password_bytes = password.encode('utf-8')
	if len(password_bytes) > 72:
		password_bytes = password_bytes[:72]
	return password_bytes.decode('utf-8', errors='ignore')


def hash_password(password: str) -> str:
	return pwd_context.hash(_bcrypt_safe(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
	return pwd_context.verify(_bcrypt_safe(plain_password), hashed_password)


def ensure_seed_admin(db: Session) -> None:
	email = (settings.seed_admin_email or "").strip().lower()
	password = settings.seed_admin_password
	if not email or not password:
		return
	if db.get(AdminUser, email) is not None:
		return
	db.add(AdminUser(email=email, password_hash=hash_password(password)))
	db.commit()
	logger.info("Seed admin %s created", email)


def authenticate_admin(db: Session, email: str, password: str) -> Optional[Admin]:
	row = db.get(AdminUser, email.strip().lower())
	if row and verify_password(password, row.password_hash):
		return Admin(email=row.email)
	return None


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
	to_encode = data.copy()
	expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
	to_encode.update({"exp": expire})
	encoded_jwt = jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
	return encoded_jwt


@router.post("/login", response_model=Token)
async def login(req: LoginRequest, db: Session = Depends(get_db)):
	if not req.email or not req.password:
		raise HTTPException(status_code=400, detail="Email and password are required.")
	admin = authenticate_admin(db, req.email, req.password)
	if not admin:
		raise HTTPException(status_code=401, detail="Wrong email or password.")
	return Token(access_token=create_access_token({"sub": admin.email}))


@router.post("/token", response_model=Token)
async def token(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
	# OAuth2 password flow; the username field carries the admin email
	admin = authenticate_admin(db, form_data.username, form_data.password)
	if not admin:
		raise HTTPException(
			status_code=401,
			detail="Incorrect email or password",
			headers={"WWW-Authenticate": "Bearer"},
		)
	return Token(access_token=create_access_token({"sub": admin.email}))


def get_current_admin(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> Admin:
	credentials_exception = HTTPException(status_code=401, detail="Could not validate credentials")
	try:
		payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
		email: str | None = payload.get("sub")
		if email is None:
			raise credentials_exception
	except JWTError:
		raise credentials_exception
	# Tokens of deleted admins stop working
	if db.get(AdminUser, email) is None:
		raise credentials_exception
	return Admin(email=email)


@router.get("/me", response_model=Admin)
async def me(admin: Admin = Depends(get_current_admin)):
	return admin
