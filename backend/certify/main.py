import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.encoders import jsonable_encoder

from .db import SessionLocal, init_db
from .settings import settings
from .routers import auth
from .routers import exam
from .routers import admin

logging.basicConfig(
	level=settings.log_level.upper(),
	format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

CERTS_DIR = Path(settings.certs_dir).resolve()
CERTS_DIR.mkdir(parents=True, exist_ok=True)

app = FastAPI(title="Certification Exam API")
app.add_middleware(
	CORSMiddleware,
	allow_origins=settings.cors_origins,
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)
app.include_router(auth.router)
app.include_router(exam.router)
app.include_router(admin.router)

# Generated certificates, addressed by result id
app.mount(settings.certs_url_prefix, StaticFiles(directory=CERTS_DIR), name="certs")


@app.exception_handler(RequestValidationError)
async def invalid_payload_handler(request: Request, exc: RequestValidationError):
	# Malformed payloads are client errors (400), not 422
	return JSONResponse(
		status_code=400,
		content={"detail": "Invalid payload", "errors": jsonable_encoder(exc.errors())},
	)


@app.get("/info")
def root():
	return {"status": "ok", "certs_dir": str(CERTS_DIR)}


@app.on_event("startup")
async def startup_event():
	# Initialize DB schema
	init_db()
	db = SessionLocal()
	try:
		auth.ensure_seed_admin(db)
	finally:
		db.close()
	logger.info("Certification API started")
