from __future__ import annotations

from typing import List

from fastapi import Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from . import models
from .config import settings
from .database import engine, get_db
from .log import configure_logging
from .middleware import RequestLogMiddleware
from .schemas import (
    DeleteResponse,
    LoginRequest,
    ReportPayload,
    ReportResponse,
    UserCreateRequest,
    UserResponse,
    UserUpdateRequest,
)
from .services import (
    create_user,
    delete_report,
    find_user_by_email,
    list_reports,
    update_user,
    upsert_report,
)

configure_logging(settings)
models.Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.app_name)
app.add_middleware(RequestLogMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/health")
def health() -> dict[str, bool]:
    return {"ok": True}


# Users
@app.post("/api/auth/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def auth_signup(payload: UserCreateRequest, db: Session = Depends(get_db)) -> UserResponse:
    return create_user(db, payload)


@app.post("/api/auth/login", response_model=UserResponse)
def auth_login(payload: LoginRequest, db: Session = Depends(get_db)) -> UserResponse:
    return find_user_by_email(db, payload.email)


@app.put("/api/auth/user/{user_id}", response_model=UserResponse)
def auth_update_user(user_id: str, payload: UserUpdateRequest, db: Session = Depends(get_db)) -> UserResponse:
    return update_user(db, user_id, payload)


# Reports
@app.get("/api/reports/{user_id}", response_model=List[ReportResponse])
def reports_list(user_id: str, db: Session = Depends(get_db)) -> List[ReportResponse]:
    return list_reports(db, user_id)


@app.post("/api/reports", response_model=ReportResponse)
def reports_save(payload: ReportPayload, db: Session = Depends(get_db)) -> ReportResponse:
    return upsert_report(db, payload)


@app.delete("/api/reports/{report_id}", response_model=DeleteResponse)
def reports_delete(report_id: str, db: Session = Depends(get_db)) -> DeleteResponse:
    delete_report(db, report_id)
    return DeleteResponse(success=True)
