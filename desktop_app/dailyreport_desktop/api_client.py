"""HTTP client for the daily report storage API."""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import quote, urljoin

import requests

from .errors import ErrorKind, StorageError
from .models import ReportAggregate, User

CODE_KINDS = {
    "limit_reached": ErrorKind.CAPACITY,
    "already_exists": ErrorKind.CONFLICT,
    "not_found": ErrorKind.NOT_FOUND,
    "invalid_input": ErrorKind.VALIDATION,
}


class ApiError(StorageError):
    """Failed call to the storage API."""

    def __init__(self, kind: ErrorKind, message: str, *, response: Optional[requests.Response] = None) -> None:
        super().__init__(kind, message)
        self.response = response


class ApiClient:
    """Wraps the HTTP calls to the storage API."""

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: int = 15) -> None:
        self.base_url = base_url.rstrip("/") + "/"
        self.token = token
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, **kwargs):
        url = urljoin(self.base_url, path.lstrip("/"))
        kwargs.setdefault("timeout", self.timeout)
        headers = kwargs.setdefault("headers", {})
        headers.update(self._headers())
        try:
            response = requests.request(method, url, **kwargs)
        except requests.RequestException as exc:
            raise ApiError(ErrorKind.UNAVAILABLE, str(exc)) from exc

        if response.status_code >= 400:
            raise self._error_from_response(response)

        if response.headers.get("Content-Type", "").startswith("application/json"):
            return response.json()
        return response.content

    @staticmethod
    def _error_from_response(response: requests.Response) -> ApiError:
        code: Optional[str] = None
        message = response.text
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            detail = body.get("detail")
            if isinstance(detail, dict):
                code = detail.get("code")
                message = detail.get("message") or message
            elif isinstance(detail, str):
                message = detail
            elif isinstance(body.get("error"), str):
                message = body["error"]

        if code in CODE_KINDS:
            kind = CODE_KINDS[code]
        elif response.status_code == 404:
            kind = ErrorKind.NOT_FOUND
        elif response.status_code == 409:
            kind = ErrorKind.CONFLICT
        elif response.status_code >= 500:
            kind = ErrorKind.UNAVAILABLE
        else:
            kind = ErrorKind.VALIDATION
        return ApiError(kind, f"API error {response.status_code}: {message}", response=response)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------
    def create_user(self, profile: Dict[str, Any]) -> User:
        data = self._request("POST", "/api/auth/signup", json=profile) or {}
        return User.from_dict(data)

    def find_user_by_email(self, email: str) -> Optional[User]:
        try:
            data = self._request("POST", "/api/auth/login", json={"email": email})
        except ApiError as exc:
            if exc.kind is ErrorKind.NOT_FOUND:
                return None
            raise
        return User.from_dict(data or {})

    def update_user(self, user: User) -> User:
        data = self._request("PUT", f"/api/auth/user/{quote(user.id, safe='')}", json=user.to_dict()) or {}
        return User.from_dict(data)

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------
    def list_reports(self, user_id: str) -> List[ReportAggregate]:
        data = self._request("GET", f"/api/reports/{quote(user_id, safe='')}") or []
        return [ReportAggregate.from_dict(item) for item in data]

    def upsert_report(self, report: ReportAggregate) -> ReportAggregate:
        data = self._request("POST", "/api/reports", json=report.to_dict()) or {}
        return ReportAggregate.from_dict(data)

    def delete_report(self, report_id: str) -> None:
        self._request("DELETE", f"/api/reports/{quote(report_id, safe='')}")


__all__ = ["ApiClient", "ApiError"]
