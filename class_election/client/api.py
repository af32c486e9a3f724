from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings

logger = logging.getLogger(__name__)

DEFAULT_UA = f"{settings.app_name}-client/{settings.app_version}"


class ApiError(Exception):
    """
    Non-2xx answer (or transport failure) from the election API.
    message is the server's {"message": ...} when present.
    """

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


def _safe_json(r: httpx.Response) -> Any:
    try:
        return r.json()
    except ValueError:
        return None


def _error_message(r: httpx.Response, fallback: str) -> str:
    data = _safe_json(r)
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return r.text.strip() or fallback


class ElectionClient:
    """
    Thin wrapper over the REST API, one method per endpoint.

    The session cookie lives in the underlying httpx.Client, so one
    ElectionClient is one signed-in browser. Any httpx.Client works,
    including FastAPI's TestClient.
    """

    def __init__(self, http: httpx.Client) -> None:
        self.http = http

    @classmethod
    def from_settings(cls, base_url: Optional[str] = None, timeout: Optional[float] = None) -> "ElectionClient":
        http = httpx.Client(
            base_url=(base_url or settings.client_api_base).rstrip("/"),
            timeout=float(timeout if timeout is not None else settings.client_timeout_s),
            headers={"User-Agent": DEFAULT_UA},
        )
        return cls(http)

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "ElectionClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # -----------------------------
    # Low-level request helper
    # -----------------------------

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        fallback_error: str = "Request failed",
    ) -> Any:
        m = (method or "GET").strip().upper()
        p = path if (path or "").startswith("/") else f"/{path}"

        try:
            r = self.http.request(m, p, json=json)
        except httpx.TimeoutException:
            raise ApiError(408, "Request timed out contacting API.")
        except httpx.RequestError as e:
            raise ApiError(503, f"Network error contacting API: {e}")

        if r.status_code >= 400:
            message = _error_message(r, fallback_error)
            logger.debug("%s %s -> %s %s", m, p, r.status_code, message)
            raise ApiError(r.status_code, message)

        if r.status_code == 204 or not r.content:
            return None
        return r.json()

    # -----------------------------
    # Session
    # -----------------------------

    def login(
        self,
        sub: str,
        *,
        email: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> Dict[str, Any]:
        payload = {"sub": sub, "email": email, "firstName": first_name, "lastName": last_name}
        return self._request("POST", "/api/login", json=payload, fallback_error="Login failed")

    def logout(self) -> None:
        self._request("POST", "/api/logout")

    def current_user(self) -> Optional[Dict[str, Any]]:
        """
        Signed-in user, or None when there is no session.
        """
        try:
            return self._request("GET", "/api/auth/user")
        except ApiError as e:
            if e.status_code == 401:
                return None
            raise

    # -----------------------------
    # Candidates
    # -----------------------------

    def list_candidates(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/candidates", fallback_error="Failed to fetch candidates")

    def create_candidate(
        self,
        *,
        name: str,
        nickname: str,
        bio: str,
        platform: str,
        gender: str,
        photo_url: Optional[str] = None,
    ) -> Dict[str, Any]:
        payload = {
            "name": name,
            "nickname": nickname,
            "bio": bio,
            "platform": platform,
            "gender": gender,
            "photoUrl": photo_url,
        }
        return self._request("POST", "/api/candidates", json=payload, fallback_error="Failed to register")

    def approve_candidate(self, candidate_id: int) -> Dict[str, Any]:
        return self._request("PATCH", f"/api/candidates/{int(candidate_id)}/approve", fallback_error="Failed to approve")

    def delete_candidate(self, candidate_id: int) -> None:
        self._request("DELETE", f"/api/candidates/{int(candidate_id)}", fallback_error="Failed to delete")

    # -----------------------------
    # Votes / results
    # -----------------------------

    def vote_status(self) -> bool:
        data = self._request("GET", "/api/votes/status", fallback_error="Failed to fetch vote status")
        return bool((data or {}).get("hasVoted"))

    def submit_vote(self, male_candidate_id: int, female_candidate_id: int) -> str:
        payload = {"maleCandidateId": int(male_candidate_id), "femaleCandidateId": int(female_candidate_id)}
        data = self._request("POST", "/api/votes", json=payload, fallback_error="Failed to submit vote")
        return str((data or {}).get("message") or "")

    def get_results(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/results", fallback_error="Failed to fetch results")

    # -----------------------------
    # Phase
    # -----------------------------

    def get_phase(self) -> str:
        data = self._request("GET", "/api/settings/phase", fallback_error="Failed to fetch phase")
        return str((data or {}).get("phase") or "registration")

    def set_phase(self, phase: str) -> str:
        data = self._request("POST", "/api/settings/phase", json={"phase": phase}, fallback_error="Failed to update phase")
        return str((data or {}).get("phase") or phase)
