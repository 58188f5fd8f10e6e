"""
User profile sync with the backend (create-or-update after sign-in).
"""
import logging
from typing import Optional

import requests

from .models import UserProfile
from .transport import check_response, send

logger = logging.getLogger(__name__)


class UserProfileClient:
    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def save_user(self, profile: UserProfile) -> dict:
        """POST /users, idempotent on firebaseUid."""
        payload = profile.model_dump(by_alias=True)
        resp = send(self.session, "POST", f"{self.base_url}/users", json=payload, timeout=self.timeout)
        body = check_response(resp)
        logger.info(f"[{profile.firebase_uid}] User saved/updated in backend")
        return body

    def get_user(self, firebase_uid: str) -> Optional[UserProfile]:
        resp = send(self.session, "GET", f"{self.base_url}/users/{firebase_uid}", timeout=self.timeout)
        if resp.status_code == 404:
            return None
        body = check_response(resp)
        user = body.get("user") if isinstance(body, dict) else None
        return UserProfile.model_validate(user) if user else None
