"""
Caller resolution for the ledger API.

Requests identify their caller with a ``profile_id`` header carrying the
id of an existing Profile. There are no passwords or tokens; the header
is trusted as-is.

Behaviour:
    - No header: the request stays anonymous; protected views answer 401
    - Header present but not a positive integer, or no such profile: 401
    - Otherwise request.user is the Profile
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication

from ledger.models import Profile

if TYPE_CHECKING:
    from rest_framework.request import Request

logger = logging.getLogger(__name__)

PROFILE_HEADER = "HTTP_PROFILE_ID"


class ProfileHeaderAuthentication(BaseAuthentication):
    """Authenticates a request as the Profile named in its profile_id header."""

    keyword = "Profile"

    def authenticate(self, request: Request) -> tuple[Profile, None] | None:
        raw = request.META.get(PROFILE_HEADER)
        if raw is None or raw == "":
            return None

        raw = raw.strip()
        if not raw.isdigit() or int(raw) < 1:
            raise exceptions.AuthenticationFailed("Invalid profile_id header")

        profile = Profile.objects.filter(pk=int(raw)).first()
        if profile is None:
            logger.info("Unknown profile in profile_id header", extra={"profile_id": raw})
            raise exceptions.AuthenticationFailed("Profile not found")

        return profile, None

    def authenticate_header(self, request: Request) -> str:
        # A non-empty value makes DRF answer 401 rather than 403
        return self.keyword
