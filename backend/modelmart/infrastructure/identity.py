"""Firebase Identity Verifier — checks Firebase ID tokens against Google's signing certs.

Invariants:
    - Only RS256 tokens whose kid matches a currently published cert are accepted
    - aud must equal the project id and iss must be securetoken.google.com/<project>
    - sub (the Firebase uid) must be a non-empty string; it becomes Caller.uid
    - Any token problem → UnauthorizedError; cert endpoint problems → IdentityServiceError

Design Decisions:
    - python-jose over firebase-admin: verification only needs the public certs,
      no service-account credential on the API host
    - Certs cached until the Cache-Control max-age from Google expires; refetch is
      serialized by a lock so a cold cache costs one request
"""

import asyncio
import logging
import re
import time

import httpx
from jose import ExpiredSignatureError, JWTError, jwt

from modelmart.core.domain_types import Caller, CallerId
from modelmart.core.errors import IdentityServiceError, UnauthorizedError

logger = logging.getLogger(__name__)

FIREBASE_CERTS_URL = (
    "https://www.googleapis.com/robot/v1/metadata/x509/"
    "securetoken@system.gserviceaccount.com"
)
_MAX_AGE = re.compile(r"max-age=(\d+)")
_DEFAULT_CACHE_SECONDS = 3600


class FirebaseTokenVerifier:
    """IdentityVerifier implementation for Firebase Authentication ID tokens."""

    def __init__(
        self,
        project_id: str,
        certs_url: str = FIREBASE_CERTS_URL,
        timeout_seconds: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.project_id = project_id
        self.certs_url = certs_url
        self.issuer = f"https://securetoken.google.com/{project_id}"
        self._client = http_client or httpx.AsyncClient(timeout=timeout_seconds)
        self._certs: dict[str, str] = {}
        self._certs_expire_at = 0.0
        self._lock = asyncio.Lock()

    async def verify(self, token: str) -> Caller:
        """Verify signature and claims; return the caller identity."""
        try:
            header = jwt.get_unverified_header(token)
        except JWTError:
            raise UnauthorizedError("Invalid or expired token")
        if header.get("alg") != "RS256":
            raise UnauthorizedError("Invalid or expired token")

        certs = await self._get_certs()
        cert = certs.get(header.get("kid", ""))
        if cert is None:
            raise UnauthorizedError("Invalid or expired token")

        try:
            claims = jwt.decode(
                token, cert, algorithms=["RS256"],
                audience=self.project_id, issuer=self.issuer,
            )
        except ExpiredSignatureError:
            raise UnauthorizedError("Invalid or expired token")
        except JWTError as e:
            logger.info(f"Token verification failed: {e}")
            raise UnauthorizedError("Invalid or expired token")

        uid = claims.get("sub")
        if not isinstance(uid, str) or not uid:
            raise UnauthorizedError("Invalid or expired token")
        return Caller(uid=CallerId(uid), email=claims.get("email"))

    async def _get_certs(self) -> dict[str, str]:
        if self._certs and time.monotonic() < self._certs_expire_at:
            return self._certs
        async with self._lock:
            if self._certs and time.monotonic() < self._certs_expire_at:
                return self._certs
            try:
                resp = await self._client.get(self.certs_url)
                resp.raise_for_status()
                certs = resp.json()
            except (httpx.HTTPError, ValueError) as e:
                logger.error(f"Fetching identity certs failed: {e}")
                raise IdentityServiceError("signing keys unavailable")
            self._certs = certs
            self._certs_expire_at = time.monotonic() + _cache_seconds(
                resp.headers.get("cache-control", ""),
            )
            return self._certs

    async def aclose(self) -> None:
        await self._client.aclose()


def _cache_seconds(cache_control: str) -> int:
    match = _MAX_AGE.search(cache_control)
    return int(match.group(1)) if match else _DEFAULT_CACHE_SECONDS
