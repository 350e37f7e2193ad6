"""
Dubai Pulse API Client - DLD transactions open API

Dubai Pulse: https://www.dubaipulse.gov.ae/

Authentication:
- API key + secret issued on dataset access approval
- OAuth client-credentials token from
  POST /oauth/client_credential/accesstoken?grant_type=client_credentials
- Token validity is `expires_in` seconds; refreshed 5 minutes early

Endpoints:
- Transactions: GET /shared/dld/dld_transactions-open-api

Usage:
    from services.dubai_pulse_client import DubaiPulseClient

    client = DubaiPulseClient()
    if client.configured:
        response = client.fetch_transactions(area="Dubai Marina", limit=50)
        for row in response.rows:
            print(row.transaction_id, row.actual_worth)

Failures raise DubaiPulseError. Whether to serve sample data instead is up
to the caller.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import requests

from models.transaction import TransactionRow

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

API_BASE = "https://api.dubaipulse.gov.ae"
TOKEN_PATH = "/oauth/client_credential/accesstoken"
TRANSACTIONS_PATH = "/shared/dld/dld_transactions-open-api"

# Refresh this long before the server-side expiry
TOKEN_REFRESH_MARGIN_SECONDS = 300

DEFAULT_TIMEOUT_SECONDS = 30

SOURCE_API = "api"


def _utcnow() -> datetime:
    """Get current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


@dataclass
class CachedCredential:
    """OAuth access token with its effective expiry."""
    value: str
    expires_at: datetime
    obtained_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def from_token_response(cls, payload: Dict[str, Any], now: Optional[datetime] = None) -> "CachedCredential":
        token = payload.get("access_token")
        if not token:
            raise DubaiPulseAuthError(f"Token response has no access_token: {sorted(payload)}")
        try:
            expires_in = int(payload.get("expires_in", 0))
        except (TypeError, ValueError):
            raise DubaiPulseAuthError(f"Invalid expires_in: {payload.get('expires_in')!r}")
        now = now or _utcnow()
        lifetime = max(expires_in - TOKEN_REFRESH_MARGIN_SECONDS, 0)
        return cls(value=token, expires_at=now + timedelta(seconds=lifetime), obtained_at=now)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or _utcnow()) >= self.expires_at

    def time_until_expiry(self) -> timedelta:
        return self.expires_at - _utcnow()


@dataclass
class PulseResponse:
    """Wrapper for a Dubai Pulse transactions page."""
    success: bool
    rows: List[TransactionRow] = field(default_factory=list)
    total: int = 0
    source: str = SOURCE_API
    status_code: Optional[int] = None


class DubaiPulseError(Exception):
    """Base exception for Dubai Pulse API errors."""
    pass


class DubaiPulseAuthError(DubaiPulseError):
    """Token-related errors."""
    pass


class DubaiPulseDataError(DubaiPulseError):
    """Data fetching errors."""
    pass


class DubaiPulseClient:
    """
    Dubai Pulse client for the DLD transactions dataset.

    The token lives on the client instance; acquire_token() checks expiry on
    every call and refreshes when needed.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        base_url: str = API_BASE,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        from config import Config

        self.api_key = api_key if api_key is not None else Config.DUBAI_PULSE_API_KEY
        self.api_secret = api_secret if api_secret is not None else Config.DUBAI_PULSE_API_SECRET
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout or Config.DUBAI_PULSE_TIMEOUT_SECONDS or DEFAULT_TIMEOUT_SECONDS

        self._credential: Optional[CachedCredential] = None
        self._session = session or requests.Session()
        self._session.headers.update({
            "Accept": "application/json",
        })

        if not self.configured:
            logger.info("Dubai Pulse credentials not configured")

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.api_secret)

    # =========================================================================
    # Token Management
    # =========================================================================

    def acquire_token(self) -> str:
        """
        Return a valid access token, refreshing if missing or expired.

        Raises:
            DubaiPulseAuthError: If credentials are missing or the token
                request fails
        """
        if self._credential is None or self._credential.is_expired():
            self._credential = self._request_token()
        return self._credential.value

    def invalidate_token(self) -> None:
        self._credential = None

    def _request_token(self) -> CachedCredential:
        if not self.configured:
            raise DubaiPulseAuthError(
                "DUBAI_PULSE_API_KEY / DUBAI_PULSE_API_SECRET not set"
            )

        logger.info("Requesting Dubai Pulse access token")
        try:
            response = self._session.post(
                f"{self.base_url}{TOKEN_PATH}",
                params={"grant_type": "client_credentials"},
                data={"client_id": self.api_key, "client_secret": self.api_secret},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise DubaiPulseAuthError(f"Token request failed: {e}") from e

        if response.status_code in (400, 401, 403):
            raise DubaiPulseAuthError(
                f"Token request rejected ({response.status_code}); check API key/secret"
            )
        if not response.ok:
            raise DubaiPulseAuthError(f"Token request failed with HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise DubaiPulseAuthError("Token response is not JSON") from e

        credential = CachedCredential.from_token_response(payload)
        logger.info("Dubai Pulse token acquired, expires in %s", credential.time_until_expiry())
        return credential

    # =========================================================================
    # Data Fetching
    # =========================================================================

    @staticmethod
    def build_params(
        area: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        trans_group: Optional[str] = None,
        property_type: Optional[str] = None,
    ) -> Dict[str, str]:
        params: Dict[str, str] = {}
        if limit:
            params["limit"] = str(limit)
        if offset:
            params["offset"] = str(offset)
        if area:
            params["area_name_en"] = area
        if from_date:
            params["instance_date_gte"] = from_date.isoformat()
        if to_date:
            params["instance_date_lte"] = to_date.isoformat()
        if trans_group:
            params["trans_group_en"] = trans_group
        if property_type:
            params["property_type_en"] = property_type
        return params

    def fetch_transactions(
        self,
        area: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        trans_group: Optional[str] = None,
        property_type: Optional[str] = None,
    ) -> PulseResponse:
        """
        Fetch one page of DLD transactions.

        Raises:
            DubaiPulseAuthError: On token failure or a 401 from the data API
            DubaiPulseDataError: On any other HTTP or payload error
        """
        token = self.acquire_token()
        params = self.build_params(area, limit, offset, from_date, to_date, trans_group, property_type)

        try:
            response = self._session.get(
                f"{self.base_url}{TRANSACTIONS_PATH}",
                params=params,
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise DubaiPulseDataError(f"Transactions request failed: {e}") from e

        if response.status_code == 401:
            self.invalidate_token()
            raise DubaiPulseAuthError("Transactions request unauthorized; token dropped")
        if not response.ok:
            raise DubaiPulseDataError(
                f"Transactions request failed with HTTP {response.status_code}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise DubaiPulseDataError("Transactions response is not JSON") from e

        records = payload.get("result") or payload.get("data") or []
        if not isinstance(records, list):
            raise DubaiPulseDataError(f"Unexpected result type: {type(records).__name__}")

        rows = [TransactionRow.from_mapping(r) for r in records if r.get("transaction_id")]
        total = int(payload.get("total") or len(records))

        logger.info("dubai_pulse_fetch area=%s returned=%d total=%d", area, len(rows), total)
        return PulseResponse(
            success=True,
            rows=rows,
            total=total,
            source=SOURCE_API,
            status_code=response.status_code,
        )

    def close(self) -> None:
        self._session.close()
