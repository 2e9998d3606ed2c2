"""
Async HTTP client for the CivicPulse API.

Every call returns normalized pydantic records or raises one of the typed errors
from ``civicpulse.core.exceptions``; nothing is retried.
"""

# Standard library imports
from typing import Any
from uuid import UUID

# Third-party imports
import httpx

# Local application imports
from civicpulse.core.exceptions import BackendError, CivicPulseError, UnauthenticatedError, error_from_code
from civicpulse.core.monitoring.logging import get_logger
from civicpulse.schemas.auth.token_schemas import Token
from civicpulse.schemas.auth.user_schemas import ProfileResponse
from civicpulse.schemas.issues.analytics_schemas import CategoryCount, DailyCount, MapIssue
from civicpulse.schemas.issues.issue_schemas import IssueCreate, IssueListResponse, IssueResponse, IssueUpdate
from civicpulse.schemas.issues.location_schemas import LocationOption
from civicpulse.services.issues.filter_services import IssueCriteria
from civicpulse.settings import settings

logger = get_logger(__name__)

# Largest page the list endpoint serves; used to pull the full collection
FULL_COLLECTION_PAGE_SIZE = 100


class CivicPulseClient:
    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        self.token = token
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            transport=transport,
            timeout=timeout,
        )

    async def __aenter__(self) -> "CivicPulseClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    # ----- transport -----

    @staticmethod
    def _error_from_response(response: httpx.Response) -> CivicPulseError:
        code = message = None
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
            code = payload["error"].get("code")
            message = payload["error"].get("message")
        return error_from_code(code, message or response.reason_phrase or None, response.status_code)

    async def _request(self, method: str, path: str, *, auth_required: bool = False, **kwargs: Any) -> Any:
        if auth_required and not self.is_authenticated:
            raise UnauthenticatedError()

        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            response = await self._client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e!r}")
            raise BackendError() from e

        if response.is_error:
            error = self._error_from_response(response)
            logger.error(f"{method} {path} returned {response.status_code} ({error.code}): {error.message}")
            raise error

        if not response.content:
            return None
        return response.json()

    # ----- auth and profiles -----

    async def register(self, email: str, password: str, name: str | None = None) -> ProfileResponse:
        data = await self._request(
            "POST",
            "/auth/register",
            json={"email": email, "password": password, "confirm_password": password, "name": name},
        )
        return ProfileResponse.model_validate(data)

    async def login(self, email: str, password: str) -> Token:
        data = await self._request("POST", "/auth/token", data={"username": email, "password": password})
        token = Token.model_validate(data)
        self.token = token.access_token
        return token

    def logout(self) -> None:
        self.token = None

    async def me(self) -> ProfileResponse:
        return ProfileResponse.model_validate(await self._request("GET", "/auth/me", auth_required=True))

    async def get_profile(self, user_id: UUID) -> ProfileResponse:
        return ProfileResponse.model_validate(await self._request("GET", f"/profiles/{user_id}"))

    async def update_profile(self, **fields: str | None) -> ProfileResponse:
        data = await self._request("PATCH", "/profiles/me", json=fields, auth_required=True)
        return ProfileResponse.model_validate(data)

    # ----- issues -----

    async def browse_issues(
        self, criteria: IssueCriteria | None = None, page: int = 1, per_page: int | None = None
    ) -> IssueListResponse:
        """One server-filtered page."""
        criteria = criteria or IssueCriteria()
        params: dict[str, Any] = {
            "search": criteria.search,
            "sort": criteria.sort.value,
            "page": page,
            "per_page": per_page or settings.ISSUES_PAGE_SIZE,
        }
        if criteria.category is not None:
            params["category"] = criteria.category.value
        if criteria.status is not None:
            params["status"] = criteria.status.value
        return IssueListResponse.model_validate(await self._request("GET", "/issues", params=params))

    async def list_issues(self) -> list[IssueResponse]:
        """
        The whole collection, newest first.

        Pages are fetched by offset, so an issue created while paging can show
        up on two pages; it is kept once. An issue deleted while paging can
        shift a later one out of view until the next refresh.
        """
        issues: dict[UUID, IssueResponse] = {}
        page = 1
        while True:
            result = await self.browse_issues(page=page, per_page=FULL_COLLECTION_PAGE_SIZE)
            for issue in result.issues:
                issues.setdefault(issue.id, issue)
            if result.page >= result.total_pages:
                return list(issues.values())
            page += 1

    async def my_issues(self) -> list[IssueResponse]:
        data = await self._request("GET", "/issues/mine", auth_required=True)
        return [IssueResponse.model_validate(item) for item in data]

    async def get_issue(self, issue_id: UUID) -> IssueResponse:
        return IssueResponse.model_validate(await self._request("GET", f"/issues/{issue_id}"))

    async def upload_image(self, image: bytes, filename: str, content_type: str) -> str:
        data = await self._request(
            "POST",
            "/issues/upload-image",
            files={"file": (filename, image, content_type)},
            auth_required=True,
        )
        return data["url"]

    async def create_issue(
        self,
        fields: IssueCreate,
        image: bytes | None = None,
        filename: str = "image.jpg",
        content_type: str = "image/jpeg",
    ) -> IssueResponse:
        """Report an issue, uploading its photo first when one is given."""
        payload = fields.model_dump(mode="json", exclude_none=True)
        if image is not None:
            payload["image_url"] = await self.upload_image(image, filename, content_type)
        data = await self._request("POST", "/issues", json=payload, auth_required=True)
        return IssueResponse.model_validate(data)

    async def update_issue(
        self,
        issue_id: UUID,
        fields: IssueUpdate,
        image: bytes | None = None,
        filename: str = "image.jpg",
        content_type: str = "image/jpeg",
        remove_image: bool = False,
    ) -> IssueResponse:
        payload = fields.model_dump(mode="json", exclude_unset=True)
        if image is not None:
            payload["image_url"] = await self.upload_image(image, filename, content_type)
        elif remove_image:
            payload["image_url"] = None
        data = await self._request("PATCH", f"/issues/{issue_id}", json=payload, auth_required=True)
        return IssueResponse.model_validate(data)

    async def delete_issue(self, issue_id: UUID) -> bool:
        await self._request("DELETE", f"/issues/{issue_id}", auth_required=True)
        return True

    # ----- votes -----

    async def cast_vote(self, issue_id: UUID) -> IssueResponse:
        data = await self._request("POST", f"/votes/{issue_id}", auth_required=True)
        return IssueResponse.model_validate(data)

    async def has_voted(self, issue_id: UUID) -> bool:
        if not self.is_authenticated:
            return False
        data = await self._request("GET", f"/votes/{issue_id}/status")
        return bool(data["has_voted"])

    async def voted_issues(self) -> list[IssueResponse]:
        data = await self._request("GET", "/votes/mine", auth_required=True)
        return [IssueResponse.model_validate(item) for item in data]

    # ----- analytics and locations -----

    async def category_distribution(self) -> list[CategoryCount]:
        return [CategoryCount.model_validate(item) for item in await self._request("GET", "/analytics/categories")]

    async def temporal_analysis(self, days: int = 7) -> list[DailyCount]:
        data = await self._request("GET", "/analytics/temporal", params={"days": days})
        return [DailyCount.model_validate(item) for item in data]

    async def top_voted(self, limit: int = 10) -> list[IssueResponse]:
        data = await self._request("GET", "/analytics/top-voted", params={"limit": limit})
        return [IssueResponse.model_validate(item) for item in data]

    async def map_issues(self) -> list[MapIssue]:
        return [MapIssue.model_validate(item) for item in await self._request("GET", "/analytics/map-issues")]

    async def search_locations(self, text: str) -> list[LocationOption]:
        if len(text.strip()) < settings.GEOCODING_MIN_QUERY_LENGTH:
            return []
        data = await self._request("GET", "/locations/search", params={"q": text})
        return [LocationOption.model_validate(item) for item in data]
