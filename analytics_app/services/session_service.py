from typing import Optional, Union
import logging

from starlette.requests import Request

from analytics_app.cache.lookup import LookupCache
from analytics_app.config import ResolverConfig
from analytics_app.exceptions import WebsiteNotFoundError
from analytics_app.models.website import Website
from analytics_app.schemas.collect import CollectPayload
from analytics_app.schemas.session import ClientInfo, SessionData, WebsiteData
from analytics_app.services.client_info import get_client_info
from analytics_app.services.identity import derive_id, is_valid_uuid
from analytics_app.services.request_body import get_json_body
from analytics_app.services.session_store import CreateSessionResult, SessionStore
from analytics_app.services.tokens import parse_session_token

logger = logging.getLogger(__name__)


class SessionService:
    """
    Turns a tracking request into a stable, deduplicated session.

    Resolution runs top to bottom and any stage can stop it:
    1. Payload: no payload -> None
    2. Cache token: a valid signed token is the answer, nothing else is read
    3. Website: malformed id -> None, missing or deleted -> WebsiteNotFoundError
    4. Session: derive the id, then either build it in memory (ClickHouse)
       or find-or-create the row (relational)

    Dependencies are injected (see analytics_app.dependencies).
    """

    def __init__(
        self,
        store: SessionStore,
        config: ResolverConfig,
        lookup: Optional[LookupCache] = None
    ):
        """
        Args:
            store: Database access for websites and sessions
            config: Cache and backend selection, signing secret and id salt
            lookup: Lookup cache, only consulted when config.cache_enabled
        """
        self.store = store
        self.config = config
        self.lookup = lookup

    @property
    def cache_enabled(self) -> bool:
        return self.config.cache_enabled and self.lookup is not None

    async def find_session(self, request: Request) -> Optional[SessionData]:
        """
        Resolve the session for a collect request.

        Returns:
            The session, or None when the request carries nothing usable

        Raises:
            WebsiteNotFoundError: the website id is well-formed but unknown or deleted
        """
        body = get_json_body(await request.body())
        payload = body.payload if body else None

        if not payload:
            return None

        # Check if cache token is passed
        cache_token = request.headers.get(self.config.cache_token_header)
        if cache_token:
            session = parse_session_token(cache_token, self.config.secret)
            if session:
                return session

        if not is_valid_uuid(payload.website):
            return None

        website_id = payload.website
        await self.resolve_website(website_id)

        client = get_client_info(request, payload)
        return await self.resolve_session(website_id, payload, client)

    async def resolve_website(self, website_id: str) -> Union[Website, WebsiteData]:
        if self.cache_enabled:
            website = await self.lookup.fetch_website(website_id)
        else:
            website = await self.store.get_website(website_id)

        if not website or website.deleted_at:
            raise WebsiteNotFoundError(website_id)

        return website

    async def resolve_session(
        self,
        website_id: str,
        payload: CollectPayload,
        client: ClientInfo
    ) -> SessionData:
        session_id = derive_id(
            website_id,
            payload.hostname,
            client.ip,
            client.user_agent,
            salt=self.config.salt,
        )

        data = SessionData(
            id=session_id,
            website_id=website_id,
            hostname=payload.hostname,
            browser=client.browser,
            os=client.os,
            device=client.device,
            screen=payload.screen,
            language=payload.language,
            country=client.country,
            subdivision1=client.subdivision1,
            subdivision2=client.subdivision2,
            city=client.city,
        )

        # ClickHouse does not require session lookup
        if self.config.columnar_enabled:
            return data

        # Find session
        if self.cache_enabled:
            session = await self.lookup.fetch_session(session_id)
        else:
            row = await self.store.get_session(session_id)
            session = SessionData.model_validate(row) if row else None

        if session:
            return session

        # Create a session if not found
        result, row = await self.store.create_session(data)
        session = SessionData.model_validate(row)

        if result == CreateSessionResult.ALREADY_EXISTS:
            logger.info("Lost session create race for %s", session_id)

        if self.cache_enabled:
            await self.lookup.store_session(session)

        return session
