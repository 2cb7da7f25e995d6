from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import PlainTextResponse
from user_agents import parse as parse_user_agent

from analytics_app.config import ResolverConfig, settings
from analytics_app.dependencies import get_event_service, get_resolver_config, get_session_service
from analytics_app.services.client_info import get_ip, is_ip_ignored
from analytics_app.services.event_service import EventService
from analytics_app.services.request_body import get_json_body
from analytics_app.services.session_service import SessionService
from analytics_app.services.tokens import create_token

router = APIRouter(tags=["collect"])


@router.post("/send")
async def send(
    request: Request,
    session_service: SessionService = Depends(get_session_service),
    event_service: EventService = Depends(get_event_service),
    config: ResolverConfig = Depends(get_resolver_config)
):
    """
    Collect a pageview or custom event.

    Flow:
    1. Drop bots (acknowledged, not recorded) and ignored IPs
    2. Resolve the session (cache token, website, session find-or-create)
    3. Record the event in event storage
    4. Answer with a signed cache token for the tracker's next request

    WebsiteNotFoundError is turned into a 404 by the app's exception handler.
    """
    user_agent = request.headers.get("user-agent", "")
    if not settings.disable_bot_check and parse_user_agent(user_agent).is_bot:
        return {"beep": "boop"}

    ip = get_ip(request, settings.client_ip_header)
    if is_ip_ignored(ip, settings.ignored_ip_list):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

    session = await session_service.find_session(request)
    if not session:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Session not found"
        )

    body = get_json_body(await request.body())
    await event_service.record(session, body.payload)

    return PlainTextResponse(create_token(session, config.secret))
