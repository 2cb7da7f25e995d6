"""
Client details for a tracking request.

Everything here is a pure function of the request headers, the client
address and the payload: IP address, location (from CDN headers),
browser, OS and device class.
"""

from __future__ import annotations

import ipaddress
from typing import Iterable, Optional, Tuple
from urllib.parse import unquote

from starlette.requests import Request
from user_agents import parse as parse_user_agent

from analytics_app.config import settings
from analytics_app.schemas.collect import CollectPayload
from analytics_app.schemas.session import ClientInfo


DESKTOP_SCREEN_WIDTH = 1920
LAPTOP_SCREEN_WIDTH = 1024
MOBILE_SCREEN_WIDTH = 479

# Checked in order, first non-empty wins
IP_ADDRESS_HEADERS = (
    "cf-connecting-ip",
    "x-client-ip",
    "x-forwarded-for",
    "do-connecting-ip",
    "fastly-client-ip",
    "true-client-ip",
    "x-real-ip",
    "x-cluster-client-ip",
    "x-forwarded",
    "forwarded-for",
)

UNKNOWN_COUNTRIES = {"XX", "T1"}

Location = Tuple[Optional[str], Optional[str], Optional[str], Optional[str]]


def get_ip(request: Request, ip_header: Optional[str] = None) -> Optional[str]:
    """Best guess of the visitor IP, honouring proxy headers"""
    headers = request.headers

    if ip_header and headers.get(ip_header):
        return headers[ip_header].split(",")[0].strip()

    for name in IP_ADDRESS_HEADERS:
        value = headers.get(name)
        if value:
            # X-Forwarded-For may contain a list: client, proxy1, proxy2, ...
            first = value.split(",")[0].strip()
            if first:
                return first

    return request.client.host if request.client else None


def is_localhost(ip: Optional[str]) -> bool:
    if not ip:
        return True
    try:
        return ipaddress.ip_address(ip).is_loopback
    except ValueError:
        return False


def is_ip_ignored(ip: Optional[str], ignore_ips: Iterable[str]) -> bool:
    """Check an IP against a list of addresses and CIDR ranges"""
    if not ip:
        return False
    try:
        address = ipaddress.ip_address(ip)
    except ValueError:
        return False

    for entry in ignore_ips:
        try:
            if "/" in entry:
                if address in ipaddress.ip_network(entry, strict=False):
                    return True
            elif address == ipaddress.ip_address(entry):
                return True
        except ValueError:
            continue
    return False


def get_location(ip: Optional[str], request: Request) -> Location:
    """
    Country, subdivision1, subdivision2 and city from CDN geo headers.

    subdivision1 is formatted as "<country>-<region>".
    """
    if is_localhost(ip):
        return None, None, None, None

    headers = request.headers

    # Cloudflare
    country = headers.get("cf-ipcountry")
    if country:
        if country.upper() in UNKNOWN_COUNTRIES:
            return None, None, None, None
        region = headers.get("cf-region-code")
        return (
            country,
            f"{country}-{region}" if region else None,
            None,
            headers.get("cf-ipcity"),
        )

    # Vercel
    country = headers.get("x-vercel-ip-country")
    if country:
        region = headers.get("x-vercel-ip-country-region")
        city = headers.get("x-vercel-ip-city")
        return (
            country,
            f"{country}-{region}" if region else None,
            None,
            unquote(city) if city else None,
        )

    return None, None, None, None


def _screen_width(screen: Optional[str]) -> Optional[int]:
    if not screen:
        return None
    try:
        return int(screen.lower().split("x")[0])
    except ValueError:
        return None


def get_device(screen: Optional[str], user_agent) -> Optional[str]:
    """
    Classify the device from screen width and the parsed user agent.

    Returns one of "desktop", "laptop", "tablet", "mobile", or None
    when there is nothing to go on.
    """
    width = _screen_width(screen)

    if user_agent.is_pc:
        if user_agent.os.family == "Chrome OS" or (width is not None and width < DESKTOP_SCREEN_WIDTH):
            return "laptop"
        return "desktop"

    if user_agent.is_mobile or user_agent.is_tablet:
        if user_agent.is_tablet or (width is not None and width > MOBILE_SCREEN_WIDTH):
            return "tablet"
        return "mobile"

    if width is None:
        return None
    if width >= DESKTOP_SCREEN_WIDTH:
        return "desktop"
    if width >= LAPTOP_SCREEN_WIDTH:
        return "laptop"
    if width >= MOBILE_SCREEN_WIDTH:
        return "tablet"
    return "mobile"


def _family(name: Optional[str]) -> Optional[str]:
    # ua-parser reports unknown agents as "Other"
    if not name or name == "Other":
        return None
    return name


def get_client_info(request: Request, payload: CollectPayload) -> ClientInfo:
    """Derive ClientInfo from the request and payload"""
    user_agent = request.headers.get("user-agent", "")
    ip = get_ip(request, settings.client_ip_header)
    country, subdivision1, subdivision2, city = get_location(ip, request)

    parsed = parse_user_agent(user_agent)

    return ClientInfo(
        user_agent=user_agent,
        browser=_family(parsed.browser.family),
        os=_family(parsed.os.family),
        ip=ip,
        country=country,
        subdivision1=subdivision1,
        subdivision2=subdivision2,
        city=city,
        device=get_device(payload.screen, parsed),
        is_bot=parsed.is_bot,
    )
