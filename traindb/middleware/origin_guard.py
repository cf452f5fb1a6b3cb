import logging
from typing import Optional, Tuple

from fastapi import Request

from traindb.core.prometheus_metrics import prometheus_collector
from traindb.services.exceptions import OriginNotAllowedError

logger = logging.getLogger(__name__)

LOOPBACK_HOSTS = {"localhost", "127.0.0.1", "[::1]"}


def _hostname(host: str) -> str:
    if host.startswith("["):
        return host[: host.find("]") + 1]
    return host.split(":", 1)[0]


def allowed_schemes(host: str) -> Tuple[str, ...]:
    """Plain http is only trusted for loopback hosts, so local development works without TLS."""
    if _hostname(host).lower() in LOOPBACK_HOSTS:
        return ("https", "http")
    return ("https",)


def is_same_origin(host: str, origin: Optional[str], referer: Optional[str]) -> bool:
    schemes = allowed_schemes(host)
    if origin and origin not in {f"{scheme}://{host}" for scheme in schemes}:
        return False
    if referer and not any(referer.startswith(f"{scheme}://{host}/") for scheme in schemes):
        return False
    return True


async def verify_same_origin(request: Request) -> None:
    """Dependency rejecting API calls whose Origin or Referer points at another site."""
    host = request.headers.get("host") or request.url.netloc
    origin = request.headers.get("origin")
    referer = request.headers.get("referer")

    if not is_same_origin(host, origin, referer):
        prometheus_collector.record_origin_rejection()
        logger.warning(
            "Rejected cross-origin API request",
            extra={"host": host, "origin": origin, "referer": referer}
        )
        raise OriginNotAllowedError(host)
