"""Coarse user-agent classification for visit records."""

from typing import Optional

MOBILE_MARKERS = ("iphone", "android", "blackberry", "webos", "windows phone")
TABLET_MARKERS = ("ipad", "tablet", "kindle", "playbook")


def _device_type(agent: str) -> str:
    if any(marker in agent for marker in MOBILE_MARKERS):
        return "mobile"
    if any(marker in agent for marker in TABLET_MARKERS):
        return "tablet"
    return "desktop"


def _browser(agent: str) -> Optional[str]:
    # Order matters: Edge and Opera also announce Chrome, Chrome announces Safari
    if "edge" in agent or "edg/" in agent:
        return "Edge"
    if "opr/" in agent or "opera" in agent:
        return "Opera"
    if "chrome" in agent and "chromium" not in agent:
        return "Chrome"
    if "safari" in agent:
        return "Safari"
    if "firefox" in agent:
        return "Firefox"
    if "msie" in agent or "trident/" in agent:
        return "Internet Explorer"
    return None


def _os(agent: str) -> Optional[str]:
    if "windows" in agent:
        return "Windows"
    if "iphone" in agent or "ipad" in agent or "ipod" in agent:
        return "iOS"
    if "macintosh" in agent or "mac os x" in agent:
        return "macOS"
    if "android" in agent:
        return "Android"
    if "linux" in agent:
        return "Linux"
    return None


def parse_user_agent(user_agent: Optional[str]) -> dict[str, Optional[str]]:
    """
    Classify a User-Agent header.

    Returns:
        Dictionary with keys device_type ("mobile", "tablet" or "desktop"),
        browser and os (None when unrecognised)

    Example:
        >>> parse_user_agent("Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) Safari/604.1")
        {'device_type': 'mobile', 'browser': 'Safari', 'os': 'iOS'}
    """
    agent = (user_agent or "").lower()
    return {
        "device_type": _device_type(agent),
        "browser": _browser(agent),
        "os": _os(agent),
    }
