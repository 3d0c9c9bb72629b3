"""
User-agent classification.

Pure functions mapping a raw User-Agent string to an operating-system and a
device category. Matching is a case-insensitive substring test evaluated in a
fixed priority order; the first hit wins. Note that the order is part of the
contract: an iPhone agent contains "Mac OS X" and is therefore reported as
macOS, and Android agents contain "Linux" and are reported as Linux.
"""

from typing import Optional, Tuple

WINDOWS = "Windows"
MACOS = "macOS"
LINUX = "Linux"
ANDROID = "Android"
IOS = "iOS"
UNKNOWN = "Unknown"

MOBILE = "Mobile"
DESKTOP = "Desktop"

_OS_RULES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("windows",), WINDOWS),
    (("mac",), MACOS),
    (("linux",), LINUX),
    (("android",), ANDROID),
    (("iphone", "ipad", "ipod"), IOS),
)


def classify_os(agent_string: Optional[str]) -> str:
    """Return the OS category for `agent_string` (`Unknown` when nothing matches)."""
    if not agent_string:
        return UNKNOWN
    ua = agent_string.lower()
    for tokens, name in _OS_RULES:
        if any(token in ua for token in tokens):
            return name
    return UNKNOWN


def classify_device(agent_string: Optional[str]) -> str:
    """Return `Mobile` if the agent mentions "mobile", else `Desktop`."""
    if agent_string and "mobile" in agent_string.lower():
        return MOBILE
    return DESKTOP
