"""Hostname extraction from git remote URLs.

Three shapes are recognised, checked in this order:

- SSH shorthand ``user@host:path/...``: an "@", later a ":", later a "/".
  The host sits between the "@" and the next ":".
- Scheme-qualified ``scheme://[user@]host[:port]/path``. The host follows the
  scheme and any userinfo, up to the first "/" or ":".
- Anything else, which has no hostname.

Examples:
    git@github.com:user/repo.git       -> github.com
    ssh://git@github.com/user/repo.git -> github.com
    https://github.com/user/repo.git   -> github.com
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from git_worktree_keeper.exceptions import RemoteUrlUnparseableError


class RemoteShape(Enum):
    """Recognised remote URL shapes."""
    SSH_SHORTHAND = "ssh-shorthand"
    SCHEME = "scheme"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class RemoteURL:
    """A remote URL classified by shape, with its hostname when it has one."""

    url: str
    shape: RemoteShape
    host: Optional[str]


def _shorthand_host(url: str) -> Optional[str]:
    at = url.find("@")
    if at == -1:
        return None
    colon = url.find(":", at + 1)
    if colon == -1 or url.find("/", colon + 1) == -1:
        return None
    return url[at + 1:colon]


def _scheme_host(url: str) -> Optional[str]:
    marker = url.find("://")
    if marker == -1:
        return None
    authority = url[marker + 3:].split("/", 1)[0]
    if "@" in authority:
        authority = authority.rsplit("@", 1)[1]
    return authority.split(":", 1)[0]


def parse_remote_url(url: str) -> RemoteURL:
    """Classify a remote URL and pull out its hostname."""
    host = _shorthand_host(url)
    if host is not None:
        return RemoteURL(url, RemoteShape.SSH_SHORTHAND, host or None)

    host = _scheme_host(url)
    if host is not None:
        return RemoteURL(url, RemoteShape.SCHEME, host or None)

    return RemoteURL(url, RemoteShape.UNRECOGNIZED, None)


def extract_hostname(url: str) -> str:
    """Get the hostname of a remote URL.

    Raises:
        RemoteUrlUnparseableError: If the URL has no recognisable hostname
    """
    remote = parse_remote_url(url)
    if not remote.host:
        raise RemoteUrlUnparseableError(url)
    return remote.host
