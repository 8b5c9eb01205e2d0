"""Repository identity model."""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse


@dataclass(frozen=True)
class RepositoryIdentity:
    """Owner and name of a hosted repository."""

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @classmethod
    def from_remote_url(cls, remote_url: str) -> Optional["RepositoryIdentity"]:
        """Parse a GitHub remote URL into an identity.

        Handles both SSH (git@github.com:org/repo.git) and HTTPS
        (https://github.com/org/repo.git) forms. Returns None for anything
        that is not a GitHub remote.
        """
        if not remote_url or "github.com" not in remote_url:
            return None

        if remote_url.startswith("git@"):
            path = remote_url.split("github.com:", 1)[1]
        else:
            parsed_url = urlparse(remote_url)
            path = parsed_url.path.strip("/")

        if path.endswith(".git"):
            path = path[:-4]

        parts = path.strip("/").split("/")
        if len(parts) != 2 or not all(parts):
            return None
        return cls(owner=parts[0], name=parts[1])

    def __str__(self) -> str:
        return self.full_name
