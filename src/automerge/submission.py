from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable

from .errors import MalformedTitle

AUTOGENERATED_SUFFIX = "_jll"

_VERSION = r"(?P<version>\d+\.\d+\.\d+(?:[-+][0-9A-Za-z.\-+]+)?)"
_TITLE_PATTERNS = (
    re.compile(r"^Register\s+(?P<package>\S+)\s+v?" + _VERSION + r"\s*$"),
    re.compile(r"^New package:\s+(?P<package>\S+)\s+v" + _VERSION + r"\s*$"),
)


def parse_submission_title(title: str) -> tuple[str, str]:
    """Extract ``(package, version)`` from a submission title."""
    text = str(title).strip()
    for pattern in _TITLE_PATTERNS:
        match = pattern.match(text)
        if match:
            return match.group("package"), match.group("version")
    raise MalformedTitle(f"Title does not match 'Register <name> <version>': {title!r}")


def is_autogenerated_name(name: str) -> bool:
    return name.endswith(AUTOGENERATED_SUFFIX) and len(name) > len(AUTOGENERATED_SUFFIX)


@dataclass(frozen=True, slots=True)
class Submission:
    number: int
    title: str
    package: str
    version: str
    head_sha: str
    author: str
    is_open: bool
    changed_files: tuple[str, ...] = ()

    @property
    def is_autogenerated(self) -> bool:
        return is_autogenerated_name(self.package)

    @classmethod
    def from_title(
        cls,
        *,
        number: int,
        title: str,
        head_sha: str,
        author: str,
        is_open: bool,
        changed_files: Iterable[str] = (),
    ) -> "Submission":
        package, version = parse_submission_title(title)
        return cls(
            number=number,
            title=title,
            package=package,
            version=version,
            head_sha=head_sha,
            author=author,
            is_open=is_open,
            changed_files=tuple(changed_files),
        )

    @classmethod
    def from_pull_request(cls, payload: dict[str, Any], changed_files: Iterable[str] = ()) -> "Submission":
        """Snapshot a review-surface pull request payload (GitHub REST shape)."""
        return cls.from_title(
            number=int(payload["number"]),
            title=payload.get("title", ""),
            head_sha=payload["head"]["sha"],
            author=payload["user"]["login"],
            is_open=payload.get("state") == "open",
            changed_files=changed_files,
        )
