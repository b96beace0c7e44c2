from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AuthorizationConfig:
    authorized_authors: frozenset[str]
    autogenerated_authors: frozenset[str] = frozenset()

    @classmethod
    def from_lists(cls, authorized: list[str], autogenerated: list[str] | None = None) -> "AuthorizationConfig":
        return cls(
            authorized_authors=frozenset(a.strip() for a in authorized if a.strip()),
            autogenerated_authors=frozenset(a.strip() for a in (autogenerated or []) if a.strip()),
        )

    @property
    def all_authors(self) -> frozenset[str]:
        return self.authorized_authors | self.autogenerated_authors

    def is_authorized(self, login: str) -> bool:
        return login in self.all_authors


@dataclass(frozen=True, slots=True)
class ExemptionDecision:
    granted_special_exemption: bool


def resolve_exemption(author: str, *, is_autogenerated: bool, auth: AuthorizationConfig) -> ExemptionDecision:
    """Exempt only auto-generated packages registered by the narrow auto-generated tier.

    A narrow-tier author registering any other kind of package is evaluated as
    a normal author; the authorization guideline then decides whether they may.
    """
    return ExemptionDecision(
        granted_special_exemption=is_autogenerated and author in auth.autogenerated_authors,
    )
