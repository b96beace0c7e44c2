"""Default guideline predicates for new-package submissions.

Every predicate is pure: it reads the submission snapshot and the registry
view carried by the context and returns ``(passed, message)``.
"""
from __future__ import annotations

import re

from .distance import meets_distance_check
from .guidelines import GuidelineContext
from .policy_tables import ALLOWED_AUTOGENERATED_DEPENDENCIES, allowed_new_package_files
from .submission import is_autogenerated_name

_NORMAL_CAPITALIZATION = re.compile(r"^[A-Z]\w*[a-z]\w*[0-9]?$")
_UNBOUNDED_PARTS = ("*", ">", "≥")


def always_pass(ctx: GuidelineContext) -> tuple[bool, str]:
    return True, ""


def meets_author_authorization(ctx: GuidelineContext) -> tuple[bool, str]:
    if ctx.is_autogenerated or ctx.submission.author in ctx.auth.authorized_authors:
        return True, ""
    return False, (
        "This package is not an auto-generated package. The author of this submission "
        "is not authorized to register packages of this kind."
    )


def meets_allowed_files(ctx: GuidelineContext) -> tuple[bool, str]:
    allowed = allowed_new_package_files(ctx.submission.package)
    extra = sorted(set(ctx.submission.changed_files) - allowed)
    if not ctx.submission.changed_files:
        return False, "The submission does not change any registry files."
    if extra:
        return False, "This submission modifies files it is not allowed to modify: " + ", ".join(
            f"`{f}`" for f in extra
        )
    return True, ""


def meets_normal_capitalization(ctx: GuidelineContext) -> tuple[bool, str]:
    if _NORMAL_CAPITALIZATION.match(ctx.submission.package):
        return True, ""
    return False, (
        "Name does not meet all of the following: starts with an uppercase letter, "
        "ASCII alphanumerics only, not all letters are uppercase."
    )


def meets_name_length(ctx: GuidelineContext) -> tuple[bool, str]:
    minimum = ctx.settings.min_name_length
    if len(ctx.submission.package) >= minimum:
        return True, ""
    return False, f"Name is not at least {minimum} characters long."


def meets_reserved_name_check(ctx: GuidelineContext) -> tuple[bool, str]:
    name = ctx.submission.package
    reserved = ctx.settings.language_name
    if reserved.lower() in name.lower():
        return False, f"Lowercase package name {name.lower()} contains the string \"{reserved.lower()}\"."
    if name.startswith(ctx.settings.reserved_prefix):
        return False, f"Package name starts with \"{ctx.settings.reserved_prefix}\"."
    return True, ""


def _has_upper_bound(entry: str) -> bool:
    parts = [p.strip() for p in entry.split(",") if p.strip()]
    if not parts:
        return False
    return not any(p == "*" or p.startswith(_UNBOUNDED_PARTS) for p in parts)


def meets_compat_for_all_deps(ctx: GuidelineContext) -> tuple[bool, str]:
    sub = ctx.submission
    compat = ctx.registry.compat(sub.package, sub.version)
    language = ctx.settings.language_name
    problems: list[str] = []

    if language not in compat:
        problems.append(f"There is no compat entry for `{language}`.")

    for dep in ctx.registry.dependencies(sub.package, sub.version):
        if ctx.registry.is_stdlib(dep) or is_autogenerated_name(dep):
            continue
        if dep not in compat:
            problems.append(f"There is no compat entry for the dependency `{dep}`.")

    for name, entry in sorted(compat.items()):
        if not _has_upper_bound(entry):
            problems.append(f"The compat entry for `{name}` (`{entry}`) has no upper bound.")

    if problems:
        return False, "Compat (with upper bound) is required for all dependencies:\n" + "\n".join(
            f"- {p}" for p in problems
        )
    return True, ""


def meets_allowed_autogenerated_dependencies(ctx: GuidelineContext) -> tuple[bool, str]:
    sub = ctx.submission
    disallowed = [
        dep
        for dep in ctx.registry.dependencies(sub.package, sub.version)
        if dep not in ALLOWED_AUTOGENERATED_DEPENDENCIES and not is_autogenerated_name(dep)
    ]
    if disallowed:
        return False, (
            "Auto-generated packages may only depend on "
            + ", ".join(sorted(ALLOWED_AUTOGENERATED_DEPENDENCIES))
            + " and other auto-generated packages. Disallowed: "
            + ", ".join(sorted(disallowed))
        )
    return True, ""


def meets_distance_from_existing_names(ctx: GuidelineContext) -> tuple[bool, str]:
    existing = [n for n in ctx.registry.existing_package_names() if not is_autogenerated_name(n)]
    return meets_distance_check(ctx.submission.package, existing)


def meets_name_ascii(ctx: GuidelineContext) -> tuple[bool, str]:
    if ctx.submission.package.isascii():
        return True, ""
    return False, "Name is not composed of ASCII characters only."


def meets_version_can_be_installed(ctx: GuidelineContext) -> tuple[bool, str]:
    return ctx.registry.can_install(ctx.submission.package, ctx.submission.version)


def meets_version_can_be_loaded(ctx: GuidelineContext) -> tuple[bool, str]:
    return ctx.registry.can_load(ctx.submission.package, ctx.submission.version)
