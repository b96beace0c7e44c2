from __future__ import annotations

from enum import Enum
from typing import Sequence

STATUS_CONTEXT = "automerge/decision"


class CommitState(str, Enum):
    PENDING = "pending"
    FAILURE = "failure"
    SUCCESS = "success"


def pending_description() -> str:
    return "New package. Pending."


def failure_description() -> str:
    return "New package. Failed."


def success_description(package: str, head_sha: str) -> str:
    return f'New package. Approved. name="{package}". sha="{head_sha}"'


def _is_pre_one(version: str) -> bool:
    return version.split(".", 1)[0] == "0"


def _onepointzero_hint(version: str) -> str:
    return (
        "\n\nIf this package is ready for general use, consider registering "
        "version 1.0.0 next: versions below 1.0.0 signal an unstable API and "
        f"`{version}` will be treated as such by the resolver."
    )


def comment_text_pass(version: str, *, suggest_onepointzero: bool, special_exemption: bool) -> str:
    body = (
        "Congratulations! Your new package registration meets all of the guidelines "
        "for auto-merging and is scheduled to be merged when the mandatory waiting "
        "period has elapsed.\n\n"
        "Since you are registering a new package, please make sure that you have "
        "read the package naming guidelines."
    )
    if suggest_onepointzero and not special_exemption and _is_pre_one(version):
        body += _onepointzero_hint(version)
    return body + "\n\n<!-- [noblock] -->"


def comment_text_fail(messages: Sequence[str], *, suggest_onepointzero: bool, version: str) -> str:
    items = "\n".join(f"- {m}" for m in messages)
    body = (
        "Your new package registration did not meet the guidelines for auto-merging. "
        "Please make sure that you have read the package naming guidelines.\n\n"
        f"The following guidelines were not met:\n\n{items}\n\n"
        "Note that the guidelines are only required for the pull request to be merged "
        "automatically. A registry maintainer can still merge it manually; if you "
        "believe an exception is warranted, leave a comment explaining why.\n\n"
        "After you address the issues above, re-trigger the registration and this "
        "check will run again."
    )
    if suggest_onepointzero and _is_pre_one(version):
        body += _onepointzero_hint(version)
    return body + "\n\n<!-- [noblock] -->"
