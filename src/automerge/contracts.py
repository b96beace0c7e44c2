from __future__ import annotations

from dataclasses import dataclass

from .guidelines import Applicability, GuidelineCatalog, Phase

CONTRACT_VERSIONS = {
    "new_package_catalog": "v1",
    "status_context": "v1",
}

# Guideline numbers are quoted back to authors; these must never shift.
FROZEN_NEW_PACKAGE_SLOTS = {
    0: Applicability.ALWAYS,
    1: Applicability.ALWAYS,
    2: Applicability.DISABLED,
    3: Applicability.UNLESS_EXEMPT,
    4: Applicability.UNLESS_EXEMPT,
    5: Applicability.ALWAYS,
    6: Applicability.DISABLED,
    7: Applicability.DISABLED,
    8: Applicability.ALWAYS,
    9: Applicability.AUTOGENERATED_ONLY,
    10: Applicability.ALWAYS,
    11: Applicability.ALWAYS,
    12: Applicability.ALWAYS,
    13: Applicability.ALWAYS,
}

DYNAMIC_SLOTS = frozenset({12, 13})


@dataclass(frozen=True, slots=True)
class ContractValidationResult:
    is_valid: bool
    errors: list[str]


def validate_catalog_freeze(catalog: GuidelineCatalog) -> ContractValidationResult:
    errors: list[str] = []
    current = {s.index: s for s in catalog}

    missing = sorted(set(FROZEN_NEW_PACKAGE_SLOTS).difference(current))
    if missing:
        errors.append(f"missing_slots:{missing}")

    unexpected = sorted(set(current).difference(FROZEN_NEW_PACKAGE_SLOTS))
    if unexpected:
        errors.append(f"unexpected_slots:{unexpected}")

    for index, applicability in FROZEN_NEW_PACKAGE_SLOTS.items():
        slot = current.get(index)
        if slot is None:
            continue
        if slot.applicability is not applicability:
            errors.append(f"applicability_changed:{index}:{slot.applicability.value}")
        expected_phase = Phase.DYNAMIC if index in DYNAMIC_SLOTS else Phase.STATIC
        if slot.phase is not expected_phase:
            errors.append(f"phase_changed:{index}:{slot.phase.value}")

    return ContractValidationResult(is_valid=not errors, errors=errors)
