from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

from .exemptions import AuthorizationConfig, ExemptionDecision
from .registry import RegistrySnapshot
from .submission import Submission


class Applicability(str, Enum):
    ALWAYS = "always"
    UNLESS_EXEMPT = "unless_exempt"
    AUTOGENERATED_ONLY = "autogenerated_only"
    DISABLED = "disabled"


class Phase(str, Enum):
    STATIC = "static"
    DYNAMIC = "dynamic"


@dataclass(frozen=True, slots=True)
class GuidelineSettings:
    language_name: str = "julia"
    reserved_prefix: str = "Ju"
    min_name_length: int = 5


@dataclass(frozen=True, slots=True)
class GuidelineContext:
    submission: Submission
    registry: RegistrySnapshot
    exemption: ExemptionDecision
    auth: AuthorizationConfig
    settings: GuidelineSettings = GuidelineSettings()

    @property
    def is_autogenerated(self) -> bool:
        return self.submission.is_autogenerated


Predicate = Callable[[GuidelineContext], tuple[bool, str]]


@dataclass(frozen=True, slots=True)
class GuidelineSlot:
    index: int
    name: str
    applicability: Applicability
    phase: Phase
    predicate: Predicate

    def is_skipped(self, ctx: GuidelineContext) -> bool:
        if self.applicability is Applicability.DISABLED:
            return True
        if self.applicability is Applicability.UNLESS_EXEMPT:
            return ctx.exemption.granted_special_exemption
        if self.applicability is Applicability.AUTOGENERATED_ONLY:
            return not ctx.is_autogenerated
        return False


@dataclass(frozen=True, slots=True)
class GuidelineResult:
    slot: GuidelineSlot
    passed: bool
    message: str
    evaluated: bool = True


class GuidelineCatalog:
    """Immutable, ordered set of numbered guideline slots."""

    def __init__(self, slots: Iterable[GuidelineSlot]):
        ordered = tuple(slots)
        indices = [s.index for s in ordered]
        if indices != sorted(set(indices)):
            raise ValueError(f"guideline indices must be unique and ascending: {indices}")
        self._slots = ordered

    @property
    def slots(self) -> tuple[GuidelineSlot, ...]:
        return self._slots

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self):
        return iter(self._slots)

    def slots_for(self, phase: Phase) -> tuple[GuidelineSlot, ...]:
        return tuple(s for s in self._slots if s.phase is phase)

    def by_name(self, name: str) -> GuidelineSlot:
        for slot in self._slots:
            if slot.name == name:
                return slot
        raise KeyError(name)

    @staticmethod
    def evaluate(slot: GuidelineSlot, ctx: GuidelineContext) -> GuidelineResult:
        if slot.is_skipped(ctx):
            return GuidelineResult(slot=slot, passed=True, message="", evaluated=False)

        passed, message = slot.predicate(ctx)
        if passed:
            return GuidelineResult(slot=slot, passed=True, message="")
        return GuidelineResult(
            slot=slot,
            passed=False,
            message=message or f"Guideline {slot.index} ({slot.name}) was not met.",
        )

    def evaluate_phase(self, phase: Phase, ctx: GuidelineContext) -> list[GuidelineResult]:
        return [self.evaluate(slot, ctx) for slot in self.slots_for(phase)]
