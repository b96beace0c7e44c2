"""Auto-merge decision engine for new-package registry submissions."""

from .catalog import build_new_package_catalog
from .config import AutoMergeConfig, load_config
from .contracts import CONTRACT_VERSIONS, ContractValidationResult, validate_catalog_freeze
from .distance import damerau_levenshtein, meets_distance_check, visual_distance
from .errors import (
    AutoMergeError,
    ConfigError,
    ExternalCallExhausted,
    GuidelinesNotMet,
    MalformedTitle,
    PreconditionFailed,
    PreconditionKind,
)
from .exemptions import AuthorizationConfig, ExemptionDecision, resolve_exemption
from .guidelines import (
    Applicability,
    GuidelineCatalog,
    GuidelineContext,
    GuidelineResult,
    GuidelineSettings,
    GuidelineSlot,
    Phase,
)
from .orchestrator import EvaluationOutcome, NewPackageOrchestrator, evaluate_new_submission
from .registry import CommandProbe, InMemoryRegistry, RegistrySnapshot, StaticProbe
from .report import STATUS_CONTEXT, CommitState, comment_text_fail, comment_text_pass
from .retry import RetryPolicy, retry
from .review import GitHubReviewSurface, ReviewSurface
from .submission import Submission, is_autogenerated_name, parse_submission_title

__all__ = [
    "AutoMergeError",
    "PreconditionKind",
    "PreconditionFailed",
    "GuidelinesNotMet",
    "ExternalCallExhausted",
    "MalformedTitle",
    "ConfigError",
    "RetryPolicy",
    "retry",
    "Submission",
    "parse_submission_title",
    "is_autogenerated_name",
    "RegistrySnapshot",
    "InMemoryRegistry",
    "StaticProbe",
    "CommandProbe",
    "damerau_levenshtein",
    "visual_distance",
    "meets_distance_check",
    "AuthorizationConfig",
    "ExemptionDecision",
    "resolve_exemption",
    "Applicability",
    "Phase",
    "GuidelineSettings",
    "GuidelineContext",
    "GuidelineSlot",
    "GuidelineResult",
    "GuidelineCatalog",
    "build_new_package_catalog",
    "STATUS_CONTEXT",
    "CommitState",
    "comment_text_pass",
    "comment_text_fail",
    "ReviewSurface",
    "GitHubReviewSurface",
    "EvaluationOutcome",
    "NewPackageOrchestrator",
    "evaluate_new_submission",
    "AutoMergeConfig",
    "load_config",
    "CONTRACT_VERSIONS",
    "ContractValidationResult",
    "validate_catalog_freeze",
]
