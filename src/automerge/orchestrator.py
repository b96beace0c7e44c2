"""LangGraph-based evaluation flow for new-package submissions.

One run is a small state graph:
  post_pending        -> pending status on the head revision
  static_guidelines   -> cheap, local guidelines
  interim_failure     -> early failure status (only when a static guideline failed)
  dynamic_guidelines  -> install / load probes, always run
  final_report        -> final status and comment

Preconditions are checked before the graph starts, so a closed submission or
an unknown author never produces an external write.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

from langgraph.graph import END, StateGraph

from .catalog import build_new_package_catalog
from .errors import GuidelinesNotMet, PreconditionFailed, PreconditionKind
from .exemptions import AuthorizationConfig, resolve_exemption
from .guidelines import GuidelineCatalog, GuidelineContext, GuidelineResult, GuidelineSettings, Phase
from .registry import RegistrySnapshot
from .report import (
    CommitState,
    comment_text_fail,
    comment_text_pass,
    failure_description,
    pending_description,
    success_description,
)
from .retry import RetryPolicy, retry
from .review import ReviewSurface
from .submission import Submission

logger = logging.getLogger("automerge.orchestrator")


@dataclass(frozen=True, slots=True)
class EvaluationOutcome:
    results: tuple[GuidelineResult, ...]

    @property
    def overall_pass(self) -> bool:
        return all(r.passed for r in self.results)

    @property
    def failures(self) -> tuple[GuidelineResult, ...]:
        return tuple(r for r in self.results if not r.passed)

    @property
    def failing_messages(self) -> list[str]:
        return [r.message for r in self.failures]

    def failed(self, phase: Phase | None = None) -> bool:
        return any(not r.passed for r in self.results if phase is None or r.slot.phase is phase)


class NewPackageOrchestrator:
    """Evaluates one new-package submission and reports the decision."""

    def __init__(
        self,
        review: ReviewSurface,
        registry: RegistrySnapshot,
        auth: AuthorizationConfig,
        *,
        catalog: GuidelineCatalog | None = None,
        settings: GuidelineSettings | None = None,
        retry_policy: RetryPolicy | None = None,
        suggest_onepointzero: bool = True,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.review = review
        self.registry = registry
        self.auth = auth
        self.catalog = catalog or build_new_package_catalog()
        self.settings = settings or GuidelineSettings()
        self.retry_policy = retry_policy or RetryPolicy()
        self.suggest_onepointzero = suggest_onepointzero
        self.sleep = sleep
        self.graph = self._build_graph()

    def _build_graph(self) -> Any:
        builder = StateGraph(dict)

        builder.add_node("post_pending", self._node_post_pending)
        builder.add_node("static_guidelines", self._node_static_guidelines)
        builder.add_node("interim_failure", self._node_interim_failure)
        builder.add_node("dynamic_guidelines", self._node_dynamic_guidelines)
        builder.add_node("final_report", self._node_final_report)

        builder.set_entry_point("post_pending")
        builder.add_edge("post_pending", "static_guidelines")
        builder.add_conditional_edges(
            "static_guidelines",
            self._route_after_static,
            {"interim_failure": "interim_failure", "dynamic_guidelines": "dynamic_guidelines"},
        )
        builder.add_edge("interim_failure", "dynamic_guidelines")
        builder.add_edge("dynamic_guidelines", "final_report")
        builder.add_edge("final_report", END)

        return builder.compile()

    # ------------------------------------------------------------------
    # External writes
    # ------------------------------------------------------------------

    def _post_status(self, sha: str, state: CommitState, description: str) -> None:
        retry(
            lambda: self.review.post_status(sha, state, description),
            policy=self.retry_policy,
            label=f"post {state.value} status",
            sleep=self.sleep,
        )

    def _update_comment(self, number: int, body: str) -> None:
        retry(
            lambda: self.review.update_comment(number, body),
            policy=self.retry_policy,
            label="update comment",
            sleep=self.sleep,
        )

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def _run_phase(self, state: dict, phase: Phase) -> dict:
        ctx: GuidelineContext = state["context"]
        for result in self.catalog.evaluate_phase(phase, ctx):
            logger.info(
                "guideline %d %s: passed=%s evaluated=%s message=%r",
                result.slot.index,
                result.slot.name,
                result.passed,
                result.evaluated,
                result.message,
            )
            state["results"].append(result)
        return state

    def _node_post_pending(self, state: dict) -> dict:
        sub: Submission = state["submission"]
        self._post_status(sub.head_sha, CommitState.PENDING, pending_description())
        return state

    def _node_static_guidelines(self, state: dict) -> dict:
        return self._run_phase(state, Phase.STATIC)

    def _route_after_static(self, state: dict) -> str:
        if EvaluationOutcome(results=tuple(state["results"])).failed(Phase.STATIC):
            return "interim_failure"
        return "dynamic_guidelines"

    def _node_interim_failure(self, state: dict) -> dict:
        sub: Submission = state["submission"]
        self._post_status(sub.head_sha, CommitState.FAILURE, failure_description())
        return state

    def _node_dynamic_guidelines(self, state: dict) -> dict:
        return self._run_phase(state, Phase.DYNAMIC)

    def _node_final_report(self, state: dict) -> dict:
        sub: Submission = state["submission"]
        ctx: GuidelineContext = state["context"]
        outcome = EvaluationOutcome(results=tuple(state["results"]))

        if outcome.overall_pass:
            self._post_status(sub.head_sha, CommitState.SUCCESS, success_description(sub.package, sub.head_sha))
            body = comment_text_pass(
                sub.version,
                suggest_onepointzero=self.suggest_onepointzero,
                special_exemption=ctx.exemption.granted_special_exemption,
            )
        else:
            self._post_status(sub.head_sha, CommitState.FAILURE, failure_description())
            body = comment_text_fail(
                outcome.failing_messages,
                suggest_onepointzero=self.suggest_onepointzero,
                version=sub.version,
            )
        self._update_comment(sub.number, body)

        state["outcome"] = outcome
        return state

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def check_preconditions(self, submission: Submission) -> None:
        if not submission.is_open:
            raise PreconditionFailed(
                PreconditionKind.SUBMISSION_NOT_OPEN,
                f"Submission #{submission.number} is not open. Exiting...",
            )
        if not self.auth.is_authorized(submission.author):
            raise PreconditionFailed(
                PreconditionKind.AUTHOR_NOT_AUTHORIZED,
                f"Author {submission.author} is not authorized to automerge. Exiting...",
            )

    def evaluate(self, submission: Submission) -> EvaluationOutcome:
        """Run every guideline and report the decision.

        Raises ``PreconditionFailed`` before any write, ``ExternalCallExhausted``
        when a status or comment write keeps failing, and ``GuidelinesNotMet``
        after the failure has been reported.
        """
        self.check_preconditions(submission)

        exemption = resolve_exemption(
            submission.author,
            is_autogenerated=submission.is_autogenerated,
            auth=self.auth,
        )
        logger.info(
            "evaluating new package %s %s (autogenerated=%s, exemption=%s)",
            submission.package,
            submission.version,
            submission.is_autogenerated,
            exemption.granted_special_exemption,
        )
        ctx = GuidelineContext(
            submission=submission,
            registry=self.registry,
            exemption=exemption,
            auth=self.auth,
            settings=self.settings,
        )

        final = self.graph.invoke(
            {
                "submission": submission,
                "context": ctx,
                "results": [],
                "outcome": None,
            }
        )
        outcome: EvaluationOutcome = final["outcome"]
        if not outcome.overall_pass:
            raise GuidelinesNotMet(outcome.failures)
        return outcome


def evaluate_new_submission(
    submission: Submission,
    auth: AuthorizationConfig,
    *,
    review: ReviewSurface,
    registry: RegistrySnapshot,
    **options: Any,
) -> EvaluationOutcome:
    return NewPackageOrchestrator(review, registry, auth, **options).evaluate(submission)
