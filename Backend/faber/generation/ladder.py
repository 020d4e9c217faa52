# faber/generation/ladder.py
"""
Escalation Controller - primary -> retry -> deterministic fallback.

The ladder is a fixed list of strategies and a cursor. Each step:
1. Plan the call (pure function of prompt + prior attempt)
2. Call the generator under a caller-side time budget
3. Extract, auto-fix and validate the result
4. Accept, or record the reason and advance the cursor

The last strategy is offline and always accepted, so a run never fails.
All run state is local to run(); one controller serves concurrent runs.
"""
import asyncio
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional, Sequence

from faber.core.config import GenerationSettings
from faber.core.exceptions import FaberError
from faber.core.logging import log, log_section
from faber.core.types import ExtractionResult, GenerationAttempt, GenerationOutcome
from faber.extraction import extract
from faber.lib.monitoring import record_generation_outcome
from faber.generation.fallback import synthesize_fallback
from faber.generation.progress import ProgressCallback, ProgressTracker
from faber.generation.prompts import (
    CODE_GENERATION_SYSTEM_PROMPT,
    RETRY_SYSTEM_PROMPT,
    build_enhanced_prompt,
    build_retry_prompt,
)
from faber.telemetry.aggregator import TelemetryLog
from faber.validation.code_validator import CodeValidator


@dataclass
class GenerationOptions:
    """Caller choices that shape the primary prompt and provider call."""
    model: Optional[str] = None
    provider: Optional[str] = None
    complexity: Optional[str] = None
    style: Optional[str] = None
    context: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class StepPlan:
    prompt: str
    system_prompt: str
    params: Dict[str, Any]


PlanFn = Callable[[str, Optional[GenerationAttempt], GenerationOptions, GenerationSettings], StepPlan]


@dataclass(frozen=True)
class Strategy:
    name: str
    # None marks the offline fallback
    plan: Optional[PlanFn]
    # Settings attribute holding the score reported without validation
    score_setting: str


# ═══════════════════════════════════════════════════════════════════════════════
# PLANNING (pure)
# ═══════════════════════════════════════════════════════════════════════════════

def _params(options: GenerationOptions, temperature: float, max_tokens: int) -> Dict[str, Any]:
    params: Dict[str, Any] = {"temperature": temperature, "max_tokens": max_tokens}
    if options.model:
        params["model"] = options.model
    if options.provider:
        params["provider"] = options.provider
    return params


def plan_primary(
    prompt: str,
    prior: Optional[GenerationAttempt],
    options: GenerationOptions,
    config: GenerationSettings,
) -> StepPlan:
    return StepPlan(
        prompt=build_enhanced_prompt(prompt, options.context, options.complexity, options.style),
        system_prompt=CODE_GENERATION_SYSTEM_PROMPT,
        params=_params(options, config.primary_temperature, config.primary_max_tokens),
    )


def plan_retry(
    prompt: str,
    prior: Optional[GenerationAttempt],
    options: GenerationOptions,
    config: GenerationSettings,
) -> StepPlan:
    return StepPlan(
        prompt=build_retry_prompt(prompt, prior.failure if prior else None),
        system_prompt=RETRY_SYSTEM_PROMPT,
        params=_params(options, config.retry_temperature, config.retry_max_tokens),
    )


DEFAULT_STRATEGIES: Sequence[Strategy] = (
    Strategy("primary", plan_primary, "primary_score"),
    Strategy("retry", plan_retry, "retry_score"),
    Strategy("fallback", None, "fallback_score"),
)


# ═══════════════════════════════════════════════════════════════════════════════
# CONTROLLER
# ═══════════════════════════════════════════════════════════════════════════════

class EscalationController:
    """
    Drives one prompt down the ladder until a strategy is accepted.

    The generator is any object with
    ``async generate(prompt, params, system_prompt) -> {"content": str}``.
    """

    def __init__(
        self,
        generator,
        validator: CodeValidator,
        config: Optional[GenerationSettings] = None,
        extract_fn: Callable[[Any], ExtractionResult] = extract,
        strategies: Sequence[Strategy] = DEFAULT_STRATEGIES,
    ):
        if not strategies or strategies[-1].plan is not None:
            raise ValueError("The last strategy must be the offline fallback")
        self.generator = generator
        self.validator = validator
        self.config = config or GenerationSettings()
        self.extract_fn = extract_fn
        self.strategies = tuple(strategies)

    async def run(
        self,
        prompt: str,
        options: Optional[GenerationOptions] = None,
        on_progress: Optional[ProgressCallback] = None,
        telemetry: Optional[TelemetryLog] = None,
    ) -> GenerationOutcome:
        """
        Run one prompt down the ladder.

        Escalation events go to `telemetry` when given (e.g. the project's
        preview timeline), otherwise to a log private to this run.
        """
        options = options or GenerationOptions()
        telemetry = telemetry if telemetry is not None else TelemetryLog()
        progress = ProgressTracker(on_progress)
        attempts: List[GenerationAttempt] = []
        reasons: List[str] = []

        log_section("LADDER", f"Generating: {prompt[:60]}")
        await progress.update("analyze", 1.0, "Analyzing prompt")
        await progress.update("plan", 1.0, "Planning generation")

        total = len(self.strategies)
        cursor = 0
        while True:
            strategy = self.strategies[cursor]
            await progress.update("generate", cursor / total, f"Running {strategy.name} strategy")

            prior = attempts[-1] if attempts else None
            attempt = await self._attempt(cursor, strategy, prompt, prior, options)
            attempts.append(attempt)
            if attempt.accepted:
                break

            reasons.append(f"{strategy.name}: {attempt.failure}")
            log("LADDER", f"⬇️ {strategy.name} rejected: {attempt.failure}")
            telemetry.warning(
                f"Escalating past {strategy.name}",
                {"strategy": strategy.name, "reason": attempt.failure},
                source="ladder",
            )
            cursor += 1

        await progress.update("generate", 1.0, f"{attempt.strategy} strategy accepted")
        await progress.update("validate", 1.0, "Validation complete")
        await progress.update("optimize", 1.0, "Finalizing files")

        outcome = self._outcome(attempt, len(attempts), reasons)
        log("LADDER", f"✅ Accepted {outcome.strategy} ({outcome.extraction_method}) score={outcome.validation_score}")
        telemetry.info(
            f"Generation accepted via {outcome.strategy}",
            {"method": outcome.extraction_method, "score": outcome.validation_score, "attempts": outcome.attempts},
            source="ladder",
        )
        record_generation_outcome(outcome.strategy)
        await progress.complete()
        return outcome

    # ─────────────────────────────────────────────────────────
    # One rung
    # ─────────────────────────────────────────────────────────

    async def _attempt(
        self,
        index: int,
        strategy: Strategy,
        prompt: str,
        prior: Optional[GenerationAttempt],
        options: GenerationOptions,
    ) -> GenerationAttempt:
        if strategy.plan is None:
            return GenerationAttempt(index, strategy.name, prompt, synthesize_fallback(prompt))

        plan = strategy.plan(prompt, prior, options, self.config)
        failed = ExtractionResult()

        try:
            raw = await asyncio.wait_for(
                self.generator.generate(plan.prompt, plan.params, plan.system_prompt),
                timeout=self.config.call_timeout_s,
            )
        except asyncio.TimeoutError:
            return GenerationAttempt(
                index, strategy.name, plan.prompt, failed,
                failure=f"Generator timed out after {self.config.call_timeout_s}s",
            )
        except FaberError as e:
            return GenerationAttempt(index, strategy.name, plan.prompt, failed, failure=e.message)
        except Exception as e:
            log("LADDER", f"💥 {strategy.name} generator raised {type(e).__name__}: {e}")
            return GenerationAttempt(
                index, strategy.name, plan.prompt, failed,
                failure=f"{type(e).__name__}: {e}",
            )

        extraction = self.extract_fn(raw)
        if not extraction.has_valid_code:
            return GenerationAttempt(
                index, strategy.name, plan.prompt, extraction,
                failure="No valid code could be extracted from the response",
            )

        extraction = replace(extraction, files=tuple(self.validator.auto_fix(extraction.files)))
        if not self.config.validate_results:
            return GenerationAttempt(index, strategy.name, plan.prompt, extraction)

        validation = self.validator.validate(extraction.files)
        failure = None
        if not validation.is_valid:
            codes = sorted({i.code for i in validation.errors})
            failure = f"Validation failed: {', '.join(codes)}"
        elif validation.score < self.config.acceptance_score:
            failure = f"Score {validation.score} below acceptance threshold {self.config.acceptance_score}"
        return GenerationAttempt(index, strategy.name, plan.prompt, extraction, validation, failure)

    def _outcome(self, attempt: GenerationAttempt, count: int, reasons: List[str]) -> GenerationOutcome:
        strategy = self.strategies[attempt.strategy_index]
        if attempt.validation is not None and strategy.plan is not None:
            score = attempt.validation.score
        else:
            score = getattr(self.config, strategy.score_setting)

        return GenerationOutcome(
            files=list(attempt.extraction.files),
            explanation=attempt.extraction.explanation,
            validation_score=score,
            extraction_method=attempt.extraction.method,
            strategy=attempt.strategy,
            fallback_used=strategy.plan is None,
            attempts=count,
            escalation_reasons=reasons,
        )
