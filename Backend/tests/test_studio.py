# tests/test_studio.py
"""
Generate -> preview -> repair feedback loop.
"""
import pytest

from faber.core.config import GenerationSettings, PreviewSettings
from faber.core.types import SessionStatus
from faber.generation import EscalationController
from faber.orchestration import Studio
from faber.sandbox import PreviewManager, protocol
from tests.conftest import COUNTER_COMPONENT
from tests.utils.fake_generator import ScriptedGenerator, json_response
from tests.utils.scripted_runtime import ScriptedRuntime


def make_studio(generator, runtime, validator, rounds=1):
    settings = GenerationSettings(call_timeout_s=1.0, acceptance_score=60, validate_results=True, max_feedback_rounds=rounds)
    controller = EscalationController(generator, validator, settings)
    previews = PreviewManager(runtime, PreviewSettings(timeout_ms=500))
    return Studio(controller, previews, settings)


@pytest.mark.asyncio
async def test_clean_preview_needs_no_feedback(validator, scripted_runtime):
    generator = ScriptedGenerator(json_response(COUNTER_COMPONENT))
    studio = make_studio(generator, scripted_runtime, validator)

    result = await studio.generate_and_preview("p1", "a counter")
    await studio.previews.shutdown()

    assert result.session.status == SessionStatus.SUCCESS
    assert result.session.version == 1
    assert result.feedback_rounds == 0
    assert len(generator.calls) == 1
    assert result.to_dict()["preview"]["status"] == "success"


@pytest.mark.asyncio
async def test_sandbox_error_feeds_back_once(validator):
    runtime = ScriptedRuntime(
        scripts=[[protocol.load_start(), protocol.error("items is not defined", kind="runtime")]],
        default=[protocol.ready(9)],
    )
    generator = ScriptedGenerator(json_response(COUNTER_COMPONENT), json_response(COUNTER_COMPONENT))
    studio = make_studio(generator, runtime, validator)

    result = await studio.generate_and_preview("p1", "a counter")
    timeline = studio.previews.get("p1").telemetry
    await studio.previews.shutdown()

    assert result.feedback_rounds == 1
    assert result.failures == [{"version": 1, "kind": "runtime", "error": "items is not defined"}]
    assert result.session.status == SessionStatus.SUCCESS
    assert result.session.version == 2

    repair_prompt = generator.calls[1]["prompt"]
    assert "## Previous Preview Failure" in repair_prompt
    assert "items is not defined" in repair_prompt

    sources = [e.source for e in timeline.events()]
    assert sources.count("studio") == 1
    assert "ladder" in sources


@pytest.mark.asyncio
async def test_feedback_rounds_are_bounded(validator):
    runtime = ScriptedRuntime(default=[protocol.error("Unexpected token", kind="compile")])
    generator = ScriptedGenerator(*[json_response(COUNTER_COMPONENT)] * 5)
    studio = make_studio(generator, runtime, validator, rounds=2)

    result = await studio.generate_and_preview("p1", "a counter")
    await studio.previews.shutdown()

    assert result.feedback_rounds == 2
    assert result.session.status == SessionStatus.ERROR
    assert result.session.error_kind == "compile"
    assert len(generator.calls) == 3
    runtime.counter.assert_exact("launch", 3)


@pytest.mark.asyncio
async def test_feedback_disabled(validator):
    runtime = ScriptedRuntime(default=[protocol.error("Boom")])
    studio = make_studio(ScriptedGenerator(json_response(COUNTER_COMPONENT)), runtime, validator, rounds=0)

    result = await studio.generate_and_preview("p1", "a counter")
    await studio.previews.shutdown()

    assert result.feedback_rounds == 0
    assert result.session.status == SessionStatus.ERROR
    assert runtime.shut_down


@pytest.mark.asyncio
async def test_versions_increase_per_project(validator, scripted_runtime):
    generator = ScriptedGenerator(*[json_response(COUNTER_COMPONENT)] * 3)
    studio = make_studio(generator, scripted_runtime, validator)

    first = await studio.generate_and_preview("p1", "a counter")
    second = await studio.generate_and_preview("p1", "a counter")
    other = await studio.generate_and_preview("p2", "a counter")
    await studio.previews.shutdown()

    assert (first.session.version, second.session.version, other.session.version) == (1, 2, 1)
