"""
End-to-end pipeline scenarios through the LangGraph agent.

The model client is scripted so each test controls every stage reply.

System role: Verification of orchestration and fallback behavior
"""

import pytest

from visual_notes.core.agentic_system.visual_notes_agent import VisualNotesAgent
from visual_notes.core.agentic_system.visual_notes_agent.agent.visual_notes_schema import (
    GenerationContext,
    SourceKind,
    StageOutcome,
    StageStatus,
)
from visual_notes.core.agentic_system.visual_notes_agent.graph.nodes import apply_outcome
from visual_notes.core.exceptions import (
    GenerationFailedError,
    GenerationFailureKind,
    ModelCallError,
)

RENDER_FIELDS = ("id", "seed", "versionNonce", "strokeColor", "opacity", "roundness")


@pytest.fixture
def agent(scripted_client, generation_settings):
    return VisualNotesAgent(scripted_client, generation_settings)


class TestHappyPath:
    @pytest.mark.asyncio
    async def test_small_diagram_runs_generation_only(
        self, agent, scripted_client, text_context, build
    ):
        scripted_client.complete.side_effect = [build.reply(build.labeled_boxes(4))]

        result = await agent.ainvoke(text_context)

        assert len(result.elements) == 4
        assert scripted_client.complete.await_count == 1
        assert result.stage_statuses == {
            "generation": "success",
            "icon_enhancement": "skipped",
            "verification": "skipped",
            "layout_refinement": "skipped",
        }
        for element in result.elements:
            for field in RENDER_FIELDS:
                assert field in element
        assert len({e["id"] for e in result.elements}) == 4

    @pytest.mark.asyncio
    async def test_text_elements_get_typography_and_name(
        self, agent, scripted_client, text_context, build
    ):
        elements = [build.rect(), build.text("Photosynthesis", fontSize=28)]
        scripted_client.complete.side_effect = [build.reply(elements)]

        result = await agent.ainvoke(text_context)

        label = result.elements[1]
        assert label["fontFamily"] == "normal"
        assert label["textAlign"] == "center"
        assert result.suggested_project_name == "Photosynthesis"


class TestGenerationFailure:
    @pytest.mark.asyncio
    async def test_refusal_raises_malformed(self, agent, scripted_client, text_context):
        scripted_client.complete.side_effect = ["Sorry, I can't help with that."]

        with pytest.raises(GenerationFailedError) as exc_info:
            await agent.ainvoke(text_context)

        assert exc_info.value.kind is GenerationFailureKind.MALFORMED_RESPONSE
        assert scripted_client.complete.await_count == 1

    @pytest.mark.asyncio
    async def test_timeout_raises_timeout(self, agent, scripted_client, text_context):
        scripted_client.complete.side_effect = ModelCallError(
            "Request timed out", GenerationFailureKind.TIMEOUT
        )

        with pytest.raises(GenerationFailedError) as exc_info:
            await agent.ainvoke(text_context)

        assert exc_info.value.kind is GenerationFailureKind.TIMEOUT


class TestBestEffortStages:
    @pytest.mark.asyncio
    async def test_verification_removes_unsupported_elements(
        self, agent, scripted_client, text_context, build
    ):
        elements = build.labeled_boxes(6)
        scripted_client.complete.side_effect = [
            build.reply(elements),
            build.reply(elements),
            build.reply(
                {
                    "elements": elements[:4],
                    "removed": [
                        {"element": "Concept 2", "reason": "not mentioned in the notes"},
                    ],
                }
            ),
        ]

        result = await agent.ainvoke(text_context)

        assert len(result.elements) == 4
        assert result.stage_statuses["verification"] == "success"
        assert result.stage_statuses["layout_refinement"] == "skipped"

    @pytest.mark.asyncio
    async def test_enhancement_timeout_keeps_generated_elements(
        self, agent, scripted_client, text_context, build
    ):
        elements = build.labeled_boxes(6)
        scripted_client.complete.side_effect = [
            build.reply(elements),
            ModelCallError("Request timed out", GenerationFailureKind.TIMEOUT),
            build.reply(elements),
        ]

        result = await agent.ainvoke(text_context)

        assert len(result.elements) == 6
        assert result.stage_statuses["icon_enhancement"] == "failed"
        assert result.stage_statuses["verification"] == "success"

    @pytest.mark.asyncio
    async def test_unexpected_stage_error_does_not_escape(
        self, agent, scripted_client, text_context, build
    ):
        elements = build.labeled_boxes(6)
        scripted_client.complete.side_effect = [
            build.reply(elements),
            RuntimeError("boom"),
            RuntimeError("boom again"),
        ]

        result = await agent.ainvoke(text_context)

        assert len(result.elements) == 6
        assert result.stage_statuses["icon_enhancement"] == "failed"
        assert result.stage_statuses["verification"] == "failed"

    @pytest.mark.asyncio
    async def test_refinement_count_mismatch_keeps_previous_layout(
        self, agent, scripted_client, text_context, build
    ):
        elements = build.labeled_boxes(8)
        moved = [{**e, "x": e["x"] + 500} for e in elements[:7]]
        scripted_client.complete.side_effect = [
            build.reply(elements),
            build.reply(elements),
            build.reply(elements),
            build.reply(moved),
        ]

        result = await agent.ainvoke(text_context)

        assert len(result.elements) == 8
        assert [e["x"] for e in result.elements] == [e["x"] for e in elements]
        assert result.stage_statuses["layout_refinement"] == "failed"

    @pytest.mark.asyncio
    async def test_image_source_skips_audit(self, agent, scripted_client, build):
        context = GenerationContext(SourceKind.IMAGE, "QUJD", image_mime_type="image/png")
        scripted_client.complete.side_effect = [build.reply(build.labeled_boxes(2))]

        result = await agent.ainvoke(context)

        assert len(result.elements) == 2
        assert result.suggested_project_name == "Concept 0"


class TestApplyOutcome:
    def test_success_replaces_elements(self, build):
        update = apply_outcome([build.rect()], StageOutcome.success("s", [build.text("a")]))
        assert update["elements"][0]["type"] == "text"

    @pytest.mark.parametrize(
        "outcome",
        [StageOutcome.skipped("s", "too small"), StageOutcome.failed("s", "bad")],
    )
    def test_other_outcomes_carry_elements_forward(self, build, outcome):
        update = apply_outcome([build.rect()], outcome)

        assert "elements" not in update
        assert update["outcomes"][0].status in (StageStatus.SKIPPED, StageStatus.FAILED)
