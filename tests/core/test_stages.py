"""
Tests for the model-backed pipeline stages.

Each stage runs against a scripted client; the stages decide only their own
outcome, never fallback.

System role: Verification of stage acceptance rules
"""

import pytest

from visual_notes.core.agentic_system.visual_notes_agent.agent.visual_notes_schema import (
    GenerationContext,
    SourceKind,
    StageStatus,
)
from visual_notes.core.agentic_system.visual_notes_agent.stages import (
    run_generation_stage,
    run_icon_enhancement_stage,
    run_layout_refinement_stage,
    run_verification_stage,
)
from visual_notes.core.exceptions import GenerationFailureKind, ModelCallError


def sent_messages(client, call: int = -1):
    """System text and human content of a recorded model call."""
    system, human = client.complete.call_args_list[call].args[0]
    return system.content, human.content


class TestGenerationStage:
    @pytest.mark.asyncio
    async def test_success_returns_validated_elements(
        self, scripted_client, text_context, generation_settings, build
    ):
        scripted_client.complete.side_effect = [build.reply(build.labeled_boxes(4))]

        outcome = await run_generation_stage(text_context, scripted_client, generation_settings)

        assert outcome.status is StageStatus.SUCCESS
        assert len(outcome.elements) == 4
        kwargs = scripted_client.complete.call_args.kwargs
        assert kwargs["temperature"] == 0.5
        assert kwargs["max_tokens"] == generation_settings.max_output_tokens
        _, human = sent_messages(scripted_client)
        assert human.endswith(text_context.content)

    @pytest.mark.asyncio
    async def test_expand_mode_uses_lower_temperature(
        self, scripted_client, generation_settings, build
    ):
        context = GenerationContext(SourceKind.TEXT, "notes", expand_content=True)
        scripted_client.complete.side_effect = [build.reply(build.labeled_boxes(2))]

        await run_generation_stage(context, scripted_client, generation_settings)

        system_prompt, _ = sent_messages(scripted_client)
        assert scripted_client.complete.call_args.kwargs["temperature"] == 0.4
        assert "CONTENT EXPANSION MODE (ENABLED)" in system_prompt

    @pytest.mark.asyncio
    async def test_image_source_sends_image_part(
        self, scripted_client, generation_settings, build
    ):
        context = GenerationContext(
            SourceKind.IMAGE, "QUJD", theme="dark", image_mime_type="image/jpeg"
        )
        scripted_client.complete.side_effect = [build.reply(build.labeled_boxes(2))]

        await run_generation_stage(context, scripted_client, generation_settings)

        system_prompt, human = sent_messages(scripted_client)
        assert human[0]["image_url"]["url"] == "data:image/jpeg;base64,QUJD"
        assert "DARK MODE" in system_prompt

    @pytest.mark.asyncio
    async def test_refusal_is_malformed(self, scripted_client, text_context, generation_settings):
        scripted_client.complete.side_effect = ["Sorry, I can't help with that."]

        outcome = await run_generation_stage(text_context, scripted_client, generation_settings)

        assert outcome.status is StageStatus.FAILED
        assert outcome.failure_kind is GenerationFailureKind.MALFORMED_RESPONSE

    @pytest.mark.asyncio
    async def test_all_elements_invalid_is_malformed(
        self, scripted_client, text_context, generation_settings, build
    ):
        scripted_client.complete.side_effect = [build.reply([{"type": "cloud", "x": 0, "y": 0}])]

        outcome = await run_generation_stage(text_context, scripted_client, generation_settings)

        assert outcome.failure_kind is GenerationFailureKind.MALFORMED_RESPONSE

    @pytest.mark.asyncio
    async def test_timeout_is_reported(self, scripted_client, text_context, generation_settings):
        scripted_client.complete.side_effect = ModelCallError("slow", GenerationFailureKind.TIMEOUT)

        outcome = await run_generation_stage(text_context, scripted_client, generation_settings)

        assert outcome.failure_kind is GenerationFailureKind.TIMEOUT


class TestIconEnhancementStage:
    @pytest.mark.asyncio
    async def test_skipped_below_threshold(
        self, scripted_client, text_context, generation_settings, build
    ):
        outcome = await run_icon_enhancement_stage(
            build.labeled_boxes(4), text_context, scripted_client, generation_settings
        )

        assert outcome.status is StageStatus.SKIPPED
        scripted_client.complete.assert_not_called()

    @pytest.mark.asyncio
    async def test_accepts_additions_within_ceiling(
        self, scripted_client, text_context, generation_settings, build
    ):
        elements = build.labeled_boxes(6)
        candidate = elements + [build.rect(x=110, y=110, width=20, height=20)]
        scripted_client.complete.side_effect = [build.reply(candidate)]

        outcome = await run_icon_enhancement_stage(
            elements, text_context, scripted_client, generation_settings
        )

        assert outcome.succeeded
        assert len(outcome.elements) == 7

    @pytest.mark.asyncio
    async def test_rejects_candidate_that_drops_elements(
        self, scripted_client, text_context, generation_settings, build
    ):
        elements = build.labeled_boxes(6)
        scripted_client.complete.side_effect = [build.reply(elements[:5])]

        outcome = await run_icon_enhancement_stage(
            elements, text_context, scripted_client, generation_settings
        )

        assert outcome.status is StageStatus.FAILED

    @pytest.mark.asyncio
    async def test_rejects_too_many_additions(
        self, scripted_client, text_context, generation_settings, build
    ):
        elements = build.labeled_boxes(6)
        extra = [build.rect(x=i) for i in range(generation_settings.max_icon_additions + 1)]
        scripted_client.complete.side_effect = [build.reply(elements + extra)]

        outcome = await run_icon_enhancement_stage(
            elements, text_context, scripted_client, generation_settings
        )

        assert outcome.status is StageStatus.FAILED


class TestVerificationStage:
    @pytest.mark.asyncio
    async def test_object_reply_with_removals(
        self, scripted_client, text_context, generation_settings, build
    ):
        elements = build.labeled_boxes(6)
        reply = {
            "elements": elements[:4],
            "removed": [{"element": "Concept 2", "reason": "not in source"}],
        }
        scripted_client.complete.side_effect = [build.reply(reply)]

        outcome = await run_verification_stage(
            elements, text_context, scripted_client, generation_settings
        )

        assert outcome.succeeded
        assert len(outcome.elements) == 4
        assert outcome.notes == ("removed Concept 2: not in source",)

    @pytest.mark.asyncio
    async def test_bare_array_reply(
        self, scripted_client, text_context, generation_settings, build
    ):
        elements = build.labeled_boxes(6)
        scripted_client.complete.side_effect = [build.reply(elements)]

        outcome = await run_verification_stage(
            elements, text_context, scripted_client, generation_settings
        )

        assert outcome.succeeded
        assert len(outcome.elements) == 6

    @pytest.mark.asyncio
    async def test_rejects_growth(self, scripted_client, text_context, generation_settings, build):
        elements = build.labeled_boxes(6)
        scripted_client.complete.side_effect = [build.reply(elements + [build.rect()])]

        outcome = await run_verification_stage(
            elements, text_context, scripted_client, generation_settings
        )

        assert outcome.status is StageStatus.FAILED

    @pytest.mark.asyncio
    async def test_policy_follows_expand_flag(self, scripted_client, generation_settings, build):
        elements = build.labeled_boxes(6)
        scripted_client.complete.side_effect = [build.reply(elements), build.reply(elements)]

        for expand in (False, True):
            context = GenerationContext(SourceKind.TEXT, "notes", expand_content=expand)
            await run_verification_stage(elements, context, scripted_client, generation_settings)

        strict_prompt, _ = sent_messages(scripted_client, 0)
        expand_prompt, _ = sent_messages(scripted_client, 1)
        assert "REMOVAL POLICY (STRICT)" in strict_prompt
        assert "REMOVAL POLICY (EXPAND MODE)" in expand_prompt

    @pytest.mark.asyncio
    async def test_image_source_is_attached(self, scripted_client, generation_settings, build):
        elements = build.labeled_boxes(6)
        context = GenerationContext(SourceKind.IMAGE, "QUJD", image_mime_type="image/png")
        scripted_client.complete.side_effect = [build.reply(elements)]

        await run_verification_stage(elements, context, scripted_client, generation_settings)

        _, human = sent_messages(scripted_client)
        assert human[0]["type"] == "image_url"
        assert human[1]["text"].startswith("The attached image is the SOURCE CONTENT.")


class TestLayoutRefinementStage:
    @pytest.mark.asyncio
    async def test_skipped_below_threshold(
        self, scripted_client, text_context, generation_settings, build
    ):
        outcome = await run_layout_refinement_stage(
            build.labeled_boxes(7), text_context, scripted_client, generation_settings
        )

        assert outcome.status is StageStatus.SKIPPED

    @pytest.mark.asyncio
    async def test_accepts_same_count(
        self, scripted_client, text_context, generation_settings, build
    ):
        elements = build.labeled_boxes(8)
        moved = [{**e, "y": e["y"] + 40} for e in elements]
        scripted_client.complete.side_effect = [build.reply(moved)]

        outcome = await run_layout_refinement_stage(
            elements, text_context, scripted_client, generation_settings
        )

        assert outcome.succeeded
        assert all(e["y"] >= 140 for e in outcome.elements)
        assert scripted_client.complete.call_args.kwargs["temperature"] == 0.2

    @pytest.mark.asyncio
    async def test_count_mismatch_fails(
        self, scripted_client, text_context, generation_settings, build
    ):
        elements = build.labeled_boxes(8)
        scripted_client.complete.side_effect = [build.reply(elements[:7])]

        outcome = await run_layout_refinement_stage(
            elements, text_context, scripted_client, generation_settings
        )

        assert outcome.status is StageStatus.FAILED
        assert "count mismatch" in outcome.reason

    @pytest.mark.asyncio
    async def test_extra_invalid_entry_counts_toward_mismatch(
        self, scripted_client, text_context, generation_settings, build
    ):
        elements = build.labeled_boxes(8)
        reply = elements + [{"type": "star", "x": 1, "y": 1}]
        scripted_client.complete.side_effect = [build.reply(reply)]

        outcome = await run_layout_refinement_stage(
            elements, text_context, scripted_client, generation_settings
        )

        assert not outcome.succeeded
        assert outcome.failure_kind is GenerationFailureKind.MALFORMED_RESPONSE
        assert "(9 != 8)" in outcome.reason

    @pytest.mark.asyncio
    async def test_invalid_entry_with_matching_count_fails(
        self, scripted_client, text_context, generation_settings, build
    ):
        elements = build.labeled_boxes(8)
        reply = elements[:7] + [{"type": "star", "x": 1, "y": 1}]
        scripted_client.complete.side_effect = [build.reply(reply)]

        outcome = await run_layout_refinement_stage(
            elements, text_context, scripted_client, generation_settings
        )

        assert outcome.status is StageStatus.FAILED
        assert outcome.failure_kind is GenerationFailureKind.MALFORMED_RESPONSE

    @pytest.mark.asyncio
    async def test_prompt_carries_theme_palette(self, scripted_client, generation_settings, build):
        elements = build.labeled_boxes(8)
        context = GenerationContext(SourceKind.TEXT, "notes", theme="dark")
        scripted_client.complete.side_effect = [build.reply(elements)]

        await run_layout_refinement_stage(elements, context, scripted_client, generation_settings)

        system_prompt, human = sent_messages(scripted_client)
        assert "COLOR SCHEME (DARK MODE)" in system_prompt
        assert "#ffffff" in system_prompt
        assert human.startswith("Refine the layout of these diagram elements:")
