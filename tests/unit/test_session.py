# tests/unit/test_session.py
"""
Tests for WizardSession.

Runs a real JobOrchestrator against the ProcessingApi double.
"""

import pytest

from printify_check.api.responses import SubmitResponse
from printify_check.config.schema import PollingConfig
from printify_check.errors import InvalidTransitionError, JobFailedError, NetworkError
from printify_check.models.jobs import JobKind, JobStatus
from printify_check.orchestrator import JobOrchestrator
from printify_check.wizard import (
    FIXES,
    OCR,
    PREFLIGHT,
    REDACTION,
    SUCCESS,
    FixesMode,
    WizardSession,
    WizardStateMachine,
)


@pytest.fixture
def polling() -> PollingConfig:
    return PollingConfig(interval=0.01, timeout=2.0)


def _session(api, polling, pro: bool = False) -> WizardSession:
    return WizardSession(
        JobOrchestrator(api),
        machine=WizardStateMachine(is_pro_or_team=pro),
        polling=polling,
    )


class TestFullRun:
    @pytest.mark.asyncio
    async def test_pro_run_with_ocr_and_fixes(
        self, api, document, submitted, status, validation_payload, polling
    ):
        api.submit.side_effect = [submitted("o-1"), submitted("v-1"), submitted("fx-1")]
        api.get_status.side_effect = [
            status("processing", 50),
            status("completed", 100),
            status("completed", 100, resultId="r1"),
            status("completed", 100, downloadUrl="/fix/download/fx-1"),
        ]
        api.download.return_value = b"%PDF-ocr"
        api.get_result.return_value = validation_payload
        session = _session(api, polling, pro=True)

        await session.upload(document)
        await session.run_ocr({"language": "eng"})
        assert session.file.name == "ocr_document.pdf"
        assert session.file.content == b"%PDF-ocr"

        await session.skip_step()
        assert session.machine.current_step_id == PREFLIGHT

        result = await session.run_preflight()
        assert result.total_issues == 5
        assert session.state.fixes_mode is FixesMode.REMEDIATE
        assert session.summary().total == 5

        job = await session.apply_fixes(["print-1", "font-1"], options={"bleedMargin": 3})

        assert job.status is JobStatus.COMPLETED
        assert session.machine.is_complete
        kind, file, params = api.submit.await_args_list[-1].args
        assert kind is JobKind.FIX
        assert file.name == "ocr_document.pdf"
        assert params == {"fixTypes": ["embedFonts", "addBleed"], "options": {"bleedMargin": 3}}

    @pytest.mark.asyncio
    async def test_clean_document_completes_without_fix_job(self, api, document, submitted, status, polling):
        api.submit.return_value = submitted("v-1")
        api.get_status.return_value = status("completed", 100, resultId="r1")
        api.get_result.return_value = {"fileName": "document.pdf", "qualityScore": 100, "issuesByCategory": {}}
        session = _session(api, polling)

        await session.upload(document)
        await session.run_preflight()
        assert session.state.fixes_mode is FixesMode.NOOP

        assert await session.apply_fixes([]) is None
        assert session.machine.current_step_id == SUCCESS
        assert api.submit.await_count == 1


class TestFailures:
    @pytest.mark.asyncio
    async def test_failed_preflight_is_recorded(self, api, document, submitted, status, polling):
        api.submit.return_value = submitted("v-1")
        api.get_status.return_value = status("failed", error="Corrupt xref table")
        session = _session(api, polling)
        await session.upload(document)

        with pytest.raises(JobFailedError, match="Corrupt xref table"):
            await session.run_preflight()

        state = session.state
        assert state.current_step_id == PREFLIGHT
        assert state.error == "Corrupt xref table"

    @pytest.mark.asyncio
    async def test_network_error_on_submit_is_recorded(self, api, document, polling):
        api.submit.side_effect = NetworkError("POST /redaction/redact failed: connection refused")
        session = _session(api, polling, pro=True)
        await session.upload(document)
        await session.skip_step()

        with pytest.raises(NetworkError):
            await session.run_redaction()

        assert session.state.current_step_id == REDACTION
        assert "connection refused" in session.state.error

    @pytest.mark.asyncio
    async def test_selection_without_fixes(self, api, document, submitted, status, validation_payload, polling):
        api.submit.return_value = submitted("v-1")
        api.get_status.return_value = status("completed", 100, resultId="r1")
        api.get_result.return_value = validation_payload
        session = _session(api, polling)
        await session.upload(document)
        await session.run_preflight()

        with pytest.raises(InvalidTransitionError):
            await session.apply_fixes(["image-9"])
        assert session.machine.current_step_id == FIXES

    @pytest.mark.asyncio
    async def test_step_out_of_order(self, api, document, polling):
        session = _session(api, polling, pro=True)
        await session.upload(document)

        with pytest.raises(InvalidTransitionError):
            await session.run_preflight()
        api.submit.assert_not_awaited()
        assert session.machine.current_step_id == OCR


@pytest.mark.asyncio
async def test_reset(api, document, polling):
    session = _session(api, polling)
    await session.upload(document)

    state = await session.reset()

    assert state.file_ref is None
    assert session.preflight_result is None
    assert session.summary() is None


class TestOptimizationsAndSkipping:
    @pytest.fixture
    def clean_result(self):
        return {"fileName": "document.pdf", "qualityScore": 100, "issuesByCategory": {}}

    @pytest.mark.asyncio
    async def test_clean_document_can_still_be_optimized(
        self, api, document, submitted, status, clean_result, polling
    ):
        api.submit.side_effect = [submitted("v-1"), submitted("fx-1")]
        api.get_status.side_effect = [
            status("completed", 100, resultId="r1"),
            status("completed", 100),
        ]
        api.get_result.return_value = clean_result
        session = _session(api, polling)
        await session.upload(document)
        await session.run_preflight()
        assert session.state.fixes_mode is FixesMode.NOOP

        job = await session.apply_fixes(
            [], options={"linearization": True}, optimizations=["linearization", "objectStreams", "linearization"]
        )

        assert job.kind is JobKind.FIX
        assert session.machine.current_step_id == SUCCESS
        kind, _, params = api.submit.await_args_list[-1].args
        assert kind is JobKind.FIX
        assert params == {
            "fixTypes": ["linearization", "objectStreams"],
            "options": {"linearization": True},
        }

    @pytest.mark.asyncio
    async def test_optimizations_follow_selected_fixes(
        self, api, document, submitted, status, validation_payload, polling
    ):
        api.submit.side_effect = [submitted("v-1"), submitted("fx-1")]
        api.get_status.side_effect = [
            status("completed", 100, resultId="r1"),
            status("completed", 100),
        ]
        api.get_result.return_value = validation_payload
        session = _session(api, polling)
        await session.upload(document)
        await session.run_preflight()

        await session.apply_fixes(["print-1"], optimizations=["addBleed", "optimizeResolution"])

        assert api.submit.await_args_list[-1].args[2] == {"fixTypes": ["addBleed", "optimizeResolution"]}

    @pytest.mark.asyncio
    async def test_unknown_optimization_rejected(self, api, document, submitted, status, clean_result, polling):
        api.submit.return_value = submitted("v-1")
        api.get_status.return_value = status("completed", 100, resultId="r1")
        api.get_result.return_value = clean_result
        session = _session(api, polling)
        await session.upload(document)
        await session.run_preflight()

        with pytest.raises(InvalidTransitionError, match="makeItPretty"):
            await session.apply_fixes([], optimizations=["makeItPretty"])
        assert session.machine.current_step_id == FIXES
        assert api.submit.await_count == 1

    @pytest.mark.asyncio
    async def test_skip_fixes_with_issues_present(
        self, api, document, submitted, status, validation_payload, polling
    ):
        api.submit.return_value = submitted("v-1")
        api.get_status.return_value = status("completed", 100, resultId="r1")
        api.get_result.return_value = validation_payload
        session = _session(api, polling)
        await session.upload(document)
        await session.run_preflight()
        assert session.state.fixes_mode is FixesMode.REMEDIATE

        state = await session.skip_fixes()

        assert state.current_step_id == SUCCESS
        assert state.step_outputs[FIXES] is None
        assert api.submit.await_count == 1

    @pytest.mark.asyncio
    async def test_skip_fixes_before_preflight(self, api, document, polling):
        session = _session(api, polling)
        await session.upload(document)

        with pytest.raises(InvalidTransitionError):
            await session.skip_fixes()


@pytest.mark.asyncio
async def test_rejected_submission_fails_step_with_server_text(api, document, polling):
    api.submit.return_value = SubmitResponse.model_validate(
        {"processId": "v-1", "status": "failed", "error": "Unsupported PDF version"}
    )
    session = _session(api, polling)
    await session.upload(document)

    with pytest.raises(JobFailedError, match="Unsupported PDF version"):
        await session.run_preflight()

    assert session.state.current_step_id == PREFLIGHT
    assert session.state.error == "Unsupported PDF version"
    api.get_status.assert_not_awaited()
    api.get_result.assert_not_awaited()
