"""Handler fanning a transcript out to every summary template."""

import threading
from concurrent.futures import ThreadPoolExecutor

from smart_minutes.domain.models import SummaryResult, SummaryTemplate
from smart_minutes.exceptions import MinutesPipelineError
from smart_minutes.handlers.document_publisher import DocumentPublisher
from smart_minutes.infrastructure.interfaces import LLMService
from smart_minutes.logging import setup_logging

logger = setup_logging()


class SummarizationFanOut:
    """
    Summarizes and publishes one document per template.

    Templates run concurrently and independently. A template that fails is
    reported in its own SummaryResult; it never stops the others, and results
    are returned only once every template has finished.
    """

    def __init__(
        self,
        llm: LLMService,
        publisher: DocumentPublisher,
        templates: list[SummaryTemplate],
        system_instruction: str,
        temperature: float,
    ):
        self._llm = llm
        self._publisher = publisher
        self._templates = list(templates)
        self._system_instruction = system_instruction
        self._temperature = temperature

    @property
    def templates(self) -> list[SummaryTemplate]:
        return list(self._templates)

    def run(
        self,
        session_id: str,
        transcript_text: str,
        audio_file_name: str,
        cancel_event: threading.Event | None = None,
    ) -> list[SummaryResult]:
        """
        Runs every template against the transcript.

        Args:
            session_id: Session the transcript belongs to, for logging.
            transcript_text: Corrected transcript text; may be empty.
            audio_file_name: Original recording name used to name documents.
            cancel_event: When set, templates that have not started are skipped.

        Returns:
            One SummaryResult per template, in template order.
        """
        with ThreadPoolExecutor(
            max_workers=len(self._templates), thread_name_prefix="summary"
        ) as executor:
            futures = [
                executor.submit(
                    self._run_template,
                    template,
                    session_id,
                    transcript_text,
                    audio_file_name,
                    cancel_event,
                )
                for template in self._templates
            ]
            results = [future.result() for future in futures]

        succeeded = sum(1 for r in results if r.succeeded)
        logger.info(
            "Summarization fan-out finished",
            extra={
                "session_id": session_id,
                "succeeded": succeeded,
                "failed": len(results) - succeeded,
            },
        )
        return results

    def _run_template(
        self,
        template: SummaryTemplate,
        session_id: str,
        transcript_text: str,
        audio_file_name: str,
        cancel_event: threading.Event | None,
    ) -> SummaryResult:
        if cancel_event is not None and cancel_event.is_set():
            return self._failure(template, "cancelled", "run cancelled before start")

        try:
            text = self._llm.complete(
                self._system_instruction,
                template.build_prompt(transcript_text),
                self._temperature,
            )
        except Exception as e:
            logger.exception(
                "Template completion failed",
                extra={"session_id": session_id, "template": template.name},
            )
            return self._failure(template, _stage_of(e, "summarization"), str(e))

        if cancel_event is not None and cancel_event.is_set():
            return self._failure(template, "cancelled", "run cancelled before publish")

        try:
            link = self._publisher.publish(text, template.name, audio_file_name)
        except Exception as e:
            logger.exception(
                "Template publish failed",
                extra={"session_id": session_id, "template": template.name},
            )
            return SummaryResult(
                template_name=template.name,
                field_key=template.field_key,
                text=text,
                failed_stage=_stage_of(e, "publish"),
                error=str(e),
            )

        return SummaryResult(
            template_name=template.name,
            field_key=template.field_key,
            text=text,
            link=link,
        )

    def _failure(self, template: SummaryTemplate, stage: str, error: str) -> SummaryResult:
        return SummaryResult(
            template_name=template.name,
            field_key=template.field_key,
            failed_stage=stage,
            error=error,
        )


def _stage_of(error: Exception, default: str) -> str:
    if isinstance(error, MinutesPipelineError):
        return error.stage
    return default
