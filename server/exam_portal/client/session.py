"""
Exam session controller.

Drives one timed exam attempt on the client: load the assigned questions,
capture answers, run the countdown and the periodic snapshot loop, and
post exactly one submission when the student submits or time runs out.

The countdown and the snapshot loop are two asyncio tasks owned by the
session. Every exit path (successful submit, abandon, logout, leaving the
`async with` block) cancels both and releases the capture device.
"""
import asyncio
import enum
import logging
from typing import Awaitable, Callable, Dict, List, Optional

from exam_portal.client.api import ExamApiClient
from exam_portal.client.auth import AuthContext
from exam_portal.client.capture import CaptureDevice
from exam_portal.config import settings
from exam_portal.errors import CaptureError, FetchError, NetworkError
from exam_portal.models.content import QuestionType
from exam_portal.schemas import (
    AnswerEntry,
    QuestionResponse,
    SnapshotEntry,
    SubmissionCreate,
    utcnow,
)

logger = logging.getLogger(__name__)


class SessionState(str, enum.Enum):
    CREATED = "created"
    LOADED = "loaded"
    RUNNING = "running"
    SUBMITTING = "submitting"
    SUBMIT_FAILED = "submit_failed"
    SUBMITTED = "submitted"
    ABANDONED = "abandoned"


EDITABLE_STATES = (SessionState.LOADED, SessionState.RUNNING, SessionState.SUBMIT_FAILED)
SUBMITTABLE_STATES = (SessionState.RUNNING, SessionState.SUBMIT_FAILED)


class ExamSession:
    def __init__(
        self,
        api: ExamApiClient,
        auth: AuthContext,
        device: Optional[CaptureDevice] = None,
        duration: Optional[int] = None,
        snapshot_every: Optional[float] = None,
        tick_seconds: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Args:
            api: Client used to load questions and post the submission.
            auth: Identity of the student taking the exam.
            device: Camera for snapshots; no snapshots are taken without one.
            duration: Countdown length in ticks.
            snapshot_every: Ticks between two snapshots.
            tick_seconds: Wall-clock length of one tick.
            sleep: Awaitable sleep, replaceable in tests.
        """
        self.api = api
        self.auth = auth
        self.device = device
        self.duration = duration if duration is not None else settings.exam_duration_seconds
        self.snapshot_every = snapshot_every if snapshot_every is not None else settings.snapshot_interval_seconds
        self.tick_seconds = tick_seconds
        self._sleep = sleep

        self.state = SessionState.CREATED
        self.remaining = self.duration
        self.questions: List[QuestionResponse] = []
        self.answers: Dict[str, str] = {}
        self.snapshots: List[SnapshotEntry] = []
        self.submission_id: Optional[str] = None
        self.last_error: Optional[Exception] = None

        self._countdown_task: Optional[asyncio.Task] = None
        self._snapshot_task: Optional[asyncio.Task] = None
        self._submit_task: Optional[asyncio.Task] = None
        self._device_open = False
        self._abandoned = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.abandon()

    # Lifecycle

    async def initialize(self) -> List[QuestionResponse]:
        """Load the questions assigned to the logged-in student."""
        if self.state is not SessionState.CREATED:
            raise RuntimeError(f"Session already {self.state.value}")
        if not self.auth.email:
            raise FetchError("User not logged in.")

        questions = await self.api.fetch_assigned_questions(self.auth.email)
        if not questions:
            raise FetchError("No questions assigned to this student.")

        self.questions = questions
        self.state = SessionState.LOADED
        logger.info("Loaded %d questions for %s", len(questions), self.auth.email)
        return questions

    async def start(self) -> None:
        """
        Acquire the capture device and start both timers.
        A denied device raises CaptureError and leaves the session LOADED so
        the caller can ask again.
        """
        if self.state is not SessionState.LOADED:
            raise RuntimeError(f"Cannot start a session that is {self.state.value}")

        if self.device is not None and not self._device_open:
            try:
                await self.device.open()
            except CaptureError:
                logger.warning("Capture device denied for %s", self.auth.email)
                raise
            self._device_open = True

        self.state = SessionState.RUNNING
        self.auth.add_logout_listener(self.abandon)
        self._countdown_task = asyncio.create_task(self._run_countdown())
        if self._device_open:
            self._snapshot_task = asyncio.create_task(self._run_snapshots())
        logger.info("Exam started for %s (%d ticks)", self.auth.email, self.duration)

    async def abandon(self) -> None:
        """Leave the exam without submitting. Safe to call on any exit path."""
        if self.state in (SessionState.SUBMITTED, SessionState.ABANDONED):
            return
        self._abandoned = True
        await self._stop_timers()
        # An in-flight submission is never cancelled; it settles the final state,
        # and a failure then ends in ABANDONED rather than reopening the attempt.
        if self.state is not SessionState.SUBMITTING:
            self.state = SessionState.ABANDONED
            logger.info("Exam abandoned by %s", self.auth.email)
        await self._release()

    # Answer capture

    def _question(self, question_id: str) -> QuestionResponse:
        for q in self.questions:
            if q.id == question_id:
                return q
        raise KeyError(question_id)

    def _check_editable(self) -> None:
        if self.state not in EDITABLE_STATES:
            raise RuntimeError(f"Answers cannot change while the session is {self.state.value}")

    def toggle_option(self, question_id: str, option: str) -> Optional[str]:
        """
        Select `option` on a choice question. Selecting the current choice
        again clears it. Returns the answer now stored (None if cleared).
        """
        self._check_editable()
        question = self._question(question_id)
        if question.type is QuestionType.SHORT:
            raise ValueError("Short-answer questions take text, not options")
        if option not in question.options:
            raise ValueError(f"{option!r} is not an option of question {question_id}")

        if self.answers.get(question_id) == option:
            del self.answers[question_id]
            return None
        self.answers[question_id] = option
        return option

    def set_text(self, question_id: str, text: str) -> None:
        """Store the free-text answer exactly as typed."""
        self._check_editable()
        question = self._question(question_id)
        if question.type is not QuestionType.SHORT:
            raise ValueError("Choice questions take one of their options, not free text")
        self.answers[question_id] = text

    # Timers

    def tick(self) -> bool:
        """Advance the countdown by one unit. True on the tick that reaches zero."""
        if self.remaining <= 0:
            return False
        self.remaining -= 1
        return self.remaining == 0

    async def _run_countdown(self) -> None:
        while self.remaining > 0:
            await self._sleep(self.tick_seconds)
            if self.tick():
                logger.info("Time is up for %s, submitting", self.auth.email)
                try:
                    await self.submit()
                except NetworkError:
                    # Reported via last_error; the student stays on the exam to retry.
                    pass
                return

    async def capture_snapshot(self) -> bool:
        """Take one frame if the device is open. Missing frames are skipped."""
        if not self._device_open:
            return False
        try:
            image = await self.device.grab()
        except CaptureError as e:
            logger.debug("Snapshot skipped: %s", e)
            return False
        except Exception:
            # Any device failure skips this frame only
            logger.warning("Capture device error, snapshot skipped", exc_info=True)
            return False
        if not image:
            logger.debug("Snapshot skipped: no frame available")
            return False
        self.snapshots.append(SnapshotEntry(image=image, timestamp=utcnow()))
        return True

    async def _run_snapshots(self) -> None:
        while True:
            await self._sleep(self.snapshot_every * self.tick_seconds)
            await self.capture_snapshot()

    async def _stop_timers(self) -> None:
        current = asyncio.current_task()
        pending = []
        for task in (self._countdown_task, self._snapshot_task):
            if task is None or task is current or task.done():
                continue
            task.cancel()
            pending.append(task)
        self._countdown_task = None
        self._snapshot_task = None
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def _release(self) -> None:
        self.auth.remove_logout_listener(self.abandon)
        if self._device_open:
            # Marked closed first so no capture can start after release begins
            self._device_open = False
            await self.device.close()

    # Submission

    def build_submission(self) -> SubmissionCreate:
        """One answer entry per loaded question, in load order."""
        return SubmissionCreate(
            student_email=self.auth.email,
            answers=[
                AnswerEntry(question_id=q.id, answer=(self.answers.get(q.id) or "").strip())
                for q in self.questions
            ],
            snapshots=list(self.snapshots),
            submitted_at=utcnow(),
        )

    async def submit(self) -> str:
        """
        Submit the attempt once. Concurrent callers share the same request;
        after success further calls return the stored id without posting again.
        On NetworkError the session stays open for a manual retry.
        """
        if self.state is SessionState.SUBMITTED:
            return self.submission_id
        if self.state is SessionState.SUBMITTING:
            return await asyncio.shield(self._submit_task)
        if self.state not in SUBMITTABLE_STATES:
            raise RuntimeError(f"Cannot submit a session that is {self.state.value}")

        self.state = SessionState.SUBMITTING
        payload = self.build_submission()
        self._submit_task = asyncio.create_task(self._send(payload))
        await self._stop_timers()
        return await asyncio.shield(self._submit_task)

    async def _send(self, payload: SubmissionCreate) -> str:
        try:
            submission_id = await self.api.submit_exam(payload)
        except NetworkError as e:
            self.state = SessionState.ABANDONED if self._abandoned else SessionState.SUBMIT_FAILED
            self.last_error = e
            logger.warning("Submission failed for %s: %s", payload.student_email, e.message)
            raise

        self.submission_id = submission_id
        self.last_error = None
        self.state = SessionState.SUBMITTED
        logger.info("Submitted %s for %s", submission_id, payload.student_email)
        await self._release()
        return submission_id
