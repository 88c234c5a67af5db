"""Delayed answers to whereabouts questions.

A detected "where is X?" is not answered right away. The answer is queued
and only posted after a fixed delay, and only if nobody in the room has
mentioned X since the question was asked. The mention check is a plain
case-insensitive substring match on the name: an unrelated mention
suppresses the answer, and a human answer that avoids the name does not.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from typing import TYPE_CHECKING, Callable

from ..chat import ChatMessage, Identity
from ..logging import JSONLLogger, get_logger
from .detector import WHEREABOUTS_ASSISTANT_ID
from .models import PendingQuestion, QuestionOutcome

if TYPE_CHECKING:
    from ..chat import MessageChannel

DEFAULT_DELAY = 10.0
DEFAULT_TICK_INTERVAL = 1.0
ASSISTANT_NAME = "tung tung tung sahur"

logger = logging.getLogger(__name__)


class DelayedResponder:
    """FIFO queue of whereabouts answers waiting to be posted."""

    def __init__(
        self,
        channel: MessageChannel,
        delay: float = DEFAULT_DELAY,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        process_all_due: bool = True,
        assistant_name: str = ASSISTANT_NAME,
        clock: Callable[[], float] = time.time,
        json_logger: JSONLLogger | None = None,
    ) -> None:
        self.channel = channel
        self.delay = delay
        self.tick_interval = tick_interval
        self.process_all_due = process_all_due
        self.identity = Identity(user_id=WHEREABOUTS_ASSISTANT_ID, user_name=assistant_name)
        self.clock = clock
        self.json_logger = json_logger or get_logger()
        self._queue: deque[PendingQuestion] = deque()
        self._tick_task: asyncio.Task | None = None

    @property
    def pending(self) -> tuple[PendingQuestion, ...]:
        """Questions still waiting, oldest first."""
        return tuple(self._queue)

    def enqueue(
        self,
        target_user: str,
        response_text: str,
        questioner_id: str | None = None,
    ) -> PendingQuestion:
        """Queue an answer to be posted after the delay.

        Args:
            target_user: Name the question is about.
            response_text: The answer, rendered now and posted as-is.
            questioner_id: Who asked.

        Returns:
            The queued question.
        """
        question = PendingQuestion(
            target_user=target_user,
            response_text=response_text,
            asked_at=self.clock(),
            questioner_id=questioner_id,
        )
        self._queue.append(question)
        self.json_logger.log_question(
            QuestionOutcome.QUEUED.value,
            target_user,
            questioner_id=questioner_id,
            delay_ms=self.delay * 1000,
        )
        return question

    def has_been_answered(
        self,
        question: PendingQuestion,
        messages: list[ChatMessage] | None = None,
    ) -> bool:
        """Check whether someone mentioned the target since the question.

        Args:
            question: The pending question.
            messages: Messages to look at, read from the channel if None.
        """
        if messages is None:
            messages = self.channel.messages_after(question.asked_at)

        target = question.target_user.lower()
        return any(
            msg.created_at > question.asked_at
            and msg.user_id != WHEREABOUTS_ASSISTANT_ID
            and target in msg.text.lower()
            for msg in messages
        )

    def tick(self, now: float | None = None) -> list[tuple[PendingQuestion, QuestionOutcome]]:
        """Resolve questions whose delay has elapsed.

        Only the head of the queue is examined; if it is not due, nothing
        else is. With `process_all_due` the tick keeps going while the new
        head is also due, otherwise it stops after one question.

        Args:
            now: Current time, defaults to the clock.

        Returns:
            The questions resolved in this tick with their outcomes.
        """
        if now is None:
            now = self.clock()

        resolved: list[tuple[PendingQuestion, QuestionOutcome]] = []
        while self._queue:
            head = self._queue[0]
            if now - head.asked_at < self.delay:
                break

            self._queue.popleft()
            outcome = self._resolve(head)
            resolved.append((head, outcome))

            if not self.process_all_due:
                break

        return resolved

    def _resolve(self, question: PendingQuestion) -> QuestionOutcome:
        """Deliver or suppress a due question."""
        try:
            if self.has_been_answered(question):
                logger.info(f"Question about {question.target_user} was already answered")
                outcome = QuestionOutcome.SUPPRESSED
            else:
                self.channel.append(question.response_text, self.identity)
                outcome = QuestionOutcome.DELIVERED
        except Exception as e:
            logger.warning(f"Failed to resolve question about {question.target_user}: {e}")
            self.json_logger.log(
                "question_failed",
                user_id=question.questioner_id,
                target_user=question.target_user,
                error=str(e),
            )
            return QuestionOutcome.FAILED

        self.json_logger.log_question(
            outcome.value,
            question.target_user,
            questioner_id=question.questioner_id,
        )
        return outcome

    async def _tick_loop(self) -> None:
        """Background task that ticks on a fixed interval."""
        while True:
            try:
                await asyncio.sleep(self.tick_interval)
                self.tick()
            except asyncio.CancelledError:
                break
            except Exception:
                logger.exception("Whereabouts tick failed")

    def start(self) -> None:
        """Start the background tick task."""
        if self._tick_task is None or self._tick_task.done():
            self._tick_task = asyncio.create_task(self._tick_loop())

    def stop(self) -> None:
        """Stop ticking. Questions still pending are dropped."""
        if self._tick_task and not self._tick_task.done():
            self._tick_task.cancel()
        self._tick_task = None
        self._queue.clear()
