"""Runs every posted message through the whereabouts pipeline."""

import logging
from dataclasses import dataclass

from ..chat import ChatMessage
from ..logging import JSONLLogger, get_logger
from .detector import ASSISTANT_IDS, detect_query
from .extractor import extract_whereabout
from .models import PendingQuestion, WhereaboutFact
from .responder import DelayedResponder
from .store import FactStore

logger = logging.getLogger(__name__)

RESPONSE_TEMPLATE = (
    "Berdasarkan maklumat yang saya ada, {user_name} menyebut bahawa dia {whereabout}."
)


def render_response(fact: WhereaboutFact) -> str:
    """Render the Malay answer for a known whereabout."""
    return RESPONSE_TEMPLATE.format(user_name=fact.user_name, whereabout=fact.whereabout)


@dataclass
class TrackingResult:
    """What the pipeline did with a message."""

    fact: WhereaboutFact | None = None
    question: PendingQuestion | None = None


class WhereaboutsTracker:
    """Updates facts from messages and queues answers to questions.

    Tracking is best-effort: store and channel errors are logged and
    never reach the caller.
    """

    def __init__(
        self,
        store: FactStore,
        responder: DelayedResponder,
        json_logger: JSONLLogger | None = None,
    ) -> None:
        self.store = store
        self.responder = responder
        self.json_logger = json_logger or get_logger()

    def process_message(self, message: ChatMessage) -> TrackingResult:
        """Process a posted message.

        Args:
            message: The message as stored in the channel.

        Returns:
            The saved fact and the queued question, either may be None.
        """
        result = TrackingResult()
        if message.user_id in ASSISTANT_IDS:
            return result

        try:
            result.fact = self._track_whereabout(message)
        except Exception as e:
            logger.warning(f"Error updating whereabout: {e}")
            self.json_logger.log("whereabout_error", user_id=message.user_id, error=str(e))

        try:
            result.question = self._queue_answer(message)
        except Exception as e:
            logger.warning(f"Error processing whereabouts question: {e}")
            self.json_logger.log("question_error", user_id=message.user_id, error=str(e))

        return result

    def _track_whereabout(self, message: ChatMessage) -> WhereaboutFact | None:
        extracted = extract_whereabout(message)
        if extracted is None:
            return None

        fact = self.store.save(extracted)
        logger.info(f"Updated whereabout for user {fact.user_name}: {fact.whereabout}")
        self.json_logger.log_whereabout(fact.user_name, fact.whereabout, user_id=fact.user_id)
        return fact

    def _queue_answer(self, message: ChatMessage) -> PendingQuestion | None:
        query = detect_query(message)
        if query is None:
            return None

        logger.info(f"User is asking about: {query.target_user}")
        fact = self.store.find_by_name(query.target_user)
        if fact is None:
            return None

        return self.responder.enqueue(
            query.target_user,
            render_response(fact),
            questioner_id=query.questioner_id,
        )
