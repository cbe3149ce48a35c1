"""
Practice runner: fetches a text, drives a typing session over it, and submits
the result for the signed-in user.
"""

import logging
import time
from typing import Callable, List, Optional

from client.api_client import ApiClient
from client.auth_session import AuthSession
from client.typing_session import TypingSession, TypingState
from helpers.error_utils import InvalidCredential, TypingTestError, ValidationFailure
from models.result import Result, ResultStats
from models.text import Text

logger = logging.getLogger(__name__)


class PracticeRunner:
    """Glue between the auth session, the API client and a typing session."""

    def __init__(
        self,
        *,
        api: ApiClient,
        auth: AuthSession,
        duration: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.api = api
        self.auth = auth
        self.duration = duration
        self.clock = clock
        self.text: Optional[Text] = None
        self.session: Optional[TypingSession] = None
        self.submitted: Optional[Result] = None

    def new_test(self) -> TypingSession:
        """Fetch a random text and start a fresh session over it.

        Raises:
            TypingTestError: If the server has no texts to offer.
            NetworkFailure: If the server cannot be reached.
        """
        texts = self.api.list_texts(random_pick=True)
        if not texts:
            raise TypingTestError("No texts available")
        self.text = texts[0]
        self.submitted = None
        if self.session is None:
            self.session = TypingSession(self.text.content, duration=self.duration, clock=self.clock)
        else:
            self.session.reset(self.text.content)
        logger.debug("New test with text %s (%s)", self.text.text_id, self.text.title)
        return self.session

    def submit(self) -> Result:
        """Submit the completed session's results.

        The results stay on the session when submission fails, so calling this
        again retries. A session is only ever submitted once.

        Raises:
            ValidationFailure: If there is nothing to submit or the server rejects it.
            InvalidCredential: If not signed in or the server rejected the token.
            NetworkFailure: If the server cannot be reached.
        """
        if self.submitted is not None:
            return self.submitted
        if self.session is None or self.text is None or self.session.state is not TypingState.COMPLETED:
            raise ValidationFailure("No completed test to submit")
        token = self.auth.credential
        if not self.auth.is_authenticated or token is None:
            raise InvalidCredential("Log in to save results")
        results = self.session.results
        try:
            self.submitted = self.api.submit_result(
                token,
                text_id=self.text.text_id,
                wpm=round(results.wpm, 2),
                accuracy=round(results.accuracy, 2),
            )
        except InvalidCredential:
            self.auth.invalidate()
            raise
        logger.info("Saved result %s", self.submitted.result_id)
        return self.submitted

    def _token(self) -> str:
        token = self.auth.credential
        if not self.auth.is_authenticated or token is None:
            raise InvalidCredential("Log in to view results")
        return token

    def history(self, limit: Optional[int] = None) -> List[Result]:
        token = self._token()
        try:
            return self.api.list_results(token, limit=limit)
        except InvalidCredential:
            self.auth.invalidate()
            raise

    def stats(self) -> ResultStats:
        token = self._token()
        try:
            return self.api.result_stats(token)
        except InvalidCredential:
            self.auth.invalidate()
            raise
