"""Adventure controller: turn lifecycle over session state, store and transport."""
from __future__ import annotations

import logging

from activity_log import log_event
from completion_client import StoryTurn, request_story_turn
from credential_store import CredentialStore
from prompts.adventure import build_continue_prompt, build_start_prompt, join_story_text
from services.openai_api import ChatCompletionTransport, CompletionAPIError, StoryFormatError
from session_proxy import AdventureSessionProxy
from session_state import reset_all_state
from utils.secrets import mask_credential

logger = logging.getLogger(__name__)

START_ERROR_PREFIX = "Failed to start story: "
CONTINUE_ERROR_PREFIX = "Failed to continue story: "

ACTION_START = "start"
ACTION_CHOOSE = "choose"


class InvalidChoiceError(IndexError):
    """Raised when a choice index does not address the current choice set."""


class AdventureController:
    """Owns the adventure state and drives each request/response turn.

    All mutable state lives in the session proxy so that it survives
    Streamlit reruns; persistence and HTTP are injected.
    """

    def __init__(
        self,
        session: AdventureSessionProxy,
        store: CredentialStore,
        transport: ChatCompletionTransport,
    ) -> None:
        self.session = session
        self.store = store
        self.transport = transport

    # Credential ------------------------------------------------------------------
    @property
    def has_credential(self) -> bool:
        return bool(self.session.api_key)

    def initialize(self) -> bool:
        """Load the persisted credential once per session and auto-start a story.

        Returns ``True`` when this call performed the initial load.
        """

        if self.session.get("credential_loaded"):
            return False
        self.session["credential_loaded"] = True

        stored = self.store.get()
        if stored:
            self.session.api_key = stored
            if not self.session.initialized and not self.session.segments:
                self.begin_story()
        return True

    def save_credential(self, value: str) -> None:
        credential = (value or "").strip()
        if not credential:
            raise ValueError("API key must not be empty.")

        self.store.set(credential)
        self.session.api_key = credential
        log_event(
            type="credential",
            action="save",
            result="success",
            metadata={"credential": mask_credential(credential)},
        )
        if not self.session.segments:
            self.begin_story()

    def remove_credential(self) -> None:
        self.store.remove()
        reset_all_state(self.session.backing)
        log_event(type="credential", action="remove", result="success")

    # Turns -----------------------------------------------------------------------
    def begin_story(self) -> bool:
        """Request an opening segment; replaces the story on success."""

        self.session.last_action = {"kind": ACTION_START}
        turn = self._run_turn(build_start_prompt(), START_ERROR_PREFIX, action="story start")
        if turn is None:
            return False

        self.session.segments = [turn.segment]
        self.session.choices = list(turn.choices)
        self.session.initialized = True
        log_event(type="story", action="story start", result="success", params=[1])
        return True

    def choose_option(self, index: int) -> bool:
        """Continue the story with the choice at ``index``; appends on success."""

        choices = self.session.choices
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(choices):
            raise InvalidChoiceError(f"Choice index {index!r} is out of range for {len(choices)} choices")

        selected = choices[index]
        segments = self.session.segments
        self.session.last_action = {"kind": ACTION_CHOOSE, "index": index}

        prompt = build_continue_prompt(join_story_text(segment.text for segment in segments), selected)
        turn = self._run_turn(prompt, CONTINUE_ERROR_PREFIX, action="story continue")
        if turn is None:
            return False

        self.session.segments = [*segments, turn.segment]
        self.session.choices = list(turn.choices)
        log_event(type="story", action="story continue", result="success", params=[len(segments) + 1])
        return True

    def retry(self) -> bool:
        """Resubmit the last attempted action."""

        action = self.session.last_action or {"kind": ACTION_START}
        if action.get("kind") == ACTION_CHOOSE:
            return self.choose_option(int(action.get("index", 0)))
        return self.begin_story()

    # Internals -------------------------------------------------------------------
    def _run_turn(self, prompt: str, error_prefix: str, *, action: str) -> StoryTurn | None:
        self.session.loading = True
        self.session.error = None
        try:
            turn = request_story_turn(prompt, api_key=self.session.api_key, transport=self.transport)
        except (CompletionAPIError, StoryFormatError) as exc:
            message = f"{error_prefix}{exc}"
            self.session.error = message
            logger.warning("%s", message)
            log_event(
                type="story",
                action=action,
                result="fail",
                params=[len(self.session.segments), str(exc)],
                metadata={"status_code": getattr(exc, "status_code", None)},
            )
            return None
        finally:
            self.session.loading = False

        return turn


__all__ = [
    "ACTION_CHOOSE",
    "ACTION_START",
    "AdventureController",
    "CONTINUE_ERROR_PREFIX",
    "InvalidChoiceError",
    "START_ERROR_PREFIX",
]
