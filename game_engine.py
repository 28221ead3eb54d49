"""
Witness Interview Session Engine
Tracks a single interview from setup through live questioning to the final report
"""

import functools
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from agents import (
    DeepWitnessError,
    OracleError,
    ReportGenerator,
    ScenarioGenerator,
    WitnessAgent,
    create_agents,
)
from config import Settings
from prompts import END_INTERVIEW_COMMAND, FALLBACK_REPLY
from schemas import (
    INITIAL_PHASE,
    Difficulty,
    FinalReport,
    InternalState,
    InterviewPhase,
    Message,
    MessageRole,
    Scenario,
)

logger = logging.getLogger("deepwitness.game_engine")


class SessionStatus(str, Enum):
    UNINITIALIZED = "Uninitialized"
    ACTIVE = "Active"
    CONCLUDED = "Concluded"


class SessionError(DeepWitnessError):
    """Base class for session misuse."""


class InvalidTransitionError(SessionError):
    """Operation is not allowed in the current session status."""


class SessionBusyError(SessionError):
    """Another request for this session is still in flight."""


WitnessFactory = Callable[[Scenario, Difficulty, InternalState], WitnessAgent]


def is_end_command(text: str) -> bool:
    return (text or "").strip().lower() == END_INTERVIEW_COMMAND


@dataclass(frozen=True)
class SessionView:
    """Read-only snapshot handed to the presentation layer."""
    status: SessionStatus
    difficulty: Optional[Difficulty]
    briefing: Optional[Dict[str, str]]
    phase: InterviewPhase
    transcript: Tuple[Message, ...]
    latest_state: Optional[InternalState]
    busy: bool
    final_report: Optional[FinalReport]


class InterviewSession:
    """
    Session state machine: Uninitialized -> Active -> Concluded.

    Owns the scenario, the transcript, the current phase and the latest
    hidden witness state. All mutation goes through start_session,
    submit_user_turn, conclude_session and reset.
    """

    def __init__(
        self,
        scenario_generator: ScenarioGenerator,
        report_generator: ReportGenerator,
        witness_factory: WitnessFactory,
    ):
        self.scenario_generator = scenario_generator
        self.report_generator = report_generator
        self.witness_factory = witness_factory
        self.busy = False
        self._clear()

    @classmethod
    def from_settings(cls, settings: Settings) -> "InterviewSession":
        agents = create_agents(settings)
        return cls(
            scenario_generator=agents["scenario_generator"],
            report_generator=agents["report_generator"],
            witness_factory=functools.partial(WitnessAgent, agents["oracle"]),
        )

    def _clear(self) -> None:
        self.status = SessionStatus.UNINITIALIZED
        self.difficulty: Optional[Difficulty] = None
        self.scenario: Optional[Scenario] = None
        self.witness: Optional[WitnessAgent] = None
        self.phase: InterviewPhase = INITIAL_PHASE
        self.internal_state: Optional[InternalState] = None
        # None until the witness has reported a state of its own
        self.latest_state: Optional[InternalState] = None
        self.transcript: List[Message] = []
        self.final_report: Optional[FinalReport] = None

    @contextmanager
    def _exclusive(self, action: str) -> Iterator[None]:
        if self.busy:
            logger.warning("Rejected attempt to %s while a request is in flight", action)
            raise SessionBusyError(f"Cannot {action}: another request is still in flight")
        self.busy = True
        try:
            yield
        finally:
            self.busy = False

    def _require(self, status: SessionStatus, action: str) -> None:
        if self.status != status:
            raise InvalidTransitionError(
                f"Cannot {action} while the session is {self.status.value}"
            )

    @property
    def turn_count(self) -> int:
        return sum(1 for m in self.transcript if m.role == MessageRole.USER)

    # ─── OPERATIONS ───────────────────────────────────────────

    def start_session(self, difficulty: Difficulty) -> Scenario:
        """
        Generate a scenario and open the interview.

        On any failure the session stays Uninitialized and the error
        propagates, so the caller can simply try again.
        """
        difficulty = Difficulty(difficulty)
        self._require(SessionStatus.UNINITIALIZED, "start a session")

        with self._exclusive("start a session"):
            scenario = self.scenario_generator.generate(difficulty)
            initial_state = InternalState.baseline()
            witness = self.witness_factory(scenario, difficulty, initial_state)

            self.difficulty = difficulty
            self.scenario = scenario
            self.witness = witness
            self.phase = INITIAL_PHASE
            self.internal_state = initial_state
            self.latest_state = None
            self.transcript = [Message(role=MessageRole.MODEL, text=scenario.witness_introduction)]
            self.final_report = None
            self.status = SessionStatus.ACTIVE

        logger.info("Session started: difficulty=%s, investigation=%s", difficulty.value, scenario.investigation_type)
        return scenario

    def submit_user_turn(self, text: str) -> Optional[Message]:
        """
        Ask the witness one question.

        Returns the witness's message, or None when the input was blank or
        was the end-interview command. Model failures never escape: they
        become a fallback witness message and leave phase/state untouched.
        """
        self._require(SessionStatus.ACTIVE, "submit a question")

        question = (text or "").strip()
        if not question:
            return None
        if is_end_command(question):
            logger.info("End-interview command received after %d turns", self.turn_count)
            self.conclude_session()
            return None

        with self._exclusive("submit a question"):
            self.transcript.append(Message(role=MessageRole.USER, text=question))
            turn = self.turn_count

            try:
                reply = self.witness.respond(question)
            except OracleError as e:
                logger.warning("Turn %d failed, keeping phase %s: %s", turn, self.phase.value, e)
                message = Message(role=MessageRole.MODEL, text=FALLBACK_REPLY)
            else:
                message = Message(
                    role=MessageRole.MODEL,
                    text=reply.witness_response,
                    phase=reply.current_phase,
                    hidden_state=reply.updated_state,
                )
                self.phase = reply.current_phase
                self.internal_state = reply.updated_state
                self.latest_state = reply.updated_state
                logger.debug("Turn %d: phase=%s state=%s", turn, self.phase.value, self.internal_state.describe())

            self.transcript.append(message)

        return message

    def conclude_session(self) -> FinalReport:
        """
        Produce the final report and close the session.

        Idempotent once Concluded. On failure the session stays Active.
        """
        if self.status == SessionStatus.CONCLUDED:
            return self.final_report
        self._require(SessionStatus.ACTIVE, "conclude the interview")

        with self._exclusive("conclude the interview"):
            report = self.report_generator.generate(list(self.transcript), self.scenario)
            self.final_report = report
            self.status = SessionStatus.CONCLUDED

        logger.info(
            "Session concluded after %d turns: scores=%s",
            self.turn_count,
            [score for _, score in report.scores()],
        )
        return report

    def reset(self) -> None:
        """Discard everything and return to Uninitialized."""
        if self.busy:
            raise SessionBusyError("Cannot reset while a request is in flight")
        logger.info("Session reset (was %s)", self.status.value)
        self._clear()

    def view(self) -> SessionView:
        return SessionView(
            status=self.status,
            difficulty=self.difficulty,
            briefing=self.scenario.public_briefing() if self.scenario else None,
            phase=self.phase,
            transcript=tuple(self.transcript),
            latest_state=self.latest_state,
            busy=self.busy,
            final_report=self.final_report,
        )
