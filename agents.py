"""
AI Agents for the Witness Interview Simulation
Structured oracle, scenario generator, witness and evaluator
"""

import json
import logging
from typing import Dict, List, Optional, Sequence, Type, TypeVar

import openai
from langchain_core.exceptions import OutputParserException
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_core.output_parsers import PydanticOutputParser
from langchain_core.runnables import Runnable
from langchain_openai import ChatOpenAI
from pydantic import BaseModel, ValidationError

from config import Settings
from prompts import (
    FEEDBACK_PROMPT,
    SCENARIO_PROMPT,
    SYSTEM_INSTRUCTION_BASE,
    WITNESS_SCENARIO_CONTEXT,
)
from schemas import (
    DIFFICULTY_DESCRIPTIONS,
    Difficulty,
    FinalReport,
    InternalState,
    Message,
    MessageRole,
    Scenario,
    WitnessReply,
)

logger = logging.getLogger("deepwitness.agents")

ModelT = TypeVar("ModelT", bound=BaseModel)


# ============================================================
# ERRORS
# ============================================================

class DeepWitnessError(Exception):
    """Base class for all simulator errors."""


class ConfigurationError(DeepWitnessError):
    """Required configuration (the model credential) is missing."""


class OracleError(DeepWitnessError):
    """The external model could not produce a usable answer."""


class GenerationError(OracleError):
    """The model call itself failed: network, auth, rate limit or timeout."""


class ShapeError(OracleError):
    """The model answered, but the payload does not match the expected record."""


# ============================================================
# STRUCTURED ORACLE
# ============================================================

def build_chat_model(settings: Settings, temperature: Optional[float] = None) -> Runnable:
    """
    Build the JSON-constrained chat model.

    Automatic retries are disabled; a failed call is reported and the user
    decides whether to try again.
    """
    if not settings.has_credentials:
        raise ConfigurationError("OPENAI_API_KEY is not set. Add it to your environment or .env file.")

    llm = ChatOpenAI(
        model=settings.model_name,
        temperature=settings.temperature if temperature is None else temperature,
        api_key=settings.openai_api_key,
        timeout=settings.request_timeout,
        max_retries=0,
    )
    return llm.bind(response_format={"type": "json_object"})


class StructuredOracle:
    """
    Thin wrapper over a chat model that only ever returns validated records.

    Supports one-shot generation (generate_structured) and stateful
    multi-turn sessions (start_chat).
    """

    def __init__(self, llm: Runnable):
        self.llm = llm

    def complete(self, messages: Sequence[BaseMessage]) -> str:
        """Send messages and return the raw text of the reply."""
        try:
            response = self.llm.invoke(list(messages))
        except openai.OpenAIError as e:
            logger.error("Model request failed: %s", e)
            raise GenerationError(f"Model request failed: {e}") from e

        content = response.content
        if not isinstance(content, str):
            raise ShapeError(f"Expected text content from the model, got {type(content).__name__}")
        logger.debug("Raw model output: %r", content)
        return content

    @staticmethod
    def parse(text: str, schema: Type[ModelT]) -> ModelT:
        """Parse and validate raw model text into `schema`."""
        parser = PydanticOutputParser(pydantic_object=schema)
        try:
            return parser.parse(text)
        except (OutputParserException, ValidationError) as e:
            logger.warning("Model output did not match %s: %s", schema.__name__, e)
            raise ShapeError(f"Model output did not match {schema.__name__}") from e

    @staticmethod
    def format_instructions(schema: Type[BaseModel]) -> str:
        return PydanticOutputParser(pydantic_object=schema).get_format_instructions()

    def generate_structured(self, messages: Sequence[BaseMessage], schema: Type[ModelT]) -> ModelT:
        return self.parse(self.complete(messages), schema)

    def start_chat(self, system_prompt: str) -> "WitnessChat":
        return WitnessChat(self, system_prompt)


class WitnessChat:
    """
    A persistent conversation with the model.

    Every send() replays the system prompt plus all committed exchanges.
    An exchange is committed only once its reply has validated, so the
    model never sees a turn the session itself rejected.
    """

    def __init__(self, oracle: StructuredOracle, system_prompt: str):
        self.oracle = oracle
        self.system_prompt = system_prompt
        self.history: List[BaseMessage] = []

    def send(self, text: str, schema: Type[ModelT]) -> ModelT:
        messages = [SystemMessage(content=self.system_prompt), *self.history, HumanMessage(content=text)]
        raw = self.oracle.complete(messages)
        result = self.oracle.parse(raw, schema)

        self.history.append(HumanMessage(content=text))
        self.history.append(AIMessage(content=raw))
        return result


# ============================================================
# SCENARIO GENERATOR
# ============================================================

class ScenarioGenerator:
    """Produces one fully populated Scenario per session."""

    def __init__(self, oracle: StructuredOracle):
        self.oracle = oracle

    def build_prompt(self, difficulty: Difficulty) -> str:
        return SCENARIO_PROMPT.format(
            difficulty=difficulty.value,
            difficulty_description=DIFFICULTY_DESCRIPTIONS[difficulty],
            format_instructions=self.oracle.format_instructions(Scenario),
        )

    def generate(self, difficulty: Difficulty) -> Scenario:
        logger.info("Generating %s scenario", difficulty.value)
        messages = [
            SystemMessage(content="You design realistic corporate investigation training scenarios."),
            HumanMessage(content=self.build_prompt(difficulty)),
        ]
        scenario = self.oracle.generate_structured(messages, Scenario)
        logger.info(
            "Scenario ready: %s (%s, exposure %s)",
            scenario.investigation_type,
            scenario.jurisdiction,
            scenario.regulatory_exposure.value,
        )
        return scenario


# ============================================================
# WITNESS (conversation driver)
# ============================================================

class WitnessAgent:
    """
    The simulated witness.

    Owns one WitnessChat for the whole session; the chat is never reset,
    so the model stays consistent with the hidden ground truth and with
    the state trajectory it has already reported.
    """

    def __init__(
        self,
        oracle: StructuredOracle,
        scenario: Scenario,
        difficulty: Difficulty,
        initial_state: Optional[InternalState] = None,
    ):
        self.oracle = oracle
        self.scenario = scenario
        self.difficulty = difficulty
        self.initial_state = initial_state or InternalState.baseline()
        self.chat = oracle.start_chat(self.get_system_prompt())

    def get_system_prompt(self) -> str:
        scenario = self.scenario
        base = SYSTEM_INSTRUCTION_BASE.format(
            format_instructions=self.oracle.format_instructions(WitnessReply),
        )
        context = WITNESS_SCENARIO_CONTEXT.format(
            investigation_type=scenario.investigation_type,
            company_background=scenario.company_background,
            jurisdiction=scenario.jurisdiction,
            regulatory_exposure=scenario.regulatory_exposure.value,
            witness_role=scenario.witness_role,
            witness_archetype=scenario.witness_archetype,
            document_universe=scenario.document_universe,
            hidden_ground_truth=scenario.hidden_ground_truth,
            key_risk_nodes=", ".join(scenario.key_risk_nodes),
            difficulty=self.difficulty.value,
            initial_state=self.initial_state.describe(),
            witness_introduction=scenario.witness_introduction,
        )
        return base + context

    def respond(self, question: str) -> WitnessReply:
        """Answer one interviewer question. Raises OracleError on failure."""
        return self.chat.send(question, WitnessReply)


# ============================================================
# REPORT GENERATOR
# ============================================================

def format_transcript(transcript: Sequence[Message]) -> str:
    """Render the transcript for the evaluator, including hidden per-turn snapshots."""
    lines = []
    for i, message in enumerate(transcript, start=1):
        if message.role == MessageRole.USER:
            lines.append(f"{i}. INTERVIEWER: {message.text}")
            continue

        annotations = []
        if message.phase is not None:
            annotations.append(f"phase={message.phase.value}")
        if message.hidden_state is not None:
            annotations.append(message.hidden_state.describe())
        suffix = f" [{'; '.join(annotations)}]" if annotations else ""
        lines.append(f"{i}. WITNESS{suffix}: {message.text}")
    return "\n".join(lines)


def format_scenario(scenario: Scenario) -> str:
    return json.dumps(scenario.model_dump(mode="json"), indent=2, sort_keys=True)


class ReportGenerator:
    """Asks the model to evaluate the interviewer. No local scoring."""

    def __init__(self, oracle: StructuredOracle):
        self.oracle = oracle

    def build_prompt(self, transcript: Sequence[Message], scenario: Scenario) -> str:
        return FEEDBACK_PROMPT.format(
            scenario=format_scenario(scenario),
            transcript=format_transcript(transcript),
            format_instructions=self.oracle.format_instructions(FinalReport),
        )

    def generate(self, transcript: Sequence[Message], scenario: Scenario) -> FinalReport:
        logger.info("Generating final report over %d transcript entries", len(transcript))
        messages = [
            SystemMessage(content="You evaluate investigative interviews rigorously and fairly."),
            HumanMessage(content=self.build_prompt(transcript, scenario)),
        ]
        return self.oracle.generate_structured(messages, FinalReport)


# Factory function to wire the agents from settings
def create_agents(settings: Settings) -> Dict[str, object]:
    """
    Build the oracle-backed collaborators.

    Returns dict with keys: oracle, scenario_generator, report_generator
    """
    oracle = StructuredOracle(build_chat_model(settings))
    report_oracle = StructuredOracle(build_chat_model(settings, temperature=settings.report_temperature))

    return {
        "oracle": oracle,
        "scenario_generator": ScenarioGenerator(oracle),
        "report_generator": ReportGenerator(report_oracle),
    }
