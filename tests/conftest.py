"""
Shared fixtures: canned model payloads and sessions wired to fake collaborators.
"""
import json
import logging
from unittest.mock import Mock

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from agents import ReportGenerator, ScenarioGenerator, StructuredOracle, WitnessAgent
from game_engine import InterviewSession
from log_config import ROOT_LOGGER
from schemas import FinalReport, InternalState, InterviewPhase, Scenario, WitnessReply


SCENARIO_PAYLOAD = {
    "investigation_type": "FCPA bribery",
    "company_background": "Meridian Logistics, a mid-size freight forwarder expanding into West Africa.",
    "jurisdiction": "United States (DOJ / SEC)",
    "regulatory_exposure": "High",
    "witness_role": "Regional Sales Director who approved the agent contract",
    "witness_archetype": "Loyal deflector",
    "witness_introduction": "Good morning. I'm happy to help, though I'm not sure what this is about.",
    "document_universe": "Agent agreement, three wire confirmations and an expense report from Lagos.",
    "hidden_ground_truth": "The witness approved $240,000 in 'consulting fees' that were passed to a port official.",
    "key_risk_nodes": [
        "Consulting agreement signed without due diligence",
        "Wire of $120,000 on 14 March to a personal account",
        "Email referencing 'customs facilitation'",
    ],
}

REPORT_PAYLOAD = {
    "timeline_reconstruction_score": 82,
    "contradiction_identification_score": 64,
    "risk_escalation_awareness": 40,
    "interview_control_assessment": 71,
    "behavioral_analysis": "The witness grew defensive once payments were raised.",
    "legal_exposure_analysis": "Admissions point to knowing approval of improper payments.",
    "missed_follow_ups": ["Who introduced the agent?"],
    "improved_questioning_paths": ["Walk me through how the agent was selected."],
}


def reply_payload(text="I only signed what finance put in front of me.", phase="Probing", **state):
    updated = InternalState.baseline().model_dump()
    updated.update(state)
    return {"witness_response": text, "current_phase": phase, "updated_state": updated}


@pytest.fixture
def scenario():
    return Scenario.model_validate(SCENARIO_PAYLOAD)


@pytest.fixture
def final_report():
    return FinalReport.model_validate(REPORT_PAYLOAD)


@pytest.fixture
def make_oracle():
    """Build a StructuredOracle that replays the given raw responses in order."""
    def _make(*responses):
        raw = [r if isinstance(r, str) else json.dumps(r) for r in responses]
        return StructuredOracle(FakeListChatModel(responses=raw))
    return _make


@pytest.fixture
def scenario_generator(scenario):
    generator = Mock(spec=ScenarioGenerator)
    generator.generate.return_value = scenario
    return generator


@pytest.fixture
def report_generator(final_report):
    generator = Mock(spec=ReportGenerator)
    generator.generate.return_value = final_report
    return generator


@pytest.fixture
def witness():
    agent = Mock(spec=WitnessAgent)
    agent.respond.return_value = WitnessReply.model_validate(
        reply_payload(phase=InterviewPhase.PROBING.value, stress=35)
    )
    return agent


@pytest.fixture
def session(scenario_generator, report_generator, witness):
    return InterviewSession(
        scenario_generator=scenario_generator,
        report_generator=report_generator,
        witness_factory=Mock(return_value=witness),
    )


@pytest.fixture
def active_session(session):
    session.start_session("Intermediate")
    return session


@pytest.fixture
def restore_logging():
    """setup_logging() detaches the app logger from the root; put it back afterwards."""
    logger = logging.getLogger(ROOT_LOGGER)
    saved = (logger.level, logger.propagate, list(logger.handlers))
    yield logger
    for handler in list(logger.handlers):
        if handler not in saved[2]:
            handler.close()
    logger.setLevel(saved[0])
    logger.propagate = saved[1]
    logger.handlers[:] = saved[2]
