import pytest
from pydantic import ValidationError

from schemas import (
    DIFFICULTY_DESCRIPTIONS,
    Difficulty,
    FinalReport,
    InternalState,
    Scenario,
    WitnessReply,
    score_band,
)
from tests.conftest import REPORT_PAYLOAD, SCENARIO_PAYLOAD, reply_payload


def test_baseline_state():
    state = InternalState.baseline()
    assert state.model_dump() == {
        "truthfulness": 70,
        "stress": 10,
        "defensiveness": 20,
        "cooperation": 80,
        "memory": 90,
        "exposure": 5,
        "legal_risk": 0,
    }


def test_describe_lists_every_dimension():
    assert InternalState.baseline().describe() == (
        "Truthfulness: 70, Stress: 10, Defensiveness: 20, Cooperation: 80, "
        "Memory: 90, Exposure: 5, Legal Risk: 0"
    )


@pytest.mark.parametrize("value", [-1, 100.5, 250])
def test_state_values_must_be_percentages(value):
    with pytest.raises(ValidationError):
        WitnessReply.model_validate(reply_payload(stress=value))


def test_every_difficulty_has_a_description():
    assert set(DIFFICULTY_DESCRIPTIONS) == set(Difficulty)
    assert [d.value for d in Difficulty] == ["Beginner", "Intermediate", "Advanced", "Crisis"]


def test_public_briefing_hides_ground_truth(scenario):
    briefing = scenario.public_briefing()
    assert set(briefing) == {
        "investigation_type",
        "company_background",
        "jurisdiction",
        "regulatory_exposure",
        "witness_role",
        "document_universe",
    }
    assert briefing["regulatory_exposure"] == "High"
    assert scenario.hidden_ground_truth not in briefing.values()


def test_scenario_requires_risk_nodes():
    payload = dict(SCENARIO_PAYLOAD, key_risk_nodes=[])
    with pytest.raises(ValidationError):
        Scenario.model_validate(payload)


def test_scenario_rejects_unknown_exposure():
    payload = dict(SCENARIO_PAYLOAD, regulatory_exposure="Extreme")
    with pytest.raises(ValidationError):
        Scenario.model_validate(payload)


def test_reply_rejects_unknown_phase():
    with pytest.raises(ValidationError):
        WitnessReply.model_validate(reply_payload(phase="Small talk"))


def test_report_scores_in_display_order(final_report):
    assert final_report.scores() == [
        ("Timeline Reconstruction", 82),
        ("Contradiction Identification", 64),
        ("Risk Escalation Awareness", 40),
        ("Interview Control", 71),
    ]


@pytest.mark.parametrize("missing", ["missed_follow_ups", "improved_questioning_paths"])
def test_report_lists_are_required(missing):
    payload = {k: v for k, v in REPORT_PAYLOAD.items() if k != missing}
    with pytest.raises(ValidationError):
        FinalReport.model_validate(payload)


def test_report_lists_may_be_empty():
    report = FinalReport.model_validate(dict(REPORT_PAYLOAD, missed_follow_ups=[], improved_questioning_paths=[]))
    assert report.missed_follow_ups == []
    assert report.improved_questioning_paths == []


@pytest.mark.parametrize("value", [True, "90", None])
def test_state_values_must_be_numbers(value):
    with pytest.raises(ValidationError):
        WitnessReply.model_validate(reply_payload(memory=value))


def test_state_accepts_whole_numbers():
    reply = WitnessReply.model_validate(reply_payload(stress=35, memory=72.5))
    assert reply.updated_state.stress == 35
    assert reply.updated_state.memory == 72.5


@pytest.mark.parametrize("value", ["82", 82.5, True])
def test_report_scores_must_be_integers(value):
    with pytest.raises(ValidationError):
        FinalReport.model_validate(dict(REPORT_PAYLOAD, timeline_reconstruction_score=value))


def test_report_score_out_of_range():
    with pytest.raises(ValidationError):
        FinalReport.model_validate(dict(REPORT_PAYLOAD, interview_control_assessment=101))


@pytest.mark.parametrize("score, band", [
    (100, "strong"),
    (76, "strong"),
    (75, "fair"),
    (51, "fair"),
    (50, "weak"),
    (0, "weak"),
])
def test_score_band(score, band):
    assert score_band(score) == band
