"""
Pydantic Schemas for the Witness Interview Simulation
Scenario, hidden witness state, transcript and evaluation records
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


# ============================================================
# ENUMS
# ============================================================

class Difficulty(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    CRISIS = "Crisis"


DIFFICULTY_DESCRIPTIONS = {
    Difficulty.BEGINNER: "Focused guidance and clearer factual patterns.",
    Difficulty.INTERMEDIATE: "Mixed motives and subtle contradictions.",
    Difficulty.ADVANCED: "Coached witness with complex legal exposures.",
    Difficulty.CRISIS: "Extreme emotional volatility and high regulatory risk.",
}


class RegulatoryExposure(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class InterviewPhase(str, Enum):
    RAPPORT = "Rapport"
    PROBING = "Probing"
    CONFRONTATION = "Confrontation"
    CLOSING = "Closing"


INITIAL_PHASE = InterviewPhase.RAPPORT


class MessageRole(str, Enum):
    USER = "user"
    MODEL = "model"


# ============================================================
# SCENARIO (generated once per session)
# ============================================================

class Scenario(BaseModel):
    """Investigation scenario. Hidden fields are for the witness and the evaluator only."""
    model_config = ConfigDict(frozen=True)

    investigation_type: str = Field(..., min_length=1, description="e.g. FCPA bribery, insider trading, harassment")
    company_background: str = Field(..., min_length=1, description="Company, industry and situation")
    jurisdiction: str = Field(..., min_length=1, description="Governing jurisdiction / regulator")
    regulatory_exposure: RegulatoryExposure = Field(..., description="Low, Medium or High")
    witness_role: str = Field(..., min_length=1, description="Witness job title and relation to the matter")
    witness_archetype: str = Field(..., min_length=1, description="Behavioral archetype, e.g. 'loyal deflector'")
    witness_introduction: str = Field(..., min_length=1, description="First words the witness says, in character")
    document_universe: str = Field(..., min_length=1, description="Summary of documents available to the interviewer")
    hidden_ground_truth: str = Field(..., min_length=1, description="What actually happened. NEVER shown to the interviewer")
    key_risk_nodes: List[str] = Field(..., min_length=1, description="Facts the interviewer should uncover. NEVER shown")

    def public_briefing(self) -> Dict[str, str]:
        """Fields the interviewer is allowed to see."""
        return {
            "investigation_type": self.investigation_type,
            "company_background": self.company_background,
            "jurisdiction": self.jurisdiction,
            "regulatory_exposure": self.regulatory_exposure.value,
            "witness_role": self.witness_role,
            "document_universe": self.document_universe,
        }


# ============================================================
# HIDDEN WITNESS STATE
# ============================================================

class InternalState(BaseModel):
    """
    Hidden psychological / legal condition of the witness.
    Values are reported by the model every turn; never computed locally.
    """
    model_config = ConfigDict(frozen=True)

    truthfulness: float = Field(..., ge=0, le=100, strict=True)
    stress: float = Field(..., ge=0, le=100, strict=True)
    defensiveness: float = Field(..., ge=0, le=100, strict=True)
    cooperation: float = Field(..., ge=0, le=100, strict=True)
    memory: float = Field(..., ge=0, le=100, strict=True)
    exposure: float = Field(..., ge=0, le=100, strict=True)
    legal_risk: float = Field(..., ge=0, le=100, strict=True)

    @classmethod
    def baseline(cls) -> "InternalState":
        return cls(
            truthfulness=70,
            stress=10,
            defensiveness=20,
            cooperation=80,
            memory=90,
            exposure=5,
            legal_risk=0,
        )

    def describe(self) -> str:
        return (
            f"Truthfulness: {self.truthfulness:g}, Stress: {self.stress:g}, "
            f"Defensiveness: {self.defensiveness:g}, Cooperation: {self.cooperation:g}, "
            f"Memory: {self.memory:g}, Exposure: {self.exposure:g}, Legal Risk: {self.legal_risk:g}"
        )


# ============================================================
# TRANSCRIPT
# ============================================================

class Message(BaseModel):
    """One transcript entry. Only model turn replies carry phase and hidden_state."""
    model_config = ConfigDict(frozen=True)

    role: MessageRole
    text: str
    phase: Optional[InterviewPhase] = None
    hidden_state: Optional[InternalState] = None


class WitnessReply(BaseModel):
    """Structured reply for a single interview turn."""
    witness_response: str = Field(..., min_length=1, description="What the witness says, in character")
    current_phase: InterviewPhase = Field(..., description="Interview phase after this turn")
    updated_state: InternalState = Field(..., description="Hidden witness state after this turn")


# ============================================================
# FINAL REPORT
# ============================================================

SCORE_LABELS = {
    "timeline_reconstruction_score": "Timeline Reconstruction",
    "contradiction_identification_score": "Contradiction Identification",
    "risk_escalation_awareness": "Risk Escalation Awareness",
    "interview_control_assessment": "Interview Control",
}


class FinalReport(BaseModel):
    """Evaluation of the interviewer, produced once at the end of a session."""
    model_config = ConfigDict(frozen=True)

    timeline_reconstruction_score: int = Field(..., ge=0, le=100, strict=True)
    contradiction_identification_score: int = Field(..., ge=0, le=100, strict=True)
    risk_escalation_awareness: int = Field(..., ge=0, le=100, strict=True)
    interview_control_assessment: int = Field(..., ge=0, le=100, strict=True)
    behavioral_analysis: str = Field(..., min_length=1, description="Behavioral analysis of the witness")
    legal_exposure_analysis: str = Field(..., min_length=1, description="Legal exposure analysis")
    missed_follow_ups: List[str] = Field(..., description="Missed risk flags / follow-ups")
    improved_questioning_paths: List[str] = Field(..., description="Recommended questions")

    def scores(self) -> List[Tuple[str, int]]:
        return [(label, getattr(self, name)) for name, label in SCORE_LABELS.items()]


def score_band(score: int) -> str:
    if score > 75:
        return "strong"
    if score > 50:
        return "fair"
    return "weak"
