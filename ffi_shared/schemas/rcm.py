"""
RCM decision graph schema and Pydantic models.

The graph is a fixed table of question and answer nodes keyed by step id.
Questions branch on yes/no; answers are terminal recommendations.
Used by the backend walker and by front ends rendering the wizard.
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field


class FailureType(str, Enum):
    """Whether the loss of function becomes evident to the operators."""

    EVIDENT = "Evident"
    HIDDEN = "Hidden"


class FailureLeg(str, Enum):
    """Consequence leg of the decision diagram."""

    SAFETY = "Safety"
    FINANCIAL = "Financial"


class QuestionNode(BaseModel):
    """A yes/no question with the step ids each answer leads to."""

    kind: Literal["question"] = "question"
    id: str = Field(..., description="Step id (e.g. 'Start', 'Evident')")
    header: str = Field(..., description="Short title shown above the question")
    main_text: str = Field(..., description="The question itself")
    yes_next_step: str = Field(..., description="Step id reached on 'yes'")
    no_next_step: str = Field(..., description="Step id reached on 'no'")
    info: str = Field("", description="Help text for the info dialog")

    def next_step(self, answer: str) -> str:
        return self.yes_next_step if answer == "yes" else self.no_next_step


class AnswerNode(BaseModel):
    """A terminal recommendation."""

    kind: Literal["answer"] = "answer"
    id: str = Field(..., description="Step id of the recommendation")
    recommendation: str = Field(..., description="Recommended failure management task")
    explanation: str = Field("", description="Why this task applies")


DecisionNode = Annotated[Union[QuestionNode, AnswerNode], Field(discriminator="kind")]


class DecisionGraph(BaseModel):
    """Full node table with a single entry step."""

    name: str = Field("RCM Decision Diagram", description="Human-readable name")
    start_id: str = Field("Start", description="Entry question id")
    total_steps: int = Field(7, ge=1, description="Expected number of steps to a recommendation")
    nodes: dict[str, DecisionNode] = Field(default_factory=dict, description="Map of step id -> node")

    def is_answer(self, step_id: Optional[str]) -> bool:
        return isinstance(self.nodes.get(step_id or ""), AnswerNode)

    def is_question(self, step_id: Optional[str]) -> bool:
        return isinstance(self.nodes.get(step_id or ""), QuestionNode)


class Asset(BaseModel):
    """Asset offered on the intake form, with its known failure modes."""

    name: str
    failure_modes: list[str] = Field(default_factory=list)


class RCMState(BaseModel):
    """Wizard state; mutated only by begin/answer/back/reset."""

    current_step: str = "Start"
    failure_type: Optional[FailureType] = None
    failure_leg: Optional[FailureLeg] = None
    asset: str = ""
    failure_mode: str = ""
    progress: float = 0.0
    history: list[str] = Field(default_factory=list)
    total_steps: int = 7


class DecisionPathEntry(BaseModel):
    step: str
    question: Optional[str] = None
    answer: Literal["Yes", "No", "Final"]


class RecommendedAction(BaseModel):
    id: Optional[str] = None
    recommendation: Optional[str] = None
    explanation: Optional[str] = None


class DecisionExport(BaseModel):
    """Document produced by 'Export Decision Data'."""

    asset: str
    failureMode: str
    failureType: Optional[FailureType] = None
    failureLeg: Optional[FailureLeg] = None
    recommendedAction: RecommendedAction
    decisionPath: list[DecisionPathEntry] = Field(default_factory=list)
    timestamp: str
