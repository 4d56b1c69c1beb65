"""
Default RCM decision diagram and asset catalogue.

The diagram follows the classic RCM task-selection logic: the first question
classifies the failure as evident or hidden, the second picks the safety or
financial consequence leg, then each leg walks the proactive task options
(on-condition, scheduled restoration, scheduled discard) before the default
actions (combination of tasks, failure finding, redesign, no scheduled
maintenance). The longest path is six questions and a recommendation.
"""

from ffi_shared.schemas.rcm import AnswerNode, Asset, DecisionGraph, QuestionNode

TOTAL_STEPS = 7

_ON_CONDITION_INFO = (
    "An on-condition task checks for a potential failure (a detectable condition showing that a "
    "functional failure is about to occur or is in the process of occurring). It is worth doing if the "
    "P-F interval is reasonably consistent and long enough to act on the finding."
)
_RESTORATION_INFO = (
    "A scheduled restoration task remanufactures the item or overhauls it at or before a specified age "
    "limit. It needs an identifiable age at which the conditional probability of failure rises rapidly, "
    "and most items must survive to that age."
)
_DISCARD_INFO = (
    "A scheduled discard task replaces the item at or before a specified life limit, regardless of its "
    "condition at the time."
)
_FAILURE_FINDING_INFO = (
    "A failure-finding task checks whether a hidden function still works. The interval is set from the "
    "required availability of the protective device, or from the tolerable probability of the multiple "
    "failure (see the FFI calculators)."
)


def _question(step_id: str, header: str, main_text: str, yes: str, no: str, info: str = "") -> QuestionNode:
    return QuestionNode(id=step_id, header=header, main_text=main_text, yes_next_step=yes, no_next_step=no, info=info)


def _proactive_chain(prefix: str, consequence: str, last_no: str) -> list[QuestionNode]:
    """On-condition -> restoration -> discard questions for one consequence leg."""
    return [
        _question(
            f"{prefix}_OnCondition",
            "On-condition task",
            f"Is an on-condition task to detect whether the failure is occurring or about to occur "
            f"technically feasible and worth doing ({consequence})?",
            "A_OnCondition",
            f"{prefix}_Restoration",
            _ON_CONDITION_INFO,
        ),
        _question(
            f"{prefix}_Restoration",
            "Scheduled restoration",
            f"Is a scheduled restoration task to reduce the failure rate technically feasible and worth "
            f"doing ({consequence})?",
            "A_Restoration",
            f"{prefix}_Discard",
            _RESTORATION_INFO,
        ),
        _question(
            f"{prefix}_Discard",
            "Scheduled discard",
            f"Is a scheduled discard task to reduce the failure rate technically feasible and worth "
            f"doing ({consequence})?",
            "A_Discard",
            last_no,
            _DISCARD_INFO,
        ),
    ]


def _questions() -> list[QuestionNode]:
    return [
        _question(
            "Start",
            "Failure evidence",
            "Will the loss of function caused by this failure mode on its own become evident to the "
            "operating crew under normal circumstances?",
            "Evident",
            "Hidden",
            "A failure is evident if the operators will know that it has happened when it occurs on its "
            "own. Failures of protective devices that are not fail-safe are usually hidden.",
        ),
        _question(
            "Evident",
            "Safety and environmental consequences",
            "Does the failure mode cause a loss of function or other damage which could hurt or kill "
            "someone, or breach any known environmental standard or regulation?",
            "ES_OnCondition",
            "EF_OnCondition",
            "Answer yes if the failure could injure or kill someone, or breach an environmental standard.",
        ),
        _question(
            "Hidden",
            "Multiple failure consequences",
            "Could the multiple failure (the hidden failure together with the failure of the function it "
            "protects) hurt or kill someone, or breach any known environmental standard or regulation?",
            "HS_OnCondition",
            "HF_OnCondition",
            "A hidden failure only has consequences when a second failure or a demand occurs while the "
            "protective function is failed.",
        ),
        *_proactive_chain("ES", "evident failure with safety or environmental consequences", "ES_Combination"),
        _question(
            "ES_Combination",
            "Combination of tasks",
            "Is a combination of tasks technically feasible and worth doing, reducing the risk of the "
            "failure to a tolerable level?",
            "A_Combination",
            "A_Redesign",
            "Only applies to safety or environmental consequences, where no single task is enough.",
        ),
        *_proactive_chain("EF", "evident failure with operational or financial consequences", "A_NoScheduledMaintenance"),
        *_proactive_chain("HS", "hidden failure with safety or environmental consequences", "HS_FailureFinding"),
        _question(
            "HS_FailureFinding",
            "Failure-finding task",
            "Is it technically feasible and worth doing a failure-finding task to reduce the risk of the "
            "multiple failure to a tolerable level?",
            "A_FailureFinding",
            "A_Redesign",
            _FAILURE_FINDING_INFO,
        ),
        *_proactive_chain("HF", "hidden failure with operational or financial consequences", "HF_FailureFinding"),
        _question(
            "HF_FailureFinding",
            "Failure-finding task",
            "Is it technically feasible and worth doing a failure-finding task to reduce the cost of the "
            "multiple failure to below the cost of the task?",
            "A_FailureFinding",
            "A_NoScheduledMaintenance",
            _FAILURE_FINDING_INFO,
        ),
    ]


def _answers() -> list[AnswerNode]:
    return [
        AnswerNode(
            id="A_OnCondition",
            recommendation="Scheduled on-condition task",
            explanation="Check for the potential failure at intervals shorter than the P-F interval and act "
            "on what is found.",
        ),
        AnswerNode(
            id="A_Restoration",
            recommendation="Scheduled restoration task",
            explanation="Restore the item at or before the age at which the probability of failure rises "
            "rapidly.",
        ),
        AnswerNode(
            id="A_Discard",
            recommendation="Scheduled discard task",
            explanation="Replace the item at or before its life limit.",
        ),
        AnswerNode(
            id="A_Combination",
            recommendation="Combination of tasks",
            explanation="Use a combination of on-condition, restoration and discard tasks to bring the risk "
            "down to a tolerable level.",
        ),
        AnswerNode(
            id="A_FailureFinding",
            recommendation="Scheduled failure-finding task",
            explanation="Check at regular intervals whether the hidden function still works. Use the FFI "
            "calculators to set the interval.",
        ),
        AnswerNode(
            id="A_Redesign",
            recommendation="Redesign is compulsory",
            explanation="No task reduces the risk to a tolerable level. The asset or the way it is operated "
            "must be changed.",
        ),
        AnswerNode(
            id="A_NoScheduledMaintenance",
            recommendation="No scheduled maintenance",
            explanation="No proactive task is worth doing. Run to failure; redesign may be desirable if the "
            "cost of failure is high.",
        ),
    ]


def build_default_graph() -> DecisionGraph:
    nodes = {node.id: node for node in [*_questions(), *_answers()]}
    return DecisionGraph(name="RCM Decision Diagram", start_id="Start", total_steps=TOTAL_STEPS, nodes=nodes)


ASSETS: list[Asset] = [
    Asset(
        name="Centrifugal Pump",
        failure_modes=["Bearing seizure", "Mechanical seal leakage", "Impeller wear", "Motor winding failure"],
    ),
    Asset(
        name="Pressure Safety Valve",
        failure_modes=["Fails to open on demand", "Spurious opening", "Seat leakage"],
    ),
    Asset(
        name="Gas Detector",
        failure_modes=["Fails to detect gas", "Sensor drift", "False alarm"],
    ),
    Asset(
        name="Standby Generator",
        failure_modes=["Fails to start on demand", "Fails to run", "Fuel contamination"],
    ),
    Asset(
        name="Air Compressor",
        failure_modes=["Valve failure", "Overheating", "Air leakage"],
    ),
    Asset(
        name="Conveyor Belt",
        failure_modes=["Belt tear", "Roller bearing failure", "Belt misalignment"],
    ),
]
