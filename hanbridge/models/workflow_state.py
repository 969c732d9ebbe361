"""
Workflow State - State machine definition for the translation pipeline

Used by the graph nodes to track progress of a single request.
"""

from enum import Enum


class WorkflowState(str, Enum):
    """Translation workflow states"""

    # Initial states
    INITIALIZED = "initialized"          # Request validated, ready to start

    # Processing states
    DETECTING = "detecting"              # Source language detection
    TRANSFORMING = "transforming"        # Custom rule transformation (formality path)
    TRANSLATING = "translating"          # Primary translation in progress
    BACKTRANSLATING = "backtranslating"  # Back-translation for verification
    SCORING = "scoring"                  # Accuracy scoring

    # Terminal states
    COMPLETED = "completed"              # Result assembled
    FAILED = "failed"                    # Fatal provider error


# State transition rules
VALID_TRANSITIONS = {
    WorkflowState.INITIALIZED: [WorkflowState.DETECTING, WorkflowState.FAILED],
    WorkflowState.DETECTING: [
        WorkflowState.TRANSFORMING,      # Formality path with custom rules
        WorkflowState.TRANSLATING,
        WorkflowState.FAILED
    ],
    WorkflowState.TRANSFORMING: [WorkflowState.TRANSLATING, WorkflowState.FAILED],
    WorkflowState.TRANSLATING: [WorkflowState.BACKTRANSLATING, WorkflowState.FAILED],
    WorkflowState.BACKTRANSLATING: [WorkflowState.SCORING, WorkflowState.FAILED],
    WorkflowState.SCORING: [WorkflowState.COMPLETED, WorkflowState.FAILED],
    # Terminal states
    WorkflowState.COMPLETED: [],
    WorkflowState.FAILED: [],
}


def is_terminal_state(state: WorkflowState) -> bool:
    """Check if a state is terminal (no further transitions)"""
    return state in [
        WorkflowState.COMPLETED,
        WorkflowState.FAILED
    ]


def can_transition(from_state: WorkflowState, to_state: WorkflowState) -> bool:
    """Check if a state transition is valid"""
    return to_state in VALID_TRANSITIONS.get(from_state, [])
