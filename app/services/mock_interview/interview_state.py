"""
Description:
Phase model for a mock interview session.

A session moves introduction -> questions -> closing and never goes back.
InterviewState is immutable; the functions below return a new state or raise
InterviewStateError when the move is not allowed from the current phase.

Dependencies:
- app.errors.exceptions: For InterviewStateError.

Author: @kcaparas1630
"""
from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import Tuple
from app.errors.exceptions import InterviewStateError


class InterviewPhase(str, Enum):
    INTRODUCTION = "introduction"
    QUESTIONS = "questions"
    CLOSING = "closing"


PHASE_TRANSITIONS = MappingProxyType({
    InterviewPhase.INTRODUCTION: InterviewPhase.QUESTIONS,
    InterviewPhase.QUESTIONS: InterviewPhase.CLOSING,
})


def next_phase(phase: InterviewPhase) -> InterviewPhase:
    if phase not in PHASE_TRANSITIONS:
        raise InterviewStateError(f"No phase follows '{phase.value}'")
    return PHASE_TRANSITIONS[phase]


@dataclass(frozen=True)
class InterviewState:
    phase: InterviewPhase = InterviewPhase.INTRODUCTION
    current_question_index: int = 0
    questions: Tuple[str, ...] = ()


def begin_questions(state: InterviewState) -> InterviewState:
    if state.phase != InterviewPhase.INTRODUCTION:
        raise InterviewStateError(f"Cannot begin questions from '{state.phase.value}'")
    return replace(state, phase=next_phase(state.phase))


def advance_question(state: InterviewState) -> InterviewState:
    if state.phase != InterviewPhase.QUESTIONS:
        raise InterviewStateError(f"Cannot advance questions from '{state.phase.value}'")
    return replace(state, current_question_index=state.current_question_index + 1)


def close_interview(state: InterviewState) -> InterviewState:
    """Move to closing from either earlier phase (ending early skips the rest)."""
    if state.phase == InterviewPhase.CLOSING:
        raise InterviewStateError("Interview is already closing")
    return replace(state, phase=InterviewPhase.CLOSING)


def is_complete(state: InterviewState) -> bool:
    """True once every question has been delivered."""
    return state.current_question_index >= len(state.questions)
