"""
# Quizcart
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

classifier.py

Turn one QTI <item> node into a normalized Question.

QTI exports disagree on how they mark the question type. Some declare a
Common Cartridge profile in the item metadata:

    <qtimetadatafield>
      <fieldlabel>cc_profile</fieldlabel>
      <fieldentry>cc.multiple_choice.v0p1</fieldentry>
    </qtimetadatafield>

others only carry the interaction markup (<render_choice>, <response_str>).
Type detection is an ordered rule table: the first rule whose predicate
matches decides the response type and runs its extractor. A recognized
cc_profile is decisive; markup sniffing only applies when no recognized
profile is declared.

Score comes from the cc_weighting metadata field, else from the first
<respcondition>'s <setvar>. Essay items always report "Manual grading".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from quizcart.models import (
    NOT_AVAILABLE,
    Choice,
    ChoiceAnswer,
    Question,
    ResponseType,
)
from quizcart.sanitize import sanitize
from quizcart.xml_tree import attr, dig, first, one_or_many, text_of


# ============================================================================
# Constants
# ============================================================================

PROFILE_LABEL = "cc_profile"
WEIGHTING_LABEL = "cc_weighting"

MULTIPLE_CHOICE_PROFILE = "cc.multiple_choice.v0p1"
FILL_IN_BLANK_PROFILE = "cc.fib.v0p1"
ESSAY_PROFILE = "cc.essay.v0p1"

KNOWN_PROFILES = (MULTIPLE_CHOICE_PROFILE, FILL_IN_BLANK_PROFILE, ESSAY_PROFILE)

ESSAY_ANSWER = "Manual scoring required."
ESSAY_SCORE = "Manual grading"


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


# ============================================================================
# Item field access
# ============================================================================

def metadata_fields(item: Any) -> List[Any]:
    """All <qtimetadatafield> nodes under the item's metadata."""
    result = []
    for qtimetadata in one_or_many(dig(item, "itemmetadata", "qtimetadata")):
        result.extend(one_or_many(dig(qtimetadata, "qtimetadatafield")))
    return result


def metadata_field(item: Any, label: str) -> Optional[Any]:
    """First metadata field whose <fieldlabel> equals label."""
    for candidate in metadata_fields(item):
        if _clean(text_of(dig(candidate, "fieldlabel"))) == label:
            return candidate
    return None


def declared_profile(item: Any) -> Optional[str]:
    """The item's cc_profile, if it is one this extractor understands."""
    profile_field = metadata_field(item, PROFILE_LABEL)
    if profile_field is None:
        return None
    profile = _clean(text_of(dig(profile_field, "fieldentry")))
    return profile if profile in KNOWN_PROFILES else None


def response_conditions(item: Any) -> List[Any]:
    return one_or_many(dig(item, "resprocessing", "respcondition"))


def equality_target(condition: Any) -> Optional[str]:
    """Trimmed <conditionvar><varequal> value of a response condition."""
    return _clean(text_of(dig(condition, "conditionvar", "varequal")))


def has_choice_rendering(item: Any) -> bool:
    return dig(item, "presentation", "response_lid", "render_choice") is not None


def has_text_response(item: Any) -> bool:
    return dig(item, "presentation", "response_str") is not None


def question_text(item: Any) -> str:
    text = text_of(dig(item, "presentation", "material", "mattext"))
    return NOT_AVAILABLE if text is None else sanitize(text)


def resolve_score(item: Any) -> str:
    weighting = metadata_field(item, WEIGHTING_LABEL)
    if weighting is not None:
        return _clean(text_of(dig(weighting, "fieldentry"))) or NOT_AVAILABLE

    setvar = first(dig(first(response_conditions(item)), "setvar"))
    if setvar is None:
        return NOT_AVAILABLE
    return _clean(text_of(setvar)) or _clean(attr(setvar, "val")) or NOT_AVAILABLE


# ============================================================================
# Extractors
# ============================================================================

def extract_multiple_choice(item: Any, question: Question) -> None:
    labels = one_or_many(
        dig(item, "presentation", "response_lid", "render_choice", "response_label")
    )
    for label in labels:
        text = text_of(dig(label, "material", "mattext"))
        question.options.append(Choice(
            identifier=attr(label, "ident") or NOT_AVAILABLE,
            text=NOT_AVAILABLE if text is None else sanitize(text),
        ))

    scoring = next(
        (cond for cond in response_conditions(item) if dig(cond, "setvar") is not None),
        None,
    )
    if scoring is None:
        question.correct_answer = ChoiceAnswer()
        return

    correct_id = equality_target(scoring) or NOT_AVAILABLE
    match = next((opt for opt in question.options if opt.identifier == correct_id), None)
    question.correct_answer = ChoiceAnswer(
        id=correct_id,
        text=match.text if match else NOT_AVAILABLE,
    )


def extract_fill_in_blank(item: Any, question: Question) -> None:
    question.correct_answer = equality_target(first(response_conditions(item))) or NOT_AVAILABLE


def extract_essay(item: Any, question: Question) -> None:
    question.correct_answer = ESSAY_ANSWER
    question.score = ESSAY_SCORE


def extract_nothing(item: Any, question: Question) -> None:
    pass


# ============================================================================
# Rule table
# ============================================================================

@dataclass(frozen=True)
class Rule:
    """One detection rule: matches(item, declared_profile) -> bool."""
    name: str
    response_type: ResponseType
    matches: Callable[[Any, Optional[str]], bool]
    extract: Callable[[Any, Question], None]


RULES: Tuple[Rule, ...] = (
    Rule(
        "multiple_choice",
        ResponseType.MULTIPLE_CHOICE,
        lambda item, profile: profile == MULTIPLE_CHOICE_PROFILE
        or (profile is None and has_choice_rendering(item)),
        extract_multiple_choice,
    ),
    Rule(
        "fill_in_blank",
        ResponseType.FILL_IN_BLANK,
        lambda item, profile: profile == FILL_IN_BLANK_PROFILE
        or (profile is None and has_text_response(item)),
        extract_fill_in_blank,
    ),
    Rule(
        "essay",
        ResponseType.ESSAY,
        lambda item, profile: profile == ESSAY_PROFILE,
        extract_essay,
    ),
    Rule(
        "unknown",
        ResponseType.UNKNOWN,
        lambda item, profile: True,
        extract_nothing,
    ),
)


def match_rule(item: Any) -> Rule:
    """First rule in RULES that accepts the item."""
    profile = declared_profile(item)
    return next(rule for rule in RULES if rule.matches(item, profile))


def classify(item: Any) -> Question:
    """Build a Question from a raw <item> node; never raises on odd markup."""
    question = Question(
        item_identifier=attr(item, "ident") or NOT_AVAILABLE,
        question_text=question_text(item),
        score=resolve_score(item),
    )

    rule = match_rule(item)
    question.response_type = rule.response_type
    rule.extract(item, question)
    return question
