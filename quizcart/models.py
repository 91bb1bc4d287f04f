"""
# Quizcart
# Copyright (c) 2026 Dale Chapman
# Licensed under the MIT License. See LICENSE in the project root.

models.py

Normalized quiz representation and its JSON shape:

    {"subject": str,
     "quizzes": [{"title": str,
                  "items": [{"itemIdentifier", "questionText", "responseType",
                             "options": [{"identifier", "text"}],
                             "correctAnswer", "score"}]}]}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Union


NOT_AVAILABLE = "N/A"


class ResponseType(str, Enum):
    MULTIPLE_CHOICE = "Multiple Choice"
    FILL_IN_BLANK = "Fill-in-the-Blank"
    ESSAY = "Essay"
    UNKNOWN = "Unknown"


@dataclass
class Choice:
    identifier: str = NOT_AVAILABLE
    text: str = NOT_AVAILABLE

    def to_dict(self) -> Dict[str, str]:
        return {"identifier": self.identifier, "text": self.text}


@dataclass
class ChoiceAnswer:
    """Correct answer of a multiple-choice item."""
    id: str = NOT_AVAILABLE
    text: str = NOT_AVAILABLE

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "text": self.text}


# Plain strings cover fill-in-the-blank values, the essay literal and "N/A"
CorrectAnswer = Union[ChoiceAnswer, str]


@dataclass
class Question:
    item_identifier: str = NOT_AVAILABLE
    question_text: str = NOT_AVAILABLE
    response_type: ResponseType = ResponseType.UNKNOWN
    options: List[Choice] = field(default_factory=list)
    correct_answer: CorrectAnswer = NOT_AVAILABLE
    score: str = NOT_AVAILABLE

    def to_dict(self) -> Dict[str, Any]:
        answer = self.correct_answer
        return {
            "itemIdentifier": self.item_identifier,
            "questionText": self.question_text,
            "responseType": self.response_type.value,
            "options": [option.to_dict() for option in self.options],
            "correctAnswer": answer.to_dict() if isinstance(answer, ChoiceAnswer) else answer,
            "score": self.score,
        }


@dataclass
class Quiz:
    title: str
    items: List[Question] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "items": [item.to_dict() for item in self.items]}


@dataclass
class PackageResult:
    subject: str = NOT_AVAILABLE
    quizzes: List[Quiz] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"subject": self.subject, "quizzes": [quiz.to_dict() for quiz in self.quizzes]}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)
