"""Helpers for the bracket-style multipart payloads sent by the authoring UI.

A question group form looks like::

    title=...&type_group=1&questions[0][title]=...&questions[0][option][A]=...
    elements=<file>&questions[0][elements]=<file>

``questions`` may also be sent as a single JSON-encoded array field.
"""
import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from starlette.datastructures import FormData, UploadFile

from app.core.exceptions import InvalidRequestError

_QUESTION_FIELD = re.compile(r"^questions\[(\d+)\]\[([^\]]+)\](?:\[([^\]]*)\])*$")
_QUESTION_OPTION = re.compile(r"^questions\[(\d+)\]\[option\]\[([^\]]+)\]$")
_OPTION_FIELD = re.compile(r"^option\[([^\]]+)\]$")

GROUP_ELEMENTS_FIELD = "elements"


@dataclass
class QuestionGroupForm:
    fields: Dict[str, Any] = field(default_factory=dict)
    questions: List[Dict[str, Any]] = field(default_factory=list)
    group_files: List[UploadFile] = field(default_factory=list)
    question_files: Dict[int, List[UploadFile]] = field(default_factory=dict)

    def as_payload(self) -> Dict[str, Any]:
        return {**self.fields, "questions": self.questions}


def _is_file(value: Any) -> bool:
    return isinstance(value, UploadFile)


def _load_questions_json(raw: str) -> List[Dict[str, Any]]:
    try:
        questions = json.loads(raw)
    except ValueError:
        raise InvalidRequestError("Invalid questions format")
    if not isinstance(questions, list):
        raise InvalidRequestError("Invalid questions format")
    return questions


def parse_question_group_form(form: FormData) -> QuestionGroupForm:
    parsed = QuestionGroupForm()
    indexed: Dict[int, Dict[str, Any]] = {}
    json_questions: List[Dict[str, Any]] = []

    for key, value in form.multi_items():
        if _is_file(value):
            match = _QUESTION_FIELD.match(key)
            if key == GROUP_ELEMENTS_FIELD:
                parsed.group_files.append(value)
            elif match and match.group(2) == "elements":
                parsed.question_files.setdefault(int(match.group(1)), []).append(value)
            continue

        if key == "questions":
            json_questions = _load_questions_json(value)
            continue

        option_match = _QUESTION_OPTION.match(key)
        if option_match:
            question = indexed.setdefault(int(option_match.group(1)), {})
            options = question.setdefault("option", {})
            if isinstance(options, dict):
                options[option_match.group(2)] = value
            continue

        match = _QUESTION_FIELD.match(key)
        if match:
            indexed.setdefault(int(match.group(1)), {})[match.group(2)] = value
            continue

        parsed.fields[key] = value

    if json_questions:
        parsed.questions = json_questions
        parsed.question_files = {
            index: files
            for index, files in parsed.question_files.items()
            if index < len(json_questions)
        }
    else:
        # Bracket indexes may be sparse; files follow their question's position
        positions = {index: position for position, index in enumerate(sorted(indexed))}
        parsed.questions = [indexed[index] for index in sorted(indexed)]
        parsed.question_files = {
            positions[index]: files
            for index, files in parsed.question_files.items()
            if index in positions
        }
    return parsed


def collect_files(form: FormData) -> List[UploadFile]:
    return [value for _, value in form.multi_items() if _is_file(value)]


def parse_question_form(form: FormData) -> Tuple[Dict[str, Any], List[UploadFile]]:
    """Fields and attachments of a single-question update form.

    ``option[A]``-style fields are folded into one ``option`` map.
    """
    fields: Dict[str, Any] = {}
    options: Dict[str, Any] = {}
    for key, value in form.multi_items():
        if _is_file(value):
            continue
        match = _OPTION_FIELD.match(key)
        if match:
            options[match.group(1)] = value
        else:
            fields[key] = value
    if options and "option" not in fields:
        fields["option"] = options
    return fields, collect_files(form)
