"""Prompt templates. Inputs are expected to be redacted already."""

from __future__ import annotations

import re

SUMMARY_INSTRUCTION = (
    "Summarize the following text in 3-5 concise sentences. "
    "Do not include links, emails, or promotional text. "
    "Output only the summary. Text:\n\n{text}"
)

QUIZ_EXAMPLE = (
    "[START OF EXAMPLE]\n"
    "Context: The Moon is Earth's only natural satellite. It is the fifth largest "
    "satellite in the Solar System. The dark areas on its surface are called maria.\n"
    "Quiz:\n"
    "Q: What is the Moon's status relative to Earth?\n"
    "A) A man-made satellite\n"
    "B) A natural satellite\n"
    "C) A dwarf planet\n"
    "D) A star\n"
    "Answer: B\n"
    "Q: The dark areas on the Moon's surface are known as what?\n"
    "A) Craters\n"
    "B) Valleys\n"
    "C) Maria\n"
    "D) Highlands\n"
    "Answer: C\n"
    "[END OF EXAMPLE]"
)

FLASHCARDS_EXAMPLE = (
    "[START OF EXAMPLE]\n"
    "Context: The Moon is Earth's only natural satellite. It is the fifth largest "
    "satellite in the Solar System. The dark areas on its surface are called maria.\n"
    "Flashcards:\n"
    "Flashcard 1:\n"
    "Front: What is Earth's only natural satellite?\n"
    "Back: The Moon\n"
    "Flashcard 2:\n"
    "Front: What are the dark areas on the Moon's surface called?\n"
    "Back: Maria\n"
    "[END OF EXAMPLE]"
)

COERCE_JSON_INSTRUCTION = (
    "Convert the following model output into valid JSON. Output ONLY valid JSON.\n\n{raw}"
)

# Classic summarization checkpoints take the raw text, not an instruction.
_SUMMARIZATION_MODEL_RE = re.compile(r"bart|pegasus|summar", re.IGNORECASE)

_WS_RE = re.compile(r"\s+")
_LEADING_NOISE_RE = re.compile(r"^[:\s\"']+")


def summary_prompt(text: str) -> str:
    return SUMMARY_INSTRUCTION.format(text=text)


def quiz_prompt(text: str, count: int) -> str:
    return (
        f"{QUIZ_EXAMPLE}\n\n[START OF TASK]\nContext: {text}\n\n"
        f"Generate exactly {count} multiple-choice questions in the same format. "
        "Each question must have 4 options (A-D) and indicate the correct Answer.\n\n"
        "Quiz:"
    )


def flashcards_prompt(text: str, count: int) -> str:
    return (
        f"{FLASHCARDS_EXAMPLE}\n\n[START OF TASK]\nContext: {text}\n\n"
        f"Generate exactly {count} flashcards in the same format.\n\n"
        "Flashcards:"
    )


def coerce_json_prompt(raw: str) -> str:
    return COERCE_JSON_INSTRUCTION.format(raw=raw)


def is_summarization_model(model: str) -> bool:
    return bool(_SUMMARIZATION_MODEL_RE.search(model))


def _collapse(s: str) -> str:
    return _WS_RE.sub(" ", s).strip()


def strip_echoed_prompt(output: str, prompt: str | None = None) -> str:
    """Drop a prompt the model repeated in front of its answer."""
    if not output:
        return output
    if not prompt:
        return output.strip()

    n_prompt = _collapse(prompt)
    if not _collapse(output).startswith(n_prompt):
        return output.strip()

    start = len(output) - len(output.lstrip())
    if output.startswith(n_prompt, start):
        end = start + len(n_prompt)
    else:
        # prompt whitespace differs from the output's; walk both in step
        end = _match_collapsed_prefix(output, n_prompt)
    return _LEADING_NOISE_RE.sub("", output[end:]).strip()


def _match_collapsed_prefix(output: str, n_prompt: str) -> int:
    """Index in ``output`` just past the text matching the collapsed prompt."""
    i = 0
    while i < len(output) and output[i].isspace():
        i += 1
    for ch in n_prompt:
        if ch == " ":
            while i < len(output) and output[i].isspace():
                i += 1
        else:
            i += 1
    return i
