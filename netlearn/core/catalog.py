from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from netlearn.core.config import DEFAULT_CATALOG

QUESTION_KINDS = ("multiple-choice", "true-false", "matching", "ordering", "fill-blank")
_PLACEHOLDER = re.compile(r"\{(\w+)\}")


@dataclass(frozen=True)
class Question:
    id: str
    prompt: str
    options: Tuple[str, ...]
    correct_answer: int
    kind: str = "multiple-choice"
    explanation: Optional[str] = None

    def is_correct(self, option: int) -> bool:
        return option == self.correct_answer


@dataclass(frozen=True)
class ContentBlock:
    heading: str
    text: str
    example: Optional[str] = None


@dataclass(frozen=True)
class Level:
    id: int
    title: str
    section_id: int
    questions: Tuple[Question, ...]
    content: Tuple[ContentBlock, ...] = field(default_factory=tuple)
    key_takeaways: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Section:
    id: int
    name: str
    level_ids: Tuple[int, ...]
    badge: str
    icon: str = ""
    color: str = "cyan"


class CatalogRepository:
    """Read-only course content: sections and their levels, loaded from YAML."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = Path(path) if path is not None else DEFAULT_CATALOG
        self._sections, self._levels = self._load_catalog()

    def get_level(self, level_id: int) -> Level:
        return self._levels[level_id]

    def get_section(self, section_id: int) -> Section:
        return self._sections[section_id]

    def list_sections(self) -> List[Section]:
        return list(self._sections.values())

    def all_levels(self) -> List[Level]:
        return list(self._levels.values())

    def levels_in(self, section_id: int) -> List[Level]:
        return [self._levels[i] for i in self.get_section(section_id).level_ids]

    def section_for_level(self, level_id: int) -> Section:
        return self._sections[self.get_level(level_id).section_id]

    @property
    def total_levels(self) -> int:
        return len(self._levels)

    def _load_catalog(self) -> Tuple[Dict[int, Section], Dict[int, Level]]:
        if not self._path.exists():
            raise FileNotFoundError(f"Catalog file not found: {self._path}")
        raw = yaml.safe_load(self._path.read_text(encoding="utf-8"))
        if not raw or not isinstance(raw, dict):
            raise ValueError(f"{self._path.name}: expected YAML mapping with 'sections' and 'levels'")
        defaults = raw.get("defaults") or {}
        if not isinstance(defaults, dict):
            raise ValueError(f"{self._path.name}: 'defaults' must be a mapping")

        sections: Dict[int, Section] = {}
        for entry in raw.get("sections") or []:
            section = _parse_section(entry)
            if section.id in sections:
                raise ValueError(f"section {section.id}: duplicate id")
            sections[section.id] = section

        levels: Dict[int, Level] = {}
        for entry in raw.get("levels") or []:
            level = _parse_level(entry, defaults)
            if level.id in levels:
                raise ValueError(f"level {level.id}: duplicate id")
            levels[level.id] = level

        if not sections:
            raise ValueError(f"{self._path.name}: no sections defined")
        if not levels:
            raise ValueError(f"{self._path.name}: no levels defined")

        levels = dict(sorted(levels.items()))
        sections = dict(sorted(sections.items()))
        _check_partition(sections, levels)
        return sections, levels


def _parse_section(entry: Any) -> Section:
    if not isinstance(entry, dict):
        raise ValueError(f"section entry must be a mapping, got {entry!r}")
    try:
        section_id = int(entry["id"])
        name = str(entry["name"]).strip()
        badge = str(entry["badge"]).strip()
        level_ids = _expand_level_ids(entry["levels"])
    except KeyError as e:
        raise ValueError(f"section {entry.get('id')!r}: missing {e.args[0]!r}") from None
    if not level_ids:
        raise ValueError(f"section {section_id}: no levels")
    return Section(
        id=section_id,
        name=name,
        level_ids=level_ids,
        badge=badge,
        icon=str(entry.get("icon", "")),
        color=str(entry.get("color", "cyan")),
    )


def _expand_level_ids(value: Any) -> Tuple[int, ...]:
    """Accept an explicit list of ids or a ``{first: a, last: b}`` range."""
    if isinstance(value, dict):
        first, last = int(value["first"]), int(value["last"])
        return tuple(range(first, last + 1))
    return tuple(int(v) for v in value)


def _parse_level(entry: Any, defaults: Dict[str, Any]) -> Level:
    if not isinstance(entry, dict):
        raise ValueError(f"level entry must be a mapping, got {entry!r}")
    try:
        level_id = int(entry["id"])
        title = str(entry["title"]).strip()
        section_id = int(entry["section"])
    except KeyError as e:
        raise ValueError(f"level {entry.get('id')!r}: missing {e.args[0]!r}") from None
    if level_id < 1:
        raise ValueError(f"level {level_id}: id must be positive")

    fill = {"id": level_id, "title": title, "title_lower": title.lower()}
    raw_questions = entry.get("questions") or _fill_template(defaults.get("questions"), fill) or []
    raw_content = entry.get("content") or _fill_template(defaults.get("content"), fill) or []
    raw_takeaways = entry.get("key_takeaways") or _fill_template(defaults.get("key_takeaways"), fill) or []

    questions = tuple(_parse_question(q, level_id) for q in raw_questions)
    if not questions:
        raise ValueError(f"level {level_id}: no questions")
    content = tuple(_parse_content(c, level_id) for c in raw_content)
    return Level(
        id=level_id,
        title=title,
        section_id=section_id,
        questions=questions,
        content=content,
        key_takeaways=tuple(str(t) for t in raw_takeaways),
    )


def _parse_content(entry: Any, level_id: int) -> ContentBlock:
    if not isinstance(entry, dict):
        raise ValueError(f"level {level_id}: content block must be a mapping, got {entry!r}")
    for key in ("heading", "text"):
        if not entry.get(key):
            raise ValueError(f"level {level_id}: content block missing {key!r}")
    return ContentBlock(heading=str(entry["heading"]), text=str(entry["text"]), example=entry.get("example"))


def _parse_question(entry: Any, level_id: int) -> Question:
    if not isinstance(entry, dict):
        raise ValueError(f"level {level_id}: question must be a mapping, got {entry!r}")
    qid = str(entry.get("id", "?"))
    options = tuple(str(o) for o in entry.get("options") or [])
    if not options:
        raise ValueError(f"question {qid}: no options")
    try:
        correct = int(entry["answer"])
    except KeyError:
        raise ValueError(f"question {qid}: missing 'answer'") from None
    if not 0 <= correct < len(options):
        raise ValueError(f"question {qid}: answer {correct} out of range for {len(options)} options")
    kind = str(entry.get("type", "multiple-choice"))
    if kind not in QUESTION_KINDS:
        raise ValueError(f"question {qid}: unknown type {kind!r}")
    prompt = entry.get("question")
    if not prompt:
        raise ValueError(f"question {qid}: missing 'question'")
    return Question(
        id=qid,
        prompt=str(prompt),
        options=options,
        correct_answer=correct,
        kind=kind,
        explanation=entry.get("explanation"),
    )


def _fill_template(value: Any, fill: Dict[str, Any]) -> Any:
    """Recursively substitute ``{id}``/``{title}``/``{title_lower}`` in template strings.

    Other braces are left as written.
    """
    if isinstance(value, str):
        def substitute(match: "re.Match[str]") -> str:
            name = match.group(1)
            return str(fill[name]) if name in fill else match.group(0)

        return _PLACEHOLDER.sub(substitute, value)
    if isinstance(value, list):
        return [_fill_template(v, fill) for v in value]
    if isinstance(value, dict):
        return {k: _fill_template(v, fill) for k, v in value.items()}
    return value


def _check_partition(sections: Dict[int, Section], levels: Dict[int, Level]) -> None:
    expected = list(range(1, len(levels) + 1))
    if list(levels) != expected:
        raise ValueError(f"level ids must be contiguous from 1, got {list(levels)}")
    if list(sections) != list(range(1, len(sections) + 1)):
        raise ValueError(f"section ids must be contiguous from 1, got {list(sections)}")

    owner: Dict[int, int] = {}
    for section in sections.values():
        for level_id in section.level_ids:
            if level_id in owner:
                raise ValueError(f"level {level_id}: listed in sections {owner[level_id]} and {section.id}")
            if level_id not in levels:
                raise ValueError(f"section {section.id}: unknown level {level_id}")
            owner[level_id] = section.id
    missing = sorted(set(levels) - set(owner))
    if missing:
        raise ValueError(f"levels not assigned to any section: {missing}")
    for level in levels.values():
        if owner[level.id] != level.section_id:
            raise ValueError(
                f"level {level.id}: declares section {level.section_id} but is listed in section {owner[level.id]}"
            )
