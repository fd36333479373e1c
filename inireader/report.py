from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field as PField

from .errors import ParseIssue
from .reader import IniReader


class IssueM(BaseModel):
    line: int
    kind: str
    message: str
    text: str = ""

    @classmethod
    def of(cls, issue: ParseIssue) -> IssueM:
        return cls(line=issue.line, kind=issue.kind.value, message=issue.message, text=issue.text)


class CheckReportM(BaseModel):
    """Ответ `check`: статус разбора, все найденные ошибки и имена секций."""
    source: Optional[str] = None
    ok: bool
    error: str
    linesRead: int = 0
    issues: List[IssueM] = PField(default_factory=list)
    sections: List[str] = PField(default_factory=list)


class FieldM(BaseModel):
    key: str
    value: str


class SectionFieldsM(BaseModel):
    section: str
    entries: List[FieldM] = PField(default_factory=list)


class DumpM(BaseModel):
    sections: Dict[str, Dict[str, str]] = PField(default_factory=dict)


def build_check_report(reader: IniReader) -> CheckReportM:
    return CheckReportM(
        source=reader.source,
        ok=reader.success(),
        error=reader.get_error(),
        linesRead=reader.lines_read,
        issues=[IssueM.of(i) for i in reader.errors],
        sections=sorted(reader.get_section_names()),
    )


def build_section_fields(reader: IniReader, section: str) -> Optional[SectionFieldsM]:
    fields = reader.get_section_fields(section)
    if fields is None:
        return None
    return SectionFieldsM(
        section=section,
        entries=[FieldM(key=f.key, value=f.value) for f in sorted(fields)],
    )


__all__ = [
    "IssueM", "CheckReportM", "FieldM", "SectionFieldsM", "DumpM",
    "build_check_report", "build_section_fields",
]
