from typing import Optional, List, Literal
from pydantic import BaseModel, Field

Strategy = Literal["units", "outline"]


class ParseTextIn(BaseModel):
    text: str
    strategy: Strategy = "units"
    filename: Optional[str] = None


class UnitOut(BaseModel):
    identifier: str
    kind: Literal["Unit", "Module", "Section"]
    title: str
    heading: str
    content: str
    synthetic: bool = False


class SubtopicOut(BaseModel):
    title: str
    content: str = ""


class TopicOut(BaseModel):
    title: str
    description: str = ""
    content: str = ""
    subtopics: List[SubtopicOut] = Field(default_factory=list)
    resources: List[str] = Field(default_factory=list)


class ParseOut(BaseModel):
    filename: Optional[str]
    sha256: str
    strategy: Strategy
    unitCount: int
    units: List[UnitOut]
    topics: List[TopicOut]
    warnings: List[str] = Field(default_factory=list)
