from __future__ import annotations

from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, Field


Provenance = Literal["intercepted", "dom", "synthetic"]


class Comment(BaseModel):
    author: Optional[str] = None
    text: str

    @property
    def key(self) -> Tuple[str, str]:
        return (self.author or "", self.text)


class ExtractionResult(BaseModel):
    url: str
    strategy: str
    provenance: Provenance
    comments: List[Comment] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    latency_ms: int = 0


class ExtractRequest(BaseModel):
    url: str
