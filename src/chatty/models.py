"""Pydantic models for the serialized report"""

from pydantic import BaseModel, Field


class TagSummary(BaseModel):
    """Counters for one tag"""

    questions: int = Field(..., ge=0, examples=[42], description="Questions carrying the tag")
    words: int = Field(..., ge=0, examples=[3150], description="Words across those questions")


class SiteSummary(BaseModel):
    """Counters for one site

    Attributes:
        questions: Questions in the site's dump
        words: Words across all of the site's questions
        tags: Per-tag counters restricted to this site
        chatty_tags: The site's tags with the most words per question
    """

    questions: int = Field(..., ge=0, examples=[1200])
    words: int = Field(..., ge=0, examples=[98000])
    tags: dict[str, TagSummary] = Field(default_factory=dict)
    chatty_tags: list[str] = Field(default_factory=list, examples=[["rust", "lifetimes"]])


class Totals(BaseModel):
    """Corpus-wide rankings and scalar totals"""

    chatty_sites: list[str] = Field(default_factory=list, examples=[["physics", "cooking"]])
    chatty_tags: list[str] = Field(default_factory=list, examples=[["rust", "lifetimes"]])
    files: int = Field(0, ge=0, description="Files processed")
    questions: int = Field(0, ge=0, description="Questions across all files")
    words: int = Field(0, ge=0, description="Words across all questions")
    failed_files: int = Field(0, ge=0, description="Files skipped because they could not be read")


class ChattyReport(BaseModel):
    """Final report for a corpus run

    Mappings are sorted by key so the same aggregate always serializes to the
    same text.
    """

    sites: dict[str, SiteSummary] = Field(default_factory=dict)
    tags: dict[str, TagSummary] = Field(default_factory=dict)
    totals: Totals = Field(default_factory=Totals)
    failures: dict[str, str] | None = Field(
        None,
        examples=[{"/data/broken.jsonl": "[Errno 13] Permission denied: '/data/broken.jsonl'"}],
        description="Files skipped under the best-effort policy (path -> error)",
    )

    def to_json(self, compact: bool = False) -> str:
        """Serialize for output; failures are omitted when there are none."""
        return self.model_dump_json(indent=None if compact else 2, exclude_none=True)
