"""
Pydantic models for wordlex output.

These give resolved tokens and run statistics a stable JSON shape, for
the command line's --json mode or for serving results from a web API.

Usage:
    from wordlex.models import TokenResult, RunReport

    tokens = [lex.resolve(w) for w in words]
    report = RunReport.from_run(lex, tokens, normalize=True)
    print(report.model_dump_json())
"""

from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from wordlex.run import LexiconRun
from wordlex.tokens import Token


class TokenResult(BaseModel):
    """
    Pydantic model for a single resolved word.
    """
    tag: str = Field(..., description="Part-of-speech or recognizer tag; '?' if unknown")
    surface: str = Field(..., description="The word as it was passed in")
    trace: Optional[str] = Field(None, description="Decomposition path, e.g. 'un+happy'")
    raw_tag: Optional[str] = Field(None, description="Full featured tag, e.g. 'n+p'")
    extra: List[str] = Field(default_factory=list, description="Pattern captures or split pieces")
    is_unknown: bool = Field(False, description="True if nothing resolved the word")

    class Config:
        from_attributes = True

    @classmethod
    def from_token(cls, token: Token) -> "TokenResult":
        """Create a TokenResult from a Token."""
        return cls(
            tag=token.tag,
            surface=token.surface,
            trace=token.trace,
            raw_tag=token.raw_tag,
            extra=list(token.extra),
            is_unknown=token.is_unknown,
        )


class RunReport(BaseModel):
    """
    Pydantic model for the results and statistics of one run.
    """
    tokens: List[TokenResult] = Field(default_factory=list, description="Resolved words, in order")
    count: int = Field(0, description="Top-level lookups made")
    unknown_count: int = Field(0, description="Top-level lookups that stayed unknown")
    words: Dict[str, int] = Field(default_factory=dict, description="Lookups per word")
    unknown: Dict[str, int] = Field(default_factory=dict, description="Unknown words and their counts")
    ngrams: Dict[str, int] = Field(default_factory=dict, description="Phrase counts")

    @classmethod
    def from_run(
        cls,
        run: LexiconRun,
        tokens: Sequence[Token] = (),
        normalize: bool = False,
    ) -> "RunReport":
        """
        Create a RunReport from a lexicon run.

        Args:
            run: The Lexicon or Cascade that resolved the words.
            tokens: Tokens to include in the report.
            normalize: Report normalized phrase counts. The run's own
                counts are left alone.
        """
        stats, words, unknown = run.stats()
        ngrams = dict(run.stats('ngrams'))
        if normalize:
            ngrams = run.normalize_ngrams(ngrams)
        return cls(
            tokens=[TokenResult.from_token(t) for t in tokens],
            count=stats['count'],
            unknown_count=stats['ucount'],
            words=dict(words),
            unknown=dict(unknown),
            ngrams=ngrams,
        )
