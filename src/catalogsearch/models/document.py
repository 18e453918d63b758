"""Scored document model — A raw catalog document paired with its relevance score.

Documents stay in the backend's field layout (``_id``, ``albumId``,
``artistIds``...) until the response shaper converts them.  Enrichment adds
the resolved ``album`` and ``artists`` keys in place, mirroring a join.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from catalogsearch.models.query import EntityKind


class ScoredDocument(BaseModel):
    """One search hit for a single entity kind."""

    kind: EntityKind = Field(description="Entity kind the document belongs to")
    document: dict[str, Any] = Field(description="Raw document fields as stored in the index")
    score: float = Field(description="Relevance score from the search backend")


class TopPick(BaseModel):
    """The unified top result, tagged with the kind it was picked from."""

    kind: EntityKind = Field(description="Kind whose first-place hit won")
    score: float = Field(description="Score of the winning hit")
    result: ScoredDocument = Field(description="First element of the winning kind's result list")
