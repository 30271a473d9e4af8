from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.events.features.suggest_tags.suggester import (
    TagSuggester,
    TagSuggestionInput,
    get_tag_suggester,
)
from src.events.urls import SUGGEST_TAGS_URL

router = APIRouter()


class SuggestTagsRequest(BaseModel):
    name: str
    description: str = ""
    date: str = ""
    location: str = ""


class SuggestTagsResponse(BaseModel):
    tags: list[str]


@router.post(SUGGEST_TAGS_URL, response_model=SuggestTagsResponse)
async def suggest_tags(
    request: SuggestTagsRequest,
    suggester: TagSuggester = Depends(get_tag_suggester),
) -> SuggestTagsResponse:
    """
    Suggest tags for an event being drafted.
    Always succeeds; an empty list means no suggestions were available.
    """
    tags = await suggester(
        TagSuggestionInput(
            name=request.name,
            description=request.description,
            date=request.date,
            location=request.location,
        )
    )
    return SuggestTagsResponse(tags=tags)
