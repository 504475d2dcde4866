"""Input models for every Trello tool and the validation entry point.

Each tool declares a ``StrictModel`` subclass. The same model both enforces
the arguments at call time and produces the JSON Schema advertised through
``tools/list``, so the two can never drift apart.
"""

from typing import Annotated, Any, Literal, Optional
from urllib.parse import urlparse

from pydantic import (
    AfterValidator,
    AllowInfNan,
    BaseModel,
    ConfigDict,
    Field,
    Strict,
    StrictBool,
    StrictInt,
    StringConstraints,
    ValidationError,
)

from .exceptions import ToolValidationError


TRELLO_ID_PATTERN = r"^[a-zA-Z0-9]{24}$"
MAX_TEXT_LENGTH = 16384
MAX_SHORT_TEXT_LENGTH = 256
ALLOWED_URL_SCHEMES = ("http", "https")


def _check_url_scheme(value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in ALLOWED_URL_SCHEMES or not parsed.netloc:
        raise ValueError("Only HTTP and HTTPS URLs are allowed")
    return value


TrelloId = Annotated[str, StringConstraints(strict=True, pattern=TRELLO_ID_PATTERN)]
Name = Annotated[str, StringConstraints(strict=True, min_length=1, max_length=MAX_TEXT_LENGTH)]
LongText = Annotated[str, StringConstraints(strict=True, max_length=MAX_TEXT_LENGTH)]
ShortText = Annotated[str, StringConstraints(strict=True, max_length=MAX_SHORT_TEXT_LENGTH)]
HttpUrl = Annotated[
    str,
    StringConstraints(strict=True, min_length=1, max_length=MAX_TEXT_LENGTH),
    AfterValidator(_check_url_scheme),
]
# Finite only; NaN and Infinity cannot be sent on as JSON.
FiniteNumber = Annotated[float, Strict(), AllowInfNan(False)]
LabelColor = Literal[
    "yellow", "purple", "blue", "red", "green", "orange",
    "black", "sky", "pink", "lime", "null",
]


class StrictModel(BaseModel):
    """Base model that forbids unknown fields."""
    model_config = ConfigDict(extra="forbid")


class NoArguments(StrictModel):
    """Input for tools that take no arguments."""


class BoardRef(StrictModel):
    boardId: TrelloId = Field(..., description="ID of the board")


class ListRef(StrictModel):
    listId: TrelloId = Field(..., description="ID of the list")


class CardRef(StrictModel):
    cardId: TrelloId = Field(..., description="ID of the card")


class CreateBoardInput(StrictModel):
    name: Name = Field(..., description="Name of the new board")
    desc: Optional[LongText] = Field(None, description="Board description")


class CreateListInput(StrictModel):
    boardId: TrelloId = Field(..., description="ID of the board to add the list to")
    name: Name = Field(..., description="Name of the new list")
    pos: Optional[ShortText] = Field(None, description="Position: 'top', 'bottom' or a number")


class CreateCardInput(StrictModel):
    listId: TrelloId = Field(..., description="ID of the list to add the card to")
    name: Name = Field(..., description="Name of the new card")
    desc: Optional[LongText] = Field(None, description="Card description")
    due: Optional[ShortText] = Field(None, description="Due date (ISO 8601)")
    pos: Optional[ShortText] = Field(None, description="Position: 'top', 'bottom' or a number")


class CardUpdates(StrictModel):
    """Patch of card fields; any subset may be supplied."""

    name: Optional[Name] = None
    desc: Optional[LongText] = None
    due: Optional[ShortText] = None
    closed: Optional[StrictBool] = None
    pos: Optional[ShortText | StrictInt | FiniteNumber] = None


class UpdateCardInput(StrictModel):
    cardId: TrelloId = Field(..., description="ID of the card to update")
    updates: CardUpdates = Field(..., description="Fields to change on the card")


class MoveCardInput(StrictModel):
    cardId: TrelloId = Field(..., description="ID of the card to move")
    listId: TrelloId = Field(..., description="ID of the destination list")
    pos: Optional[ShortText] = Field(None, description="Position in the destination list")


class AddCommentInput(StrictModel):
    cardId: TrelloId = Field(..., description="ID of the card to comment on")
    text: Name = Field(..., description="Comment text")


class CardLabelInput(StrictModel):
    cardId: TrelloId = Field(..., description="ID of the card")
    labelId: TrelloId = Field(..., description="ID of the label")


class CreateLabelInput(StrictModel):
    boardId: TrelloId = Field(..., description="ID of the board to add the label to")
    name: Name = Field(..., description="Name of the label")
    color: LabelColor = Field(..., description="Label color, or 'null' for no color")


class CardMemberInput(StrictModel):
    cardId: TrelloId = Field(..., description="ID of the card")
    memberId: TrelloId = Field(..., description="ID of the member")


class CreateChecklistInput(StrictModel):
    cardId: TrelloId = Field(..., description="ID of the card to add the checklist to")
    name: Name = Field(..., description="Name of the checklist")


class AddChecklistItemInput(StrictModel):
    checklistId: TrelloId = Field(..., description="ID of the checklist")
    name: Name = Field(..., description="Name of the item")
    checked: StrictBool = Field(False, description="Whether the item starts completed")


class SearchCardsInput(StrictModel):
    query: Name = Field(..., description="Search query")
    limit: Optional[Annotated[StrictInt, Field(ge=1, le=1000)]] = Field(
        None, description="Maximum number of cards to return"
    )


class AttachUrlInput(StrictModel):
    cardId: TrelloId = Field(..., description="ID of the card")
    url: HttpUrl = Field(..., description="HTTP or HTTPS URL to attach")
    name: Optional[ShortText] = Field(None, description="Attachment name")


def _format_errors(exc: ValidationError) -> list[dict[str, Any]]:
    errors = []
    for err in exc.errors(include_url=False, include_input=False):
        loc = ".".join(str(part) for part in err["loc"]) or "arguments"
        errors.append({"loc": loc, "message": err["msg"]})
    return errors


def validate_arguments(tool_name: str, model: type[StrictModel], arguments: Any) -> StrictModel:
    """Validate raw tool arguments against a tool's input model.

    Args:
        tool_name: Tool being called, used in the error message.
        model: The tool's input model.
        arguments: Raw argument mapping from the caller (``None`` means empty).

    Returns:
        The validated model instance.

    Raises:
        ToolValidationError: Listing every violated constraint.
    """
    if arguments is None:
        arguments = {}
    try:
        return model.model_validate(arguments)
    except ValidationError as e:
        raise ToolValidationError(tool_name=tool_name, errors=_format_errors(e)) from None
