"""Trello tool catalog.

Every handler is a plain coroutine taking the invocation client and the
validated input. Read tools and tools that create or change a single entity
return the Trello payload as JSON; tools with no natural entity result
(deletes, label/member attach and detach, archive) return a fixed
confirmation string.
"""

from typing import Any

import httpx

from trello_gateway.gateway.client import TrelloClient

from .schemas import ToolDefinition, ToolResult, json_result, text_result
from .service import ToolRegistry
from .validation import (
    AddChecklistItemInput,
    AddCommentInput,
    AttachUrlInput,
    BoardRef,
    CardLabelInput,
    CardMemberInput,
    CardRef,
    CreateBoardInput,
    CreateCardInput,
    CreateChecklistInput,
    CreateLabelInput,
    CreateListInput,
    ListRef,
    MoveCardInput,
    NoArguments,
    SearchCardsInput,
    UpdateCardInput,
)


def _compact(**fields: Any) -> dict[str, Any]:
    """Drop fields the caller did not supply."""
    return {key: value for key, value in fields.items() if value is not None}


# Boards

async def list_boards(client: TrelloClient, args: NoArguments) -> ToolResult:
    return json_result(await client.invoke("/members/me/boards"))


async def get_board(client: TrelloClient, args: BoardRef) -> ToolResult:
    return json_result(await client.invoke(f"/boards/{args.boardId}"))


async def create_board(client: TrelloClient, args: CreateBoardInput) -> ToolResult:
    board = await client.invoke("/boards", "POST", _compact(name=args.name, desc=args.desc))
    return json_result(board)


# Lists

async def get_lists(client: TrelloClient, args: BoardRef) -> ToolResult:
    return json_result(await client.invoke(f"/boards/{args.boardId}/lists"))


async def create_list(client: TrelloClient, args: CreateListInput) -> ToolResult:
    body = _compact(idBoard=args.boardId, name=args.name, pos=args.pos)
    return json_result(await client.invoke("/lists", "POST", body))


async def archive_list_cards(client: TrelloClient, args: ListRef) -> ToolResult:
    await client.invoke(f"/lists/{args.listId}/archiveAllCards", "POST")
    return text_result("All cards archived successfully")


# Cards

async def get_cards(client: TrelloClient, args: ListRef) -> ToolResult:
    return json_result(await client.invoke(f"/lists/{args.listId}/cards"))


async def get_board_cards(client: TrelloClient, args: BoardRef) -> ToolResult:
    return json_result(await client.invoke(f"/boards/{args.boardId}/cards"))


async def get_card(client: TrelloClient, args: CardRef) -> ToolResult:
    return json_result(await client.invoke(f"/cards/{args.cardId}"))


async def create_card(client: TrelloClient, args: CreateCardInput) -> ToolResult:
    body = _compact(idList=args.listId, name=args.name, desc=args.desc, due=args.due, pos=args.pos)
    return json_result(await client.invoke("/cards", "POST", body))


async def update_card(client: TrelloClient, args: UpdateCardInput) -> ToolResult:
    body = args.updates.model_dump(exclude_none=True)
    return json_result(await client.invoke(f"/cards/{args.cardId}", "PUT", body))


async def move_card(client: TrelloClient, args: MoveCardInput) -> ToolResult:
    body = _compact(idList=args.listId, pos=args.pos)
    return json_result(await client.invoke(f"/cards/{args.cardId}", "PUT", body))


async def delete_card(client: TrelloClient, args: CardRef) -> ToolResult:
    await client.invoke(f"/cards/{args.cardId}", "DELETE")
    return text_result("Card deleted successfully")


async def search_cards(client: TrelloClient, args: SearchCardsInput) -> ToolResult:
    params = {"query": args.query, "modelTypes": "cards", "partial": "true"}
    if args.limit is not None:
        params["cards_limit"] = str(args.limit)
    result = await client.invoke(f"/search?{httpx.QueryParams(params)}")
    cards = result.get("cards", []) if isinstance(result, dict) else []
    return json_result(cards)


async def attach_url_to_card(client: TrelloClient, args: AttachUrlInput) -> ToolResult:
    body = _compact(url=args.url, name=args.name)
    return json_result(await client.invoke(f"/cards/{args.cardId}/attachments", "POST", body))


# Comments

async def add_comment(client: TrelloClient, args: AddCommentInput) -> ToolResult:
    comment = await client.invoke(f"/cards/{args.cardId}/actions/comments", "POST", {"text": args.text})
    return json_result(comment)


async def get_comments(client: TrelloClient, args: CardRef) -> ToolResult:
    return json_result(await client.invoke(f"/cards/{args.cardId}/actions?filter=commentCard"))


# Labels

async def add_label(client: TrelloClient, args: CardLabelInput) -> ToolResult:
    await client.invoke(f"/cards/{args.cardId}/idLabels", "POST", {"value": args.labelId})
    return text_result("Label added successfully")


async def remove_label(client: TrelloClient, args: CardLabelInput) -> ToolResult:
    await client.invoke(f"/cards/{args.cardId}/idLabels/{args.labelId}", "DELETE")
    return text_result("Label removed successfully")


async def get_board_labels(client: TrelloClient, args: BoardRef) -> ToolResult:
    return json_result(await client.invoke(f"/boards/{args.boardId}/labels"))


async def create_label(client: TrelloClient, args: CreateLabelInput) -> ToolResult:
    body = {"idBoard": args.boardId, "name": args.name, "color": args.color}
    return json_result(await client.invoke("/labels", "POST", body))


# Members

async def add_member_to_card(client: TrelloClient, args: CardMemberInput) -> ToolResult:
    await client.invoke(f"/cards/{args.cardId}/idMembers", "POST", {"value": args.memberId})
    return text_result("Member added successfully")


async def remove_member_from_card(client: TrelloClient, args: CardMemberInput) -> ToolResult:
    await client.invoke(f"/cards/{args.cardId}/idMembers/{args.memberId}", "DELETE")
    return text_result("Member removed successfully")


async def get_board_members(client: TrelloClient, args: BoardRef) -> ToolResult:
    return json_result(await client.invoke(f"/boards/{args.boardId}/members"))


async def get_current_user(client: TrelloClient, args: NoArguments) -> ToolResult:
    return json_result(await client.invoke("/members/me"))


# Checklists

async def create_checklist(client: TrelloClient, args: CreateChecklistInput) -> ToolResult:
    body = {"idCard": args.cardId, "name": args.name}
    return json_result(await client.invoke("/checklists", "POST", body))


async def add_checklist_item(client: TrelloClient, args: AddChecklistItemInput) -> ToolResult:
    body = {"name": args.name, "checked": "true" if args.checked else "false"}
    item = await client.invoke(f"/checklists/{args.checklistId}/checkItems", "POST", body)
    return json_result(item)


async def get_card_checklists(client: TrelloClient, args: CardRef) -> ToolResult:
    return json_result(await client.invoke(f"/cards/{args.cardId}/checklists"))


TOOLS: list[ToolDefinition] = [
    ToolDefinition("listBoards", "List all boards of the authenticated user", NoArguments, list_boards),
    ToolDefinition("getBoard", "Get a board by ID", BoardRef, get_board),
    ToolDefinition("createBoard", "Create a new board", CreateBoardInput, create_board),
    ToolDefinition("getLists", "Get all lists on a board", BoardRef, get_lists),
    ToolDefinition("createList", "Create a list on a board", CreateListInput, create_list),
    ToolDefinition("getCards", "Get all cards in a list", ListRef, get_cards),
    ToolDefinition("getBoardCards", "Get all cards on a board", BoardRef, get_board_cards),
    ToolDefinition("getCard", "Get a card by ID", CardRef, get_card),
    ToolDefinition("createCard", "Create a card in a list", CreateCardInput, create_card),
    ToolDefinition("updateCard", "Update fields of a card", UpdateCardInput, update_card),
    ToolDefinition("moveCard", "Move a card to another list", MoveCardInput, move_card),
    ToolDefinition("deleteCard", "Delete a card", CardRef, delete_card),
    ToolDefinition("addComment", "Add a comment to a card", AddCommentInput, add_comment),
    ToolDefinition("getComments", "Get the comments on a card", CardRef, get_comments),
    ToolDefinition("addLabel", "Add a label to a card", CardLabelInput, add_label),
    ToolDefinition("removeLabel", "Remove a label from a card", CardLabelInput, remove_label),
    ToolDefinition("getBoardLabels", "Get all labels on a board", BoardRef, get_board_labels),
    ToolDefinition("createLabel", "Create a label on a board", CreateLabelInput, create_label),
    ToolDefinition("addMemberToCard", "Add a member to a card", CardMemberInput, add_member_to_card),
    ToolDefinition(
        "removeMemberFromCard", "Remove a member from a card", CardMemberInput, remove_member_from_card
    ),
    ToolDefinition("getBoardMembers", "Get all members of a board", BoardRef, get_board_members),
    ToolDefinition("createChecklist", "Create a checklist on a card", CreateChecklistInput, create_checklist),
    ToolDefinition(
        "addChecklistItem", "Add an item to a checklist", AddChecklistItemInput, add_checklist_item
    ),
    ToolDefinition("getCardChecklists", "Get all checklists on a card", CardRef, get_card_checklists),
    ToolDefinition("searchCards", "Search cards by text", SearchCardsInput, search_cards),
    ToolDefinition("attachUrlToCard", "Attach an HTTP(S) URL to a card", AttachUrlInput, attach_url_to_card),
    ToolDefinition("getCurrentUser", "Get the authenticated Trello member", NoArguments, get_current_user),
    ToolDefinition(
        "archiveListCards", "Archive every card in a list", ListRef, archive_list_cards
    ),
]


def create_registry() -> ToolRegistry:
    """Build a registry holding the full Trello tool catalog."""
    return ToolRegistry(TOOLS)
