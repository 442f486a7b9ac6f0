"""
Visualizer State

The visualizer (room photo, selected tiles, chat messages, loading/error flags)
is held in immutable snapshots. Every change goes through reduce(state, action),
which returns a new snapshot and never touches the old one, so any render can
be reproduced from the snapshot that triggered it.
"""

import uuid
from typing import Optional, Union

from pydantic import BaseModel, Field

from tilevision_api.models import ChatMessage, Tile


def new_message_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class VisualizerState(BaseModel):
    """Snapshot of the visualizer."""

    room_photo: Optional[str] = Field(None, description="Room photo as a data URI")
    floor_tile_id: Optional[str] = None
    wall_tile_id: Optional[str] = None
    messages: tuple[ChatMessage, ...] = ()
    is_loading: bool = False
    error: Optional[str] = None
    selected_render: Optional[str] = Field(None, description="Chosen render as a data URI")

    model_config = {"frozen": True}

    @property
    def current_prompt(self) -> str:
        """Content of the last user message, or "" if there is none."""
        message = self._last_user_message()
        return message.content if message else ""

    def _last_user_message(self) -> Optional[ChatMessage]:
        for message in reversed(self.messages):
            if message.role == "user":
                return message
        return None


# Actions

class RoomPhotoUploaded(BaseModel):
    data_uri: str
    model_config = {"frozen": True}


class TileSelected(BaseModel):
    """A tile was picked; append_to_prompt also adds its name to the current prompt."""

    tile: Tile
    append_to_prompt: bool = True
    message_id: str = Field(default_factory=lambda: new_message_id("user"))
    model_config = {"frozen": True}


class PromptEdited(BaseModel):
    content: str
    message_id: str = Field(default_factory=lambda: new_message_id("user"))
    model_config = {"frozen": True}


class UserMessageAdded(BaseModel):
    content: str
    message_id: str = Field(default_factory=lambda: new_message_id("user"))
    model_config = {"frozen": True}


class PromptRejected(BaseModel):
    """The prompt could not be turned into a complete intent."""

    error: str
    message_id: str = Field(default_factory=lambda: new_message_id("err"))
    model_config = {"frozen": True}


class VisualizationStarted(BaseModel):
    model_config = {"frozen": True}


class VisualizationSucceeded(BaseModel):
    render: str
    model_config = {"frozen": True}


class VisualizationFailed(BaseModel):
    error: str
    message_id: str = Field(default_factory=lambda: new_message_id("err"))
    model_config = {"frozen": True}


class ResetView(BaseModel):
    model_config = {"frozen": True}


Action = Union[
    RoomPhotoUploaded,
    TileSelected,
    PromptEdited,
    UserMessageAdded,
    PromptRejected,
    VisualizationStarted,
    VisualizationSucceeded,
    VisualizationFailed,
    ResetView,
]


def _replace_current_prompt(state: VisualizerState, content: str, message_id: str) -> tuple[ChatMessage, ...]:
    """Rewrite the last user message, or add one if the chat has none."""
    messages = list(state.messages)
    for index in range(len(messages) - 1, -1, -1):
        if messages[index].role == "user":
            messages[index] = messages[index].model_copy(update={"content": content})
            return tuple(messages)
    return (*messages, ChatMessage(id=message_id, role="user", content=content))


def reduce(state: VisualizerState, action: Action) -> VisualizerState:
    """Apply an action to a snapshot and return the next snapshot."""
    if isinstance(action, RoomPhotoUploaded):
        return state.model_copy(update={"room_photo": action.data_uri, "selected_render": None})

    if isinstance(action, TileSelected):
        update = {}
        if action.tile.category == "floor":
            update["floor_tile_id"] = action.tile.id
        elif action.tile.category == "wall":
            update["wall_tile_id"] = action.tile.id

        if action.append_to_prompt:
            prompt = f"{state.current_prompt} {action.tile.name}".strip()
            update["messages"] = _replace_current_prompt(state, prompt, action.message_id)

        return state.model_copy(update=update)

    if isinstance(action, PromptEdited):
        return state.model_copy(
            update={"messages": _replace_current_prompt(state, action.content, action.message_id)}
        )

    if isinstance(action, UserMessageAdded):
        message = ChatMessage(id=action.message_id, role="user", content=action.content)
        return state.model_copy(
            update={"messages": (*state.messages, message), "is_loading": True, "error": None}
        )

    if isinstance(action, PromptRejected):
        message = ChatMessage(id=action.message_id, role="system", content=action.error)
        return state.model_copy(
            update={"messages": (*state.messages, message), "is_loading": False, "error": action.error}
        )

    if isinstance(action, VisualizationStarted):
        return state.model_copy(update={"is_loading": True, "error": None, "selected_render": None})

    if isinstance(action, VisualizationSucceeded):
        return state.model_copy(update={"is_loading": False, "selected_render": action.render})

    if isinstance(action, VisualizationFailed):
        message = ChatMessage(id=action.message_id, role="system", content=f"Error: {action.error}")
        return state.model_copy(
            update={"messages": (*state.messages, message), "is_loading": False, "error": action.error}
        )

    if isinstance(action, ResetView):
        return state.model_copy(update={"selected_render": None})

    raise TypeError(f"Unknown visualizer action: {type(action).__name__}")
