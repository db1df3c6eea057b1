"""
Action button descriptor.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

DEFAULT_ACTION_COLOR = "primary"


class ActionDescriptor(BaseModel):
    """
    Normalized submit/cancel/custom button.

    Attributes:
        id: Button id; added to the submission record as ``{id: True}``
        label: Button text
        color: Theme color name
        cancel: Cancel flag as read from the raw entry. ``None`` for bare
            and pair encodings, which never carry one.
    """

    model_config = ConfigDict(frozen=True)

    id: Any
    label: Any = None
    color: str = DEFAULT_ACTION_COLOR
    cancel: Any = None

    @property
    def is_cancel(self) -> bool:
        return bool(self.cancel)
