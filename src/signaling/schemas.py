"""Pydantic schemas for the calling platform's payloads."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator


class CallEvent(BaseModel):
    """Inbound webhook payload. Unknown keys are allowed."""

    model_config = ConfigDict(extra="allow")

    event: str
    id_call: str = Field(alias="idCall")
    id_conversation: str = Field(alias="idConversation")
    rtc_session: Any = Field(default=None, alias="rtcSession")

    _body: dict[str, Any] = PrivateAttr(default_factory=dict)

    @model_validator(mode="after")
    def connect_requires_rtc_session(self) -> CallEvent:
        if self.event == "connect" and self.rtc_session is None:
            raise ValueError("connect events must carry rtcSession")
        return self

    @classmethod
    def from_body(cls, body: dict[str, Any]) -> CallEvent:
        event = cls.model_validate(body)
        event._body = body
        return event

    @property
    def body(self) -> dict[str, Any]:
        """The payload exactly as received."""

        return self._body


class CallCommand(BaseModel):
    """Outbound command body for the platform's call-command endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    event: Literal["accept"] = "accept"
    id_call: str = Field(alias="idCall")
    id_conversation: str = Field(alias="idConversation")
    rtc_session: Any = Field(alias="rtcSession")

    def as_body(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
