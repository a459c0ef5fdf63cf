"""Pydantic models for request/response types."""
from __future__ import annotations

from pydantic import BaseModel

CONFIG_ERROR_MESSAGE = "서버 설정 오류입니다. 관리자에게 문의하세요."
GENERATION_ERROR_MESSAGE = "메시지 생성에 실패했습니다. 잠시 후 다시 시도해주세요."
BAD_REQUEST_MESSAGE = "잘못된 요청입니다."
HEALTH_MESSAGE = "XIVIX 후킹메세지 생성기가 실행 중입니다."


class GenerateIn(BaseModel):
    prompt: str


class GenerateOut(BaseModel):
    """Shape the page expects back; the upstream JSON is relayed as-is."""
    suggestions: list[str]


class ErrorOut(BaseModel):
    error: str


class HealthOut(BaseModel):
    status: str
    message: str
