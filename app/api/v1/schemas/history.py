"""히스토리 API 스키마."""

from pydantic import BaseModel, Field, field_validator


class HistoryCreateRequest(BaseModel):
    """히스토리 저장 요청.

    누락 여부는 라우터에서 직접 검사해 MISSING_FIELDS로 응답하므로 모든 필드가 선택이다.
    """

    pr_id: str | None = Field(default=None, alias="prId")
    pr_description: str | None = Field(default=None, alias="prDescription")
    dev_note: str | None = Field(default=None, alias="devNote")
    mkt_note: str | None = Field(default=None, alias="mktNote")

    class Config:
        populate_by_name = True

    @field_validator("pr_id", mode="before")
    @classmethod
    def coerce_pr_id(cls, v: str | int | None) -> str | None:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    def missing_fields(self) -> list[str]:
        """비어 있거나 누락된 필드의 요청 키 목록"""
        return [
            field.alias or name
            for name, field in type(self).model_fields.items()
            if not getattr(self, name)
        ]


class HistoryCreateResponse(BaseModel):
    """히스토리 저장 응답."""

    inserted_id: str = Field(alias="insertedId")

    class Config:
        populate_by_name = True


class HistoryDeleteResponse(BaseModel):
    """히스토리 삭제 응답."""

    success: bool
