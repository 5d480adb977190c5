from pydantic import BaseModel, ConfigDict, Field


class ModerationCheckIn(BaseModel):
    text: str
    strict_mode: bool = True

    model_config = ConfigDict(extra="forbid")


class ModerationFilterIn(BaseModel):
    text: str
    # 单个字符，保证替换后长度不变
    replacement: str = Field(default="*", min_length=1, max_length=1)

    model_config = ConfigDict(extra="forbid")


class ModerationFilterOut(BaseModel):
    original: str
    filtered: str
