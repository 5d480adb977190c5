from fastapi import APIRouter

from app.schemas.moderation import ModerationCheckIn, ModerationFilterIn, ModerationFilterOut
from app.core.biz_response import BizResponse
from app.core.content_filter import ModerationResult, check_sensitive_content, filter_sensitive_content

moderation_router = APIRouter(prefix="/moderation", tags=["moderation"])


@moderation_router.post("/check", response_model=ModerationResult)
def check_text(data: ModerationCheckIn):
    """检测敏感词，不落库"""
    result = check_sensitive_content(data.text, strict_mode=data.strict_mode)
    return BizResponse(data=result.model_dump())


@moderation_router.post("/filter", response_model=ModerationFilterOut)
def filter_text(data: ModerationFilterIn):
    """用替换字符等长遮盖敏感词"""
    filtered = filter_sensitive_content(data.text, replacement=data.replacement)
    return BizResponse(data=ModerationFilterOut(original=data.text, filtered=filtered).model_dump())
