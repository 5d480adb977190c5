"""
内容审核（敏感词过滤）：
- check_sensitive_content  检测文本中命中的敏感词
- filter_sensitive_content 用替换字符等长遮盖敏感词
- validate_content         空 -> 长度 -> 敏感词 依次校验，首个失败即抛异常

纯函数，无状态、无 IO。
"""
import re
from typing import List, Optional

from pydantic import BaseModel

from app.core.exceptions import ModerationError, ValidationError

# 基础敏感词（始终启用）
SENSITIVE_WORDS = (
    # 暴力相关
    "杀死", "杀害", "谋杀", "暴力", "打死", "弄死", "干掉", "灭掉", "血腥", "残忍",
    "虐待", "折磨", "酷刑", "屠杀", "砍死", "刺死", "枪杀", "爆炸", "炸弹", "恐怖",
    "袭击", "攻击", "伤害", "毁灭", "破坏", "仇杀", "报复", "威胁", "恐吓",
    # 色情相关
    "色情", "淫秽", "黄色", "裸体", "性交", "做爱", "强奸", "猥亵", "卖淫",
    "嫖娼", "援交", "包养", "一夜情", "约炮", "开房",
    # 政治敏感
    "法轮功", "六四", "天安门", "达赖", "藏独", "台独", "疆独", "港独",
    "反政府", "颠覆", "民运", "异议", "维权", "抗议", "游行", "示威",
    # 赌博相关
    "赌博", "赌场", "博彩", "彩票", "老虎机", "百家乐", "21点", "德州扑克",
    "网络赌博", "地下赌场", "赌资", "赌债",
    # 毒品相关
    "毒品", "大麻", "海洛因", "冰毒", "摇头丸", "可卡因", "鸦片", "吸毒",
    "贩毒", "制毒", "毒贩", "毒瘾",
    # 诈骗相关
    "诈骗", "骗钱", "传销", "非法集资", "庞氏骗局", "网络诈骗", "电信诈骗",
    "刷单", "洗钱", "黑钱", "假币",
    # 其他不当内容
    "自杀", "跳楼", "割腕", "上吊", "服毒", "轻生", "寻死", "死去",
    "仇恨", "歧视", "种族主义", "纳粹", "希特勒", "反人类",
)

# 政治敏感词（严格模式下额外启用）
POLITICAL_SENSITIVE_WORDS = (
    "习近平", "李克强", "王岐山", "胡锦涛", "江泽民", "邓小平", "毛泽东",
    "中南海", "政治局", "人大", "政协", "国务院", "中宣部", "统战部",
    "共产党", "国民党", "民进党", "公民党", "民主党", "自由党",
    "革命", "起义", "造反", "推翻", "政变", "军事政变", "独裁", "专制",
    "民主化", "自由化", "政治改革", "体制改革", "一党专政",
)


class ModerationResult(BaseModel):
    is_valid: bool
    found_words: List[str] = []
    message: str = ""


def _word_lists(strict_mode: bool):
    if strict_mode:
        return SENSITIVE_WORDS + POLITICAL_SENSITIVE_WORDS
    return SENSITIVE_WORDS


def check_sensitive_content(text: Optional[str], strict_mode: bool = True) -> ModerationResult:
    """
    大小写不敏感的子串匹配，found_words 按词表顺序返回
    """
    if not text or not isinstance(text, str):
        return ModerationResult(is_valid=True)

    text_lower = text.lower()
    found = [w for w in _word_lists(strict_mode) if w.lower() in text_lower]

    if not found:
        return ModerationResult(is_valid=True)
    return ModerationResult(
        is_valid=False,
        found_words=found,
        message=f"Content contains inappropriate words: {', '.join(found)}",
    )


def filter_sensitive_content(text: Optional[str], replacement: str = "*") -> Optional[str]:
    """
    把两张词表中的词全部替换为等长的 replacement，不区分严格模式
    """
    if not text or not isinstance(text, str):
        return text

    filtered = text
    for word in SENSITIVE_WORDS + POLITICAL_SENSITIVE_WORDS:
        filtered = re.sub(re.escape(word), replacement * len(word), filtered, flags=re.IGNORECASE)
    return filtered


def validate_content(
    content: Optional[str],
    field: str = "content",
    min_length: int = 1,
    max_length: int = 10000,
    strict_mode: bool = True,
    allow_empty: bool = False,
) -> None:
    """
    校验顺序：空 -> 长度 -> 敏感词，第一个失败直接抛出
    - ValidationError: 空 / 过短 / 过长
    - ModerationError: 命中敏感词
    """
    if content is None or not content.strip():
        if allow_empty:
            return
        raise ValidationError(f"{field} cannot be empty")

    if len(content) < min_length:
        raise ValidationError(f"{field} must be at least {min_length} characters")
    if len(content) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")

    result = check_sensitive_content(content, strict_mode=strict_mode)
    if not result.is_valid:
        raise ModerationError(found_words=result.found_words)
