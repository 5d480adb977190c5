import random
from typing import Optional

# DiceBear 头像风格
AVATAR_STYLES = (
    "adventurer",
    "avataaars",
    "big-ears",
    "big-smile",
    "glass",
    "notionists-neutral",
    "bottts",
    "croodles",
    "micah",
    "miniavs",
    "open-peeps",
    "personas",
    "pixel-art",
    "fun-emoji",
    "pixel-art-neutral",
)

AVATAR_URL_TEMPLATE = "https://api.dicebear.com/9.x/{style}/svg"


def random_avatar_url(rng: Optional[random.Random] = None) -> str:
    """
    注册时随机分配头像，随机源由调用方注入（测试里传入固定种子即可复现）
    """
    rng = rng or random.Random()
    return AVATAR_URL_TEMPLATE.format(style=rng.choice(AVATAR_STYLES))


def get_avatar_rng() -> random.Random:
    """FastAPI 依赖：每次请求一个独立随机源，测试中可 override"""
    return random.Random()
