"""Application constants: sign vocabulary, detector labels and rank ladder."""

from typing import Dict, List, Tuple

from .entities import RankLevel

APP_NAME = "handsign"
VERSION = "1.0.0"

# Classifier vocabulary. Keys are the tokens used in sequence catalogs.
SIGN_DICTIONARY: Dict[str, Dict[str, str]] = {
    "Ne": {"cn": "子", "en": "Rat"},
    "Ushi": {"cn": "丑", "en": "Ox"},
    "Tora": {"cn": "寅", "en": "Tiger"},
    "U": {"cn": "卯", "en": "Hare"},
    "Tatsu": {"cn": "辰", "en": "Dragon"},
    "Mi": {"cn": "巳", "en": "Snake"},
    "Uma": {"cn": "午", "en": "Horse"},
    "Saru": {"cn": "申", "en": "Monkey"},
    "Tori": {"cn": "酉", "en": "Bird"},
    "Inu": {"cn": "戌", "en": "Dog"},
    "I": {"cn": "亥", "en": "Boar"},
    "Release": {"cn": "---", "en": " "},
}

# YOLOX hand-sign detector class table, index == class id
DETECTOR_LABELS: List[str] = [
    "子", "丑", "寅", "卯", "辰", "巳", "午", "未", "申", "酉", "戌", "亥", "祈", "謎", "壬"
]

RANK_LEVELS: Tuple[RankLevel, ...] = (
    RankLevel(rank=1, key="genin", name="下忍", title="下忍·基础试炼"),
    RankLevel(rank=2, key="chunin", name="中忍", title="中忍·进阶试炼"),
    RankLevel(rank=3, key="jonin", name="上忍", title="上忍·高阶试炼"),
    RankLevel(rank=4, key="kage", name="影", title="影级·最终试炼"),
)
MAX_RANK = len(RANK_LEVELS)
RANK_BADGES = ["见习", "下忍", "中忍", "上忍", "影"]

DEFAULT_STRIDES: Tuple[int, ...] = (8, 16, 32)
LETTERBOX_FILL = 114
