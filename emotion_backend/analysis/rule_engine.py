"""
Keyword-based emotion scoring.

Deterministic and offline: counts mood keywords, picks the dominant mood
and derives a 0-100 intensity from keyword hits, text length and
intensifiers.
"""

import math
from dataclasses import dataclass
from typing import Dict, List

from .base import MoodType

EMOTION_KEYWORDS: Dict[MoodType, List[str]] = {
    MoodType.POSITIVE: [
        "开心", "快乐", "高兴", "兴奋", "满意", "幸福", "愉快", "舒服", "棒", "好", "爱",
        "成功", "胜利", "完美", "美好", "温暖", "感动", "骄傲", "自豪", "满足", "放松",
        "哈哈", "嘻嘻", "😊", "😄", "😍", "🥰", "😘", "🤩", "😋", "😌",
        "happy", "glad", "great", "joy", "excited", "love", "wonderful", "proud",
    ],
    MoodType.NEGATIVE: [
        "难过", "悲伤", "失望", "沮丧", "痛苦", "伤心", "哭", "泪", "累", "烦", "恨",
        "愤怒", "生气", "愤慨", "讨厌", "焦虑", "紧张", "害怕", "恐惧", "担心", "压力",
        "糟糕", "坏", "差", "失败", "挫折", "孤独", "空虚", "无聊", "郁闷", "抑郁",
        "😢", "😭", "😔", "😞", "😟", "😧", "😨", "😰", "😱", "🙄", "😤", "😠", "😡",
        "sad", "angry", "tired", "anxious", "lonely", "upset", "depressed", "awful",
    ],
    MoodType.NEUTRAL: [
        "平静", "平常", "一般", "还好", "普通", "正常", "平淡", "无感", "中性",
        "😐", "😑", "🙂",
        "calm", "okay", "ordinary",
    ],
}

STRONG_MARKERS = ["非常", "特别", "超级", "极其", "超", "巨", "！！", "..."]

BASE_SCORES = {
    MoodType.POSITIVE: 70,
    MoodType.NEGATIVE: 30,
    MoodType.NEUTRAL: 50,
}


def _clamp(value, low, high):
    return max(low, min(high, value))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _utf16_length(text: str) -> int:
    """Length in UTF-16 code units; emoji outside the BMP count as two."""
    return len(text.encode("utf-16-le", "surrogatepass")) // 2


@dataclass
class RuleAnalysis:
    """Raw rule engine output."""
    mood_type: MoodType
    score: int
    confidence: float
    matched_keywords: List[str]


class RuleEngine:
    """Keyword matcher producing mood, intensity and confidence."""

    def __init__(self, keywords: Dict[MoodType, List[str]] = None):
        self.keywords = keywords or EMOTION_KEYWORDS

    def analyze(self, text: str) -> RuleAnalysis:
        clean_text = (text or "").lower().strip()
        if not clean_text:
            return RuleAnalysis(MoodType.NEUTRAL, 50, 0.5, [])

        scores: Dict[MoodType, float] = {}
        matched: List[str] = []
        for mood in MoodType:
            match_count = 0
            intensity = 0.0
            for keyword in self.keywords.get(mood, []):
                if keyword in clean_text:
                    match_count += 1
                    intensity += 1.5 if len(keyword) > 2 else 1.0
                    matched.append(keyword)
            scores[mood] = match_count * 10.0 + intensity * 5.0 if match_count else 0.0

        # Strictly greater: ties resolve to neutral
        dominant = MoodType.NEUTRAL
        max_score = scores[MoodType.NEUTRAL]
        for mood, score in scores.items():
            if score > max_score:
                dominant, max_score = mood, score

        total = sum(scores.values())
        confidence = _clamp(max_score / total, 0.0, 1.0) if total > 0 else 0.5

        return RuleAnalysis(
            mood_type=dominant,
            score=self._intensity(clean_text, dominant, max_score),
            confidence=confidence,
            matched_keywords=matched,
        )

    def _intensity(self, text: str, mood: MoodType, raw_score: float) -> int:
        adjustment = _round_half_up(_clamp(raw_score / 10.0, -20.0, 20.0))
        length_adjustment = _round_half_up(_clamp(_utf16_length(text) / 50.0, -5.0, 10.0))
        strong_bonus = 5 * sum(1 for marker in STRONG_MARKERS if marker in text)
        return int(_clamp(BASE_SCORES[mood] + adjustment + length_adjustment + strong_bonus, 0, 100))

    @staticmethod
    def get_emotion_advice(mood_type: MoodType, score: int) -> str:
        """Short advice text for a mood and intensity."""
        if mood_type is MoodType.POSITIVE:
            if score >= 80:
                return "You are in a great mood! Keep it up and share the joy with people around you."
            if score >= 60:
                return "Nice mood! Do something you enjoy to make it last."
            return "There are some positive feelings here, amplify them and treat yourself a little."
        if mood_type is MoodType.NEGATIVE:
            if score <= 20:
                return (
                    "It sounds like a hard moment. Talk to someone you trust or try something relaxing. "
                    "If the low mood persists, consider seeking professional help."
                )
            if score <= 40:
                return "Feeling a bit down. Music, a walk or a favourite film may help."
            return "Some negative feelings are normal. Breathe deeply and give yourself time."
        return "A calm mood is good too. Try something fun to add some colour to the day."
