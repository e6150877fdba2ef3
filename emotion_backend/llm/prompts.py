"""
Emotion analysis prompts and response validation.

Prompts are Jinja2 templates in Chinese and English; the language follows
the journal text (langdetect), Chinese by default. Responses must be
JSON, optionally wrapped in a markdown code fence, and are validated
with JSON Schema before use.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from jinja2 import BaseLoader, Environment
from jsonschema import ValidationError, validate
from langdetect import DetectorFactory, LangDetectException, detect

logger = logging.getLogger(__name__)

# langdetect is non-deterministic without a seed
DetectorFactory.seed = 0

SUPPORTED_LANGUAGES = {"zh", "en"}
DEFAULT_LANGUAGE = "zh"

MAX_TAGS = 5
MAX_BATCH_TAGS = 3

TEMPLATES = {
    "single_zh": """你是一个专业的情绪分析师，擅长分析中文文本的情绪倾向。请分析以下用户的心情记录内容，并按照指定格式返回分析结果。

用户内容：
"{{ content }}"

分析要求：
1. 情绪分类：将内容分为积极(positive)、消极(negative)或中性(neutral)三类
2. 情绪强度：评分范围0-100，其中0为无情绪，50为中等强度，100为极强情绪
3. 关键词提取：提取能够反映情绪状态的关键词或短语，最多{{ max_tags }}个
4. 分析推理：简要说明分类依据，100字以内

请严格按照以下JSON格式返回结果，不要添加任何其他内容：

```json
{
  "moodType": "positive/negative/neutral",
  "emotionScore": 数字(0-100),
  "extractedTags": ["关键词1", "关键词2", "关键词3"],
  "reasoning": "分析推理说明",
  "confidence": 数字(0.0-1.0)
}
```""",
    "single_en": """You are a professional emotion analyst. Analyze the following mood journal entry and answer in the required format.

Entry:
"{{ content }}"

Requirements:
1. Mood: positive, negative or neutral
2. Emotion score: integer 0-100, 0 means no emotion, 50 medium, 100 extremely strong
3. Tags: up to {{ max_tags }} keywords or short phrases reflecting the mood
4. Reasoning: why, in under 50 words

Respond with this JSON only, no other text:

```json
{
  "moodType": "positive/negative/neutral",
  "emotionScore": 0-100,
  "extractedTags": ["tag1", "tag2"],
  "reasoning": "short explanation",
  "confidence": 0.0-1.0
}
```""",
    "batch_zh": """你是一个专业的情绪分析师，擅长分析中文文本的情绪倾向。请分析以下{{ contents|length }}条用户心情记录内容，并按照指定格式返回分析结果。

用户内容：
{% for content in contents %}
{{ loop.index }}. "{{ content }}"
{% endfor %}

分析要求：
1. 对每条内容进行独立的情绪分析
2. 情绪分类：积极(positive)、消极(negative)或中性(neutral)
3. 情绪强度：评分0-100
4. 关键词提取：每条最多{{ max_tags }}个关键词
5. 简要推理：50字以内

请严格按照以下JSON数组格式返回结果：

```json
[
  {
    "index": 1,
    "moodType": "positive/negative/neutral",
    "emotionScore": 数字(0-100),
    "extractedTags": ["关键词1", "关键词2"],
    "reasoning": "分析推理",
    "confidence": 数字(0.0-1.0)
  }
]
```

注意：返回的数组长度必须与输入内容数量一致，index从1开始对应输入顺序。""",
    "batch_en": """You are a professional emotion analyst. Analyze each of the following {{ contents|length }} mood journal entries independently.

Entries:
{% for content in contents %}
{{ loop.index }}. "{{ content }}"
{% endfor %}

For each entry give the mood (positive/negative/neutral), an integer emotion score 0-100,
up to {{ max_tags }} tags, a reasoning under 30 words and a confidence 0.0-1.0.

Respond with a JSON array only:

```json
[
  {
    "index": 1,
    "moodType": "positive/negative/neutral",
    "emotionScore": 0-100,
    "extractedTags": ["tag1"],
    "reasoning": "short explanation",
    "confidence": 0.0-1.0
  }
]
```

The array must contain exactly one item per entry; index starts at 1 and follows input order.""",
}

RESULT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["moodType", "emotionScore", "extractedTags", "reasoning", "confidence"],
    "properties": {
        "moodType": {"enum": ["positive", "negative", "neutral"]},
        "emotionScore": {"type": "integer", "minimum": 0, "maximum": 100},
        "extractedTags": {"type": "array", "items": {"type": "string"}},
        "reasoning": {"type": "string"},
        "confidence": {"type": "number", "minimum": 0.0, "maximum": 1.0},
    },
}

BATCH_SCHEMA: Dict[str, Any] = {
    "type": "array",
    "items": {
        "allOf": [
            RESULT_SCHEMA,
            {"type": "object", "required": ["index"], "properties": {"index": {"type": "integer"}}},
        ]
    },
}

_env = Environment(loader=BaseLoader(), autoescape=False, trim_blocks=True, lstrip_blocks=True)


class ResponseFormatError(ValueError):
    """The LLM answer is not the JSON the prompt asked for."""


def detect_language(text: str) -> str:
    """Prompt language for a text; falls back to Chinese."""
    try:
        lang = detect(text)
    except LangDetectException:
        return DEFAULT_LANGUAGE
    if lang.startswith("zh"):
        return "zh"
    return lang if lang in SUPPORTED_LANGUAGES else DEFAULT_LANGUAGE


def _render(name: str, language: Optional[str], sample: str, **context) -> str:
    lang = language if language in SUPPORTED_LANGUAGES else detect_language(sample)
    template = _env.from_string(TEMPLATES[f"{name}_{lang}"])
    return template.render(**context)


def generate_prompt(content: str, language: Optional[str] = None) -> str:
    return _render("single", language, content, content=content, max_tags=MAX_TAGS)


def generate_batch_prompt(contents: List[str], language: Optional[str] = None) -> str:
    if not contents:
        raise ValueError("Contents list cannot be empty")
    return _render(
        "batch", language, " ".join(contents), contents=contents, max_tags=MAX_BATCH_TAGS
    )


def _strip_code_fence(response: str) -> str:
    text = response.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def _decode(response: str) -> Any:
    try:
        return json.loads(_strip_code_fence(response))
    except json.JSONDecodeError as e:
        raise ResponseFormatError(f"Response is not valid JSON: {e}") from e


def parse_response(response: str) -> Dict[str, Any]:
    """
    Parse a single analysis answer.

    Raises:
        ResponseFormatError: invalid JSON or schema violation
    """
    data = _decode(response)
    try:
        validate(instance=data, schema=RESULT_SCHEMA)
    except ValidationError as e:
        raise ResponseFormatError(f"Invalid analysis response: {e.message}") from e
    return data


def parse_batch_response(response: str, expected_count: int) -> List[Dict[str, Any]]:
    """
    Parse a batch answer, checking count and 1-based index order.

    Raises:
        ResponseFormatError: invalid JSON, schema violation or misaligned items
    """
    data = _decode(response)
    try:
        validate(instance=data, schema=BATCH_SCHEMA)
    except ValidationError as e:
        raise ResponseFormatError(f"Invalid batch response: {e.message}") from e

    if len(data) != expected_count:
        raise ResponseFormatError(f"Expected {expected_count} results, got {len(data)}")
    for position, item in enumerate(data, start=1):
        if item["index"] != position:
            raise ResponseFormatError(f"Invalid index in result {position}: {item['index']}")
    return data
