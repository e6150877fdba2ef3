"""
Emotion Backend - Version and metadata
"""

__version__ = "1.0.0"
__author__ = "Emotion Backend Contributors"
__license__ = "MIT"
__description__ = (
    "Unified emotion analysis engine with rule, LLM and local-AI strategies"
)
