"""Voice domain services.

One class per pipeline concern:
- RateLimiter / ResponseCache: shared admission control and memoization
- SpeechToTextAdapter, ContentModerator, ResponseGenerator, TextToSpeechAdapter
- PhrasePreloader: background warm-up of common phrases
- VoicePipelineOrchestrator: sequences the stages above
"""

from .generation import ResponseGenerator
from .moderation import ContentModerator
from .orchestrator import VoicePipelineOrchestrator
from .preloader import COMMON_PHRASES, PhrasePreloader
from .rate_limiter import RateLimiter
from .response_cache import ResponseCache, make_key
from .synthesis import PreloadedPhraseCache, TextToSpeechAdapter
from .tone import KeywordToneDetector, ToneDetector
from .transcription import SpeechToTextAdapter

__all__ = [
    "COMMON_PHRASES",
    "ContentModerator",
    "KeywordToneDetector",
    "PhrasePreloader",
    "PreloadedPhraseCache",
    "RateLimiter",
    "ResponseCache",
    "ResponseGenerator",
    "SpeechToTextAdapter",
    "TextToSpeechAdapter",
    "ToneDetector",
    "VoicePipelineOrchestrator",
    "make_key",
]
