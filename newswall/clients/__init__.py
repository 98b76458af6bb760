"""Remote provider clients.

Exports:
    GeminiImageClient: Gemini image generation (two-endpoint fallback)
    OpenAIImageClient: OpenAI image generation
    PromptRefiner: OpenAI prompt refinement
    StockImageChain: Public stock-image fallback sources
"""

from .gemini import GeminiImageClient
from .openai_image import OpenAIImageClient
from .openai_text import PromptRefiner
from .stock import StockImageChain, StockSource

__all__ = ["GeminiImageClient", "OpenAIImageClient", "PromptRefiner", "StockImageChain", "StockSource"]
