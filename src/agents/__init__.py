"""AI Agents package."""

from src.agents.ai_agents import (
    AdviceGenerator,
    ExtractionGateway,
    VoiceTranscriber,
    create_gemini_model,
)

__all__ = [
    "AdviceGenerator",
    "ExtractionGateway",
    "VoiceTranscriber",
    "create_gemini_model",
]
