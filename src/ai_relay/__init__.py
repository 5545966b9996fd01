"""
AI Relay package.

Provides:
- Chat completion with optional image generation (OpenAI)
- Text-to-speech synthesis streamed as WAV (Azure Speech)
- A permissive CORS FastAPI facade over both
"""
