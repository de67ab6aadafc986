"""
Image generation proxy package.

Provides:
- FastAPI service exposing POST /api/generate-image and a health check
- Async FAL.ai forwarding client with response/error normalization
"""
