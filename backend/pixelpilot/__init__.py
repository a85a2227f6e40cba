"""
PixelPilot Backend — Application Package Initializer
=====================================================

What: Marks the `pixelpilot` directory as a Python package.
Who:  Used by pytest, uvicorn (`uvicorn pixelpilot.main:app`) and the import system.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │      AIService (caller-facing ops)  │  ← degraded results on outage
    ├─────────────────────────────────────┤
    │   ModelOrchestrator + ModelRegistry │  ← model fallback, retry, backoff
    ├─────────────────────────────────────┤
    │      ModelProvider (Gemini SDK)     │  ← one upstream call per attempt
    └─────────────────────────────────────┘

    Rule-based pieces (FallbackIntent, ResponseInterpreter) are pure functions
    used by AIService and have no I/O.
"""

__version__ = "1.0.0"
