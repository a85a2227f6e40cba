"""
PixelPilot Backend — Services Layer
=====================================

Service Inventory (leaf to root):
    - ModelRegistry: candidate Gemini models and the shared selection state
    - classify_failure: maps provider errors to QUOTA / NOT_FOUND / OTHER / FATAL
    - ModelProvider (abstract) / GeminiProvider: one upstream call per attempt
    - ModelOrchestrator: retry, model switching and backoff around the provider
    - extract_structured: JSON out of free-form model text
    - fallback_intent: keyword rules that stand in for the model when it is down
    - AIService: caller-facing operations with degraded results
    - UploadService: image upload validation
"""
