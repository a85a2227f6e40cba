"""
PixelPilot Backend — API Routes Package
=========================================

Route Inventory:
    - ai_edit.py:    POST /api/ai-edit, /api/ai-edit/analyze, /api/ai-edit/ideas
    - ai_enhance.py: POST /api/ai-enhance/suggestions, /alt-text, /detect
    - health.py:     GET  /health

Routes stay thin: read the upload, call AIService, wrap the result.
"""
