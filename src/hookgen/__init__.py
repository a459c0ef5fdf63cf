"""
XIVIX hook-message generator.

Provides:
- A FastAPI relay that forwards marketing prompts to Gemini and returns
  the parsed suggestions
- The static page that builds those prompts in the browser
"""
