"""
Classroom Proxy package.

Provides:
- A single-endpoint proxy to the OpenAI Responses API with input guardrails
- An optional shared-secret access gate
- Plain-text math cleanup of generated output
"""
