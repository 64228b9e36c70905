"""Completion Gateway Layer.

Obtains a chat answer or a generated image by trying an ordered list of
upstream providers, falling through to the next one on any failure:
  - Prompt Builder (persona injection, chat only)
  - Provider Chain (sequential fallthrough state machine)
  - Provider Adapters (per-provider protocol and credential check)
  - Decoders (typed upstream response schemas)
  - Response Normalizer (wire-level response)
"""
