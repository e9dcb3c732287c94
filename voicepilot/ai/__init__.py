"""
AI Module - the rule-based "brain" of the assistant.

Architecture Overview:
=====================

    raw text ──► IntentClassifier ──► Intent (tagged union)
                     │                      │
                     ▼                      ▼
               Pattern Library      Destination URL Builders

Everything in this package is deterministic and free of I/O;
side effects live in voicepilot.services and voicepilot.environments.
"""
