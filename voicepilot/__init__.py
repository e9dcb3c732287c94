"""
VoicePilot - intent classification and automation dispatch for a voice assistant.

An utterance goes in, one of two things comes out:
- an automation (open a web destination, control playing media), acknowledged
  with a short message, or
- nothing, in which case the caller hands the utterance to a chat responder.
"""

__version__ = "0.1.0"
