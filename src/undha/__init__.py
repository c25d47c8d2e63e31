"""Undha: register-aware Indonesian to Javanese translation.

Resolves phrases against a lexicon of ngoko, krama alus and krama inggil
forms, escalating to an external generative responder when the lexicon
alone is not confident enough.
"""

__version__ = "0.1.0"
