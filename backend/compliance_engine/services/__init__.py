"""Services Layer — async orchestration over the pure core.

Invariants:
    - Services read "now" only from an injected clock
    - IO reached only through Protocols from core/repository_protocols.py
    - Degradations are logged and recovered here; configuration errors propagate
"""
