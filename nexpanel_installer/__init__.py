"""NexPanel host installer (Python-first, state-driven).

Core design goals:
- Resumable: progress is persisted after every step
- Idempotent steps that detect prior completion
- Best-effort rollback of files and services on failure
- Every external command time-bounded and logged
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
