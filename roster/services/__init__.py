"""서비스 패키지 — 비즈니스 로직 계층.

Service package — Business logic layer.
The rules engine and the auto-assignment heuristic are pure, synchronous
modules; the remaining services load snapshots through repositories, call
them, and persist the outcome.
"""
