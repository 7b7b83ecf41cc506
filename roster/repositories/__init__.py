"""레포지토리 패키지 — 데이터베이스 쿼리 계층.

Repository package — Database query layer.
Each repository extends BaseRepository for generic CRUD and adds the
store, roster, schedule, and notification queries the services need.
Status transitions are conditional UPDATE statements that report whether
a row matched.
"""
