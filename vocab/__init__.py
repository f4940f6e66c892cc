"""
Vocabulary Trainer - spaced-repetition core.

Packages:
- vocab.srs: scheduling policies and interval arithmetic (no I/O)
- vocab.store: record store and snapshot backends
- vocab.sessions: round-based study queue and study tracks
- vocab.calendar: due-date aggregation and manual rescheduling

Quick start:
    from vocab.service import build_service

    service = build_service()
    record = service.upsert({"word": "abandon", "meaning": "bỏ rơi"})
    service.apply_difficulty_and_recompute_schedule(record.id, 2)
"""
