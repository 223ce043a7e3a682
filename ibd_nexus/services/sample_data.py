"""
Demo journal used to seed an empty or unreadable store.

Dates are relative to load time so the dashboard and streak have something to
show on first launch.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from ibd_nexus.models import JournalEntry, JournalSummary, StoolType


_SAMPLES = [
    {
        "id": "1",
        "days_ago": 1,
        "transcription": (
            "Feeling pretty stressed today, work was overwhelming. My stomach has "
            "been bothering me, probably a 6 out of 10 on the pain scale with bad "
            "cramps, maybe a 7 severity. I think I saw some blood in my stool, "
            "which was very soft, almost like diarrhea. I just had some toast and "
            "a coffee for dinner because I didn't feel like cooking."
        ),
        "summary": {
            "mental_wellness_score": 3,
            "physical_symptoms": ["6/10 stomach pain", "stress"],
            "moods": ["overwhelmed", "stressed"],
            "food_eaten": ["toast", "coffee"],
            "exercise": [],
            "flare_up_risk": 85,
            "stool_type": StoolType.SOFT,
            "stool_color": "Brown with red streaks",
            "blood_in_stool": True,
            "cramps_severity": 7,
        },
    },
    {
        "id": "2",
        "days_ago": 2,
        "transcription": (
            "Today was a much better day. I went for a long walk in the morning "
            "which really helped clear my head. My symptoms are much calmer, maybe "
            "a 2 out of 10 pain and no cramps. Stool was normal, solid brown. For "
            "lunch, I had a chicken salad. Feeling optimistic."
        ),
        "summary": {
            "mental_wellness_score": 8,
            "physical_symptoms": ["2/10 stomach pain"],
            "moods": ["optimistic", "calm"],
            "food_eaten": ["chicken", "salad"],
            "exercise": ["long walk"],
            "flare_up_risk": 20,
            "stool_type": StoolType.NORMAL,
            "stool_color": "Brown",
            "blood_in_stool": False,
            "cramps_severity": 1,
        },
    },
    {
        "id": "3",
        "days_ago": 5,
        "transcription": (
            "I'm so tired today, just feeling drained. Had toast for breakfast, "
            "then my stomach acted up with diarrhea. I had pizza for dinner which "
            "might not have been the best choice either."
        ),
        "summary": {
            "mental_wellness_score": 4,
            "physical_symptoms": ["fatigue", "diarrhea"],
            "moods": ["tired", "drained"],
            "food_eaten": ["toast", "pizza"],
            "exercise": [],
            "flare_up_risk": 60,
            "stool_type": StoolType.DIARRHEA,
            "stool_color": "Brown",
            "blood_in_stool": False,
            "cramps_severity": 3,
        },
    },
    {
        "id": "4",
        "days_ago": 8,
        "transcription": (
            "Feeling good. Productive day at work and I managed to hit the gym in "
            "the evening. My energy levels are high and symptoms are nonexistent. "
            "Everything is normal in the bathroom department. I had a healthy "
            "salmon and vegetable dinner."
        ),
        "summary": {
            "mental_wellness_score": 9,
            "physical_symptoms": [],
            "moods": ["productive", "energetic"],
            "food_eaten": ["salmon", "vegetables"],
            "exercise": ["gym session"],
            "flare_up_risk": 10,
            "stool_type": StoolType.NORMAL,
            "stool_color": "Brown",
            "blood_in_stool": False,
            "cramps_severity": 0,
        },
    },
    {
        "id": "6",
        "days_ago": 6,
        "transcription": (
            "Felt pretty good today, no major issues. Had a chicken salad for "
            "lunch which sat well. Stool was normal. Feeling content."
        ),
        "summary": {
            "mental_wellness_score": 8,
            "physical_symptoms": [],
            "moods": ["content"],
            "food_eaten": ["chicken", "salad"],
            "exercise": ["walk"],
            "flare_up_risk": 15,
            "stool_type": StoolType.NORMAL,
            "stool_color": "Brown",
            "blood_in_stool": False,
            "cramps_severity": 0,
        },
    },
    {
        "id": "5",
        "days_ago": 15,
        "transcription": (
            "A bit of a mixed day. Felt anxious in the morning but I did some "
            "meditation which helped. My stomach is a little unsettled with some "
            "mild cramps, maybe a 2/10. Stool was a bit hard. Had a sandwich for "
            "lunch and a coffee. Went for a short bike ride."
        ),
        "summary": {
            "mental_wellness_score": 6,
            "physical_symptoms": ["unsettled stomach", "mild cramps"],
            "moods": ["anxious"],
            "food_eaten": ["sandwich", "coffee"],
            "exercise": ["short bike ride"],
            "flare_up_risk": 40,
            "stool_type": StoolType.HARD,
            "stool_color": "Dark Brown",
            "blood_in_stool": False,
            "cramps_severity": 2,
        },
    },
]


def sample_journal_entries(now: Optional[datetime] = None) -> list[JournalEntry]:
    """Return a fresh copy of the demo entries, dated relative to ``now``."""
    now = now or datetime.now(timezone.utc)
    return [
        JournalEntry(
            id=sample["id"],
            date=now - timedelta(days=sample["days_ago"]),
            transcription=sample["transcription"],
            summary=JournalSummary(**sample["summary"]),
        )
        for sample in _SAMPLES
    ]
