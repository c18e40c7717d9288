"""
Analytics Aggregator

Read-only rollups over profiles, drives and applications:

- stats()                 placement rate and per-branch placed/total counts
- skill_gap(student_id)   skills common among placed students that the
                          requester does not list yet

A student counts as "placed" once, no matter how many SELECTED
applications they hold.
"""

from collections import Counter
from typing import Dict, List, Set

from placement_portal.db.repositories import Store
from placement_portal.models.entities import ApplicationStatus

UNKNOWN_BRANCH = "Unknown"
SKILL_GAP_LIMIT = 5


class AnalyticsService:

    def __init__(self, store: Store):
        self.store = store

    def _placed_student_ids(self) -> Set[int]:
        return {
            a.student_id for a in self.store.applications.list_all()
            if a.status == ApplicationStatus.selected
        }

    def stats(self) -> dict:
        profiles = self.store.profiles.list_all()
        applications = self.store.applications.list_all()

        total_students = len(profiles)
        selected_count = sum(1 for a in applications if a.status == ApplicationStatus.selected)
        placement_rate = round(selected_count / total_students * 100, 2) if total_students else 0

        placed_ids = self._placed_student_ids()
        branch_stats: Dict[str, Dict[str, int]] = {}
        for profile in profiles:
            bucket = branch_stats.setdefault(profile.branch or UNKNOWN_BRANCH, {"total": 0, "placed": 0})
            bucket["total"] += 1
            if profile.user_id in placed_ids:
                bucket["placed"] += 1

        return {
            "total_students": total_students,
            "total_drives": self.store.drives.count(),
            "total_applications": len(applications),
            "selected_count": selected_count,
            "placement_rate": placement_rate,
            "branch_stats": branch_stats,
        }

    def skill_gap(self, student_id: int) -> List[dict]:
        """
        Top skills among placed students that the requester lacks.

        Each placed student contributes a skill at most once; matching is
        case-insensitive and the first spelling seen is the one reported.
        """
        me = self.store.profiles.get(student_id)
        if me is None:
            return []

        placed_profiles = [
            p for p in (self.store.profiles.get(sid) for sid in sorted(self._placed_student_ids()))
            if p is not None
        ]
        if not placed_profiles:
            return []

        frequency: Counter = Counter()
        spelling: Dict[str, str] = {}
        for profile in placed_profiles:
            counted = set()
            for skill in profile.skills:
                key = skill.lower()
                if key in counted:
                    continue
                counted.add(key)
                spelling.setdefault(key, skill)
                frequency[key] += 1

        mine = me.skill_set()
        missing = [(key, count) for key, count in frequency.most_common() if key not in mine]

        recommendations = []
        for key, count in missing[:SKILL_GAP_LIMIT]:
            percentage = round(count / len(placed_profiles) * 100, 1)
            skill = spelling[key]
            recommendations.append({
                "skill": skill,
                "frequency": count,
                "percentage": percentage,
                "recommendation": (
                    f"{percentage:.0f}% of placed students have {skill}. "
                    "Consider learning this skill."
                ),
            })
        return recommendations
