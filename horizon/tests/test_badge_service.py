"""
Tests for BadgeService.

Tests cover:
1. Seven consecutive completed days badge
2. Thirty completions badge
3. Badges are awarded at most once
4. First level-up badge
"""
from datetime import timedelta

from horizon.services.badge_service import BadgeService
from horizon.models import MissionCompletion, UserBadge


def add_completions(db_session, user_id, count, start_id=1):
    for i in range(count):
        db_session.add(MissionCompletion(
            mission_instance_id=start_id + i, user_id=user_id, xp_awarded=10, coins_awarded=0
        ))
    db_session.commit()


class TestStreakBadge:
    """Tests for the streak-7 badge"""

    def test_seven_consecutive_days_award_badge(self, db_session, user_id, make_entries, today):
        make_entries([today - timedelta(days=i) for i in range(7)])

        new_badges = BadgeService(db_session).check_and_award_badges(user_id)

        assert [b.badge_id for b in new_badges] == ["streak-7"]
        assert new_badges[0].name == "Week Warrior"

    def test_badge_awarded_only_once(self, db_session, user_id, make_entries, today):
        make_entries([today - timedelta(days=i) for i in range(7)])
        service = BadgeService(db_session)

        service.check_and_award_badges(user_id)
        make_entries([today + timedelta(days=1)])
        second = service.check_and_award_badges(user_id)

        assert second == []
        assert db_session.query(UserBadge).filter(UserBadge.badge_id == "streak-7").count() == 1

    def test_gap_in_last_seven_means_no_badge(self, db_session, user_id, make_entries, today):
        # 7 entries but day 3 is missing
        dates = [today - timedelta(days=i) for i in range(8) if i != 3]
        make_entries(dates)

        assert BadgeService(db_session).check_and_award_badges(user_id) == []

    def test_six_days_is_not_enough(self, db_session, user_id, make_entries, today):
        make_entries([today - timedelta(days=i) for i in range(6)])

        assert BadgeService(db_session).check_and_award_badges(user_id) == []

    def test_incomplete_entries_do_not_count(self, db_session, user_id, make_entries, today):
        make_entries([today - timedelta(days=i) for i in range(6)])
        make_entries([today - timedelta(days=6)], completed=False)

        assert BadgeService(db_session).check_and_award_badges(user_id) == []

    def test_old_run_counts_when_latest_seven_are_consecutive(self, db_session, user_id, make_entries, today):
        """Only the most recent seven completed entries matter, not whether they end today"""
        start = today - timedelta(days=20)
        make_entries([start + timedelta(days=i) for i in range(7)])

        new_badges = BadgeService(db_session).check_and_award_badges(user_id)

        assert [b.badge_id for b in new_badges] == ["streak-7"]

    def test_other_users_entries_ignored(self, db_session, user_id, other_user_id, make_entries, today):
        make_entries([today - timedelta(days=i) for i in range(7)], owner=other_user_id)

        assert BadgeService(db_session).check_and_award_badges(user_id) == []


class TestCompletionsBadge:
    """Tests for the checkins-30 badge"""

    def test_thirty_completions_award_badge(self, db_session, user_id):
        add_completions(db_session, user_id, 30)

        new_badges = BadgeService(db_session).check_and_award_badges(user_id)

        assert [b.badge_id for b in new_badges] == ["checkins-30"]
        assert new_badges[0].name == "Consistency Champion"

    def test_twenty_nine_completions_not_enough(self, db_session, user_id):
        add_completions(db_session, user_id, 29)

        assert BadgeService(db_session).check_and_award_badges(user_id) == []

    def test_both_badges_in_one_check(self, db_session, user_id, make_entries, today):
        add_completions(db_session, user_id, 30)
        make_entries([today - timedelta(days=i) for i in range(7)])

        new_badges = BadgeService(db_session).check_and_award_badges(user_id)

        assert {b.badge_id for b in new_badges} == {"streak-7", "checkins-30"}
        assert len(BadgeService(db_session).get_badges(user_id)) == 2


class TestFirstLevelUpBadge:
    """Tests for award_first_level_up"""

    def test_awarded_once_per_mission(self, db_session, user_id, make_mission):
        mission = make_mission(title="Guitar")
        service = BadgeService(db_session)

        first = service.award_first_level_up(user_id, mission.id, mission.title)
        db_session.commit()
        second = service.award_first_level_up(user_id, mission.id, mission.title)

        assert [b.badge_id for b in first] == [f"first-levelup-{mission.id}"]
        assert first[0].name == "Guitar Initiate"
        assert second == []

    def test_separate_badge_per_mission(self, db_session, user_id, make_mission):
        a = make_mission(title="A")
        b = make_mission(title="B")
        service = BadgeService(db_session)

        service.award_first_level_up(user_id, a.id, a.title)
        service.award_first_level_up(user_id, b.id, b.title)
        db_session.commit()

        assert len(service.get_badges(user_id)) == 2
