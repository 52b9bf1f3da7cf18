"""
Cuota diaria de contactos: check_and_reserve, commit_reveal, peek_quota y reveal_contacts.
"""
from datetime import date, datetime, timedelta, timezone as dt_timezone
from unittest import mock

import pytest
from django.db import OperationalError

from directory.models import Contact
from usage import services
from usage.exceptions import InvalidUser, OverCommit, StoreUnavailable
from usage.models import ContactViewQuota
from usage.services import (
    check_and_reserve,
    commit_reveal,
    day_key_for,
    peek_quota,
    reveal_contacts,
)

pytestmark = pytest.mark.django_db


def _set_count(user_id, day, count):
    ContactViewQuota.objects.update_or_create(user_id=user_id, view_date=day, defaults={'view_count': count})


class TestDayKey:

    def test_uses_configured_time_zone(self, settings):
        settings.QUOTA_TIME_ZONE = 'America/Chicago'
        late_utc = datetime(2024, 1, 2, 3, 0, tzinfo=dt_timezone.utc)
        # 03:00 UTC es todavía el 1 de enero en Chicago
        assert day_key_for(late_utc) == date(2024, 1, 1)

    def test_utc_default(self, now):
        assert day_key_for(now) == date(2024, 1, 1)

    def test_naive_datetime_rejected(self):
        with pytest.raises(ValueError):
            day_key_for(datetime(2024, 1, 1, 12, 0))


class TestCheckAndReserve:

    def test_new_user_gets_full_quota_and_one_record(self, now):
        check = check_and_reserve('u1', now)

        assert check.remaining_before == 50
        assert check.view_count == 0
        assert check.day_key == date(2024, 1, 1)
        assert check.day == '2024-01-01'
        assert not check.exhausted
        assert ContactViewQuota.objects.filter(user_id='u1').count() == 1

    def test_idempotent_initialization(self, now):
        first = check_and_reserve('u1', now)
        second = check_and_reserve('u1', now)

        assert first.remaining_before == second.remaining_before == 50
        assert ContactViewQuota.objects.filter(user_id='u1', view_date=first.day_key).count() == 1

    def test_does_not_reset_existing_count(self, now):
        _set_count('u1', date(2024, 1, 1), 12)

        check = check_and_reserve('u1', now)

        assert check.view_count == 12
        assert check.remaining_before == 38
        assert ContactViewQuota.objects.get(user_id='u1').view_count == 12

    def test_exhausted_at_limit(self, now):
        _set_count('u1', date(2024, 1, 1), 50)

        check = check_and_reserve('u1', now)

        assert check.remaining_before == 0
        assert check.exhausted

    def test_day_rollover_is_independent(self, now):
        day1 = check_and_reserve('u1', now)
        commit_reveal('u1', day1.day_key, 50)

        day2 = check_and_reserve('u1', now + timedelta(days=1))

        assert check_and_reserve('u1', now).exhausted
        assert day2.remaining_before == 50
        assert day2.day_key == date(2024, 1, 2)
        assert ContactViewQuota.objects.filter(user_id='u1').count() == 2

    def test_users_are_independent(self, now):
        day = check_and_reserve('u1', now).day_key
        commit_reveal('u1', day, 30)

        assert check_and_reserve('u2', now).remaining_before == 50

    def test_limit_comes_from_settings(self, settings, now):
        settings.CONTACT_DAILY_VIEW_LIMIT = 10
        assert check_and_reserve('u1', now).remaining_before == 10

    @pytest.mark.parametrize('bad_user', ['', '   ', ' u1', None, 42, 'x' * 256])
    def test_invalid_user_rejected_before_store(self, bad_user, now):
        with pytest.raises(InvalidUser):
            check_and_reserve(bad_user, now)
        assert ContactViewQuota.objects.count() == 0

    def test_invalid_user_is_value_error(self, now):
        with pytest.raises(ValueError):
            check_and_reserve('', now)

    def test_store_unavailable(self, now):
        with mock.patch.object(ContactViewQuota.objects, 'get_or_create', side_effect=OperationalError('db down')):
            with pytest.raises(StoreUnavailable) as exc_info:
                check_and_reserve('u1', now)
        assert isinstance(exc_info.value.__cause__, OperationalError)


class TestCommitReveal:

    def test_sequential_commits_sum(self, now):
        day = check_and_reserve('u1', now).day_key
        for count in (5, 0, 20, 25):
            commit_reveal('u1', day, count)

        assert ContactViewQuota.objects.get(user_id='u1', view_date=day).view_count == 50

    def test_returns_new_count(self, now):
        day = check_and_reserve('u1', now).day_key
        assert commit_reveal('u1', day, 7) == 7
        assert commit_reveal('u1', day, 3) == 10

    def test_49_plus_1_reaches_limit(self, now):
        _set_count('u1', date(2024, 1, 1), 49)
        check = check_and_reserve('u1', now)
        assert check.remaining_before == 1

        assert commit_reveal('u1', check.day_key, 1) == 50
        assert check_and_reserve('u1', now).remaining_before == 0

    def test_zero_count_is_noop(self, now):
        day = check_and_reserve('u1', now).day_key
        commit_reveal('u1', day, 4)

        assert commit_reveal('u1', day, 0) == 4

    def test_over_commit_rejected_not_clamped(self, now):
        _set_count('u1', date(2024, 1, 1), 45)
        day = check_and_reserve('u1', now).day_key

        with pytest.raises(OverCommit) as exc_info:
            commit_reveal('u1', day, 6)

        assert exc_info.value.count == 6
        assert exc_info.value.view_count == 45
        assert exc_info.value.limit == 50
        assert ContactViewQuota.objects.get(user_id='u1').view_count == 45

    def test_concurrent_full_reveals_cannot_exceed_limit(self, now):
        # Dos peticiones leen remaining_before=50 antes de que ninguna registre
        first = check_and_reserve('u1', now)
        second = check_and_reserve('u1', now)
        assert first.remaining_before == second.remaining_before == 50

        assert commit_reveal('u1', first.day_key, 50) == 50
        with pytest.raises(OverCommit):
            commit_reveal('u1', second.day_key, 50)

        assert ContactViewQuota.objects.get(user_id='u1').view_count == 50

    @pytest.mark.parametrize('bad_count', [-1, 1.5, '3', True])
    def test_invalid_count(self, bad_count, now):
        day = check_and_reserve('u1', now).day_key
        with pytest.raises(ValueError):
            commit_reveal('u1', day, bad_count)

    def test_missing_record(self, now):
        with pytest.raises(ContactViewQuota.DoesNotExist):
            commit_reveal('u1', date(2024, 1, 1), 1)

    def test_store_unavailable(self, now):
        day = check_and_reserve('u1', now).day_key
        with mock.patch.object(ContactViewQuota.objects, 'filter', side_effect=OperationalError('db down')):
            with pytest.raises(StoreUnavailable):
                commit_reveal('u1', day, 1)


class TestPeekQuota:

    def test_does_not_create_record(self, now):
        check = peek_quota('u1', now)

        assert check.remaining_before == 50
        assert check.view_count == 0
        assert ContactViewQuota.objects.count() == 0

    def test_reports_current_usage(self, now):
        _set_count('u1', date(2024, 1, 1), 20)
        check = peek_quota('u1', now)

        assert check.view_count == 20
        assert check.remaining_before == 30


class TestRevealContacts:

    def test_fresh_user_with_200_contacts(self, make_contacts, now):
        make_contacts(200)

        result = reveal_contacts('u1', now, Contact.objects.reachable())

        assert result.revealed == 50
        assert result.viewed_today == 50
        assert result.remaining == 0
        assert result.total == 200
        assert result.has_more is True
        assert result.pending == 150
        assert not result.exhausted
        assert ContactViewQuota.objects.get(user_id='u1').view_count == 50

    def test_ordered_by_last_name(self, make_contacts, now):
        Contact.objects.create(id='z', first_name='Zed', last_name='Zulu', email='z@x.gov')
        Contact.objects.create(id='a', first_name='Al', last_name='Alpha', email='a@x.gov')
        Contact.objects.create(id='m', first_name='Mo', last_name='Mike', phone='555-0100')

        result = reveal_contacts('u1', now, Contact.objects.reachable())

        assert [c.last_name for c in result.contacts] == ['Alpha', 'Mike', 'Zulu']

    def test_fewer_contacts_than_quota(self, make_contacts, now):
        make_contacts(10)

        result = reveal_contacts('u1', now, Contact.objects.reachable())

        assert result.revealed == 10
        assert result.remaining == 40
        assert result.has_more is False

    def test_next_load_continues_after_viewed(self, make_contacts, settings, now):
        settings.CONTACT_DAILY_VIEW_LIMIT = 30
        make_contacts(40)

        first = reveal_contacts('u1', now, Contact.objects.reachable())
        assert first.revealed == 30

        # Más cuota para el mismo día: continúa en el contacto 31
        settings.CONTACT_DAILY_VIEW_LIMIT = 50
        second = reveal_contacts('u1', now, Contact.objects.reachable())

        assert [c.id for c in second.contacts] == [f'c{i:04d}' for i in range(30, 40)]
        assert second.viewed_today == 40
        assert second.has_more is False

    def test_exhausted_skips_contact_query(self, make_contacts, now):
        make_contacts(5)
        _set_count('u1', date(2024, 1, 1), 50)

        queryset = mock.MagicMock()
        result = reveal_contacts('u1', now, queryset)

        assert result.exhausted
        assert result.revealed == 0
        assert result.remaining == 0
        queryset.order_by.return_value.count.assert_not_called()

    def test_retries_after_losing_race(self, make_contacts, now):
        make_contacts(100)
        real_check = services.check_and_reserve
        calls = []

        def check_then_concurrent_commit(user_id, when):
            result = real_check(user_id, when)
            if not calls:
                calls.append(result)
                # Otra petición del mismo usuario registra 50 entre la lectura y el commit
                services.commit_reveal(user_id, result.day_key, 50)
            return result

        with mock.patch.object(services, 'check_and_reserve', side_effect=check_then_concurrent_commit):
            result = reveal_contacts('u1', now, Contact.objects.reachable())

        assert result.exhausted
        assert result.revealed == 0
        assert ContactViewQuota.objects.get(user_id='u1').view_count == 50

    def test_gives_up_after_max_attempts(self, make_contacts, now):
        make_contacts(5)
        over = OverCommit('u1', date(2024, 1, 1), 5, 50, 50)

        with mock.patch.object(services, 'commit_reveal', side_effect=over):
            with pytest.raises(OverCommit):
                reveal_contacts('u1', now, Contact.objects.reachable(), max_attempts=2)

    def test_contact_query_failure_is_store_unavailable(self, make_contacts, now):
        make_contacts(5)

        with mock.patch('django.db.models.query.QuerySet.count', side_effect=OperationalError('down')):
            with pytest.raises(StoreUnavailable) as exc_info:
                reveal_contacts('u1', now, Contact.objects.reachable())

        assert isinstance(exc_info.value.__cause__, OperationalError)
        assert ContactViewQuota.objects.get(user_id='u1').view_count == 0
