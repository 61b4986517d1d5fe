# tests/test_funding_lifecycle.py

from datetime import timedelta

import pytest

from app.core.exceptions import (
    ErrorType, NotFoundError, UnauthorizedError, InvalidStateError,
    OptionMismatchError, FundingValidationError
)
from app.crud import funding as crud_funding
from app.crud import notification as crud_notification
from app.models.funding import FundingStatus
from app.schemas.funding import FundingCreate
from app.services import funding as funding_service
from app.utils.dates import utc_now


@pytest.fixture
def owner(make_consumer):
    return make_consumer("Owner")


@pytest.fixture
def funding_in(catalog, today):
    def _make(start=0, anniversary=2, end=5, **overrides) -> FundingCreate:
        data = dict(
            product_id=catalog["product"].id,
            product_option_id=catalog["option"].id,
            anniversary_category_id=catalog["category"].id,
            title="Наушники на день рождения",
            start_date=today + timedelta(days=start),
            anniversary_date=today + timedelta(days=anniversary),
            end_date=today + timedelta(days=end),
            is_private=False,
        )
        data.update(overrides)
        return FundingCreate(**data)
    return _make


def test_funding_starting_today_is_in_progress(db_session, owner, funding_in, today, catalog):
    funding = funding_service.create_funding(db_session, owner.id, funding_in(), today=today)

    assert funding.status == FundingStatus.IN_PROGRESS
    assert funding.consumer_id == owner.id
    assert funding.target_price == catalog["option"].price
    assert funding.deleted_at is None


def test_funding_starting_later_is_pre_progress(db_session, owner, funding_in, today):
    funding = funding_service.create_funding(db_session, owner.id, funding_in(start=1, anniversary=3, end=4), today=today)

    assert funding.status == FundingStatus.PRE_PROGRESS


def test_seven_day_duration_is_allowed(db_session, owner, funding_in, today):
    funding = funding_service.create_funding(db_session, owner.id, funding_in(start=0, anniversary=7, end=7), today=today)

    assert funding.end_date - funding.start_date == timedelta(days=7)


@pytest.mark.parametrize(
    "start, anniversary, end, expected",
    [
        (-1, 1, 2, ErrorType.FUNDING_START_DATE_IS_PAST),
        (2, 1, 3, ErrorType.FUNDING_ANNIVERSARY_DATE_IS_PAST),
        (0, 3, 2, ErrorType.FUNDING_END_DATE_IS_PAST),
        (0, 2, 8, ErrorType.FUNDING_DURATION_NOT_VALID),
    ],
)
def test_invalid_dates_are_rejected(db_session, owner, funding_in, today, start, anniversary, end, expected):
    with pytest.raises(FundingValidationError) as exc_info:
        funding_service.create_funding(db_session, owner.id, funding_in(start, anniversary, end), today=today)

    assert exc_info.value.error_type == expected
    assert crud_funding.get_fundings_by_consumer(db_session, owner.id, page=1, size=10) == ([], False)


def test_unknown_owner_is_not_found(db_session, funding_in, today):
    with pytest.raises(NotFoundError) as exc_info:
        funding_service.create_funding(db_session, 999, funding_in(), today=today)
    assert exc_info.value.error_type == ErrorType.CONSUMER_NOT_FOUND


@pytest.mark.parametrize(
    "field, value_key, expected",
    [
        ("product_id", None, ErrorType.PRODUCT_NOT_FOUND),
        ("product_option_id", None, ErrorType.PRODUCT_OPTION_NOT_FOUND),
        ("product_option_id", "inactive_option", ErrorType.PRODUCT_OPTION_NOT_FOUND),
        ("anniversary_category_id", None, ErrorType.ANNIVERSARY_CATEGORY_NOT_FOUND),
    ],
)
def test_missing_references_are_not_found(db_session, owner, funding_in, catalog, today, field, value_key, expected):
    value = catalog[value_key].id if value_key else 999
    with pytest.raises(NotFoundError) as exc_info:
        funding_service.create_funding(db_session, owner.id, funding_in(**{field: value}), today=today)

    assert exc_info.value.error_type == expected


def test_option_of_another_product_is_mismatch(db_session, owner, funding_in, catalog, today):
    with pytest.raises(OptionMismatchError):
        funding_service.create_funding(
            db_session, owner.id, funding_in(product_option_id=catalog["foreign_option"].id), today=today
        )


def test_creation_queues_notifications_for_favorite_audience(
    db_session, owner, funding_in, today, make_consumer, make_friends
):
    fan = make_consumer("Fan")
    casual = make_consumer("Casual")
    gone = make_consumer("Gone")
    make_friends(fan, owner, a_favors_b=True)
    make_friends(casual, owner)
    make_friends(gone, owner, a_favors_b=True)
    gone.deleted_at = utc_now()
    db_session.commit()

    funding = funding_service.create_funding(db_session, owner.id, funding_in(), today=today)

    notifications = crud_notification.get_notifications_for_entity(db_session, "funding_created", str(funding.id))
    assert [n.consumer_id for n in notifications] == [fan.id]
    assert notifications[0].delivery_status == "pending"
    assert owner.name in notifications[0].message

# --- Удаление ---

def test_owner_can_delete_pre_progress_funding(db_session, owner, make_funding):
    funding = make_funding(owner, status=FundingStatus.PRE_PROGRESS)

    funding_service.delete_funding(db_session, owner.id, funding.id)

    assert crud_funding.get_funding_by_id(db_session, funding.id) is None
    with pytest.raises(NotFoundError) as exc_info:
        funding_service.delete_funding(db_session, owner.id, funding.id)
    assert exc_info.value.error_type == ErrorType.FUNDING_NOT_FOUND


def test_deleted_funding_disappears_from_own_list(db_session, owner, make_funding):
    kept = make_funding(owner, status=FundingStatus.PRE_PROGRESS)
    removed = make_funding(owner, status=FundingStatus.PRE_PROGRESS)

    funding_service.delete_funding(db_session, owner.id, removed.id)

    result = funding_service.get_my_fundings(db_session, owner, keyword=None, page=1, size=10)
    assert [f.id for f in result.items] == [kept.id]


def test_deleting_someone_elses_funding_is_unauthorized(db_session, owner, make_consumer, make_funding):
    stranger = make_consumer("Stranger")
    funding = make_funding(owner, status=FundingStatus.PRE_PROGRESS)

    with pytest.raises(UnauthorizedError):
        funding_service.delete_funding(db_session, stranger.id, funding.id)
    assert crud_funding.get_funding_by_id(db_session, funding.id) is not None


@pytest.mark.parametrize("status", [FundingStatus.IN_PROGRESS, FundingStatus.SUCCESS, FundingStatus.FAIL])
def test_started_funding_cannot_be_deleted(db_session, owner, make_funding, status):
    funding = make_funding(owner, status=status)

    with pytest.raises(InvalidStateError):
        funding_service.delete_funding(db_session, owner.id, funding.id)
    assert crud_funding.get_funding_by_id(db_session, funding.id) is not None
