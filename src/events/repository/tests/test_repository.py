"""Tests for EventRepository against the in-memory store."""

import asyncio
import random
from uuid import uuid4

import pytest

from src.events.dtos import (
    EventNotFoundError,
    EventProfileDTO,
    EventUpdate,
    EventValidationError,
    PersistenceError,
    ResponseCategory,
    ResponseDetails,
    ResponseFieldConfig,
)
from src.events.repository import EventRepository

OWNER = "owner-1"


def make_profile(**overrides) -> EventProfileDTO:
    data = {
        "name": "Summer Party",
        "date": "2026-07-04",
        "time": "18:30",
        "location": "Rooftop",
        "description": "Drinks and music",
        "tags": ["party", "summer"],
        "custom_styles": {"textColor": "#333333", "fontEventName": "Pacifico"},
    }
    data.update(overrides)
    return EventProfileDTO(**data)


async def test_create_initializes_empty_aggregate(repository):
    event = await repository.create(make_profile(), owner_id=OWNER)

    assert event.owner_id == OWNER
    assert event.views == 0
    assert event.tally == {
        ResponseCategory.GOING: 0,
        ResponseCategory.MAYBE: 0,
        ResponseCategory.NOT_GOING: 0,
    }
    assert event.responses == []
    assert event.is_premium is False
    assert event.created_at is not None
    assert event.custom_styles == {"textColor": "#333333", "fontEventName": "Pacifico"}


async def test_create_requires_owner(repository, memory_store):
    with pytest.raises(EventValidationError):
        await repository.create(make_profile(), owner_id="  ")

    assert memory_store.calls == []


async def test_create_normalizes_tags(repository):
    event = await repository.create(
        make_profile(tags=[" music ", "party", "", "music", "Party"]), owner_id=OWNER
    )

    assert event.tags == ["music", "party", "Party"]


async def test_create_surfaces_store_failure(repository, memory_store):
    memory_store.fail_next()

    with pytest.raises(PersistenceError):
        await repository.create(make_profile(), owner_id=OWNER)


async def test_get_by_id_returns_event(repository):
    created = await repository.create(make_profile(), owner_id=OWNER)

    fetched = await repository.get_by_id(str(created.id))

    assert fetched == created


async def test_get_by_id_missing(repository):
    with pytest.raises(EventNotFoundError):
        await repository.get_by_id(uuid4())


async def test_get_by_id_malformed_id_is_not_found(repository, memory_store):
    with pytest.raises(EventNotFoundError):
        await repository.get_by_id("not-a-uuid")

    assert memory_store.calls == []


async def test_scenario_response_with_filtered_details(repository):
    """Only the name is requested, so the email is never stored."""
    event = await repository.create(
        make_profile(collect_fields=ResponseFieldConfig(name=True, email=False, phone=False)),
        owner_id=OWNER,
    )

    await repository.record_response(
        event.id, "going", ResponseDetails(name="Ana", email="a@x.com")
    )

    event = await repository.get_by_id(event.id)
    assert event.tally == {
        ResponseCategory.GOING: 1,
        ResponseCategory.MAYBE: 0,
        ResponseCategory.NOT_GOING: 0,
    }
    assert len(event.responses) == 1
    assert event.responses[0].name == "Ana"
    assert event.responses[0].email is None
    assert event.responses[0].phone is None


async def test_response_details_only_requested_fields(repository):
    event = await repository.create(make_profile(), owner_id=OWNER)

    response = await repository.record_response(
        event.id,
        ResponseCategory.MAYBE,
        ResponseDetails(name="Bo", email="bo@example.com", phone="+31 6 1234"),
    )

    assert response.name == "Bo"
    assert response.email is None
    assert response.phone is None


async def test_response_keeps_all_requested_fields(repository):
    event = await repository.create(
        make_profile(collect_fields=ResponseFieldConfig(name=True, email=True, phone=True)),
        owner_id=OWNER,
    )

    response = await repository.record_response(
        event.id,
        ResponseCategory.GOING,
        ResponseDetails(name="Cy", email="cy@example.com", phone=""),
    )

    assert response.name == "Cy"
    assert response.email == "cy@example.com"
    # empty strings are treated as not supplied
    assert response.phone is None


async def test_malformed_email_ignored_when_not_requested(repository):
    event = await repository.create(make_profile(), owner_id=OWNER)

    response = await repository.record_response(
        event.id, "going", ResponseDetails(name="Ana", email="not-an-email")
    )

    assert response.name == "Ana"
    assert response.email is None


async def test_malformed_requested_email_rejected_before_write(repository, memory_store):
    event = await repository.create(
        make_profile(collect_fields=ResponseFieldConfig(name=True, email=True)), owner_id=OWNER
    )
    memory_store.calls.clear()

    with pytest.raises(EventValidationError) as exc_info:
        await repository.record_response(event.id, "going", ResponseDetails(email="not-an-email"))

    assert exc_info.value.field_name == "email"
    assert "append_response" not in memory_store.calls
    assert (await repository.get_by_id(event.id)).total_responses == 0


async def test_response_assigns_id_and_timestamp(repository):
    event = await repository.create(make_profile(), owner_id=OWNER)

    first = await repository.record_response(event.id, "going")
    second = await repository.record_response(event.id, "going")

    assert first.id != second.id
    assert first.submitted_at <= second.submitted_at
    assert first.submitted_at.tzinfo is not None


async def test_unknown_category_rejected_before_store_call(repository, memory_store):
    event = await repository.create(make_profile(), owner_id=OWNER)
    memory_store.calls.clear()

    with pytest.raises(EventValidationError) as exc_info:
        await repository.record_response(event.id, "attending")

    assert exc_info.value.field_name == "category"
    assert memory_store.calls == []


async def test_response_to_missing_event(repository):
    with pytest.raises(EventNotFoundError):
        await repository.record_response(uuid4(), "going")


async def test_response_uses_single_combined_write(repository, memory_store):
    event = await repository.create(make_profile(), owner_id=OWNER)
    memory_store.calls.clear()

    await repository.record_response(event.id, "not_going")

    # one read of the response configuration, one atomic append
    assert memory_store.calls == ["get", "append_response"]


async def test_tally_matches_responses_for_any_sequence(repository):
    event = await repository.create(make_profile(), owner_id=OWNER)
    rng = random.Random(42)
    categories = [rng.choice(list(ResponseCategory)) for _ in range(60)]

    await asyncio.gather(*(repository.record_response(event.id, c) for c in categories))

    event = await repository.get_by_id(event.id)
    for category in ResponseCategory:
        stored = [r for r in event.responses if r.category == category]
        assert event.tally[category] == len(stored) == categories.count(category)


async def test_concurrent_responses_are_never_lost(repository):
    event = await repository.create(make_profile(), owner_id=OWNER)

    await asyncio.gather(
        *(
            repository.record_response(event.id, "going", ResponseDetails(name=f"Guest {i}"))
            for i in range(100)
        )
    )

    event = await repository.get_by_id(event.id)
    assert len(event.responses) == 100
    assert sum(event.tally.values()) == 100
    assert len({r.id for r in event.responses}) == 100


async def test_duplicate_submissions_are_both_counted(repository):
    event = await repository.create(make_profile(), owner_id=OWNER)
    details = ResponseDetails(name="Ana")

    await repository.record_response(event.id, "going", details)
    await repository.record_response(event.id, "going", details)

    event = await repository.get_by_id(event.id)
    assert event.tally[ResponseCategory.GOING] == 2
    assert len(event.responses) == 2


async def test_record_view_sequential(repository):
    event = await repository.create(make_profile(), owner_id=OWNER)

    for _ in range(5):
        await repository.record_view(event.id)

    event = await repository.get_by_id(event.id)
    assert event.views == 5


async def test_record_view_concurrent(repository):
    event = await repository.create(make_profile(), owner_id=OWNER)
    await repository.record_view(event.id)

    await asyncio.gather(*(repository.record_view(event.id) for _ in range(50)))

    event = await repository.get_by_id(event.id)
    assert event.views == 51


async def test_record_view_never_reads_first(repository, memory_store):
    event = await repository.create(make_profile(), owner_id=OWNER)
    memory_store.calls.clear()

    await repository.record_view(event.id)

    assert memory_store.calls == ["increment_views"]


async def test_record_view_missing_event(repository):
    with pytest.raises(EventNotFoundError):
        await repository.record_view(uuid4())


async def test_update_ignores_managed_fields(repository):
    event = await repository.create(make_profile(), owner_id=OWNER)
    await repository.record_view(event.id)

    updated = await repository.update(
        event.id,
        {"name": "New Name", "owner_id": "attacker", "views": 1000, "tally": {"going": 99}},
    )

    assert updated.name == "New Name"
    assert updated.owner_id == OWNER
    assert updated.views == 1
    assert updated.tally[ResponseCategory.GOING] == 0


async def test_update_applies_all_supplied_fields(repository):
    event = await repository.create(make_profile(), owner_id=OWNER)

    updated = await repository.update(
        event.id,
        EventUpdate(
            location="Garden",
            tags=["garden", "garden", "bbq"],
            collect_fields=ResponseFieldConfig(name=True, email=True),
            allow_sharing=False,
        ),
    )

    assert updated.location == "Garden"
    assert updated.tags == ["garden", "bbq"]
    assert updated.collect_fields == ResponseFieldConfig(name=True, email=True, phone=False)
    assert updated.allow_sharing is False
    # untouched
    assert updated.name == event.name
    assert updated.created_at == event.created_at


async def test_update_rejects_unknown_field(repository, memory_store):
    event = await repository.create(make_profile(), owner_id=OWNER)
    memory_store.calls.clear()

    with pytest.raises(EventValidationError):
        await repository.update(event.id, {"name": "X", "colour": "red"})

    assert memory_store.calls == []


async def test_update_rejects_badly_typed_value(repository):
    event = await repository.create(make_profile(), owner_id=OWNER)

    with pytest.raises(EventValidationError):
        await repository.update(event.id, {"tags": "party"})


async def test_update_missing_event(repository):
    with pytest.raises(EventNotFoundError):
        await repository.update(uuid4(), {"name": "Ghost"})


async def test_update_changed_config_filters_later_responses(repository):
    event = await repository.create(make_profile(), owner_id=OWNER)
    await repository.update(event.id, {"collect_fields": {"name": False, "phone": True}})

    response = await repository.record_response(
        event.id, "going", ResponseDetails(name="Di", phone="555")
    )

    assert response.name is None
    assert response.phone == "555"


async def test_delete_is_total(repository):
    event = await repository.create(make_profile(), owner_id=OWNER)
    await repository.record_response(event.id, "going")

    await repository.delete(event.id)

    with pytest.raises(EventNotFoundError):
        await repository.get_by_id(event.id)
    with pytest.raises(EventNotFoundError):
        await repository.record_view(event.id)
    with pytest.raises(EventNotFoundError):
        await repository.record_response(event.id, "going")
    with pytest.raises(EventNotFoundError):
        await repository.update(event.id, {"name": "Back"})
    assert await repository.list_by_owner(OWNER) == []


async def test_delete_is_idempotent(repository):
    event = await repository.create(make_profile(), owner_id=OWNER)

    await repository.delete(event.id)
    await repository.delete(event.id)
    await repository.delete("not-a-uuid")


async def test_mark_premium_is_idempotent(repository):
    event = await repository.create(make_profile(), owner_id=OWNER)

    first = await repository.mark_premium(event.id)
    second = await repository.mark_premium(event.id)

    assert first.is_premium is True
    assert second.is_premium is True


async def test_mark_premium_missing_event(repository):
    with pytest.raises(EventNotFoundError):
        await repository.mark_premium(uuid4())


async def test_list_by_owner_only_returns_owned_events(repository):
    mine = await repository.create(make_profile(name="Mine"), owner_id=OWNER)
    await repository.create(make_profile(name="Theirs"), owner_id="owner-2")

    events = await repository.list_by_owner(OWNER)

    assert [e.id for e in events] == [mine.id]


async def test_persistence_errors_are_not_retried(memory_store):
    repository = EventRepository(memory_store)
    event = await repository.create(make_profile(), owner_id=OWNER)
    memory_store.calls.clear()
    memory_store.fail_next()

    with pytest.raises(PersistenceError):
        await repository.record_view(event.id)

    assert memory_store.calls == ["increment_views"]


async def test_empty_map_link_is_stored_as_none(repository):
    event = await repository.create(make_profile(map_link=""), owner_id=OWNER)
    assert event.map_link is None

    event = await repository.update(event.id, {"map_link": "https://maps.example/x"})
    assert event.map_link == "https://maps.example/x"

    event = await repository.update(event.id, EventUpdate(map_link=""))
    assert event.map_link is None
