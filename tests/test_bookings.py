"""
Tests for the booking endpoints: auth, validation, eligibility and capacity.
"""

import pytest
from httpx import AsyncClient

from hotel_booking.core.security import create_access_token
from hotel_booking.models import TicketStatus
from tests import factories


# GET /booking

@pytest.mark.asyncio
async def test_get_booking_unauthenticated(client: AsyncClient):
    """No token returns 401."""
    response = await client.get("/api/v1/booking")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_get_booking_invalid_token(client: AsyncClient):
    """Garbage token returns 401."""
    response = await client.get("/api/v1/booking", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_get_booking_token_without_session(client: AsyncClient, test_user):
    """A well-signed token that was never issued through login returns 401."""
    token = create_access_token(data={"sub": str(test_user.id)})
    response = await client.get("/api/v1/booking", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_get_booking_none(client: AsyncClient, auth_headers):
    """User without a booking gets 404."""
    response = await client.get("/api/v1/booking", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_get_booking(client: AsyncClient, db_session, auth_headers, test_user, hotel):
    """Booking is returned with its room, without owner/foreign key/timestamps."""
    room = await factories.create_room(db_session, hotel, capacity=3)
    booking = await factories.create_booking(db_session, test_user, room)

    response = await client.get("/api/v1/booking", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert set(data) == {"id", "Room"}
    assert data["id"] == booking.id
    assert data["Room"]["id"] == room.id
    assert data["Room"]["name"] == room.name
    assert data["Room"]["capacity"] == 3
    assert data["Room"]["hotelId"] == hotel.id
    assert "createdAt" in data["Room"]
    assert "updatedAt" in data["Room"]


@pytest.mark.asyncio
async def test_get_booking_is_idempotent(client: AsyncClient, db_session, auth_headers, test_user, hotel):
    room = await factories.create_room(db_session, hotel)
    await factories.create_booking(db_session, test_user, room)

    first = await client.get("/api/v1/booking", headers=auth_headers)
    second = await client.get("/api/v1/booking", headers=auth_headers)
    assert first.json() == second.json()


# POST /booking

@pytest.mark.asyncio
async def test_create_booking_unauthenticated(client: AsyncClient):
    response = await client.post("/api/v1/booking", json={"roomId": 1})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_booking_missing_room_id(client: AsyncClient, auth_headers):
    """Empty body returns 400."""
    response = await client.post("/api/v1/booking", json={}, headers=auth_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_booking_room_id_not_a_number(client: AsyncClient, auth_headers):
    response = await client.post("/api/v1/booking", json={"roomId": "suite"}, headers=auth_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_booking_without_enrollment(client: AsyncClient, auth_headers):
    """No enrollment returns 404."""
    response = await client.post("/api/v1/booking", json={"roomId": 1}, headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_booking_without_ticket(client: AsyncClient, auth_headers, enrollment):
    """Enrolled but no ticket returns 403."""
    response = await client.post("/api/v1/booking", json={"roomId": 1}, headers=auth_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status, is_remote, includes_hotel",
    [
        (TicketStatus.RESERVED, False, True),   # not paid
        (TicketStatus.PAID, True, True),        # remote attendance
        (TicketStatus.PAID, False, False),      # no accommodation
    ],
)
async def test_create_booking_ineligible_ticket(
    client: AsyncClient, db_session, auth_headers, enrollment, hotel,
    status, is_remote, includes_hotel,
):
    """Ineligible ticket returns 403 even when the room is free."""
    ticket_type = await factories.create_ticket_type(db_session, is_remote=is_remote, includes_hotel=includes_hotel)
    await factories.create_ticket(db_session, enrollment, ticket_type, status)
    room = await factories.create_room(db_session, hotel)

    response = await client.post("/api/v1/booking", json={"roomId": room.id}, headers=auth_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_create_booking_reserved_ticket_before_missing_room(client: AsyncClient, db_session, auth_headers, enrollment):
    """Ticket problems are reported before room problems."""
    ticket_type = await factories.create_ticket_type(db_session)
    await factories.create_ticket(db_session, enrollment, ticket_type, TicketStatus.RESERVED)

    response = await client.post("/api/v1/booking", json={"roomId": 99999}, headers=auth_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_create_booking_room_not_found(client: AsyncClient, auth_headers, eligible_user):
    response = await client.post("/api/v1/booking", json={"roomId": 99999}, headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_booking_room_full(client: AsyncClient, db_session, auth_headers, eligible_user, hotel):
    """Room whose bookings reached capacity returns 403."""
    room = await factories.create_room(db_session, hotel, capacity=1)
    other = await factories.create_eligible_user(db_session)
    await factories.create_booking(db_session, other, room)

    response = await client.post("/api/v1/booking", json={"roomId": room.id}, headers=auth_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_create_booking(client: AsyncClient, db_session, auth_headers, eligible_user, hotel):
    """Eligible user booking a free room gets the new booking id."""
    room = await factories.create_room(db_session, hotel, capacity=2)

    response = await client.post("/api/v1/booking", json={"roomId": room.id}, headers=auth_headers)
    assert response.status_code == 200
    booking_id = response.json()["bookingId"]

    booking_response = await client.get("/api/v1/booking", headers=auth_headers)
    assert booking_response.json()["id"] == booking_id
    assert booking_response.json()["Room"]["id"] == room.id


@pytest.mark.asyncio
async def test_last_place_goes_to_first_user(client: AsyncClient, db_session, auth_headers, eligible_user, hotel):
    """Capacity-1 room: first user books, second user is refused."""
    room = await factories.create_room(db_session, hotel, capacity=1)
    first = await client.post("/api/v1/booking", json={"roomId": room.id}, headers=auth_headers)
    assert first.status_code == 200

    second_user = await factories.create_eligible_user(db_session)
    second_token = await factories.create_session(db_session, second_user)
    second = await client.post(
        "/api/v1/booking",
        json={"roomId": room.id},
        headers={"Authorization": f"Bearer {second_token}"},
    )
    assert second.status_code == 403


# PUT /booking/{booking_id}

@pytest.mark.asyncio
async def test_update_booking_unauthenticated(client: AsyncClient):
    response = await client.put("/api/v1/booking/1", json={"roomId": 1})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_update_booking_missing_room_id(client: AsyncClient, auth_headers):
    response = await client.put("/api/v1/booking/1", json={}, headers=auth_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_booking_room_id_not_a_number(client: AsyncClient, auth_headers):
    response = await client.put("/api/v1/booking/1", json={"roomId": "suite"}, headers=auth_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_booking_id_not_a_number(client: AsyncClient, auth_headers):
    response = await client.put("/api/v1/booking/latest", json={"roomId": 1}, headers=auth_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_booking_user_has_none(client: AsyncClient, db_session, auth_headers, hotel):
    """User without any booking gets 404, whatever booking id is given."""
    room = await factories.create_room(db_session, hotel)
    response = await client.put("/api/v1/booking/1", json={"roomId": room.id}, headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_booking_room_not_found(client: AsyncClient, db_session, auth_headers, test_user, hotel):
    room = await factories.create_room(db_session, hotel)
    booking = await factories.create_booking(db_session, test_user, room)

    response = await client.put(f"/api/v1/booking/{booking.id}", json={"roomId": 99999}, headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_booking_room_full(client: AsyncClient, db_session, auth_headers, test_user, hotel):
    room1 = await factories.create_room(db_session, hotel)
    room2 = await factories.create_room(db_session, hotel, capacity=1)
    booking = await factories.create_booking(db_session, test_user, room1)
    other = await factories.create_user(db_session)
    await factories.create_booking(db_session, other, room2)

    response = await client.put(f"/api/v1/booking/{booking.id}", json={"roomId": room2.id}, headers=auth_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_update_booking(client: AsyncClient, db_session, auth_headers, test_user, hotel):
    """Booking moves to the new room. Ticket eligibility is not re-checked."""
    room1 = await factories.create_room(db_session, hotel)
    room2 = await factories.create_room(db_session, hotel)
    booking = await factories.create_booking(db_session, test_user, room1)

    response = await client.put(f"/api/v1/booking/{booking.id}", json={"roomId": room2.id}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"bookingId": booking.id}

    booking_response = await client.get("/api/v1/booking", headers=auth_headers)
    assert booking_response.json()["Room"]["id"] == room2.id


@pytest.mark.asyncio
async def test_update_booking_unknown_booking_id(client: AsyncClient, db_session, auth_headers, test_user, hotel):
    """The caller has a booking, but the id in the path matches nothing."""
    room1 = await factories.create_room(db_session, hotel)
    room2 = await factories.create_room(db_session, hotel)
    await factories.create_booking(db_session, test_user, room1)

    response = await client.put("/api/v1/booking/99999", json={"roomId": room2.id}, headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_booking_of_another_user(client: AsyncClient, db_session, auth_headers, test_user, hotel):
    """Ownership of the path booking id is not verified: the other user's booking moves."""
    room1 = await factories.create_room(db_session, hotel)
    room2 = await factories.create_room(db_session, hotel)
    room3 = await factories.create_room(db_session, hotel)
    await factories.create_booking(db_session, test_user, room1)
    other = await factories.create_user(db_session)
    other_booking = await factories.create_booking(db_session, other, room2)

    response = await client.put(f"/api/v1/booking/{other_booking.id}", json={"roomId": room3.id}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"bookingId": other_booking.id}

    mine = await client.get("/api/v1/booking", headers=auth_headers)
    assert mine.json()["Room"]["id"] == room1.id

    await db_session.refresh(other_booking)
    assert other_booking.room_id == room3.id


@pytest.mark.asyncio
async def test_booking_metrics_exposed(client: AsyncClient, auth_headers):
    await client.get("/api/v1/booking", headers=auth_headers)

    response = await client.get("/metrics")
    assert response.status_code == 200
    assert 'booking_operations_total{operation="get",outcome="not_found"}' in response.text
