"""ListingApiClient against the ASGI app: typed errors survive the wire."""

import httpx
import pytest

from src.ns_common.errors import (
    AppError,
    ExternalCapabilityError,
    IllegalTransitionError,
    ListingNotFoundError,
    ValidationError,
)
from src.ns_listing.application.schemas import CreateListingRequest
from src.ns_marketplace.client import ListingApiClient
from tests.factories import BUYER, CREATOR, OTHER_BUYER, TX_HASH, listing_payload


@pytest.fixture
def api(client) -> ListingApiClient:
    return ListingApiClient(client)


def _request(**kwargs) -> CreateListingRequest:
    return CreateListingRequest.model_validate(listing_payload(**kwargs))


class TestReads:
    async def test_empty(self, api) -> None:
        assert await api.get_listings() == []

    async def test_created_listing_round_trips(self, api) -> None:
        created = await api.create_listing(_request())
        fetched = await api.get_listing(created.id)
        assert fetched == created
        assert fetched.created_at.tzinfo is not None

    async def test_not_found(self, api) -> None:
        with pytest.raises(ListingNotFoundError) as exc_info:
            await api.get_listing(99)
        assert exc_info.value.listing_id == 99

    async def test_creator_and_owner(self, api) -> None:
        await api.create_listing(_request())
        await api.purchase(1, BUYER, TX_HASH)
        assert [lst.id for lst in await api.get_by_creator(CREATOR)] == [1]
        assert [lst.id for lst in await api.get_by_owner(BUYER)] == [1]


class TestWrites:
    async def test_purchase(self, api) -> None:
        await api.create_listing(_request())
        bought = await api.purchase(1, BUYER, TX_HASH)
        assert bought.owner == BUYER
        assert bought.status == "purchased"

    async def test_second_purchase_is_typed(self, api) -> None:
        await api.create_listing(_request())
        await api.purchase(1, BUYER, TX_HASH)
        with pytest.raises(IllegalTransitionError) as exc_info:
            await api.purchase(1, OTHER_BUYER, "tx-2")
        assert exc_info.value.listing_id == 1
        assert exc_info.value.target == "purchased"
        assert BUYER in exc_info.value.message

    async def test_server_side_validation(self, api) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await api.create_listing(_request(status="repaid"))
        assert exc_info.value.errors[0]["field"] == "status"

    async def test_cancel_and_status(self, api) -> None:
        await api.create_listing(_request())
        await api.create_listing(_request())
        assert (await api.cancel(1, CREATOR)).status == "cancelled"
        await api.purchase(2, BUYER, TX_HASH)
        assert (await api.set_status(2, "repaid")).status == "repaid"

    async def test_dev_reset(self, api) -> None:
        rows = await api.dev_reset(BUYER)
        assert [lst.id for lst in rows] == [1, 2, 3, 4]


class TestTransport:
    async def test_transport_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with httpx.AsyncClient(
            transport=httpx.MockTransport(handler), base_url="http://test"
        ) as http:
            with pytest.raises(ExternalCapabilityError) as exc_info:
                await ListingApiClient(http).get_listings()
        assert exc_info.value.capability == "listing-api"

    async def test_non_envelope_error(self) -> None:
        async with httpx.AsyncClient(
            transport=httpx.MockTransport(lambda r: httpx.Response(503, text="down")),
            base_url="http://test",
        ) as http:
            with pytest.raises(AppError) as exc_info:
                await ListingApiClient(http).get_listings()
        assert exc_info.value.http_status == 503
