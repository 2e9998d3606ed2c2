"""
End-to-end tests for the async client and the browse board, talking to the
app in-process through httpx.ASGITransport.
"""

import asyncio
import uuid

import httpx
import pytest

from civicpulse.client import CivicPulseClient, IssueBoard, VoteState
from civicpulse.core.exceptions import AlreadyVotedError, BackendError, NotFoundError, UnauthenticatedError
from civicpulse.models.issues.issue import IssueCategory, IssueStatus
from civicpulse.schemas.issues.issue_schemas import IssueCreate, IssueUpdate
from tests.conftest import PASSWORD, make_issue


def make_client(app):
    return CivicPulseClient(base_url="http://test/api/v1", transport=httpx.ASGITransport(app=app))


async def signed_in(app, email, name=None):
    api = make_client(app)
    await api.register(email, PASSWORD, name)
    await api.login(email, PASSWORD)
    return api


def report(title, category=IssueCategory.ROAD, **extra):
    return IssueCreate(
        title=title,
        description="Reported from the neighbourhood app for follow-up.",
        category=category,
        location=extra.pop("location", "Somewhere in town"),
        **extra,
    )


class TestApiClient:
    def test_report_and_vote_flow(self, app):
        async def flow():
            async with await signed_in(app, "alice@example.com", "Alice") as alice, \
                    await signed_in(app, "bob@example.com", "Bob") as bob:
                issue = await alice.create_issue(report("Pothole near the bakery"))
                assert issue.status == IssueStatus.PENDING

                assert not await bob.has_voted(issue.id)
                voted = await bob.cast_vote(issue.id)
                assert voted.votes == 1
                assert await bob.has_voted(issue.id)
                with pytest.raises(AlreadyVotedError):
                    await bob.cast_vote(issue.id)
                return [i.id for i in await bob.voted_issues()], issue.id

        voted_ids, issue_id = asyncio.run(flow())
        assert voted_ids == [issue_id]

    def test_create_with_image_uploads_first(self, app, storage):
        async def flow():
            async with await signed_in(app, "alice@example.com") as alice:
                return await alice.create_issue(report("Broken bench by the pond"), image=b"gif89a", filename="bench.gif",
                                                content_type="image/gif")

        issue = asyncio.run(flow())
        assert issue.image_url.endswith("bench.gif")
        assert len(storage.uploads) == 1

    def test_update_and_delete(self, app):
        async def flow():
            async with await signed_in(app, "alice@example.com") as alice:
                issue = await alice.create_issue(report("Loose manhole cover"))
                updated = await alice.update_issue(issue.id, IssueUpdate(location="Corner of 5th and Main"))
                await alice.delete_issue(issue.id)
                with pytest.raises(NotFoundError):
                    await alice.get_issue(issue.id)
                return updated

        assert asyncio.run(flow()).location == "Corner of 5th and Main"

    def test_signed_out_mutations_fail_before_request(self, app):
        async def flow():
            async with make_client(app) as anonymous:
                with pytest.raises(UnauthenticatedError):
                    await anonymous.create_issue(report("Anonymous report"))
                return await anonymous.has_voted(uuid.uuid4())

        assert asyncio.run(flow()) is False

    def test_profile_round_trip(self, app):
        async def flow():
            async with await signed_in(app, "alice@example.com", "Alice") as alice:
                me = await alice.me()
                await alice.update_profile(bio="Lives on Elm Street")
                return await alice.get_profile(me.id)

        assert asyncio.run(flow()).bio == "Lives on Elm Street"

    def test_short_location_query_skips_request(self, app):
        async def flow():
            async with make_client(app) as anonymous:
                return await anonymous.search_locations("ab")

        assert asyncio.run(flow()) == []

    def test_transport_failure_is_backend_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async def flow():
            async with CivicPulseClient(base_url="http://test/api/v1", transport=httpx.MockTransport(handler)) as api:
                await api.list_issues()

        with pytest.raises(BackendError):
            asyncio.run(flow())

    def test_full_listing_keeps_shifted_issue_once(self):
        issues = [make_issue(title=f"Issue {n}").model_dump(mode="json") for n in range(3)]
        # An issue created between the two fetches pushes issue 1 onto page two.
        pages = {"1": issues[:2], "2": issues[1:]}

        def handler(request):
            page = request.url.params["page"]
            return httpx.Response(
                200, json={"issues": pages[page], "total": 4, "page": int(page), "per_page": 2, "total_pages": 2}
            )

        async def flow():
            async with CivicPulseClient(base_url="http://test/api/v1", transport=httpx.MockTransport(handler)) as api:
                return await api.list_issues()

        listed = asyncio.run(flow())
        assert [str(issue.id) for issue in listed] == [issue["id"] for issue in issues]


class TestBoard:
    def _seed(self, api):
        return [
            report("Pothole on Elm Street", IssueCategory.ROAD, latitude=40.71, longitude=-74.0),
            report("Leaking water main", IssueCategory.WATER, latitude=40.75, longitude=-73.98),
            report("Overflowing bins", IssueCategory.SANITATION),
        ]

    def test_browse_filter_and_paginate(self, app):
        async def flow():
            async with await signed_in(app, "alice@example.com") as alice:
                for fields in self._seed(alice):
                    await alice.create_issue(fields)
                board = IssueBoard(alice, page_size=2)
                await board.refresh()

                first = board.view()
                board.go_to_page(5)
                clamped = board.filters.page
                board.set_search("water")
                searched = board.view()
                return first, clamped, searched, board

        first, clamped, searched, board = asyncio.run(flow())
        assert first.total == 3 and first.total_pages == 2
        assert clamped == 2
        assert [issue.title for issue in searched.items] == ["Leaking water main"]
        assert searched.page == 1

    def test_category_selection_is_mirrored_on_map(self, app):
        async def flow():
            async with await signed_in(app, "alice@example.com") as alice:
                for fields in self._seed(alice):
                    await alice.create_issue(fields)
                board = IssueBoard(alice)
                await board.refresh()

                board.select_category(IssueCategory.WATER)
                mirrored = set(board.map.categories)
                board.select_category(None)
                restored = set(board.map.categories)

                for category in (IssueCategory.ROAD, IssueCategory.WATER, IssueCategory.ELECTRICITY,
                                 IssueCategory.OTHER):
                    board.map.toggle_category(category, False)
                from_map = board.filters.category
                return mirrored, restored, from_map, [i.title for i in board.filtered()]

        mirrored, restored, from_map, titles = asyncio.run(flow())
        assert mirrored == {IssueCategory.WATER}
        assert restored == set(IssueCategory)
        assert from_map == IssueCategory.SANITATION
        assert titles == ["Overflowing bins"]

    def test_vote_updates_collection(self, app):
        async def flow():
            async with await signed_in(app, "alice@example.com") as alice, \
                    await signed_in(app, "bob@example.com") as bob:
                issue = await alice.create_issue(report("Pothole on Elm Street"))
                board = IssueBoard(bob)
                await board.refresh()
                await board.load_vote_states()

                entry = await board.vote(issue.id)
                with pytest.raises(AlreadyVotedError):
                    await board.vote(issue.id)
                return entry, board.issues[0].votes, board.votes.entry(issue.id)

        entry, votes, after = asyncio.run(flow())
        assert entry.votes == 1
        assert votes == 1
        assert after.state == VoteState.COMMITTED

    def test_refresh_takes_latest_vote_counts(self, app):
        async def flow():
            async with await signed_in(app, "alice@example.com") as alice, \
                    await signed_in(app, "bob@example.com") as bob:
                issue = await alice.create_issue(report("Pothole on Elm Street"))
                board = IssueBoard(alice)
                await board.refresh()
                before = board.votes.entry(issue.id).votes
                await bob.cast_vote(issue.id)
                await board.refresh()
                return before, board.votes.entry(issue.id)

        before, after = asyncio.run(flow())
        assert before == 0
        assert after.votes == 1
        assert after.state == VoteState.IDLE

    def test_delete_reclamps_page(self, app):
        async def flow():
            async with await signed_in(app, "alice@example.com") as alice:
                created = [await alice.create_issue(fields) for fields in self._seed(alice)]
                board = IssueBoard(alice, page_size=2)
                await board.refresh()
                board.go_to_page(2)
                await board.delete(created[0].id)
                return board.filters.page, len(board.issues)

        assert asyncio.run(flow()) == (1, 2)

    def test_reset_filters(self, app):
        async def flow():
            async with await signed_in(app, "alice@example.com") as alice:
                board = IssueBoard(alice)
                await board.refresh()
                board.select_category(IssueCategory.ROAD)
                board.set_status(IssueStatus.RESOLVED)
                board.reset_filters()
                return board

        board = asyncio.run(flow())
        assert board.filters.criteria.is_default
        assert board.map.categories == set(IssueCategory)

    def test_edit_controls_follow_owner_and_status(self, app):
        async def flow():
            async with await signed_in(app, "alice@example.com") as alice, \
                    await signed_in(app, "bob@example.com") as bob:
                issue = await alice.create_issue(report("Pothole on Elm Street"))
                owner_board, other_board = IssueBoard(alice), IssueBoard(bob)
                for board in (owner_board, other_board):
                    await board.refresh()
                    await board.load_viewer()
                resolved = issue.model_copy(update={"status": IssueStatus.RESOLVED})
                return (
                    owner_board.can_modify(owner_board.issues[0]),
                    other_board.can_modify(other_board.issues[0]),
                    owner_board.can_modify(resolved),
                )

        assert asyncio.run(flow()) == (True, False, False)
