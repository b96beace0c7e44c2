import json
import unittest

import httpx

from src.automerge.report import CommitState
from src.automerge.review import GitHubReviewSurface

API = "https://api.github.test"


class RecordingHandler:
    def __init__(self, routes):
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        route = self.routes.get(key)
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"})
        return route(request) if callable(route) else route

    def seen(self):
        return [(r.method, r.url.path) for r in self.requests]


def make_surface(routes):
    handler = RecordingHandler(routes)
    surface = GitHubReviewSurface(
        "JuliaRegistries/General",
        "token-123",
        whoami="automerge-bot",
        api_url=API,
        transport=httpx.MockTransport(handler),
    )
    return surface, handler


class TestStatuses(unittest.TestCase):
    def test_post_status_payload(self):
        surface, handler = make_surface(
            {("POST", "/repos/JuliaRegistries/General/statuses/abc"): httpx.Response(201, json={})}
        )
        with surface:
            surface.post_status("abc", CommitState.PENDING, "New package. Pending.")

        request = handler.requests[0]
        self.assertEqual(request.headers["Authorization"], "Bearer token-123")
        self.assertEqual(
            json.loads(request.content),
            {"state": "pending", "context": "automerge/decision", "description": "New package. Pending."},
        )

    def test_long_descriptions_are_truncated(self):
        surface, handler = make_surface(
            {("POST", "/repos/JuliaRegistries/General/statuses/abc"): httpx.Response(201, json={})}
        )
        surface.post_status("abc", CommitState.SUCCESS, "x" * 500)
        self.assertEqual(len(json.loads(handler.requests[0].content)["description"]), 140)

    def test_http_errors_raise(self):
        surface, _handler = make_surface(
            {("POST", "/repos/JuliaRegistries/General/statuses/abc"): httpx.Response(502, json={})}
        )
        with self.assertRaises(httpx.HTTPStatusError):
            surface.post_status("abc", CommitState.FAILURE, "New package. Failed.")


class TestCommentUpsert(unittest.TestCase):
    comments_path = "/repos/JuliaRegistries/General/issues/7/comments"

    def test_creates_comment_when_none_exists(self):
        surface, handler = make_surface(
            {
                ("GET", self.comments_path): httpx.Response(
                    200, json=[{"id": 1, "user": {"login": "someone"}, "body": "hi"}]
                ),
                ("POST", self.comments_path): httpx.Response(201, json={"id": 2}),
            }
        )
        surface.update_comment(7, "report")
        self.assertEqual(handler.seen()[-1], ("POST", self.comments_path))
        self.assertEqual(json.loads(handler.requests[-1].content), {"body": "report"})

    def test_updates_own_comment(self):
        surface, handler = make_surface(
            {
                ("GET", self.comments_path): httpx.Response(
                    200, json=[{"id": 99, "user": {"login": "automerge-bot"}, "body": "old"}]
                ),
                ("PATCH", "/repos/JuliaRegistries/General/issues/comments/99"): httpx.Response(200, json={}),
            }
        )
        surface.update_comment(7, "new")
        self.assertEqual(handler.seen()[-1], ("PATCH", "/repos/JuliaRegistries/General/issues/comments/99"))

    def test_identical_body_is_not_rewritten(self):
        surface, handler = make_surface(
            {
                ("GET", self.comments_path): httpx.Response(
                    200, json=[{"id": 99, "user": {"login": "automerge-bot"}, "body": "same"}]
                ),
            }
        )
        surface.update_comment(7, "same")
        surface.update_comment(7, "same")
        self.assertEqual([m for m, _p in handler.seen()], ["GET", "GET"])


class TestPullRequestQueries(unittest.TestCase):
    def test_changed_files_follows_pagination(self):
        files_path = "/repos/JuliaRegistries/General/pulls/7/files"

        def files(request: httpx.Request) -> httpx.Response:
            if request.url.params.get("page") == "2":
                return httpx.Response(200, json=[{"filename": "F/Foobar/Package.toml"}])
            return httpx.Response(
                200,
                json=[{"filename": "Registry.toml"}],
                headers={"Link": f'<{API}{files_path}?page=2>; rel="next"'},
            )

        surface, handler = make_surface({("GET", files_path): files})
        self.assertEqual(surface.changed_files(7), ["Registry.toml", "F/Foobar/Package.toml"])
        self.assertEqual(len(handler.requests), 2)

    def test_get_pull_request(self):
        surface, _handler = make_surface(
            {("GET", "/repos/JuliaRegistries/General/pulls/7"): httpx.Response(200, json={"number": 7})}
        )
        self.assertEqual(surface.get_pull_request(7), {"number": 7})


if __name__ == "__main__":
    unittest.main()
