"""Tests for slug reconciliation"""

import logging

import pytest

from lib.errors import PostSaveError
from services.slug_reconciler import strip_uniqueness_suffix

from conftest import EXISTING_POST, FakeSlugGenerator


class TestStripUniquenessSuffix:
    def test_numeric_suffix_is_removed(self):
        assert strip_uniqueness_suffix("my-post-2") == "my-post"
        assert strip_uniqueness_suffix("my-post-12") == "my-post"

    @pytest.mark.parametrize("slug", ["my-post", "my-post-0", "my-post-2a", "my-post-", "post"])
    def test_non_counters_are_kept(self, slug):
        assert strip_uniqueness_suffix(slug) is None

    def test_single_number(self):
        assert strip_uniqueness_suffix("2") == ""


class TestNoOps:
    @pytest.mark.parametrize("candidate", ["old-title", "  old-title  ", "", "   ", None])
    async def test_unchanged_or_empty_candidate_makes_no_request(self, make_menu, slug_generator, posts_api, candidate):
        menu = make_menu(EXISTING_POST)

        assert await menu.update_slug(candidate) is False

        assert slug_generator.calls == []
        assert posts_api.saves == []
        assert menu.post.slug == "old-title"

    async def test_empty_candidate_on_post_without_slug(self, make_menu, slug_generator):
        menu = make_menu()
        assert await menu.update_slug("") is False
        assert slug_generator.calls == []

    async def test_server_returning_current_slug_aborts(self, make_menu, posts_api):
        generator = FakeSlugGenerator({"Old Title!": "old-title"})
        menu = make_menu(EXISTING_POST, generator=generator)

        assert await menu.update_slug("Old Title!") is False

        assert generator.calls == ["Old Title!"]
        assert menu.post.slug == "old-title"
        assert posts_api.saves == []

    async def test_uniqueness_suffix_on_current_slug_is_collapsed(self, make_menu, posts_api, notifications):
        generator = FakeSlugGenerator({"my-post": "my-post-2", "My Post": "my-post-2"})
        menu = make_menu({**EXISTING_POST, "slug": "my-post"}, generator=generator)

        # the user's text re-derives the slug the post already has
        assert await menu.update_slug("My Post") is False

        assert menu.post.slug == "my-post"
        assert menu.title_watcher.active is False
        assert posts_api.saves == []
        assert notifications.notifications == []

    async def test_user_explicitly_asking_for_the_suffixed_slug_gets_it(self, make_menu, posts_api):
        generator = FakeSlugGenerator({"my-post-2": "my-post-2"})
        menu = make_menu({**EXISTING_POST, "slug": "my-post"}, generator=generator)

        assert await menu.update_slug("my-post-2") is True

        assert menu.post.slug == "my-post-2"
        assert len(posts_api.saves) == 1

    async def test_suffix_of_a_different_base_is_committed(self, make_menu):
        generator = FakeSlugGenerator({"Other Post": "other-post-2"})
        menu = make_menu({**EXISTING_POST, "slug": "my-post"}, generator=generator)

        assert await menu.update_slug("Other Post") is True
        assert menu.post.slug == "other-post-2"


class TestCommit:
    async def test_rename_existing_post_saves_once(self, make_menu, slug_generator, posts_api, notifications):
        menu = make_menu(EXISTING_POST)

        assert await menu.update_slug("new-title") is True

        assert slug_generator.calls == ["new-title"]
        assert menu.post.slug == "new-title"
        assert not menu.title_watcher.active
        assert len(posts_api.saves) == 1
        assert posts_api.saves[0].method == "PUT"
        assert notifications.successes == [
            "Permalink successfully changed to <strong>new-title</strong>."
        ]

    async def test_new_post_commits_without_saving(self, make_menu, posts_api, notifications):
        menu = make_menu()
        menu.post.title = "Old Title"
        assert menu.title_watcher.active

        assert await menu.update_slug("new-title") is True

        assert menu.post.slug == "new-title"
        assert not menu.title_watcher.active
        assert posts_api.saves == []
        assert notifications.notifications == []
        assert menu.post.changed_attributes()["slug"] == ("", "new-title")

    async def test_second_identical_call_is_a_no_op(self, make_menu, slug_generator, posts_api):
        menu = make_menu(EXISTING_POST)

        assert await menu.update_slug("new-title") is True
        assert await menu.update_slug("new-title") is False

        assert slug_generator.calls == ["new-title"]
        assert len(posts_api.saves) == 1

    async def test_canonical_slug_replaces_typed_text(self, make_menu):
        menu = make_menu(EXISTING_POST)

        assert await menu.update_slug("  Brand New Title  ") is True
        assert menu.post.slug == "brand-new-title"
        assert menu.slug_value == "brand-new-title"

    async def test_commit_is_logged(self, make_menu, caplog):
        menu = make_menu(EXISTING_POST)

        with caplog.at_level(logging.INFO, logger="slug_reconciliation"):
            await menu.update_slug("new-title")

        assert any('"outcome": "persisted"' in record.message for record in caplog.records)


class TestFailures:
    async def test_save_failure_keeps_the_new_slug(self, make_menu, posts_api, notifications):
        posts_api.fail_with(422, {"detail": ["Slug is invalid.", "Post is locked."]})
        menu = make_menu(EXISTING_POST)

        with pytest.raises(PostSaveError):
            await menu.update_slug("new-title")

        assert menu.post.slug == "new-title"
        assert notifications.errors == ["Slug is invalid.", "Post is locked."]
        assert notifications.successes == []

    async def test_slug_endpoint_failure_is_reported(self, make_menu, failing_slug_generator, posts_api, notifications):
        menu = make_menu(EXISTING_POST, generator=failing_slug_generator)

        assert await menu.update_slug("new-title") is False

        assert menu.post.slug == "old-title"
        assert posts_api.saves == []
        assert notifications.errors == ["Unable to generate a slug for 'x'"]

    async def test_result_arriving_after_teardown_is_discarded(self, make_menu, posts_api, notifications):
        menu = make_menu(EXISTING_POST)

        class ClosingGenerator(FakeSlugGenerator):
            async def generate_slug(self, text):
                menu.destroy()
                return await super().generate_slug(text)

        menu.slug_reconciler.slug_generator = ClosingGenerator()

        assert await menu.update_slug("new-title") is False

        assert menu.post.slug == "old-title"
        assert posts_api.saves == []
        assert notifications.notifications == []
