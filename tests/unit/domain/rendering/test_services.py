"""
Unit tests for RenderDecisionEngine and rendering value objects.
"""

from pathlib import Path
from unittest.mock import Mock

import pytest

from pastebox.domain.errors import ClassificationError, ObjectNotFoundError
from pastebox.domain.object_storage.services import ObjectStore
from pastebox.domain.rendering.classifier import IContentClassifier
from pastebox.domain.rendering.services import RenderDecisionEngine
from pastebox.domain.rendering.value_objects import (
    ClassificationFailedPlan,
    ContentType,
    HighlightedTextPlan,
    MemberEntry,
    MultiIndexPlan,
    NotFoundPlan,
    RawBytesPlan,
    top_level_type,
)


@pytest.fixture
def store():
    store = Mock(spec=ObjectStore)
    store.exists.return_value = True
    store.is_multi.return_value = False
    store.path_for.side_effect = lambda name: Path("/srv/upload") / name
    return store


@pytest.fixture
def classifier():
    return Mock(spec=IContentClassifier)


@pytest.fixture
def engine(store, classifier):
    return RenderDecisionEngine(store, classifier)


class TestContentType:
    @pytest.mark.parametrize(
        "mimetype,parent,expected",
        [
            ("text/plain", None, True),
            ("text/x-python", "text/plain", True),
            ("application/json", "text/plain", True),
            ("image/png", "application/octet-stream", False),
            ("application/octet-stream", None, False),
        ],
    )
    def test_is_text(self, mimetype, parent, expected):
        assert ContentType(mimetype, parent).is_text is expected

    def test_top_level_type(self):
        assert top_level_type("Text/Plain; charset=utf-8") == "text"
        assert top_level_type(None) == ""


class TestRenderDecisionEngine:
    def test_missing_name_is_not_found(self, engine, store, classifier):
        store.exists.return_value = False

        plan = engine.decide("nope.txt")

        assert plan == NotFoundPlan(name="nope.txt")
        classifier.classify.assert_not_called()

    def test_multi_lists_members_with_existence(self, engine, store, classifier):
        store.is_multi.return_value = True
        store.list_members.return_value = ["aaa.txt", "bbb.png"]
        store.exists.side_effect = lambda name: name != "bbb.png"

        plan = engine.decide("m-xyz")

        assert isinstance(plan, MultiIndexPlan)
        assert plan.members == (
            MemberEntry(name="aaa.txt", exists=True),
            MemberEntry(name="bbb.png", exists=False),
        )
        classifier.classify.assert_not_called()

    def test_multi_removed_while_reading_is_not_found(self, engine, store):
        store.is_multi.return_value = True
        store.list_members.side_effect = ObjectNotFoundError("gone")

        assert isinstance(engine.decide("m-xyz"), NotFoundPlan)

    def test_text_is_highlighted(self, engine, classifier):
        classifier.classify.return_value = ContentType("text/plain")

        plan = engine.decide("abc.txt")

        assert isinstance(plan, HighlightedTextPlan)
        assert plan.path == Path("/srv/upload/abc.txt")

    def test_text_parent_is_highlighted(self, engine, classifier):
        classifier.classify.return_value = ContentType("application/json", "text/plain")
        assert isinstance(engine.decide("abc.json"), HighlightedTextPlan)

    def test_binary_is_raw(self, engine, classifier):
        classifier.classify.return_value = ContentType("image/png", "application/octet-stream")

        plan = engine.decide("abc.png")

        assert isinstance(plan, RawBytesPlan)
        assert plan.content_type.mimetype == "image/png"

    def test_classification_failure_reports_error(self, tmp_path, store, classifier, engine):
        (tmp_path / "abc.txt").write_bytes(b"hello")
        store.path_for.side_effect = lambda name: tmp_path / name
        classifier.classify.side_effect = ClassificationError("permission denied")

        plan = engine.decide("abc.txt")

        assert plan == ClassificationFailedPlan(name="abc.txt", message="permission denied")

    def test_classification_failure_after_expiry_is_not_found(
        self, tmp_path, store, classifier, engine
    ):
        store.path_for.side_effect = lambda name: tmp_path / name
        classifier.classify.side_effect = ClassificationError("No such file")

        assert isinstance(engine.decide("abc.txt"), NotFoundPlan)
