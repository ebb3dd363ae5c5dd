"""Unit tests for PATCH reconciliation (pure, no DB)."""
from datetime import datetime, timezone

import pytest

from app.core.errors import PayloadValidationError, UnsupportedTypeChangeError
from app.schemas.memory import MemoryUpdate
from app.services.patch import reconcile_patch

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)
ASSET = {"asset_key": "a.jpg", "asset_type": "image"}


def _plan(current_type, body):
    return reconcile_patch(current_type, MemoryUpdate.model_validate(body), editor="ed@example.com", now=NOW)


class TestPresence:
    def test_only_present_fields_are_staged(self):
        plan = _plan("quote", {"caption": "x"})
        assert plan.memory_values == {"caption": "x", "updated_at": NOW, "edited_by": "ed@example.com"}
        assert plan.assets is None

    def test_empty_string_clears_nullable_text(self):
        plan = _plan("image", {"location": ""})
        assert plan.memory_values["location"] is None

    def test_tags_normalized(self):
        assert _plan("quote", {"tags": "A, a ,B"}).memory_values["tags"] == "a,b"

    def test_empty_body_is_empty_plan(self):
        plan = _plan("quote", {})
        assert plan.is_empty
        assert plan.memory_values == {}

    def test_assets_only_still_bumps_editor(self):
        plan = _plan("image", {"assets": [ASSET]})
        assert plan.replaces_assets
        assert set(plan.memory_values) == {"updated_at", "edited_by"}

    def test_null_assets_means_empty_replacement(self):
        plan = _plan("quote", {"assets": None})
        assert plan.assets == []


class TestEffectiveType:
    def test_gallery_rejects_empty_assets(self):
        with pytest.raises(PayloadValidationError):
            _plan("gallery", {"assets": []})

    def test_image_rejects_empty_assets(self):
        with pytest.raises(PayloadValidationError):
            _plan("image", {"assets": []})

    def test_video_rejects_two_assets(self):
        with pytest.raises(PayloadValidationError):
            _plan("video", {"assets": [ASSET, ASSET]})

    def test_quote_rejects_assets(self):
        with pytest.raises(PayloadValidationError):
            _plan("quote", {"assets": [ASSET]})

    def test_validation_uses_new_type(self):
        with pytest.raises(PayloadValidationError):
            _plan("quote", {"type": "hybrid", "content": ""})
        plan = _plan("quote", {"type": "hybrid", "content": "now hybrid", "assets": []})
        assert plan.effective_type == "hybrid"
        assert plan.memory_values["type"] == "hybrid"

    def test_content_not_allowed_on_asset_types(self):
        with pytest.raises(PayloadValidationError):
            _plan("gallery", {"content": "words"})


class TestTypeTransitions:
    def test_quote_to_image_rejected(self):
        with pytest.raises(UnsupportedTypeChangeError):
            _plan("quote", {"type": "image"})

    def test_gallery_to_quote_rejected(self):
        with pytest.raises(UnsupportedTypeChangeError):
            _plan("gallery", {"type": "quote"})

    def test_same_type_allowed(self):
        plan = _plan("quote", {"type": "quote"})
        assert plan.memory_values["type"] == "quote"

    def test_same_asset_type_allowed(self):
        assert _plan("gallery", {"type": "gallery"}).effective_type == "gallery"

    def test_null_type_rejected(self):
        with pytest.raises(PayloadValidationError):
            _plan("quote", {"type": None})

    def test_null_memory_date_rejected(self):
        with pytest.raises(PayloadValidationError):
            _plan("quote", {"memory_date": None})
