"""Unit tests for MongoDB document models."""

from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId
from pydantic import ValidationError

from schemas.models.base import MongoBaseModel, PyObjectId
from schemas.models.click import ClickDoc, ClickMeta
from schemas.models.url import ShortLinkDoc


# ── Helpers ───────────────────────────────────────────────────────────────────

def now():
    return datetime.now(timezone.utc)


def oid():
    return ObjectId()


# ── PyObjectId ────────────────────────────────────────────────────────────────

class TestPyObjectId:
    def test_accepts_objectid_instance(self):
        o = oid()
        assert PyObjectId._validate(o) == o

    def test_accepts_valid_string(self):
        s = str(oid())
        result = PyObjectId._validate(s)
        assert isinstance(result, ObjectId)
        assert str(result) == s

    def test_rejects_invalid_string(self):
        with pytest.raises(ValueError):
            PyObjectId._validate("not-an-objectid")

    def test_rejects_none(self):
        with pytest.raises((ValueError, TypeError)):
            PyObjectId._validate(None)


# ── MongoBaseModel ─────────────────────────────────────────────────────────────

class TestMongoBaseModel:
    def test_from_mongo_returns_none_for_none(self):
        assert MongoBaseModel.from_mongo(None) is None

    def test_to_mongo_drops_none_id(self):
        assert "_id" not in MongoBaseModel().to_mongo()

    def test_to_mongo_keeps_set_id(self):
        o = oid()
        assert MongoBaseModel.model_validate({"_id": o}).to_mongo()["_id"] == o


# ── ShortLinkDoc ──────────────────────────────────────────────────────────────

class TestShortLinkDoc:
    def _make(self, **overrides):
        base = {
            "alias": "abc1234",
            "long_url": "https://example.com",
            "owner_id": oid(),
            "created_at": now(),
        }
        base.update(overrides)
        return ShortLinkDoc(**base)

    def test_defaults(self):
        doc = self._make()
        assert doc.is_active is True
        assert doc.total_clicks == 0
        assert doc.code_type == "generated"
        assert doc.expires_at is None
        assert doc.last_click is None

    def test_owner_id_from_string(self):
        o = oid()
        assert self._make(owner_id=str(o)).owner_id == o

    def test_owner_required(self):
        with pytest.raises(ValidationError):
            ShortLinkDoc(alias="x", long_url="https://e.com", created_at=now())

    def test_rejects_unknown_code_type(self):
        with pytest.raises(ValidationError):
            self._make(code_type="emoji")

    def test_round_trip_keeps_bson_types(self):
        doc = self._make(_id=oid())
        raw = doc.to_mongo()
        assert isinstance(raw["owner_id"], ObjectId)
        assert isinstance(raw["created_at"], datetime)
        assert ShortLinkDoc.from_mongo(raw) == doc

    @pytest.mark.parametrize(
        "offset, expected",
        [(None, False), (timedelta(days=1), False), (timedelta(seconds=-1), True)],
        ids=["no_expiry", "future", "past"],
    )
    def test_is_expired(self, offset, expected):
        t = now()
        expires_at = t + offset if offset is not None else None
        assert self._make(expires_at=expires_at).is_expired(t) is expected

    def test_is_expired_naive_stored_value(self):
        t = datetime(2024, 1, 2, tzinfo=timezone.utc)
        doc = self._make(expires_at=datetime(2024, 1, 1))
        assert doc.is_expired(t) is True


# ── ClickDoc ──────────────────────────────────────────────────────────────────

class TestClickDoc:
    def _meta(self):
        return ClickMeta(url_id=oid(), short_code="abc1234", owner_id=oid())

    def test_defaults(self):
        click = ClickDoc(clicked_at=now(), meta=self._meta())
        assert click.country == "Unknown"
        assert click.city == "Unknown"
        assert click.device_type == "unknown"
        assert click.browser == "unknown"
        assert click.os == "unknown"
        assert click.referrer is None
        assert click.ip_address == ""

    def test_meta_serialised_as_subdocument(self):
        meta = self._meta()
        raw = ClickDoc(clicked_at=now(), meta=meta).to_mongo()
        assert raw["meta"] == {
            "url_id": meta.url_id,
            "short_code": "abc1234",
            "owner_id": meta.owner_id,
        }
        assert "_id" not in raw

    def test_from_mongo(self):
        meta = self._meta()
        raw = {
            "_id": oid(),
            "clicked_at": now(),
            "meta": {"url_id": meta.url_id, "short_code": "x", "owner_id": meta.owner_id},
            "country": "Peru",
        }
        click = ClickDoc.from_mongo(raw)
        assert click.country == "Peru"
        assert click.meta.url_id == meta.url_id
