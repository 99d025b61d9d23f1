"""Tests for the Movie record contract."""

from __future__ import annotations

from datetime import datetime, timezone

from greenlight.contracts.movie import Movie


def test_defaults_are_unassigned():
    movie = Movie()
    assert movie.id == 0
    assert movie.created_at is None
    assert movie.genres is None
    assert movie.version == 0


def test_created_at_never_serialized():
    movie = Movie(id=1, created_at=datetime.now(timezone.utc), title="Moana", version=1)
    assert "created_at" not in movie.model_dump()
    assert "created_at" not in movie.model_dump_json()
    assert "created_at" not in movie.to_public_dict()


def test_public_dict_full(movie: Movie):
    movie.id = 3
    movie.version = 2
    assert movie.to_public_dict() == {
        "id": 3,
        "title": "Moana",
        "year": 2016,
        "runtime": 107,
        "genres": ["animation", "adventure"],
        "version": 2,
    }


def test_public_dict_omits_empty_optional_fields():
    movie = Movie(id=5, title="Untitled", version=1)
    assert movie.to_public_dict() == {"id": 5, "title": "Untitled", "version": 1}


def test_model_is_mutable(movie: Movie):
    movie.version = 4
    assert movie.version == 4
