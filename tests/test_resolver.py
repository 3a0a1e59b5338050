"""Tests for encoding selection and the yt-dlp backed resolver."""

from __future__ import annotations

import pytest
from yt_dlp.utils import DownloadError

from app.core.errors import Unacceptable
from app.features.ingestion.resolver import VideoSourceResolver, choose_format

PREFERRED = ("299", "298")
FALLBACK = ("136",)


@pytest.mark.parametrize(
    "available,expected",
    [
        (["18", "136", "298", "299"], "299"),
        (["298", "136"], "298"),
        (["136", "22"], "136"),
        (["136", "299"], "299"),
    ],
)
def test_choose_format_preference_order(available, expected) -> None:
    assert choose_format(available, preferred=PREFERRED, fallback=FALLBACK) == expected


@pytest.mark.parametrize("available", [[], ["18", "22", "137"], ["140"]])
def test_choose_format_without_known_encoding_is_unacceptable(available) -> None:
    with pytest.raises(Unacceptable):
        choose_format(available, preferred=PREFERRED, fallback=FALLBACK)


def test_choose_format_is_deterministic() -> None:
    available = ["136", "298", "299"]
    results = {choose_format(list(reversed(available)), preferred=PREFERRED, fallback=FALLBACK) for _ in range(5)}
    results.add(choose_format(available, preferred=PREFERRED, fallback=FALLBACK))
    assert results == {"299"}


def _resolver(info=None, error=None) -> VideoSourceResolver:
    def extract(url):
        if error is not None:
            raise error
        return info

    return VideoSourceResolver(preferred=PREFERRED, fallback=FALLBACK, extract_info=extract)


def test_resolve_picks_format_from_metadata() -> None:
    info = {"title": "ace", "formats": [{"format_id": "18"}, {"format_id": "136"}, {"format_id": None}]}
    source = _resolver(info).resolve("https://youtu.be/abc")
    assert source.format_id == "136"
    assert source.available_formats == ("18", "136")
    assert source.title == "ace"


def test_resolve_host_rejection_is_unacceptable() -> None:
    with pytest.raises(Unacceptable):
        _resolver(error=DownloadError("Private video")).resolve("https://youtu.be/private")


def test_resolve_empty_metadata_is_unacceptable() -> None:
    with pytest.raises(Unacceptable):
        _resolver(info=None).resolve("https://youtu.be/none")
    with pytest.raises(Unacceptable):
        _resolver(info={"formats": [{"format_id": "18"}]}).resolve("https://youtu.be/lowq")
