"""
Tests for the destination URL builders.
"""

import pytest

from voicepilot.ai.intent.destinations import (
    GMAIL_BASE_URL,
    GMAIL_COMPOSE_URL,
    GMAIL_INBOX_URL,
    MAKEMYTRIP_LISTING_URL,
    VideoSearchDescriptor,
    build_amazon_url,
    build_flipkart_url,
    build_gmail_url,
    build_google_url,
    build_makemytrip_url,
    build_music_url,
    build_phone_url,
    build_whatsapp_url,
    destination_url,
    encode_component,
    resolve_direct_video,
)
from voicepilot.ai.intent.schemas import GmailIntent, MusicPlatform, PhoneIntent, TravelIntent


class TestDirectVideo:
    """Tests for direct video resolution."""

    @pytest.mark.asyncio
    async def test_known_song_gives_watch_url(self):
        destination = await resolve_direct_video("Despacito")

        assert isinstance(destination, str)
        assert "watch?v=kJQP7kiw5Fk" in destination
        assert "autoplay=1" in destination

    @pytest.mark.asyncio
    async def test_unknown_song_gives_search_descriptor(self):
        destination = await resolve_direct_video("some unknown tune xyz")

        assert isinstance(destination, VideoSearchDescriptor)
        assert destination.needs_auto_click is True
        assert destination.encoded_query == "some%20unknown%20tune%20xyz"
        assert destination_url(destination).startswith(
            "https://www.youtube.com/results?search_query=some%20unknown%20tune%20xyz"
        )


class TestSearchUrls:
    """Tests for shopping, search and music search URLs."""

    def test_encode_component(self):
        assert encode_component("rock & roll") == "rock%20%26%20roll"

    def test_amazon(self):
        assert build_amazon_url("iphone 15") == "https://www.amazon.com/s?k=iphone%2015&ref=nb_sb_noss"

    def test_flipkart(self):
        assert build_flipkart_url("laptops") == "https://www.flipkart.com/search?q=laptops&sort=relevance"

    def test_google(self):
        assert build_google_url("weather").startswith("https://www.google.com/search?q=weather")

    def test_spotify(self):
        assert build_music_url("lofi", platform=MusicPlatform.SPOTIFY) == "https://open.spotify.com/search/lofi"


class TestMakeMyTrip:
    """Only the parameters the intent carries end up in the URL."""

    def test_from_and_to(self):
        intent = TravelIntent(original_text="", from_city="Delhi", to_city="Mumbai")

        assert build_makemytrip_url(intent) == "https://www.makemytrip.com/flight/search?from=Delhi&to=Mumbai"

    def test_indigo_only(self):
        intent = TravelIntent(original_text="", flight_type="indigo")

        assert build_makemytrip_url(intent) == "https://www.makemytrip.com/flight/search?airline=indigo"

    def test_nothing_gives_listing_page(self):
        assert build_makemytrip_url(TravelIntent(original_text="")) == MAKEMYTRIP_LISTING_URL


class TestCommunicationUrls:
    """Tests for Gmail, WhatsApp and tel: links."""

    def test_gmail_compose(self):
        intent = GmailIntent(original_text="", action="compose", recipient="bob@example.com", subject="Hi")

        url = build_gmail_url(intent, body="Hello")

        assert url == GMAIL_BASE_URL + "?to=bob%40example.com&subject=Hi&body=Hello#compose"

    def test_gmail_compose_without_recipient(self):
        intent = GmailIntent(original_text="", action="compose", subject="Hi")

        assert build_gmail_url(intent) == GMAIL_COMPOSE_URL
        assert build_gmail_url(intent).endswith("/#compose")

    def test_gmail_open(self):
        assert build_gmail_url(GmailIntent(original_text="")) == GMAIL_INBOX_URL

    def test_whatsapp(self):
        assert build_whatsapp_url() == "https://web.whatsapp.com/"

    def test_phone_number(self):
        intent = PhoneIntent(original_text="", target="555", is_number=True, number="5551234567")

        assert build_phone_url(intent) == "tel:5551234567"

    def test_phone_contact(self):
        intent = PhoneIntent(original_text="", target="mom", contact_name="mom")

        assert build_phone_url(intent) is None
